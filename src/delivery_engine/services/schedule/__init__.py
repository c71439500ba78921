"""Schedule calendar and delivery slot helpers."""

from .calendar import (
    estimate_delivery_window,
    is_open_at,
    next_transition,
    next_transition_label,
    parse_hhmm,
)
from .slots import list_slots

__all__ = [
    "is_open_at",
    "next_transition",
    "next_transition_label",
    "estimate_delivery_window",
    "parse_hhmm",
    "list_slots",
]
