"""Delivery fee resolution services."""

from .resolver import resolve_address, resolve_fee_and_window
from .service_area import is_city_served
from .zones import match_distance_tier, match_neighborhood_zone

__all__ = [
    "resolve_fee_and_window",
    "resolve_address",
    "is_city_served",
    "match_neighborhood_zone",
    "match_distance_tier",
]
