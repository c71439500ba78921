"""Enumeration of customer-selectable delivery start times."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterator, Optional

from ...models.domain import DeliverySlot, OperatingMode, TimeRange, Weekday, WeeklySchedule
from .calendar import at_minute, format_minutes

SLOT_STEP_MINUTES = 30

logger = logging.getLogger(__name__)


def iter_candidates(period: TimeRange, lead_max_minutes: int, step_minutes: int = SLOT_STEP_MINUTES) -> Iterator[int]:
    """Minute-of-day candidates in ``[start, end - lead_max]`` stepping by ``step_minutes``.

    A non-positive step falls back to ``SLOT_STEP_MINUTES``.
    """

    if step_minutes <= 0:
        step_minutes = SLOT_STEP_MINUTES
    cutoff = period.end - max(0, lead_max_minutes)
    yield from range(period.start, cutoff + 1, step_minutes)


def format_remaining(delta_minutes: int) -> str:
    hours, minutes = divmod(max(0, delta_minutes), 60)
    if hours > 0:
        return f"{hours}h {minutes}min"
    return f"{minutes}min"


def list_slots(
    schedule: Optional[WeeklySchedule],
    target_date: date,
    lead_min_minutes: int,
    lead_max_minutes: int,
    now: datetime,
    *,
    step_minutes: int = SLOT_STEP_MINUTES,
) -> list[DeliverySlot]:
    """Ascending delivery slots for ``target_date``; may be empty.

    For today, a candidate survives only while ``candidate - lead_min`` is not before ``now``.
    Past dates never yield slots.
    """

    if schedule is None or schedule.mode == OperatingMode.MANUAL:
        return []
    today = now.date()
    if target_date < today:
        return []
    day = schedule.day_for(target_date)
    if day is None or not day.is_open:
        return []

    is_today = target_date == today
    lead_min = max(0, lead_min_minutes)
    weekday_label = Weekday(target_date.weekday()).short_label
    slots: list[DeliverySlot] = []

    for period in day.periods:
        for candidate in iter_candidates(period, lead_max_minutes, step_minutes):
            start_time = at_minute(target_date, candidate, now.tzinfo)
            hhmm = format_minutes(candidate)
            if not is_today:
                slots.append(
                    DeliverySlot(start_time=start_time, value=hhmm, display_label=hhmm, weekday_label=weekday_label)
                )
                continue

            remaining_seconds = (start_time - now).total_seconds()
            if remaining_seconds < lead_min * 60:
                continue
            slots.append(
                DeliverySlot(
                    start_time=start_time,
                    value=hhmm,
                    display_label=hhmm,
                    is_next_available=not slots,
                    remaining_label=format_remaining(int(remaining_seconds // 60)),
                )
            )

    logger.debug("Generated %d slots for %s (lead %d-%d)", len(slots), target_date, lead_min_minutes, lead_max_minutes)
    return slots
