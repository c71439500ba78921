"""Weekly recurring schedule evaluation: open state and next open/close transition."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Optional, Sequence

from ...models.domain import (
    DaySchedule,
    OperatingMode,
    ScheduleException,
    TimeRange,
    Transition,
    TransitionType,
    Weekday,
    WeeklySchedule,
)

LOOKAHEAD_DAYS = 7
MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

logger = logging.getLogger(__name__)


def parse_hhmm(value: Optional[str]) -> Optional[int]:
    """Return minutes since midnight for ``"HH:MM"`` or None when malformed/out of range."""

    if not value or not isinstance(value, str):
        return None
    match = _HHMM.match(value)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    hour, minute = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hour:02d}:{minute:02d}"


def at_minute(day: date, minutes: int, tz: tzinfo | None = None) -> datetime:
    hour, minute = divmod(minutes, 60)
    return datetime.combine(day, time(hour, minute), tzinfo=tz)


def minute_of_day(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def build_periods(raw_periods: Iterable[tuple[Optional[str], Optional[str]]]) -> tuple[TimeRange, ...]:
    """Turn ``(start, end)`` strings into sorted, non-overlapping ranges.

    Unparseable entries, empty ranges and ranges overlapping an earlier one are dropped.
    """

    parsed: list[TimeRange] = []
    for start_raw, end_raw in raw_periods:
        start = parse_hhmm(start_raw)
        end = parse_hhmm(end_raw)
        if start is None or end is None or start >= end:
            logger.debug("Ignoring malformed period %r-%r", start_raw, end_raw)
            continue
        parsed.append(TimeRange(start=start, end=end))

    periods: list[TimeRange] = []
    for period in sorted(parsed, key=lambda item: (item.start, item.end)):
        if periods and period.start < periods[-1].end:
            logger.debug("Ignoring period %s-%s overlapping %s-%s",
                         format_minutes(period.start), format_minutes(period.end),
                         format_minutes(periods[-1].start), format_minutes(periods[-1].end))
            continue
        periods.append(period)
    return tuple(periods)


def build_day_schedule(is_open: bool, raw_periods: Iterable[tuple[Optional[str], Optional[str]]]) -> DaySchedule:
    return DaySchedule(is_open=bool(is_open), periods=build_periods(raw_periods))


def build_weekly_schedule(
    days: dict[Weekday, DaySchedule],
    *,
    mode: OperatingMode = OperatingMode.AUTOMATIC,
    exceptions: Sequence[ScheduleException] = (),
) -> WeeklySchedule:
    return WeeklySchedule(days=dict(days), mode=mode, exceptions=tuple(exceptions))


def _usable_periods(day: Optional[DaySchedule]) -> tuple[TimeRange, ...]:
    if day is None or not day.is_open:
        return ()
    return day.periods


def _active_period(schedule: WeeklySchedule, instant: datetime) -> Optional[TimeRange]:
    if schedule.mode == OperatingMode.MANUAL:
        return None
    minute = minute_of_day(instant)
    for period in _usable_periods(schedule.day_for(instant.date())):
        if period.contains(minute):
            return period
    return None


def is_open_at(schedule: Optional[WeeklySchedule], instant: datetime) -> bool:
    """True when the instant falls in an active ``[start, end)`` period of its day."""

    if schedule is None:
        return False
    return _active_period(schedule, instant) is not None


def next_opening(
    schedule: WeeklySchedule,
    instant: datetime,
    *,
    lookahead_days: int = LOOKAHEAD_DAYS,
) -> Optional[datetime]:
    """First period start strictly after ``instant`` within the lookahead horizon."""

    if schedule.mode == OperatingMode.MANUAL:
        return None
    today = instant.date()
    minute = minute_of_day(instant)
    for period in _usable_periods(schedule.day_for(today)):
        if period.start > minute:
            return at_minute(today, period.start, instant.tzinfo)
    for offset in range(1, lookahead_days + 1):
        day = today + timedelta(days=offset)
        periods = _usable_periods(schedule.day_for(day))
        if periods:
            return at_minute(day, periods[0].start, instant.tzinfo)
    return None


def next_transition(
    schedule: Optional[WeeklySchedule],
    instant: datetime,
    *,
    lookahead_days: int = LOOKAHEAD_DAYS,
) -> Transition:
    if schedule is None:
        return Transition(type=TransitionType.CLOSED, at=None, label="Hours not configured")
    if schedule.mode == OperatingMode.MANUAL:
        return Transition(type=TransitionType.CLOSED, at=None, label="Temporarily closed")

    active = _active_period(schedule, instant)
    if active is not None:
        return Transition(
            type=TransitionType.CLOSE,
            at=at_minute(instant.date(), active.end, instant.tzinfo),
            label=f"Closes at {format_minutes(active.end)}",
        )

    opening = next_opening(schedule, instant, lookahead_days=lookahead_days)
    if opening is None:
        return Transition(type=TransitionType.CLOSED, at=None, label="Closed")

    hhmm = format_minutes(minute_of_day(opening))
    if opening.date() == instant.date():
        label = f"Opens at {hhmm}"
    else:
        weekday = Weekday(opening.weekday()).label
        label = f"Opens {weekday} {opening.strftime('%d/%m/%Y')} at {hhmm}"
    return Transition(type=TransitionType.OPEN, at=opening, label=label)


def next_transition_label(
    schedule: Optional[WeeklySchedule],
    instant: datetime,
    *,
    lookahead_days: int = LOOKAHEAD_DAYS,
) -> str:
    return next_transition(schedule, instant, lookahead_days=lookahead_days).label


def estimate_delivery_window(
    schedule: Optional[WeeklySchedule],
    now: datetime,
    lead_min_minutes: int,
    lead_max_minutes: int,
    *,
    lookahead_days: int = LOOKAHEAD_DAYS,
) -> str:
    """``"HH:MM-HH:MM"`` arrival window when open, else the next opening time."""

    if schedule is None:
        return "Unavailable"
    if is_open_at(schedule, now):
        earliest = now + timedelta(minutes=lead_min_minutes)
        latest = now + timedelta(minutes=lead_max_minutes)
        return f"{earliest:%H:%M}-{latest:%H:%M}"
    opening = next_opening(schedule, now, lookahead_days=lookahead_days)
    if opening is None:
        return "Unavailable"
    return f"{opening:%H:%M}"
