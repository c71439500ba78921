"""Domain models for merchant schedules, pricing policies and availability outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Mapping, Optional


class Weekday(IntEnum):
    """Day of week, 0 = Monday .. 6 = Sunday (``date.weekday()``)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def short_label(self) -> str:
        return self.name[:3].capitalize()


class OperatingMode(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"  # forced closed


class PricingMode(str, Enum):
    NONE = "none"
    FLAT = "flat"
    BY_NEIGHBORHOOD = "by_neighborhood"
    BY_DISTANCE = "by_distance"


class ReasonCode(str, Enum):
    CITY_NOT_SERVED = "CityNotServed"
    NO_ZONE_FOR_NEIGHBORHOOD = "NoZoneForNeighborhood"
    NO_ZONE_FOR_DISTANCE = "NoZoneForDistance"
    DEFAULT_FALLBACK_APPLIED = "DefaultFallbackApplied"
    CONFIG_MISSING = "ConfigMissing"
    OUT_OF_DELIVERY_RADIUS = "OutOfDeliveryRadius"
    BELOW_MINIMUM_ORDER = "BelowMinimumOrder"
    STORE_CLOSED = "StoreClosed"


class TransitionType(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    CLOSED = "closed"


@dataclass(slots=True, frozen=True)
class TimeRange:
    """Half-open ``[start, end)`` interval in minutes since midnight."""

    start: int
    end: int

    def contains(self, minute: int) -> bool:
        return self.start <= minute < self.end


@dataclass(slots=True, frozen=True)
class DaySchedule:
    is_open: bool
    periods: tuple[TimeRange, ...] = ()


@dataclass(slots=True, frozen=True)
class ScheduleException:
    """Calendar-date override of the weekly schedule (holidays, special events)."""

    date: date
    name: str
    is_open: bool
    periods: tuple[TimeRange, ...] = ()

    def as_day(self) -> DaySchedule:
        return DaySchedule(is_open=self.is_open, periods=self.periods)


@dataclass(slots=True, frozen=True)
class WeeklySchedule:
    days: Mapping[Weekday, DaySchedule]
    mode: OperatingMode = OperatingMode.AUTOMATIC
    exceptions: tuple[ScheduleException, ...] = ()

    def day_for(self, day: date) -> Optional[DaySchedule]:
        """Effective schedule for a calendar date, date exceptions first."""
        for exception in self.exceptions:
            if exception.date == day:
                return exception.as_day()
        return self.days.get(Weekday(day.weekday()))

    def exception_for(self, day: date) -> Optional[ScheduleException]:
        return next((exc for exc in self.exceptions if exc.date == day), None)


@dataclass(slots=True, frozen=True)
class ServiceAreaConfig:
    served_cities: frozenset[str] = frozenset()


@dataclass(slots=True, frozen=True)
class TariffZone:
    city: str
    neighborhood: str
    fee_amount: float
    lead_min_minutes: int
    lead_max_minutes: int
    active: bool = True


@dataclass(slots=True, frozen=True)
class DistanceTier:
    max_distance_km: float
    fee_amount: float
    lead_min_minutes: int
    lead_max_minutes: int
    active: bool = True


@dataclass(slots=True, frozen=True)
class PricingConfig:
    mode: PricingMode
    flat_fee: float = 0.0
    default_fallback_fee: Optional[float] = None
    base_prep_min_minutes: int = 30
    base_prep_max_minutes: int = 60
    zones: tuple[TariffZone, ...] = ()
    distance_tiers: tuple[DistanceTier, ...] = ()
    max_radius_km: float = 0.0
    minimum_order_amount: float = 0.0


@dataclass(slots=True, frozen=True)
class DeliveryAddress:
    """Already-resolved address fields handed in by the caller."""

    city: str = ""
    neighborhood: str = ""
    distance_km: Optional[float] = None


@dataclass(slots=True, frozen=True)
class DeliverySlot:
    start_time: datetime
    value: str
    display_label: str
    is_next_available: bool = False
    remaining_label: Optional[str] = None
    weekday_label: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Transition:
    type: TransitionType
    at: Optional[datetime]
    label: str


@dataclass(slots=True, frozen=True)
class ResolutionResult:
    fee_amount: float
    lead_min_minutes: int
    lead_max_minutes: int
    available: bool
    city_valid: bool
    reason_code: Optional[ReasonCode] = None
    pricing_mode_used: Optional[PricingMode] = None


@dataclass(slots=True, frozen=True)
class AvailabilityDecision:
    open_now: bool
    status_label: str
    resolution: ResolutionResult
    target_date: date
    accepts_orders: bool
    slots: tuple[DeliverySlot, ...] = field(default_factory=tuple)
    reason_code: Optional[ReasonCode] = None
