"""Pydantic request/response models for availability endpoints."""

from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ..config import settings
from ..models.domain import (
    AvailabilityDecision,
    DaySchedule,
    DeliveryAddress,
    DeliverySlot,
    DistanceTier,
    OperatingMode,
    PricingConfig,
    PricingMode,
    ResolutionResult,
    ScheduleException,
    ServiceAreaConfig,
    TariffZone,
    Transition,
    Weekday,
    WeeklySchedule,
)
from ..services.schedule.calendar import build_day_schedule, build_periods, build_weekly_schedule

_WEEKDAY_NAMES = {
    **{day.name.lower(): day for day in Weekday},
    **{day.name[:3].lower(): day for day in Weekday},
}

_PRICING_MODE_NAMES = {
    "none": PricingMode.NONE,
    "free": PricingMode.NONE,
    "flat": PricingMode.FLAT,
    "byneighborhood": PricingMode.BY_NEIGHBORHOOD,
    "neighborhood": PricingMode.BY_NEIGHBORHOOD,
    "bydistance": PricingMode.BY_DISTANCE,
    "distance": PricingMode.BY_DISTANCE,
}


class PeriodModel(BaseModel):
    # Kept as raw strings: malformed values are dropped by the calendar, not rejected.
    start: Optional[str] = None
    end: Optional[str] = None


class DayScheduleModel(BaseModel):
    weekday: Weekday
    is_open: bool = False
    periods: list[PeriodModel] = Field(default_factory=list)

    @field_validator("weekday", mode="before")
    @classmethod
    def parse_weekday(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            if key.isdigit():
                return Weekday(int(key))
            if key in _WEEKDAY_NAMES:
                return _WEEKDAY_NAMES[key]
            raise ValueError(f"Unknown weekday '{value}'")
        return value

    def to_domain(self) -> DaySchedule:
        return build_day_schedule(self.is_open, ((period.start, period.end) for period in self.periods))


class ScheduleExceptionModel(BaseModel):
    date: dt.date
    name: str = ""
    is_open: bool = False
    periods: list[PeriodModel] = Field(default_factory=list)

    def to_domain(self) -> ScheduleException:
        return ScheduleException(
            date=self.date,
            name=self.name,
            is_open=self.is_open,
            periods=build_periods((period.start, period.end) for period in self.periods),
        )


class ScheduleModel(BaseModel):
    days: list[DayScheduleModel] = Field(default_factory=list)
    mode: OperatingMode = OperatingMode.AUTOMATIC
    exceptions: list[ScheduleExceptionModel] = Field(default_factory=list)

    def to_domain(self) -> WeeklySchedule:
        # Later entries for the same weekday replace earlier ones.
        days = {day.weekday: day.to_domain() for day in self.days}
        return build_weekly_schedule(
            days,
            mode=self.mode,
            exceptions=[exception.to_domain() for exception in self.exceptions],
        )


class TariffZoneModel(BaseModel):
    city: str = ""
    neighborhood: str = ""
    fee_amount: float = Field(0.0, ge=0)
    lead_min_minutes: int = Field(0, ge=0)
    lead_max_minutes: int = Field(0, ge=0)
    active: bool = True

    def to_domain(self) -> TariffZone:
        return TariffZone(**self.model_dump())


class DistanceTierModel(BaseModel):
    max_distance_km: float = Field(..., ge=0)
    fee_amount: float = Field(0.0, ge=0)
    lead_min_minutes: int = Field(0, ge=0)
    lead_max_minutes: int = Field(0, ge=0)
    active: bool = True

    def to_domain(self) -> DistanceTier:
        return DistanceTier(**self.model_dump())


class PricingModel(BaseModel):
    mode: PricingMode
    flat_fee: float = Field(0.0, ge=0)
    default_fallback_fee: Optional[float] = Field(None, ge=0)
    base_prep_min_minutes: int = Field(default_factory=lambda: settings.default_prep_min_minutes, ge=0)
    base_prep_max_minutes: int = Field(default_factory=lambda: settings.default_prep_max_minutes, ge=0)
    zones: list[TariffZoneModel] = Field(default_factory=list)
    distance_tiers: list[DistanceTierModel] = Field(default_factory=list)
    max_radius_km: float = Field(0.0, ge=0, description="0 disables the radius check.")
    minimum_order_amount: float = Field(0.0, ge=0)

    @field_validator("mode", mode="before")
    @classmethod
    def parse_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = re.sub(r"[^a-z]", "", value.lower())
            if key in _PRICING_MODE_NAMES:
                return _PRICING_MODE_NAMES[key]
        return value

    def to_domain(self) -> PricingConfig:
        return PricingConfig(
            mode=self.mode,
            flat_fee=self.flat_fee,
            default_fallback_fee=self.default_fallback_fee,
            base_prep_min_minutes=self.base_prep_min_minutes,
            base_prep_max_minutes=self.base_prep_max_minutes,
            zones=tuple(zone.to_domain() for zone in self.zones),
            distance_tiers=tuple(tier.to_domain() for tier in self.distance_tiers),
            max_radius_km=self.max_radius_km,
            minimum_order_amount=self.minimum_order_amount,
        )


class ServiceAreaModel(BaseModel):
    served_cities: list[str] = Field(default_factory=list)

    def to_domain(self) -> ServiceAreaConfig:
        return ServiceAreaConfig(served_cities=frozenset(self.served_cities))


class AddressModel(BaseModel):
    city: str = ""
    neighborhood: str = ""
    distance_km: Optional[float] = Field(None, ge=0, description="Distance resolved upstream, if any.")

    def to_domain(self) -> DeliveryAddress:
        return DeliveryAddress(city=self.city, neighborhood=self.neighborhood, distance_km=self.distance_km)


class StatusRequest(BaseModel):
    schedule: ScheduleModel
    lead_min_minutes: Optional[int] = Field(None, ge=0, description="Enables the delivery estimate when set.")
    lead_max_minutes: Optional[int] = Field(None, ge=0)
    now: Optional[dt.datetime] = None


class SlotsRequest(BaseModel):
    schedule: ScheduleModel
    date: Optional[dt.date] = Field(None, description="Target date, defaults to today.")
    lead_min_minutes: int = Field(..., ge=0)
    lead_max_minutes: int = Field(..., ge=0)
    now: Optional[dt.datetime] = None


class FeeRequest(BaseModel):
    pricing: Optional[PricingModel] = None
    service_area: ServiceAreaModel = Field(default_factory=ServiceAreaModel)
    address: AddressModel


class AvailabilityRequest(BaseModel):
    schedule: Optional[ScheduleModel] = None
    pricing: Optional[PricingModel] = None
    service_area: ServiceAreaModel = Field(default_factory=ServiceAreaModel)
    address: AddressModel
    target_date: Optional[dt.date] = None
    order_subtotal: Optional[float] = Field(None, ge=0)
    now: Optional[dt.datetime] = None


class TransitionModel(BaseModel):
    type: str
    at: Optional[dt.datetime] = None
    label: str

    @classmethod
    def from_domain(cls, transition: Transition) -> "TransitionModel":
        return cls(type=transition.type.value, at=transition.at, label=transition.label)


class StatusResponse(BaseModel):
    open: bool
    label: str
    transition: TransitionModel
    delivery_estimate: Optional[str] = None


class DeliverySlotModel(BaseModel):
    start_time: dt.datetime
    value: str
    display_label: str
    is_next_available: bool = False
    remaining_label: Optional[str] = None
    weekday_label: Optional[str] = None

    @classmethod
    def from_domain(cls, slot: DeliverySlot) -> "DeliverySlotModel":
        return cls(
            start_time=slot.start_time,
            value=slot.value,
            display_label=slot.display_label,
            is_next_available=slot.is_next_available,
            remaining_label=slot.remaining_label,
            weekday_label=slot.weekday_label,
        )


class SlotsResponse(BaseModel):
    date: dt.date
    slots: list[DeliverySlotModel]


class ResolutionModel(BaseModel):
    fee_amount: float
    lead_min_minutes: int
    lead_max_minutes: int
    available: bool
    city_valid: bool
    reason_code: Optional[str] = None
    pricing_mode_used: Optional[str] = None

    @classmethod
    def from_domain(cls, result: ResolutionResult) -> "ResolutionModel":
        return cls(
            fee_amount=result.fee_amount,
            lead_min_minutes=result.lead_min_minutes,
            lead_max_minutes=result.lead_max_minutes,
            available=result.available,
            city_valid=result.city_valid,
            reason_code=result.reason_code.value if result.reason_code else None,
            pricing_mode_used=result.pricing_mode_used.value if result.pricing_mode_used else None,
        )


class AvailabilityResponse(BaseModel):
    open_now: bool
    status_label: str
    accepts_orders: bool
    reason_code: Optional[str] = None
    target_date: dt.date
    resolution: ResolutionModel
    slots: list[DeliverySlotModel]

    @classmethod
    def from_domain(cls, decision: AvailabilityDecision) -> "AvailabilityResponse":
        return cls(
            open_now=decision.open_now,
            status_label=decision.status_label,
            accepts_orders=decision.accepts_orders,
            reason_code=decision.reason_code.value if decision.reason_code else None,
            target_date=decision.target_date,
            resolution=ResolutionModel.from_domain(decision.resolution),
            slots=[DeliverySlotModel.from_domain(slot) for slot in decision.slots],
        )
