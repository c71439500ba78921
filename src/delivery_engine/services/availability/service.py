"""High-level orchestration for checkout availability decisions."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ...models.domain import (
    AvailabilityDecision,
    DeliveryAddress,
    PricingConfig,
    ReasonCode,
    ServiceAreaConfig,
    WeeklySchedule,
)
from ..pricing.base import blocked
from ..pricing.resolver import resolve_address
from ..pricing.service_area import is_city_served
from ..schedule.calendar import LOOKAHEAD_DAYS, is_open_at, next_transition_label
from ..schedule.slots import SLOT_STEP_MINUTES, list_slots

logger = logging.getLogger(__name__)


def check_availability(
    schedule: Optional[WeeklySchedule],
    pricing: Optional[PricingConfig],
    service_area: Optional[ServiceAreaConfig],
    address: DeliveryAddress,
    now: datetime,
    *,
    target_date: Optional[date] = None,
    order_subtotal: Optional[float] = None,
    step_minutes: int = SLOT_STEP_MINUTES,
    lookahead_days: int = LOOKAHEAD_DAYS,
) -> AvailabilityDecision:
    """Answer whether the customer can order now or later, and at what fee."""

    day = target_date or now.date()

    if schedule is None or pricing is None:
        resolution = blocked(
            ReasonCode.CONFIG_MISSING,
            city_valid=is_city_served(service_area, address.city),
            mode=pricing.mode if pricing else None,
        )
        logger.info("Availability blocked: configuration missing (schedule=%s, pricing=%s)",
                    schedule is not None, pricing is not None)
        return AvailabilityDecision(
            open_now=False,
            status_label=next_transition_label(schedule, now, lookahead_days=lookahead_days),
            resolution=resolution,
            target_date=day,
            accepts_orders=False,
            reason_code=ReasonCode.CONFIG_MISSING,
        )

    resolution = resolve_address(pricing, service_area, address)
    open_now = is_open_at(schedule, now)
    label = next_transition_label(schedule, now, lookahead_days=lookahead_days)

    slots = []
    if resolution.available:
        slots = list_slots(
            schedule,
            day,
            resolution.lead_min_minutes,
            resolution.lead_max_minutes,
            now,
            step_minutes=step_minutes,
        )

    reason = resolution.reason_code
    accepts_orders = resolution.available
    # Ordering for immediate delivery only applies to today.
    can_order_now = open_now and day == now.date()
    if accepts_orders and not can_order_now and not slots:
        accepts_orders = False
        reason = ReasonCode.STORE_CLOSED
    if (
        accepts_orders
        and order_subtotal is not None
        and pricing.minimum_order_amount > 0
        and order_subtotal < pricing.minimum_order_amount
    ):
        accepts_orders = False
        reason = ReasonCode.BELOW_MINIMUM_ORDER

    logger.info(
        "Availability for %s/%s: mode=%s open=%s slots=%d accepts=%s reason=%s",
        address.city,
        address.neighborhood,
        pricing.mode.value,
        open_now,
        len(slots),
        accepts_orders,
        reason.value if reason else None,
    )
    return AvailabilityDecision(
        open_now=open_now,
        status_label=label,
        resolution=resolution,
        target_date=day,
        accepts_orders=accepts_orders,
        slots=tuple(slots),
        reason_code=reason,
    )
