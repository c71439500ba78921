"""Delivery availability endpoints."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar
from zoneinfo import ZoneInfo

from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...schemas.availability import (
    AvailabilityRequest,
    AvailabilityResponse,
    DeliverySlotModel,
    FeeRequest,
    ResolutionModel,
    SlotsRequest,
    SlotsResponse,
    StatusRequest,
    StatusResponse,
    TransitionModel,
)
from ...services.availability.service import check_availability
from ...services.pricing.resolver import resolve_address
from ...services.schedule.calendar import estimate_delivery_window, is_open_at, next_transition
from ...services.schedule.slots import list_slots

router = APIRouter(prefix="/availability", tags=["availability"])

T = TypeVar("T")


def _resolve_now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(ZoneInfo(settings.timezone))


def _run(action: str, func: Callable[[], T]) -> T:
    try:
        return func()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error computing {action}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute {action}: {str(exc)}",
        ) from exc


@router.post("/status", response_model=StatusResponse, status_code=status.HTTP_200_OK)
def store_status(payload: StatusRequest) -> StatusResponse:
    """Open/closed state and the next opening or closing time."""

    def compute() -> StatusResponse:
        now = _resolve_now(payload.now)
        schedule = payload.schedule.to_domain()
        transition = next_transition(schedule, now, lookahead_days=settings.lookahead_days)
        estimate = None
        if payload.lead_min_minutes is not None and payload.lead_max_minutes is not None:
            estimate = estimate_delivery_window(
                schedule,
                now,
                payload.lead_min_minutes,
                payload.lead_max_minutes,
                lookahead_days=settings.lookahead_days,
            )
        return StatusResponse(
            open=is_open_at(schedule, now),
            label=transition.label,
            transition=TransitionModel.from_domain(transition),
            delivery_estimate=estimate,
        )

    return _run("store status", compute)


@router.post("/slots", response_model=SlotsResponse, status_code=status.HTTP_200_OK)
def delivery_slots(payload: SlotsRequest) -> SlotsResponse:
    """Selectable delivery start times for a date."""

    def compute() -> SlotsResponse:
        now = _resolve_now(payload.now)
        target = payload.date or now.date()
        slots = list_slots(
            payload.schedule.to_domain(),
            target,
            payload.lead_min_minutes,
            payload.lead_max_minutes,
            now,
            step_minutes=settings.slot_step_minutes,
        )
        return SlotsResponse(date=target, slots=[DeliverySlotModel.from_domain(slot) for slot in slots])

    return _run("delivery slots", compute)


@router.post("/fee", response_model=ResolutionModel, status_code=status.HTTP_200_OK)
def delivery_fee(payload: FeeRequest) -> ResolutionModel:
    """Fee and lead window for an address."""

    def compute() -> ResolutionModel:
        result = resolve_address(
            payload.pricing.to_domain() if payload.pricing else None,
            payload.service_area.to_domain(),
            payload.address.to_domain(),
        )
        return ResolutionModel.from_domain(result)

    return _run("delivery fee", compute)


@router.post("/check", response_model=AvailabilityResponse, status_code=status.HTTP_200_OK)
def check(payload: AvailabilityRequest) -> AvailabilityResponse:
    """Full checkout gate: open state, fee resolution and slots for the target date."""

    def compute() -> AvailabilityResponse:
        decision = check_availability(
            payload.schedule.to_domain() if payload.schedule else None,
            payload.pricing.to_domain() if payload.pricing else None,
            payload.service_area.to_domain(),
            payload.address.to_domain(),
            _resolve_now(payload.now),
            target_date=payload.target_date,
            order_subtotal=payload.order_subtotal,
            step_minutes=settings.slot_step_minutes,
            lookahead_days=settings.lookahead_days,
        )
        return AvailabilityResponse.from_domain(decision)

    return _run("availability", compute)
