"""Fee and lead-window resolution for a delivery address."""

from __future__ import annotations

import logging
from typing import Optional

from ...models.domain import (
    DeliveryAddress,
    PricingConfig,
    ReasonCode,
    ResolutionResult,
    ServiceAreaConfig,
)
from .base import blocked
from .dispatcher import get_strategy
from .service_area import is_city_served

logger = logging.getLogger(__name__)


def resolve_address(
    pricing: Optional[PricingConfig],
    service_area: Optional[ServiceAreaConfig],
    address: DeliveryAddress,
) -> ResolutionResult:
    city_valid = is_city_served(service_area, address.city)
    if pricing is None:
        return blocked(ReasonCode.CONFIG_MISSING, city_valid=city_valid, mode=None)
    if not city_valid:
        return blocked(ReasonCode.CITY_NOT_SERVED, city_valid=False, mode=pricing.mode)

    result = get_strategy(pricing.mode).resolve(pricing=pricing, address=address)
    logger.debug(
        "Resolved %s/%s under %s: available=%s fee=%s reason=%s",
        address.city,
        address.neighborhood,
        pricing.mode.value,
        result.available,
        result.fee_amount,
        result.reason_code,
    )
    return result


def resolve_fee_and_window(
    pricing: Optional[PricingConfig],
    service_area: Optional[ServiceAreaConfig],
    city: Optional[str],
    neighborhood: Optional[str],
    distance_km: Optional[float] = None,
) -> ResolutionResult:
    """Fee and lead window for an address. The served-city gate runs before any mode."""

    address = DeliveryAddress(city=city or "", neighborhood=neighborhood or "", distance_km=distance_km)
    return resolve_address(pricing, service_area, address)
