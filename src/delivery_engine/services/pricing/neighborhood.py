"""Neighborhood tariff table pricing."""

from __future__ import annotations

import logging

from ...models.domain import DeliveryAddress, PricingConfig, PricingMode, ReasonCode, ResolutionResult
from .base import PricingStrategy
from .zones import match_neighborhood_zone

logger = logging.getLogger(__name__)


class NeighborhoodPricing(PricingStrategy):
    """Look the address up in the city/neighborhood tariff table, with optional catch-all fee."""

    mode = PricingMode.BY_NEIGHBORHOOD

    def resolve(self, *, pricing: PricingConfig, address: DeliveryAddress) -> ResolutionResult:
        zone = match_neighborhood_zone(pricing.zones, address.city, address.neighborhood)
        if zone is not None:
            return self.accept(zone.fee_amount, zone.lead_min_minutes, zone.lead_max_minutes)

        fallback = pricing.default_fallback_fee
        if fallback is not None and fallback > 0:
            logger.debug("No zone for %r/%r, applying fallback fee %s", address.city, address.neighborhood, fallback)
            return self.accept_base_window(pricing, fallback, ReasonCode.DEFAULT_FALLBACK_APPLIED)
        return self.reject(ReasonCode.NO_ZONE_FOR_NEIGHBORHOOD)
