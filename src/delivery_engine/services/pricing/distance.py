"""Distance tier pricing."""

from __future__ import annotations

from ...models.domain import DeliveryAddress, PricingConfig, PricingMode, ReasonCode, ResolutionResult
from .base import PricingStrategy
from .zones import match_distance_tier


class DistancePricing(PricingStrategy):
    """Fee by distance band. The distance is resolved upstream and taken as given."""

    mode = PricingMode.BY_DISTANCE

    def resolve(self, *, pricing: PricingConfig, address: DeliveryAddress) -> ResolutionResult:
        distance = address.distance_km
        if distance is None:
            return self.reject(ReasonCode.NO_ZONE_FOR_DISTANCE)
        if pricing.max_radius_km > 0 and distance > pricing.max_radius_km:
            return self.reject(ReasonCode.OUT_OF_DELIVERY_RADIUS)

        tier = match_distance_tier(pricing.distance_tiers, distance)
        if tier is None:
            return self.reject(ReasonCode.NO_ZONE_FOR_DISTANCE)
        return self.accept(tier.fee_amount, tier.lead_min_minutes, tier.lead_max_minutes)
