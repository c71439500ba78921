"""Fixed-fee pricing modes."""

from __future__ import annotations

from ...models.domain import DeliveryAddress, PricingConfig, PricingMode, ResolutionResult
from .base import PricingStrategy


class NoFeePricing(PricingStrategy):
    """Free delivery with the base preparation window."""

    mode = PricingMode.NONE

    def resolve(self, *, pricing: PricingConfig, address: DeliveryAddress) -> ResolutionResult:
        return self.accept_base_window(pricing, 0.0)


class FlatFeePricing(PricingStrategy):
    """Single fee for every served address."""

    mode = PricingMode.FLAT

    def resolve(self, *, pricing: PricingConfig, address: DeliveryAddress) -> ResolutionResult:
        return self.accept_base_window(pricing, pricing.flat_fee)
