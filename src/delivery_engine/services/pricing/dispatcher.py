"""Factory for pricing strategies based on the merchant's pricing mode."""

from __future__ import annotations

from ...models.domain import PricingMode
from .base import PricingStrategy
from .distance import DistancePricing
from .flat import FlatFeePricing, NoFeePricing
from .neighborhood import NeighborhoodPricing


def get_strategy(mode: PricingMode) -> PricingStrategy:
    match mode:
        case PricingMode.NONE:
            return NoFeePricing()
        case PricingMode.FLAT:
            return FlatFeePricing()
        case PricingMode.BY_NEIGHBORHOOD:
            return NeighborhoodPricing()
        case PricingMode.BY_DISTANCE:
            return DistancePricing()
        case _:
            raise ValueError(f"Unknown pricing mode '{mode}'.")
