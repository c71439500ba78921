"""Base classes for pricing strategy implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...models.domain import DeliveryAddress, PricingConfig, PricingMode, ReasonCode, ResolutionResult


class PricingStrategy(ABC):
    """Contract for fee and lead-window resolution under one pricing mode."""

    mode: PricingMode

    @abstractmethod
    def resolve(self, *, pricing: PricingConfig, address: DeliveryAddress) -> ResolutionResult:
        raise NotImplementedError

    def accept(
        self,
        fee_amount: float,
        lead_min_minutes: int,
        lead_max_minutes: int,
        reason_code: Optional[ReasonCode] = None,
    ) -> ResolutionResult:
        return ResolutionResult(
            fee_amount=float(fee_amount),
            lead_min_minutes=lead_min_minutes,
            lead_max_minutes=lead_max_minutes,
            available=True,
            city_valid=True,
            reason_code=reason_code,
            pricing_mode_used=self.mode,
        )

    def accept_base_window(self, pricing: PricingConfig, fee_amount: float, reason_code: Optional[ReasonCode] = None) -> ResolutionResult:
        return self.accept(fee_amount, pricing.base_prep_min_minutes, pricing.base_prep_max_minutes, reason_code)

    def reject(self, reason_code: ReasonCode) -> ResolutionResult:
        return blocked(reason_code, city_valid=True, mode=self.mode)


def blocked(reason_code: ReasonCode, *, city_valid: bool, mode: Optional[PricingMode]) -> ResolutionResult:
    return ResolutionResult(
        fee_amount=0.0,
        lead_min_minutes=0,
        lead_max_minutes=0,
        available=False,
        city_valid=city_valid,
        reason_code=reason_code,
        pricing_mode_used=mode,
    )
