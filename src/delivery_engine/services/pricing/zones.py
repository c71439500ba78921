"""Tariff zone and distance tier lookup."""

from __future__ import annotations

from typing import Optional, Sequence

from ...models.domain import DistanceTier, TariffZone
from ..text import normalize_text, texts_match


def candidate_zones(zones: Sequence[TariffZone], city: Optional[str]) -> list[TariffZone]:
    """Active zones whose city matches; zones without a city never qualify."""

    return [
        zone
        for zone in zones
        if zone.active and normalize_text(zone.city) and texts_match(zone.city, city)
    ]


def match_neighborhood_zone(
    zones: Sequence[TariffZone],
    city: Optional[str],
    neighborhood: Optional[str],
) -> Optional[TariffZone]:
    """Exact neighborhood match first, then partial match; table order breaks ties."""

    wanted = normalize_text(neighborhood)
    if not wanted:
        return None
    candidates = candidate_zones(zones, city)

    for zone in candidates:
        if normalize_text(zone.neighborhood) == wanted:
            return zone
    for zone in candidates:
        if texts_match(zone.neighborhood, wanted):
            return zone
    return None


def match_distance_tier(tiers: Sequence[DistanceTier], distance_km: Optional[float]) -> Optional[DistanceTier]:
    """Smallest active tier whose threshold covers ``distance_km``."""

    if distance_km is None or distance_km < 0:
        return None
    ordered = sorted((tier for tier in tiers if tier.active), key=lambda tier: tier.max_distance_km)
    return next((tier for tier in ordered if tier.max_distance_km >= distance_km), None)
