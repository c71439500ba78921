import pytest

from src.delivery_engine.models.domain import (
    DistanceTier,
    PricingConfig,
    PricingMode,
    ReasonCode,
    ServiceAreaConfig,
    TariffZone,
)
from src.delivery_engine.services.pricing.dispatcher import get_strategy
from src.delivery_engine.services.pricing.resolver import resolve_fee_and_window
from src.delivery_engine.services.pricing.zones import match_distance_tier, match_neighborhood_zone

SERVICE_AREA = ServiceAreaConfig(served_cities=frozenset({"São Paulo"}))


def _zone(neighborhood: str, fee: float, *, city: str = "Sao Paulo", active: bool = True, lead=(25, 45)) -> TariffZone:
    return TariffZone(
        city=city,
        neighborhood=neighborhood,
        fee_amount=fee,
        lead_min_minutes=lead[0],
        lead_max_minutes=lead[1],
        active=active,
    )


def _pricing(mode: PricingMode, **kwargs) -> PricingConfig:
    kwargs.setdefault("base_prep_min_minutes", 30)
    kwargs.setdefault("base_prep_max_minutes", 60)
    return PricingConfig(mode=mode, **kwargs)


@pytest.mark.parametrize("mode", list(PricingMode))
def test_unserved_city_blocks_every_mode(mode):
    pricing = _pricing(
        mode,
        flat_fee=7.0,
        default_fallback_fee=3.0,
        zones=(_zone("Centro", 5.0, city="Campinas"),),
        distance_tiers=(DistanceTier(10.0, 8.0, 20, 40),),
    )

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "Campinas", "Centro", distance_km=1.0)

    assert result.available is False
    assert result.city_valid is False
    assert result.reason_code == ReasonCode.CITY_NOT_SERVED
    assert result.fee_amount == 0
    assert (result.lead_min_minutes, result.lead_max_minutes) == (0, 0)
    assert result.pricing_mode_used == mode


def test_missing_pricing_fails_closed():
    result = resolve_fee_and_window(None, SERVICE_AREA, "São Paulo", "Centro")

    assert result.available is False
    assert result.reason_code == ReasonCode.CONFIG_MISSING
    assert result.city_valid is True
    assert result.pricing_mode_used is None


def test_no_fee_mode_uses_base_window():
    result = resolve_fee_and_window(_pricing(PricingMode.NONE, flat_fee=9.0), SERVICE_AREA, "sao paulo", "")

    assert result.available is True
    assert result.fee_amount == 0
    assert (result.lead_min_minutes, result.lead_max_minutes) == (30, 60)
    assert result.reason_code is None


def test_flat_mode_charges_flat_fee():
    result = resolve_fee_and_window(_pricing(PricingMode.FLAT, flat_fee=6.5), SERVICE_AREA, "São Paulo", "Anywhere")

    assert result.available is True
    assert result.fee_amount == 6.5
    assert (result.lead_min_minutes, result.lead_max_minutes) == (30, 60)
    assert result.pricing_mode_used == PricingMode.FLAT


def test_neighborhood_exact_match_uses_zone_fee_and_lead():
    pricing = _pricing(PricingMode.BY_NEIGHBORHOOD, zones=(_zone("Centro", 5.0, lead=(15, 35)),))

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "centro")

    assert result.available is True
    assert result.fee_amount == 5.0
    assert (result.lead_min_minutes, result.lead_max_minutes) == (15, 35)
    assert result.reason_code is None


def test_neighborhood_partial_match():
    pricing = _pricing(PricingMode.BY_NEIGHBORHOOD, zones=(_zone("Vila Mariana - Zona Sul", 9.0),))

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "Vila Mariana")

    assert result.available is True
    assert result.fee_amount == 9.0


def test_exact_match_beats_earlier_partial_match():
    zones = (_zone("Centro Histórico", 10.0), _zone("Centro", 5.0))

    zone = match_neighborhood_zone(zones, "São Paulo", "Centro")

    assert zone.fee_amount == 5.0


def test_partial_ties_resolve_to_first_listed():
    zones = (_zone("Vila Nova Conceição", 12.0), _zone("Vila Nova", 8.0))

    zone = match_neighborhood_zone(zones, "São Paulo", "Nova")

    assert zone.fee_amount == 12.0


def test_inactive_zones_other_cities_and_cityless_zones_are_ignored():
    zones = (
        _zone("Centro", 1.0, active=False),
        _zone("Centro", 2.0, city=""),
        _zone("Centro", 3.0, city="Campinas"),
        _zone("Centro", 4.0),
    )

    zone = match_neighborhood_zone(zones, "São Paulo", "Centro")

    assert zone.fee_amount == 4.0
    assert match_neighborhood_zone(zones[:3], "São Paulo", "Centro") is None
    assert match_neighborhood_zone(zones, "São Paulo", "") is None


def test_neighborhood_fallback_fee_applies_when_configured():
    pricing = _pricing(
        PricingMode.BY_NEIGHBORHOOD,
        zones=(_zone("Centro", 5.0),),
        default_fallback_fee=3.0,
    )

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "Bela Vista")

    assert result.available is True
    assert result.fee_amount == 3.0
    assert result.reason_code == ReasonCode.DEFAULT_FALLBACK_APPLIED
    assert (result.lead_min_minutes, result.lead_max_minutes) == (30, 60)


@pytest.mark.parametrize("fallback", [None, 0.0])
def test_neighborhood_without_fallback_blocks(fallback):
    pricing = _pricing(
        PricingMode.BY_NEIGHBORHOOD,
        zones=(_zone("Centro", 5.0),),
        default_fallback_fee=fallback,
    )

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "Bela Vista")

    assert result.available is False
    assert result.city_valid is True
    assert result.reason_code == ReasonCode.NO_ZONE_FOR_NEIGHBORHOOD
    assert result.fee_amount == 0


TIERS = (
    DistanceTier(max_distance_km=5.0, fee_amount=8.0, lead_min_minutes=30, lead_max_minutes=50),
    DistanceTier(max_distance_km=2.0, fee_amount=5.0, lead_min_minutes=20, lead_max_minutes=40),
    DistanceTier(max_distance_km=10.0, fee_amount=12.0, lead_min_minutes=40, lead_max_minutes=70, active=False),
)


def test_distance_tier_lookup_sorts_and_skips_inactive():
    assert match_distance_tier(TIERS, 1.5).fee_amount == 5.0
    assert match_distance_tier(TIERS, 2.0).fee_amount == 5.0
    assert match_distance_tier(TIERS, 4.2).fee_amount == 8.0
    assert match_distance_tier(TIERS, 7.0) is None
    assert match_distance_tier(TIERS, None) is None


def test_distance_mode_resolves_tier():
    pricing = _pricing(PricingMode.BY_DISTANCE, distance_tiers=TIERS)

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "", distance_km=4.2)

    assert result.available is True
    assert result.fee_amount == 8.0
    assert (result.lead_min_minutes, result.lead_max_minutes) == (30, 50)


@pytest.mark.parametrize("distance", [7.0, None])
def test_distance_mode_without_tier_blocks(distance):
    pricing = _pricing(PricingMode.BY_DISTANCE, distance_tiers=TIERS)

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "", distance_km=distance)

    assert result.available is False
    assert result.reason_code == ReasonCode.NO_ZONE_FOR_DISTANCE


def test_distance_mode_outside_radius_blocks():
    pricing = _pricing(PricingMode.BY_DISTANCE, distance_tiers=TIERS, max_radius_km=3.0)

    result = resolve_fee_and_window(pricing, SERVICE_AREA, "São Paulo", "", distance_km=4.2)

    assert result.available is False
    assert result.reason_code == ReasonCode.OUT_OF_DELIVERY_RADIUS


def test_get_strategy_rejects_unknown_mode():
    with pytest.raises(ValueError):
        get_strategy("express")
