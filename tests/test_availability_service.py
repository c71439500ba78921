from datetime import date, datetime

from src.delivery_engine.models.domain import (
    DeliveryAddress,
    PricingConfig,
    PricingMode,
    ReasonCode,
    ScheduleException,
    ServiceAreaConfig,
    TariffZone,
    Weekday,
)
from src.delivery_engine.services.availability.service import check_availability
from src.delivery_engine.services.schedule.calendar import build_day_schedule, build_periods, build_weekly_schedule

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SERVICE_AREA = ServiceAreaConfig(served_cities=frozenset({"São Paulo"}))
ADDRESS = DeliveryAddress(city="Sao Paulo", neighborhood="Centro")


def _schedule():
    days = {Weekday(index): build_day_schedule(index < 5, [("09:00", "18:00")]) for index in range(7)}
    return build_weekly_schedule(days)


def _pricing(**kwargs) -> PricingConfig:
    zones = (TariffZone("Sao Paulo", "Centro", 5.0, 20, 60),)
    return PricingConfig(mode=PricingMode.BY_NEIGHBORHOOD, zones=zones, **kwargs)


def _now(hhmm: str, day: date = MONDAY) -> datetime:
    hour, minute = map(int, hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hour, minute)


def test_missing_schedule_or_pricing_blocks():
    for schedule, pricing in ((None, _pricing()), (_schedule(), None)):
        decision = check_availability(schedule, pricing, SERVICE_AREA, ADDRESS, _now("10:00"))

        assert decision.accepts_orders is False
        assert decision.reason_code == ReasonCode.CONFIG_MISSING
        assert decision.resolution.available is False
        assert decision.slots == ()


def test_open_store_with_matched_zone_accepts_orders():
    decision = check_availability(_schedule(), _pricing(), SERVICE_AREA, ADDRESS, _now("10:00"))

    assert decision.open_now is True
    assert decision.status_label == "Closes at 18:00"
    assert decision.accepts_orders is True
    assert decision.reason_code is None
    assert decision.resolution.fee_amount == 5.0
    assert decision.target_date == MONDAY
    assert decision.slots[0].value == "10:30"
    assert decision.slots[-1].value == "17:00"


def test_closed_now_but_future_slots_accepts_scheduled_orders():
    decision = check_availability(
        _schedule(), _pricing(), SERVICE_AREA, ADDRESS, _now("20:00"), target_date=TUESDAY
    )

    assert decision.open_now is False
    assert decision.status_label == "Opens Tuesday 20/10/2026 at 09:00"
    assert decision.accepts_orders is True
    assert decision.slots[0].weekday_label == "Tue"


def test_store_closed_only_when_closed_and_no_slots():
    decision = check_availability(_schedule(), _pricing(), SERVICE_AREA, ADDRESS, _now("17:45"))

    assert decision.open_now is True
    assert decision.slots == ()
    assert decision.accepts_orders is True

    decision = check_availability(_schedule(), _pricing(), SERVICE_AREA, ADDRESS, _now("19:00"))

    assert decision.open_now is False
    assert decision.accepts_orders is False
    assert decision.reason_code == ReasonCode.STORE_CLOSED
    assert decision.resolution.available is True


def test_unserved_city_blocks_without_slots():
    address = DeliveryAddress(city="Campinas", neighborhood="Centro")

    decision = check_availability(_schedule(), _pricing(), SERVICE_AREA, address, _now("10:00"))

    assert decision.accepts_orders is False
    assert decision.reason_code == ReasonCode.CITY_NOT_SERVED
    assert decision.slots == ()


def test_fallback_fee_is_informational():
    address = DeliveryAddress(city="São Paulo", neighborhood="Bela Vista")

    decision = check_availability(
        _schedule(), _pricing(default_fallback_fee=3.0), SERVICE_AREA, address, _now("10:00")
    )

    assert decision.accepts_orders is True
    assert decision.reason_code == ReasonCode.DEFAULT_FALLBACK_APPLIED
    assert decision.resolution.fee_amount == 3.0


def test_minimum_order_amount_blocks_small_orders():
    pricing = _pricing(minimum_order_amount=25.0)

    small = check_availability(_schedule(), pricing, SERVICE_AREA, ADDRESS, _now("10:00"), order_subtotal=20.0)
    enough = check_availability(_schedule(), pricing, SERVICE_AREA, ADDRESS, _now("10:00"), order_subtotal=25.0)
    unknown = check_availability(_schedule(), pricing, SERVICE_AREA, ADDRESS, _now("10:00"))

    assert small.accepts_orders is False
    assert small.reason_code == ReasonCode.BELOW_MINIMUM_ORDER
    assert small.resolution.fee_amount == 5.0
    assert enough.accepts_orders is True
    assert unknown.accepts_orders is True


def test_open_now_does_not_cover_other_dates_without_slots():
    friday_noon = _now("12:00", day=date(2026, 10, 23))

    saturday = check_availability(
        _schedule(), _pricing(), SERVICE_AREA, ADDRESS, friday_noon, target_date=date(2026, 10, 24)
    )
    past = check_availability(
        _schedule(), _pricing(), SERVICE_AREA, ADDRESS, friday_noon, target_date=date(2026, 10, 1)
    )

    for decision in (saturday, past):
        assert decision.open_now is True
        assert decision.slots == ()
        assert decision.accepts_orders is False
        assert decision.reason_code == ReasonCode.STORE_CLOSED


def test_zero_step_lists_default_slots():
    decision = check_availability(
        _schedule(), _pricing(), SERVICE_AREA, ADDRESS, _now("20:00"), target_date=TUESDAY, step_minutes=0
    )

    assert decision.accepts_orders is True
    assert [slot.value for slot in decision.slots][:2] == ["09:00", "09:30"]


def test_lookahead_is_forwarded_to_status_label():
    reopening = ScheduleException(
        date=date(2026, 10, 29),
        name="Reopening after renovation",
        is_open=True,
        periods=build_periods([("09:00", "18:00")]),
    )
    days = {Weekday(index): build_day_schedule(False, ()) for index in range(7)}
    schedule = build_weekly_schedule(days, exceptions=(reopening,))

    default = check_availability(schedule, _pricing(), SERVICE_AREA, ADDRESS, _now("10:00"))
    wider = check_availability(schedule, _pricing(), SERVICE_AREA, ADDRESS, _now("10:00"), lookahead_days=14)

    assert default.status_label == "Closed"
    assert wider.status_label == "Opens Thursday 29/10/2026 at 09:00"
