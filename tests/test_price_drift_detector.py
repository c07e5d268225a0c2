from __future__ import annotations

from plansync.application.services.price_drift_detector import PriceDriftDetector
from plansync.domain.entities.billing import ProviderPrice
from plansync.domain.services.price_drift import evaluate_price_drift


def _price(**overrides) -> ProviderPrice:
    values = {
        "id": "price_1",
        "product_id": "prod_1",
        "unit_amount": 4900,
        "currency": "usd",
        "interval": "month",
        "active": True,
    }
    values.update(overrides)
    return ProviderPrice(**values)


def test_evaluate_price_drift_rows_in_order():
    cases = [
        (None, None, "missing"),
        ("price_1", None, "not_found"),
        ("price_1", _price(active=False, unit_amount=1), "inactive"),
        ("price_1", _price(unit_amount=5900, interval="year"), "amount_changed"),
        ("price_1", _price(interval="year"), "interval_changed"),
    ]
    for existing_id, existing, reason in cases:
        decision = evaluate_price_drift(
            existing_price_id=existing_id,
            existing_price=existing,
            desired_amount=4900,
            desired_interval="month",
        )
        assert decision.replace is True
        assert decision.reason == reason


def test_evaluate_price_drift_keeps_matching_price():
    decision = evaluate_price_drift(
        existing_price_id="price_1",
        existing_price=_price(),
        desired_amount=4900,
        desired_interval="month",
        currency="USD",
        product_id="prod_1",
    )

    assert decision.replace is False
    assert decision.reason == "valid"


def test_evaluate_price_drift_checks_currency_and_product_only_when_given():
    foreign = _price(currency="eur", product_id="prod_other")

    unchecked = evaluate_price_drift(
        existing_price_id="price_1",
        existing_price=foreign,
        desired_amount=4900,
        desired_interval="month",
    )
    wrong_currency = evaluate_price_drift(
        existing_price_id="price_1",
        existing_price=foreign,
        desired_amount=4900,
        desired_interval="month",
        currency="usd",
    )
    wrong_product = evaluate_price_drift(
        existing_price_id="price_1",
        existing_price=_price(product_id="prod_other"),
        desired_amount=4900,
        desired_interval="month",
        product_id="prod_1",
    )

    assert unchecked.replace is False
    assert wrong_currency.reason == "currency_changed"
    assert wrong_product.reason == "product_changed"


def test_detector_makes_no_provider_call_without_price_id(provider):
    detector = PriceDriftDetector(billing_provider=provider)

    assert detector.should_replace(None, 4900, "month") is True
    assert provider.calls == []


def test_detector_treats_missing_price_as_replaceable(provider):
    detector = PriceDriftDetector(billing_provider=provider)

    assert detector.should_replace("price_gone", 4900, "month") is True
    assert provider.calls_to("get_price") == [("get_price", "price_gone")]


def test_detector_reuses_valid_price_without_mutating(provider):
    price_id = provider.add_price(product_id="prod_1", unit_amount=4900, interval="month")
    detector = PriceDriftDetector(billing_provider=provider)

    assert detector.should_replace(price_id, 4900, "month", currency="usd", product_id="prod_1") is False
    assert [call[0] for call in provider.calls] == ["get_price"]
    assert provider.prices[price_id].active is True
