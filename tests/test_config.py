from __future__ import annotations

import pytest

from plansync.shared.config import get_settings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "APP_URL",
        "BILLING_CURRENCY",
        "CHECKOUT_SUCCESS_URL",
        "CHECKOUT_CANCEL_URL",
        "PORTAL_RETURN_URL",
        "TRIAL_PLAN_IDS",
        "TRIAL_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_derive_redirect_urls_from_app_url(clean_env):
    clean_env.setenv("APP_URL", "https://app.example.com/")

    settings = get_settings()

    assert settings.checkout_success_url == "https://app.example.com/dashboard?subscription=success"
    assert settings.checkout_cancel_url == "https://app.example.com/pricing?subscription=cancelled"
    assert settings.portal_return_url == "https://app.example.com/dashboard/settings/billing"


def test_settings_defaults(clean_env):
    settings = get_settings()

    assert settings.billing_currency == "usd"
    assert settings.trial_plan_ids == frozenset({"individual"})
    assert settings.trial_days == 7


def test_settings_parse_trial_plan_ids_and_currency(clean_env):
    clean_env.setenv("TRIAL_PLAN_IDS", "individual, starter ,")
    clean_env.setenv("BILLING_CURRENCY", "EUR")

    settings = get_settings()

    assert settings.trial_plan_ids == frozenset({"individual", "starter"})
    assert settings.billing_currency == "eur"
