from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _csv(name: str, default: str = "") -> frozenset[str]:
    value = _env(name, default) or ""
    return frozenset(item.strip() for item in value.split(",") if item.strip())


def _url(base: str, path: str) -> str:
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    stripe_secret_key: str
    billing_currency: str
    app_url: str
    checkout_success_url: str
    checkout_cancel_url: str
    portal_return_url: str
    trial_plan_ids: frozenset[str]
    trial_days: int
    plan_metadata_feature_limit: int
    jwt_secret: str
    log_level: str


def get_settings() -> Settings:
    app_url = _env("APP_URL", "http://localhost:3000") or "http://localhost:3000"
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        stripe_secret_key=_env("STRIPE_SECRET_KEY", ""),
        billing_currency=(_env("BILLING_CURRENCY", "usd") or "usd").lower(),
        app_url=app_url,
        checkout_success_url=_env("CHECKOUT_SUCCESS_URL") or _url(app_url, "/dashboard?subscription=success"),
        checkout_cancel_url=_env("CHECKOUT_CANCEL_URL") or _url(app_url, "/pricing?subscription=cancelled"),
        portal_return_url=_env("PORTAL_RETURN_URL") or _url(app_url, "/dashboard/settings/billing"),
        trial_plan_ids=_csv("TRIAL_PLAN_IDS", "individual"),
        trial_days=int(_env("TRIAL_DAYS", "7")),
        plan_metadata_feature_limit=int(_env("PLAN_METADATA_FEATURE_LIMIT", "15")),
        jwt_secret=_env("JWT_SECRET", ""),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
