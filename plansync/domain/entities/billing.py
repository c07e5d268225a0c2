from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderPrice:
    id: str
    product_id: str | None
    unit_amount: int | None
    currency: str | None
    interval: str | None
    active: bool


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(frozen=True)
class PortalSession:
    url: str
