from __future__ import annotations

from typing import Protocol

from plansync.domain.entities.billing import CheckoutSession, PortalSession, ProviderPrice


class BillingProviderPort(Protocol):
    def upsert_product(
        self,
        *,
        product_id: str | None,
        name: str,
        description: str,
        active: bool,
        metadata: dict[str, str],
    ) -> str:
        ...

    def set_product_active(self, *, product_id: str, active: bool) -> None:
        ...

    def create_price(
        self,
        *,
        product_id: str,
        unit_amount: int,
        currency: str,
        interval: str,
        metadata: dict[str, str],
        idempotency_key: str | None = None,
    ) -> str:
        ...

    def get_price(self, *, price_id: str) -> ProviderPrice | None:
        ...

    def set_price_active(self, *, price_id: str, active: bool) -> None:
        ...

    def list_active_prices(self, *, product_id: str) -> list[str]:
        ...

    def create_customer(self, *, tenant_id: str, user_id: str | None, email: str | None) -> str:
        ...

    def create_checkout_session(
        self,
        *,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        subscription_metadata: dict[str, str],
        trial_days: int | None,
    ) -> CheckoutSession:
        ...

    def create_portal_session(self, *, customer_id: str, return_url: str) -> PortalSession:
        ...
