from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest

from plansync.domain.entities.billing import CheckoutSession, PortalSession, ProviderPrice
from plansync.domain.entities.plan import PlanDefinition, PlanSyncState
from plansync.domain.entities.tenant import TenantBillingRecord
from plansync.domain.exceptions import ProviderError


class FakeBillingProvider:
    def __init__(self):
        self.products: dict[str, dict] = {}
        self.prices: dict[str, ProviderPrice] = {}
        self.price_metadata: dict[str, dict[str, str]] = {}
        self.customers: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.fail_on: dict[tuple[str, str | None], str] = {}
        self._idempotent_prices: dict[str, str] = {}
        self._seq = 0

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}_{self._seq}"

    def _maybe_fail(self, operation: str, target: str | None = None) -> None:
        message = self.fail_on.get((operation, target)) or self.fail_on.get((operation, None))
        if message:
            raise ProviderError(message)

    def calls_to(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]

    def add_price(
        self,
        *,
        product_id: str,
        unit_amount: int,
        interval: str,
        active: bool = True,
        currency: str = "usd",
    ) -> str:
        price_id = self._next_id("price")
        self.prices[price_id] = ProviderPrice(
            id=price_id,
            product_id=product_id,
            unit_amount=unit_amount,
            currency=currency,
            interval=interval,
            active=active,
        )
        return price_id

    def upsert_product(self, *, product_id, name, description, active, metadata):
        self.calls.append(("upsert_product", product_id))
        self._maybe_fail("upsert_product", product_id)
        if not product_id:
            product_id = self._next_id("prod")
        self.products[product_id] = {
            "name": name,
            "description": description,
            "active": active,
            "metadata": dict(metadata),
        }
        return product_id

    def set_product_active(self, *, product_id, active):
        self.calls.append(("set_product_active", product_id, active))
        self._maybe_fail("set_product_active", product_id)
        self.products.setdefault(product_id, {})["active"] = active

    def create_price(self, *, product_id, unit_amount, currency, interval, metadata, idempotency_key=None):
        self.calls.append(("create_price", product_id, unit_amount, interval))
        self._maybe_fail("create_price", product_id)
        if idempotency_key and idempotency_key in self._idempotent_prices:
            return self._idempotent_prices[idempotency_key]
        price_id = self.add_price(
            product_id=product_id,
            unit_amount=unit_amount,
            interval=interval,
            currency=currency,
        )
        self.price_metadata[price_id] = dict(metadata)
        if idempotency_key:
            self._idempotent_prices[idempotency_key] = price_id
        return price_id

    def get_price(self, *, price_id):
        self.calls.append(("get_price", price_id))
        self._maybe_fail("get_price", price_id)
        return self.prices.get(price_id)

    def set_price_active(self, *, price_id, active):
        self.calls.append(("set_price_active", price_id, active))
        self._maybe_fail("set_price_active", price_id)
        if price_id in self.prices:
            self.prices[price_id] = replace(self.prices[price_id], active=active)

    def list_active_prices(self, *, product_id):
        self.calls.append(("list_active_prices", product_id))
        self._maybe_fail("list_active_prices", product_id)
        return [
            price.id
            for price in self.prices.values()
            if price.product_id == product_id and price.active
        ]

    def active_prices_for(self, product_id: str, interval: str) -> list[ProviderPrice]:
        return [
            price
            for price in self.prices.values()
            if price.product_id == product_id and price.interval == interval and price.active
        ]

    def create_customer(self, *, tenant_id, user_id, email):
        self.calls.append(("create_customer", tenant_id))
        self._maybe_fail("create_customer", tenant_id)
        customer_id = self._next_id("cus")
        self.customers[customer_id] = {"tenant_id": tenant_id, "user_id": user_id, "email": email}
        return customer_id

    def create_checkout_session(
        self,
        *,
        customer_id,
        price_id,
        success_url,
        cancel_url,
        metadata,
        subscription_metadata,
        trial_days,
    ):
        self.calls.append(
            (
                "create_checkout_session",
                {
                    "customer_id": customer_id,
                    "price_id": price_id,
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                    "metadata": metadata,
                    "subscription_metadata": subscription_metadata,
                    "trial_days": trial_days,
                },
            )
        )
        self._maybe_fail("create_checkout_session", customer_id)
        session_id = self._next_id("cs")
        return CheckoutSession(id=session_id, url=f"https://checkout.example.com/{session_id}")

    def create_portal_session(self, *, customer_id, return_url):
        self.calls.append(("create_portal_session", customer_id, return_url))
        self._maybe_fail("create_portal_session", customer_id)
        return PortalSession(url=f"https://billing.example.com/p/{customer_id}")


class FakePlanCatalog:
    def __init__(self, plans: list[PlanDefinition] | None = None):
        self.plans: dict[str, PlanDefinition] = {plan.id: plan for plan in plans or []}
        self.merges: list[tuple[str, PlanSyncState]] = []

    def get_plan_by_id(self, *, plan_id):
        return self.plans.get(plan_id)

    def list_plans(self, *, include_archived):
        return [plan for plan in self.plans.values() if include_archived or not plan.is_archived]

    def merge_plan_sync_state(self, *, plan, state):
        self.merges.append((plan.id, state))
        current = self.plans.get(plan.id, plan)
        self.plans[plan.id] = replace(
            current,
            product_id=state.product_id,
            price_id_monthly=state.price_id_monthly,
            price_id_annually=state.price_id_annually,
            last_synced_at=state.last_synced_at,
        )


class FakeTenantBilling:
    def __init__(self, records: list[TenantBillingRecord] | None = None):
        self.records: dict[str, TenantBillingRecord] = {record.tenant_id: record for record in records or []}
        self.saves: list[tuple[str, str]] = []

    def get_tenant_billing_record(self, *, tenant_id):
        return self.records.get(tenant_id)

    def save_customer_id(self, *, tenant_id, customer_id):
        self.saves.append((tenant_id, customer_id))
        record = self.records.get(tenant_id)
        if record is not None and record.customer_id:
            return record.customer_id
        self.records[tenant_id] = TenantBillingRecord(tenant_id=tenant_id, customer_id=customer_id)
        return customer_id


def make_plan(**overrides) -> PlanDefinition:
    values = {
        "id": "pro",
        "name": "Pro",
        "description": "Pro plan",
        "monthly_amount": Decimal("49"),
        "annual_amount": Decimal("39"),
        "features": ("Unlimited sites", "Custom domain"),
        "is_featured": True,
        "is_archived": False,
        "product_id": None,
        "price_id_monthly": None,
        "price_id_annually": None,
        "last_synced_at": None,
    }
    values.update(overrides)
    return PlanDefinition(**values)


@pytest.fixture
def provider() -> FakeBillingProvider:
    return FakeBillingProvider()


@pytest.fixture
def catalog() -> FakePlanCatalog:
    return FakePlanCatalog()


@pytest.fixture
def tenants() -> FakeTenantBilling:
    return FakeTenantBilling()


@pytest.fixture
def plan_factory():
    return make_plan
