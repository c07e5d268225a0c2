from __future__ import annotations

import pytest

from plansync.application.dto.billing import CreateCheckoutSessionInput
from plansync.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from plansync.domain.entities.tenant import TenantBillingRecord
from plansync.domain.exceptions import PlanNotFoundError, PriceNotConfiguredError, ProviderError


def _use_case(provider, catalog, tenants, trial_plan_ids=frozenset({"individual"})):
    return CreateCheckoutSessionUseCase(
        plan_catalog=catalog,
        tenant_billing=tenants,
        billing_provider=provider,
        default_success_url="https://app.example.com/dashboard?subscription=success",
        default_cancel_url="https://app.example.com/pricing?subscription=cancelled",
        trial_plan_ids=trial_plan_ids,
        trial_days=7,
    )


def _command(**overrides) -> CreateCheckoutSessionInput:
    values = {
        "tenant_id": "tenant-1",
        "plan_id": "pro",
        "billing_cycle": "monthly",
        "user_id": "user-1",
        "user_email": "owner@example.com",
    }
    values.update(overrides)
    return CreateCheckoutSessionInput(**values)


def test_checkout_creates_customer_once_and_reuses_it(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m", price_id_annually="price_y")
    use_case = _use_case(provider, catalog, tenants)

    first = use_case.execute(_command())
    second = use_case.execute(_command(billing_cycle="annually"))

    assert len(provider.calls_to("create_customer")) == 1
    assert first.customer_id == second.customer_id
    assert tenants.records["tenant-1"].customer_id == first.customer_id
    assert provider.customers[first.customer_id] == {
        "tenant_id": "tenant-1",
        "user_id": "user-1",
        "email": "owner@example.com",
    }
    sessions = [call[1] for call in provider.calls_to("create_checkout_session")]
    assert [session["price_id"] for session in sessions] == ["price_m", "price_y"]


def test_checkout_persists_customer_before_creating_session(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m")
    provider.fail_on[("create_checkout_session", None)] = "api down"
    use_case = _use_case(provider, catalog, tenants)

    with pytest.raises(ProviderError):
        use_case.execute(_command())

    customer_id = tenants.records["tenant-1"].customer_id
    assert customer_id is not None
    provider.fail_on.clear()

    output = use_case.execute(_command())

    assert output.customer_id == customer_id
    assert len(provider.calls_to("create_customer")) == 1


def test_checkout_uses_existing_customer(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m")
    tenants.records["tenant-1"] = TenantBillingRecord(tenant_id="tenant-1", customer_id="cus_existing")

    output = _use_case(provider, catalog, tenants).execute(_command())

    assert output.customer_id == "cus_existing"
    assert provider.calls_to("create_customer") == []
    assert tenants.saves == []


def test_checkout_session_metadata_and_default_urls(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m")

    output = _use_case(provider, catalog, tenants).execute(_command())

    session = provider.calls_to("create_checkout_session")[0][1]
    assert session["metadata"] == {"tenantId": "tenant-1", "planId": "pro", "billingCycle": "monthly"}
    assert session["subscription_metadata"] == {"tenantId": "tenant-1", "planId": "pro"}
    assert session["success_url"] == "https://app.example.com/dashboard?subscription=success"
    assert session["cancel_url"] == "https://app.example.com/pricing?subscription=cancelled"
    assert session["trial_days"] is None
    assert output.checkout_url.startswith("https://checkout.example.com/")


def test_checkout_respects_caller_urls(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m")

    _use_case(provider, catalog, tenants).execute(
        _command(success_url="https://tenant.example.com/ok", cancel_url="https://tenant.example.com/no")
    )

    session = provider.calls_to("create_checkout_session")[0][1]
    assert session["success_url"] == "https://tenant.example.com/ok"
    assert session["cancel_url"] == "https://tenant.example.com/no"


def test_checkout_applies_trial_for_allow_listed_plan(provider, catalog, tenants, plan_factory):
    catalog.plans["individual"] = plan_factory(id="individual", price_id_monthly="price_ind")

    output = _use_case(provider, catalog, tenants).execute(_command(plan_id="individual"))

    assert output.trial_days == 7
    assert provider.calls_to("create_checkout_session")[0][1]["trial_days"] == 7


def test_checkout_without_price_for_cycle_makes_no_provider_calls(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly=None, price_id_annually="price_y")

    with pytest.raises(PriceNotConfiguredError):
        _use_case(provider, catalog, tenants).execute(_command(billing_cycle="monthly"))

    assert provider.calls == []
    assert tenants.saves == []


def test_checkout_unknown_plan(provider, catalog, tenants):
    with pytest.raises(PlanNotFoundError):
        _use_case(provider, catalog, tenants).execute(_command(plan_id="missing"))

    assert provider.calls == []


def test_checkout_keeps_customer_stored_by_concurrent_request(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(price_id_monthly="price_m")

    class RacingTenantBilling(type(tenants)):
        def get_tenant_billing_record(self, *, tenant_id):
            return None

        def save_customer_id(self, *, tenant_id, customer_id):
            self.saves.append((tenant_id, customer_id))
            return "cus_winner"

    output = _use_case(provider, catalog, RacingTenantBilling()).execute(_command())

    assert output.customer_id == "cus_winner"
    assert provider.calls_to("create_checkout_session")[0][1]["customer_id"] == "cus_winner"


def test_checkout_archived_plan_is_not_purchasable(provider, catalog, tenants, plan_factory):
    catalog.plans["pro"] = plan_factory(is_archived=True, price_id_monthly="price_m", price_id_annually="price_y")

    with pytest.raises(PriceNotConfiguredError):
        _use_case(provider, catalog, tenants).execute(_command())

    assert provider.calls == []
    assert tenants.saves == []
