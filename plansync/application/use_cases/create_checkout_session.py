from __future__ import annotations

import logging

from plansync.application.dto.billing import CreateCheckoutSessionInput, CreateCheckoutSessionOutput
from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.application.ports.plan_catalog_port import PlanCatalogPort
from plansync.application.ports.tenant_billing_port import TenantBillingPort
from plansync.domain.entities.plan import BILLING_CYCLES
from plansync.domain.exceptions import PlanInputError, PlanNotFoundError, PriceNotConfiguredError
from plansync.domain.services.plan_pricing import price_id_for_cycle


logger = logging.getLogger(__name__)


class CreateCheckoutSessionUseCase:
    def __init__(
        self,
        *,
        plan_catalog: PlanCatalogPort,
        tenant_billing: TenantBillingPort,
        billing_provider: BillingProviderPort,
        default_success_url: str,
        default_cancel_url: str,
        trial_plan_ids: frozenset[str] = frozenset(),
        trial_days: int = 7,
    ):
        self._plan_catalog = plan_catalog
        self._tenant_billing = tenant_billing
        self._billing_provider = billing_provider
        self._default_success_url = default_success_url
        self._default_cancel_url = default_cancel_url
        self._trial_plan_ids = trial_plan_ids
        self._trial_days = trial_days

    def execute(self, command: CreateCheckoutSessionInput) -> CreateCheckoutSessionOutput:
        if not command.tenant_id:
            raise PlanInputError("tenantId is required.")
        if command.billing_cycle not in BILLING_CYCLES:
            raise PlanInputError(f"Unsupported billing cycle '{command.billing_cycle}'.")

        plan = self._plan_catalog.get_plan_by_id(plan_id=command.plan_id)
        if plan is None:
            raise PlanNotFoundError(f"Plan '{command.plan_id}' not found.")
        if plan.is_archived:
            raise PriceNotConfiguredError(f"Plan '{plan.id}' is archived.")

        price_id = price_id_for_cycle(plan, command.billing_cycle)
        if not price_id:
            raise PriceNotConfiguredError(
                f"Plan '{plan.id}' has no price configured for {command.billing_cycle} billing."
            )

        customer_id = self._resolve_customer_id(command)
        trial_days = self._trial_days if plan.id in self._trial_plan_ids else None

        session = self._billing_provider.create_checkout_session(
            customer_id=customer_id,
            price_id=price_id,
            success_url=command.success_url or self._default_success_url,
            cancel_url=command.cancel_url or self._default_cancel_url,
            metadata={
                "tenantId": command.tenant_id,
                "planId": plan.id,
                "billingCycle": command.billing_cycle,
            },
            subscription_metadata={
                "tenantId": command.tenant_id,
                "planId": plan.id,
            },
            trial_days=trial_days,
        )
        logger.info(
            "create_checkout_session: created tenant_id=%s plan_id=%s billing_cycle=%s session_id=%s",
            command.tenant_id,
            plan.id,
            command.billing_cycle,
            session.id,
        )
        return CreateCheckoutSessionOutput(
            checkout_session_id=session.id,
            checkout_url=session.url,
            customer_id=customer_id,
            trial_days=trial_days,
        )

    def _resolve_customer_id(self, command: CreateCheckoutSessionInput) -> str:
        record = self._tenant_billing.get_tenant_billing_record(tenant_id=command.tenant_id)
        if record is not None and record.customer_id:
            return record.customer_id

        customer_id = self._billing_provider.create_customer(
            tenant_id=command.tenant_id,
            user_id=command.user_id,
            email=command.user_email,
        )
        # Persisted before the session is created so a retry reuses this customer.
        stored_customer_id = self._tenant_billing.save_customer_id(
            tenant_id=command.tenant_id,
            customer_id=customer_id,
        )
        if stored_customer_id != customer_id:
            logger.warning(
                "create_checkout_session: customer_already_on_file tenant_id=%s kept=%s discarded=%s",
                command.tenant_id,
                stored_customer_id,
                customer_id,
            )
        else:
            logger.info(
                "create_checkout_session: customer_created tenant_id=%s customer_id=%s",
                command.tenant_id,
                customer_id,
            )
        return stored_customer_id
