from __future__ import annotations

from plansync.application.dto.billing import CreatePortalSessionInput, CreatePortalSessionOutput
from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.application.ports.tenant_billing_port import TenantBillingPort
from plansync.domain.exceptions import NoCustomerOnFileError, PlanInputError


class CreatePortalSessionUseCase:
    def __init__(
        self,
        *,
        tenant_billing: TenantBillingPort,
        billing_provider: BillingProviderPort,
        default_return_url: str,
    ):
        self._tenant_billing = tenant_billing
        self._billing_provider = billing_provider
        self._default_return_url = default_return_url

    def execute(self, command: CreatePortalSessionInput) -> CreatePortalSessionOutput:
        if not command.tenant_id:
            raise PlanInputError("tenantId is required.")

        record = self._tenant_billing.get_tenant_billing_record(tenant_id=command.tenant_id)
        if record is None or not record.customer_id:
            raise NoCustomerOnFileError(f"No billing customer on file for tenant '{command.tenant_id}'.")

        session = self._billing_provider.create_portal_session(
            customer_id=record.customer_id,
            return_url=command.return_url or self._default_return_url,
        )
        return CreatePortalSessionOutput(portal_url=session.url)
