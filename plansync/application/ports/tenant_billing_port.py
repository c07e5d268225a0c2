from __future__ import annotations

from typing import Protocol

from plansync.domain.entities.tenant import TenantBillingRecord


class TenantBillingPort(Protocol):
    def get_tenant_billing_record(self, *, tenant_id: str) -> TenantBillingRecord | None:
        ...

    def save_customer_id(self, *, tenant_id: str, customer_id: str) -> str:
        """Store the customer id unless one is already set; return the stored id."""
        ...
