from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TenantBillingRecord:
    tenant_id: str
    customer_id: str | None
