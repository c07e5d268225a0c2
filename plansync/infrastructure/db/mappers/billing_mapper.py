from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Mapping

from plansync.domain.entities.plan import PlanDefinition
from plansync.domain.entities.tenant import TenantBillingRecord


def _as_str(value: Any) -> str:
    return str(value)


def _as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _as_features(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(str(item) for item in value)


def map_row_to_plan_definition(row: Mapping[str, Any]) -> PlanDefinition:
    return PlanDefinition(
        id=_as_str(row["id"]),
        name=row["name"],
        description=row.get("description"),
        monthly_amount=_as_decimal(row.get("monthly_amount")),
        annual_amount=_as_decimal(row.get("annual_amount")),
        features=_as_features(row.get("features")),
        is_featured=bool(row.get("is_featured", False)),
        is_archived=bool(row.get("is_archived", False)),
        product_id=row.get("stripe_product_id"),
        price_id_monthly=row.get("stripe_price_id_monthly"),
        price_id_annually=row.get("stripe_price_id_annually"),
        last_synced_at=row.get("stripe_last_sync_at"),
    )


def map_row_to_tenant_billing_record(row: Mapping[str, Any]) -> TenantBillingRecord:
    return TenantBillingRecord(
        tenant_id=_as_str(row["tenant_id"]),
        customer_id=row.get("stripe_customer_id"),
    )
