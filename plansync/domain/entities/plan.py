from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal


BillingCycle = Literal["monthly", "annually"]
PriceInterval = Literal["month", "year"]

BILLING_CYCLES: tuple[BillingCycle, ...] = ("monthly", "annually")


@dataclass(frozen=True)
class PlanDefinition:
    id: str
    name: str
    description: str | None
    monthly_amount: Decimal
    annual_amount: Decimal
    features: tuple[str, ...]
    is_featured: bool
    is_archived: bool
    product_id: str | None
    price_id_monthly: str | None
    price_id_annually: str | None
    last_synced_at: datetime | None


@dataclass(frozen=True)
class PlanSyncState:
    product_id: str
    price_id_monthly: str | None
    price_id_annually: str | None
    last_synced_at: datetime
