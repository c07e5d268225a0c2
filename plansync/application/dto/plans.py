from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from plansync.domain.entities.plan import PlanDefinition


@dataclass(frozen=True)
class SyncPlanInput:
    plan: PlanDefinition


@dataclass(frozen=True)
class SyncPlanOutput:
    plan_id: str
    product_id: str
    price_id_monthly: str | None
    price_id_annually: str | None
    synced_at: datetime


@dataclass(frozen=True)
class SyncAllPlansItem:
    plan_id: str
    success: bool
    product_id: str | None
    price_id_monthly: str | None
    price_id_annually: str | None
    error: str | None


@dataclass(frozen=True)
class SyncAllPlansOutput:
    items: list[SyncAllPlansItem]

    @property
    def success(self) -> bool:
        return all(item.success for item in self.items)


@dataclass(frozen=True)
class ArchivePlanInput:
    product_id: str


@dataclass(frozen=True)
class ArchivePlanOutput:
    product_id: str
    archived_price_ids: list[str]


@dataclass(frozen=True)
class PlanListItemOutput:
    id: str
    name: str
    description: str | None
    monthly_amount: Decimal
    annual_amount: Decimal
    features: list[str]
    is_featured: bool
    is_archived: bool
    monthly_purchasable: bool
    annual_purchasable: bool
