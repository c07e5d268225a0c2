from __future__ import annotations

from typing import Protocol

from plansync.domain.entities.plan import PlanDefinition, PlanSyncState


class PlanCatalogPort(Protocol):
    def get_plan_by_id(self, *, plan_id: str) -> PlanDefinition | None:
        ...

    def list_plans(self, *, include_archived: bool) -> list[PlanDefinition]:
        ...

    def merge_plan_sync_state(self, *, plan: PlanDefinition, state: PlanSyncState) -> None:
        ...
