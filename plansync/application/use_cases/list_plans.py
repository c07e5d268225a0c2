from __future__ import annotations

from plansync.application.dto.plans import PlanListItemOutput
from plansync.application.ports.plan_catalog_port import PlanCatalogPort


class ListPlansUseCase:
    def __init__(self, *, plan_catalog: PlanCatalogPort):
        self._plan_catalog = plan_catalog

    def execute(self, *, include_archived: bool = False) -> list[PlanListItemOutput]:
        plans = self._plan_catalog.list_plans(include_archived=include_archived)
        return [
            PlanListItemOutput(
                id=plan.id,
                name=plan.name,
                description=plan.description,
                monthly_amount=plan.monthly_amount,
                annual_amount=plan.annual_amount,
                features=list(plan.features),
                is_featured=plan.is_featured,
                is_archived=plan.is_archived,
                monthly_purchasable=bool(plan.price_id_monthly),
                annual_purchasable=bool(plan.price_id_annually),
            )
            for plan in plans
        ]
