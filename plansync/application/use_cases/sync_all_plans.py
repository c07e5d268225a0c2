from __future__ import annotations

import logging

from plansync.application.dto.plans import SyncAllPlansItem, SyncAllPlansOutput, SyncPlanInput
from plansync.application.ports.plan_catalog_port import PlanCatalogPort
from plansync.application.use_cases.sync_plan import SyncPlanUseCase
from plansync.domain.exceptions import SyncError


logger = logging.getLogger(__name__)


class SyncAllPlansUseCase:
    def __init__(self, *, plan_catalog: PlanCatalogPort, sync_plan_use_case: SyncPlanUseCase):
        self._plan_catalog = plan_catalog
        self._sync_plan_use_case = sync_plan_use_case

    def execute(self) -> SyncAllPlansOutput:
        # Archived plans are included so their products get deactivated too.
        plans = self._plan_catalog.list_plans(include_archived=True)
        items: list[SyncAllPlansItem] = []
        for plan in plans:
            try:
                output = self._sync_plan_use_case.execute(SyncPlanInput(plan=plan))
            except SyncError as exc:
                items.append(
                    SyncAllPlansItem(
                        plan_id=plan.id,
                        success=False,
                        product_id=plan.product_id,
                        price_id_monthly=plan.price_id_monthly,
                        price_id_annually=plan.price_id_annually,
                        error=str(exc),
                    )
                )
                continue
            items.append(
                SyncAllPlansItem(
                    plan_id=output.plan_id,
                    success=True,
                    product_id=output.product_id,
                    price_id_monthly=output.price_id_monthly,
                    price_id_annually=output.price_id_annually,
                    error=None,
                )
            )

        failed = sum(1 for item in items if not item.success)
        logger.info("sync_all_plans: finished total=%s failed=%s", len(items), failed)
        return SyncAllPlansOutput(items=items)
