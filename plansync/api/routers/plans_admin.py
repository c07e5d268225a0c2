from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from plansync.api.deps import (
    get_archive_plan_use_case,
    get_sync_all_plans_use_case,
    get_sync_plan_use_case,
    require_admin,
)
from plansync.api.schemas.plans import (
    ArchivePlanRequest,
    ArchivePlanResponse,
    PlanDefinitionRequest,
    SyncAllPlansItemResponse,
    SyncAllPlansResponse,
    SyncPlanRequest,
    SyncPlanResponse,
)
from plansync.application.dto.auth import AccessTokenPayload
from plansync.application.dto.plans import ArchivePlanInput, SyncPlanInput
from plansync.application.use_cases.archive_plan import ArchivePlanUseCase
from plansync.application.use_cases.sync_all_plans import SyncAllPlansUseCase
from plansync.application.use_cases.sync_plan import SyncPlanUseCase
from plansync.domain.entities.plan import PlanDefinition
from plansync.domain.exceptions import ArchiveError, PlanInputError, ProviderError, SyncError


router = APIRouter()
logger = logging.getLogger(__name__)


def _to_plan_definition(req: PlanDefinitionRequest) -> PlanDefinition:
    return PlanDefinition(
        id=req.id,
        name=req.name,
        description=req.description,
        monthly_amount=req.price.monthly,
        annual_amount=req.price.annually,
        features=tuple(req.features),
        is_featured=req.is_featured,
        is_archived=req.is_archived,
        product_id=req.stripe_product_id or None,
        price_id_monthly=req.stripe_price_id_monthly or None,
        price_id_annually=req.stripe_price_id_annually or None,
        last_synced_at=None,
    )


def _failure(status_code: int, model) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.post(
    "/v1/admin/plans/sync",
    response_model=SyncPlanResponse,
    response_model_exclude_none=True,
)
def sync_plan(
    req: SyncPlanRequest,
    principal: AccessTokenPayload = Depends(require_admin),
    use_case: SyncPlanUseCase = Depends(get_sync_plan_use_case),
):
    try:
        output = use_case.execute(SyncPlanInput(plan=_to_plan_definition(req.plan)))
    except PlanInputError as exc:
        return _failure(422, SyncPlanResponse(success=False, error=str(exc)))
    except SyncError as exc:
        logger.warning(
            "plans_admin_router: sync_failed plan_id=%s admin=%s detail=%s",
            exc.plan_id,
            principal.user_id,
            exc,
        )
        return _failure(502, SyncPlanResponse(success=False, error=str(exc)))

    return SyncPlanResponse(
        success=True,
        product_id=output.product_id,
        price_id_monthly=output.price_id_monthly,
        price_id_annually=output.price_id_annually,
    )


@router.post(
    "/v1/admin/plans/sync-all",
    response_model=SyncAllPlansResponse,
    response_model_exclude_none=True,
)
def sync_all_plans(
    _principal: AccessTokenPayload = Depends(require_admin),
    use_case: SyncAllPlansUseCase = Depends(get_sync_all_plans_use_case),
):
    output = use_case.execute()
    return SyncAllPlansResponse(
        success=output.success,
        results=[
            SyncAllPlansItemResponse(
                plan_id=item.plan_id,
                success=item.success,
                product_id=item.product_id,
                price_id_monthly=item.price_id_monthly,
                price_id_annually=item.price_id_annually,
                error=item.error,
            )
            for item in output.items
        ],
    )


@router.post(
    "/v1/admin/plans/archive",
    response_model=ArchivePlanResponse,
    response_model_exclude_none=True,
)
def archive_plan(
    req: ArchivePlanRequest,
    principal: AccessTokenPayload = Depends(require_admin),
    use_case: ArchivePlanUseCase = Depends(get_archive_plan_use_case),
):
    try:
        use_case.execute(ArchivePlanInput(product_id=req.product_id))
    except PlanInputError as exc:
        return _failure(422, ArchivePlanResponse(success=False, error=str(exc)))
    except ArchiveError as exc:
        logger.warning(
            "plans_admin_router: archive_partial_failure product_id=%s admin=%s failed=%s",
            exc.product_id,
            principal.user_id,
            exc.failed_price_ids,
        )
        return _failure(
            502,
            ArchivePlanResponse(success=False, failed_price_ids=exc.failed_price_ids, error=str(exc)),
        )
    except ProviderError as exc:
        logger.warning(
            "plans_admin_router: archive_failed product_id=%s admin=%s detail=%s",
            req.product_id,
            principal.user_id,
            exc,
        )
        return _failure(502, ArchivePlanResponse(success=False, error=str(exc)))

    return ArchivePlanResponse(success=True)
