from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from plansync.api.deps import (
    get_create_checkout_session_use_case,
    get_create_portal_session_use_case,
    get_current_principal,
)
from plansync.api.schemas.billing import (
    CreateCheckoutSessionRequest,
    CreateCheckoutSessionResponse,
    CreatePortalSessionRequest,
    CreatePortalSessionResponse,
)
from plansync.application.dto.auth import AccessTokenPayload
from plansync.application.dto.billing import CreateCheckoutSessionInput, CreatePortalSessionInput
from plansync.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from plansync.application.use_cases.create_portal_session import CreatePortalSessionUseCase
from plansync.domain.exceptions import (
    NoCustomerOnFileError,
    PlanInputError,
    PlanNotFoundError,
    PriceNotConfiguredError,
    ProviderError,
)


router = APIRouter()
logger = logging.getLogger(__name__)


def _ensure_tenant_access(principal: AccessTokenPayload, tenant_id: str) -> None:
    if not principal.can_manage_tenant(tenant_id):
        logger.warning(
            "billing_router: tenant_forbidden user_id=%s tenant_id=%s",
            principal.user_id,
            tenant_id,
        )
        raise HTTPException(status_code=403, detail="Not allowed to manage billing for this tenant.")


@router.post("/v1/billing/checkout-session", response_model=CreateCheckoutSessionResponse)
def create_checkout_session(
    req: CreateCheckoutSessionRequest,
    principal: AccessTokenPayload = Depends(get_current_principal),
    use_case: CreateCheckoutSessionUseCase = Depends(get_create_checkout_session_use_case),
):
    _ensure_tenant_access(principal, req.tenant_id)
    try:
        output = use_case.execute(
            CreateCheckoutSessionInput(
                tenant_id=req.tenant_id,
                plan_id=req.plan_id,
                billing_cycle=req.billing_cycle,
                user_id=principal.user_id,
                user_email=principal.email,
                success_url=req.success_url,
                cancel_url=req.cancel_url,
            )
        )
    except PlanInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except PlanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PriceNotConfiguredError as exc:
        logger.info(
            "billing_router: plan_not_purchasable plan_id=%s billing_cycle=%s",
            req.plan_id,
            req.billing_cycle,
        )
        raise HTTPException(status_code=409, detail="This plan is not currently purchasable.") from exc
    except ProviderError as exc:
        logger.warning(
            "billing_router: checkout_failed tenant_id=%s plan_id=%s detail=%s",
            req.tenant_id,
            req.plan_id,
            exc,
        )
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return CreateCheckoutSessionResponse(
        success=True,
        session_id=output.checkout_session_id,
        url=output.checkout_url,
    )


@router.post("/v1/billing/portal-session", response_model=CreatePortalSessionResponse)
def create_portal_session(
    req: CreatePortalSessionRequest,
    principal: AccessTokenPayload = Depends(get_current_principal),
    use_case: CreatePortalSessionUseCase = Depends(get_create_portal_session_use_case),
):
    _ensure_tenant_access(principal, req.tenant_id)
    try:
        output = use_case.execute(
            CreatePortalSessionInput(
                tenant_id=req.tenant_id,
                return_url=req.return_url,
            )
        )
    except PlanInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except NoCustomerOnFileError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ProviderError as exc:
        logger.warning("billing_router: portal_failed tenant_id=%s detail=%s", req.tenant_id, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return CreatePortalSessionResponse(success=True, url=output.portal_url)
