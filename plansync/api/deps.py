from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from plansync.application.dto.auth import AccessTokenPayload
from plansync.application.use_cases.archive_plan import ArchivePlanUseCase
from plansync.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from plansync.application.use_cases.create_portal_session import CreatePortalSessionUseCase
from plansync.application.use_cases.list_plans import ListPlansUseCase
from plansync.application.use_cases.sync_all_plans import SyncAllPlansUseCase
from plansync.application.use_cases.sync_plan import SyncPlanUseCase
from plansync.infrastructure.clients.stripe_client import StripeClient
from plansync.infrastructure.db.engine import get_engine
from plansync.infrastructure.db.repositories.plan_catalog_repository import SqlPlanCatalogRepository
from plansync.infrastructure.db.repositories.tenant_billing_repository import SqlTenantBillingRepository
from plansync.infrastructure.security.token_service import JwtTokenService
from plansync.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


@lru_cache(maxsize=1)
def _get_stripe_client() -> StripeClient:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise HTTPException(status_code=500, detail="STRIPE_SECRET_KEY is required.")
    return StripeClient(secret_key=settings.stripe_secret_key)


@lru_cache(maxsize=1)
def _get_token_service() -> JwtTokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        raise HTTPException(status_code=500, detail="JWT_SECRET is required.")
    return JwtTokenService(jwt_secret=settings.jwt_secret)


def _get_plan_catalog_repository() -> SqlPlanCatalogRepository:
    return SqlPlanCatalogRepository(_get_db_engine())


def _get_tenant_billing_repository() -> SqlTenantBillingRepository:
    return SqlTenantBillingRepository(_get_db_engine())


def get_sync_plan_use_case() -> SyncPlanUseCase:
    settings = get_settings()
    return SyncPlanUseCase(
        billing_provider=_get_stripe_client(),
        plan_catalog=_get_plan_catalog_repository(),
        currency=settings.billing_currency,
        feature_limit=settings.plan_metadata_feature_limit,
    )


def get_sync_all_plans_use_case() -> SyncAllPlansUseCase:
    return SyncAllPlansUseCase(
        plan_catalog=_get_plan_catalog_repository(),
        sync_plan_use_case=get_sync_plan_use_case(),
    )


def get_archive_plan_use_case() -> ArchivePlanUseCase:
    return ArchivePlanUseCase(billing_provider=_get_stripe_client())


def get_list_plans_use_case() -> ListPlansUseCase:
    return ListPlansUseCase(plan_catalog=_get_plan_catalog_repository())


def get_create_checkout_session_use_case() -> CreateCheckoutSessionUseCase:
    settings = get_settings()
    return CreateCheckoutSessionUseCase(
        plan_catalog=_get_plan_catalog_repository(),
        tenant_billing=_get_tenant_billing_repository(),
        billing_provider=_get_stripe_client(),
        default_success_url=settings.checkout_success_url,
        default_cancel_url=settings.checkout_cancel_url,
        trial_plan_ids=settings.trial_plan_ids,
        trial_days=settings.trial_days,
    )


def get_create_portal_session_use_case() -> CreatePortalSessionUseCase:
    settings = get_settings()
    return CreatePortalSessionUseCase(
        tenant_billing=_get_tenant_billing_repository(),
        billing_provider=_get_stripe_client(),
        default_return_url=settings.portal_return_url,
    )


def get_current_principal(
    authorization: str = Header(...),
) -> AccessTokenPayload:
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header.")
    token = authorization.replace("Bearer ", "", 1).strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing access token.")

    try:
        return _get_token_service().decode_access_token(token=token)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc


def require_admin(
    principal: AccessTokenPayload = Depends(get_current_principal),
) -> AccessTokenPayload:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin role is required.")
    return principal
