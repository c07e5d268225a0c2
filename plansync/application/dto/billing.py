from __future__ import annotations

from dataclasses import dataclass

from plansync.domain.entities.plan import BillingCycle


@dataclass(frozen=True)
class CreateCheckoutSessionInput:
    tenant_id: str
    plan_id: str
    billing_cycle: BillingCycle
    user_id: str | None
    user_email: str | None
    success_url: str | None = None
    cancel_url: str | None = None


@dataclass(frozen=True)
class CreateCheckoutSessionOutput:
    checkout_session_id: str
    checkout_url: str
    customer_id: str
    trial_days: int | None


@dataclass(frozen=True)
class CreatePortalSessionInput:
    tenant_id: str
    return_url: str | None = None


@dataclass(frozen=True)
class CreatePortalSessionOutput:
    portal_url: str
