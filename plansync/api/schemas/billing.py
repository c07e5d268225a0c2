from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CreateCheckoutSessionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    plan_id: str = Field(..., min_length=1, alias="planId")
    billing_cycle: Literal["monthly", "annually"] = Field(..., alias="billingCycle")
    tenant_id: str = Field(..., min_length=1, alias="tenantId")
    success_url: str | None = Field(None, alias="successUrl")
    cancel_url: str | None = Field(None, alias="cancelUrl")


class CreateCheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    session_id: str = Field(..., alias="sessionId")
    url: str


class CreatePortalSessionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    tenant_id: str = Field(..., min_length=1, alias="tenantId")
    return_url: str | None = Field(None, alias="returnUrl")


class CreatePortalSessionResponse(BaseModel):
    success: bool
    url: str
