from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanPriceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly: Decimal = Field(..., ge=0)
    annually: Decimal = Field(..., ge=0)


class PlanDefinitionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: str | None = None
    price: PlanPriceRequest
    features: list[str] = Field(default_factory=list)
    is_featured: bool = Field(False, alias="isFeatured")
    is_archived: bool = Field(False, alias="isArchived")
    stripe_product_id: str | None = Field(None, alias="stripeProductId")
    stripe_price_id_monthly: str | None = Field(None, alias="stripePriceIdMonthly")
    stripe_price_id_annually: str | None = Field(None, alias="stripePriceIdAnnually")

    @field_validator("features", mode="before")
    @classmethod
    def _null_features(cls, value):
        return [] if value is None else value

    @field_validator("is_featured", "is_archived", mode="before")
    @classmethod
    def _null_flags(cls, value):
        return False if value is None else value


class SyncPlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plan: PlanDefinitionRequest


class SyncPlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    product_id: str | None = Field(None, alias="productId")
    price_id_monthly: str | None = Field(None, alias="priceIdMonthly")
    price_id_annually: str | None = Field(None, alias="priceIdAnnually")
    error: str | None = None


class SyncAllPlansItemResponse(SyncPlanResponse):
    plan_id: str = Field(..., alias="planId")


class SyncAllPlansResponse(BaseModel):
    success: bool
    results: list[SyncAllPlansItemResponse]


class ArchivePlanRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    product_id: str = Field(..., min_length=1, alias="productId")


class ArchivePlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    failed_price_ids: list[str] | None = Field(None, alias="failedPriceIds")
    error: str | None = None


class PlanPriceResponse(BaseModel):
    monthly: Decimal
    annually: Decimal


class PlanResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str | None
    price: PlanPriceResponse
    features: list[str]
    is_featured: bool = Field(..., alias="isFeatured")
    is_archived: bool = Field(..., alias="isArchived")
    monthly_purchasable: bool = Field(..., alias="monthlyPurchasable")
    annual_purchasable: bool = Field(..., alias="annualPurchasable")
