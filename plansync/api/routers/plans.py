from __future__ import annotations

from fastapi import APIRouter, Depends

from plansync.api.deps import get_list_plans_use_case
from plansync.api.schemas.plans import PlanPriceResponse, PlanResponse
from plansync.application.use_cases.list_plans import ListPlansUseCase


router = APIRouter()


@router.get("/v1/plans", response_model=list[PlanResponse])
def list_plans(use_case: ListPlansUseCase = Depends(get_list_plans_use_case)):
    return [
        PlanResponse(
            id=item.id,
            name=item.name,
            description=item.description,
            price=PlanPriceResponse(monthly=item.monthly_amount, annually=item.annual_amount),
            features=item.features,
            is_featured=item.is_featured,
            is_archived=item.is_archived,
            monthly_purchasable=item.monthly_purchasable,
            annual_purchasable=item.annual_purchasable,
        )
        for item in use_case.execute()
    ]
