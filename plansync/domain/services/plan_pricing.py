from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from plansync.domain.entities.plan import BillingCycle, PlanDefinition, PriceInterval
from plansync.domain.exceptions import PlanInputError


CYCLE_INTERVALS: dict[BillingCycle, PriceInterval] = {
    "monthly": "month",
    "annually": "year",
}

METADATA_VALUE_MAX_LENGTH = 500
FEATURES_DELIMITER = ", "


def to_minor_units(amount: Decimal) -> int:
    if amount < 0:
        raise PlanInputError("Amount must be non-negative.")
    return int((amount * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cycle_amount_minor_units(plan: PlanDefinition, cycle: BillingCycle) -> int:
    # The annual price is quoted as a monthly equivalent but billed as a full-year total.
    if cycle == "monthly":
        return to_minor_units(plan.monthly_amount)
    return to_minor_units(plan.annual_amount * 12)


def price_id_for_cycle(plan: PlanDefinition, cycle: BillingCycle) -> str | None:
    if cycle == "monthly":
        return plan.price_id_monthly
    return plan.price_id_annually


def build_product_description(plan: PlanDefinition) -> str:
    return plan.description or f"Plan {plan.name}"


def build_product_metadata(plan: PlanDefinition, *, feature_limit: int = 15) -> dict[str, str]:
    features = FEATURES_DELIMITER.join(plan.features[:feature_limit])
    return {
        "planId": plan.id,
        "isFeatured": "true" if plan.is_featured else "false",
        "features": features[:METADATA_VALUE_MAX_LENGTH],
    }


def build_price_metadata(plan: PlanDefinition, cycle: BillingCycle) -> dict[str, str]:
    metadata = {
        "planId": plan.id,
        "billingCycle": cycle,
    }
    if cycle == "annually":
        metadata["monthlyEquivalent"] = str(plan.annual_amount)
    return metadata


def build_price_idempotency_key(
    *,
    plan_id: str,
    product_id: str,
    cycle: BillingCycle,
    unit_amount: int,
    currency: str,
    superseded_price_id: str | None,
) -> str:
    return f"plan-price:{plan_id}:{product_id}:{cycle}:{unit_amount}:{currency}:{superseded_price_id or 'none'}"
