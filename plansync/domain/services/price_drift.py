from __future__ import annotations

from dataclasses import dataclass

from plansync.domain.entities.billing import ProviderPrice


@dataclass(frozen=True)
class PriceDriftDecision:
    replace: bool
    reason: str


def evaluate_price_drift(
    *,
    existing_price_id: str | None,
    existing_price: ProviderPrice | None,
    desired_amount: int,
    desired_interval: str,
    currency: str | None = None,
    product_id: str | None = None,
) -> PriceDriftDecision:
    """Decide whether the referenced price can back the desired amount and interval.

    Rows are checked in order and the first match wins. ``existing_price`` is
    the provider lookup result for ``existing_price_id``; ``None`` means the
    lookup found nothing. ``currency`` and ``product_id`` are only compared
    when given.
    """
    if not existing_price_id:
        return PriceDriftDecision(replace=True, reason="missing")
    if existing_price is None:
        return PriceDriftDecision(replace=True, reason="not_found")
    if not existing_price.active:
        return PriceDriftDecision(replace=True, reason="inactive")
    if existing_price.unit_amount != desired_amount:
        return PriceDriftDecision(replace=True, reason="amount_changed")
    if existing_price.interval != desired_interval:
        return PriceDriftDecision(replace=True, reason="interval_changed")
    if currency is not None and (existing_price.currency or "").lower() != currency.lower():
        return PriceDriftDecision(replace=True, reason="currency_changed")
    if product_id is not None and existing_price.product_id != product_id:
        return PriceDriftDecision(replace=True, reason="product_changed")
    return PriceDriftDecision(replace=False, reason="valid")
