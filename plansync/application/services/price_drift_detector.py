from __future__ import annotations

import logging

from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.domain.services.price_drift import PriceDriftDecision, evaluate_price_drift


logger = logging.getLogger(__name__)


class PriceDriftDetector:
    def __init__(self, *, billing_provider: BillingProviderPort):
        self._billing_provider = billing_provider

    def should_replace(
        self,
        existing_price_id: str | None,
        desired_amount: int,
        desired_interval: str,
        *,
        currency: str | None = None,
        product_id: str | None = None,
    ) -> bool:
        return self.evaluate(
            existing_price_id,
            desired_amount,
            desired_interval,
            currency=currency,
            product_id=product_id,
        ).replace

    def evaluate(
        self,
        existing_price_id: str | None,
        desired_amount: int,
        desired_interval: str,
        *,
        currency: str | None = None,
        product_id: str | None = None,
    ) -> PriceDriftDecision:
        existing_price = None
        if existing_price_id:
            existing_price = self._billing_provider.get_price(price_id=existing_price_id)
            if existing_price is None:
                logger.warning(
                    "price_drift_detector: referenced_price_missing price_id=%s",
                    existing_price_id,
                )

        decision = evaluate_price_drift(
            existing_price_id=existing_price_id,
            existing_price=existing_price,
            desired_amount=desired_amount,
            desired_interval=desired_interval,
            currency=currency,
            product_id=product_id,
        )
        logger.debug(
            "price_drift_detector: decided price_id=%s replace=%s reason=%s",
            existing_price_id,
            decision.replace,
            decision.reason,
        )
        return decision
