from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from plansync.application.dto.plans import SyncPlanInput, SyncPlanOutput
from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.application.ports.plan_catalog_port import PlanCatalogPort
from plansync.application.services.price_drift_detector import PriceDriftDetector
from plansync.application.use_cases.common import utcnow
from plansync.domain.entities.plan import BILLING_CYCLES, BillingCycle, PlanDefinition, PlanSyncState
from plansync.domain.exceptions import CatalogWriteError, PlanInputError, ProviderError, SyncError
from plansync.domain.services.plan_pricing import (
    CYCLE_INTERVALS,
    build_price_idempotency_key,
    build_price_metadata,
    build_product_description,
    build_product_metadata,
    cycle_amount_minor_units,
    price_id_for_cycle,
)


logger = logging.getLogger(__name__)


class SyncPlanUseCase:
    """Push a plan definition to the billing provider and record the resulting ids.

    Provider prices are immutable, so a changed amount is handled by creating a
    new price and archiving the superseded one. The catalog is written last,
    after every provider mutation has succeeded.
    """

    def __init__(
        self,
        *,
        billing_provider: BillingProviderPort,
        plan_catalog: PlanCatalogPort,
        currency: str,
        feature_limit: int = 15,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._billing_provider = billing_provider
        self._plan_catalog = plan_catalog
        self._currency = currency.lower()
        self._feature_limit = feature_limit
        self._clock = clock
        self._drift_detector = PriceDriftDetector(billing_provider=billing_provider)

    def execute(self, command: SyncPlanInput) -> SyncPlanOutput:
        plan = command.plan
        _validate_plan(plan)

        try:
            product_id = self._upsert_product(plan)
            price_ids: dict[BillingCycle, str | None] = {}
            for cycle in BILLING_CYCLES:
                price_ids[cycle] = self._sync_cycle_price(plan=plan, product_id=product_id, cycle=cycle)
        except ProviderError as exc:
            logger.error("sync_plan: provider_error plan_id=%s detail=%s", plan.id, exc)
            raise SyncError(f"Failed to sync plan '{plan.id}': {exc}", plan_id=plan.id) from exc

        state = PlanSyncState(
            product_id=product_id,
            price_id_monthly=price_ids["monthly"],
            price_id_annually=price_ids["annually"],
            last_synced_at=self._clock(),
        )
        try:
            self._plan_catalog.merge_plan_sync_state(plan=plan, state=state)
        except CatalogWriteError as exc:
            logger.error("sync_plan: catalog_write_failed plan_id=%s detail=%s", plan.id, exc)
            raise SyncError(f"Failed to record sync state for plan '{plan.id}': {exc}", plan_id=plan.id) from exc

        logger.info(
            "sync_plan: synced plan_id=%s product_id=%s price_id_monthly=%s price_id_annually=%s",
            plan.id,
            state.product_id,
            state.price_id_monthly,
            state.price_id_annually,
        )
        return SyncPlanOutput(
            plan_id=plan.id,
            product_id=state.product_id,
            price_id_monthly=state.price_id_monthly,
            price_id_annually=state.price_id_annually,
            synced_at=state.last_synced_at,
        )

    def _upsert_product(self, plan: PlanDefinition) -> str:
        product_id = self._billing_provider.upsert_product(
            product_id=plan.product_id,
            name=plan.name,
            description=build_product_description(plan),
            active=not plan.is_archived,
            metadata=build_product_metadata(plan, feature_limit=self._feature_limit),
        )
        if product_id != plan.product_id:
            logger.info("sync_plan: product_created plan_id=%s product_id=%s", plan.id, product_id)
        return product_id

    def _sync_cycle_price(self, *, plan: PlanDefinition, product_id: str, cycle: BillingCycle) -> str | None:
        existing_price_id = price_id_for_cycle(plan, cycle)
        amount = cycle_amount_minor_units(plan, cycle)
        interval = CYCLE_INTERVALS[cycle]

        if amount == 0:
            # A zero-amount cycle has no purchasable price.
            if existing_price_id:
                self._archive_superseded_price(plan_id=plan.id, cycle=cycle, price_id=existing_price_id)
            return None

        needs_new_price = self._drift_detector.should_replace(
            existing_price_id,
            amount,
            interval,
            currency=self._currency,
            product_id=product_id,
        )
        if not needs_new_price:
            return existing_price_id

        if existing_price_id:
            self._archive_superseded_price(plan_id=plan.id, cycle=cycle, price_id=existing_price_id)

        metadata = build_price_metadata(plan, cycle)
        price_id = self._billing_provider.create_price(
            product_id=product_id,
            unit_amount=amount,
            currency=self._currency,
            interval=interval,
            metadata=metadata,
            idempotency_key=build_price_idempotency_key(
                plan_id=plan.id,
                product_id=product_id,
                cycle=cycle,
                unit_amount=amount,
                currency=self._currency,
                superseded_price_id=existing_price_id,
            ),
        )
        created_price = self._billing_provider.get_price(price_id=price_id)
        if created_price is None or not created_price.active:
            # A replayed key hands back the earlier price, which may have been archived since.
            logger.warning(
                "sync_plan: replayed_price_inactive plan_id=%s cycle=%s price_id=%s",
                plan.id,
                cycle,
                price_id,
            )
            price_id = self._billing_provider.create_price(
                product_id=product_id,
                unit_amount=amount,
                currency=self._currency,
                interval=interval,
                metadata=metadata,
            )
        logger.info(
            "sync_plan: price_created plan_id=%s cycle=%s price_id=%s unit_amount=%s replaced=%s",
            plan.id,
            cycle,
            price_id,
            amount,
            existing_price_id,
        )
        return price_id

    def _archive_superseded_price(self, *, plan_id: str, cycle: BillingCycle, price_id: str) -> None:
        # Best effort; a failure is logged and the sync continues.
        try:
            self._billing_provider.set_price_active(price_id=price_id, active=False)
        except ProviderError as exc:
            logger.warning(
                "sync_plan: archive_superseded_price_failed plan_id=%s cycle=%s price_id=%s detail=%s",
                plan_id,
                cycle,
                price_id,
                exc,
            )


def _validate_plan(plan: PlanDefinition) -> None:
    if not plan.id or not plan.id.strip():
        raise PlanInputError("Plan id is required.")
    if not plan.name or not plan.name.strip():
        raise PlanInputError("Plan name is required.")
    if plan.monthly_amount < 0 or plan.annual_amount < 0:
        raise PlanInputError("Plan amounts must be non-negative.")
