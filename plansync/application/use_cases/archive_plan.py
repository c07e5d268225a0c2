from __future__ import annotations

import logging

from plansync.application.dto.plans import ArchivePlanInput, ArchivePlanOutput
from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.domain.exceptions import ArchiveError, PlanInputError, ProviderError


logger = logging.getLogger(__name__)


class ArchivePlanUseCase:
    def __init__(self, *, billing_provider: BillingProviderPort):
        self._billing_provider = billing_provider

    def execute(self, command: ArchivePlanInput) -> ArchivePlanOutput:
        product_id = command.product_id.strip()
        if not product_id:
            raise PlanInputError("productId is required.")

        # The product goes inactive first and stays inactive even if a price fails below.
        self._billing_provider.set_product_active(product_id=product_id, active=False)

        archived: list[str] = []
        failed: list[str] = []
        for price_id in self._billing_provider.list_active_prices(product_id=product_id):
            try:
                self._billing_provider.set_price_active(price_id=price_id, active=False)
            except ProviderError as exc:
                logger.warning(
                    "archive_plan: price_archive_failed product_id=%s price_id=%s detail=%s",
                    product_id,
                    price_id,
                    exc,
                )
                failed.append(price_id)
                continue
            archived.append(price_id)

        if failed:
            raise ArchiveError(
                f"Failed to archive {len(failed)} price(s) for product '{product_id}'.",
                product_id=product_id,
                failed_price_ids=failed,
            )

        logger.info("archive_plan: archived product_id=%s prices=%s", product_id, len(archived))
        return ArchivePlanOutput(product_id=product_id, archived_price_ids=archived)
