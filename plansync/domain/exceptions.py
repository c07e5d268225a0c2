from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class PlanInputError(DomainError):
    """Plan definition is invalid."""


class PlanNotFoundError(DomainError):
    """Requested plan does not exist in the catalog."""


class PriceNotConfiguredError(DomainError):
    """Plan exists but has no active price for the requested billing cycle."""


class NoCustomerOnFileError(DomainError):
    """Tenant has no billing provider customer yet."""


class ProviderError(DomainError):
    """Call to the billing provider failed."""


class CatalogWriteError(DomainError):
    """Plan catalog could not be updated."""


class SyncError(DomainError):
    """Plan synchronization failed; the provider or catalog error is the cause."""

    def __init__(self, message: str, *, plan_id: str):
        super().__init__(message)
        self.plan_id = plan_id


class ArchiveError(DomainError):
    """Some prices of an archived product could not be deactivated."""

    def __init__(self, message: str, *, product_id: str, failed_price_ids: list[str]):
        super().__init__(message)
        self.product_id = product_id
        self.failed_price_ids = failed_price_ids
