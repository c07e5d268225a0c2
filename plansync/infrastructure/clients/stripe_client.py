from __future__ import annotations

import logging

import stripe

from plansync.application.ports.billing_provider_port import BillingProviderPort
from plansync.domain.entities.billing import CheckoutSession, PortalSession, ProviderPrice
from plansync.domain.exceptions import ProviderError


logger = logging.getLogger(__name__)


class StripeClient(BillingProviderPort):
    def __init__(self, *, secret_key: str):
        # Passed per request instead of setting the module-wide stripe.api_key.
        self._secret_key = secret_key

    def upsert_product(
        self,
        *,
        product_id: str | None,
        name: str,
        description: str,
        active: bool,
        metadata: dict[str, str],
    ) -> str:
        try:
            if product_id:
                product = stripe.Product.modify(
                    product_id,
                    api_key=self._secret_key,
                    name=name,
                    description=description,
                    active=active,
                    metadata=metadata,
                )
            else:
                product = stripe.Product.create(
                    api_key=self._secret_key,
                    name=name,
                    description=description,
                    active=active,
                    metadata=metadata,
                )
        except stripe.StripeError as exc:
            raise _provider_error("Failed to upsert Stripe product", exc) from exc

        resolved_id = getattr(product, "id", None)
        if not resolved_id:
            raise ProviderError("Stripe product id is missing.")
        return str(resolved_id)

    def set_product_active(self, *, product_id: str, active: bool) -> None:
        try:
            stripe.Product.modify(product_id, api_key=self._secret_key, active=active)
        except stripe.StripeError as exc:
            raise _provider_error(f"Failed to update Stripe product {product_id}", exc) from exc

    def create_price(
        self,
        *,
        product_id: str,
        unit_amount: int,
        currency: str,
        interval: str,
        metadata: dict[str, str],
        idempotency_key: str | None = None,
    ) -> str:
        payload: dict = {
            "api_key": self._secret_key,
            "product": product_id,
            "unit_amount": unit_amount,
            "currency": currency,
            "recurring": {"interval": interval},
            "metadata": metadata,
        }
        if idempotency_key:
            payload["idempotency_key"] = idempotency_key

        try:
            price = stripe.Price.create(**payload)
        except stripe.StripeError as exc:
            raise _provider_error("Failed to create Stripe price", exc) from exc

        price_id = getattr(price, "id", None)
        if not price_id:
            raise ProviderError("Stripe price id is missing.")
        return str(price_id)

    def get_price(self, *, price_id: str) -> ProviderPrice | None:
        try:
            price = stripe.Price.retrieve(price_id, api_key=self._secret_key)
        except stripe.InvalidRequestError as exc:
            if _is_resource_missing(exc):
                return None
            raise _provider_error(f"Failed to retrieve Stripe price {price_id}", exc) from exc
        except stripe.StripeError as exc:
            raise _provider_error(f"Failed to retrieve Stripe price {price_id}", exc) from exc

        recurring = getattr(price, "recurring", None)
        product = getattr(price, "product", None)
        return ProviderPrice(
            id=str(getattr(price, "id", price_id)),
            product_id=_resource_id(product),
            unit_amount=getattr(price, "unit_amount", None),
            currency=getattr(price, "currency", None),
            interval=getattr(recurring, "interval", None) if recurring is not None else None,
            active=bool(getattr(price, "active", False)),
        )

    def set_price_active(self, *, price_id: str, active: bool) -> None:
        try:
            stripe.Price.modify(price_id, api_key=self._secret_key, active=active)
        except stripe.StripeError as exc:
            raise _provider_error(f"Failed to update Stripe price {price_id}", exc) from exc

    def list_active_prices(self, *, product_id: str) -> list[str]:
        try:
            prices = stripe.Price.list(api_key=self._secret_key, product=product_id, active=True, limit=100)
            return [str(price.id) for price in prices.auto_paging_iter()]
        except stripe.StripeError as exc:
            raise _provider_error(f"Failed to list Stripe prices for product {product_id}", exc) from exc

    def create_customer(self, *, tenant_id: str, user_id: str | None, email: str | None) -> str:
        metadata = {"tenantId": tenant_id}
        if user_id:
            metadata["userId"] = user_id
        payload: dict = {"api_key": self._secret_key, "metadata": metadata}
        if email:
            payload["email"] = email

        try:
            customer = stripe.Customer.create(**payload)
        except stripe.StripeError as exc:
            raise _provider_error("Failed to create Stripe customer", exc) from exc

        customer_id = getattr(customer, "id", None)
        if not customer_id:
            raise ProviderError("Stripe customer id is missing.")
        return str(customer_id)

    def create_checkout_session(
        self,
        *,
        customer_id: str,
        price_id: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        subscription_metadata: dict[str, str],
        trial_days: int | None,
    ) -> CheckoutSession:
        subscription_data: dict = {"metadata": subscription_metadata}
        if trial_days:
            subscription_data["trial_period_days"] = trial_days

        try:
            session = stripe.checkout.Session.create(
                api_key=self._secret_key,
                mode="subscription",
                customer=customer_id,
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
                subscription_data=subscription_data,
            )
        except stripe.StripeError as exc:
            raise _provider_error("Failed to create Stripe checkout session", exc) from exc

        session_id = getattr(session, "id", None)
        session_url = getattr(session, "url", None)
        if not session_id or not session_url:
            raise ProviderError("Stripe checkout session response is incomplete.")
        return CheckoutSession(id=str(session_id), url=str(session_url))

    def create_portal_session(self, *, customer_id: str, return_url: str) -> PortalSession:
        try:
            session = stripe.billing_portal.Session.create(
                api_key=self._secret_key,
                customer=customer_id,
                return_url=return_url,
            )
        except stripe.StripeError as exc:
            raise _provider_error("Failed to create Stripe portal session", exc) from exc

        session_url = getattr(session, "url", None)
        if not session_url:
            raise ProviderError("Stripe portal session url is missing.")
        return PortalSession(url=str(session_url))


def _provider_error(context: str, exc: stripe.StripeError) -> ProviderError:
    message = getattr(exc, "user_message", None) or str(exc) or exc.__class__.__name__
    logger.warning("stripe_client: request_failed context=%s error=%s", context, message)
    return ProviderError(f"{context}: {message}")


def _is_resource_missing(exc: stripe.StripeError) -> bool:
    return getattr(exc, "code", None) == "resource_missing" or getattr(exc, "http_status", None) == 404


def _resource_id(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    resource_id = getattr(value, "id", None)
    return str(resource_id) if resource_id else None
