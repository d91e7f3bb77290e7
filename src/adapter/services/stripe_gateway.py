"""Stripe Payment Gateway Client

PaymentGateway on top of the official stripe SDK's StripeClient, using its
async service methods. Results are handed back as plain dicts.
"""

import logging
from typing import Any, Dict, List, Optional

import stripe
from src.app.services.payment_gateway import (
    PaymentGateway,
    PaymentGatewayError,
    GatewayNotConfiguredError,
)

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.stripe.com"


def as_dict(obj: Any) -> Dict[str, Any]:
    """Plain-dict view of a StripeObject, nested objects included"""
    if obj is None:
        return {}
    if isinstance(obj, stripe.StripeObject):
        return obj.to_dict()
    return dict(obj)


class StripePaymentGateway(PaymentGateway):
    """
    stripe SDK implementation of PaymentGateway

    A StripeClient can be injected (tests pass a mock); otherwise one is built
    on first use with an httpx transport so calls never block the event loop.
    """

    def __init__(
        self,
        secret_key: Optional[str],
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 15.0,
        client: Optional[stripe.StripeClient] = None,
    ):
        self.secret_key = secret_key or ""
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._http_client: Optional[stripe.HTTPXClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.secret_key)

    @property
    def client(self) -> stripe.StripeClient:
        if not self.is_configured:
            raise GatewayNotConfiguredError()
        if self._client is None:
            self._http_client = stripe.HTTPXClient(timeout=self.timeout)
            self._client = stripe.StripeClient(
                self.secret_key,
                base_addresses={"api": self.api_base},
                http_client=self._http_client,
            )
        return self._client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.close_async()
            self._http_client = None

    async def retrieve_checkout_session(
        self, session_id: str, expand: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        params = {"expand": expand} if expand else None
        session = await self._call(
            "checkout.sessions.retrieve",
            self.client.v1.checkout.sessions.retrieve_async(session_id, params=params),
        )
        return as_dict(session)

    async def list_prices(
        self, lookup_keys: List[str], limit: int = 10, expand: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"lookup_keys": lookup_keys, "limit": limit}
        if expand:
            params["expand"] = expand
        prices = await self._call("prices.list", self.client.v1.prices.list_async(params=params))
        return [as_dict(price) for price in (getattr(prices, "data", None) or [])]

    async def create_product(
        self, name: str, description: str, metadata: Dict[str, str]
    ) -> Dict[str, Any]:
        product = await self._call(
            "products.create",
            self.client.v1.products.create_async(
                params={"name": name, "description": description, "metadata": metadata}
            ),
        )
        return as_dict(product)

    async def create_price(
        self,
        product_id: str,
        unit_amount: int,
        currency: str,
        lookup_key: str,
        metadata: Dict[str, str],
    ) -> Dict[str, Any]:
        price = await self._call(
            "prices.create",
            self.client.v1.prices.create_async(
                params={
                    "unit_amount": unit_amount,
                    "currency": currency,
                    "product": product_id,
                    "lookup_key": lookup_key,
                    "metadata": metadata,
                }
            ),
        )
        return as_dict(price)

    async def create_checkout_session(
        self,
        price_id: str,
        quantity: int,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str],
        metadata: Dict[str, str],
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "mode": "payment",
            "line_items": [{"price": price_id, "quantity": quantity}],
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        if customer_email:
            params["customer_email"] = customer_email
        session = await self._call(
            "checkout.sessions.create",
            self.client.v1.checkout.sessions.create_async(params=params),
        )
        return as_dict(session)

    async def _call(self, operation: str, awaitable) -> Any:
        try:
            return await awaitable
        except stripe.StripeError as e:
            logger.warning(f"Stripe {operation} failed ({e.http_status}): {e.user_message}")
            raise PaymentGatewayError(e.user_message or str(e), status_code=e.http_status) from e
