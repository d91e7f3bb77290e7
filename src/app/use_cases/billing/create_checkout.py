"""CreateCheckout Use Case

Creates a gateway checkout session for one of the application's prices.
"""

from typing import Optional
from urllib.parse import urljoin, urlsplit
from libs.result import Result, Return, Error
from src.app.services.payment_gateway import PaymentGateway, PaymentGatewayError
from .dtos import CreateCheckoutCommandDTO, CheckoutSessionResponseDTO

DEFAULT_RETURN_PATH = "/upload"
SESSION_ID_PLACEHOLDER = "session_id={CHECKOUT_SESSION_ID}"


class CreateCheckout:
    """
    Use Case: Start a checkout for a price identified by lookup key

    Business Rules:
    1. Only prices tagged with the application marker can be sold
    2. Redirects always resolve to the application origin
    3. The session records the caller's user ID in its metadata, which
       ConfirmCheckout later uses for the ownership check
    """

    def __init__(self, gateway: PaymentGateway, app_marker: str):
        self.gateway = gateway
        self.app_marker = app_marker

    async def execute(self, command: CreateCheckoutCommandDTO) -> Result[CheckoutSessionResponseDTO]:
        if not self.gateway.is_configured:
            return Return.err(
                Error(
                    code="CONFIGURATION_ERROR",
                    message="Missing STRIPE_SECRET_KEY environment variable",
                )
            )

        try:
            prices = await self.gateway.list_prices([command.lookup_key], limit=1)
        except PaymentGatewayError as e:
            return Return.err(
                Error(code="GATEWAY_ERROR", message=f"Stripe price lookup failed: {e.message}")
            )

        price = prices[0] if prices else None
        if not price:
            return Return.err(
                Error(code="PRICE_NOT_FOUND", message=f"Price not found for {command.lookup_key}")
            )

        if (price.get("metadata") or {}).get("app") != self.app_marker:
            return Return.err(
                Error(
                    code="UNMANAGED_PRICE",
                    message="Unknown or unmanaged price",
                    reason=f"price={price.get('id')}",
                )
            )

        success_base = self.resolve_redirect(command.app_url, command.redirect_url)
        separator = "&" if "?" in success_base else "?"
        success_url = f"{success_base}{separator}{SESSION_ID_PLACEHOLDER}"
        cancel_url = success_base

        try:
            checkout = await self.gateway.create_checkout_session(
                price_id=price["id"],
                quantity=command.quantity,
                success_url=success_url,
                cancel_url=cancel_url,
                customer_email=command.email,
                metadata={"user_id": str(command.user_id)},
            )
        except PaymentGatewayError as e:
            return Return.err(
                Error(code="GATEWAY_ERROR", message=f"Stripe checkout failed: {e.message}")
            )

        return Return.ok(CheckoutSessionResponseDTO(url=checkout["url"], id=checkout["id"]))

    @staticmethod
    def resolve_redirect(app_url: str, redirect_url: Optional[str]) -> str:
        """
        Resolve a redirect against the application origin

        Relative paths are joined to app_url. Absolute URLs pointing at a
        different host are replaced by the default return page.
        """
        base = app_url.rstrip("/")
        default = f"{base}{DEFAULT_RETURN_PATH}"
        if not redirect_url:
            return default

        resolved = urljoin(f"{base}/", redirect_url)
        if urlsplit(resolved).netloc != urlsplit(base).netloc:
            return default
        return resolved
