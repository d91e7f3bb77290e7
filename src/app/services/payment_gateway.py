"""Payment Gateway Interface

Defines the contract for the third-party payment API. The gateway is the
authority on prices and on the payment status of checkout sessions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PaymentGatewayError(Exception):
    """Raised when the gateway answers with a non-2xx status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayNotConfiguredError(PaymentGatewayError):
    """Raised when the gateway secret key is missing"""

    def __init__(self, message: str = "Missing STRIPE_SECRET_KEY environment variable"):
        super().__init__(message)


class PaymentGateway(ABC):
    """
    Abstract payment gateway client

    All methods return the gateway's JSON objects as dicts and raise
    PaymentGatewayError on failure. Callers check is_configured first so
    that a missing key can be reported without raising.
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def retrieve_checkout_session(
        self, session_id: str, expand: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def list_prices(
        self, lookup_keys: List[str], limit: int = 10, expand: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def create_product(
        self, name: str, description: str, metadata: Dict[str, str]
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def create_price(
        self,
        product_id: str,
        unit_amount: int,
        currency: str,
        lookup_key: str,
        metadata: Dict[str, str],
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def create_checkout_session(
        self,
        price_id: str,
        quantity: int,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str],
        metadata: Dict[str, str],
    ) -> Dict[str, Any]:
        pass
