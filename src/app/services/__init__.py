from .unit_of_work import UnitOfWork
from .payment_gateway import PaymentGateway, PaymentGatewayError, GatewayNotConfiguredError
from .identity_provider import IdentityProvider, Principal

__all__ = [
    "UnitOfWork",
    "PaymentGateway",
    "PaymentGatewayError",
    "GatewayNotConfiguredError",
    "IdentityProvider",
    "Principal",
]
