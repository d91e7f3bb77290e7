from .unit_of_work import SqlAlchemyUnitOfWork
from .stripe_gateway import StripePaymentGateway, as_dict
from .session_identity_provider import SqlAlchemyIdentityProvider

__all__ = [
    "SqlAlchemyUnitOfWork",
    "StripePaymentGateway",
    "as_dict",
    "SqlAlchemyIdentityProvider",
]
