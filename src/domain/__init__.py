from .base import BaseModel
from .user import User, AuthSession
from .credit_ledger import CreditLedger
from .purchase import Purchase, PurchaseStatus
from .photo_job import PhotoJob, JobStatus
from .offer import OfferDefinition, OFFERS, find_offer

__all__ = [
    "BaseModel",
    "User",
    "AuthSession",
    "CreditLedger",
    "Purchase",
    "PurchaseStatus",
    "PhotoJob",
    "JobStatus",
    "OfferDefinition",
    "OFFERS",
    "find_offer",
]
