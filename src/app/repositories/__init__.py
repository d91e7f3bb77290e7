from .credit_ledger_repository import CreditLedgerRepository
from .purchase_repository import PurchaseRepository
from .photo_job_repository import PhotoJobRepository, JobStats

__all__ = [
    "CreditLedgerRepository",
    "PurchaseRepository",
    "PhotoJobRepository",
    "JobStats",
]
