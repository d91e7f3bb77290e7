from .credit_ledger_repository import SqlAlchemyCreditLedgerRepository
from .purchase_repository import SqlAlchemyPurchaseRepository
from .photo_job_repository import SqlAlchemyPhotoJobRepository

__all__ = [
    "SqlAlchemyCreditLedgerRepository",
    "SqlAlchemyPurchaseRepository",
    "SqlAlchemyPhotoJobRepository",
]
