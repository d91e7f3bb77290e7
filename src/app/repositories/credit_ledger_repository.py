"""Credit Ledger Repository Interface

Defines the contract for credit ledger persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from decimal import Decimal
from src.domain.credit_ledger import CreditLedger


class CreditLedgerRepository(ABC):
    """
    Repository interface for CreditLedger persistence

    The ledger row is created lazily, so additions are expressed as a
    single upsert rather than read-modify-write.
    """

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> Optional[CreditLedger]:
        """
        Retrieve ledger by user ID

        Args:
            user_id: User identifier

        Returns:
            CreditLedger if found, None otherwise
        """
        pass

    @abstractmethod
    async def add_credits(self, user_id: str, amount: Decimal) -> None:
        """
        Add credits to the user's ledger, creating the row if missing

        Args:
            user_id: User identifier
            amount: Credits to add (must be > 0)
        """
        pass
