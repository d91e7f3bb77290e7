"""Purchase Repository Interface

Defines the contract for purchase record persistence.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.purchase import Purchase


class PurchaseRepository(ABC):
    """Repository interface for Purchase persistence (append-only)"""

    @abstractmethod
    async def get_by_session_id(self, stripe_session_id: str) -> Optional[Purchase]:
        """
        Retrieve purchase by gateway checkout session ID

        Used as the idempotency check before fulfillment.
        """
        pass

    @abstractmethod
    async def create(self, purchase: Purchase) -> Purchase:
        """
        Insert a purchase record

        Raises:
            IntegrityError: If stripe_session_id already exists
        """
        pass
