"""SQLAlchemy implementation of PurchaseRepository

Idempotency is enforced by the unique constraint on stripe_session_id.
"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.purchase_repository import PurchaseRepository
from src.domain.purchase import Purchase


class SqlAlchemyPurchaseRepository(PurchaseRepository):
    """
    SQLAlchemy implementation of PurchaseRepository

    Features:
    - Immutable append-only purchase records
    - Duplicate session IDs surface as IntegrityError on flush
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_session_id(self, stripe_session_id: str) -> Optional[Purchase]:
        """
        Retrieve purchase by gateway checkout session ID

        Args:
            stripe_session_id: Gateway checkout session ID

        Returns:
            Purchase if found, None otherwise
        """
        stmt = select(Purchase).where(Purchase.stripe_session_id == stripe_session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, purchase: Purchase) -> Purchase:
        """
        Insert a purchase record

        Args:
            purchase: Purchase entity to persist

        Returns:
            Created Purchase with generated ID

        Raises:
            IntegrityError: If stripe_session_id already exists
        """
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase
