"""SQLAlchemy implementation of CreditLedgerRepository

Credits are added with a single INSERT ... ON CONFLICT DO UPDATE so the
ledger row can be created lazily without a read-modify-write race.
"""

from typing import Optional
from decimal import Decimal
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_ledger_repository import CreditLedgerRepository
from src.domain.base import utc_now
from src.domain.credit_ledger import CreditLedger

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyCreditLedgerRepository(CreditLedgerRepository):
    """
    SQLAlchemy implementation of CreditLedgerRepository

    Features:
    - Additive upsert keyed by the unique user_id
    - Reads always refresh already-loaded rows
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: str) -> Optional[CreditLedger]:
        """
        Retrieve ledger by user ID

        Args:
            user_id: User identifier

        Returns:
            CreditLedger if found, None otherwise
        """
        stmt = (
            select(CreditLedger)
            .where(CreditLedger.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_credits(self, user_id: str, amount: Decimal) -> None:
        """
        Add credits to the user's ledger, inserting the row if missing

        Args:
            user_id: User identifier
            amount: Credits to add

        Note:
            Runs inside the caller's transaction; nothing is committed here
        """
        dialect = self.session.bind.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Credit upsert is not supported on dialect {dialect}")

        now = utc_now()
        table = CreditLedger.__table__
        stmt = insert(table).values(
            user_id=user_id,
            credits=amount,
            free_used=0,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.user_id],
            set_={
                "credits": table.c.credits + stmt.excluded.credits,
                "updated_at": now,
            },
        )
        await self.session.execute(stmt)
