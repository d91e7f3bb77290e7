"""Session Cookie Identity Provider

Resolves auth provider session tokens against the auth_sessions and
auth_users tables.
"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.identity_provider import IdentityProvider, Principal
from src.domain.base import utc_now
from src.domain.user import AuthSession, User


class SqlAlchemyIdentityProvider(IdentityProvider):
    """Looks up a live (unexpired) session and its user"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve(self, session_token: str) -> Optional[Principal]:
        if not session_token:
            return None

        stmt = (
            select(User.id, User.email)
            .join(AuthSession, AuthSession.user_id == User.id)
            .where(AuthSession.session_token == session_token)
            .where(AuthSession.expires > utc_now())
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return Principal(user_id=str(row[0]), email=row[1])
