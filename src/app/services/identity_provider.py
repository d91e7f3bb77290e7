"""Identity Provider Interface

Resolves the authenticated caller of a request. Session issuance belongs
to the external auth provider; this service only reads it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: Optional[str] = None


class IdentityProvider(ABC):

    @abstractmethod
    async def resolve(self, session_token: str) -> Optional[Principal]:
        """
        Resolve a session token to the signed-in user

        Returns:
            Principal if the token belongs to a live session, None otherwise
        """
        pass
