"""Get Credits Use Case

Retrieves the current caller's credit balance and free-tier usage.
"""

from decimal import Decimal
from typing import Optional
from libs.result import Result, Return
from src.app.repositories.credit_ledger_repository import CreditLedgerRepository
from src.app.services.identity_provider import Principal
from src.app.use_cases.billing.dtos import AccountCreditsResponseDTO


class GetCredits:
    """
    Get Credits Use Case

    Read-only projection over the ledger. Anonymous callers and users
    who never purchased get zeroed defaults instead of an error.
    """

    def __init__(self, ledger_repo: CreditLedgerRepository):
        """
        Initialize GetCredits use case

        Args:
            ledger_repo: Repository for accessing credit ledgers
        """
        self.ledger_repo = ledger_repo

    async def execute(self, principal: Optional[Principal]) -> Result[AccountCreditsResponseDTO]:
        """
        Execute get credits operation

        Args:
            principal: The signed-in caller, or None for anonymous requests

        Returns:
            Result[AccountCreditsResponseDTO]: Always ok
        """
        if principal is None:
            return Return.ok(
                AccountCreditsResponseDTO(authenticated=False, free_used=0, credits=Decimal("0"))
            )

        ledger = await self.ledger_repo.get_by_user_id(principal.user_id)
        if not ledger:
            return Return.ok(
                AccountCreditsResponseDTO(authenticated=True, free_used=0, credits=Decimal("0"))
            )

        return Return.ok(
            AccountCreditsResponseDTO(
                authenticated=True,
                free_used=ledger.free_used,
                credits=ledger.credits,
            )
        )
