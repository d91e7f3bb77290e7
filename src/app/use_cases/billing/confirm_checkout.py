"""ConfirmCheckout Use Case

Fulfills a paid checkout session: credits the user's ledger and records the
purchase, exactly once per gateway session ID.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.payment_gateway import PaymentGateway, PaymentGatewayError
from src.app.repositories.credit_ledger_repository import CreditLedgerRepository
from src.app.repositories.purchase_repository import PurchaseRepository
from src.domain.purchase import Purchase, PurchaseStatus
from .dtos import ConfirmCheckoutCommandDTO, CheckoutConfirmationDTO

logger = logging.getLogger(__name__)

FULFILLED = "fulfilled"


class ConfirmCheckout:
    """
    Use Case: Confirm a checkout session and grant its credits

    Business Rules:
    1. Ownership: the session must belong to the caller (user_id metadata,
       or the customer email when no user_id was recorded)
    2. Unpaid sessions are reported, never fulfilled
    3. Idempotency: a session ID already in purchases is not credited again
    4. Atomic updates: ledger upsert and purchase insert commit together
    5. Race on the purchases unique constraint counts as already fulfilled

    Flow:
    1. Retrieve checkout session (with line item prices) from the gateway
    2. Verify ownership
    3. Return payment status if not paid
    4. Check idempotency (return current balance if found)
    5. Compute credits = credits_per_unit x quantity
    6. Upsert ledger, insert purchase, commit
    7. Return updated balance
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger_repo: CreditLedgerRepository,
        purchase_repo: PurchaseRepository,
        gateway: PaymentGateway,
    ):
        self.uow = uow
        self.ledger_repo = ledger_repo
        self.purchase_repo = purchase_repo
        self.gateway = gateway

    async def execute(self, command: ConfirmCheckoutCommandDTO) -> Result[CheckoutConfirmationDTO]:
        """
        Execute checkout confirmation

        Args:
            command: ConfirmCheckoutCommandDTO with session_id and caller identity

        Returns:
            Result[CheckoutConfirmationDTO]: Status and balance, or error

        Errors:
            CONFIGURATION_ERROR: Gateway secret key missing
            GATEWAY_ERROR: Session could not be retrieved
            FORBIDDEN: Session belongs to another user
            INTERNAL_ERROR: Unexpected failure (transaction rolled back)
        """
        if not self.gateway.is_configured:
            return Return.err(
                Error(
                    code="CONFIGURATION_ERROR",
                    message="Missing STRIPE_SECRET_KEY environment variable",
                )
            )

        # Step 1: Retrieve checkout session with line item prices
        try:
            checkout = await self.gateway.retrieve_checkout_session(
                command.session_id, expand=["line_items.data.price"]
            )
        except PaymentGatewayError as e:
            return Return.err(
                Error(
                    code="GATEWAY_ERROR",
                    message=f"Stripe retrieve failed: {e.message}",
                    reason=f"status={e.status_code}",
                )
            )

        # Step 2: Ownership check
        if not self._belongs_to_caller(checkout, command):
            logger.warning(
                f"Checkout session {command.session_id} rejected for user {command.user_id}: owner mismatch"
            )
            return Return.err(
                Error(
                    code="FORBIDDEN",
                    message="This checkout session does not belong to the current user",
                )
            )

        # Step 3: Unpaid sessions are reported without side effects
        payment_status = checkout.get("payment_status")
        if payment_status != "paid":
            return Return.ok(CheckoutConfirmationDTO(status=payment_status or "unpaid"))

        try:
            # Step 4: Idempotency check
            existing = await self.purchase_repo.get_by_session_id(command.session_id)
            if existing:
                return Return.ok(await self._current_balance(command.user_id))

            # Step 5: Determine credits purchased
            line = self._first_line_item(checkout)
            price = line.get("price") or {}
            quantity = int(line.get("quantity") or 1)
            credits_purchased = self._credits_per_unit(price) * quantity

            # Step 6: Credit ledger and record purchase in one transaction
            try:
                await self.ledger_repo.add_credits(command.user_id, credits_purchased)
                await self.purchase_repo.create(
                    Purchase(
                        user_id=command.user_id,
                        stripe_session_id=command.session_id,
                        product_lookup_key=price.get("lookup_key"),
                        quantity=quantity,
                        amount_cents=int(checkout.get("amount_total") or 0),
                        currency=checkout.get("currency") or "usd",
                        credits_purchased=credits_purchased,
                        status=PurchaseStatus.PAID,
                    )
                )
                await self.uow.commit()
            except IntegrityError:
                await self.uow.rollback()
                # A concurrent confirmation inserted the purchase first
                if not await self.purchase_repo.get_by_session_id(command.session_id):
                    raise
                logger.info(
                    f"Checkout session {command.session_id} fulfilled concurrently, returning current balance"
                )
                return Return.ok(await self._current_balance(command.user_id))

            logger.info(
                "checkout_fulfilled",
                extra={
                    "user_id": command.user_id,
                    "stripe_session_id": command.session_id,
                    "credits_purchased": str(credits_purchased),
                    "lookup_key": price.get("lookup_key"),
                    "quantity": quantity,
                },
            )

            # Step 7: Return updated balance
            return Return.ok(await self._current_balance(command.user_id))

        except Exception as e:
            await self.uow.rollback()
            logger.exception(
                f"Failed to confirm checkout session {command.session_id} for user {command.user_id}"
            )
            return Return.err(
                Error(
                    code="INTERNAL_ERROR",
                    message="Failed to confirm checkout",
                    reason=str(e),
                )
            )

    async def _current_balance(self, user_id: str) -> CheckoutConfirmationDTO:
        ledger = await self.ledger_repo.get_by_user_id(user_id)
        if not ledger:
            return CheckoutConfirmationDTO(status=FULFILLED, credits=Decimal("0"), free_used=0)
        return CheckoutConfirmationDTO(
            status=FULFILLED,
            credits=ledger.credits,
            free_used=ledger.free_used,
        )

    @staticmethod
    def _belongs_to_caller(checkout: Dict[str, Any], command: ConfirmCheckoutCommandDTO) -> bool:
        meta_user_id = (checkout.get("metadata") or {}).get("user_id")
        if meta_user_id:
            return str(meta_user_id) == str(command.user_id)

        customer_email = checkout.get("customer_email")
        if customer_email and command.email:
            return str(customer_email).strip().lower() == str(command.email).strip().lower()
        return False

    @staticmethod
    def _first_line_item(checkout: Dict[str, Any]) -> Dict[str, Any]:
        items = (checkout.get("line_items") or {}).get("data") or []
        return items[0] if items else {}

    @staticmethod
    def _credits_per_unit(price: Dict[str, Any]) -> Decimal:
        raw: Optional[str] = (price.get("metadata") or {}).get("credits_per_unit")
        if raw is None:
            return Decimal("1")
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            return Decimal("1")
        if not value.is_finite() or value <= 0:
            return Decimal("1")
        return value
