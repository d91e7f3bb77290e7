"""Billing API Routes

FastAPI routes for checkout creation, checkout fulfillment and credit
queries.
"""

import re
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.error import ClientError
from src.api.rate_limit import rate_limit
from src.api.request_logging import log_event
from src.api.schemas.billing_request import CreateCheckoutRequestSchema
from src.app.services.identity_provider import Principal
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.billing.dtos import (
    AccountCreditsResponseDTO,
    CheckoutConfirmationDTO,
    CheckoutSessionResponseDTO,
    ConfirmCheckoutCommandDTO,
    CreateCheckoutCommandDTO,
    OffersResponseDTO,
)
from src.app.use_cases.billing.confirm_checkout import ConfirmCheckout
from src.app.use_cases.billing.create_checkout import CreateCheckout
from src.app.use_cases.billing.get_credits import GetCredits
from src.app.use_cases.billing.list_offers import ListOffers
from src.adapter.repositories.credit_ledger_repository import SqlAlchemyCreditLedgerRepository
from src.adapter.repositories.purchase_repository import SqlAlchemyPurchaseRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_config,
    get_payment_gateway,
    get_principal,
    get_session,
    require_principal,
)
from src.domain.offer import OFFERS

# Checkout session ids are used as a URL path segment by the gateway
CHECKOUT_SESSION_ID = re.compile(r"cs_[A-Za-z0-9_]+")

router = APIRouter(
    prefix="/billing",
    tags=["Billing"],
    dependencies=[Depends(rate_limit("billing", "RATE_LIMIT_BILLING_MAX"))],
)


@router.get(
    "/confirm",
    response_model=CheckoutConfirmationDTO,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    responses={
        403: {
            "description": "Checkout session belongs to another user",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "FORBIDDEN",
                            "message": "This checkout session does not belong to the current user"
                        }
                    }
                }
            }
        }
    }
)
async def confirm_checkout(
    request: Request,
    session_id: Optional[str] = Query(default=None),
    principal: Principal = Depends(require_principal),
    session: AsyncSession = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Fulfill a completed checkout session.

    Safe to call repeatedly: credits are granted once per `session_id`,
    later calls return the current balance.

    **Query parameters:**
    - `session_id` (required): Gateway checkout session ID

    **Returns:**
    - 200: `{status, credits, freeUsed}`, or `{status}` while unpaid
    - 400: Missing or malformed session_id, gateway not configured or gateway error
    - 401: Not signed in
    - 403: Session belongs to another user
    """
    if not session_id:
        raise ClientError(Error(code="VALIDATION_ERROR", message="session_id is required"))
    if not CHECKOUT_SESSION_ID.fullmatch(session_id):
        raise ClientError(Error(code="VALIDATION_ERROR", message="Invalid session_id"))

    uow = SqlAlchemyUnitOfWork(session)
    ledger_repo = SqlAlchemyCreditLedgerRepository(session)
    purchase_repo = SqlAlchemyPurchaseRepository(session)

    command = ConfirmCheckoutCommandDTO(
        session_id=session_id,
        user_id=principal.user_id,
        email=principal.email,
    )

    use_case = ConfirmCheckout(uow, ledger_repo, purchase_repo, gateway)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    if result.value.status == "fulfilled":
        log_event(
            "checkout_confirmed",
            request,
            user_id=principal.user_id,
            stripe_session_id=session_id,
        )
    return result.value


@router.post(
    "/create-checkout",
    response_model=CheckoutSessionResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def create_checkout(
    request: Request,
    body: CreateCheckoutRequestSchema,
    principal: Principal = Depends(require_principal),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    config=Depends(get_config),
):
    """
    Start a gateway checkout for one of the application's prices.

    **Request body:**
    - `lookupKey` (required): Price lookup key
    - `quantity` (optional): 1-500, default 1
    - `redirectURL` (optional): Return page, resolved against the app origin

    **Returns:**
    - 200: `{url, id}`
    - 400: Validation, unknown/unmanaged price or gateway error
    - 401: Not signed in (an email is required)
    """
    if not principal.email:
        raise ClientError(Error(code="AUTHENTICATION_REQUIRED", message="Sign in required"))

    command = CreateCheckoutCommandDTO(
        lookup_key=body.lookup_key,
        quantity=body.quantity,
        redirect_url=body.redirect_url,
        user_id=principal.user_id,
        email=principal.email,
        app_url=config.APP_URL or f"{request.url.scheme}://{request.url.netloc}",
    )

    use_case = CreateCheckout(gateway, app_marker=config.PAYMENT_APP_MARKER)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    log_event(
        "checkout_session_created",
        request,
        user_id=principal.user_id,
        email=principal.email,
        lookup_key=body.lookup_key,
        quantity=body.quantity,
        stripe_session_id=result.value.id,
    )
    return result.value


@router.get(
    "/me",
    response_model=AccountCreditsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_my_credits(
    principal: Optional[Principal] = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    """
    Credit balance and free-tier usage of the caller.

    Anonymous callers get `{authenticated: false, freeUsed: 0, credits: 0}`.
    """
    ledger_repo = SqlAlchemyCreditLedgerRepository(session)

    use_case = GetCredits(ledger_repo)
    result = await use_case.execute(principal)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/products",
    response_model=OffersResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_products(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    config=Depends(get_config),
):
    """
    Purchasable credit offers.

    Open to anonymous callers for the pricing page. Offers missing at the
    gateway are created on first access.
    """
    use_case = ListOffers(gateway, offers=OFFERS, app_marker=config.PAYMENT_APP_MARKER)
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
