"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs. Response fields
are serialized with the camelCase names the web client expects.
"""

from decimal import Decimal
from typing import Optional, Dict, List
from pydantic import BaseModel, Field


class ConfirmCheckoutCommandDTO(BaseModel):
    """
    Command DTO for confirming (fulfilling) a checkout session

    Used as input to ConfirmCheckout use case.
    """

    session_id: str = Field(
        ...,
        min_length=1,
        description="Gateway checkout session ID presented by the client"
    )

    user_id: str = Field(
        ...,
        description="Authenticated caller"
    )

    email: Optional[str] = Field(
        default=None,
        description="Authenticated caller's email"
    )


class CheckoutConfirmationDTO(BaseModel):
    """
    Response DTO for checkout confirmation

    For sessions that are not paid yet only `status` is set.
    """

    status: str = Field(
        ...,
        description="'fulfilled', or the gateway payment status when not paid"
    )

    credits: Optional[Decimal] = Field(
        default=None,
        description="Credit balance after fulfillment"
    )

    free_used: Optional[int] = Field(
        default=None,
        alias="freeUsed",
        description="Free trial photos already used"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "status": "fulfilled",
                "credits": "25.00",
                "freeUsed": 3
            }
        }


class CreateCheckoutCommandDTO(BaseModel):
    """Command DTO for creating a gateway checkout session"""

    lookup_key: str = Field(..., min_length=1)

    quantity: int = Field(
        default=1,
        ge=1,
        le=500,
        description="Units to purchase (1-500)"
    )

    redirect_url: Optional[str] = Field(
        default=None,
        description="Where the gateway sends the user back to (absolute or app-relative)"
    )

    user_id: str

    email: str

    app_url: str = Field(
        ...,
        description="Origin used to resolve relative redirect URLs"
    )


class CheckoutSessionResponseDTO(BaseModel):
    url: str
    id: str


class AccountCreditsResponseDTO(BaseModel):
    """Response DTO for the current caller's credit summary"""

    authenticated: bool

    free_used: int = Field(default=0, alias="freeUsed")

    credits: Decimal = Field(default=Decimal("0"))

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "authenticated": True,
                "freeUsed": 2,
                "credits": "20.00"
            }
        }


class OfferDTO(BaseModel):
    """A purchasable gateway price"""

    id: str

    lookup_key: Optional[str] = Field(default=None, alias="lookupKey")

    currency: Optional[str] = None

    unit_amount: Optional[int] = Field(default=None, alias="unitAmount")

    product_name: Optional[str] = Field(default=None, alias="productName")

    metadata: Dict[str, str] = Field(default_factory=dict)

    class Config:
        populate_by_name = True


class OffersResponseDTO(BaseModel):
    offers: List[OfferDTO]
