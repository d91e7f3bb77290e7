"""Billing domain use cases"""
from .confirm_checkout import ConfirmCheckout
from .create_checkout import CreateCheckout
from .get_credits import GetCredits
from .list_offers import ListOffers
from .dtos import (
    ConfirmCheckoutCommandDTO,
    CheckoutConfirmationDTO,
    CreateCheckoutCommandDTO,
    CheckoutSessionResponseDTO,
    AccountCreditsResponseDTO,
    OfferDTO,
    OffersResponseDTO,
)

__all__ = [
    "ConfirmCheckout",
    "CreateCheckout",
    "GetCredits",
    "ListOffers",
    "ConfirmCheckoutCommandDTO",
    "CheckoutConfirmationDTO",
    "CreateCheckoutCommandDTO",
    "CheckoutSessionResponseDTO",
    "AccountCreditsResponseDTO",
    "OfferDTO",
    "OffersResponseDTO",
]
