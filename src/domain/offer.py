"""Credit Offer Catalog

Prices live at the payment gateway. This catalog declares the offers the
service sells so that missing products and prices can be created upstream,
keyed by a stable lookup key.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class OfferDefinition(BaseModel):
    """A sellable credit offer"""

    lookup_key: str = Field(..., description="Stable gateway lookup key")
    name: str
    description: str
    type: str = Field(..., description="'payg' or 'pack'")
    currency: str = "usd"
    unit_amount: int = Field(..., gt=0, description="Price per unit in cents")
    credits_per_unit: int = Field(..., gt=0)

    def product_metadata(self, app_marker: str) -> Dict[str, str]:
        return {"app": app_marker, "offer": self.lookup_key}

    def price_metadata(self, app_marker: str) -> Dict[str, str]:
        return {
            "app": app_marker,
            "type": self.type,
            "credits_per_unit": str(self.credits_per_unit),
        }


OFFERS: List[OfferDefinition] = [
    OfferDefinition(
        lookup_key="PAYG_IMAGE_CREDIT",
        name="Pay as you go",
        description="Buy exactly what you need",
        type="payg",
        unit_amount=100,  # $1.00
        credits_per_unit=1,
    ),
    OfferDefinition(
        lookup_key="PACK_20_CREDITS",
        name="20-photo pack",
        description="Save 10%",
        type="pack",
        unit_amount=1800,  # $18.00
        credits_per_unit=20,
    ),
    OfferDefinition(
        lookup_key="PACK_50_CREDITS",
        name="50-photo pack",
        description="Save 20%",
        type="pack",
        unit_amount=4000,  # $40.00
        credits_per_unit=50,
    ),
    OfferDefinition(
        lookup_key="PACK_100_CREDITS",
        name="100-photo pack",
        description="Save 25%",
        type="pack",
        unit_amount=7500,  # $75.00
        credits_per_unit=100,
    ),
]


def find_offer(lookup_key: Optional[str]) -> Optional[OfferDefinition]:
    for offer in OFFERS:
        if offer.lookup_key == lookup_key:
            return offer
    return None
