"""ListOffers Use Case

Lists the application's credit offers, creating any that do not exist at
the payment gateway yet.
"""

import logging
from typing import Any, Dict, List
from libs.result import Result, Return, Error
from src.app.services.payment_gateway import PaymentGateway, PaymentGatewayError
from src.domain.offer import OfferDefinition, find_offer
from .dtos import OfferDTO, OffersResponseDTO

logger = logging.getLogger(__name__)


class ListOffers:
    """
    Use Case: List purchasable offers

    Flow:
    1. Fetch gateway prices for every catalog lookup key
    2. For each missing offer, create product then price (tagged with the
       application marker and credits_per_unit)
    3. Return offers in catalog order
    """

    def __init__(self, gateway: PaymentGateway, offers: List[OfferDefinition], app_marker: str):
        self.gateway = gateway
        self.offers = offers
        self.app_marker = app_marker

    async def execute(self) -> Result[OffersResponseDTO]:
        if not self.gateway.is_configured:
            return Return.err(
                Error(
                    code="CONFIGURATION_ERROR",
                    message="Missing STRIPE_SECRET_KEY environment variable",
                )
            )

        try:
            prices = await self._ensure_prices_exist()
        except PaymentGatewayError as e:
            return Return.err(Error(code="GATEWAY_ERROR", message=e.message))

        return Return.ok(OffersResponseDTO(offers=[self._to_offer_dto(p) for p in prices]))

    async def _ensure_prices_exist(self) -> List[Dict[str, Any]]:
        existing = await self.gateway.list_prices(
            [offer.lookup_key for offer in self.offers],
            limit=100,
            expand=["data.product"],
        )
        found_by_lookup = {p["lookup_key"]: p for p in existing if p.get("lookup_key")}

        prices = []
        for offer in self.offers:
            if offer.lookup_key in found_by_lookup:
                prices.append(found_by_lookup[offer.lookup_key])
                continue

            product = await self.gateway.create_product(
                name=offer.name,
                description=offer.description,
                metadata=offer.product_metadata(self.app_marker),
            )
            price = await self.gateway.create_price(
                product_id=product["id"],
                unit_amount=offer.unit_amount,
                currency=offer.currency,
                lookup_key=offer.lookup_key,
                metadata=offer.price_metadata(self.app_marker),
            )
            logger.info(f"Created gateway price {price.get('id')} for offer {offer.lookup_key}")
            prices.append(price)
        return prices

    @staticmethod
    def _to_offer_dto(price: Dict[str, Any]) -> OfferDTO:
        product = price.get("product")
        product_name = product.get("name") if isinstance(product, dict) else None
        if not product_name:
            offer = find_offer(price.get("lookup_key"))
            product_name = offer.name if offer else None

        return OfferDTO(
            id=price["id"],
            lookup_key=price.get("lookup_key"),
            currency=price.get("currency"),
            unit_amount=price.get("unit_amount"),
            product_name=product_name,
            metadata={k: str(v) for k, v in (price.get("metadata") or {}).items()},
        )
