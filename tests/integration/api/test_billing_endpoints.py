"""Integration tests for Billing API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from httpx import AsyncClient
from sqlmodel import select

from src.domain.credit_ledger import CreditLedger
from src.domain.purchase import Purchase
from tests.fixtures.payment_gateway import make_checkout_session


async def count_purchases(session_factory) -> int:
    async with session_factory() as session:
        return len((await session.execute(select(Purchase))).scalars().all())


class TestConfirmEndpoint:
    """GET /api/billing/confirm"""

    @pytest.mark.asyncio
    async def test_confirm_paid_session(self, client: AsyncClient, db_session, session_factory, fake_gateway):
        # Arrange
        db_session.add(CreditLedger(user_id="user_1", credits=Decimal("5.00"), free_used=1))
        await db_session.commit()
        fake_gateway.add_session(make_checkout_session())

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "fulfilled"
        assert Decimal(data["credits"]) == Decimal("25.00")
        assert data["freeUsed"] == 1
        assert await count_purchases(session_factory) == 1

    @pytest.mark.asyncio
    async def test_confirm_twice_is_idempotent(self, client: AsyncClient, session_factory, fake_gateway):
        # Arrange
        fake_gateway.add_session(make_checkout_session())

        # Act
        first = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})
        second = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert first.status_code == 200
        assert second.status_code == 200
        assert Decimal(first.json()["credits"]) == Decimal("20.00")
        assert Decimal(second.json()["credits"]) == Decimal("20.00")
        assert await count_purchases(session_factory) == 1

    @pytest.mark.asyncio
    async def test_unpaid_session_returns_status_only(self, client: AsyncClient, session_factory, fake_gateway):
        # Arrange
        fake_gateway.add_session(make_checkout_session(payment_status="unpaid"))

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 200
        assert response.json() == {"status": "unpaid"}
        assert await count_purchases(session_factory) == 0

    @pytest.mark.asyncio
    async def test_foreign_session_is_forbidden(self, client: AsyncClient, session_factory, fake_gateway):
        # Arrange
        fake_gateway.add_session(make_checkout_session(user_id="user_2"))

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
        assert await count_purchases(session_factory) == 0

    @pytest.mark.asyncio
    async def test_missing_session_id(self, client: AsyncClient, fake_gateway):
        # Act
        response = await client.get("/api/billing/confirm")

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert fake_gateway.retrieve_calls == []

    @pytest.mark.asyncio
    async def test_malformed_session_id_never_reaches_gateway(self, client: AsyncClient, fake_gateway):
        """
        Given: A session_id carrying path segments and a query string
        When: Confirming checkout with it
        Then: It is rejected as VALIDATION_ERROR before any gateway call
        """
        # Act
        response = await client.get(
            "/api/billing/confirm", params={"session_id": "x/../../customers/cus_1?limit=1#"}
        )

        # Assert
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Invalid session_id"
        assert fake_gateway.retrieve_calls == []

    @pytest.mark.asyncio
    async def test_requires_sign_in(self, client: AsyncClient, auth, fake_gateway):
        # Arrange
        auth.sign_out()
        fake_gateway.add_session(make_checkout_session())

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"
        assert fake_gateway.retrieve_calls == []

    @pytest.mark.asyncio
    async def test_unknown_session_is_gateway_error(self, client: AsyncClient):
        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_missing"})

        # Assert
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "GATEWAY_ERROR"
        assert error["message"].startswith("Stripe retrieve failed:")

    @pytest.mark.asyncio
    async def test_missing_secret_key_is_configuration_error(self, client: AsyncClient, fake_gateway):
        # Arrange
        fake_gateway.configured = False

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "CONFIGURATION_ERROR",
            "message": "Missing STRIPE_SECRET_KEY environment variable",
        }

    @pytest.mark.asyncio
    async def test_unexpected_failure_returns_internal_error(self, client: AsyncClient, fake_gateway):
        # Arrange
        fake_gateway.retrieve_checkout_session = AsyncMock(side_effect=RuntimeError("boom"))

        # Act
        response = await client.get("/api/billing/confirm", params={"session_id": "cs_test_123"})

        # Assert
        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}
        }


class TestCreateCheckoutEndpoint:
    """POST /api/billing/create-checkout"""

    @pytest.mark.asyncio
    async def test_create_checkout(self, client: AsyncClient, fake_gateway):
        # Arrange
        fake_gateway.add_price("PACK_20_CREDITS")

        # Act
        response = await client.post(
            "/api/billing/create-checkout",
            json={"lookupKey": "PACK_20_CREDITS", "quantity": 2, "redirectURL": "/dashboard"},
        )

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "url": "https://checkout.stripe.com/c/pay/cs_test_1",
            "id": "cs_test_1",
        }
        created = fake_gateway.created_checkouts[0]
        assert created["quantity"] == 2
        assert created["customer_email"] == "ada@example.com"
        assert created["metadata"] == {"user_id": "user_1"}
        assert created["success_url"] == "https://app.example.com/dashboard?session_id={CHECKOUT_SESSION_ID}"

    @pytest.mark.asyncio
    async def test_defaults_quantity_and_redirect(self, client: AsyncClient, fake_gateway):
        # Arrange
        fake_gateway.add_price("PAYG_IMAGE_CREDIT", unit_amount=100)

        # Act
        response = await client.post("/api/billing/create-checkout", json={"lookupKey": "PAYG_IMAGE_CREDIT"})

        # Assert
        assert response.status_code == 200
        created = fake_gateway.created_checkouts[0]
        assert created["quantity"] == 1
        assert created["cancel_url"] == "https://app.example.com/upload"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"lookupKey": ""},
            {"lookupKey": "   "},
            {"lookupKey": "PACK_20_CREDITS", "quantity": 0},
            {"lookupKey": "PACK_20_CREDITS", "quantity": 501},
        ],
    )
    async def test_invalid_body_is_validation_error(self, client: AsyncClient, fake_gateway, payload):
        # Act
        response = await client.post("/api/billing/create-checkout", json=payload)

        # Assert
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert isinstance(error["details"], list) and error["details"]
        assert fake_gateway.created_checkouts == []

    @pytest.mark.asyncio
    async def test_unmanaged_price_is_rejected(self, client: AsyncClient, fake_gateway):
        # Arrange
        fake_gateway.add_price("OTHER_APP_PLAN", app_marker="otherapp")

        # Act
        response = await client.post("/api/billing/create-checkout", json={"lookupKey": "OTHER_APP_PLAN"})

        # Assert
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNMANAGED_PRICE"

    @pytest.mark.asyncio
    async def test_requires_email(self, client: AsyncClient, auth, fake_gateway):
        # Arrange
        auth.sign_in("user_1", email=None)
        fake_gateway.add_price("PACK_20_CREDITS")

        # Act
        response = await client.post("/api/billing/create-checkout", json={"lookupKey": "PACK_20_CREDITS"})

        # Assert
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


class TestCreditsEndpoint:
    """GET /api/billing/me"""

    @pytest.mark.asyncio
    async def test_anonymous(self, client: AsyncClient, auth):
        # Arrange
        auth.sign_out()

        # Act
        response = await client.get("/api/billing/me")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is False
        assert data["freeUsed"] == 0
        assert Decimal(str(data["credits"])) == Decimal("0")

    @pytest.mark.asyncio
    async def test_signed_in_with_balance(self, client: AsyncClient, db_session):
        # Arrange
        db_session.add(CreditLedger(user_id="user_1", credits=Decimal("12.50"), free_used=3))
        await db_session.commit()

        # Act
        response = await client.get("/api/billing/me")

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is True
        assert data["freeUsed"] == 3
        assert Decimal(str(data["credits"])) == Decimal("12.50")


class TestProductsEndpoint:
    """GET /api/billing/products"""

    @pytest.mark.asyncio
    async def test_lists_offers_and_creates_missing_ones_once(self, client: AsyncClient, auth, fake_gateway):
        # Arrange
        auth.sign_out()

        # Act
        first = await client.get("/api/billing/products")
        second = await client.get("/api/billing/products")

        # Assert
        assert first.status_code == 200
        offers = first.json()["offers"]
        assert [o["lookupKey"] for o in offers] == [
            "PAYG_IMAGE_CREDIT",
            "PACK_20_CREDITS",
            "PACK_50_CREDITS",
            "PACK_100_CREDITS",
        ]
        assert offers[1]["unitAmount"] == 1800
        assert offers[1]["productName"] == "20-photo pack"
        assert offers[1]["metadata"]["credits_per_unit"] == "20"

        assert second.status_code == 200
        assert second.json() == first.json()
        assert len(fake_gateway.created_prices) == 4
