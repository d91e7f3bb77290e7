"""Integration tests for resolving callers from auth session cookies"""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import ASGITransport, AsyncClient

from src.adapter.services.session_identity_provider import SqlAlchemyIdentityProvider
from src.depends import get_principal
from src.domain.user import AuthSession, User


async def add_user_with_session(db_session, token="tok_live", expires_in=timedelta(days=1)) -> User:
    user = User(email="ada@example.com", name="Ada")
    db_session.add(user)
    await db_session.commit()
    db_session.add(
        AuthSession(
            user_id=user.id,
            session_token=token,
            expires=datetime.now(timezone.utc) + expires_in,
        )
    )
    await db_session.commit()
    return user


class TestSqlAlchemyIdentityProvider:

    @pytest.mark.asyncio
    async def test_resolves_live_session(self, db_session):
        # Arrange
        user = await add_user_with_session(db_session)

        # Act
        principal = await SqlAlchemyIdentityProvider(db_session).resolve("tok_live")

        # Assert
        assert principal.user_id == user.id
        assert principal.email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_expired_session_is_anonymous(self, db_session):
        # Arrange
        await add_user_with_session(db_session, token="tok_old", expires_in=timedelta(minutes=-5))

        # Act & Assert
        assert await SqlAlchemyIdentityProvider(db_session).resolve("tok_old") is None

    @pytest.mark.asyncio
    async def test_unknown_or_empty_token_is_anonymous(self, db_session):
        provider = SqlAlchemyIdentityProvider(db_session)

        assert await provider.resolve("tok_unknown") is None
        assert await provider.resolve("") is None


class TestSessionCookie:
    """The real get_principal dependency reading the auth cookie"""

    @pytest.mark.asyncio
    async def test_cookie_identifies_caller(self, app, db_session):
        # Arrange
        await add_user_with_session(db_session, token="tok_cookie")
        app.dependency_overrides.pop(get_principal)

        # Act
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={"authjs.session-token": "tok_cookie"},
        ) as client:
            signed_in = await client.get("/api/billing/me")
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            anonymous = await client.get("/api/billing/me")

        # Assert
        assert signed_in.json()["authenticated"] is True
        assert anonymous.json()["authenticated"] is False
