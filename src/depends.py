from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.adapter.services.session_identity_provider import SqlAlchemyIdentityProvider
from src.app.services.identity_provider import Principal
from src.app.services.payment_gateway import PaymentGateway

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_config(request: Request):
    return request.app.state.config


def get_payment_gateway(request: Request) -> PaymentGateway:
    return request.app.state.payment_gateway


async def get_principal(
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
) -> Optional[Principal]:
    """Signed-in caller resolved from the auth provider's session cookie, or None"""
    for cookie_name in config.SESSION_COOKIE_NAMES:
        token = request.cookies.get(cookie_name)
        if token:
            return await SqlAlchemyIdentityProvider(session).resolve(token)
    return None


async def require_principal(
    principal: Optional[Principal] = Depends(get_principal),
) -> Principal:
    if principal is None:
        raise ClientError(Error(code="AUTHENTICATION_REQUIRED", message="Sign in required"))
    return principal
