"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from src.adapter.services.stripe_gateway import StripePaymentGateway
from src.api.error import register_error_handlers
from src.api.rate_limit import create_redis_client
from src.api.request_logging import configure_logging, request_logging_middleware
from src.api.routes import billing, health, jobs
from src.depends import engine

# Register table metadata
from src.domain import CreditLedger, PhotoJob, Purchase, User, AuthSession  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.config
    if config.AUTO_CREATE_SCHEMA:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema ensured")
    yield
    await app.state.payment_gateway.aclose()
    await app.state.redis.aclose()


def create_app(config) -> FastAPI:
    configure_logging(config)

    if config.ENABLE_SENTRY and config.DSN_SENTRY:
        sentry_sdk.init(
            dsn=config.DSN_SENTRY,
            environment=config.SENTRY_ENVIRONMENT,
            traces_sample_rate=0.1,
        )

    app = FastAPI(title="Photo Credits Billing API", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.payment_gateway = StripePaymentGateway(
        secret_key=config.STRIPE_SECRET_KEY,
        api_base=config.PAYMENT_API_BASE,
        timeout=float(config.PAYMENT_API_TIMEOUT),
    )
    app.state.redis = create_redis_client(config)

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Registered before request logging so logged statuses include 500s
    register_error_handlers(app)
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(request_logging_middleware)

    app.include_router(health.router)
    app.include_router(billing.router, prefix=config.API_PREFIX)
    app.include_router(jobs.router, prefix=config.API_PREFIX)

    logger.info(f"Application created (prefix={config.API_PREFIX!r})")
    return app
