import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("APP_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./photo_credits.db")
    AUTO_CREATE_SCHEMA = bool(data.get("AUTO_CREATE_SCHEMA", True))
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = data.get("LOG_FORMAT", "text")  # "json" in production
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Payment gateway (Stripe REST API)
    STRIPE_SECRET_KEY = data.get("STRIPE_SECRET_KEY", os.environ.get("STRIPE_SECRET_KEY", ""))
    PAYMENT_API_BASE = data.get("PAYMENT_API_BASE", "https://api.stripe.com")
    PAYMENT_API_TIMEOUT = data.get("PAYMENT_API_TIMEOUT", 15.0)  # Seconds
    PAYMENT_APP_MARKER = data.get("PAYMENT_APP_MARKER", "stageinseconds")
    APP_URL = data.get("APP_URL", os.environ.get("APP_URL", ""))

    # Session cookies issued by the auth provider
    SESSION_COOKIE_NAMES = data.get(
        "SESSION_COOKIE_NAMES",
        ["authjs.session-token", "__Secure-authjs.session-token"],
    )

    # Rate limiting
    RATE_LIMIT_ENABLED = bool(data.get("RATE_LIMIT_ENABLED", True))
    RATE_LIMIT_WINDOW_SECONDS = data.get("RATE_LIMIT_WINDOW_SECONDS", 60)
    RATE_LIMIT_BILLING_MAX = data.get("RATE_LIMIT_BILLING_MAX", 20)  # Requests per window
    RATE_LIMIT_GENERAL_MAX = data.get("RATE_LIMIT_GENERAL_MAX", 100)  # Requests per window
