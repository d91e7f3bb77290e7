"""Request-aware logging

Logging is configured once by the app factory from ApplicationConfig.
Routes and handlers log business events and errors with the request
context (method, path, user agent, request id) attached.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import Request

logger = logging.getLogger("photo_credits.api")

REQUEST_ID_HEADER = "X-Request-ID"

# Attributes every LogRecord has; anything else came in through `extra`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation in production"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["err"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config) -> None:
    handler = logging.StreamHandler(sys.stdout)
    if str(config.LOG_FORMAT).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    # No-op when handlers are already installed (e.g. by a test runner)
    logging.basicConfig(level=str(config.LOG_LEVEL).upper(), handlers=[handler])


def request_context(request: Request) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "user_agent": request.headers.get("user-agent"),
        "request_id": getattr(request.state, "request_id", None)
        or request.headers.get(REQUEST_ID_HEADER),
    }


def log_event(event_name: str, request: Request, **data: Any) -> None:
    logger.info(event_name, extra={**request_context(request), "event": event_name, **data})


def log_error(error: BaseException, request: Request, **context: Any) -> None:
    logger.error(
        f"{type(error).__name__}: {error}",
        exc_info=(type(error), error, error.__traceback__),
        extra={**request_context(request), **context},
    )


def log_warn(message: str, request: Request, **context: Any) -> None:
    logger.warning(message, extra={**request_context(request), **context})


async def request_logging_middleware(request: Request, call_next):
    """Assign a request id and log every request with its status and duration"""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms",
        extra={
            **request_context(request),
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
