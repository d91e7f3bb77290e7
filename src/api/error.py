"""API error mapping

Use case errors travel as libs.result.Error values and are raised at the
route boundary as ClientError. Every error response has the shape
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error
from src.api.request_logging import log_error

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "CONFIGURATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "GATEWAY_ERROR": status.HTTP_400_BAD_REQUEST,
    "PRICE_NOT_FOUND": status.HTTP_400_BAD_REQUEST,
    "UNMANAGED_PRICE": status.HTTP_400_BAD_REQUEST,
    "AUTHENTICATION_REQUIRED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "JOB_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR = Error(code="INTERNAL_ERROR", message="Internal server error")


class ClientError(Exception):
    """Raised by routes to return a structured error response"""

    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST)


def error_response(error: Error, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error.to_dict()})


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        log_error(
            exc,
            request,
            code=exc.error.code,
            reason=exc.error.reason,
            status_code=exc.status_code,
        )
        # Internal reasons stay in the logs
        return error_response(
            Error(code=exc.error.code, message=exc.error.message),
            exc.status_code,
        )
    return error_response(exc.error, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in issue.get("loc", ())[1:]),
            "message": issue.get("msg", ""),
        }
        for issue in exc.errors()
    ]
    return error_response(
        Error(code="VALIDATION_ERROR", message="Validation failed", details=details),
        status.HTTP_400_BAD_REQUEST,
    )


async def catch_unhandled_exceptions(request: Request, call_next):
    """HTTP middleware turning any escaped exception into a 500 response"""
    try:
        return await call_next(request)
    except Exception as exc:
        log_error(exc, request, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return error_response(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.middleware("http")(catch_unhandled_exceptions)
