"""
Exception handlers.

Maps the shared exception hierarchy to HTTP status codes and renders
every failure in the same envelope as successful responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import (
    PostlyError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from modules.billing.exceptions import PaymentNotCompletedError
from modules.integrity.exceptions import PartialCascadeError

from .models.errors import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)

# Most specific first
STATUS_BY_ERROR: list[tuple[type[PostlyError], int]] = [
    (PaymentNotCompletedError, status.HTTP_402_PAYMENT_REQUIRED),
    (PartialCascadeError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(exc: PostlyError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def postly_error_handler(request: Request, exc: PostlyError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    body = ErrorResponse(message=exc.message, error=exc.code, details=exc.details)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ErrorResponse(message=str(exc.detail), error=f"HTTP_{exc.status_code}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(body),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
    summary = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
    body = ValidationErrorResponse(message=message, details={"errors": summary})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(body),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostlyError, postly_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
