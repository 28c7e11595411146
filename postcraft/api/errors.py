"""
Maps service errors to HTTP responses.
"""
import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from postcraft.core.errors import (
    AccountNotFound,
    EmailAlreadyRegistered,
    GenerationNotFound,
    InvalidCredentials,
    InvalidInput,
    PaymentGatewayError,
    PaymentNotConfigured,
    PaymentVerificationFailed,
    PostcraftError,
    QuotaExceeded,
    SynthesisUnavailable,
    Unauthenticated,
)

logger = logging.getLogger(__name__)

# Anything not listed (synthesis empty/malformed, storage) is a 500
ERROR_STATUS_CODES: Dict[Type[PostcraftError], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    AccountNotFound: status.HTTP_404_NOT_FOUND,
    GenerationNotFound: status.HTTP_404_NOT_FOUND,
    QuotaExceeded: status.HTTP_429_TOO_MANY_REQUESTS,
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    PaymentVerificationFailed: status.HTTP_400_BAD_REQUEST,
    EmailAlreadyRegistered: status.HTTP_409_CONFLICT,
    SynthesisUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    PaymentNotConfigured: status.HTTP_503_SERVICE_UNAVAILABLE,
    PaymentGatewayError: status.HTTP_502_BAD_GATEWAY,
}


def status_code_for(error: PostcraftError) -> int:
    for error_type in type(error).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def postcraft_error_handler(request: Request, exc: PostcraftError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(
            "%s %s failed with %s: %s",
            request.method, request.url.path, exc.kind, exc.message,
            exc_info=exc.__cause__ or exc,
        )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error.", "error": "internal_error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostcraftError, postcraft_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
