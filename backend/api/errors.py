"""
Exception handlers.

Every failure leaves the API as `{"success": false, "error": {"message", "code"}}`.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import CommunityError
from modules.auth.exceptions import InternalAuthError, RequestValidationFailed
from modules.auth.models import ErrorBody, ErrorEnvelope

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    """Render an error envelope."""
    envelope = ErrorEnvelope(error=ErrorBody(message=message, code=code))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )


def community_error_response(exc: CommunityError) -> JSONResponse:
    """Render a CommunityError; server-side messages are replaced with a generic one."""
    message = exc.message if exc.status_code < 500 else InternalAuthError().message
    return error_response(exc.status_code, message, exc.code)


def format_validation_errors(exc: RequestValidationError) -> str:
    """Join pydantic error messages into one human-readable string."""
    messages = []
    for error in exc.errors():
        msg = str(error.get("msg", "Invalid value"))
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX):]
        messages.append(msg)
    return "; ".join(messages) or "Validation failed"


async def handle_community_error(request: Request, exc: CommunityError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return community_error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return community_error_response(RequestValidationFailed(format_validation_errors(exc)))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return community_error_response(InternalAuthError())


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CommunityError, handle_community_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
