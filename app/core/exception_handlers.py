"""
Exception handlers for the FastAPI application.

Every error leaves the API as {"detail": ..., "code": ...} with an
X-Request-ID header that also appears in the matching log line.
"""

import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)

STATUS_TO_CODE = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTH_NOT_AUTHENTICATED,
    403: ErrorCode.AUTHZ_FORBIDDEN,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    409: ErrorCode.RESOURCE_CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    503: ErrorCode.SERVER_UNAVAILABLE,
}

GENERIC_ERROR_MESSAGE = "Something went wrong on our side. Please try again later."


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


def _error_response(
    status_code: int,
    body: dict[str, Any],
    request_id: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    response_headers = dict(headers or {})
    response_headers["X-Request-ID"] = request_id
    if status_code == 401:
        # Clients treat this as "sign in again"
        response_headers.setdefault("WWW-Authenticate", "Bearer")
    return JSONResponse(status_code=status_code, content=body, headers=response_headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    request_id = generate_request_id()
    logger.warning(
        "%s: %s (code=%s, status=%d, request_id=%s, path=%s)",
        type(exc).__name__,
        exc.message,
        exc.code.value,
        exc.status_code,
        request_id,
        request.url.path,
    )
    return _error_response(exc.status_code, exc.to_dict(), request_id)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request body, query or path did not match its schema."""
    request_id = generate_request_id()
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning(
        "Request validation failed: %s (request_id=%s, path=%s)",
        errors,
        request_id,
        request.url.path,
    )
    body = {"detail": errors, "code": ErrorCode.VALIDATION_ERROR.value}
    return _error_response(422, body, request_id)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException from endpoints, dependencies and routing (404, 405)."""
    request_id = generate_request_id()
    logger.warning(
        "HTTPException: %s (status=%d, request_id=%s, path=%s)",
        exc.detail,
        exc.status_code,
        request_id,
        request.url.path,
    )
    code = STATUS_TO_CODE.get(exc.status_code, ErrorCode.SERVER_ERROR)
    body = {"detail": exc.detail or "An error occurred", "code": code.value}
    return _error_response(exc.status_code, body, request_id, exc.headers)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: full traceback in the log, generic 500 to the client."""
    request_id = generate_request_id()
    logger.exception(
        "Unhandled exception (request_id=%s, path=%s)",
        request_id,
        request.url.path,
    )
    body = {"detail": GENERIC_ERROR_MESSAGE, "code": ErrorCode.SERVER_ERROR.value}
    return _error_response(500, body, request_id)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
