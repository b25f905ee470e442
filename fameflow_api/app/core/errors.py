"""
Error taxonomy and the JSON error responses built from it.

Services raise the exceptions below; they never build HTTP responses
themselves.  ``register_exception_handlers`` installs handlers on the
FastAPI application that render every failure as::

    {"success": false, "error": "<message>", "code": "<CODE>"}

so the storefront can show ``error`` without looking at status codes.
"""

import logging
import sqlite3

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FameFlowError(Exception):
    """Base class for failures reported to API callers."""

    code = "ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(FameFlowError):
    """Missing or malformed request data; raised before any mutation."""

    code = "INVALID_INPUT"


class InsufficientFunds(FameFlowError):
    """A debit would take the balance below zero."""

    code = "INSUFFICIENT_FUNDS"


class NotFound(FameFlowError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class AccountSuspended(FameFlowError):
    code = "ACCOUNT_SUSPENDED"
    status_code = status.HTTP_403_FORBIDDEN


class ServiceUnavailable(FameFlowError):
    """Ordering is switched off by maintenance mode or a feature flag."""

    code = "SERVICE_UNAVAILABLE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class StorageFailure(FameFlowError):
    """The store is unavailable or rejected a write."""

    code = "STORAGE_FAILURE"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class DuplicateId(StorageFailure):
    """A generated order id collided with an existing primary key."""

    code = "DUPLICATE_ID"


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "code": code},
    )


async def fameflow_error_handler(request: Request, exc: FameFlowError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(exc.status_code, exc.code, exc.message)


HTTP_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: NotFound.code,
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, HTTP_CODES.get(exc.status_code, "HTTP_ERROR"), str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Report the first problem in a readable form, e.g. "amount: Input should be greater than 0"
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, InvalidInput.code, message)


async def storage_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        StorageFailure.code,
        "Storage failure, please try again later",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""
    app.add_exception_handler(FameFlowError, fameflow_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(sqlite3.Error, storage_error_handler)
