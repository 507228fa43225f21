"""Application-level exceptions and FastAPI exception handlers."""

from __future__ import annotations

from enum import Enum

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    STORE_UNAVAILABLE = "store_unavailable"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"


class AppException(Exception):
    """Base application exception.

    ``message`` is the user-visible text; ``kind`` exists so callers and
    tests can branch without parsing it.
    """

    kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(AppException):
    kind = ErrorKind.VALIDATION
    status_code = 422


class StoreUnavailableError(AppException):
    kind = ErrorKind.STORE_UNAVAILABLE
    status_code = 503


class NotFoundError(AppException):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class UnauthorizedError(AppException):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class DuplicateSequenceError(ValidationError):
    """Another insert claimed the same sequence number first.

    Retryable: the caller should rescan for the next free number.
    """

    status_code = 409


def register_exception_handlers(app: FastAPI) -> None:
    """Attach JSON handlers for ``AppException`` subclasses."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message, "kind": exc.kind.value},
        )
