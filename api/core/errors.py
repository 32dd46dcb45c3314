"""
API error taxonomy and database error mapping.

Handlers raise `ApiError` subclasses; `main.py` renders them as
`{"error": {"message": ..., "code": ...}}` with the matching status code.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_body(self) -> dict:
        return {"error": {"message": self.message, "code": self.code}}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "MISSING_FIELDS"


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class DuplicateError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE"


class InternalError(ApiError):
    pass


def from_database_error(exc: Exception, *, table: str, operation: str) -> ApiError:
    """
    Translate a driver exception into one of the API errors.
    """
    sqlstate = getattr(exc, "sqlstate", None)
    logger.error(
        "db_error table=%s operation=%s sqlstate=%s error=%s",
        table,
        operation,
        sqlstate,
        exc,
    )
    if isinstance(exc, asyncpg.exceptions.UniqueViolationError):
        return DuplicateError("Duplicate record")
    if isinstance(exc, asyncpg.exceptions.ForeignKeyViolationError):
        if operation == "delete":
            return BadRequestError(
                f"{table} record is referenced by other records",
                code="FOREIGN_KEY_VIOLATION",
            )
        return BadRequestError(
            "Referenced record does not exist",
            code="FOREIGN_KEY_VIOLATION",
        )
    return InternalError("Internal server error")


async def api_error_handler(_: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, ApiError):
        exc = InternalError("Internal server error")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed JSON or a body that is not an object.
    problems = exc.errors()
    message = "Invalid request body"
    if problems:
        first = problems[0]
        where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        parts = [part for part in (where, first.get("msg")) if part]
        if parts:
            message = f"{message}: {' '.join(parts)}"
    logger.info("request_rejected errors=%s", len(problems))
    error = BadRequestError(message, code="BAD_REQUEST")
    return JSONResponse(status_code=error.status_code, content=error.to_body())
