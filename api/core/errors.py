"""
Error taxonomy and the JSON error envelope.

All request-level failures are `HTTPException` subclasses so FastAPI routes
them through one handler, which renders `{"error": "<message>"}`.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import asyncpg
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(status_code=self.status_code, detail=message)

    @property
    def message(self) -> str:
        return str(self.detail)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


@contextmanager
def driver_errors(
    action: str,
    *,
    not_found: str | None = None,
    conflict: str | None = None,
    **context: object,
) -> Iterator[None]:
    """
    Translate driver failures raised inside the block.

    - foreign-key violation -> NotFound(not_found), when given
    - unique violation      -> Conflict(conflict), when given
    - anything else from the driver -> logged, InternalError with a generic message

    `ApiError`s raised inside the block pass through untouched.
    """
    try:
        yield
    except asyncpg.ForeignKeyViolationError as exc:
        if not_found is None:
            _log_failure(action, context)
            raise InternalError(f"An error occurred while {action}") from exc
        raise NotFound(not_found) from exc
    except asyncpg.UniqueViolationError as exc:
        if conflict is None:
            _log_failure(action, context)
            raise InternalError(f"An error occurred while {action}") from exc
        raise Conflict(conflict) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        _log_failure(action, context)
        raise InternalError(f"An error occurred while {action}") from exc


def _log_failure(action: str, context: dict[str, object]) -> None:
    details = " ".join(f"{k}={v}" for k, v in context.items())
    logger.exception("db_failed action=%r %s", action, details)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = str(first.get("msg") or "Invalid value")
    if loc:
        return f"{'.'.join(loc)}: {msg}"
    return msg


async def _http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _first_validation_message(exc)},
    )


def install_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
