from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SpinnerError(Exception):
    """Base class for errors that end a request with a JSON error body."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None, field: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(SpinnerError, ValueError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(SpinnerError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(SpinnerError):
    status_code = 404
    default_message = "Not found"


class StoreError(SpinnerError):
    """Persistence failure. The message is always generic."""

    status_code = 500
    default_message = "Database error"


def _describe_validation_error(err: dict[str, Any]) -> tuple[str | None, str]:
    # integer parts are list indexes or JSON decode positions, never field names
    loc = [
        part for part in err.get("loc", ())
        if isinstance(part, str) and part not in ("body", "query", "path")
    ]
    field = loc[-1] if loc else None
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and "error" in ctx:
        message = str(ctx["error"])
    else:
        message = err.get("msg", "Invalid value")
        if field:
            message = f"{field}: {message}"
    return field, message


async def spinner_error_handler(request: Request, exc: SpinnerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    field, message = _describe_validation_error(errors[0]) if errors else (None, "Invalid request")
    return JSONResponse(status_code=400, content=ValidationError(message, field=field).to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SpinnerError, spinner_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
