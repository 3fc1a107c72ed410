"""
# `importhub/core/errors.py` — Error taxonomy

Every failure the import service reports to a caller is one of the classes below.
`register_exception_handlers(app)` maps them to JSON responses:

| Error                | HTTP      | Body                                   |
|----------------------|-----------|----------------------------------------|
| `ValidationError`    | 400       | `{"error": "...", "field": "..."}`     |
| `AuthorizationError` | 401 / 403 | `{"error": "..."}`                     |
| `NotFoundError`      | 404       | `{"error": "..."}`                     |
| `ConflictError`      | 409       | `{"error": "..."}`                     |
| `InternalError`      | 500       | `{"error": "Internal server error"}`   |

`NotFoundError` is also used for orders that exist but belong to someone else, so a
caller cannot probe for other users' order ids.

FastAPI's own `RequestValidationError` (wrong JSON types, missing fields) is reported
with the same 400 body as `ValidationError`.
"""
import logging
from typing import Any, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("importhub.errors")

GENERIC_INTERNAL_MESSAGE = "Internal server error"


class ImportServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_INTERNAL_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationError(ImportServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Invalid value for '{field}'")

    def to_body(self) -> dict:
        return {"error": self.message, "field": self.field}


class AuthorizationError(ImportServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(ImportServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Import not found"


class ConflictError(ImportServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Could not allocate a unique import code"


class InternalError(ImportServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_body(self) -> dict:
        # detail stays in the logs
        return {"error": GENERIC_INTERNAL_MESSAGE}


def field_path(loc: Sequence[Any]) -> str:
    """("body", "items", 0, "quantity") -> "items[0].quantity" """
    parts = [p for p in loc if p not in ("body", "query", "path")]
    out = ""
    for part in parts:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out or "body"


async def _service_error_handler(request: Request, exc: ImportServiceError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    err = ValidationError(field_path(first.get("loc", ())), first.get("msg"))
    return JSONResponse(status_code=err.status_code, content=err.to_body())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_INTERNAL_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImportServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
