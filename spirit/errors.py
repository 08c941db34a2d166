"""
Error kinds and their single mapping to HTTP responses.

Services return outcome values and routes translate them here. Status codes
and the `{"error": ...}` body shape are not defined anywhere else.
"""

from enum import Enum
from typing import Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ErrorKind(str, Enum):
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"


_ERROR_TABLE: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not found"),
    ErrorKind.CONFLICT: (status.HTTP_409_CONFLICT, "Conflict"),
    ErrorKind.BAD_REQUEST: (status.HTTP_400_BAD_REQUEST, "Bad request"),
    ErrorKind.RATE_LIMITED: (status.HTTP_429_TOO_MANY_REQUESTS, "Too many requests"),
    ErrorKind.UPSTREAM: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"),
}


def error_response(
    kind: ErrorKind,
    message: Optional[str] = None,
    **extra,
) -> JSONResponse:
    """Build the JSON error response for an error kind.

    Args:
        kind: Which error occurred.
        message: Caller-facing text; defaults to the kind's generic message.
        **extra: Additional body fields (e.g. `success=False`).
    """
    status_code, default_message = _ERROR_TABLE[kind]
    body = {**extra, "error": message or default_message}
    return JSONResponse(status_code=status_code, content=body)


# Routes whose bodies always carry a `success` flag, error bodies included
_SUCCESS_FLAG_PREFIXES = ("/reflections",)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with the common body shape."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid '{field}': {first.get('msg')}" if field else "Invalid request body"
    extra = {"success": False} if request.url.path.startswith(_SUCCESS_FLAG_PREFIXES) else {}
    return error_response(ErrorKind.BAD_REQUEST, message, **extra)
