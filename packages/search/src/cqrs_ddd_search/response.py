"""
Uniform response envelope for search endpoints.

Every response carries ``response_code`` and ``response_message``.
Successful responses add ``data`` (and ``meta`` for pages); failures add a
flat ``error`` list of human-readable messages::

    {
        "response_code": 400,
        "response_message": "Bad Request Exception",
        "error": ["Filter 1: 'password' is not an allowed search field"],
    }
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from .exceptions import (
    FilterValidationError,
    MalformedValueError,
    SearchError,
    UnsupportedOperatorError,
)

if TYPE_CHECKING:
    from .assembler import SearchPage

logger = logging.getLogger(__name__)


class ResponseCode(IntEnum):
    SUCCESS = 200
    CREATED = 201
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INVALID_FIELD_FORMAT = 422
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504


_MESSAGES: dict[int, str] = {
    ResponseCode.SUCCESS: "Success",
    ResponseCode.CREATED: "Created successfully",
    ResponseCode.BAD_REQUEST: "Bad Request Exception",
    ResponseCode.UNAUTHORIZED: "Unauthorized",
    ResponseCode.FORBIDDEN: "Forbidden",
    ResponseCode.NOT_FOUND: "Not found",
    ResponseCode.CONFLICT: "Data Conflict",
    ResponseCode.INVALID_FIELD_FORMAT: "Invalid Field Format",
    ResponseCode.TOO_MANY_REQUESTS: "Too many requests",
    ResponseCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
    ResponseCode.SERVICE_UNAVAILABLE: "Service unavailable",
    ResponseCode.GATEWAY_TIMEOUT: "Gateway timeout",
}

_CLIENT_ERRORS = (FilterValidationError, UnsupportedOperatorError, MalformedValueError)


def get_message(code: int) -> str:
    return _MESSAGES.get(code, "Unknown error")


def extract_error_messages(error: Any) -> list[str]:
    """
    Flatten *error* into a list of strings.

    Accepts strings, nested lists/tuples, mappings with ``message``,
    ``errors`` or ``error`` keys, pydantic ``ValidationError`` and other
    exceptions. Anything else contributes nothing.
    """
    if not error:
        return []
    if isinstance(error, str):
        return [error]
    if isinstance(error, list | tuple):
        return [msg for item in error for msg in extract_error_messages(item)]
    if isinstance(error, ValidationError):
        return [_pydantic_message(e) for e in error.errors()]
    if isinstance(error, SearchError):
        return error.errors
    if isinstance(error, BaseException):
        text = str(error)
        return [text] if text else []
    if isinstance(error, dict):
        for key in ("message", "errors", "error"):
            if error.get(key):
                return extract_error_messages(error[key])
    return []


def _pydantic_message(err: Any) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else str(err["msg"])


def _split_commas(messages: list[str]) -> list[str]:
    out: list[str] = []
    for msg in messages:
        if "," in msg:
            out.extend(part.strip() for part in msg.split(",") if part.strip())
        else:
            out.append(msg)
    return out


def _envelope_messages(error: Any) -> list[str]:
    # Engine and pydantic messages are already one per problem and may
    # contain commas themselves; only free text is split.
    if isinstance(error, SearchError | ValidationError):
        return extract_error_messages(error)
    if isinstance(error, list | tuple):
        return [msg for item in error for msg in _envelope_messages(item)]
    return _split_commas(extract_error_messages(error))


def build_response(
    code: int,
    data: Any = None,
    message: str | None = None,
) -> dict[str, Any]:
    """
    Build an envelope for *code*.

    Below 300 *data* is returned as-is under ``data``; otherwise it is
    flattened with :func:`extract_error_messages` into ``error``. Free-text
    messages are split on commas; ``SearchError`` and pydantic messages are
    kept whole.
    """
    response: dict[str, Any] = {
        "response_code": int(code),
        "response_message": message or get_message(code),
    }
    if int(code) < 300:
        response["data"] = {} if data is None else data
    else:
        messages = _envelope_messages(data)
        if messages:
            response["error"] = messages
    return response


def paginate_response(
    page: SearchPage,
    code: int = ResponseCode.SUCCESS,
    message: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "response_code": int(code),
        "response_message": message or get_message(code),
        "data": page.rows,
        "meta": page.meta.to_dict(),
        **(extra or {}),
    }


def error_response(exc: BaseException, default_message: str | None = None) -> dict[str, Any]:
    """Map an exception raised by a search to an error envelope and log it."""
    if isinstance(exc, _CLIENT_ERRORS):
        logger.info("Search request rejected: %s", exc)
        return build_response(ResponseCode.BAD_REQUEST, exc)
    if isinstance(exc, ValidationError):
        logger.info("Search request body invalid: %s", exc)
        return build_response(ResponseCode.INVALID_FIELD_FORMAT, exc)

    logger.error("Search failed: %s", exc, exc_info=exc)
    if extract_error_messages(exc):
        return build_response(ResponseCode.INTERNAL_SERVER_ERROR, exc)
    return build_response(
        ResponseCode.INTERNAL_SERVER_ERROR,
        [default_message or "An unexpected error occurred"],
    )


__all__ = [
    "ResponseCode",
    "build_response",
    "error_response",
    "extract_error_messages",
    "get_message",
    "paginate_response",
]
