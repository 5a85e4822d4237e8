"""Errors raised when the API answers a request with an HTTP error status."""

from __future__ import annotations

import json
from typing import Any

_TEXT_KEYS = ("code", "message", "field", "suggestion")


class APIError(Exception):
    """Why an API request failed, as reported by the server.

    Raised only for HTTP error responses, never for network or decoding
    problems.
    """

    def __init__(
        self,
        status: str = "",
        status_code: int = 0,
        code: str = "",
        message: str = "",
        field: str = "",
        suggestion: str = "",
        errors: list[APIError | None] | None = None,
    ) -> None:
        super().__init__()
        self.status = status
        self.status_code = status_code
        self.code = code
        self.message = message
        self.field = field
        self.suggestion = suggestion
        self.errors: list[APIError | None] = list(errors or [])

    def __str__(self) -> str:
        if self.message:
            return f"{self.code} {self.message}" if self.code else self.message
        if self.code:
            return self.code
        return f"{self.status_code} {self.status}"

    def __repr__(self) -> str:
        return (
            f"APIError(status_code={self.status_code!r}, code={self.code!r}, "
            f"message={self.message!r})"
        )


def _fill(error: APIError, payload: Any) -> APIError:
    if not isinstance(payload, dict):
        raise TypeError("error payload must be a JSON object")
    for key in _TEXT_KEYS:
        value = payload.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise TypeError(f"error field {key!r} must be a string")
        setattr(error, key, value)
    nested = payload.get("errors")
    if nested is not None:
        if not isinstance(nested, list):
            raise TypeError("error field 'errors' must be a list")
        error.errors = [None if item is None else _fill(APIError(), item) for item in nested]
    return error


def parse_api_error(status_code: int, reason: str, body: bytes | str) -> APIError:
    """Build an APIError from an HTTP error response.

    The body is expected to hold ``{"error": {...}}``; when it cannot be read
    that way, the raw body text becomes the error message.
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, (bytes, bytearray)) else body
    error = APIError(status=reason, status_code=status_code)
    try:
        document = json.loads(text)
        if document is not None:
            if not isinstance(document, dict):
                raise TypeError("error response must be a JSON object")
            inner = document.get("error")
            if inner is not None:
                _fill(error, inner)
    except (ValueError, TypeError):
        error.message = text
    return error