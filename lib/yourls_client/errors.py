from __future__ import annotations

from typing import Any


class YourlsClientError(Exception):
    """Base client error."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class TransportError(YourlsClientError):
    """Transport/network layer error."""


class HttpStatusError(YourlsClientError):
    def __init__(self, message: str, status_code: int, details: str | None = None):
        super().__init__(message, status_code)
        self.status_code = status_code
        self.details = details


class DecodeError(YourlsClientError):
    """HTTP 200 with a body that is not JSON."""


class ApiError(YourlsClientError):
    """The API answered but reported a failed operation."""

    def __init__(self, message: str, code: int | None = None, payload: dict[str, Any] | None = None):
        super().__init__(message, code)
        self.payload = payload


class MalformedResponseError(YourlsClientError):
    """Decoded response is missing a field the operation needs."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field
