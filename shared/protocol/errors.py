from __future__ import annotations

from enum import IntEnum
from typing import Optional


class StatusCode(IntEnum):
    """HTTP status codes answered by the plain-request surface."""

    SUCCESS = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    INTERNAL_ERROR = 500


class ErrorCode(IntEnum):
    """Domain specific error codes."""

    ENCODE_FAILED = 1001


class ProtocolError(Exception):
    """Structured protocol exception carrying status + code + message."""

    def __init__(self, status: StatusCode, code: Optional[ErrorCode] = None, message: str = "") -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"{status.name} ({int(status)}): {message} (code={code.name if code else 'n/a'})")


class ConfigError(ValueError):
    """Server configuration could not be resolved; fatal at startup."""


class AssetCacheError(OSError):
    """Static asset directory could not be loaded; fatal at startup."""


class ApiError(Exception):
    """Outbound API request failed at the transport or with a status >= 300."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "StatusCode",
    "ErrorCode",
    "ProtocolError",
    "ConfigError",
    "AssetCacheError",
    "ApiError",
]
