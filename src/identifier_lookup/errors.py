"""Error hierarchy for identifier lookups.

Every failure of a single lookup is terminal: nothing here is retried. The
``message`` attribute is the short text shown to the user; ``code`` and
``details`` are for logs and ``--json`` output.
"""

from __future__ import annotations

from typing import Any


class IdentifierLookupError(Exception):
    def __init__(
        self,
        message: str,
        code: str = "LOOKUP_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class ValidationError(IdentifierLookupError):
    """Input does not match the pattern of its identifier type."""

    def __init__(self, identifier_type: str, value: str) -> None:
        super().__init__(
            "Invalid input format!",
            code="LOOKUP_INVALID_INPUT",
            details={"type": identifier_type, "value": value},
        )


class LookupTimeoutError(IdentifierLookupError):
    """The cancellation token fired before a response arrived."""

    def __init__(
        self,
        message: str = "Request timed out. Please try again.",
        code: str = "LOOKUP_TIMEOUT",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class LookupCancelledError(LookupTimeoutError):
    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            "Request cancelled.",
            code="LOOKUP_CANCELLED",
            details=details,
        )


class ConnectivityError(IdentifierLookupError):
    """No response was received at all."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            "Network error. Check your internet connection.",
            code="LOOKUP_CONNECTIVITY",
            details=details,
        )


class ServerError(IdentifierLookupError):
    def __init__(self, status_code: int, details: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        super().__init__(
            f"Server error (HTTP {status_code}). Try again later.",
            code="LOOKUP_SERVER_ERROR",
            details={"status_code": status_code, **(details or {})},
        )


class ResponseDecodeError(IdentifierLookupError):
    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            "Failed to fetch data. Try again later.",
            code="LOOKUP_BAD_RESPONSE",
            details=details,
        )


class RegistryError(IdentifierLookupError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="LOOKUP_REGISTRY")


__all__ = [
    "ConnectivityError",
    "IdentifierLookupError",
    "LookupCancelledError",
    "LookupTimeoutError",
    "RegistryError",
    "ResponseDecodeError",
    "ServerError",
    "ValidationError",
]
