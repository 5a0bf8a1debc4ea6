"""
Exceptions raised by shttp.

Transport failures (`httpx.ConnectError`, `httpx.ReadTimeout`, ...) and exceptions raised
by middlewares are not wrapped; they reach the caller unchanged.
"""

from __future__ import annotations


class ShttpError(Exception):
    """Base class for all shttp errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Construction errors
# =============================================================================


class URLParseError(ShttpError):
    """The target URL could not be parsed."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class PayloadEncodeError(ShttpError):
    """A request payload could not be serialized."""


# =============================================================================
# Contract violations
# =============================================================================


class ContractViolationError(ShttpError):
    """A client, request or response was missing or misused."""


# =============================================================================
# Transport / decode errors
# =============================================================================


class RedirectLimitError(ShttpError):
    """The redirect chain exceeded the configured maximum."""

    def __init__(self, max_redirects: int) -> None:
        super().__init__(f"stopped after {max_redirects} redirects")
        self.max_redirects = max_redirects


class DecodeError(ShttpError):
    """The response body could not be decoded."""

    def __init__(self, message: str, *, encoding: str) -> None:
        super().__init__(message)
        self.encoding = encoding
