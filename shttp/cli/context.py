from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Literal

import httpx

from shttp.exceptions import (
    DecodeError,
    PayloadEncodeError,
    RedirectLimitError,
    ShttpError,
    URLParseError,
)

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, (URLParseError, PayloadEncodeError)):
        return 2
    if isinstance(exc, httpx.TimeoutException):
        return 4
    if isinstance(exc, (RedirectLimitError, httpx.TransportError)):
        return 3
    if isinstance(exc, DecodeError):
        return 5
    return 1


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(type=exc.error_type, message=exc.message, details=exc.details)
    if isinstance(exc, (URLParseError, PayloadEncodeError)):
        return ErrorInfo(type="usage_error", message=str(exc))
    if isinstance(exc, httpx.TimeoutException):
        return ErrorInfo(type="timeout", message=str(exc) or exc.__class__.__name__)
    if isinstance(exc, RedirectLimitError):
        return ErrorInfo(
            type="redirect_limit",
            message=str(exc),
            details={"maxRedirects": exc.max_redirects},
        )
    if isinstance(exc, httpx.TransportError):
        return ErrorInfo(type="network_error", message=str(exc) or exc.__class__.__name__)
    if isinstance(exc, DecodeError):
        return ErrorInfo(type="decode_error", message=str(exc), details={"encoding": exc.encoding})
    if isinstance(exc, ShttpError):
        return ErrorInfo(type=exc.__class__.__name__, message=str(exc))
    return ErrorInfo(type=exc.__class__.__name__, message=str(exc))


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    method: str | None = None,
    url: str | None = None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms, method=method, url=url),
        error=error,
    )
