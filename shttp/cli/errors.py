from __future__ import annotations

from typing import Any


class CLIError(Exception):
    """An error raised by the CLI itself, rendered with its own exit code and type."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    @classmethod
    def usage(cls, message: str, **details: Any) -> CLIError:
        return cls(message, exit_code=2, error_type="usage_error", details=details or None)
