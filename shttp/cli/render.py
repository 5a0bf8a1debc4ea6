from __future__ import annotations

import json
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .results import CommandResult, ResponseData


@dataclass(frozen=True, slots=True)
class RenderSettings:
    output: str  # "table" | "json"
    quiet: bool
    verbosity: int
    include_headers: bool = False


def _error_title(error_type: str) -> str:
    mapping = {
        "usage_error": "Usage error",
        "network_error": "Network error",
        "timeout": "Timeout",
        "redirect_limit": "Too many redirects",
        "decode_error": "Decode error",
    }
    return mapping.get((error_type or "").strip(), "Error")


def _render_response(stdout: Console, data: ResponseData, settings: RenderSettings) -> None:
    if settings.include_headers:
        table = Table(show_header=True, header_style="bold", title=f"{data.status_code} {data.url}")
        table.add_column("Header")
        table.add_column("Value")
        for name, value in data.headers.items():
            table.add_row(name, value)
        stdout.print(table)
    stdout.print(Text(data.body), end="" if data.body.endswith("\n") else "\n")


def render_result(result: CommandResult, *, settings: RenderSettings) -> None:
    if settings.output == "json":
        payload = result.model_dump(by_alias=True, mode="json")
        sys.stdout.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return

    stdout = Console(file=sys.stdout, force_terminal=False, soft_wrap=True)
    stderr = Console(file=sys.stderr, force_terminal=False, soft_wrap=True)

    if result.error is not None:
        title = _error_title(result.error.type)
        stderr.print(Text(f"{title}: {result.error.message}"))
        if settings.verbosity >= 1 and result.error.details and not settings.quiet:
            stderr.print(Text(json.dumps(result.error.details, ensure_ascii=False, indent=2)))
        return

    if isinstance(result.data, ResponseData):
        _render_response(stdout, result.data, settings)
        if not result.ok and not settings.quiet:
            stderr.print(Text(f"HTTP {result.data.status_code} (not OK)"))
    elif result.data is not None:
        stdout.print(Text(json.dumps(result.data, ensure_ascii=False, indent=2)))

    if not settings.quiet:
        for warning in result.warnings:
            stderr.print(Text(f"Warning: {warning}"))
