from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import click

from .context import CLIContext, build_result, error_info_for_exception, exit_code_for_exception
from .render import RenderSettings, render_result


@dataclass(frozen=True, slots=True)
class CommandOutput:
    data: Any | None = None
    ok: bool = True
    method: str | None = None
    url: str | None = None
    warnings: list[str] | None = None
    include_headers: bool = False
    exit_code: int = 0  # non-zero for completed requests that did not return 200


CommandFn = Callable[[CLIContext, list[str]], CommandOutput]


def run_command(ctx: CLIContext, *, command: str, fn: CommandFn) -> None:
    started = time.time()
    warnings: list[str] = []
    try:
        out = fn(ctx, warnings)
        result = build_result(
            ok=out.ok,
            command=command,
            started_at=started,
            data=out.data,
            warnings=(out.warnings or warnings),
            method=out.method,
            url=out.url,
        )
        render_result(
            result,
            settings=RenderSettings(
                output=ctx.output,
                quiet=ctx.quiet,
                verbosity=ctx.verbosity,
                include_headers=out.include_headers,
            ),
        )
        raise click.exceptions.Exit(out.exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        code = exit_code_for_exception(exc)
        result = build_result(
            ok=False,
            command=command,
            started_at=started,
            data=None,
            warnings=warnings,
            error=error_info_for_exception(exc),
        )
        render_result(
            result,
            settings=RenderSettings(output=ctx.output, quiet=ctx.quiet, verbosity=ctx.verbosity),
        )
        raise click.exceptions.Exit(code) from exc
