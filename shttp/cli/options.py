from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import click

from .context import CLIContext
from .errors import CLIError

F = TypeVar("F", bound=Callable[..., object])


def _override_output(ctx: click.Context, param: click.Parameter, value: str | bool | None) -> None:
    """Apply a per-command output override to the shared CLIContext."""
    if not value or not isinstance(ctx.obj, CLIContext):
        return
    ctx.obj.output = "json" if param.name == "json_output" else value  # type: ignore[assignment]


def output_options(fn: F) -> F:
    fn = click.option(
        "--output",
        type=click.Choice(["table", "json"]),
        default=None,
        help="Override output format for this command.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    fn = click.option(
        "--json-output",
        is_flag=True,
        help="Alias for --output json.",
        callback=_override_output,
        expose_value=False,
    )(fn)
    return fn


def split_pairs(values: tuple[str, ...], *, sep: str, option: str) -> list[tuple[str, str]]:
    """Split `KEY<sep>VALUE` option values; the key must be non-empty."""
    pairs: list[tuple[str, str]] = []
    for raw in values:
        key, found, value = raw.partition(sep)
        key = key.strip()
        if not found or not key:
            raise CLIError.usage(f"{option} expects KEY{sep}VALUE (got {raw!r})", option=option)
        pairs.append((key, value.strip() if sep == ":" else value))
    return pairs


def request_options(fn: F) -> F:
    """Options shared by every command that sends a request."""
    decorators = [
        click.option("-H", "--header", "headers", multiple=True, help="Header as KEY:VALUE."),
        click.option("-q", "--query", "queries", multiple=True, help="Query param as KEY=VALUE."),
        click.option("-f", "--form", "forms", multiple=True, help="Form field as KEY=VALUE."),
        click.option("--cookie", "cookies", multiple=True, help="Cookie as NAME=VALUE."),
        click.option("--data", type=str, default=None, help="Raw request body."),
        click.option("--json", "json_body", type=str, default=None, help="JSON request body."),
        click.option("--proxy", type=str, default=None, help="Proxy URL."),
        click.option(
            "--verify/--insecure",
            "verify",
            default=None,
            help="Verify TLS certificates (default: off).",
        ),
        click.option("--dial-timeout", type=float, default=None, help="Connect timeout (s)."),
        click.option("--read-timeout", type=float, default=None, help="Read timeout (s)."),
        click.option("--max-redirects", type=int, default=None, help="Redirect hops to follow."),
        click.option("-i", "--include", is_flag=True, help="Show response headers."),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return output_options(fn)
