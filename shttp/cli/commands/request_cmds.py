from __future__ import annotations

import json
from typing import Any

import click
import rich_click

from shttp.client import Client
from shttp.config import TransportConfig
from shttp.middleware import Middleware, logging_middleware
from shttp.request import Request
from shttp.response import Response
from shttp.types import Method

from ..context import CLIContext
from ..errors import CLIError
from ..options import request_options, split_pairs
from ..results import ResponseData
from ..runner import CommandOutput, run_command


def _transport_config(
    *,
    proxy: str | None,
    verify: bool | None,
    dial_timeout: float | None,
    read_timeout: float | None,
    max_redirects: int | None,
) -> TransportConfig:
    overrides: dict[str, Any] = {}
    if proxy is not None:
        overrides["proxy"] = proxy
    if verify is not None:
        overrides["verify"] = verify
    if dial_timeout is not None:
        overrides["dial_timeout"] = dial_timeout
    if read_timeout is not None:
        overrides["read_timeout"] = read_timeout
    if max_redirects is not None:
        overrides["max_redirects"] = max_redirects
    try:
        return TransportConfig.from_env().with_changes(**overrides)
    except ValueError as e:
        raise CLIError.usage(str(e)) from e


def _apply_options(
    req: Request,
    *,
    headers: tuple[str, ...],
    queries: tuple[str, ...],
    forms: tuple[str, ...],
    cookies: tuple[str, ...],
    data: str | None,
    json_body: str | None,
) -> None:
    if data is not None and json_body is not None:
        raise CLIError.usage("Use either --data or --json, not both.")

    for key, value in split_pairs(headers, sep=":", option="--header"):
        req.add_header(key, value)
    for key, value in split_pairs(queries, sep="=", option="--query"):
        req.add_query(key, value)
    for key, value in split_pairs(forms, sep="=", option="--form"):
        req.add_post_form(key, value)
    for key, value in split_pairs(cookies, sep="=", option="--cookie"):
        req.add_cookie(key, value)

    if data is not None:
        req.body(data.encode("utf-8"))
    if json_body is not None:
        try:
            payload = json.loads(json_body)
        except json.JSONDecodeError as e:
            raise CLIError.usage(f"--json is not valid JSON: {e}") from e
        req.body_json(payload)


def _send(
    ctx: CLIContext,
    *,
    command: str,
    method: str,
    url: str,
    options: dict[str, Any],
) -> None:
    def fn(_: CLIContext, warnings: list[str]) -> CommandOutput:
        config = _transport_config(
            proxy=options["proxy"],
            verify=options["verify"],
            dial_timeout=options["dial_timeout"],
            read_timeout=options["read_timeout"],
            max_redirects=options["max_redirects"],
        )
        if config.verify is False and url.lower().startswith("https://"):
            warnings.append("TLS certificate verification is disabled (use --verify).")

        def apply_options(client: Client, req: Request, response: Response | None) -> None:
            if response is None:
                _apply_options(
                    req,
                    headers=options["headers"],
                    queries=options["queries"],
                    forms=options["forms"],
                    cookies=options["cookies"],
                    data=options["data"],
                    json_body=options["json_body"],
                )

        middlewares: list[Middleware] = [apply_options]
        if ctx.verbosity >= 1:
            middlewares.append(logging_middleware())

        with Client(config=config) as client:
            resp = client.request(method, url, *middlewares)
            body = resp.text()
            data = ResponseData(
                status_code=resp.status_code,
                url=str(resp.url),
                headers={name: value for name, value in resp.headers.items()},
                body=body,
            )
            return CommandOutput(
                data=data,
                ok=resp.ok,
                method=method,
                url=str(resp.url),
                include_headers=options["include"],
                exit_code=0 if resp.ok else 1,
            )

    run_command(ctx, command=command, fn=fn)


@click.command(name="request", cls=rich_click.RichCommand)
@click.argument("method", type=click.Choice([m.value for m in Method], case_sensitive=False))
@click.argument("url")
@request_options
@click.pass_obj
def request_cmd(ctx: CLIContext, method: str, url: str, **options: Any) -> None:
    """Send a request with any METHOD to URL."""
    _send(ctx, command="request", method=method.upper(), url=url, options=options)


@click.command(name="get", cls=rich_click.RichCommand)
@click.argument("url")
@request_options
@click.pass_obj
def get_cmd(ctx: CLIContext, url: str, **options: Any) -> None:
    """Send a GET request to URL."""
    _send(ctx, command="get", method=Method.GET.value, url=url, options=options)


@click.command(name="post", cls=rich_click.RichCommand)
@click.argument("url")
@request_options
@click.pass_obj
def post_cmd(ctx: CLIContext, url: str, **options: Any) -> None:
    """Send a POST request to URL; --form fields become a urlencoded body."""
    _send(ctx, command="post", method=Method.POST.value, url=url, options=options)
