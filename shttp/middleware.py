"""
Middleware protocol and built-in middlewares.

A middleware is called twice per request: first with `response=None` before the
request is built, then with the wrapped response once it arrives. Raising from
either call aborts the request and the exception reaches the caller unchanged.

Per-call middlewares run before client-registered middlewares, each group in
registration order, in both phases.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from .exceptions import ContractViolationError

if TYPE_CHECKING:
    from .client import Client
    from .request import Request
    from .response import Response


class Middleware(Protocol):
    def __call__(self, client: Client, request: Request, response: Response | None) -> None: ...


RequestHandler = Callable[["Client", "Request"], None]
ResponseHandler = Callable[["Client", "Request", "Response"], None]


def check_middlewares(middlewares: list[Middleware]) -> None:
    for index, middleware in enumerate(middlewares):
        if not callable(middleware):
            raise ContractViolationError(
                f"middleware #{index} is not callable: {type(middleware).__name__}"
            )


def before_request(handler: RequestHandler) -> Middleware:
    """
    Adapt a `(client, request)` handler into a middleware that only runs before the
    request is sent.

    Usage:
        client.get(url, before_request(lambda c, req: req.query("page", "2")))
    """

    def middleware(client: Client, request: Request, response: Response | None) -> None:
        if response is None:
            handler(client, request)

    return middleware


def after_response(handler: ResponseHandler) -> Middleware:
    """Adapt a `(client, request, response)` handler into a post-response middleware."""

    def middleware(client: Client, request: Request, response: Response | None) -> None:
        if response is not None:
            handler(client, request, response)

    return middleware


def headers_middleware(**headers: str) -> Middleware:
    """Set static headers on every request. Underscores in names become dashes."""
    normalized = {name.replace("_", "-"): value for name, value in headers.items()}

    def middleware(client: Client, request: Request, response: Response | None) -> None:
        if response is None:
            request.header_map(normalized)

    return middleware


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    """Log the request line before sending and the status once the response arrives."""
    log = logger or logging.getLogger(__name__)

    def middleware(client: Client, request: Request, response: Response | None) -> None:
        if response is None:
            log.info("-> %s %s", request.get_method().value, request.get_url())
            if log.isEnabledFor(logging.DEBUG):
                log.debug(request.describe())
        else:
            log.info("<- %s %s", response.status_code, response.url)

    return middleware
