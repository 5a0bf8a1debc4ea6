"""
HTTP client.

`Client` owns the transport configuration and the middleware chain and drives each
call: middlewares (pre) → build → send → wrap → middlewares (post), per-call ones first.

Example:
    from shttp import Client, before_request, logging_middleware

    client = Client(middlewares=[logging_middleware()])
    client.set_proxy("http://127.0.0.1:8080")

    resp = client.post(
        "https://example.com/login",
        before_request(lambda c, req: req.post_form("user", "alice")),
    )
    if resp.ok:
        print(resp.text())
"""

from __future__ import annotations

import logging
import ssl
import threading
from typing import Any

import httpx

from .config import TransportConfig
from .exceptions import ContractViolationError, RedirectLimitError
from .middleware import Middleware, check_middlewares
from .request import Request
from .response import Response
from .types import Method

logger = logging.getLogger(__name__)


class Client:
    """
    Synchronous HTTP client with a middleware pipeline.

    A client is meant to be long-lived and shared. Calls from several threads are
    fine; changing configuration or registering middlewares while calls are in flight
    is not, so configure the client before sharing it.
    """

    def __init__(
        self,
        *,
        config: TransportConfig | None = None,
        middlewares: list[Middleware] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Transport settings (defaults: TLS verification off, 5s dial and
                read timeouts, 5 redirects, keep-alives off)
            middlewares: Middlewares run around every call, in order
            transport: Custom httpx transport; shorthand for `config.transport`
        """
        cfg = config or TransportConfig()
        if transport is not None:
            cfg = cfg.with_changes(transport=transport)
        self._config = cfg
        self._middlewares: list[Middleware] = list(middlewares or [])
        self._http: httpx.Client | None = None
        self._retired: list[httpx.Client] = []
        self._http_lock = threading.Lock()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client and its connections."""
        with self._http_lock:
            retired, self._retired = self._retired, []
            if self._http is not None:
                retired.append(self._http)
                self._http = None
        for http in retired:
            http.close()

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def middlewares(self) -> list[Middleware]:
        return list(self._middlewares)

    def use(self, middleware: Middleware) -> Client:
        """Register a middleware after the existing ones."""
        self._middlewares.append(middleware)
        return self

    def configure(self, **changes: Any) -> Client:
        """
        Replace transport settings; see `TransportConfig` for the field names.

        The httpx client is rebuilt from the full config on the next call, so settings
        made earlier are kept.
        """
        self._config = self._config.with_changes(**changes)
        with self._http_lock:
            # Responses may still be streaming from the old client; close it in close().
            if self._http is not None:
                self._retired.append(self._http)
                self._http = None
        logger.debug("transport reconfigured: %s", ", ".join(sorted(changes)))
        return self

    def set_proxy(self, proxy: str | httpx.URL | None) -> Client:
        return self.configure(proxy=str(proxy) if proxy is not None else None)

    def set_tls_config(self, verify: bool | str | ssl.SSLContext) -> Client:
        return self.configure(verify=verify)

    def set_timeout(self, dial_timeout: float, read_timeout: float) -> Client:
        return self.configure(dial_timeout=dial_timeout, read_timeout=read_timeout)

    def set_transport(self, transport: httpx.BaseTransport | None) -> Client:
        return self.configure(transport=transport)

    def _ensure_http(self) -> httpx.Client:
        with self._http_lock:
            if self._http is None:
                self._http = self._config.build_client()
            return self._http

    # =========================================================================
    # Calls
    # =========================================================================

    def new_request(
        self,
        method: Method | str,
        url: str,
        *,
        body: bytes | None = None,
    ) -> Request:
        return Request(method, url, body=body)

    def do(self, request: Request, *middlewares: Middleware) -> Response:
        """
        Run `request` through the middleware chain and the transport.

        Args:
            request: A request that has not been built yet
            *middlewares: Per-call middlewares, run before the client's own

        Raises:
            ContractViolationError: If `request` is missing or a middleware is not callable
            RedirectLimitError: If more than `config.max_redirects` redirects are followed
            httpx.TransportError: On connection, timeout or protocol failures
        """
        if request is None:
            raise ContractViolationError("request is nil")
        chain = [*middlewares, *self._middlewares]
        check_middlewares(chain)

        for middleware in chain:
            middleware(self, request, None)

        wire_request = request.build()
        http = self._ensure_http()
        logger.debug("sending %s %s", wire_request.method, wire_request.url)
        try:
            wire_response = http.send(wire_request, stream=True)
        except httpx.TooManyRedirects as e:
            raise RedirectLimitError(self._config.max_redirects) from e

        if wire_response is None:
            raise ContractViolationError("response is nil")
        response = Response(wire_response)

        try:
            for middleware in chain:
                middleware(self, request, response)
        except BaseException:
            response.close()
            raise
        return response

    def request(
        self,
        method: Method | str,
        url: str,
        *middlewares: Middleware,
        body: bytes | None = None,
    ) -> Response:
        """
        Build a request for `method` and `url` and send it.

        Raises:
            URLParseError: If `url` is malformed
        """
        return self.do(self.new_request(method, url, body=body), *middlewares)

    def get(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.GET, url, *middlewares)

    def get_bytes(self, url: str, *middlewares: Middleware) -> bytes:
        return self.get(url, *middlewares).read()

    def get_text(self, url: str, *middlewares: Middleware) -> str:
        return self.get(url, *middlewares).text()

    def post(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.POST, url, *middlewares)

    def post_bytes(self, url: str, *middlewares: Middleware) -> bytes:
        return self.post(url, *middlewares).read()

    def post_text(self, url: str, *middlewares: Middleware) -> str:
        return self.post(url, *middlewares).text()

    def put(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.PUT, url, *middlewares)

    def patch(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.PATCH, url, *middlewares)

    def delete(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.DELETE, url, *middlewares)

    def head(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.HEAD, url, *middlewares)

    def options(self, url: str, *middlewares: Middleware) -> Response:
        return self.request(Method.OPTIONS, url, *middlewares)


# =============================================================================
# Default client
# =============================================================================

_default_client: Client | None = None
_default_client_lock = threading.Lock()


def default_client() -> Client:
    """Return the process-wide client, created from `SHTTP_*` env vars on first use."""
    global _default_client
    if _default_client is None:
        with _default_client_lock:
            if _default_client is None:
                _default_client = Client(config=TransportConfig.from_env())
    return _default_client


def request(
    method: Method | str,
    url: str,
    *middlewares: Middleware,
    body: bytes | None = None,
) -> Response:
    return default_client().request(method, url, *middlewares, body=body)


def get(url: str, *middlewares: Middleware) -> Response:
    return default_client().get(url, *middlewares)


def get_bytes(url: str, *middlewares: Middleware) -> bytes:
    return default_client().get_bytes(url, *middlewares)


def get_text(url: str, *middlewares: Middleware) -> str:
    return default_client().get_text(url, *middlewares)


def post(url: str, *middlewares: Middleware) -> Response:
    return default_client().post(url, *middlewares)


def post_bytes(url: str, *middlewares: Middleware) -> bytes:
    return default_client().post_bytes(url, *middlewares)


def post_text(url: str, *middlewares: Middleware) -> str:
    return default_client().post_text(url, *middlewares)
