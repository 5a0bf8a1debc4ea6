"""
Request builder.

A `Request` collects method, URL, headers, queries, post form fields, cookies and an
optional body, then turns them into an `httpx.Request` with `build()`.

Example:
    req = Request(Method.POST, "https://example.com/login?next=%2F")
    req.header("X-Trace", "1").query("lang", "en").post_form("user", "alice")
    wire = req.build()
    # POST https://example.com/login?lang=en&next=%2F
    # Content-Type: application/x-www-form-urlencoded
    # body: user=alice
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from .exceptions import ContractViolationError, PayloadEncodeError, URLParseError
from .types import (
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_XML,
    DEFAULT_USER_AGENT,
    FORM_BODY_METHODS,
    HEADER_CONTENT_TYPE,
    HEADER_COOKIE,
    HEADER_USER_AGENT,
    Header,
    Method,
    PostForm,
    Query,
)
from .values import Values

logger = logging.getLogger(__name__)


def _parse_url(raw_url: str) -> httpx.URL:
    try:
        url = httpx.URL(raw_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise URLParseError(f"Invalid URL {raw_url!r}: {e}", url=str(raw_url)) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise URLParseError(
            f"Invalid URL {raw_url!r}: must be an absolute http:// or https:// URL",
            url=str(raw_url),
        )
    return url


def _json_dumps(obj: Any) -> bytes:
    if isinstance(obj, BaseModel):
        return obj.model_dump_json(by_alias=True).encode("utf-8")
    try:
        return json.dumps(obj, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise PayloadEncodeError(f"Cannot encode {type(obj).__name__} as JSON: {e}") from e


class Request:
    """
    Mutable request builder, used for exactly one call.

    Mutators return the request so calls can be chained. Once a body is set, the
    JSON helpers and post form encoding leave it alone: the first body wins.
    """

    def __init__(
        self,
        method: Method | str,
        url: str | httpx.URL,
        *,
        body: bytes | None = None,
    ) -> None:
        self._method = Method(str(method).upper())
        self._url = url if isinstance(url, httpx.URL) else _parse_url(url)
        self._wire_headers = httpx.Headers({HEADER_USER_AGENT: DEFAULT_USER_AGENT})
        self._queries = Values()
        self._post_form = Values()
        self._headers = Values()
        self._body: bytes | None = body or None
        self._built = False

    def __repr__(self) -> str:
        return f"<Request [{self._method.value} {self._url}]>"

    # =========================================================================
    # Method / URL
    # =========================================================================

    def method(self, method: Method | str) -> Request:
        self._method = Method(str(method).upper())
        return self

    def url(self, raw_url: str) -> Request:
        """Replace the target URL. Raises `URLParseError` on malformed input."""
        self._url = _parse_url(raw_url)
        return self

    def host(self, host: str) -> Request:
        self._url = self._url.copy_with(host=host)
        return self

    def get(self, raw_url: str) -> Request:
        return self.method(Method.GET).url(raw_url)

    def post(self, raw_url: str) -> Request:
        return self.method(Method.POST).url(raw_url)

    def put(self, raw_url: str) -> Request:
        return self.method(Method.PUT).url(raw_url)

    def delete(self, raw_url: str) -> Request:
        return self.method(Method.DELETE).url(raw_url)

    def head(self, raw_url: str) -> Request:
        return self.method(Method.HEAD).url(raw_url)

    def patch(self, raw_url: str) -> Request:
        return self.method(Method.PATCH).url(raw_url)

    def options(self, raw_url: str) -> Request:
        return self.method(Method.OPTIONS).url(raw_url)

    def trace(self, raw_url: str) -> Request:
        return self.method(Method.TRACE).url(raw_url)

    def get_method(self) -> Method:
        return self._method

    def get_url(self) -> httpx.URL:
        return self._url

    # =========================================================================
    # Headers
    # =========================================================================

    def header(self, key: str, value: str) -> Request:
        self._headers.set(key, value)
        return self

    def add_header(self, key: str, value: str) -> Request:
        self._headers.add(key, value)
        return self

    def header_map(self, headers: Header) -> Request:
        for key, value in headers.items():
            self.header(key, value)
        return self

    def user_agent(self, user_agent: str) -> Request:
        return self.header(HEADER_USER_AGENT, user_agent)

    def content_type(self, content_type: str) -> Request:
        return self.header(HEADER_CONTENT_TYPE, content_type)

    def content_type_form(self) -> Request:
        return self.content_type(CONTENT_TYPE_FORM)

    def content_type_json(self) -> Request:
        return self.content_type(CONTENT_TYPE_JSON)

    def content_type_xml(self) -> Request:
        return self.content_type(CONTENT_TYPE_XML)

    def add_cookie(self, name: str, value: str) -> Request:
        """Append `name=value` to the Cookie header."""
        pair = f"{name}={value.replace(';', '').strip()}"
        existing = self._wire_headers.get(HEADER_COOKIE)
        self._wire_headers[HEADER_COOKIE] = f"{existing}; {pair}" if existing else pair
        return self

    def add_cookies(self, cookies: Mapping[str, str]) -> Request:
        for name, value in cookies.items():
            self.add_cookie(name, value)
        return self

    # =========================================================================
    # Queries / post form
    # =========================================================================

    def query(self, key: str, value: str) -> Request:
        self._queries.set(key, value)
        return self

    def add_query(self, key: str, value: str) -> Request:
        self._queries.add(key, value)
        return self

    def query_map(self, queries: Query) -> Request:
        for key, value in queries.items():
            self.query(key, value)
        return self

    def add_query_map(self, queries: Query) -> Request:
        for key, value in queries.items():
            self.add_query(key, value)
        return self

    def post_form(self, key: str, value: str) -> Request:
        self._post_form.set(key, value)
        return self

    def add_post_form(self, key: str, value: str) -> Request:
        self._post_form.add(key, value)
        return self

    def post_form_map(self, form: PostForm) -> Request:
        for key, value in form.items():
            self.post_form(key, value)
        return self

    def add_post_form_map(self, form: PostForm) -> Request:
        for key, value in form.items():
            self.add_post_form(key, value)
        return self

    @property
    def queries(self) -> Values:
        return self._queries

    @property
    def headers(self) -> Values:
        return self._headers

    @property
    def post_forms(self) -> Values:
        return self._post_form

    # =========================================================================
    # Body
    # =========================================================================

    def body(self, content: bytes) -> Request:
        """Set the raw body unless one is already set. An empty body is ignored."""
        if self._body is None and content:
            self._body = bytes(content)
        return self

    def body_json(self, obj: Any) -> Request:
        """
        Serialize `obj` as the JSON body and set Content-Type accordingly.

        Pydantic models are dumped by alias. Does nothing when a body is already set.

        Raises:
            PayloadEncodeError: If `obj` is not JSON serializable.
        """
        if self._body is None and obj is not None:
            self.body_json_bytes(_json_dumps(obj))
        return self

    def body_json_str(self, payload: str) -> Request:
        return self.body_json_bytes(payload.encode("utf-8"))

    def body_json_bytes(self, payload: bytes) -> Request:
        if self._body is None and payload:
            self._body = bytes(payload)
            self.content_type_json()
        return self

    def get_body(self) -> bytes | None:
        return self._body

    # =========================================================================
    # Build
    # =========================================================================

    def describe(self) -> str:
        """Human-readable dump of URL, queries, headers, cookies and body."""
        lines = [f"URL: {self._method.value} {self._url}", "", "Queries:"]
        lines.extend(f"  {k}: {' '.join(vs)}" for k, vs in self._queries.items())
        lines.append("Headers:")
        lines.extend(f"  {k}: {' '.join(vs)}" for k, vs in self._headers.items())
        lines.append("Cookies:")
        cookie = self._wire_headers.get(HEADER_COOKIE)
        if cookie:
            lines.append(f"  {cookie}")
        lines.append("Body:")
        if self._body:
            lines.append("  " + self._body.decode("utf-8", errors="replace"))
        lines.extend(f"  {k}: {' '.join(vs)}" for k, vs in self._post_form.items())
        return "\n".join(lines)

    def _build_form_body(self) -> None:
        if self._method not in FORM_BODY_METHODS or self._body is not None:
            return
        if not self._post_form:
            return
        encoded = self._post_form.encode()
        if encoded:
            self._body = encoded.encode("ascii")
            self.content_type_form()

    def _merged_url(self) -> httpx.URL:
        if not self._queries:
            return self._url
        merged = Values.parse(self._url.query.decode("ascii"))
        for key, values in self._queries.items():
            for value in values:
                merged.add(key, value)
        return self._url.copy_with(query=merged.encode().encode("ascii"))

    def _merged_headers(self) -> httpx.Headers:
        if not self._headers:
            return self._wire_headers
        overridden = {key.lower() for key in self._headers}
        items = [
            (key, value)
            for key, value in self._wire_headers.multi_items()
            if key.lower() not in overridden
        ]
        for key, values in self._headers.items():
            items.extend((key, value) for value in values)
        return httpx.Headers(items)

    def build(self) -> httpx.Request:
        """
        Finalize into an `httpx.Request`.

        Steps run in a fixed order: post form synthesis (body-carrying methods only,
        skipped when a body exists), body attachment, additive query merge into the
        URL's own query, header merge overriding same-named wire headers.

        Raises:
            ContractViolationError: If the request was already built.
        """
        if self._built:
            raise ContractViolationError("request has already been built")
        self._built = True

        self._build_form_body()
        url = self._merged_url()
        headers = self._merged_headers()
        logger.debug("built %s %s (body=%d bytes)", self._method.value, url, len(self._body or b""))
        return httpx.Request(
            self._method.value,
            url,
            headers=headers,
            content=self._body or None,
        )
