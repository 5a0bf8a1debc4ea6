"""
Response wrapper with lazy, memoized body decoding.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from typing import Any

import httpx

from .exceptions import DecodeError
from .types import HEADER_CONTENT_ENCODING

logger = logging.getLogger(__name__)


class Response:
    """
    A completed HTTP response whose body has not been read yet.

    The raw stream is read and closed on the first `read()`; later calls return the
    cached bytes. A gzip `Content-Encoding` is inflated transparently.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._resp = response
        self._body: bytes | None = None

    def __repr__(self) -> str:
        return f"<Response [{self._resp.status_code}]>"

    @property
    def raw(self) -> httpx.Response:
        return self._resp

    @property
    def status_code(self) -> int:
        return self._resp.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._resp.headers

    @property
    def cookies(self) -> httpx.Cookies:
        return self._resp.cookies

    @property
    def url(self) -> httpx.URL:
        return self._resp.url

    @property
    def ok(self) -> bool:
        """True only for status 200."""
        return self._resp.status_code == httpx.codes.OK

    def read(self) -> bytes:
        """
        Return the decoded body.

        Raises:
            httpx.StreamError / httpx.TransportError: If reading the stream fails.
            DecodeError: If the body is declared gzip but is not a valid gzip stream.
        """
        if self._body is not None:
            return self._body

        if self._resp.is_stream_consumed:
            # Buffered by httpx, which has already undone the content encoding.
            self._body = self._resp.content
            return self._body

        try:
            raw = b"".join(self._resp.iter_raw())
        finally:
            self._resp.close()

        encoding = self._resp.headers.get(HEADER_CONTENT_ENCODING, "")
        body = raw
        if "gzip" in encoding.lower():
            try:
                body = gzip.decompress(raw)
            except (OSError, EOFError, zlib.error) as e:
                raise DecodeError(f"Malformed gzip body: {e}", encoding=encoding) from e
            logger.debug("inflated gzip body %d -> %d bytes", len(raw), len(body))

        self._body = body
        return body

    def text(self) -> str:
        return self.read().decode(self._resp.charset_encoding or "utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.read())

    def close(self) -> None:
        """Release the connection without reading the body."""
        self._resp.close()
