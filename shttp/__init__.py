"""
shttp: a small synchronous HTTP client with fluent request building and middlewares.

Example:
    import shttp

    text = shttp.get_text(
        "https://example.com/search",
        shttp.before_request(lambda c, req: req.query("q", "python")),
    )
"""

from __future__ import annotations

from .client import (
    Client,
    default_client,
    get,
    get_bytes,
    get_text,
    post,
    post_bytes,
    post_text,
    request,
)
from .config import TransportConfig
from .exceptions import (
    ContractViolationError,
    DecodeError,
    PayloadEncodeError,
    RedirectLimitError,
    ShttpError,
    URLParseError,
)
from .middleware import (
    Middleware,
    after_response,
    before_request,
    headers_middleware,
    logging_middleware,
)
from .request import Request
from .response import Response
from .types import VERSION, Json, Method
from .values import Values

__version__ = VERSION

__all__ = [
    "Client",
    "ContractViolationError",
    "DecodeError",
    "Json",
    "Method",
    "Middleware",
    "PayloadEncodeError",
    "RedirectLimitError",
    "Request",
    "Response",
    "ShttpError",
    "TransportConfig",
    "URLParseError",
    "Values",
    "__version__",
    "after_response",
    "before_request",
    "default_client",
    "get",
    "get_bytes",
    "get_text",
    "headers_middleware",
    "logging_middleware",
    "post",
    "post_bytes",
    "post_text",
    "request",
]
