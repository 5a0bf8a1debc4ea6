"""
Type definitions shared across shttp.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeAlias

VERSION = "0.1.0"

DEFAULT_USER_AGENT = f"shttp/{VERSION}"

HEADER_USER_AGENT = "User-Agent"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CONTENT_ENCODING = "Content-Encoding"
HEADER_COOKIE = "Cookie"

CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_XML = "application/xml"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"


class Method(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    def __str__(self) -> str:
        return self.value


# Methods whose requests carry an encoded post form as their body.
FORM_BODY_METHODS = frozenset({Method.POST, Method.PUT, Method.PATCH, Method.DELETE})

Header: TypeAlias = Mapping[str, str]
Query: TypeAlias = Mapping[str, str]
PostForm: TypeAlias = Mapping[str, str]
Json: TypeAlias = dict[str, Any]
