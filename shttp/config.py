"""
Transport configuration.

All transport settings live in one frozen `TransportConfig`. The client builds its
`httpx.Client` from the whole config at once, so changing one setting never drops
another.
"""

from __future__ import annotations

import os
import ssl
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

import httpx

DEFAULT_DIAL_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 5.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_MAX_IDLE_CONNS = 100

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _env_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds (got {raw!r})") from e
    if value <= 0:
        raise ValueError(f"{name} must be > 0 (got {raw!r})")
    return value


def _env_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from e
    if value < 0:
        raise ValueError(f"{name} must be >= 0 (got {raw!r})")
    return value


@dataclass(frozen=True, slots=True)
class TransportConfig:
    """
    Settings applied when the underlying `httpx.Client` is built.

    Attributes:
        proxy: Static proxy URL used for every request, or None.
        verify: TLS verification. False (default) skips certificate checks; True uses
            the system trust store; a path or `ssl.SSLContext` is passed to httpx as-is.
        dial_timeout: Seconds allowed to establish a connection.
        read_timeout: Seconds allowed for each read/write once connected.
        max_redirects: Redirect hops followed before the call fails.
        max_idle_conns: Idle connections kept per client.
        keep_alive: Reuse connections between requests.
        transport: Custom `httpx.BaseTransport`; when set, proxy and TLS settings are
            the transport's own business.
    """

    proxy: str | None = None
    verify: bool | str | ssl.SSLContext = False
    dial_timeout: float = DEFAULT_DIAL_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    max_idle_conns: int = DEFAULT_MAX_IDLE_CONNS
    keep_alive: bool = False
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        if self.dial_timeout <= 0 or self.read_timeout <= 0:
            raise ValueError("timeouts must be > 0")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be >= 0")
        if self.max_idle_conns < 0:
            raise ValueError("max_idle_conns must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TransportConfig:
        """
        Build a config from `SHTTP_*` environment variables.

        Recognized: SHTTP_PROXY, SHTTP_DIAL_TIMEOUT, SHTTP_READ_TIMEOUT,
        SHTTP_MAX_REDIRECTS, SHTTP_VERIFY_TLS, SHTTP_KEEP_ALIVE. Unset or empty
        variables keep the defaults.
        """
        env = os.environ if environ is None else environ
        fields: dict[str, Any] = {}

        def _get(name: str) -> str | None:
            raw = env.get(name, "").strip()
            return raw or None

        if (raw := _get("SHTTP_PROXY")) is not None:
            fields["proxy"] = raw
        if (raw := _get("SHTTP_DIAL_TIMEOUT")) is not None:
            fields["dial_timeout"] = _env_float("SHTTP_DIAL_TIMEOUT", raw)
        if (raw := _get("SHTTP_READ_TIMEOUT")) is not None:
            fields["read_timeout"] = _env_float("SHTTP_READ_TIMEOUT", raw)
        if (raw := _get("SHTTP_MAX_REDIRECTS")) is not None:
            fields["max_redirects"] = _env_int("SHTTP_MAX_REDIRECTS", raw)
        if (raw := _get("SHTTP_VERIFY_TLS")) is not None:
            fields["verify"] = _env_bool("SHTTP_VERIFY_TLS", raw)
        if (raw := _get("SHTTP_KEEP_ALIVE")) is not None:
            fields["keep_alive"] = _env_bool("SHTTP_KEEP_ALIVE", raw)
        return cls(**fields)

    def with_changes(self, **changes: Any) -> TransportConfig:
        return replace(self, **changes)

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.dial_timeout,
            read=self.read_timeout,
            write=self.read_timeout,
            pool=self.dial_timeout,
        )

    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=None,
            max_keepalive_connections=self.max_idle_conns if self.keep_alive else 0,
        )

    def build_client(self) -> httpx.Client:
        """Create an `httpx.Client` carrying every setting of this config."""
        kwargs: dict[str, Any] = {
            "timeout": self.timeout(),
            "follow_redirects": True,
            "max_redirects": self.max_redirects,
            "trust_env": False,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        else:
            kwargs["verify"] = self.verify
            kwargs["limits"] = self.limits()
            if self.proxy is not None:
                kwargs["proxy"] = self.proxy
        return httpx.Client(**kwargs)
