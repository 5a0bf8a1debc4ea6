from __future__ import annotations

import httpx
import pytest

from shttp.config import TransportConfig


def test_defaults() -> None:
    cfg = TransportConfig()
    assert cfg.proxy is None
    assert cfg.verify is False
    assert cfg.dial_timeout == 5.0
    assert cfg.read_timeout == 5.0
    assert cfg.max_redirects == 5
    assert cfg.max_idle_conns == 100
    assert cfg.keep_alive is False


def test_timeout_and_limits_follow_config() -> None:
    cfg = TransportConfig(dial_timeout=1.0, read_timeout=3.0, keep_alive=True, max_idle_conns=7)
    timeout = cfg.timeout()
    assert timeout.connect == 1.0
    assert timeout.read == 3.0
    assert timeout.write == 3.0
    assert cfg.limits().max_keepalive_connections == 7
    assert TransportConfig().limits().max_keepalive_connections == 0


def test_with_changes_keeps_other_fields() -> None:
    cfg = TransportConfig(proxy="http://proxy.local:3128").with_changes(read_timeout=9.0)
    assert cfg.proxy == "http://proxy.local:3128"
    assert cfg.read_timeout == 9.0


def test_from_env_reads_shttp_variables() -> None:
    cfg = TransportConfig.from_env(
        {
            "SHTTP_PROXY": "http://proxy.local:3128",
            "SHTTP_DIAL_TIMEOUT": "2",
            "SHTTP_READ_TIMEOUT": "4.5",
            "SHTTP_MAX_REDIRECTS": "3",
            "SHTTP_VERIFY_TLS": "yes",
            "SHTTP_KEEP_ALIVE": "off",
            "UNRELATED": "x",
        }
    )
    assert cfg == TransportConfig(
        proxy="http://proxy.local:3128",
        dial_timeout=2.0,
        read_timeout=4.5,
        max_redirects=3,
        verify=True,
        keep_alive=False,
    )


def test_from_env_empty_uses_defaults() -> None:
    assert TransportConfig.from_env({"SHTTP_PROXY": "  "}) == TransportConfig()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SHTTP_DIAL_TIMEOUT", "soon"),
        ("SHTTP_READ_TIMEOUT", "0"),
        ("SHTTP_MAX_REDIRECTS", "-1"),
        ("SHTTP_VERIFY_TLS", "maybe"),
    ],
)
def test_from_env_rejects_invalid_values(name: str, value: str) -> None:
    with pytest.raises(ValueError, match=name):
        TransportConfig.from_env({name: value})


def test_invalid_direct_values_rejected() -> None:
    with pytest.raises(ValueError):
        TransportConfig(dial_timeout=0)
    with pytest.raises(ValueError):
        TransportConfig(max_redirects=-1)


def test_build_client_applies_redirect_cap_and_transport() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200))
    client = TransportConfig(max_redirects=2, transport=transport).build_client()
    try:
        assert client.max_redirects == 2
        assert client.follow_redirects is True
        assert client.timeout.connect == 5.0
    finally:
        client.close()
