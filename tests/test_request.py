from __future__ import annotations

import pytest
from pydantic import BaseModel, ConfigDict, Field

from shttp.exceptions import ContractViolationError, PayloadEncodeError, URLParseError
from shttp.request import Request
from shttp.types import DEFAULT_USER_AGENT, Method


def test_post_form_only_becomes_urlencoded_body() -> None:
    req = Request(Method.POST, "https://example.com/login")
    req.post_form("user", "alice").add_post_form("role", "a").add_post_form("role", "b")

    wire = req.build()

    assert wire.method == "POST"
    assert wire.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert wire.content == b"role=a&role=b&user=alice"
    assert wire.headers["Content-Length"] == str(len(wire.content))


def test_raw_body_wins_over_post_form() -> None:
    req = Request(Method.POST, "https://example.com/")
    req.body(b"raw-payload")
    req.post_form("ignored", "1")

    wire = req.build()

    assert wire.content == b"raw-payload"
    assert "Content-Type" not in wire.headers


def test_empty_raw_body_does_not_block_later_body() -> None:
    req = Request(Method.POST, "https://example.com/")
    req.body(b"")
    req.post_form("user", "alice")

    wire = req.build()

    assert wire.content == b"user=alice"
    assert wire.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_post_form_ignored_for_get() -> None:
    req = Request(Method.GET, "https://example.com/")
    req.post_form("a", "1")

    wire = req.build()

    assert wire.content == b""
    assert "Content-Type" not in wire.headers


@pytest.mark.parametrize("method", [Method.PUT, Method.PATCH, Method.DELETE])
def test_post_form_used_for_body_methods(method: Method) -> None:
    wire = Request(method, "https://example.com/").post_form("a", "1").build()
    assert wire.content == b"a=1"


def test_query_merge_preserves_existing_url_query() -> None:
    req = Request(Method.GET, "https://example.com/p?b=2&a=1")
    req.query("c", "3").add_query("a", "0")

    wire = req.build()

    assert str(wire.url) == "https://example.com/p?a=1&a=0&b=2&c=3"


def test_url_untouched_without_builder_queries() -> None:
    wire = Request(Method.GET, "https://example.com/p?z=1&a=2").build()
    assert str(wire.url) == "https://example.com/p?z=1&a=2"


def test_headers_override_wire_headers_case_insensitively() -> None:
    req = Request(Method.GET, "https://example.com/")
    assert req.build().headers["User-Agent"] == DEFAULT_USER_AGENT

    req = Request(Method.GET, "https://example.com/")
    req.header("user-agent", "custom/1.0").add_header("X-Multi", "1").add_header("X-Multi", "2")
    wire = req.build()

    assert wire.headers.get_list("User-Agent") == ["custom/1.0"]
    assert wire.headers.get_list("X-Multi") == ["1", "2"]


def test_cookies_are_joined_into_cookie_header() -> None:
    req = Request(Method.GET, "https://example.com/")
    req.add_cookie("a", "1").add_cookies({"b": "2"})
    assert req.build().headers["Cookie"] == "a=1; b=2"


def test_body_json_sets_content_type_and_is_single_shot() -> None:
    req = Request(Method.POST, "https://example.com/")
    req.body_json({"a": 1})
    req.body_json({"b": 2})
    req.body(b"late")

    wire = req.build()

    assert wire.content == b'{"a": 1}'
    assert wire.headers["Content-Type"] == "application/json"


def test_body_json_dumps_pydantic_models_by_alias() -> None:
    class Payload(BaseModel):
        model_config = ConfigDict(populate_by_name=True)
        user_id: int = Field(alias="userId")

    req = Request(Method.POST, "https://example.com/").body_json(Payload(user_id=7))
    assert req.get_body() == b'{"userId":7}'


def test_body_json_after_raw_body_is_noop() -> None:
    req = Request(Method.POST, "https://example.com/").body(b"x").body_json({"a": 1})
    assert req.get_body() == b"x"
    assert not req.headers.has("Content-Type")


def test_body_json_unserializable_raises() -> None:
    with pytest.raises(PayloadEncodeError):
        Request(Method.POST, "https://example.com/").body_json({"a": object()})


def test_verb_setters_change_method_and_url() -> None:
    req = Request(Method.GET, "https://example.com/")
    req.put("https://other.example/x")
    assert req.get_method() is Method.PUT
    assert req.get_url().host == "other.example"

    req.host("third.example")
    assert str(req.build().url) == "https://third.example/x"


@pytest.mark.parametrize(
    "raw_url",
    ["http://example.com:notaport/", "not a url", "ftp://example.com/file", "http:///path"],
)
def test_malformed_url_raises_parse_error(raw_url: str) -> None:
    with pytest.raises(URLParseError) as excinfo:
        Request(Method.GET, raw_url)
    assert excinfo.value.url == raw_url

    req = Request(Method.GET, "https://example.com/")
    with pytest.raises(URLParseError):
        req.post(raw_url)


def test_build_twice_is_a_contract_violation() -> None:
    req = Request(Method.GET, "https://example.com/")
    req.build()
    with pytest.raises(ContractViolationError):
        req.build()


def test_describe_lists_request_state() -> None:
    req = Request(Method.POST, "https://example.com/")
    req.query("q", "1").header("X-A", "b").add_cookie("c", "d").post_form("f", "g")
    text = req.describe()
    assert "POST https://example.com/" in text
    assert "q: 1" in text
    assert "X-A: b" in text
    assert "c=d" in text
    assert "f: g" in text
