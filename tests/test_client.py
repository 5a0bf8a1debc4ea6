from __future__ import annotations

import gzip
from collections.abc import Callable

import httpx
import pytest

import shttp
from shttp import client as client_module
from shttp.client import Client, default_client
from shttp.exceptions import ContractViolationError, RedirectLimitError, URLParseError
from shttp.middleware import before_request
from shttp.request import Request
from shttp.response import Response
from shttp.types import Method

MakeClient = Callable[..., Client]


def streamed(status_code: int, body: bytes = b"", **kwargs: object) -> httpx.Response:
    stream = httpx.ByteStream(body)
    return httpx.Response(status_code, stream=stream, **kwargs)  # type: ignore[arg-type]


def test_get_sends_builder_state(make_client: MakeClient) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return streamed(200, b"pong")

    client = make_client(handler)
    resp = client.get(
        "https://api.example/ping?keep=1",
        before_request(lambda c, req: req.query("q", "x").header("X-Test", "1")),
    )

    assert resp.ok
    assert resp.text() == "pong"
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert seen[0].url == httpx.URL("https://api.example/ping?keep=1&q=x")
    assert seen[0].headers["X-Test"] == "1"
    assert seen[0].headers["User-Agent"] == f"shttp/{shttp.__version__}"


def test_post_form_via_client(make_client: MakeClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        return streamed(200, request.content)

    client = make_client(handler)
    body = client.post_bytes(
        "https://api.example/form",
        before_request(lambda c, req: req.add_post_form_map({"b": "2", "a": "1"})),
    )
    assert body == b"a=1&b=2"


def test_request_with_initial_body(make_client: MakeClient) -> None:
    client = make_client(lambda request: streamed(200, request.content))
    resp = client.request(
        Method.PUT,
        "https://api.example/item",
        before_request(lambda c, req: req.post_form("ignored", "1")),
        body=b"explicit",
    )
    assert resp.read() == b"explicit"


def test_gzip_response_is_decoded_end_to_end(make_client: MakeClient) -> None:
    client = make_client(
        lambda request: streamed(
            200, gzip.compress(b"inflated"), headers={"Content-Encoding": "gzip"}
        )
    )
    assert client.get_text("https://api.example/gz") == "inflated"


def test_pre_middleware_error_aborts_before_network(make_client: MakeClient) -> None:
    calls: list[str] = []
    boom = RuntimeError("denied")
    later: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return streamed(200)

    def deny(client: Client, request: Request, response: Response | None) -> None:
        raise boom

    def never(client: Client, request: Request, response: Response | None) -> None:
        later.append("ran")

    client = make_client(handler, middlewares=[deny, never])

    with pytest.raises(RuntimeError) as excinfo:
        client.get("https://api.example/")

    assert excinfo.value is boom
    assert calls == []
    assert later == []


def test_post_middleware_error_closes_response(make_client: MakeClient) -> None:
    captured: list[Response] = []

    class Rejected(Exception):
        pass

    def reject(client: Client, request: Request, response: Response | None) -> None:
        if response is not None:
            captured.append(response)
            raise Rejected(response.status_code)

    client = make_client(lambda request: streamed(503, b"busy"), middlewares=[reject])

    with pytest.raises(Rejected):
        client.get("https://api.example/")

    assert len(captured) == 1
    assert captured[0].raw.is_closed


def test_per_call_middlewares_run_before_client_middlewares(make_client: MakeClient) -> None:
    events: list[tuple[str, bool]] = []

    def recorder(name: str):
        def middleware(client: Client, request: Request, response: Response | None) -> None:
            events.append((name, response is not None))

        return middleware

    client = make_client(lambda request: streamed(200), middlewares=[recorder("a")])
    client.use(recorder("b"))
    client.get("https://api.example/", recorder("call-1"), recorder("call-2"))

    assert events == [
        ("call-1", False),
        ("call-2", False),
        ("a", False),
        ("b", False),
        ("call-1", True),
        ("call-2", True),
        ("a", True),
        ("b", True),
    ]


def test_client_middleware_sees_per_call_changes(make_client: MakeClient) -> None:
    seen_pages: list[str] = []

    def signer(client: Client, request: Request, response: Response | None) -> None:
        if response is None:
            seen_pages.append(request.queries.get("page"))
            request.header("X-Signature", f"page={request.queries.get('page')}")

    sent: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return streamed(200)

    client = make_client(handler, middlewares=[signer])
    client.get("https://api.example/items", before_request(lambda c, req: req.query("page", "2")))

    assert seen_pages == ["2"]
    assert sent[0].url.params["page"] == "2"
    assert sent[0].headers["X-Signature"] == "page=2"


def test_reconfigure_closes_previous_transport_on_close(make_client: MakeClient) -> None:
    client = make_client(lambda request: streamed(200))
    client.get("https://api.example/").read()
    first = client._http
    assert first is not None

    client.set_timeout(1.0, 2.0)
    assert client._http is None
    assert not first.is_closed

    client.get("https://api.example/").read()
    second = client._http
    assert second is not None and second is not first

    client.close()
    assert first.is_closed
    assert second.is_closed


def test_five_redirects_succeed_and_six_fail(make_client: MakeClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        remaining = int(request.url.path.rsplit("/", 1)[-1])
        if remaining == 0:
            return streamed(200, b"arrived")
        return httpx.Response(302, headers={"Location": f"/hop/{remaining - 1}"})

    client = make_client(handler)

    resp = client.get("https://api.example/hop/5")
    assert resp.read() == b"arrived"
    assert len(resp.raw.history) == 5

    with pytest.raises(RedirectLimitError) as excinfo:
        client.get("https://api.example/hop/6")
    assert str(excinfo.value) == "stopped after 5 redirects"
    assert isinstance(excinfo.value.__cause__, httpx.TooManyRedirects)


def test_transport_errors_propagate_unchanged(make_client: MakeClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("dial timed out", request=request)

    client = make_client(handler)
    with pytest.raises(httpx.ConnectTimeout, match="dial timed out"):
        client.get("https://api.example/")


def test_malformed_url_raises_before_network(make_client: MakeClient) -> None:
    calls: list[httpx.Request] = []
    client = make_client(lambda request: calls.append(request) or streamed(200))
    with pytest.raises(URLParseError):
        client.get("https://api.example:bad/")
    assert calls == []


def test_contract_violations(make_client: MakeClient) -> None:
    client = make_client(lambda request: streamed(200))

    with pytest.raises(ContractViolationError):
        client.do(None)  # type: ignore[arg-type]

    with pytest.raises(ContractViolationError):
        client.get("https://api.example/", "not-callable")  # type: ignore[arg-type]


def test_configuration_setters_keep_earlier_settings() -> None:
    client = Client()
    client.set_proxy("http://127.0.0.1:9900")
    client.set_timeout(1.5, 2.5)
    client.set_tls_config(True)

    assert client.config.proxy == "http://127.0.0.1:9900"
    assert client.config.dial_timeout == 1.5
    assert client.config.read_timeout == 2.5
    assert client.config.verify is True
    client.close()


def test_middleware_can_reconfigure_transport_before_send() -> None:
    first: list[str] = []
    second: list[str] = []
    first_transport = httpx.MockTransport(lambda r: first.append("x") or streamed(200))
    second_transport = httpx.MockTransport(lambda r: second.append("x") or streamed(200))

    def swap(client: Client, request: Request, response: Response | None) -> None:
        if response is None:
            client.set_transport(second_transport)

    with Client(transport=first_transport) as client:
        client.get("https://api.example/")
        client.get("https://api.example/", swap)

    assert first == ["x"]
    assert second == ["x"]


def test_default_client_is_a_singleton(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client_module, "_default_client", None)
    assert default_client() is default_client()


def test_module_level_helpers_use_default_client(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.method)
        return streamed(200, b"hi")

    stub = Client(transport=httpx.MockTransport(handler))
    monkeypatch.setattr(client_module, "_default_client", stub)

    assert shttp.get_text("https://api.example/") == "hi"
    assert shttp.post_bytes("https://api.example/") == b"hi"
    assert shttp.request("DELETE", "https://api.example/").ok
    assert seen == ["GET", "POST", "DELETE"]
    stub.close()
