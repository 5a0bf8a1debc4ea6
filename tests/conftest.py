from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest

from shttp import Client

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client() -> Iterator[Callable[..., Client]]:
    """Build clients backed by `httpx.MockTransport`; closed at teardown."""
    clients: list[Client] = []

    def _make(handler: Handler, **kwargs: object) -> Client:
        client = Client(transport=httpx.MockTransport(handler), **kwargs)  # type: ignore[arg-type]
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
