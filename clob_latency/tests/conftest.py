"""Shared fixtures: an in-process stand-in for the Gamma and CLOB APIs."""

from typing import Optional

import aiohttp
import orjson
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


class FakePolymarketApi:
    """
    Serves /events (Gamma) and /book, /price, /midpoint (CLOB) from one app.

    Behaviour is set through attributes before the test issues requests;
    every request is recorded in `calls` as (path, query dict) and its
    User-Agent in `user_agents`.
    """

    def __init__(self):
        self.base_url = ""
        self.events: list = []
        self.events_status = 200
        self.events_body: Optional[bytes] = None
        self.accepted_tokens: set[str] = set()
        self.book_status = 200
        self.book_body = b'{"bids": [], "asks": []}'
        self.midpoint_status = 200
        self.calls: list[tuple[str, dict]] = []
        self.user_agents: list[str] = []

    def _record(self, request: web.Request) -> None:
        self.calls.append((request.path, dict(request.query)))
        self.user_agents.append(request.headers.get("User-Agent", ""))

    async def handle_events(self, request: web.Request) -> web.Response:
        self._record(request)
        body = self.events_body if self.events_body is not None else orjson.dumps(self.events)
        return web.Response(status=self.events_status, body=body, content_type="application/json")

    async def handle_price(self, request: web.Request) -> web.Response:
        self._record(request)
        if request.query.get("token_id") in self.accepted_tokens:
            return web.json_response({"price": "0.52"})
        return web.json_response({"error": "No orderbook exists for the requested token id"}, status=404)

    async def handle_book(self, request: web.Request) -> web.Response:
        self._record(request)
        return web.Response(status=self.book_status, body=self.book_body, content_type="application/json")

    async def handle_midpoint(self, request: web.Request) -> web.Response:
        self._record(request)
        if self.midpoint_status != 200:
            return web.Response(status=self.midpoint_status, text="Service Unavailable\r\nretry later")
        return web.json_response({"mid": "0.515"})

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/events", self.handle_events)
        app.router.add_get("/price", self.handle_price)
        app.router.add_get("/book", self.handle_book)
        app.router.add_get("/midpoint", self.handle_midpoint)
        return app

    def paths(self) -> list[str]:
        return [path for path, _ in self.calls]


def make_event(slug: str, token_ids, question: str = "Will it happen?") -> dict:
    """Gamma event with a single market."""
    return {
        "slug": slug,
        "title": question,
        "markets": [{
            "slug": f"{slug}-market",
            "question": question,
            "clobTokenIds": token_ids,
        }],
    }


@pytest_asyncio.fixture
async def fake_api():
    """Running fake API; base URL available as fake_api.base_url."""
    api = FakePolymarketApi()
    server = TestServer(api.build_app())
    await server.start_server()
    api.base_url = str(server.make_url("")).rstrip("/")
    yield api
    await server.close()


@pytest_asyncio.fixture
async def session():
    async with aiohttp.ClientSession() as s:
        yield s


@pytest.fixture
def clean_env(monkeypatch):
    """Remove configuration variables that would leak in from the shell."""
    for key in (
        "GAMMA_API_URL", "CLOB_API_URL", "ITERATIONS", "SLEEP_MS", "DISCOVERY_LIMIT",
        "REQUEST_TIMEOUT_SECONDS", "REGION", "TOKEN_ID", "OUTPUT_DIR", "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
