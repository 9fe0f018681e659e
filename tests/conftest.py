"""Pytest configuration - loads .env for integration tests and provides a fake transport."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest
from dotenv import load_dotenv

from wit_cli.core.client import Response, TransportError
from wit_cli.sdk import WitClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "https://wit.test"


@dataclass
class Call:
    """A request seen by FakeTransport."""

    method: str
    url: str
    body: bytes | None = None
    content_type: str | None = None


@dataclass
class FakeTransport:
    """Transport that records requests and replays a canned response."""

    body: bytes = b"{}"
    status: int = 200
    fail: bool = False
    calls: list[Call] = field(default_factory=list)

    def reply(self, body: bytes, status: int = 200) -> "FakeTransport":
        self.body = body
        self.status = status
        return self

    def _respond(self, call: Call) -> Response:
        self.calls.append(call)
        if self.fail:
            raise TransportError("Connection error: refused")
        return Response(body=self.body, status=self.status)

    @property
    def last(self) -> Call:
        return self.calls[-1]

    def get(self, url: str) -> Response:
        return self._respond(Call("GET", url))

    def post(self, url: str, body: bytes, content_type: str = "application/json") -> Response:
        return self._respond(Call("POST", url, body, content_type))

    def put(self, url: str, body: bytes, content_type: str = "application/json") -> Response:
        return self._respond(Call("PUT", url, body, content_type))

    def delete(self, url: str) -> Response:
        return self._respond(Call("DELETE", url))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> WitClient:
    return WitClient(base_url=BASE_URL, transport=transport)
