"""Shared fixtures for goauth tests."""

from collections.abc import Mapping
from dataclasses import dataclass, field

import pytest

from goauth.config import OAuthSettings


@dataclass
class RecordedRequest:
    """A request seen by the stub transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] | None = None


class StubTransport:
    """Transport returning canned bodies in order and recording every call."""

    def __init__(self, *bodies: str):
        self.bodies = list(bodies)
        self.requests: list[RecordedRequest] = []

    def queue(self, *bodies: str) -> None:
        self.bodies.extend(bodies)

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> str:
        self.requests.append(RecordedRequest("GET", url, dict(headers or {})))
        return self._next_body()

    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        headers: Mapping[str, str] | None = None,
    ) -> str:
        self.requests.append(
            RecordedRequest("POST", url, dict(headers or {}), dict(data))
        )
        return self._next_body()

    def _next_body(self) -> str:
        return self.bodies.pop(0) if self.bodies else ""

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def settings() -> OAuthSettings:
    """Settings isolated from the environment and any .env file."""
    return OAuthSettings(_env_file=None)


@pytest.fixture
def stub_transport() -> StubTransport:
    """Empty stub transport; tests queue the bodies they need."""
    return StubTransport()
