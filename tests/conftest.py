from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pynojs._transport import TransportResponse
from pynojs.config import EngineConfig
from pynojs.exceptions import NoJsTransportError
from pynojs.processor import DirectiveProcessor
from pynojs.state.store import StateStore


@dataclass
class FakeTransport:
    """In-memory transport: URL -> canned body, or URL -> HTTP error status."""

    bodies: dict[str, Any] = field(default_factory=dict)
    failures: dict[str, int] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, Any] | None]] = field(default_factory=list)

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> TransportResponse:
        self.calls.append((url, method, dict(data) if data is not None else None))
        if url in self.failures:
            status = self.failures[url]
            raise NoJsTransportError(f"HTTP {status} from {url}", status_code=status, url=url)
        if url not in self.bodies:
            raise NoJsTransportError(f"HTTP 404 from {url}", status_code=404, url=url)
        body = self.bodies[url]
        text = body if isinstance(body, str) else json.dumps(body)
        return TransportResponse(url=url, status=200, text=text)


@pytest.fixture
def store() -> StateStore:
    return StateStore()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_processor(store: StateStore, transport: FakeTransport):
    def _make(markup: str, **config_fields: Any) -> DirectiveProcessor:
        return DirectiveProcessor.from_markup(
            markup,
            config=EngineConfig(**config_fields),
            store=store,
            transport=transport,
        )

    return _make
