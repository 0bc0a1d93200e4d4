"""HTTP transport used for remote templates, translations and actions."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from pynojs._constants import USER_AGENT
from pynojs._redact import redact_for_log
from pynojs.config import EngineConfig
from pynojs.exceptions import NoJsTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """A completed response, already read into memory."""

    url: str
    status: int
    text: str
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises
        ------
        NoJsTransportError
            If the body is not valid JSON.
        """
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise NoJsTransportError(
                f"Invalid JSON from {self.url}: {self.text[:200]}",
                status_code=self.status,
                url=self.url,
            ) from exc

    def payload(self) -> Any:
        """JSON body when it parses, raw text otherwise."""
        try:
            return json.loads(self.text)
        except json.JSONDecodeError:
            return self.text


class Transport(Protocol):
    """Structural transport interface used by the directive processor.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """aiohttp-backed transport.

    The session is owned by the caller when passed in; otherwise one is
    created lazily and closed by :meth:`close`.
    """

    def __init__(
        self,
        config: EngineConfig,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._owns_session = http_session is None

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None:
            self._http = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
                headers={"user-agent": USER_AGENT},
            )
        return self._http

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> TransportResponse:
        """Send a request and read the full body.

        Form data is sent as a urlencoded body. Any non-2xx status raises
        :class:`NoJsTransportError`, as do connection-level failures.
        """
        full_url = self._config.resolve_url(url)
        method = method.upper()

        _logger.debug("%s %s data=%s", method, full_url, redact_for_log(data))

        try:
            async with self._session().request(method, full_url, data=dict(data) if data else None) as resp:
                text = await resp.text()
                content_type = resp.headers.get("content-type", "")
                status = resp.status
        except aiohttp.ClientError as exc:
            raise NoJsTransportError(f"Request to {full_url} failed: {exc}", url=full_url) from exc
        except TimeoutError as exc:
            raise NoJsTransportError(f"Request to {full_url} timed out", url=full_url) from exc

        response = TransportResponse(url=full_url, status=status, text=text, content_type=content_type)
        if not response.ok:
            raise NoJsTransportError(
                f"HTTP {status} from {full_url}: {text[:200]}",
                status_code=status,
                url=full_url,
            )
        return response
