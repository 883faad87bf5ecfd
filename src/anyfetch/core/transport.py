"""HTTP transport agent using httpx."""

import asyncio
import logging
from urllib.parse import urlsplit

import httpx

from ..config import FetchSettings, settings
from ..errors import InvalidURLError, TransportError
from .body import in_memory_payload
from .request import Request

logger = logging.getLogger(__name__)


class ResponseStream:
    """Single-use byte stream over a streamed httpx response."""

    def __init__(self, raw: httpx.Response):
        self.raw = raw

    async def __aiter__(self):
        try:
            async for chunk in self.raw.aiter_bytes():
                yield chunk
        finally:
            await self.raw.aclose()

    async def aclose(self):
        await self.raw.aclose()


def _host(url: str) -> str:
    return urlsplit(url).netloc.rpartition("@")[2]


class TransportAgent:
    """Async HTTP transport using httpx with connection reuse."""

    def __init__(
        self,
        timeout: float = 10.0,
        user_agent: str = "",
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
    ):
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, config: FetchSettings) -> "TransportAgent":
        return cls(
            timeout=config.timeout,
            user_agent=config.user_agent,
            max_connections=config.max_connections,
            max_keepalive_connections=config.max_keepalive_connections,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self.timeout,
                        limits=self.limits,
                        follow_redirects=False,
                    )
        return self._client

    async def send(self, request: Request) -> httpx.Response:
        """Issue one round trip; resolves once response headers arrive.

        The response body is left unread for the caller to stream.
        """
        client = await self._get_client()

        headers = request.headers.copy()
        headers.set("host", _host(request.url))
        if self.user_agent and not headers.has("user-agent"):
            headers.set("user-agent", self.user_agent)

        content = in_memory_payload(request)
        if content is None:
            content = request.iter_bytes()

        try:
            outgoing = client.build_request(
                request.method,
                request.url,
                headers=headers.items(),
                content=content or None,
            )
        except httpx.InvalidURL as exc:
            raise InvalidURLError(f"{request.url!r} is not a valid URL") from exc

        logger.debug("%s %s", request.method, request.url)
        try:
            return await client.send(outgoing, stream=True)
        except httpx.TransportError as exc:
            raise TransportError(f"Failed to fetch {request.url}: {exc}") from exc

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_default_agent: TransportAgent | None = None


def get_default_agent() -> TransportAgent:
    """Process-wide agent built from the module settings on first use."""
    global _default_agent
    if _default_agent is None:
        _default_agent = TransportAgent.from_settings(settings)
    return _default_agent
