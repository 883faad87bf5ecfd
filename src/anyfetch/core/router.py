"""Protocol router: dispatches requests to scheme handlers."""

import logging

import httpx

from ..config import FetchSettings, settings as default_settings
from ..errors import InvalidArgumentError, InvalidHeaderError, UnsupportedProtocolError
from .headers import Headers
from .protocols import Transport
from .redirects import NETWORK_SCHEMES, send_with_policy
from .request import Request
from .response import Response
from .schemes import fetch_data, fetch_file, fetch_script
from .transport import ResponseStream, TransportAgent, get_default_agent
from .urls import url_scheme

logger = logging.getLogger(__name__)

RequestInfo = Request | httpx.URL | str


def to_request(resource: RequestInfo, **options) -> Request:
    """Build a Request from a URL, or derive one from an existing Request."""
    if isinstance(resource, Request):
        return resource.replace(**options) if options else resource
    if isinstance(resource, (str, httpx.URL)):
        return Request(resource, **options)
    raise InvalidArgumentError("Parameter 'resource' must be a string, httpx.URL, or Request object.")


def _response_headers(raw: httpx.Response) -> Headers:
    """Copy *raw*'s headers, describing the body as ``aiter_bytes`` yields it.

    httpx removes any content coding while streaming, so ``content-encoding``
    and the encoded ``content-length`` are not carried over.
    """
    headers = Headers()
    for name, value in raw.headers.items():
        try:
            headers.set(name, value)
        except InvalidHeaderError:
            logger.warning("Dropping response header with unsupported name %r from %s", name, raw.url)
    encoding = headers.get("content-encoding")
    if encoding is not None and encoding.strip().lower() != "identity":
        headers.delete("content-encoding")
        headers.delete("content-length")
    return headers


class Fetcher:
    """Fetches http(s), file, data and script URLs through one entry point."""

    def __init__(
        self,
        agent: Transport | None = None,
        config: FetchSettings | None = None,
        script_namespace: dict | None = None,
    ):
        self.config = config or default_settings
        if agent is None:
            agent = get_default_agent() if config is None else TransportAgent.from_settings(self.config)
        self.agent = agent
        self.script_namespace = script_namespace if script_namespace is not None else {}

    async def fetch(self, resource: RequestInfo, **options) -> Response:
        """Fetch *resource* and return its Response.

        Raises an ``AnyFetchError`` subclass on any failure.
        """
        request = to_request(resource, **options)
        scheme = url_scheme(request.url)
        logger.debug("Dispatching %s %s", request.method, request.url)

        if scheme in NETWORK_SCHEMES:
            return await self._fetch_network(request)
        if scheme == "file":
            return await fetch_file(request.url)
        if scheme == "data":
            return await fetch_data(request.url)
        if scheme == "script" and self.config.enable_script_scheme:
            return await fetch_script(request.url, self.script_namespace)
        raise UnsupportedProtocolError(f"Unsupported protocol: {scheme}:")

    async def safe_fetch(self, resource: RequestInfo, **options) -> Response | None:
        """Like ``fetch`` but returns None instead of raising."""
        try:
            return await self.fetch(resource, **options)
        except Exception as e:
            logger.debug("Fetch of %s failed: %s", resource, e)
            return None

    async def _fetch_network(self, request: Request) -> Response:
        raw, hops, url = await send_with_policy(request, self.agent.send, self.config.max_redirects)
        return Response(
            ResponseStream(raw),
            status=raw.status_code,
            status_text=raw.reason_phrase,
            headers=_response_headers(raw),
            redirected=hops > 0,
            url=url,
        )

    async def close(self):
        """Close the transport agent, if it supports closing."""
        close = getattr(self.agent, "close", None)
        if close is not None:
            await close()


_default_fetcher: Fetcher | None = None


def get_default_fetcher() -> Fetcher:
    global _default_fetcher
    if _default_fetcher is None:
        _default_fetcher = Fetcher()
    return _default_fetcher


async def fetch(resource: RequestInfo, **options) -> Response:
    """Fetch *resource* with the default Fetcher."""
    return await get_default_fetcher().fetch(resource, **options)


async def safe_fetch(resource: RequestInfo, **options) -> Response | None:
    """Fetch *resource*, returning None on any failure."""
    return await get_default_fetcher().safe_fetch(resource, **options)
