"""Protocol definitions for pluggable collaborators."""

from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from .request import Request


class Transport(Protocol):
    """Issues one raw network round trip."""

    async def send(self, request: "Request") -> httpx.Response:
        """Send the request and return once response headers arrive."""
        ...


class ResponseSink(Protocol):
    """Byte sink with the ``asyncio.StreamWriter`` write/close interface."""

    def write(self, data: bytes) -> None:
        ...

    async def drain(self) -> None:
        ...

    def close(self) -> None:
        ...

    async def wait_closed(self) -> None:
        ...
