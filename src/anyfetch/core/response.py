"""Response record and server-side write-out."""

import httpx

from ..errors import InvalidHeaderError, InvalidStatusError
from .body import Body, BodyInit, in_memory_payload
from .headers import Headers, HeadersInit
from .protocols import ResponseSink
from .urls import normalize_url

# Connection-level headers, never forwarded to the sink
HOP_BY_HOP_HEADERS = (
    "connection",
    "keep-alive",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
)


def _is_bodyless(status: int) -> bool:
    return status < 200 or status in (204, 304)


class Response(Body):
    """Immutable response record.

    ``ok`` and ``status_text`` are derived once from ``status``.
    """

    def __init__(
        self,
        body: BodyInit = None,
        *,
        headers: HeadersInit = None,
        redirected: bool = False,
        status: int | None = None,
        status_text: str | None = None,
        type: str | None = None,
        url: str | httpx.URL | None = None,
    ):
        super().__init__(body)
        if status is None:
            status = 200
        if isinstance(status, bool) or not isinstance(status, int) or not 100 <= status <= 599:
            raise InvalidStatusError("Response status must be an integer between 100 and 599")

        self.headers = Headers(headers)
        self.status = status
        self.ok = 200 <= status < 300
        self.redirected = bool(redirected)
        self.status_text = status_text or httpx.codes.get_reason_phrase(status)
        self.type = type or "default"
        self.url = "" if url is None else normalize_url(url)
        self._written = False
        self._sealed = True

    def _blob_type(self) -> str:
        return self.headers.get("content-type") or ""

    def clone(self) -> "Response":
        """Copy this response; the copy shares the body cache."""
        return Response(
            self,
            headers=self.headers,
            redirected=self.redirected,
            status=self.status,
            status_text=self.status_text,
            type=self.type,
            url=self.url or None,
        )

    async def write_response(self, sink: ResponseSink, end: bool = True):
        """Write status line, headers and body to *sink*.

        The sink is an ``asyncio.StreamWriter`` or anything with the same
        ``write``/``drain``/``close``/``wait_closed`` methods. When *end* is
        true the sink is closed once the whole body has been flushed.

        Hop-by-hop headers are not forwarded. The body is framed with
        ``content-length`` when its size is known, otherwise with chunked
        transfer encoding.
        """
        if self._written:
            raise RuntimeError("Response has already been written")

        headers = self.headers.copy()
        if headers.has("transfer-encoding"):
            headers.delete("content-length")
        for name in HOP_BY_HOP_HEADERS:
            headers.delete(name)

        chunked = False
        if not _is_bodyless(self.status) and not headers.has("content-length"):
            payload = in_memory_payload(self)
            if payload is None:
                headers.set("transfer-encoding", "chunked")
                chunked = True
            else:
                headers.set("content-length", len(payload))

        head = [f"HTTP/1.1 {self.status} {self.status_text}".rstrip()]
        head.extend(f"{name}: {value}" for name, value in headers.items())
        try:
            encoded = ("\r\n".join(head) + "\r\n\r\n").encode("latin-1")
        except UnicodeEncodeError as exc:
            raise InvalidHeaderError("Response head contains characters outside latin-1") from exc

        self._written = True
        sink.write(encoded)
        await sink.drain()

        async for chunk in self.iter_bytes():
            if chunked:
                if not chunk:
                    continue
                chunk = b"%x\r\n%s\r\n" % (len(chunk), chunk)
            sink.write(chunk)
            await sink.drain()
        if chunked:
            sink.write(b"0\r\n\r\n")
            await sink.drain()

        if end:
            sink.close()
            await sink.wait_closed()

    def __repr__(self) -> str:
        return f"<Response [{self.status} {self.status_text}]>"
