"""Lazy, memoizing body shared by Request and Response."""

import array
import asyncio
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from dataclasses import dataclass

from ..errors import BodyConsumedError, BodyReadError, InvalidArgumentError, ParseError

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class Blob:
    """Binary payload tagged with a media type."""

    data: bytes
    type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


class _BodyCache:
    """Source and memoized views, shared between a Body and its clones."""

    __slots__ = ("source", "consumed", "buffer", "array_buffer", "text", "json", "blob", "lock")

    def __init__(self, source=None):
        # None, replayable bytes, or a single-use (async) iterator
        self.source = source
        self.consumed = False
        self.buffer: bytes | None = None
        self.array_buffer: memoryview | None = None
        self.text: str | None = None
        self.json = _UNSET
        self.blob: Blob | None = None
        self.lock = asyncio.Lock()

    @property
    def is_live(self) -> bool:
        return self.source is not None and not isinstance(self.source, bytes)


def _to_bytes(chunk) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


async def _iterate(source) -> AsyncIterator[bytes]:
    if hasattr(source, "__aiter__"):
        async for chunk in source:
            yield _to_bytes(chunk)
    else:
        for chunk in source:
            yield _to_bytes(chunk)


def in_memory_payload(body: "Body") -> bytes | None:
    """Return the payload of *body* if it is held in memory, else None.

    A body with no source yields ``b""``; an undrained live source yields
    None.
    """
    cache = body._cache
    if cache.buffer is not None:
        return cache.buffer
    if cache.source is None:
        return b""
    if isinstance(cache.source, bytes):
        return cache.source
    return None


class Body:
    """Byte payload exposing memoized buffer, text, JSON and blob views.

    A live source is drained at most once; later views are derived from the
    cached bytes. Building a Body from another Body shares its cache, so
    draining either one makes the bytes available to both.
    """

    _sealed = False

    def __init__(self, init: "BodyInit" = None):
        if init is None:
            cache = _BodyCache()
        elif isinstance(init, Body):
            cache = init._cache
        elif isinstance(init, str):
            cache = _BodyCache(init.encode("utf-8"))
            cache.text = init
        elif isinstance(init, (bytes, bytearray, memoryview, array.array, list, tuple)):
            try:
                data = bytes(init)
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentError(f"Invalid byte payload: {exc}") from exc
            cache = _BodyCache(data)
            cache.buffer = data
            cache.array_buffer = memoryview(data)
        elif isinstance(init, (AsyncIterable, Iterator)):
            cache = _BodyCache(init)
        else:
            raise InvalidArgumentError(f"Unsupported body type: {type(init).__name__}")
        self._cache = cache

    def __setattr__(self, name, value):
        if self._sealed and not name.startswith("_"):
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        object.__setattr__(self, name, value)

    def _blob_type(self) -> str:
        return ""

    @property
    def body_used(self) -> bool:
        """True once a live source was streamed out and can no longer be read."""
        cache = self._cache
        return cache.consumed and cache.buffer is None

    async def buffer(self) -> bytes:
        """Return the full payload, draining a live source on first use."""
        cache = self._cache
        if cache.buffer is None:
            async with cache.lock:
                if cache.buffer is None:
                    cache.buffer = await self._drain()
        return cache.buffer

    async def _drain(self) -> bytes:
        cache = self._cache
        if cache.consumed:
            raise BodyConsumedError("Body source has already been read")
        source = cache.source
        if source is None:
            return b""
        if isinstance(source, bytes):
            return source

        cache.consumed = True
        chunks = []
        try:
            async for chunk in _iterate(source):
                chunks.append(chunk)
        except Exception as exc:
            raise BodyReadError(f"Failed to read body: {exc}") from exc

        cache.source = None
        data = b"".join(chunks)
        logger.debug("Drained body source (%d bytes)", len(data))
        return data

    async def array_buffer(self) -> memoryview:
        cache = self._cache
        if cache.array_buffer is None:
            cache.array_buffer = memoryview(await self.buffer())
        return cache.array_buffer

    async def text(self) -> str:
        """Decode the payload as UTF-8, replacing invalid sequences."""
        cache = self._cache
        if cache.text is None:
            cache.text = (await self.buffer()).decode("utf-8", errors="replace")
        return cache.text

    async def json(self):
        """Parse the payload as JSON. Failures are not cached."""
        cache = self._cache
        if cache.json is _UNSET:
            text = await self.text()
            try:
                value = json.loads(text)
            except ValueError as exc:
                raise ParseError(f"Invalid JSON body: {exc}") from exc
            cache.json = value
        return cache.json

    async def blob(self) -> Blob:
        cache = self._cache
        if cache.blob is None:
            cache.blob = Blob(await self.buffer(), self._blob_type())
        return cache.blob

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the payload without caching it.

        In-memory payloads can be iterated any number of times. A live source
        is streamed through once; afterwards the body is used up.
        """
        cache = self._cache
        if cache.buffer is not None:
            if cache.buffer:
                yield cache.buffer
            return

        source = cache.source
        if source is None:
            return
        if isinstance(source, bytes):
            if source:
                yield source
            return

        if cache.consumed or cache.lock.locked():
            raise BodyConsumedError("Body source has already been read")
        cache.consumed = True
        try:
            async for chunk in _iterate(source):
                yield chunk
        except Exception as exc:
            raise BodyReadError(f"Failed to read body: {exc}") from exc

    async def aclose(self) -> None:
        """Release an undrained live source."""
        cache = self._cache
        if not cache.is_live or cache.consumed:
            return
        cache.consumed = True
        close = getattr(cache.source, "aclose", None)
        if close is not None:
            await close()

    def clone(self) -> "Body":
        return Body(self)


BodyInit = Body | str | bytes | bytearray | memoryview | AsyncIterable[bytes] | Iterator[bytes] | None
