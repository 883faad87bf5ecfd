"""Handlers for the non-network URL schemes."""

import asyncio
import base64
import binascii
import codecs
import logging
import mimetypes
from pathlib import Path
from urllib.parse import unquote, unquote_to_bytes, urlsplit

from ..errors import FetchError, LocalResourceError, ScriptEvaluationError
from .headers import Headers
from .response import Response

logger = logging.getLogger(__name__)

DEFAULT_DATA_MIME = "text/plain"


def _payload(url: str) -> str:
    """Everything after the scheme separator."""
    return url.partition(":")[2]


async def fetch_file(url: str) -> Response:
    """Read a local file named by a ``file:`` URL."""
    path = Path(unquote(urlsplit(url).path))
    headers = Headers()
    mime, _ = mimetypes.guess_type(path.name)
    if mime is not None:
        headers.set("content-type", mime)

    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise LocalResourceError(f"Failed to fetch {url}: {exc}") from exc

    logger.debug("Read %d bytes from %s", len(data), path)
    return Response(data, status=200, headers=headers, url=url)


def parse_data_url(url: str) -> tuple[str, bytes | str]:
    """Split a ``data:`` URL into its media type and decoded payload.

    Returns bytes for base64 payloads and text otherwise.
    """
    raw = unquote_to_bytes(_payload(url).partition("#")[0])
    head, _, body = raw.partition(b",")
    meta = [part.strip() for part in head.decode("latin-1").split(";")]
    mime = meta[0] or DEFAULT_DATA_MIME
    params = meta[1:]

    if "base64" in (param.lower() for param in params):
        try:
            return mime, base64.b64decode(body, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise FetchError(f"Invalid base64 payload in data URL: {exc}") from exc

    charset = "utf-8"
    for param in params:
        name, sep, value = param.partition("=")
        if sep and name.strip().lower() == "charset":
            charset = value.strip().strip('"')
    try:
        codecs.lookup(charset)
    except LookupError as exc:
        raise FetchError(f"Unsupported charset in data URL: {charset}") from exc
    return mime, body.decode(charset, errors="replace")


async def fetch_data(url: str) -> Response:
    """Build a response from an inline ``data:`` URL."""
    mime, payload = parse_data_url(url)
    return Response(payload, status=200, headers={"content-type": mime}, url=url)


async def fetch_script(url: str, namespace: dict) -> Response:
    """Execute the Python source of a ``script:`` URL in *namespace*.

    Whatever the script produces is discarded; the response is empty.
    """
    source = unquote(_payload(url))
    try:
        exec(compile(source, "<script-url>", "exec"), namespace)
    except Exception as exc:
        raise ScriptEvaluationError(f"Script execution failed: {exc}") from exc
    return Response(None, status=200, url=url)
