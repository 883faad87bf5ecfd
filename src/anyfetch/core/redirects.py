"""Redirect handling for network requests."""

import logging
from collections.abc import Awaitable, Callable
from typing import NamedTuple

import httpx

from ..errors import (
    InvalidArgumentError,
    RedirectNotAllowedError,
    TooManyRedirectsError,
    UnsupportedProtocolError,
)
from .request import Request
from .urls import resolve_url, url_scheme

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 10

NETWORK_SCHEMES = ("http", "https")

SendFn = Callable[[Request], Awaitable[httpx.Response]]


class Exchange(NamedTuple):
    """Final response of a network fetch, with the hop count and final URL."""

    response: httpx.Response
    hops: int
    url: str


def is_redirect_status(status: int) -> bool:
    return 300 <= status <= 399


async def follow_redirects(
    request: Request,
    send: SendFn,
    max_redirects: int = MAX_REDIRECTS,
) -> Exchange:
    """Send *request*, following ``location`` headers on 3xx responses.

    Each hop derives a new Request; the one passed in is never modified.
    """
    hops = 0
    current = request
    while True:
        response = await send(current)
        location = response.headers.get("location")
        if location is None or not is_redirect_status(response.status_code):
            return Exchange(response, hops, current.url)

        await response.aclose()
        if hops >= max_redirects:
            raise TooManyRedirectsError(f"Too many redirects (limit {max_redirects}) fetching {request.url}")

        target = resolve_url(location, current.url)
        if url_scheme(target) not in NETWORK_SCHEMES:
            raise UnsupportedProtocolError(f"Redirect from {current.url} to unsupported URL {target}")
        logger.debug("Redirect %d: %s -> %s (%d)", hops + 1, current.url, target, response.status_code)
        current = current.with_url(target)
        hops += 1


async def reject_redirects(request: Request, send: SendFn) -> httpx.Response:
    """Send once and fail on any 3xx response."""
    response = await send(request)
    if is_redirect_status(response.status_code):
        await response.aclose()
        raise RedirectNotAllowedError(
            f"Redirect ({response.status_code}) not allowed for {request.url}"
        )
    return response


async def send_with_policy(
    request: Request,
    send: SendFn,
    max_redirects: int = MAX_REDIRECTS,
) -> Exchange:
    """Apply the request's redirect policy around *send*."""
    redirect = request.redirect
    if redirect == "follow":
        return await follow_redirects(request, send, max_redirects)
    if redirect == "manual":
        return Exchange(await send(request), 0, request.url)
    if redirect == "error":
        return Exchange(await reject_redirects(request, send), 0, request.url)
    raise InvalidArgumentError(f"Invalid request redirect mode: {redirect!r}")
