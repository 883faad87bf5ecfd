"""URL validation and normalization."""

import ipaddress
import re
from urllib.parse import urljoin, urlsplit, urlunsplit

import httpx

from ..errors import InvalidArgumentError, InvalidURLError

SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*$")

# Code points that may not appear in a host name
FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20\x7f#%/<>?@\[\\\]^|]")

DEFAULT_PORTS = {"http": 80, "https": 443}

# Schemes whose URLs carry an authority and a path
HIERARCHICAL_SCHEMES = {"http", "https", "file"}


def normalize_url(url: str | httpx.URL) -> str:
    """Return the absolute, normalized form of *url*.

    Lowercases scheme and host, drops the scheme's default port and gives
    network URLs at least a root path. Query and fragment are kept as-is.
    """
    if isinstance(url, httpx.URL):
        url = str(url)
    elif not isinstance(url, str):
        raise InvalidArgumentError(f"URL must be a string or httpx.URL, got {type(url).__name__}")

    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError as exc:
        raise InvalidURLError(f"{url!r} is not a valid URL") from exc

    scheme = parsed.scheme.lower()
    if not SCHEME_RE.match(scheme):
        raise InvalidURLError(f"{url!r} is not a valid URL")

    if scheme not in HIERARCHICAL_SCHEMES:
        return urlunsplit((scheme, parsed.netloc, parsed.path, parsed.query, parsed.fragment))

    host = (parsed.hostname or "").lower()
    if scheme in DEFAULT_PORTS and not host:
        raise InvalidURLError(f"{url!r} is not a valid URL")
    if not _valid_host(host):
        raise InvalidURLError(f"{url!r} has an invalid host")

    netloc = host
    if ":" in host:
        netloc = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"
    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parsed.path or "/"
    normalized = urlunsplit((scheme, netloc, path, parsed.query, parsed.fragment))
    if scheme in DEFAULT_PORTS:
        try:
            httpx.URL(normalized)
        except httpx.InvalidURL as exc:
            raise InvalidURLError(f"{url!r} is not a valid URL") from exc
    return normalized


def _valid_host(host: str) -> bool:
    if ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True
    return not FORBIDDEN_HOST_RE.search(host)


def resolve_url(location: str, base: str) -> str:
    """Resolve a possibly relative reference against *base*."""
    return normalize_url(urljoin(base, location))


def url_scheme(url: str) -> str:
    return urlsplit(url).scheme
