"""Core fetch components."""

from .body import Blob, Body
from .headers import Headers
from .protocols import ResponseSink, Transport
from .request import Request
from .response import Response
from .router import Fetcher, fetch, safe_fetch
from .transport import TransportAgent, get_default_agent

__all__ = [
    "Blob",
    "Body",
    "Fetcher",
    "Headers",
    "Request",
    "Response",
    "ResponseSink",
    "Transport",
    "TransportAgent",
    "fetch",
    "get_default_agent",
    "safe_fetch",
]
