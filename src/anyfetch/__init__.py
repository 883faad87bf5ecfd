"""Browser-style fetch for http(s), file, data and script URLs."""

from .core import (
    Blob,
    Body,
    Fetcher,
    Headers,
    Request,
    Response,
    TransportAgent,
    fetch,
    safe_fetch,
)
from .errors import (
    AnyFetchError,
    BodyConsumedError,
    BodyReadError,
    FetchError,
    InvalidArgumentError,
    InvalidHeaderError,
    InvalidStatusError,
    InvalidURLError,
    LocalResourceError,
    ParseError,
    RedirectNotAllowedError,
    ScriptEvaluationError,
    TooManyRedirectsError,
    TransportError,
    UnsupportedProtocolError,
)

__version__ = "0.1.0"

__all__ = [
    "AnyFetchError",
    "Blob",
    "Body",
    "BodyConsumedError",
    "BodyReadError",
    "FetchError",
    "Fetcher",
    "Headers",
    "InvalidArgumentError",
    "InvalidHeaderError",
    "InvalidStatusError",
    "InvalidURLError",
    "LocalResourceError",
    "ParseError",
    "RedirectNotAllowedError",
    "Request",
    "Response",
    "ScriptEvaluationError",
    "TooManyRedirectsError",
    "TransportAgent",
    "TransportError",
    "UnsupportedProtocolError",
    "fetch",
    "safe_fetch",
]
