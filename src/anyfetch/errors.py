"""Exception hierarchy for anyfetch."""


class AnyFetchError(Exception):
    """Base class for every error raised by anyfetch."""


class InvalidArgumentError(AnyFetchError, ValueError):
    """Raised synchronously for malformed input or invalid configuration."""


class InvalidURLError(InvalidArgumentError):
    """Raised when a value cannot be parsed as an absolute URL."""


class InvalidHeaderError(InvalidArgumentError):
    """Raised for header names outside ``[a-z0-9-]``."""


class InvalidStatusError(InvalidArgumentError):
    """Raised when a response status is not an integer in [100, 599]."""


class ParseError(AnyFetchError, ValueError):
    """Raised when a body cannot be parsed as JSON."""


class FetchError(AnyFetchError):
    """Base for runtime failures while fetching a resource."""


class UnsupportedProtocolError(FetchError):
    """Raised when the URL scheme has no handler."""


class TooManyRedirectsError(FetchError):
    """Raised when a redirect chain exceeds the configured limit."""


class RedirectNotAllowedError(FetchError):
    """Raised for a 3xx response under the ``error`` redirect policy."""


class TransportError(FetchError):
    """Raised for connection, timeout and TLS failures."""


class LocalResourceError(FetchError):
    """Raised when a ``file:`` URL cannot be read."""


class ScriptEvaluationError(FetchError):
    """Raised when a ``script:`` payload fails to evaluate."""


class BodyReadError(FetchError):
    """Raised when draining a body source fails."""


class BodyConsumedError(BodyReadError):
    """Raised when a single-use body source has already been read."""
