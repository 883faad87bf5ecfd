"""Request record."""

import httpx

from ..errors import InvalidArgumentError
from .body import Body, BodyInit
from .headers import Headers, HeadersInit
from .urls import normalize_url

REDIRECT_POLICIES = ("follow", "manual", "error")

REQUEST_FIELDS = (
    "body",
    "cache",
    "credentials",
    "headers",
    "integrity",
    "keepalive",
    "method",
    "mode",
    "redirect",
    "referrer",
    "referrer_policy",
)


class Request(Body):
    """Immutable description of a resource request.

    Attributes cannot be reassigned after construction. Use ``replace`` or
    ``with_url`` to derive a modified copy; the copy gets its own Headers and
    shares the body cache with this request.
    """

    def __init__(
        self,
        url: str | httpx.URL,
        *,
        body: BodyInit = None,
        cache: str | None = None,
        credentials: str | None = None,
        headers: HeadersInit = None,
        integrity: str | None = None,
        keepalive: bool | None = None,
        method: str | None = None,
        mode: str | None = None,
        redirect: str | None = None,
        referrer: str | None = None,
        referrer_policy: str | None = None,
    ):
        super().__init__(body)
        redirect = redirect or "follow"
        if redirect not in REDIRECT_POLICIES:
            raise InvalidArgumentError(f"Invalid request redirect mode: {redirect!r}")

        self.url = normalize_url(url)
        self.method = (method or "GET").upper()
        self.headers = Headers(headers)
        self.cache = cache or "default"
        self.credentials = credentials or "same-origin"
        self.integrity = integrity or ""
        self.keepalive = bool(keepalive)
        self.mode = mode or "cors"
        self.redirect = redirect
        self.referrer = referrer or ""
        self.referrer_policy = referrer_policy or ""
        self.destination = ""
        self._sealed = True

    def _blob_type(self) -> str:
        return self.headers.get("content-type") or ""

    def replace(self, **changes) -> "Request":
        """Return a new Request with *changes* applied to this one's fields."""
        unknown = set(changes) - set(REQUEST_FIELDS) - {"url"}
        if unknown:
            raise InvalidArgumentError(f"Unknown request option(s): {', '.join(sorted(unknown))}")

        fields = {name: getattr(self, name) for name in REQUEST_FIELDS if name != "body"}
        fields["body"] = Body(self)
        fields.update(changes)
        url = fields.pop("url", self.url)
        return Request(url, **fields)

    def with_url(self, url: str | httpx.URL) -> "Request":
        return self.replace(url=url)

    def clone(self) -> "Request":
        return self.replace()

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.url}]>"
