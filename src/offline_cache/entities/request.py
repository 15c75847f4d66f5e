"""Intercepted request and cache key domain entities."""

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Normalize a URL for use as part of a cache key.

    Lower-cases scheme and host, drops default ports and the fragment, and
    turns an empty path into ``/``. The query string is kept verbatim.

    Args:
        url: Absolute URL

    Returns:
        The normalized URL
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    netloc = host
    if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{parts.port}"
    if parts.username:
        credentials = parts.username if parts.password is None else f"{parts.username}:{parts.password}"
        netloc = f"{credentials}@{netloc}"
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


@dataclass(frozen=True)
class RequestKey:
    """Normalized (method, URL) identity of a request.

    A key maps to at most one entry per generation.

    Attributes:
        method: Upper-cased HTTP method
        url: Normalized absolute URL
    """

    method: str
    url: str

    @classmethod
    def create(cls, method: str, url: str) -> "RequestKey":
        """Build a key from a raw method and URL."""
        return cls(method=method.upper(), url=normalize_url(url))

    @classmethod
    def parse(cls, raw: str) -> "RequestKey":
        """Parse the string form produced by ``str(key)``."""
        method, _, url = raw.partition(" ")
        return cls(method=method, url=url)

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


@dataclass(frozen=True)
class InterceptedRequest:
    """An outbound request forwarded to the cache layer by the hosting runtime.

    Attributes:
        method: HTTP method
        url: Absolute request URL
        headers: Request headers as (name, value) pairs
        body: Request body (only meaningful for pass-through requests)
        client_id: Identifier of the client that issued the request
    """

    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    client_id: str | None = None

    @property
    def key(self) -> RequestKey:
        return RequestKey.create(self.method, self.url)

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return default

    @property
    def accepts_html(self) -> bool:
        """Whether the Accept header asks for an HTML document.

        A request without an Accept header is not treated as HTML.
        """
        accept = self.header("accept")
        return accept is not None and "text/html" in accept.lower()
