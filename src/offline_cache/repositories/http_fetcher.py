"""httpx-based network fetcher.

Forwards intercepted requests to the network with :class:`httpx.AsyncClient`
and reads each response fully into an immutable
:class:`~offline_cache.entities.ResponseSnapshot`.

Responses are classified the way a browser classifies fetch responses:
- ``basic``: the final URL shares the configured origin
- ``cors``: cross-origin with an ``Access-Control-Allow-Origin`` header
- ``opaque``: any other cross-origin response

Redirects are followed; a response reached through one or more redirects is
flagged ``redirected`` and is never cached by the asset strategy.
"""

import httpx

from offline_cache.config import settings
from offline_cache.entities import InterceptedRequest, ResponseSnapshot, ResponseType
from offline_cache.exceptions import TransportFailure
from offline_cache.logging import get_logger

# Headers that describe a single hop or the wire encoding, not the resource
_HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-connection",
        "transfer-encoding",
        "upgrade",
        "te",
        "trailer",
    }
)
_REQUEST_SKIP = _HOP_BY_HOP | {"host", "content-length"}
# httpx decodes the body, so the original encoding and length no longer apply
_RESPONSE_SKIP = _HOP_BY_HOP | {"content-encoding", "content-length"}


def _origin_of(url: httpx.URL) -> tuple[str, str, int | None]:
    port = url.port
    if port is None:
        port = {"http": 80, "https": 443}.get(url.scheme)
    return url.scheme, url.host, port


class HttpxFetcher:
    """Network fetcher using httpx.

    This class satisfies the Fetcher protocol through structural typing -
    no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpxFetcher.create(origin="https://app.example.com")
        snapshot = await fetcher.fetch(
            InterceptedRequest(method="GET", url="https://app.example.com/")
        )
        await fetcher.close()
        ```
    """

    def __init__(
        self,
        origin: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            origin: Origin considered same-origin. Defaults to settings.
            timeout: Request timeout in seconds. Defaults to settings.
            client: Preconfigured client (e.g. with a mock transport).
        """
        self._origin = httpx.URL(origin or settings.origin)
        self._timeout = timeout or settings.fetch_timeout
        self._client = client
        self._logger = get_logger("offline_cache.http_fetcher")

    @classmethod
    def create(cls, origin: str | None = None, timeout: float | None = None) -> "HttpxFetcher":
        """Factory method to create HttpxFetcher with defaults."""
        return cls(origin=origin, timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(self, request: InterceptedRequest) -> ResponseSnapshot:
        """Send a request over the network and snapshot the response.

        Args:
            request: The intercepted request

        Returns:
            Fully-read response snapshot

        Raises:
            TransportFailure: On timeouts, refused connections, DNS failures,
                protocol errors or redirect loops
        """
        headers = [(name, value) for name, value in request.headers if name.lower() not in _REQUEST_SKIP]

        try:
            response = await self.client.request(
                request.method,
                request.url,
                headers=headers,
                content=request.body or None,
            )
        except httpx.RequestError as e:
            self._logger.info(
                "Network request failed",
                method=request.method,
                url=request.url,
                error=type(e).__name__,
            )
            raise TransportFailure(
                f"{type(e).__name__}: {e}",
                {"method": request.method, "url": request.url},
            ) from e

        return self._snapshot(response)

    def _snapshot(self, response: httpx.Response) -> ResponseSnapshot:
        """Read an httpx response into an immutable snapshot."""
        return ResponseSnapshot(
            status=response.status_code,
            headers=tuple(
                (name, value)
                for name, value in response.headers.multi_items()
                if name.lower() not in _RESPONSE_SKIP
            ),
            body=response.content,
            url=str(response.url),
            response_type=self._classify(response),
            redirected=bool(response.history),
        )

    def _classify(self, response: httpx.Response) -> ResponseType:
        if _origin_of(response.url) == _origin_of(self._origin):
            return ResponseType.BASIC
        if "access-control-allow-origin" in response.headers:
            return ResponseType.CORS
        return ResponseType.OPAQUE

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
