"""HTTP handlers for the proxy host.

Handlers convert between Starlette requests/responses and the interception
service. They handle HTTP concerns like client identity, pass-through
forwarding and status codes.
"""

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from offline_cache.dto import CacheStatusResponse, HealthCheckResponse
from offline_cache.entities import InterceptedRequest, ResponseSnapshot
from offline_cache.exceptions import OfflineCacheError, TransportFailure
from offline_cache.services import OfflineCache

CLIENT_ID_HEADER = "x-client-id"


def render_snapshot(snapshot: ResponseSnapshot) -> Response:
    """Build a Starlette response from a snapshot, keeping repeated headers."""
    response = Response(content=snapshot.body, status_code=snapshot.status)
    for name, value in snapshot.headers:
        if name.lower() == "content-length":
            continue
        response.headers.append(name, value)
    return response


class ProxyHandler:
    """HTTP handlers for intercepted traffic.

    Every request reaching the catch-all route is rewritten against the
    origin and handed to :class:`~offline_cache.services.OfflineCache`.
    Requests the cache passes through are forwarded to the origin as-is.

    Example:
        ```python
        handler = ProxyHandler(offline_cache=cache)

        @app.api_route("/{path:path}", methods=["GET", "POST"])
        async def proxy(request: Request):
            return await handler.proxy(request)
        ```
    """

    def __init__(self, offline_cache: OfflineCache, origin: str | None = None) -> None:
        """Initialize the proxy handler.

        Args:
            offline_cache: The interception service (required).
            origin: Origin requests are forwarded to. Defaults to the lifecycle origin.
        """
        self._cache = offline_cache
        self._origin = (origin or offline_cache.lifecycle.origin).rstrip("/")

    async def to_intercepted(self, request: Request) -> InterceptedRequest:
        """Convert an incoming request into an intercepted request for the origin."""
        # raw_path keeps percent-escapes such as %2F, %3F and %23 intact
        raw_path = request.scope.get("raw_path")
        path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
        url = f"{self._origin}{path}"
        if request.url.query:
            url = f"{url}?{request.url.query}"

        client_id = request.headers.get(CLIENT_ID_HEADER)
        if client_id is None and request.client is not None:
            client_id = request.client.host

        return InterceptedRequest(
            method=request.method,
            url=url,
            headers=tuple(
                (name.decode("latin-1"), value.decode("latin-1")) for name, value in request.headers.raw
            ),
            body=await request.body(),
            client_id=client_id,
        )

    async def proxy(self, request: Request) -> Response:
        """Handle any request routed to the catch-all path.

        Returns:
            The cache layer's response, or the origin's response for
            pass-through requests (502 if the origin is unreachable)
        """
        intercepted = await self.to_intercepted(request)
        if intercepted.client_id is not None:
            self._cache.lifecycle.connect(intercepted.client_id)

        snapshot = await self._cache.handle(intercepted)
        if snapshot is None:
            try:
                snapshot = await self._cache.lifecycle.fetcher.fetch(intercepted)
            except TransportFailure as e:
                return JSONResponse(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    content=e.to_response().model_dump(),
                )

        return render_snapshot(snapshot)

    async def get_status(self) -> CacheStatusResponse:
        """Handle GET /_offline/status requests.

        Raises:
            HTTPException: If the cache store cannot be read
        """
        lifecycle = self._cache.lifecycle
        try:
            stats = await self._cache.get_stats()
            generations = await lifecycle.store.generations()
        except OfflineCacheError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to read cache status: {e.message}",
            ) from e

        return CacheStatusResponse(
            state=lifecycle.state.value,
            version=lifecycle.version,
            active_generation=lifecycle.active_generation,
            generations=generations,
            stale_generations=lifecycle.stale_generations,
            total_entries=stats.get("total_entries", 0),
            controlled_clients=stats.get("controlled_clients", 0),
            pending_writes=stats.get("pending_writes", 0),
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /_offline/health requests."""
        is_healthy = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
