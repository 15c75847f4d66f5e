from fastapi import FastAPI, Request, Response

from offline_cache.api.dependencies import HandlerDep, lifespan
from offline_cache.config import settings
from offline_cache.dto import CacheStatusResponse, HealthCheckResponse
from offline_cache.services import OfflineCache

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(offline_cache: OfflineCache | None = None) -> FastAPI:
    """Build the proxy host application.

    Args:
        offline_cache: Preconfigured interception service. If None, the
            lifespan builds one from settings.

    Returns:
        The FastAPI application
    """
    app = FastAPI(
        title="Offline Cache",
        description="Offline-capable response cache in front of the quoting web app",
        version="0.1.0",
        lifespan=lifespan,
    )
    if offline_cache is not None:
        app.state.offline_cache = offline_cache

    @app.get("/_offline/status", response_model=CacheStatusResponse)
    async def cache_status(handler: HandlerDep) -> CacheStatusResponse:
        """Lifecycle state, generations and entry counts."""
        return await handler.get_status()

    @app.get("/_offline/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, handler: HandlerDep) -> Response:
        """Intercept every other request."""
        return await handler.proxy(request)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "offline_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
