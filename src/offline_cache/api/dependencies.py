"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from offline_cache.config import settings
from offline_cache.exceptions import OfflineCacheError
from offline_cache.handlers import ProxyHandler
from offline_cache.logging import configure_logging, get_logger
from offline_cache.services import OfflineCache

logger = get_logger("offline_cache.api")


def get_handler(request: Request) -> ProxyHandler:
    """Dependency injection for ProxyHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "proxy_handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Acts as the hosting runtime's lifecycle:
    1. Builds the interception service (unless one was injected into app.state)
    2. Fires install and activate for the configured generation
    3. Stores service and handler in app.state
    4. Flushes pending cache writes and closes resources on shutdown

    An install failure is logged and the host keeps serving: the previous
    generation (if the store still holds the active one) stays in control
    and requests are forwarded to the origin.
    """
    configure_logging(settings.log_level)

    offline_cache = getattr(app.state, "offline_cache", None) or OfflineCache.create()
    app.state.offline_cache = offline_cache
    app.state.proxy_handler = ProxyHandler(offline_cache=offline_cache)

    try:
        generation = await offline_cache.start()
        logger.info("Offline cache active", generation=generation, origin=settings.origin)
    except OfflineCacheError as e:
        logger.error("Offline cache startup failed", code=e.code, error=e.message, details=e.details)

    try:
        yield
    finally:
        await offline_cache.close()
        del app.state.proxy_handler
        del app.state.offline_cache
        logger.info("Offline cache shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ProxyHandler, Depends(get_handler)]