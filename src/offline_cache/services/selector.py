"""Request classification."""

from enum import Enum

from offline_cache.entities import InterceptedRequest


class Route(str, Enum):
    """Strategy a request is dispatched to."""

    BYPASS = "bypass"
    API = "api"
    ASSET = "asset"


def select_route(request: InterceptedRequest, api_prefix: str) -> Route:
    """Classify a request. Deterministic and free of side effects.

    Rules, first match wins:
    1. Non-GET methods bypass the cache.
    2. Non-http(s) schemes (extensions, data:, blob:) bypass the cache.
    3. Paths under the API prefix use the API strategy.
    4. Everything else uses the asset strategy.

    Args:
        request: The intercepted request
        api_prefix: Path prefix identifying API calls, e.g. ``/api/``

    Returns:
        The selected route
    """
    if request.method.upper() != "GET":
        return Route.BYPASS

    if request.scheme not in ("http", "https"):
        return Route.BYPASS

    if request.path.startswith(api_prefix):
        return Route.API

    return Route.ASSET
