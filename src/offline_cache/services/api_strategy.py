"""Network-only strategy for API requests."""

from offline_cache.entities import InterceptedRequest, ResponseSnapshot
from offline_cache.exceptions import TransportFailure
from offline_cache.logging import get_logger
from offline_cache.protocols import Fetcher

OFFLINE_API_MESSAGE = "You are currently offline. Please check your connection."


class ApiStrategy:
    """Forward API requests to the network and never cache them.

    When the network is unreachable the caller receives a synthetic JSON
    error body instead of an exception.
    """

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher
        self._logger = get_logger("offline_cache.api_strategy")

    async def handle(self, request: InterceptedRequest) -> ResponseSnapshot:
        try:
            return await self._fetcher.fetch(request)
        except TransportFailure as e:
            self._logger.info("API request offline", url=request.url, error=e.message)
            return ResponseSnapshot.json_response({"error": OFFLINE_API_MESSAGE})
