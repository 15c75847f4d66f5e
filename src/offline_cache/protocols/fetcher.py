"""Network fetch protocol.

Defines the interface for the network primitive the strategies use to reach
the origin. A fetch yields either a fully-read response snapshot or raises
:class:`~offline_cache.exceptions.TransportFailure`.

HTTP error statuses (404, 500...) are responses, not failures.
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import InterceptedRequest, ResponseSnapshot


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for network fetch implementations."""

    async def fetch(self, request: InterceptedRequest) -> ResponseSnapshot:
        """Send a request over the network.

        Args:
            request: The intercepted request to forward

        Returns:
            Snapshot of the network response

        Raises:
            TransportFailure: If the network could not be reached
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
