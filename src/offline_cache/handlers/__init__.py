"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Strategies) -> (Store / Network)
"""

from .proxy_handler import ProxyHandler, render_snapshot

__all__ = [
    "ProxyHandler",
    "render_snapshot",
]
