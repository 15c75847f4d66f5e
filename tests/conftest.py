"""Shared test fixtures for the offline cache.

Provides a scripted network fetcher and pre-wired store, lifecycle and
service instances so that tests never touch the real network.
"""

import pytest

from offline_cache.entities import InterceptedRequest, ResponseSnapshot, ResponseType
from offline_cache.exceptions import TransportFailure
from offline_cache.repositories import InMemoryCacheStore
from offline_cache.services import LifecycleManager, OfflineCache

ORIGIN = "https://app.example.com"
VERSION = "pricebetter-ai-v2"
SEED_PATHS = (
    "/",
    "/index.html",
    "/manifest.json",
    "/icons/icon-192x192.png",
)


def url(path: str) -> str:
    return f"{ORIGIN}{path}"


def page(target: str, body: str, content_type: str = "text/html", **kwargs) -> ResponseSnapshot:
    """Build a same-origin 200 snapshot for ``target``."""
    return ResponseSnapshot(
        status=kwargs.pop("status", 200),
        headers=(("Content-Type", content_type),),
        body=body.encode(),
        url=target,
        response_type=kwargs.pop("response_type", ResponseType.BASIC),
        redirected=kwargs.pop("redirected", False),
    )


def get(path: str, accept: str | None = None, client_id: str | None = None) -> InterceptedRequest:
    headers = (("Accept", accept),) if accept is not None else ()
    return InterceptedRequest(method="GET", url=url(path), headers=headers, client_id=client_id)


class ScriptedFetcher:
    """Fetcher double answering from a URL → outcome table.

    Outcomes are snapshots (returned) or exceptions (raised). Unknown URLs
    get a 404. Setting ``offline`` makes every fetch fail at transport level.
    """

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = dict(responses or {})
        self.offline = False
        self.calls: list[InterceptedRequest] = []
        self.closed = False

    async def fetch(self, request: InterceptedRequest) -> ResponseSnapshot:
        self.calls.append(request)
        if self.offline:
            raise TransportFailure("ConnectError: connection refused", {"url": request.url})
        outcome = self.responses.get(request.url)
        if outcome is None:
            return ResponseSnapshot(status=404, body=b"not found", url=request.url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


def seed_responses() -> dict[str, ResponseSnapshot]:
    return {
        url("/"): page(url("/"), "<html>shell</html>"),
        url("/index.html"): page(url("/index.html"), "<html>index</html>"),
        url("/manifest.json"): page(url("/manifest.json"), '{"name": "PriceBetter"}', "application/json"),
        url("/icons/icon-192x192.png"): page(url("/icons/icon-192x192.png"), "png", "image/png"),
    }


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def fetcher() -> ScriptedFetcher:
    return ScriptedFetcher(seed_responses())


@pytest.fixture
def lifecycle(store, fetcher) -> LifecycleManager:
    return LifecycleManager(
        store=store,
        fetcher=fetcher,
        version=VERSION,
        seed_urls=SEED_PATHS,
        origin=ORIGIN,
        seed_policy="strict",
        root_document="/",
    )


@pytest.fixture
def offline_cache(lifecycle) -> OfflineCache:
    return OfflineCache(lifecycle=lifecycle, api_prefix="/api/")
