"""Tests for request classification."""

import pytest

from offline_cache.entities import InterceptedRequest
from offline_cache.services import Route, select_route


@pytest.mark.parametrize(
    "method, target, expected",
    [
        ("POST", "https://app.example.com/api/quotes", Route.BYPASS),
        ("PUT", "https://app.example.com/app.js", Route.BYPASS),
        ("HEAD", "https://app.example.com/", Route.BYPASS),
        ("GET", "chrome-extension://abcdef/script.js", Route.BYPASS),
        ("GET", "data:text/plain,hello", Route.BYPASS),
        ("GET", "https://app.example.com/api/quotes", Route.API),
        ("GET", "https://app.example.com/api", Route.ASSET),
        ("GET", "http://app.example.com/api/quotes?page=2", Route.API),
        ("get", "https://app.example.com/dashboard.js", Route.ASSET),
        ("GET", "https://app.example.com/apix/file.js", Route.ASSET),
        ("GET", "https://app.example.com/static/api/notes.txt", Route.ASSET),
        ("GET", "https://cdn.other.com/font.woff2", Route.ASSET),
    ],
)
def test_select_route(method, target, expected):
    request = InterceptedRequest(method=method, url=target)
    assert select_route(request, "/api/") is expected


def test_non_get_wins_over_api_prefix():
    request = InterceptedRequest(method="DELETE", url="https://app.example.com/api/quotes/1")
    assert select_route(request, "/api/") is Route.BYPASS


def test_custom_prefix():
    request = InterceptedRequest(method="GET", url="https://app.example.com/v2/quotes")
    assert select_route(request, "/v2/") is Route.API
    assert select_route(request, "/api/") is Route.ASSET
