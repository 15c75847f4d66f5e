"""Tests for settings validation."""

import pytest

from offline_cache.config import DEFAULT_SEED_URLS, Settings, _split_list


def test_defaults():
    config = Settings(
        cache_version="pricebetter-ai-v1",
        seed_urls=DEFAULT_SEED_URLS,
        seed_policy="strict",
        api_prefix="/api/",
        origin_url="http://localhost:5000",
        cache_backend="memory",
    )
    assert config.origin == "http://localhost:5000"
    assert "/index.html" in config.seed_urls


def test_origin_drops_path():
    assert Settings(origin_url="https://quotes.example.com/app/").origin == "https://quotes.example.com"


@pytest.mark.parametrize(
    "overrides",
    [
        {"cache_version": ""},
        {"api_prefix": "api/"},
        {"origin_url": "ftp://example.com"},
        {"seed_policy": "sometimes"},
        {"cache_backend": "sqlite"},
        {"fetch_timeout": 0},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        Settings(**overrides)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, ("/",)),
        ("", ()),
        ("/, /index.html ,,/manifest.json", ("/", "/index.html", "/manifest.json")),
    ],
)
def test_split_list(raw, expected):
    assert _split_list(raw, ("/",)) == expected
