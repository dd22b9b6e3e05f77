"""Shared fixtures for the scope scraper test suite."""

import logging

import httpx
import pytest

from scope_scraper.config.settings import get_settings
from scope_scraper.logging.audit import LOGGER_NAME
from scope_scraper.security.credentials import Credentials


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo setup_logging() so caplog sees records in every test."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture(autouse=True)
def clean_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(SCRAPER_OUTPUT_PATH="out.jsonl", SCRAPER_FAIL_FAST="false")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="hacker", key="s3cret-token")


@pytest.fixture
def handles_file(tmp_path):
    """Input file with the two-program scenario."""
    path = tmp_path / "handles.txt"
    path.write_text("acme\nglobex\n", encoding="utf-8")
    return str(path)


@pytest.fixture
def scope_bodies() -> dict[str, bytes]:
    return {
        "acme": b'{"id":1}',
        "globex": b'{"id":2}',
    }


@pytest.fixture
def api_transport(scope_bodies):
    """httpx.MockTransport serving scope_bodies by program handle.

    Every request seen is appended to `transport.requests`.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        # /v1/hackers/programs/{handle}/structured_scopes
        handle = request.url.path.split("/")[4]
        if handle not in scope_bodies:
            return httpx.Response(404, content=b'{"errors":[{"status":404}]}')
        return httpx.Response(200, content=scope_bodies[handle])

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport
