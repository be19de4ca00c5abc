"""Shared test fixtures for the Shopvid metrics service."""

import sys
from pathlib import Path

import httpx
import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import ApiSettings, Settings
from src.analytics.service import AnalyticsService

BASE_URL = "https://api.shopable.test"
ADMIN_KEY = "test-admin-key"


class UpstreamStub:
    """Fake Shopable admin API served through ``httpx.MockTransport``.

    Routes are keyed by URL path; unrouted paths answer 404. Every
    request is recorded for header/query assertions.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, object, Exception | None]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, endpoint: str, json=None, status: int = 200, exc: Exception | None = None):
        self.routes["/admin/api/v1/" + endpoint] = (status, json, exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        status, body, exc = self.routes[request.url.path]
        if exc is not None:
            raise exc
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def mock_settings() -> Settings:
    """Settings with no upstream configured (mock mode)."""
    return Settings(api=ApiSettings(base_url=None))


@pytest.fixture
def live_settings() -> Settings:
    """Settings pointing at the stubbed upstream."""
    return Settings(api=ApiSettings(base_url=BASE_URL, admin_api_key=ADMIN_KEY))


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def mock_service(mock_settings) -> AnalyticsService:
    return AnalyticsService(mock_settings)


@pytest.fixture
def live_service(live_settings, upstream) -> AnalyticsService:
    return AnalyticsService(live_settings, transport=upstream.transport)
