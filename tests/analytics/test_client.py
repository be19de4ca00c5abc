"""Tests for the upstream analytics HTTP client (mocked transport)."""

import asyncio

import httpx
import pytest

from src.common.config import ApiSettings
from src.analytics.client import AnalyticsAPIClient
from src.analytics.errors import (
    MalformedResponseError,
    StoreNotFoundError,
    UnauthorizedError,
    UpstreamError,
)

from conftest import ADMIN_KEY, BASE_URL


def fetch(upstream, endpoint, **kwargs):
    async def run():
        api = ApiSettings(base_url=BASE_URL + "/", admin_api_key=ADMIN_KEY)
        async with AnalyticsAPIClient(api, transport=upstream.transport) as client:
            return await client.get_json(endpoint, **kwargs)

    return asyncio.run(run())


class TestAnalyticsAPIClient:
    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            AnalyticsAPIClient(ApiSettings())

    def test_sends_admin_headers(self, upstream):
        upstream.add("analytics/stores", json={"data": []})
        assert fetch(upstream, "analytics/stores") == {"data": []}

        request = upstream.requests[0]
        assert str(request.url) == BASE_URL + "/admin/api/v1/analytics/stores"
        assert request.headers["X-Admin-Api-Key"] == ADMIN_KEY
        assert request.headers["Content-Type"] == "application/json"
        assert "X-Shop-Domain" not in request.headers

    def test_shop_domain_and_params(self, upstream):
        upstream.add("analytics/stats", json={})
        fetch(
            upstream,
            "analytics/stats",
            params={"startDate": "2025-01-06", "endDate": "2025-01-12"},
            shop_domain="fashion-hub.myshopify.com",
        )

        request = upstream.requests[0]
        assert request.headers["X-Shop-Domain"] == "fashion-hub.myshopify.com"
        assert request.url.params["startDate"] == "2025-01-06"
        assert request.url.params["endDate"] == "2025-01-12"

    def test_401_is_unauthorized(self, upstream):
        upstream.add("analytics/stores", json={}, status=401)
        with pytest.raises(UnauthorizedError, match="Unauthorized: Invalid API key"):
            fetch(upstream, "analytics/stores")

    def test_scoped_404_is_store_not_found(self, upstream):
        with pytest.raises(StoreNotFoundError) as exc_info:
            fetch(upstream, "analytics/widgets/by-domain", not_found_scope="nope.myshopify.com")
        assert str(exc_info.value) == "Store not found for domain: nope.myshopify.com"
        assert exc_info.value.scope == "nope.myshopify.com"

    def test_scoped_404_by_id(self, upstream):
        with pytest.raises(StoreNotFoundError, match="Store not found: 42"):
            fetch(upstream, "analytics/stats/shop/42", not_found_scope="42", scope_is_domain=False)

    def test_unscoped_404_is_upstream_error(self, upstream):
        with pytest.raises(UpstreamError) as exc_info:
            fetch(upstream, "analytics/missing")
        assert not isinstance(exc_info.value, StoreNotFoundError)
        assert exc_info.value.status_code == 404

    def test_500_is_upstream_error(self, upstream):
        upstream.add("analytics/stores", json={"error": "boom"}, status=500)
        with pytest.raises(UpstreamError, match="500") as exc_info:
            fetch(upstream, "analytics/stores")
        assert exc_info.value.status_code == 500

    def test_network_failure_is_upstream_error(self, upstream):
        upstream.add("analytics/stores", exc=httpx.ConnectError("connection refused"))
        with pytest.raises(UpstreamError) as exc_info:
            fetch(upstream, "analytics/stores")
        assert exc_info.value.status_code is None

    def test_non_json_is_malformed(self, upstream):
        upstream.add("analytics/stores", json="<html>maintenance</html>")
        with pytest.raises(MalformedResponseError):
            fetch(upstream, "analytics/stores")
