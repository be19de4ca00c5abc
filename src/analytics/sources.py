"""Metric sources — where a bundle comes from.

``MockMetricsSource`` serves the static datasets; ``LiveMetricsSource``
calls the upstream API and applies the fallback policy:

- All-stores families (analytics summary, video source, widget usage,
  revenue) fall back to mock data on any failure except 401.
- Per-store by id falls back to mock data except on 401/404.
- Per-store by domain and the store directory never fall back: a silent
  substitution there would show the wrong store.

``select_source()`` picks the strategy from resolved settings on every
call; there is no global "mock mode" flag.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Awaitable, Callable, TypeVar
from urllib.parse import quote

import httpx

from ..common.config import ApiSettings, Settings
from ..common.models import (
    AllStoresMetrics,
    AnalyticsSummary,
    Period,
    PerStoreMetrics,
    RevenueBreakdown,
    Store,
    VideoSourceMetrics,
    WidgetUsageMetrics,
)
from . import mock_data
from .client import AnalyticsAPIClient
from .errors import (
    AnalyticsError,
    MalformedResponseError,
    StoreNotFoundError,
    UnauthorizedError,
    UpstreamError,
)
from .normalizer import (
    first_number,
    normalize_chart_data,
    normalize_per_store_by_domain,
    normalize_per_store_stats,
    normalize_revenue,
    normalize_stores,
    normalize_summary,
    normalize_top_videos,
    normalize_video_source,
    normalize_widget_usage,
    unwrap,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_settled(*aws: Awaitable):
    """Run sibling awaitables concurrently and wait for all to settle.

    Returns results in order; if any sibling failed, raises the first
    failure (in sibling order) once every sibling has finished.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def _as_date_str(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


class MetricsSource(ABC):
    """Caller-facing operations shared by the mock and live strategies."""

    @abstractmethod
    async def get_analytics(
        self, period: Period = Period.THIS_WEEK, shop_domain: str | None = None
    ) -> AnalyticsSummary:
        ...

    @abstractmethod
    async def get_video_source_metrics(self, shop_domain: str | None = None) -> VideoSourceMetrics:
        ...

    @abstractmethod
    async def get_widget_usage_metrics(self, shop_domain: str | None = None) -> WidgetUsageMetrics:
        ...

    @abstractmethod
    async def get_revenue_metrics(
        self, start_date: date | str, end_date: date | str, shop_domain: str | None = None
    ) -> RevenueBreakdown:
        ...

    @abstractmethod
    async def get_per_store_metrics_by_domain(self, domain: str) -> PerStoreMetrics:
        ...

    @abstractmethod
    async def get_per_store_metrics(
        self,
        store_id: str,
        period: Period = Period.THIS_WEEK,
        shop_domain: str | None = None,
    ) -> PerStoreMetrics:
        ...

    @abstractmethod
    async def get_stores(self) -> list[Store]:
        ...

    @abstractmethod
    async def search_stores(self, term: str) -> list[Store]:
        ...

    async def get_all_stores_metrics(self, shop_domain: str | None = None) -> AllStoresMetrics:
        """Video source and widget usage, fetched concurrently."""
        video_source, widget_usage = await gather_settled(
            self.get_video_source_metrics(shop_domain),
            self.get_widget_usage_metrics(shop_domain),
        )
        return AllStoresMetrics(video_source=video_source, widget_usage=widget_usage)

    async def get_all_stores_metrics_with_revenue(
        self, start_date: date | str, end_date: date | str, shop_domain: str | None = None
    ) -> AllStoresMetrics:
        """Video source, widget usage and revenue, fetched concurrently."""
        video_source, widget_usage, revenue = await gather_settled(
            self.get_video_source_metrics(shop_domain),
            self.get_widget_usage_metrics(shop_domain),
            self.get_revenue_metrics(start_date, end_date, shop_domain),
        )
        return AllStoresMetrics(
            video_source=video_source,
            widget_usage=widget_usage,
            revenue=revenue,
        )


class MockMetricsSource(MetricsSource):
    """Deterministic static datasets (no upstream configured)."""

    async def get_analytics(self, period=Period.THIS_WEEK, shop_domain=None):
        return mock_data.mock_analytics(Period(period))

    async def get_video_source_metrics(self, shop_domain=None):
        return mock_data.MOCK_VIDEO_SOURCE

    async def get_widget_usage_metrics(self, shop_domain=None):
        return mock_data.MOCK_WIDGET_USAGE

    async def get_revenue_metrics(self, start_date, end_date, shop_domain=None):
        return mock_data.MOCK_REVENUE

    async def get_all_stores_metrics(self, shop_domain=None):
        return mock_data.MOCK_ALL_STORES.model_copy(update={"revenue": None})

    async def get_all_stores_metrics_with_revenue(self, start_date, end_date, shop_domain=None):
        return mock_data.MOCK_ALL_STORES

    async def get_per_store_metrics_by_domain(self, domain):
        domain = domain.strip()
        store = mock_data.find_mock_store(domain=domain)
        return mock_data.mock_per_store_metrics(
            store.id if store else domain,
            mock_data.mock_store_name(domain=domain),
        )

    async def get_per_store_metrics(self, store_id, period=Period.THIS_WEEK, shop_domain=None):
        return mock_data.mock_per_store_metrics(store_id, mock_data.mock_store_name(store_id=store_id))

    async def get_stores(self):
        return list(mock_data.MOCK_STORES)

    async def search_stores(self, term):
        return mock_data.search_mock_stores(term)


class LiveMetricsSource(MetricsSource):
    """Upstream analytics API with the mock fallback policy."""

    def __init__(
        self,
        api: ApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
        fallback: MetricsSource | None = None,
    ) -> None:
        self.api = api
        self._transport = transport
        self._fallback = fallback or MockMetricsSource()

    def _client(self) -> AnalyticsAPIClient:
        return AnalyticsAPIClient(self.api, transport=self._transport)

    async def _recover(
        self,
        family: str,
        fetch: Callable[[], Awaitable[T]],
        fallback: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``fetch``; on any failure but 401, log and use ``fallback``."""
        try:
            return await fetch()
        except UnauthorizedError:
            logger.error("Unauthorized while fetching %s", family)
            raise
        except UpstreamError as exc:
            logger.warning("Failed to fetch %s, using mock data: %s", family, exc)
            return await fallback()

    # --- All stores ---

    async def get_analytics(self, period=Period.THIS_WEEK, shop_domain=None):
        period = Period(period)

        async def fetch() -> AnalyticsSummary:
            async with self._client() as client:
                payload = await client.get_json("analytics/videos/all-stores", shop_domain=shop_domain)
            if not isinstance(payload, dict):
                raise MalformedResponseError("Expected a JSON object for analytics")
            body = unwrap(payload)
            mock = mock_data.mock_analytics(period)
            # Upstream has no revenue KPI or time series here yet
            top_videos = normalize_top_videos(body, first_number(body, "totalViews"))
            return AnalyticsSummary(
                summary=normalize_summary(body, revenue=mock.summary.revenue),
                chart_data=normalize_chart_data(body) or mock.chart_data,
                top_videos=top_videos or mock.top_videos,
                period=period,
            )

        return await self._recover(
            "analytics", fetch, lambda: self._fallback.get_analytics(period, shop_domain)
        )

    async def get_video_source_metrics(self, shop_domain=None):
        async def fetch() -> VideoSourceMetrics:
            async with self._client() as client:
                payload = await client.get_json("analytics/videos/all-stores", shop_domain=shop_domain)
            return normalize_video_source(payload)

        return await self._recover(
            "video source metrics", fetch, lambda: self._fallback.get_video_source_metrics(shop_domain)
        )

    async def get_widget_usage_metrics(self, shop_domain=None):
        async def fetch() -> WidgetUsageMetrics:
            async with self._client() as client:
                payload = await client.get_json("analytics/widgets/all-stores", shop_domain=shop_domain)
            logger.debug("Widget usage response: %s", payload)
            return normalize_widget_usage(payload)

        return await self._recover(
            "widget usage metrics", fetch, lambda: self._fallback.get_widget_usage_metrics(shop_domain)
        )

    async def get_revenue_metrics(self, start_date, end_date, shop_domain=None):
        start, end = _as_date_str(start_date), _as_date_str(end_date)

        async def fetch() -> RevenueBreakdown:
            async with self._client() as client:
                payload = await client.get_json(
                    "analytics/stats",
                    params={"startDate": start, "endDate": end},
                    shop_domain=shop_domain,
                )
            return normalize_revenue(payload, start, end)

        return await self._recover(
            "revenue metrics",
            fetch,
            lambda: self._fallback.get_revenue_metrics(start, end, shop_domain),
        )

    # --- Per store ---

    async def get_per_store_metrics_by_domain(self, domain):
        domain = domain.strip()
        template = mock_data.mock_per_store_metrics(domain, domain)
        try:
            async with self._client() as client:
                widgets_payload, videos_payload = await gather_settled(
                    client.get_json(
                        "analytics/widgets/by-domain", shop_domain=domain, not_found_scope=domain
                    ),
                    client.get_json(
                        "analytics/videos/by-domain", shop_domain=domain, not_found_scope=domain
                    ),
                )
            return normalize_per_store_by_domain(domain, widgets_payload, videos_payload, template)
        except AnalyticsError as exc:
            logger.error("Failed to fetch per store metrics for %s: %s", domain, exc)
            raise

    async def get_per_store_metrics(self, store_id, period=Period.THIS_WEEK, shop_domain=None):
        fallback_name = mock_data.mock_store_name(store_id=store_id)
        start, end = Period(period).date_range()
        try:
            async with self._client() as client:
                payload = await client.get_json(
                    f"analytics/stats/shop/{quote(str(store_id), safe='')}",
                    params={"startDate": start.isoformat(), "endDate": end.isoformat()},
                    shop_domain=shop_domain,
                    not_found_scope=store_id,
                    scope_is_domain=False,
                )
            return normalize_per_store_stats(payload, store_id, fallback_name)
        except (UnauthorizedError, StoreNotFoundError) as exc:
            logger.error("Failed to fetch per store metrics for store %s: %s", store_id, exc)
            raise
        except UpstreamError as exc:
            logger.warning("Failed to fetch per store metrics for store %s, using mock data: %s", store_id, exc)
            return await self._fallback.get_per_store_metrics(store_id, period, shop_domain)

    # --- Store directory ---

    async def get_stores(self):
        try:
            async with self._client() as client:
                payload = await client.get_json("analytics/stores")
            return normalize_stores(payload)
        except AnalyticsError as exc:
            logger.error("Failed to fetch stores: %s", exc)
            raise

    async def search_stores(self, term):
        term = term.strip()
        if not term:
            return await self.get_stores()
        try:
            async with self._client() as client:
                payload = await client.get_json("analytics/stores", params={"search": term})
            return normalize_stores(payload)
        except AnalyticsError as exc:
            logger.error("Failed to search stores for %r: %s", term, exc)
            raise


def select_source(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> MetricsSource:
    """Mock strategy without a base URL, live strategy otherwise."""
    if settings.api.use_mock:
        logger.debug("Using mock analytics data (SHOPABLE_API_URL not set)")
        return MockMetricsSource()
    return LiveMetricsSource(settings.api, transport=transport)
