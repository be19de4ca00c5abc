"""Analytics Service — canonical metric bundles for the dashboard.

Usage:
    service = AnalyticsService()
    summary = await service.get_analytics(Period.LAST_WEEK)
    store = await service.get_per_store_metrics_by_domain("fashion-hub.myshopify.com")
"""

from __future__ import annotations

from datetime import date

import httpx

from src.common.config import Settings
from src.common.logging import setup_logging
from src.common.models import (
    AllStoresMetrics,
    AnalyticsSummary,
    Period,
    PerStoreMetrics,
    RevenueBreakdown,
    Store,
    VideoSourceMetrics,
    WidgetUsageMetrics,
)

from .sources import MetricsSource, select_source

logger = setup_logging(module_name="analytics_service")


class AnalyticsService:
    """Stateless facade over the mock/live metric sources.

    The source is selected from ``settings`` on every call, so swapping
    settings (or passing a test transport) switches strategy without
    any module-level state.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            settings: Resolved settings. Defaults to Settings.load().
            transport: Optional httpx transport (tests, proxies).
        """
        self.settings = settings or Settings.load()
        self._transport = transport
        setup_logging(self.settings.log_level, module_name="analytics_service")
        logger.info(
            "Analytics service using %s data",
            "mock" if self.uses_mock_data else "live",
        )

    @property
    def uses_mock_data(self) -> bool:
        return self.settings.api.use_mock

    def source(self) -> MetricsSource:
        return select_source(self.settings, transport=self._transport)

    # --- All stores ---

    async def get_analytics(
        self, period: Period | str = Period.THIS_WEEK, shop_domain: str | None = None
    ) -> AnalyticsSummary:
        """Dashboard overview: five KPIs, chart series and top videos."""
        return await self.source().get_analytics(Period(period), shop_domain)

    async def get_all_stores_metrics(self) -> AllStoresMetrics:
        return await self.source().get_all_stores_metrics()

    async def get_all_stores_metrics_with_revenue(
        self, start_date: date | str, end_date: date | str
    ) -> AllStoresMetrics:
        return await self.source().get_all_stores_metrics_with_revenue(start_date, end_date)

    async def get_video_source_metrics(self) -> VideoSourceMetrics:
        return await self.source().get_video_source_metrics()

    async def get_widget_usage_metrics(self) -> WidgetUsageMetrics:
        return await self.source().get_widget_usage_metrics()

    async def get_revenue_metrics(self, start_date: date | str, end_date: date | str) -> RevenueBreakdown:
        """In-video and post-video revenue for an explicit date range."""
        return await self.source().get_revenue_metrics(start_date, end_date)

    # --- Per store ---

    async def get_per_store_metrics_by_domain(self, domain: str) -> PerStoreMetrics:
        """Per-store bundle for a shop domain.

        Raises:
            ValueError: Blank domain.
            StoreNotFoundError: Upstream has no store for the domain.
            UnauthorizedError: Admin API key rejected.
            UpstreamError: Any other failure (never replaced by mock data).
        """
        if not domain.strip():
            raise ValueError("Please enter a domain")
        return await self.source().get_per_store_metrics_by_domain(domain.strip())

    async def get_per_store_metrics(
        self,
        store_id: str,
        period: Period | str = Period.THIS_WEEK,
        shop_domain: str | None = None,
    ) -> PerStoreMetrics:
        return await self.source().get_per_store_metrics(store_id, Period(period), shop_domain)

    # --- Store directory ---

    async def get_stores(self) -> list[Store]:
        return await self.source().get_stores()

    async def search_stores(self, term: str) -> list[Store]:
        """Stores whose id, name or domain match ``term`` (blank → all)."""
        return await self.source().search_stores(term)
