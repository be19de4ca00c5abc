"""Deterministic mock datasets.

Served when no upstream base URL is configured, and as the fallback
when an all-stores fetch fails. Everything is built through the
canonical models, so derived fields obey the same invariants as live
data.
"""

from __future__ import annotations

from ..common.models import (
    AllStoresMetrics,
    AnalyticsSummary,
    ChartPoint,
    ConversionMetrics,
    CTAActionCount,
    MetricWithChange,
    MetricWithTimeSeries,
    Period,
    PerStoreMetrics,
    PerStoreWidgetUsage,
    RevenueBreakdown,
    RevenueMetrics,
    Store,
    SummaryMetrics,
    TimeSeriesPoint,
    VideoAnalytics,
    VideoSourceMetrics,
    WidgetTypeCount,
    WidgetUsageMetrics,
)
from .normalizer import engagement_rate

MOCK_WEEK = (
    "2024-12-09", "2024-12-10", "2024-12-11", "2024-12-12",
    "2024-12-13", "2024-12-14", "2024-12-15",
)


def _series(values: tuple[float, ...]) -> list[TimeSeriesPoint]:
    return [TimeSeriesPoint(date=day, value=value) for day, value in zip(MOCK_WEEK, values)]


# === Store directory ===

MOCK_STORES: tuple[Store, ...] = (
    Store(id="1", name="Fashion Hub", domain="fashion-hub.myshopify.com"),
    Store(id="2", name="Tech Galaxy", domain="tech-galaxy.myshopify.com"),
    Store(id="3", name="Home Essentials", domain="home-essentials.myshopify.com"),
    Store(id="4", name="Beauty Palace", domain="beauty-palace.myshopify.com"),
    Store(id="5", name="Sports Zone", domain="sports-zone.myshopify.com"),
)


def find_mock_store(store_id: str | None = None, domain: str | None = None) -> Store | None:
    """Look up a directory entry by id or exact domain."""
    for store in MOCK_STORES:
        if store_id is not None and store.id == store_id:
            return store
        if domain is not None and store.domain == domain.strip().lower():
            return store
    return None


def search_mock_stores(term: str) -> list[Store]:
    """Case-insensitive substring match over id, name and domain."""
    needle = term.strip().lower()
    if not needle:
        return list(MOCK_STORES)
    return [
        store for store in MOCK_STORES
        if needle in store.id.lower()
        or needle in store.name.lower()
        or needle in store.domain.lower()
    ]


def mock_store_name(store_id: str | None = None, domain: str | None = None) -> str:
    """Directory name for a store, else ``Store <id>`` or the domain."""
    store = find_mock_store(store_id=store_id, domain=domain)
    if store:
        return store.name
    return domain if domain else f"Store {store_id}"


# === Dashboard summary ===

_MOCK_TOTAL_VIEWS = 12580

_MOCK_VIDEOS = (
    ("1", "Product Demo Video", 4580, 1200, 340),
    ("2", "How-to Guide", 3200, 890, 220),
    ("3", "Customer Testimonial", 2450, 670, 180),
    ("4", "Behind the Scenes", 1890, 340, 98),
    ("5", "New Collection Reveal", 460, 140, 52),
)

MOCK_TOP_VIDEOS: tuple[VideoAnalytics, ...] = tuple(
    VideoAnalytics(
        video_id=video_id,
        title=title,
        views=views,
        likes=likes,
        shares=shares,
        engagement=engagement_rate(likes, shares, _MOCK_TOTAL_VIEWS),
    )
    for video_id, title, views, likes, shares in _MOCK_VIDEOS
)

MOCK_CHART_DATA: tuple[ChartPoint, ...] = tuple(
    ChartPoint(date=day, views=views, likes=likes, shares=shares)
    for day, (views, likes, shares) in zip(MOCK_WEEK, (
        (1200, 340, 89),
        (1850, 520, 145),
        (2100, 580, 167),
        (1680, 420, 98),
        (2450, 680, 189),
        (1800, 380, 112),
        (1500, 320, 90),
    ))
)

MOCK_SUMMARY = SummaryMetrics(
    total_views=MetricWithChange(value=_MOCK_TOTAL_VIEWS, previous_value=10200),
    total_likes=MetricWithChange(value=3240, previous_value=2800),
    total_shares=MetricWithChange(value=890, previous_value=720),
    engagement_rate=MetricWithChange(
        value=engagement_rate(3240, 890, _MOCK_TOTAL_VIEWS),
        previous_value=engagement_rate(2800, 720, 10200),
    ),
    revenue=MetricWithChange(value=4250, previous_value=3800),
)


def mock_analytics(period: Period = Period.THIS_WEEK) -> AnalyticsSummary:
    return AnalyticsSummary(
        summary=MOCK_SUMMARY,
        chart_data=list(MOCK_CHART_DATA),
        top_videos=list(MOCK_TOP_VIDEOS),
        period=period,
    )


# === Per store ===

MOCK_PER_STORE_VIDEO_SOURCE = VideoSourceMetrics(tiktok=150, instagram=120, upload=80)

MOCK_PER_STORE_WIDGET_USAGE = PerStoreWidgetUsage(
    widget_types=[
        WidgetTypeCount(type="Basic carousel", count=8),
        WidgetTypeCount(type="Highlighted carousel", count=5),
        WidgetTypeCount(type="Grid", count=7),
        WidgetTypeCount(type="Float", count=3),
        WidgetTypeCount(type="Story", count=2),
    ],
    avg_widgets_per_merchant=25.0,
    avg_active_widgets_per_merchant=20.0,
    cta_actions=[
        CTAActionCount(action="Open product detail page", desktop=45, mobile=35),
        CTAActionCount(action="Show product detail within the modal", desktop=25, mobile=20),
        CTAActionCount(action="Add to cart (no page change)", desktop=30, mobile=25),
        CTAActionCount(action="Add to cart and open cart page", desktop=15, mobile=12),
    ],
    product_pages_count=15,
    other_pages_count=10,
)

MOCK_PER_STORE_CONVERSION = ConversionMetrics(
    orders_from_shopvid=MetricWithTimeSeries(
        value=15.5, previous_value=12.3,
        time_series=_series((12.0, 13.5, 14.8, 15.2, 15.8, 15.5, 15.5)),
    ),
    atc_rate_mobile=MetricWithTimeSeries(
        value=8.5, previous_value=7.2,
        time_series=_series((7.0, 8.0, 8.5, 8.3, 8.8, 8.5, 8.5)),
    ),
    atc_rate_desktop=MetricWithTimeSeries(
        value=6.2, previous_value=5.8,
        time_series=_series((5.5, 6.0, 6.2, 6.1, 6.3, 6.2, 6.2)),
    ),
    cvr=MetricWithTimeSeries(
        value=3.5, previous_value=2.8,
        time_series=_series((2.5, 3.0, 3.2, 3.4, 3.6, 3.5, 3.5)),
    ),
)

MOCK_PER_STORE_REVENUE = RevenueBreakdown(
    in_video=RevenueMetrics(
        value=4500, previous_value=3800,
        time_series=_series((400, 650, 750, 600, 900, 700, 500)),
    ),
    post_video=RevenueMetrics(
        value=3200, previous_value=2800,
        time_series=_series((300, 450, 550, 400, 650, 500, 350)),
    ),
)


def mock_per_store_metrics(store_id: str, store_name: str) -> PerStoreMetrics:
    return PerStoreMetrics(
        store_id=store_id,
        store_name=store_name,
        video_source=MOCK_PER_STORE_VIDEO_SOURCE,
        widget_usage=MOCK_PER_STORE_WIDGET_USAGE,
        conversion=MOCK_PER_STORE_CONVERSION,
        revenue=MOCK_PER_STORE_REVENUE,
    )


# === All stores ===

MOCK_VIDEO_SOURCE = VideoSourceMetrics(tiktok=450, instagram=350, upload=200)

MOCK_WIDGET_USAGE = WidgetUsageMetrics(
    widget_types=[
        WidgetTypeCount(type="Basic carousel", count=120),
        WidgetTypeCount(type="Highlighted carousel", count=85),
        WidgetTypeCount(type="Grid", count=200),
        WidgetTypeCount(type="Float", count=150),
        WidgetTypeCount(type="Story", count=95),
    ],
    avg_widgets_per_merchant=12.5,
    avg_active_widgets_per_merchant=8.2,
    cta_actions=[
        CTAActionCount(action="Open product detail page", desktop=180, mobile=140),
        CTAActionCount(action="Show product detail within the modal", desktop=100, mobile=80),
        CTAActionCount(action="Add to cart (no page change)", desktop=140, mobile=110),
        CTAActionCount(action="Add to cart and open cart page", desktop=85, mobile=65),
    ],
)

MOCK_REVENUE = RevenueBreakdown(
    in_video=RevenueMetrics(
        value=12500, previous_value=10200,
        start_date=MOCK_WEEK[0], end_date=MOCK_WEEK[-1],
        time_series=_series((1200, 1850, 2100, 1680, 2450, 1800, 1500)),
    ),
    post_video=RevenueMetrics(
        value=8500, previous_value=7200,
        start_date=MOCK_WEEK[0], end_date=MOCK_WEEK[-1],
        time_series=_series((800, 1200, 1500, 1100, 1800, 1300, 1000)),
    ),
)

MOCK_ALL_STORES = AllStoresMetrics(
    video_source=MOCK_VIDEO_SOURCE,
    widget_usage=MOCK_WIDGET_USAGE,
    revenue=MOCK_REVENUE,
)
