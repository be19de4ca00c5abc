# Analytics — Shopvid metrics aggregation service
"""
Fetches video-commerce analytics from the Shopable admin API, normalizes
the responses into canonical models and falls back to deterministic
mock data when the API is not configured or an all-stores call fails.
"""

from .errors import (
    AnalyticsError,
    MalformedResponseError,
    StoreNotFoundError,
    UnauthorizedError,
    UpstreamError,
)
from .service import AnalyticsService
from .sources import LiveMetricsSource, MetricsSource, MockMetricsSource, select_source

__all__ = [
    "AnalyticsService",
    "AnalyticsError",
    "MalformedResponseError",
    "StoreNotFoundError",
    "UnauthorizedError",
    "UpstreamError",
    "LiveMetricsSource",
    "MetricsSource",
    "MockMetricsSource",
    "select_source",
]
