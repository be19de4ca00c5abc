"""Canonical Pydantic data models for the Shopvid metrics service.

Every upstream response and every mock dataset is turned into these
models before it reaches a caller. Attributes are snake_case; camelCase
aliases match both the upstream JSON and the dashboard's JSON contract.
"""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


# === Enums ===

class Period(str, Enum):
    """Named relative time window used to bucket time-series data."""
    THIS_WEEK = "THIS_WEEK"
    LAST_WEEK = "LAST_WEEK"
    THIS_MONTH = "THIS_MONTH"
    LAST_MONTH = "LAST_MONTH"

    def date_range(self, today: date | None = None) -> tuple[date, date]:
        """Inclusive (start, end) window. Weeks start on Monday."""
        today = today or date.today()
        week_start = today - timedelta(days=today.weekday())
        month_start = today.replace(day=1)

        if self is Period.THIS_WEEK:
            return week_start, today
        if self is Period.LAST_WEEK:
            start = week_start - timedelta(days=7)
            return start, start + timedelta(days=6)
        if self is Period.THIS_MONTH:
            return month_start, today

        last_month_end = month_start - timedelta(days=1)
        return last_month_end.replace(day=1), last_month_end


class CanonicalModel(BaseModel):
    """Immutable value object with camelCase aliases."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }


# === Trackable KPIs ===

class MetricWithChange(CanonicalModel):
    """A KPI with its previous-period value and the derived delta."""
    value: float = 0.0
    previous_value: float = 0.0

    @computed_field(alias="change")
    @property
    def change(self) -> float:
        return self.value - self.previous_value

    @computed_field(alias="changePercent")
    @property
    def change_percent(self) -> float:
        if self.previous_value > 0:
            return self.change / self.previous_value * 100
        return 0.0


class TimeSeriesPoint(CanonicalModel):
    """One period bucket of a time series."""
    date: str
    value: float


class MetricWithTimeSeries(MetricWithChange):
    """KPI plus its chronological series for chart rendering."""
    time_series: list[TimeSeriesPoint] = Field(default_factory=list)


class RevenueMetrics(MetricWithTimeSeries):
    """Revenue series, optionally tagged with the queried date range."""
    start_date: str | None = None
    end_date: str | None = None


class RevenueBreakdown(CanonicalModel):
    in_video: RevenueMetrics
    post_video: RevenueMetrics


class ConversionMetrics(CanonicalModel):
    """Per-store conversion funnel series."""
    orders_from_shopvid: MetricWithTimeSeries
    atc_rate_mobile: MetricWithTimeSeries
    atc_rate_desktop: MetricWithTimeSeries
    cvr: MetricWithTimeSeries


# === Video source & widget usage ===

class VideoSourceMetrics(CanonicalModel):
    """Video counts by origin platform.

    ``total`` is the sum of the parts unless upstream supplies one.
    """
    tiktok: int = 0
    instagram: int = 0
    upload: int = 0
    total: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_total(cls, data):
        if isinstance(data, dict) and data.get("total") is None:
            parts = (data.get(key) or 0 for key in ("tiktok", "instagram", "upload"))
            data = {**data, "total": sum(parts)}
        return data


class WidgetTypeCount(CanonicalModel):
    type: str
    count: int


class CTAActionCount(CanonicalModel):
    """Call-to-action tally split by device."""
    action: str
    desktop: int = 0
    mobile: int = 0

    @computed_field(alias="count")
    @property
    def count(self) -> int:
        return self.desktop + self.mobile


class WidgetUsageMetrics(CanonicalModel):
    """Widget usage across all stores (averages divide by merchant count)."""
    widget_types: list[WidgetTypeCount] = Field(default_factory=list)
    avg_widgets_per_merchant: float = 0.0
    avg_active_widgets_per_merchant: float = 0.0
    cta_actions: list[CTAActionCount] = Field(default_factory=list)
    product_pages_count: int | None = None
    other_pages_count: int | None = None


class PerStoreWidgetUsage(WidgetUsageMetrics):
    """Widget usage of a single store; the merchant divisor is always 1."""


# === Summary & videos ===

class SummaryMetrics(CanonicalModel):
    total_views: MetricWithChange
    total_likes: MetricWithChange
    total_shares: MetricWithChange
    engagement_rate: MetricWithChange
    revenue: MetricWithChange


class ChartPoint(CanonicalModel):
    date: str
    views: int = 0
    likes: int = 0
    shares: int = 0


class VideoAnalytics(CanonicalModel):
    """Top-video row; engagement is relative to the scope's total views."""
    video_id: str
    title: str
    views: int = 0
    likes: int = 0
    shares: int = 0
    engagement: float = 0.0
    thumbnail: str | None = None


TOP_VIDEOS_LIMIT = 5


class AnalyticsSummary(CanonicalModel):
    """Dashboard overview bundle for one period."""
    summary: SummaryMetrics
    chart_data: list[ChartPoint] = Field(default_factory=list)
    top_videos: list[VideoAnalytics] = Field(default_factory=list, max_length=TOP_VIDEOS_LIMIT)
    period: Period = Period.THIS_WEEK


# === Stores & bundles ===

class Store(CanonicalModel):
    id: str
    name: str
    domain: str


class PerStoreMetrics(CanonicalModel):
    """Everything the per-store page renders for one store."""
    store_id: str
    store_name: str
    summary: SummaryMetrics | None = None
    video_source: VideoSourceMetrics
    widget_usage: PerStoreWidgetUsage
    conversion: ConversionMetrics
    revenue: RevenueBreakdown
    top_videos: list[VideoAnalytics] = Field(default_factory=list, max_length=TOP_VIDEOS_LIMIT)


class AllStoresMetrics(CanonicalModel):
    video_source: VideoSourceMetrics
    widget_usage: WidgetUsageMetrics
    revenue: RevenueBreakdown | None = None
