"""Response normalization — upstream JSON → canonical models.

Upstream payloads drift: fields are optionally wrapped in ``data``, use
synonyms (``import`` vs ``upload``, several merchant-count names) and
omit zero values. Each metric family has one function here so the rest
of the service only ever sees the canonical models.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import ValidationError

from ..common.models import (
    TOP_VIDEOS_LIMIT,
    ChartPoint,
    ConversionMetrics,
    CTAActionCount,
    MetricWithChange,
    PerStoreMetrics,
    PerStoreWidgetUsage,
    RevenueBreakdown,
    Store,
    SummaryMetrics,
    TimeSeriesPoint,
    VideoAnalytics,
    VideoSourceMetrics,
    WidgetTypeCount,
    WidgetUsageMetrics,
)
from .errors import MalformedResponseError

# Layout key → display label, in dashboard order
LAYOUT_LABELS = {
    "basic_carousel": "Basic carousel",
    "highlighted_carousel": "Highlighted carousel",
    "grid": "Grid",
    "float": "Float",
    "story": "Story",
    "list": "List",
}

# CTA action id → display label (unknown ids pass through)
CTA_ACTION_LABELS = {
    "product-page": "Open product detail page",
    "product-modal": "Show product detail within the modal",
    "add-to-cart": "Add to cart (no page change)",
    "cart-page": "Add to cart and open cart page",
}

MERCHANT_COUNT_KEYS = ("totalActiveMerchants", "activeMerchants", "merchantCount")
PER_STORE_REQUIRED_KEYS = ("videoSource", "conversion", "revenue")


# --- Helpers ---

def unwrap(payload: Any) -> Any:
    """Return ``payload["data"]`` when the response uses a data envelope."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


def first_number(source: dict, *keys: str, default: float = 0) -> float:
    """First non-zero numeric value among synonym keys."""
    for key in keys:
        value = source.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value:
            return value
    return default


def engagement_rate(likes: float, shares: float, views: float) -> float:
    """(likes + shares) / views × 100, or 0 without views."""
    if views > 0:
        return (likes + shares) / views * 100
    return 0.0


def _require_dict(payload: Any, family: str) -> dict:
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object for {family}")
    return payload


def _validate(model, data: Any, family: str):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponseError(f"Invalid {family} response: {exc}") from exc


# --- Video source ---

def video_source_from_counts(counts: dict) -> VideoSourceMetrics:
    """Upstream ``platformCounts`` (``import`` means upload) → VideoSourceMetrics."""
    return _validate(VideoSourceMetrics, {
        "tiktok": int(first_number(counts, "tiktok")),
        "instagram": int(first_number(counts, "instagram")),
        "upload": int(first_number(counts, "import", "upload")),
        "total": counts.get("total"),
    }, "video source")


def normalize_video_source(payload: Any) -> VideoSourceMetrics:
    """Platform counts → VideoSourceMetrics.

    Accepts ``{platformCounts: {tiktok, instagram, import}}`` (optionally
    under ``data``) or an already-canonical ``videoSource`` object.
    """
    body = _require_dict(payload, "video source")
    inner = unwrap(body)
    counts = body.get("platformCounts")
    if not isinstance(counts, dict):
        counts = inner.get("platformCounts")

    if isinstance(counts, dict):
        return video_source_from_counts(counts)

    canonical = inner.get("videoSource", inner)
    if not isinstance(canonical, dict) or not any(
        key in canonical for key in ("tiktok", "instagram", "upload", "total")
    ):
        raise MalformedResponseError("Video source response has no platform counts")
    return _validate(VideoSourceMetrics, canonical, "video source")


# --- Widget usage ---

def normalize_widget_types(layout_breakdown: dict | None) -> list[WidgetTypeCount]:
    """Layout breakdown map → ordered widget-type tallies with count > 0."""
    layout_breakdown = layout_breakdown or {}
    return [
        WidgetTypeCount(type=label, count=count)
        for key, label in LAYOUT_LABELS.items()
        if (count := int(first_number(layout_breakdown, key))) > 0
    ]


def normalize_cta_actions(cta_actions: dict | None) -> list[CTAActionCount]:
    """Desktop/mobile CTA maps → one tally per action with a non-zero total."""
    cta_actions = cta_actions or {}
    desktop = cta_actions.get("desktop") or {}
    mobile = cta_actions.get("mobile") or {}

    action_ids = list(dict.fromkeys([*desktop, *mobile]))
    result = []
    for action_id in action_ids:
        entry = CTAActionCount(
            action=CTA_ACTION_LABELS.get(action_id, action_id),
            desktop=int(first_number(desktop, action_id)),
            mobile=int(first_number(mobile, action_id)),
        )
        if entry.count > 0:
            result.append(entry)
    return result


def normalize_widget_usage(payload: Any) -> WidgetUsageMetrics:
    """All-stores widget payload → WidgetUsageMetrics.

    Averages divide by the upstream merchant count (default 1).
    """
    body = unwrap(_require_dict(payload, "widget usage"))

    if "layoutBreakdown" not in body:
        canonical = body.get("widgetUsage") or (body if "widgetTypes" in body else None)
        if not isinstance(canonical, dict):
            raise MalformedResponseError("Widget usage response has no layoutBreakdown")
        return _validate(WidgetUsageMetrics, canonical, "widget usage")

    merchants = first_number(body, *MERCHANT_COUNT_KEYS, default=1)
    return WidgetUsageMetrics(
        widget_types=normalize_widget_types(body.get("layoutBreakdown")),
        avg_widgets_per_merchant=first_number(body, "totalWidgets") / merchants,
        avg_active_widgets_per_merchant=first_number(body, "activeWidgets") / merchants,
        cta_actions=normalize_cta_actions(body.get("ctaActions")),
        product_pages_count=int(first_number(body, "productPagesCount")),
        other_pages_count=int(first_number(body, "otherPagesCount")),
    )


def normalize_per_store_widget_usage(body: dict) -> PerStoreWidgetUsage:
    """Single-store widget payload → PerStoreWidgetUsage (divisor 1)."""
    total_widgets = first_number(body, "totalWidgets", "activeWidgets")
    active_widgets = first_number(body, "activeWidgets", default=total_widgets)
    return _validate(PerStoreWidgetUsage, {
        "widget_types": normalize_widget_types(body.get("layoutBreakdown")),
        "avg_widgets_per_merchant": total_widgets,
        "avg_active_widgets_per_merchant": active_widgets,
        "cta_actions": normalize_cta_actions(body.get("ctaActions")),
        "product_pages_count": int(first_number(body, "productPagesCount")),
        "other_pages_count": int(first_number(body, "otherPagesCount")),
    }, "per store widget usage")


# --- Time series & revenue ---

def normalize_time_series(raw: Any) -> list[TimeSeriesPoint]:
    """``[{date|x, value|y}]`` → points; malformed items are dropped."""
    if not isinstance(raw, list):
        return []
    points = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        point_date = item.get("date") or item.get("x")
        value = item.get("value")
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            value = item.get("y")
        if point_date and isinstance(value, (int, float)) and not isinstance(value, bool):
            points.append(TimeSeriesPoint(date=str(point_date), value=value))
    return points


def pick_time_series(sources: Iterable[dict], key: str, fallback: list[TimeSeriesPoint]) -> list[TimeSeriesPoint]:
    """First non-empty upstream series under ``key``, else the fallback."""
    for source in sources:
        points = normalize_time_series(source.get(key))
        if points:
            return points
    return list(fallback)


def normalize_revenue(payload: Any, start_date: str, end_date: str) -> RevenueBreakdown:
    """Stats payload → revenue breakdown tagged with the queried range."""
    body = unwrap(_require_dict(payload, "revenue"))
    revenue = body.get("revenue", body)
    if not isinstance(revenue, dict) or not all(k in revenue for k in ("inVideo", "postVideo")):
        raise MalformedResponseError("Revenue response has no inVideo/postVideo series")

    tagged = {
        key: {**(revenue[key] or {}), "startDate": start_date, "endDate": end_date}
        for key in ("inVideo", "postVideo")
    }
    return _validate(RevenueBreakdown, tagged, "revenue")


# --- Summary & top videos ---

def normalize_summary(body: dict, revenue: MetricWithChange) -> SummaryMetrics:
    """Totals → five KPIs.

    Previous-period values come from upstream synonyms when present;
    otherwise they equal the current value, so the delta reads 0 until
    upstream provides historical comparison data.
    """
    views = first_number(body, "totalViews")
    likes = first_number(body, "totalLikes")
    shares = first_number(body, "totalShares")
    rate = engagement_rate(likes, shares, views)

    return SummaryMetrics(
        total_views=MetricWithChange(
            value=views,
            previous_value=first_number(body, "previousViews", "totalViewsPrevious", default=views),
        ),
        total_likes=MetricWithChange(
            value=likes,
            previous_value=first_number(body, "previousLikes", "totalLikesPrevious", default=likes),
        ),
        total_shares=MetricWithChange(
            value=shares,
            previous_value=first_number(body, "previousShares", "totalSharesPrevious", default=shares),
        ),
        engagement_rate=MetricWithChange(
            value=rate,
            previous_value=first_number(body, "previousEngagementRate", default=rate),
        ),
        revenue=revenue,
    )


def normalize_top_videos(body: dict, total_views: float, limit: int = TOP_VIDEOS_LIMIT) -> list[VideoAnalytics]:
    """``topVideos.byViews`` → at most ``limit`` rows in upstream order.

    Engagement uses the overall total views as denominator so entries
    are comparable across the scope.
    """
    top = body.get("topVideos")
    if isinstance(top, dict):
        top = top.get("byViews")
    if not isinstance(top, list):
        return []

    videos = []
    for raw in top[:limit]:
        if not isinstance(raw, dict):
            continue
        video_id = str(raw.get("videoId") or raw.get("id") or "")
        likes = first_number(raw, "likes")
        shares = first_number(raw, "shares")
        videos.append(_validate(VideoAnalytics, {
            "video_id": video_id,
            "title": raw.get("title") or f"Video {video_id[:8] or 'Unknown'}",
            "views": int(first_number(raw, "views")),
            "likes": int(likes),
            "shares": int(shares),
            "engagement": engagement_rate(likes, shares, total_views),
            "thumbnail": raw.get("thumbnail"),
        }, "top video"))
    return videos


def combined_revenue(revenue: RevenueBreakdown) -> MetricWithChange:
    """In-video + post-video revenue as one KPI."""
    return MetricWithChange(
        value=revenue.in_video.value + revenue.post_video.value,
        previous_value=revenue.in_video.previous_value + revenue.post_video.previous_value,
    )


def normalize_chart_data(body: dict) -> list[ChartPoint]:
    """Optional upstream chart series; empty when upstream sends none."""
    raw = body.get("chartData")
    if not isinstance(raw, list):
        return []
    points = []
    for item in raw:
        if isinstance(item, dict) and item.get("date"):
            points.append(_validate(ChartPoint, {
                "date": str(item["date"]),
                "views": int(first_number(item, "views")),
                "likes": int(first_number(item, "likes")),
                "shares": int(first_number(item, "shares")),
            }, "chart data"))
    return points


# --- Stores ---

def normalize_stores(payload: Any) -> list[Store]:
    """``{data: [...]}`` / ``{stores: [...]}`` / bare list → stores."""
    if isinstance(payload, dict):
        raw = payload.get("data") or payload.get("stores") or []
    else:
        raw = payload
    if not isinstance(raw, list):
        raise MalformedResponseError("Stores response is not a list")
    return [_validate(Store, item, "store") for item in raw]


# --- Per-store by domain ---

def normalize_per_store_by_domain(
    domain: str,
    widgets_payload: Any,
    videos_payload: Any,
    template: PerStoreMetrics,
) -> PerStoreMetrics:
    """Merge the widgets and videos by-domain responses into one bundle.

    Upstream has no conversion or revenue KPIs per domain yet: their
    values come from ``template`` and only their time series are taken
    from upstream when either response carries one.
    """
    widgets = unwrap(_require_dict(widgets_payload, "widgets by domain"))
    videos = unwrap(_require_dict(videos_payload, "videos by domain"))
    sources = (videos, widgets)

    def with_series(metric, key):
        return metric.model_copy(
            update={"time_series": pick_time_series(sources, key, metric.time_series)}
        )

    conversion = ConversionMetrics(
        orders_from_shopvid=with_series(template.conversion.orders_from_shopvid, "ordersTimeSeries"),
        atc_rate_mobile=with_series(template.conversion.atc_rate_mobile, "atcRateMobileTimeSeries"),
        atc_rate_desktop=with_series(template.conversion.atc_rate_desktop, "atcRateDesktopTimeSeries"),
        cvr=with_series(template.conversion.cvr, "cvrTimeSeries"),
    )
    revenue = RevenueBreakdown(
        in_video=with_series(template.revenue.in_video, "inVideoTimeSeries"),
        post_video=with_series(template.revenue.post_video, "postVideoTimeSeries"),
    )

    total_views = first_number(videos, "totalViews")
    return PerStoreMetrics(
        store_id=str(widgets.get("storeId") or videos.get("storeId") or domain),
        store_name=str(widgets.get("storeName") or videos.get("storeName") or domain),
        summary=normalize_summary(videos, combined_revenue(revenue)),
        video_source=video_source_from_counts(videos.get("platformCounts") or {}),
        widget_usage=normalize_per_store_widget_usage(widgets),
        conversion=conversion,
        revenue=revenue,
        top_videos=normalize_top_videos(videos, total_views),
    )


# --- Per-store stats by id ---

def normalize_per_store_stats(payload: Any, store_id: str, fallback_name: str) -> PerStoreMetrics:
    """``analytics/stats/shop/{id}`` payload → PerStoreMetrics.

    The payload must carry videoSource, conversion and revenue under
    ``data``; anything less invalidates the whole response.
    """
    body = _require_dict(payload, "per store metrics").get("data")
    if not isinstance(body, dict) or not all(body.get(key) for key in PER_STORE_REQUIRED_KEYS):
        raise MalformedResponseError("Invalid per store metrics response structure")

    data = {
        **body,
        "storeId": store_id,
        "storeName": body.get("storeName") or fallback_name,
    }
    if isinstance(body.get("topVideos"), list):
        data["topVideos"] = body["topVideos"][:TOP_VIDEOS_LIMIT]
    return _validate(PerStoreMetrics, data, "per store metrics")
