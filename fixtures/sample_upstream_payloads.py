"""
Sample Shopable admin API payloads for service testing.

Shapes follow what the upstream analytics endpoints return, including
the optional ``data`` envelope and synonym field names.
"""

from __future__ import annotations


def _videos(count: int) -> list[dict]:
    return [
        {
            "videoId": f"vid-{i:02d}-abcdefgh",
            "views": 500 - i * 50,
            "likes": 40 - i * 3,
            "shares": 10 - i,
        }
        for i in range(count)
    ]


def get_videos_all_stores() -> dict:
    """analytics/videos/all-stores"""
    return {
        "totalViews": 1000,
        "totalLikes": 150,
        "totalShares": 50,
        "topVideos": {"byViews": _videos(7), "byLikes": [], "byShares": []},
        "platformCounts": {"tiktok": 3, "instagram": 0, "import": 7},
    }


def get_widgets_all_stores() -> dict:
    """analytics/widgets/all-stores"""
    return {
        "totalWidgets": 40,
        "activeWidgets": 30,
        "inactiveWidgets": 10,
        "totalActiveMerchants": 4,
        "layoutBreakdown": {"grid": 10, "float": 0, "basic_carousel": 5},
        "ctaActions": {
            "desktop": {"product-page": 10, "add-to-cart": 0, "custom-action": 2},
            "mobile": {"product-page": 5, "add-to-cart": 0, "cart-page": 3},
        },
        "productPagesCount": 6,
        "otherPagesCount": 1,
    }


def _revenue_series(base: int) -> list[dict]:
    return [
        {"date": "2025-01-06", "value": base},
        {"date": "2025-01-07", "value": base + 100},
        {"date": "2025-01-08", "value": base + 50},
    ]


def get_stats_revenue() -> dict:
    """analytics/stats?startDate&endDate"""
    return {
        "data": {
            "revenue": {
                "inVideo": {"value": 900, "previousValue": 600, "timeSeries": _revenue_series(250)},
                "postVideo": {"value": 300, "previousValue": 0, "timeSeries": _revenue_series(80)},
            }
        }
    }


def get_widgets_by_domain() -> dict:
    """analytics/widgets/by-domain"""
    return {
        "data": {
            "storeId": "shop-42",
            "storeName": "Fashion Hub",
            "totalWidgets": 12,
            "activeWidgets": 9,
            "layoutBreakdown": {"grid": 4, "story": 2, "list": 0},
            "ctaActions": {
                "desktop": {"product-modal": 7},
                "mobile": {"product-modal": 3, "add-to-cart": 4},
            },
            "productPagesCount": 4,
            "otherPagesCount": 2,
        }
    }


def get_videos_by_domain() -> dict:
    """analytics/videos/by-domain"""
    return {
        "data": {
            "totalViews": 2000,
            "totalLikes": 300,
            "totalShares": 100,
            "previousViews": 1600,
            "platformCounts": {"tiktok": 12, "instagram": 8, "upload": 5},
            "topVideos": {"byViews": _videos(3)},
            "inVideoTimeSeries": [
                {"x": "2025-01-06", "y": 120},
                {"x": "2025-01-07", "y": 180},
                {"x": "", "y": 999},
            ],
        }
    }


def get_stores() -> dict:
    """analytics/stores"""
    return {
        "data": [
            {"id": "shop-42", "name": "Fashion Hub", "domain": "fashion-hub.myshopify.com"},
            {"id": "shop-77", "name": "Tech Galaxy", "domain": "tech-galaxy.myshopify.com"},
        ]
    }


def get_per_store_stats() -> dict:
    """analytics/stats/shop/{id}"""
    metric = {
        "value": 5.0,
        "previousValue": 4.0,
        "timeSeries": [{"date": "2025-01-06", "value": 5.0}],
    }
    return {
        "data": {
            "storeName": "Tech Galaxy",
            "videoSource": {"tiktok": 4, "instagram": 2, "upload": 1, "total": 9},
            "widgetUsage": {
                "widgetTypes": [{"type": "Grid", "count": 3}],
                "avgWidgetsPerMerchant": 3,
                "avgActiveWidgetsPerMerchant": 2,
                "ctaActions": [
                    {"action": "Open product detail page", "desktop": 2, "mobile": 1},
                ],
            },
            "conversion": {
                "ordersFromShopvid": metric,
                "atcRateMobile": metric,
                "atcRateDesktop": metric,
                "cvr": metric,
            },
            "revenue": {"inVideo": metric, "postVideo": metric},
        }
    }
