"""CLI entry point for the analytics service.

Usage:
    python -m src.analytics.main summary --period LAST_WEEK
    python -m src.analytics.main all-stores --start 2024-12-09 --end 2024-12-15
    python -m src.analytics.main store --domain fashion-hub.myshopify.com
    python -m src.analytics.main stores --search fashion --output stores.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from pydantic import BaseModel

from ..common.config import Settings
from ..common.logging import resolve_level
from ..common.models import Period
from .errors import AnalyticsError
from .service import AnalyticsService

logger = logging.getLogger(__name__)

PERIOD_CHOICES = [p.value for p in Period]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shopvid Metrics Aggregation Service")
    parser.add_argument(
        "--output",
        type=str,
        help="Output JSON file path (default: stdout)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Dashboard overview for a period")
    summary.add_argument("--period", choices=PERIOD_CHOICES, default=Period.THIS_WEEK.value)

    all_stores = sub.add_parser("all-stores", help="Video source + widget usage across all stores")
    all_stores.add_argument("--start", type=str, help="Revenue start date (YYYY-MM-DD)")
    all_stores.add_argument("--end", type=str, help="Revenue end date (YYYY-MM-DD)")

    store = sub.add_parser("store", help="Metrics for a single store")
    scope = store.add_mutually_exclusive_group(required=True)
    scope.add_argument("--domain", type=str, help="Shop domain (e.g. fashion-hub.myshopify.com)")
    scope.add_argument("--id", dest="store_id", type=str, help="Store id")
    store.add_argument("--period", choices=PERIOD_CHOICES, default=Period.THIS_WEEK.value)

    stores = sub.add_parser("stores", help="List or search stores")
    stores.add_argument("--search", type=str, default="", help="Search by name, domain or id")

    revenue = sub.add_parser("revenue", help="In-video / post-video revenue")
    revenue.add_argument("--start", type=str, help="Start date (YYYY-MM-DD)")
    revenue.add_argument("--end", type=str, help="End date (YYYY-MM-DD)")
    revenue.add_argument("--period", choices=PERIOD_CHOICES, default=Period.THIS_WEEK.value)

    sub.add_parser("video-sources", help="Video counts by platform (all stores)")
    sub.add_parser("widgets", help="Widget usage (all stores)")

    return parser


async def run_command(args: argparse.Namespace, service: AnalyticsService):
    """Dispatch one CLI command to the service."""
    if args.command == "summary":
        return await service.get_analytics(Period(args.period))

    if args.command == "all-stores":
        if args.start and args.end:
            return await service.get_all_stores_metrics_with_revenue(args.start, args.end)
        return await service.get_all_stores_metrics()

    if args.command == "store":
        if args.domain:
            return await service.get_per_store_metrics_by_domain(args.domain)
        return await service.get_per_store_metrics(args.store_id, Period(args.period))

    if args.command == "stores":
        return await service.search_stores(args.search)

    if args.command == "revenue":
        start, end = args.start, args.end
        if not (start and end):
            start_date, end_date = Period(args.period).date_range()
            start, end = start_date.isoformat(), end_date.isoformat()
        return await service.get_revenue_metrics(start, end)

    if args.command == "video-sources":
        return await service.get_video_source_metrics()

    if args.command == "widgets":
        return await service.get_widget_usage_metrics()

    raise ValueError(f"Unknown command: {args.command}")


def to_jsonable(result) -> object:
    """Canonical models (or lists of them) → camelCase JSON data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    return result


def main(argv: list[str] | None = None, service: AnalyticsService | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = service.settings if service else Settings.load()

    logging.basicConfig(format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
    logging.getLogger().setLevel(resolve_level(settings.log_level))

    service = service or AnalyticsService(settings)

    try:
        result = asyncio.run(run_command(args, service))
    except (AnalyticsError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    output = json.dumps(to_jsonable(result), ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        logger.info("Output written to %s", args.output)
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
