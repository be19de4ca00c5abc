"""Tests for the analytics CLI."""

import json
import logging
import os
import subprocess
import sys

import pytest

from src.analytics.main import build_parser, main
from src.analytics.service import AnalyticsService


def run_cli(argv, service, tmp_path):
    output = tmp_path / "out.json"
    code = main(["--output", str(output), *argv], service=service)
    data = json.loads(output.read_text(encoding="utf-8")) if output.exists() else None
    return code, data


class TestParser:
    def test_store_requires_scope(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["store"])

    def test_period_choices(self):
        args = build_parser().parse_args(["summary", "--period", "LAST_MONTH"])
        assert args.period == "LAST_MONTH"
        with pytest.raises(SystemExit):
            build_parser().parse_args(["summary", "--period", "YESTERDAY"])


class TestCommands:
    def test_summary(self, mock_service, tmp_path):
        code, data = run_cli(["summary", "--period", "LAST_WEEK"], mock_service, tmp_path)
        assert code == 0
        assert data["period"] == "LAST_WEEK"
        assert data["summary"]["totalViews"]["changePercent"] > 0
        assert len(data["topVideos"]) == 5

    def test_all_stores_with_revenue(self, mock_service, tmp_path):
        code, data = run_cli(
            ["all-stores", "--start", "2024-12-09", "--end", "2024-12-15"], mock_service, tmp_path
        )
        assert code == 0
        assert data["videoSource"]["total"] == 1000
        assert data["revenue"]["inVideo"]["startDate"] == "2024-12-09"

    def test_all_stores_without_revenue(self, mock_service, tmp_path):
        _, data = run_cli(["all-stores"], mock_service, tmp_path)
        assert data["revenue"] is None
        assert data["widgetUsage"]["ctaActions"][0]["count"] == 320

    def test_store_by_domain(self, mock_service, tmp_path):
        _, data = run_cli(["store", "--domain", "sports-zone.myshopify.com"], mock_service, tmp_path)
        assert data["storeId"] == "5"
        assert data["storeName"] == "Sports Zone"

    def test_store_by_id(self, mock_service, tmp_path):
        _, data = run_cli(["store", "--id", "3"], mock_service, tmp_path)
        assert data["storeName"] == "Home Essentials"

    def test_stores_search(self, mock_service, tmp_path):
        _, data = run_cli(["stores", "--search", "zone"], mock_service, tmp_path)
        assert [s["name"] for s in data] == ["Sports Zone"]

    def test_revenue_defaults_to_period(self, mock_service, tmp_path):
        code, data = run_cli(["revenue"], mock_service, tmp_path)
        assert code == 0
        assert set(data) == {"inVideo", "postVideo"}

    def test_widgets_and_video_sources(self, mock_service, tmp_path):
        _, widgets = run_cli(["widgets"], mock_service, tmp_path)
        assert widgets["avgWidgetsPerMerchant"] == 12.5
        _, sources = run_cli(["video-sources"], mock_service, tmp_path)
        assert sources["upload"] == 200

    def test_prints_to_stdout(self, mock_service, capsys):
        assert main(["video-sources"], service=mock_service) == 0
        assert json.loads(capsys.readouterr().out)["tiktok"] == 450


class TestErrors:
    def test_not_found_exits_nonzero(self, live_service, upstream, tmp_path):
        code, data = run_cli(["store", "--domain", "missing.myshopify.com"], live_service, tmp_path)
        assert code == 1
        assert data is None

    def test_blank_domain_exits_nonzero(self, mock_service, tmp_path):
        code, _ = run_cli(["store", "--domain", " "], mock_service, tmp_path)
        assert code == 1


class TestOutputStream:
    def test_stdout_is_pure_json(self, project_root):
        env = {k: v for k, v in os.environ.items() if k not in ("SHOPABLE_API_URL", "LOG_LEVEL")}
        env["LOG_LEVEL"] = "DEBUG"
        result = subprocess.run(
            [sys.executable, "-m", "src.analytics.main", "video-sources"],
            cwd=project_root,
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )
        assert result.returncode == 0, result.stderr
        assert json.loads(result.stdout)["total"] == 1000
        assert "Analytics service using mock data" in result.stderr

    def test_root_level_follows_settings(self, mock_settings):
        root = logging.getLogger()
        previous = root.level
        try:
            service = AnalyticsService(mock_settings.model_copy(update={"log_level": "ERROR"}))
            assert main(["video-sources"], service=service) == 0
            assert root.level == logging.ERROR
        finally:
            root.setLevel(previous)
