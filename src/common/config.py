"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
SETTINGS_FILE = CONFIG_DIR / "settings.yaml"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ApiSettings(BaseModel):
    """Upstream Shopable analytics API settings."""
    base_url: str | None = None
    admin_api_key: str = ""
    timeout_seconds: float | None = None  # None leaves timeouts to the network layer

    model_config = {"frozen": True}

    @property
    def use_mock(self) -> bool:
        """True when no base URL is configured (deterministic mock mode)."""
        return not (self.base_url or "").strip()


class Settings(BaseModel):
    """Top-level application settings."""
    api: ApiSettings = Field(default_factory=ApiSettings)
    log_level: str = "INFO"

    model_config = {"frozen": True}

    @classmethod
    def load(cls, config_path: Path | None = None) -> Settings:
        """Load settings from YAML, then apply environment overrides."""
        settings_path = config_path or SETTINGS_FILE
        data: dict = {}
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        api = dict(data.get("api") or {})

        if url := os.getenv("SHOPABLE_API_URL"):
            api["base_url"] = url
        if key := os.getenv("SHOPABLE_ADMIN_API_KEY"):
            api["admin_api_key"] = key
        if timeout := os.getenv("SHOPABLE_API_TIMEOUT"):
            api["timeout_seconds"] = float(timeout)
        if level := os.getenv("LOG_LEVEL"):
            data["log_level"] = level

        return cls(
            api=ApiSettings(**api),
            log_level=data.get("log_level", "INFO"),
        )
