# Common utilities and shared modules
"""
Shared components:
- Canonical data models (Pydantic schemas)
- Logging configuration
- Project configuration
"""

from .config import PROJECT_ROOT, ApiSettings, Settings
from .logging import setup_logging

__all__ = [
    "PROJECT_ROOT",
    "ApiSettings",
    "Settings",
    "setup_logging",
]
