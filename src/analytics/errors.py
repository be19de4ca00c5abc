"""Error taxonomy for upstream analytics calls."""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for all analytics service errors."""


class UnauthorizedError(AnalyticsError):
    """Upstream rejected the admin API key (HTTP 401)."""

    def __init__(self) -> None:
        super().__init__("Unauthorized: Invalid API key")


class StoreNotFoundError(AnalyticsError):
    """A per-store lookup hit HTTP 404."""

    def __init__(self, scope: str, by_domain: bool = True) -> None:
        self.scope = scope
        if by_domain:
            message = f"Store not found for domain: {scope}"
        else:
            message = f"Store not found: {scope}"
        super().__init__(message)


class UpstreamError(AnalyticsError):
    """Any other non-2xx status or transport failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(UpstreamError):
    """Upstream answered, but the payload lacks required structure."""
