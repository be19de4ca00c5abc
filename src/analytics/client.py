"""Async HTTP client for the Shopable admin analytics API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..common.config import ApiSettings
from .errors import MalformedResponseError, StoreNotFoundError, UnauthorizedError, UpstreamError

logger = logging.getLogger(__name__)


class AnalyticsAPIClient:
    """Thin wrapper around ``httpx.AsyncClient``.

    Attaches the admin API key (and shop domain when scoped) to every
    request and maps HTTP failures onto the analytics error taxonomy.
    No retries: a failed call is terminal for that call.

    Usage:
        async with AnalyticsAPIClient(settings.api) as client:
            data = await client.get_json("analytics/stores")
    """

    API_PREFIX = "/admin/api/v1/"

    def __init__(
        self,
        api: ApiSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if api.use_mock:
            raise ValueError("AnalyticsAPIClient requires a base URL")
        self.api = api
        self._client = httpx.AsyncClient(
            base_url=api.base_url.rstrip("/"),
            headers={
                "Content-Type": "application/json",
                "X-Admin-Api-Key": api.admin_api_key,
            },
            timeout=httpx.Timeout(api.timeout_seconds),
            transport=transport,
        )

    async def get_json(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        shop_domain: str | None = None,
        not_found_scope: str | None = None,
        scope_is_domain: bool = True,
    ) -> Any:
        """GET an analytics endpoint and decode its JSON body.

        Args:
            endpoint: Path below /admin/api/v1/ (e.g. "analytics/stores").
            params: Query parameters.
            shop_domain: Sent as X-Shop-Domain when given.
            not_found_scope: Store domain or id of a scoped lookup. A 404
                             is reported as StoreNotFoundError only when set.
            scope_is_domain: Whether not_found_scope is a domain or an id.

        Raises:
            UnauthorizedError: HTTP 401.
            StoreNotFoundError: HTTP 404 on a scoped lookup.
            UpstreamError: Any other non-2xx status or transport failure.
            MalformedResponseError: Body is not JSON.
        """
        headers = {"X-Shop-Domain": shop_domain} if shop_domain else None
        path = self.API_PREFIX + endpoint.lstrip("/")

        try:
            resp = await self._client.get(path, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Request to {endpoint} failed: {exc}") from exc

        if resp.status_code == 401:
            raise UnauthorizedError()
        if resp.status_code == 404 and not_found_scope is not None:
            raise StoreNotFoundError(not_found_scope, by_domain=scope_is_domain)
        if not resp.is_success:
            raise UpstreamError(
                f"Analytics API error: {resp.status_code} ({endpoint})",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Non-JSON response from {endpoint}") from exc

        logger.debug("GET %s -> %d", path, resp.status_code)
        return data

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> AnalyticsAPIClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
