"""HTTP transport for the OpenProject API.

The transport is the ``api_request(method, endpoint, body)`` capability used by
the client. It never raises for HTTP or network failures; those come back as
``ApiResult(success=False, error=...)``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import Any, Protocol

import httpx

from .models import ApiResult

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v3"
MAX_ERROR_LENGTH = 500


class ApiRequest(Protocol):
    """Remote request capability."""

    def __call__(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> Awaitable[ApiResult]: ...


def _error_message(response: httpx.Response, data: Any) -> str:
    message = None
    if isinstance(data, dict):
        message = data.get("message")
    msg = str(message or f"API error: {response.status_code}")
    if len(msg) > MAX_ERROR_LENGTH:
        msg = msg[:MAX_ERROR_LENGTH] + "..."
    return msg


class HttpxTransport:
    """Authenticated async transport (Basic auth with ``apikey:<token>``)."""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/") + API_PREFIX
        self._http = httpx.AsyncClient(
            auth=httpx.BasicAuth("apikey", api_token),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            follow_redirects=False,
            transport=transport,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def __call__(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> ApiResult:
        return await self.request(method, endpoint, body)

    async def request(
        self, method: str, endpoint: str, body: dict[str, Any] | None = None
    ) -> ApiResult:
        url = f"{self._base_url}{endpoint}"
        logger.debug("OpenProject %s %s", method, endpoint)
        try:
            response = await self._http.request(method or "GET", url, json=body)
        except httpx.HTTPError as exc:
            logger.warning("OpenProject %s %s transport error: %s", method, endpoint, exc)
            return ApiResult(success=False, error=f"Request failed: {exc}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            logger.warning(
                "OpenProject %s %s returned status=%d", method, endpoint, response.status_code
            )
            return ApiResult(
                success=False,
                data=data,
                error=_error_message(response, data),
                status_code=response.status_code,
            )

        return ApiResult(success=True, data=data, status_code=response.status_code)
