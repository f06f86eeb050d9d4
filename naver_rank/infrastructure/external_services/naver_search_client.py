"""HTTP client for the Naver Open API (search, local search and DataLab)."""
from datetime import date
from typing import Any

import httpx
import structlog

from naver_rank.config import settings

logger = structlog.get_logger(__name__)

MAX_DISPLAY = 100
MAX_START = 1000


class SearchApiError(Exception):
    pass


class NaverSearchClient:
    """Thin HTTP wrapper around the Naver Open API."""

    def __init__(
        self,
        client_id: str | None = settings.naver_client_id,
        client_secret: str | None = settings.naver_client_secret,
        base_url: str = settings.naver_api_base_url,
        timeout: float = settings.naver_api_timeout,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "X-Naver-Client-Id": self._client_id or "",
            "X-Naver-Client-Secret": self._client_secret or "",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict:  # type: ignore[type-arg]
        if not self.configured:
            raise SearchApiError("Naver API credentials are not configured.")

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.request(
                    method,
                    f"{self._base_url}{path}",
                    params=params,
                    json=json,
                    headers=self._headers,
                )
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "naver_api_request_failed",
                    path=path,
                    status_code=exc.response.status_code,
                    response=exc.response.text,
                )
                raise SearchApiError(
                    f"Naver API returned {exc.response.status_code}: {exc.response.text}"
                ) from exc
            except httpx.RequestError as exc:
                logger.error("naver_api_connection_failed", path=path, error=str(exc))
                raise SearchApiError(f"Failed to reach the Naver API: {exc}") from exc

    async def search(
        self,
        vertical: str,
        query: str,
        *,
        display: int = MAX_DISPLAY,
        start: int = 1,
        sort: str = "sim",
    ) -> dict:  # type: ignore[type-arg]
        """
        GET /v1/search/{vertical}.json → {"total": int, "start": int, "display": int, "items": [...]}
        """
        data = await self._request(
            "GET",
            f"/v1/search/{vertical}.json",
            params={
                "query": query,
                "display": max(1, min(display, MAX_DISPLAY)),
                "start": start,
                "sort": sort,
            },
        )
        logger.debug(
            "naver_search_page",
            vertical=vertical,
            query=query,
            start=start,
            items=len(data.get("items", [])),
            total=data.get("total"),
        )
        return data

    async def locate(self, keyword: str) -> tuple[float, float] | None:
        """Longitude/latitude of the first local search hit for ``keyword``."""
        data = await self._request(
            "GET",
            "/v1/search/local.json",
            params={"query": keyword, "display": 1},
        )
        items = data.get("items") or []
        if not items:
            return None
        try:
            x = int(items[0]["mapx"]) / 10_000_000
            y = int(items[0]["mapy"]) / 10_000_000
        except (KeyError, TypeError, ValueError):
            return None
        logger.debug("naver_keyword_located", keyword=keyword, x=x, y=y)
        return x, y

    async def search_trend(
        self,
        keyword: str,
        start: date,
        end: date,
        time_unit: str = "date",
    ) -> dict:  # type: ignore[type-arg]
        """
        POST /v1/datalab/search → {"results": [{"title": ..., "data": [{"period": ..., "ratio": ...}]}]}
        """
        return await self._request(
            "POST",
            "/v1/datalab/search",
            json={
                "startDate": start.isoformat(),
                "endDate": end.isoformat(),
                "timeUnit": time_unit,
                "keywordGroups": [{"groupName": keyword, "keywords": [keyword]}],
            },
        )
