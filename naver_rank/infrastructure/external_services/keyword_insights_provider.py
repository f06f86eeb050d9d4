from datetime import date

import structlog

from naver_rank.application.interfaces.keyword_insights import (
    KeywordInsightsProvider,
    KeywordInsightsUnavailableError,
    TrendPoint,
)
from naver_rank.infrastructure.external_services.naver_search_client import (
    NaverSearchClient,
    SearchApiError,
)

logger = structlog.get_logger(__name__)


class NaverKeywordInsightsProvider(KeywordInsightsProvider):
    """Keyword statistics from the blog search total and the DataLab search trend."""

    def __init__(self, client: NaverSearchClient) -> None:
        self._client = client

    def _require_credentials(self) -> None:
        if not self._client.configured:
            raise KeywordInsightsUnavailableError(
                "Naver API credentials are not configured (NAVER_CLIENT_ID / NAVER_CLIENT_SECRET)."
            )

    async def total_results(self, keyword: str) -> int:
        self._require_credentials()
        try:
            data = await self._client.search("blog", keyword, display=1)
        except SearchApiError as exc:
            raise KeywordInsightsUnavailableError(str(exc)) from exc
        return int(data.get("total") or 0)

    async def daily_trend(self, keyword: str, start: date, end: date) -> list[TrendPoint]:
        self._require_credentials()
        try:
            data = await self._client.search_trend(keyword, start, end, time_unit="date")
        except SearchApiError as exc:
            raise KeywordInsightsUnavailableError(str(exc)) from exc

        results = data.get("results") or []
        if not results:
            return []
        points = []
        for row in results[0].get("data") or []:
            try:
                points.append(
                    TrendPoint(period=date.fromisoformat(row["period"]), ratio=float(row["ratio"]))
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("trend_row_malformed", keyword=keyword, row=row)
        return points
