from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum

import structlog

from naver_rank.application.interfaces.keyword_insights import (
    KeywordInsightsProvider,
    TrendPoint,
)
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule

logger = structlog.get_logger(__name__)


class TrendPeriod(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {
            TrendPeriod.WEEK: 7,
            TrendPeriod.MONTH: 30,
            TrendPeriod.YEAR: 365,
        }[self]


@dataclass
class GetKeywordTrendInput:
    keyword: str
    period: TrendPeriod = TrendPeriod.MONTH
    account_id: str | None = None
    today: date | None = None


@dataclass
class GetKeywordTrendOutput:
    keyword: str
    period: TrendPeriod
    start: date
    end: date
    points: list[TrendPoint]
    points_deducted: int | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class GetKeywordTrend:
    """Use case: daily relative search interest for a keyword, ending today."""

    def __init__(
        self,
        insights: KeywordInsightsProvider,
        points: PointsGate,
        costs: PointCostSchedule,
    ) -> None:
        self._insights = insights
        self._points = points
        self._costs = costs

    async def execute(self, input_data: GetKeywordTrendInput) -> GetKeywordTrendOutput:
        cost = self._costs.cost_of(OperationKind.KEYWORD_VOLUME)
        if input_data.account_id:
            await self._points.ensure(input_data.account_id, cost)

        end = input_data.today or datetime.now(timezone.utc).date()
        start = end - timedelta(days=input_data.period.days - 1)
        trend = await self._insights.daily_trend(input_data.keyword, start, end)

        output = GetKeywordTrendOutput(
            keyword=input_data.keyword,
            period=input_data.period,
            start=start,
            end=end,
            points=trend,
        )
        if input_data.account_id:
            output.points_deducted = await self._points.charge(
                input_data.account_id,
                cost,
                f"Keyword trend analysis: {input_data.keyword}",
            )
        logger.info(
            "keyword_trend_checked",
            keyword=input_data.keyword,
            period=input_data.period.value,
            points=len(trend),
        )
        return output
