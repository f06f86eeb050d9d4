from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

import structlog

from naver_rank.application.interfaces.keyword_insights import KeywordInsightsProvider
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule

logger = structlog.get_logger(__name__)

HIGH_COMPETITION_THRESHOLD = 10_000
MEDIUM_COMPETITION_THRESHOLD = 1_000


class Competition(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def competition_for(total_results: int) -> Competition:
    if total_results > HIGH_COMPETITION_THRESHOLD:
        return Competition.HIGH
    if total_results > MEDIUM_COMPETITION_THRESHOLD:
        return Competition.MEDIUM
    return Competition.LOW


@dataclass
class GetKeywordVolumeInput:
    keyword: str
    account_id: str | None = None


@dataclass
class GetKeywordVolumeOutput:
    keyword: str
    total_results: int
    competition: Competition
    points_deducted: int | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class GetKeywordVolume:
    """
    Use case: estimate how contested a keyword is from the number of blog
    documents Naver reports for it.

    Raises KeywordInsightsUnavailableError when the search API cannot be
    used; nothing is charged in that case.
    """

    def __init__(
        self,
        insights: KeywordInsightsProvider,
        points: PointsGate,
        costs: PointCostSchedule,
    ) -> None:
        self._insights = insights
        self._points = points
        self._costs = costs

    async def execute(self, input_data: GetKeywordVolumeInput) -> GetKeywordVolumeOutput:
        cost = self._costs.cost_of(OperationKind.KEYWORD_VOLUME)
        if input_data.account_id:
            await self._points.ensure(input_data.account_id, cost)

        total = await self._insights.total_results(input_data.keyword)
        output = GetKeywordVolumeOutput(
            keyword=input_data.keyword,
            total_results=total,
            competition=competition_for(total),
        )
        if input_data.account_id:
            output.points_deducted = await self._points.charge(
                input_data.account_id,
                cost,
                f"{OperationKind.KEYWORD_VOLUME.label}: {input_data.keyword}",
            )
        logger.info(
            "keyword_volume_checked",
            keyword=input_data.keyword,
            total_results=total,
            competition=output.competition.value,
        )
        return output
