from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from naver_rank.application.interfaces.keyword_insights import MainKeywordSource
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule

logger = structlog.get_logger(__name__)


@dataclass
class ExtractMainKeywordsInput:
    place_url: str
    account_id: str | None = None


@dataclass
class ExtractMainKeywordsOutput:
    success: bool
    place_url: str
    keywords: list[str] = field(default_factory=list)
    error: str | None = None
    points_deducted: int | None = None
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ExtractMainKeywords:
    """Use case: read the keyword chips a place page shows for itself."""

    def __init__(
        self,
        source: MainKeywordSource,
        points: PointsGate,
        costs: PointCostSchedule,
    ) -> None:
        self._source = source
        self._points = points
        self._costs = costs

    async def execute(self, input_data: ExtractMainKeywordsInput) -> ExtractMainKeywordsOutput:
        cost = self._costs.cost_of(OperationKind.MAIN_KEYWORD_EXTRACT)
        if input_data.account_id:
            await self._points.ensure(input_data.account_id, cost)

        try:
            keywords = await self._source.main_keywords(input_data.place_url)
        except Exception as exc:
            logger.exception("main_keyword_extraction_failed", place_url=input_data.place_url)
            return ExtractMainKeywordsOutput(
                success=False, place_url=input_data.place_url, error=str(exc)
            )

        output = ExtractMainKeywordsOutput(
            success=True, place_url=input_data.place_url, keywords=keywords
        )
        if input_data.account_id:
            output.points_deducted = await self._points.charge(
                input_data.account_id,
                cost,
                f"{OperationKind.MAIN_KEYWORD_EXTRACT.label}: {input_data.place_url}",
            )
        logger.info(
            "main_keywords_extracted",
            place_url=input_data.place_url,
            count=len(keywords),
        )
        return output
