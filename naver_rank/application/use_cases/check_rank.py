from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

import structlog

from naver_rank.application.interfaces.candidate_source import CandidateSourceProvider
from naver_rank.application.interfaces.rank_history_store import (
    RankHistoryStore,
    RankObservation,
)
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.application.use_cases.resolve_rank import RankResolver
from naver_rank.domain.entities.rank_result import RankResult, page_of
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule

logger = structlog.get_logger(__name__)


@dataclass
class CheckRankInput:
    content_type: ContentType
    operation: OperationKind
    keyword: str
    target_url: str
    account_id: str | None = None
    target_id: str | None = None
    keyword_id: str | None = None
    strategy: SourceStrategy | None = None


@dataclass
class CheckRankOutput:
    result: RankResult
    points_deducted: int | None = None
    history_id: UUID | None = None


def build_observation(result: RankResult, page_size: int) -> RankObservation:
    found = None
    if result.match is not None:
        found = {
            "id": result.match.identifier,
            "title": result.match.title,
            "link": result.match.link,
            "rank": result.match.rank,
            **result.match.extra,
        }
    return RankObservation(
        content_type=result.content_type,
        keyword=result.keyword,
        target_url=result.target_url,
        rank=result.rank,
        page=page_of(result.rank, page_size),
        total_results=result.total_examined,
        searched_at=result.checked_at,
        found=found,
        error_message=result.error,
    )


class CheckRank:
    """
    Use case: resolve one keyword's rank for a target, billed to an account.

    The balance is checked before any network work. Points are only taken
    after a successful resolution ("not found" included). Debit and history
    append are best effort and never change the result returned.
    """

    def __init__(
        self,
        resolver: RankResolver,
        sources: CandidateSourceProvider,
        points: PointsGate,
        history: RankHistoryStore,
        costs: PointCostSchedule,
        page_sizes: Mapping[ContentType, int],
    ) -> None:
        self._resolver = resolver
        self._sources = sources
        self._points = points
        self._history = history
        self._costs = costs
        self._page_sizes = page_sizes

    async def execute(self, input_data: CheckRankInput) -> CheckRankOutput:
        # raises UnsupportedSourceError or InsufficientPointsError before any work
        source = self._sources.get(input_data.content_type, input_data.strategy)
        cost = self._costs.cost_of(input_data.operation)
        if input_data.account_id:
            await self._points.ensure(input_data.account_id, cost)

        result = await self._resolver.resolve(
            input_data.content_type,
            input_data.keyword,
            input_data.target_url,
            source,
        )
        output = CheckRankOutput(result=result)

        if input_data.account_id and result.success:
            output.points_deducted = await self._points.charge(
                input_data.account_id,
                cost,
                f"{input_data.operation.label}: {input_data.keyword}",
            )

        if input_data.account_id and input_data.target_id and input_data.keyword_id:
            output.history_id = await self._record(input_data, result)

        return output

    async def _record(self, input_data: CheckRankInput, result: RankResult) -> UUID | None:
        observation = build_observation(result, self._page_sizes[result.content_type])
        try:
            appended = await self._history.append_observation(
                input_data.account_id,  # type: ignore[arg-type]
                input_data.target_id,  # type: ignore[arg-type]
                input_data.keyword_id,  # type: ignore[arg-type]
                observation,
            )
        except Exception:
            logger.exception(
                "rank_history_append_failed",
                account_id=input_data.account_id,
                target_id=input_data.target_id,
                keyword_id=input_data.keyword_id,
            )
            return None

        if not appended.success:
            logger.warning("rank_history_append_rejected", error=appended.error)
        return appended.history_id
