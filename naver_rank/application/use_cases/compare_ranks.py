from dataclasses import dataclass

import structlog

from naver_rank.application.interfaces.candidate_source import CandidateSourceProvider
from naver_rank.application.use_cases.billing import PointsGate
from naver_rank.application.use_cases.resolve_many import BatchRankResolver, KeywordOutcome
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule

logger = structlog.get_logger(__name__)


@dataclass
class CompareRanksInput:
    content_type: ContentType
    operation: OperationKind
    keywords: list[str]
    target_url: str
    account_id: str | None = None
    strategy: SourceStrategy | None = None


@dataclass
class CompareRanksOutput:
    results: list[KeywordOutcome]
    aggregate_cost: int
    points_deducted: int


class CompareRanks:
    """
    Use case: rank one target against several keywords in a single billed call.

    The account pays for every keyword attempted, whether or not its
    resolution succeeded.
    """

    def __init__(
        self,
        batch_resolver: BatchRankResolver,
        sources: CandidateSourceProvider,
        points: PointsGate,
        costs: PointCostSchedule,
    ) -> None:
        self._batch_resolver = batch_resolver
        self._sources = sources
        self._points = points
        self._costs = costs

    async def execute(self, input_data: CompareRanksInput) -> CompareRanksOutput:
        source = self._sources.get(input_data.content_type, input_data.strategy)
        total_cost = self._costs.batch_cost(input_data.operation, len(input_data.keywords))
        if input_data.account_id:
            await self._points.ensure(input_data.account_id, total_cost)

        outcome = await self._batch_resolver.resolve_many(
            input_data.content_type,
            input_data.keywords,
            input_data.target_url,
            source,
            unit_cost=self._costs.cost_of(input_data.operation),
        )

        points_deducted = 0
        if input_data.account_id:
            charged = await self._points.charge(
                input_data.account_id,
                outcome.aggregate_cost,
                f"{input_data.operation.label} ({len(input_data.keywords)} keywords): "
                + ", ".join(input_data.keywords),
            )
            points_deducted = charged or 0

        logger.info(
            "rank_comparison_finished",
            content_type=input_data.content_type.value,
            keywords=len(input_data.keywords),
            succeeded=sum(1 for r in outcome.results if r.success),
            points_deducted=points_deducted,
        )
        return CompareRanksOutput(
            results=outcome.results,
            aggregate_cost=outcome.aggregate_cost,
            points_deducted=points_deducted,
        )
