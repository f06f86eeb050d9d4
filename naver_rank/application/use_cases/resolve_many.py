import asyncio
from dataclasses import dataclass

import structlog

from naver_rank.application.interfaces.candidate_source import CandidateSource
from naver_rank.application.use_cases.resolve_rank import RankResolver
from naver_rank.domain.entities.rank_result import RankResult
from naver_rank.domain.enums.content_type import ContentType

logger = structlog.get_logger(__name__)


@dataclass
class KeywordOutcome:
    keyword: str
    result: RankResult | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.result is not None and self.result.success


@dataclass
class BatchRankOutcome:
    results: list[KeywordOutcome]
    aggregate_cost: int


class BatchRankResolver:
    """
    Runs the rank resolver once per keyword.

    Keywords are independent: an unexpected error while resolving one is
    recorded as that keyword's failure and the others carry on. Results
    keep the input order even when ``concurrency`` > 1.
    """

    def __init__(self, resolver: RankResolver, concurrency: int = 1) -> None:
        self._resolver = resolver
        self._concurrency = max(1, concurrency)

    async def resolve_many(
        self,
        content_type: ContentType,
        keywords: list[str],
        target_url: str,
        source: CandidateSource,
        *,
        unit_cost: int,
    ) -> BatchRankOutcome:
        semaphore = asyncio.Semaphore(self._concurrency)

        async def _one(keyword: str) -> KeywordOutcome:
            async with semaphore:
                try:
                    result = await self._resolver.resolve(
                        content_type, keyword, target_url, source
                    )
                    return KeywordOutcome(keyword=keyword, result=result)
                except Exception as exc:
                    logger.exception(
                        "keyword_resolution_failed",
                        content_type=content_type.value,
                        keyword=keyword,
                    )
                    return KeywordOutcome(keyword=keyword, error=str(exc))

        if self._concurrency == 1:
            outcomes = [await _one(keyword) for keyword in keywords]
        else:
            outcomes = list(await asyncio.gather(*(_one(keyword) for keyword in keywords)))

        return BatchRankOutcome(
            results=outcomes,
            aggregate_cost=unit_cost * len(keywords),
        )
