from contextlib import aclosing

import structlog

from naver_rank.application.interfaces.candidate_source import (
    CandidateSource,
    CandidateSourceUnavailableError,
)
from naver_rank.domain.entities.candidate import Candidate
from naver_rank.domain.entities.rank_result import NOT_FOUND, RankResult
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.services.identifier_extractor import (
    IdentifierExtractionError,
    candidate_identifier,
    extract_target,
)

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DEPTH = 300


class RankResolver:
    """
    Finds the 1-based position of a target in a candidate stream.

    Candidates are de-duplicated by canonical identifier: the first
    occurrence gets the next rank, later duplicates are dropped without
    being counted. The source's own ordering is authoritative. Pulling
    stops on the first match, at ``max_depth`` distinct candidates, or
    when the source ends.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1.")
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    async def resolve(
        self,
        content_type: ContentType,
        keyword: str,
        target_url: str,
        source: CandidateSource,
    ) -> RankResult:
        try:
            target = extract_target(content_type, target_url)
        except IdentifierExtractionError as exc:
            logger.warning(
                "target_extraction_failed",
                content_type=content_type.value,
                target_url=target_url,
            )
            return RankResult.failure(
                content_type=content_type,
                keyword=keyword,
                target_url=target_url,
                error=str(exc),
                method=source.method,
            )

        logger.info(
            "rank_resolution_started",
            content_type=content_type.value,
            keyword=keyword,
            target_id=target.canonical_id,
            method=source.method,
        )

        seen: set[str] = set()
        examined = 0
        match: Candidate | None = None

        try:
            async with aclosing(
                source.stream(content_type, keyword, max_depth=self._max_depth)
            ) as batches:
                async for batch in batches:
                    for raw in batch:
                        identifier = candidate_identifier(content_type, raw)
                        if identifier is None or identifier in seen:
                            continue
                        seen.add(identifier)
                        examined += 1

                        if identifier == target.canonical_id:
                            match = Candidate(
                                identifier=identifier,
                                rank=examined,
                                title=raw.title,
                                link=raw.link,
                                extra=dict(raw.extra),
                            )
                            break
                        if examined >= self._max_depth:
                            break

                    if match is not None or examined >= self._max_depth:
                        break
        except CandidateSourceUnavailableError as exc:
            logger.error(
                "candidate_source_unavailable",
                content_type=content_type.value,
                keyword=keyword,
                error=str(exc),
            )
            return RankResult.failure(
                content_type=content_type,
                keyword=keyword,
                target_url=target_url,
                error=str(exc),
                method=source.method,
            )

        rank = match.rank if match is not None else NOT_FOUND
        logger.info(
            "rank_resolution_finished",
            content_type=content_type.value,
            keyword=keyword,
            rank=rank,
            total_examined=examined,
        )
        return RankResult(
            success=True,
            content_type=content_type,
            keyword=keyword,
            target_url=target_url,
            rank=rank,
            total_examined=examined,
            match=match,
            method=source.method,
        )
