import asyncio
from abc import abstractmethod
from collections.abc import AsyncIterator, Mapping
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog

from naver_rank.application.interfaces.candidate_source import (
    CandidateSource,
    CandidateSourceUnavailableError,
    UnsupportedSourceError,
)
from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy

logger = structlog.get_logger(__name__)


@dataclass
class Increment:
    """Entries produced by one fetch (page load, scroll step or API page)."""

    candidates: list[RawCandidate] = field(default_factory=list)
    # Set when the surface signals there is nothing more to fetch
    exhausted: bool = False


@dataclass(frozen=True)
class StreamLimits:
    max_iterations: int
    max_empty_increments: int
    throttle_seconds: float = 0.0


class IncrementalCandidateSource(CandidateSource):
    """
    Shared streaming loop for sources that fetch results one increment at a time.

    Subclasses provide ``_fetch`` (and optionally ``_context`` for state that
    lives for the whole stream, such as an open browser page). The loop:

    - throttles between fetches,
    - stops at the iteration cap, after too many consecutive increments
      with nothing new, or when an increment reports exhaustion,
    - raises CandidateSourceUnavailableError if the first fetch fails and
      treats later failures as empty increments,
    - drops entries already emitted earlier in the same stream.
    """

    strategy: SourceStrategy

    def __init__(self, limits: Mapping[ContentType, StreamLimits]) -> None:
        self._limits = dict(limits)

    def supports(self, content_type: ContentType) -> bool:
        return content_type in self._limits

    @asynccontextmanager
    async def _context(self, content_type: ContentType, keyword: str) -> AsyncIterator[Any]:
        yield None

    @abstractmethod
    async def _fetch(
        self,
        ctx: Any,
        content_type: ContentType,
        keyword: str,
        index: int,
        max_depth: int,
    ) -> Increment:
        ...

    async def stream(
        self, content_type: ContentType, keyword: str, *, max_depth: int
    ) -> AsyncIterator[list[RawCandidate]]:
        if not self.supports(content_type):
            raise UnsupportedSourceError(content_type, self.strategy)
        limits = self._limits[content_type]

        async with AsyncExitStack() as stack:
            try:
                ctx = await stack.enter_async_context(self._context(content_type, keyword))
            except CandidateSourceUnavailableError:
                raise
            except Exception as exc:
                logger.error(
                    "candidate_source_open_failed",
                    method=self.method,
                    content_type=content_type.value,
                    keyword=keyword,
                    error=str(exc),
                )
                raise CandidateSourceUnavailableError(
                    f"Could not open the {content_type.value} search results: {exc}"
                ) from exc

            emitted: set[tuple[str, str | None]] = set()
            empty_streak = 0

            for index in range(limits.max_iterations):
                if index > 0 and limits.throttle_seconds > 0:
                    await asyncio.sleep(limits.throttle_seconds)

                try:
                    increment = await self._fetch(ctx, content_type, keyword, index, max_depth)
                except Exception as exc:
                    if index == 0:
                        logger.error(
                            "candidate_source_first_fetch_failed",
                            method=self.method,
                            content_type=content_type.value,
                            keyword=keyword,
                            error=str(exc),
                        )
                        raise CandidateSourceUnavailableError(
                            f"Failed to load {content_type.value} search results: {exc}"
                        ) from exc
                    logger.warning(
                        "candidate_fetch_failed",
                        method=self.method,
                        content_type=content_type.value,
                        keyword=keyword,
                        index=index,
                        error=str(exc),
                    )
                    increment = Increment()

                fresh = []
                for candidate in increment.candidates:
                    if candidate.emission_key in emitted:
                        continue
                    emitted.add(candidate.emission_key)
                    fresh.append(candidate)

                if fresh:
                    empty_streak = 0
                    yield fresh
                else:
                    empty_streak += 1

                if increment.exhausted:
                    logger.debug(
                        "candidate_source_exhausted",
                        method=self.method,
                        content_type=content_type.value,
                        index=index,
                    )
                    return
                if empty_streak >= limits.max_empty_increments:
                    logger.info(
                        "candidate_source_stalled",
                        method=self.method,
                        content_type=content_type.value,
                        keyword=keyword,
                        empty_increments=empty_streak,
                    )
                    return

            logger.info(
                "candidate_source_iteration_cap_reached",
                method=self.method,
                content_type=content_type.value,
                keyword=keyword,
                max_iterations=limits.max_iterations,
            )
