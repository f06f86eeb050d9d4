"""Unit tests for the shared incremental streaming loop."""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from naver_rank.application.interfaces.candidate_source import (
    CandidateSourceUnavailableError,
    UnsupportedSourceError,
)
from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.infrastructure.sources.incremental_source import (
    Increment,
    IncrementalCandidateSource,
    StreamLimits,
)

SLEEP = "naver_rank.infrastructure.sources.incremental_source.asyncio.sleep"


def _raw(n: int) -> RawCandidate:
    return RawCandidate(link=f"https://blog.naver.com/writer/{n}", title=f"Post {n}")


class ScriptedIncrementalSource(IncrementalCandidateSource):
    """Returns (or raises) one scripted item per fetch index."""

    method = "scripted"
    strategy = SourceStrategy.BROWSER

    def __init__(
        self,
        script: list[Increment | Exception],
        limits: StreamLimits | None = None,
        open_error: Exception | None = None,
    ) -> None:
        super().__init__({ContentType.BLOG: limits or StreamLimits(10, 3)})
        self._script = script
        self._open_error = open_error
        self.fetched: list[int] = []
        self.closed = False

    @asynccontextmanager
    async def _context(self, content_type: ContentType, keyword: str) -> AsyncIterator[Any]:
        if self._open_error is not None:
            raise self._open_error
        try:
            yield "ctx"
        finally:
            self.closed = True

    async def _fetch(
        self, ctx: Any, content_type: ContentType, keyword: str, index: int, max_depth: int
    ) -> Increment:
        assert ctx == "ctx"
        self.fetched.append(index)
        item = self._script[index] if index < len(self._script) else Increment()
        if isinstance(item, Exception):
            raise item
        return item


async def _collect(source: IncrementalCandidateSource) -> list[list[RawCandidate]]:
    return [batch async for batch in source.stream(ContentType.BLOG, "kw", max_depth=300)]


class TestIncrementalCandidateSource:
    @pytest.mark.asyncio
    async def test_unsupported_content_type(self) -> None:
        source = ScriptedIncrementalSource([])
        with pytest.raises(UnsupportedSourceError):
            async for _ in source.stream(ContentType.PLACE, "kw", max_depth=300):
                pass

    @pytest.mark.asyncio
    async def test_throttles_before_every_fetch_but_the_first(self) -> None:
        script: list[Increment | Exception] = [
            Increment([_raw(1)]),
            Increment([_raw(2)]),
            Increment([_raw(3)], exhausted=True),
        ]
        source = ScriptedIncrementalSource(script, StreamLimits(10, 3, throttle_seconds=0.5))

        with patch(SLEEP, new_callable=AsyncMock) as sleep:
            batches = await _collect(source)

        assert len(batches) == 3
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_first_fetch_failure_is_unavailable(self) -> None:
        source = ScriptedIncrementalSource([RuntimeError("timeout")])
        with pytest.raises(CandidateSourceUnavailableError, match="timeout"):
            await _collect(source)
        assert source.closed

    @pytest.mark.asyncio
    async def test_later_failure_counts_as_empty_increment(self) -> None:
        script: list[Increment | Exception] = [
            Increment([_raw(1)]),
            RuntimeError("scroll failed"),
            Increment([_raw(2)], exhausted=True),
        ]
        batches = await _collect(ScriptedIncrementalSource(script))

        assert [[c.title for c in b] for b in batches] == [["Post 1"], ["Post 2"]]

    @pytest.mark.asyncio
    async def test_open_failure_is_unavailable(self) -> None:
        source = ScriptedIncrementalSource([], open_error=RuntimeError("no browser"))
        with pytest.raises(CandidateSourceUnavailableError, match="no browser"):
            await _collect(source)
        assert source.fetched == []

    @pytest.mark.asyncio
    async def test_stops_after_empty_streak(self) -> None:
        script: list[Increment | Exception] = [Increment([_raw(1)])]
        source = ScriptedIncrementalSource(script, StreamLimits(max_iterations=20, max_empty_increments=3))

        batches = await _collect(source)

        assert len(batches) == 1
        assert source.fetched == [0, 1, 2, 3]
        assert source.closed

    @pytest.mark.asyncio
    async def test_repeated_entries_do_not_reset_empty_streak(self) -> None:
        same = Increment([_raw(1)])
        source = ScriptedIncrementalSource([same, same, same, same], StreamLimits(20, 2))

        batches = await _collect(source)

        assert batches == [[_raw(1)]]
        assert source.fetched == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_exhausted_stops_immediately(self) -> None:
        script: list[Increment | Exception] = [Increment([_raw(1)], exhausted=True), Increment([_raw(2)])]
        source = ScriptedIncrementalSource(script)

        batches = await _collect(source)

        assert len(batches) == 1
        assert source.fetched == [0]

    @pytest.mark.asyncio
    async def test_iteration_cap(self) -> None:
        script: list[Increment | Exception] = [Increment([_raw(i)]) for i in range(10)]
        source = ScriptedIncrementalSource(script, StreamLimits(max_iterations=4, max_empty_increments=3))

        batches = await _collect(source)

        assert len(batches) == 4
        assert source.fetched == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_same_link_with_different_source_ids_is_emitted(self) -> None:
        first = RawCandidate(link="https://shop/x", source_id="1")
        second = RawCandidate(link="https://shop/x", source_id="2")
        source = ScriptedIncrementalSource([Increment([first, second, first], exhausted=True)])

        batches = await _collect(source)

        assert batches == [[first, second]]

    @pytest.mark.asyncio
    async def test_consumer_stopping_early_closes_context(self) -> None:
        script: list[Increment | Exception] = [Increment([_raw(i)]) for i in range(10)]
        source = ScriptedIncrementalSource(script)

        stream = source.stream(ContentType.BLOG, "kw", max_depth=300)
        await stream.__anext__()
        await stream.aclose()  # type: ignore[attr-defined]

        assert source.fetched == [0]
        assert source.closed
