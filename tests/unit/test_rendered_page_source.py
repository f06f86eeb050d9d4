"""Unit tests for the browser-backed candidate sources, driven through a fake page."""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from naver_rank.application.interfaces.candidate_source import CandidateSourceUnavailableError
from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.infrastructure.sources.incremental_source import StreamLimits
from naver_rank.infrastructure.sources.place_keyword_source import (
    SETTLE_DELAY_MS,
    PlaceMainKeywordSource,
)
from naver_rank.infrastructure.sources.rendered_page_source import (
    CLICK_MORE_BUTTON_JS,
    DEFAULT_COORDINATES,
    SCROLL_PLACE_LIST_JS,
    SCROLL_SHOPPING_JS,
    RenderedPageSource,
)

_SCRIPT_EVENTS = {
    CLICK_MORE_BUTTON_JS: "click_more",
    SCROLL_PLACE_LIST_JS: "scroll_place",
    SCROLL_SHOPPING_JS: "scroll_shopping",
}


def _place_rows(*ids: str) -> str:
    rows = "".join(
        f'<li class="UEzoS"><a href="/restaurant/{i}/home"><span class="TYaxT">Place {i}</span></a></li>'
        for i in ids
    )
    return f"<ul>{rows}</ul>"


def _blog_page(*posts: str) -> str:
    links = "".join(
        f'<a class="title_link" href="https://blog.naver.com/{p}">Post {p}</a>' for p in posts
    )
    return f'<div class="total_wrap">{links}</div>'


SHOPPING_PAGE = """
<div class="product_item__a1">
  <a href="https://smartstore.naver.com/shop/products/555">
    <div class="product_title__b2">Wireless Mouse</div>
  </a>
</div>
"""


class FakePage:
    """Serves canned HTML in order and records what the source asked the browser to do."""

    def __init__(self, pages: list[str], selector_error: Exception | None = None) -> None:
        self._pages = pages
        self._reads = 0
        self._selector_error = selector_error
        self.urls: list[str] = []
        self.events: list[str] = []

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.urls.append(url)
        self.events.append("goto")

    async def wait_for_selector(self, selector: str, **kwargs: Any) -> None:
        self.events.append("wait")
        if self._selector_error is not None:
            raise self._selector_error

    async def wait_for_timeout(self, timeout: float) -> None:
        self.events.append(f"settle:{timeout}")

    async def content(self) -> str:
        self.events.append("content")
        html = self._pages[min(self._reads, len(self._pages) - 1)]
        self._reads += 1
        return html

    async def evaluate(self, script: str) -> bool:
        self.events.append(_SCRIPT_EVENTS[script])
        return False


class FakeSession:
    def __init__(self, page: FakePage) -> None:
        self._page = page
        self.mobile_flags: list[bool] = []
        self.closed_pages = 0

    @asynccontextmanager
    async def page(self, *, mobile: bool = False) -> AsyncIterator[FakePage]:
        self.mobile_flags.append(mobile)
        try:
            yield self._page
        finally:
            self.closed_pages += 1


def _make_source(page: FakePage, locator: Any = None, max_empty: int = 2) -> RenderedPageSource:
    limits = {
        content_type: StreamLimits(max_iterations=10, max_empty_increments=max_empty)
        for content_type in ContentType
    }
    return RenderedPageSource(FakeSession(page), limits, locator=locator)  # type: ignore[arg-type]


async def _collect(
    source: RenderedPageSource, content_type: ContentType, max_depth: int = 300
) -> list[list[RawCandidate]]:
    return [batch async for batch in source.stream(content_type, "강남 맛집", max_depth=max_depth)]


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlsplit(url).query)


class TestBlogPaging:
    @pytest.mark.asyncio
    async def test_pages_advance_by_ten_until_depth(self) -> None:
        page = FakePage([_blog_page("a/1"), _blog_page("b/2"), _blog_page("c/3")])
        source = _make_source(page)

        batches = await _collect(source, ContentType.BLOG, max_depth=25)

        assert [_query(url)["start"] for url in page.urls] == [["1"], ["11"], ["21"]]
        assert all(_query(url)["where"] == ["blog"] for url in page.urls)
        assert [[c.link for c in batch] for batch in batches] == [
            ["https://blog.naver.com/a/1"],
            ["https://blog.naver.com/b/2"],
            ["https://blog.naver.com/c/3"],
        ]

    @pytest.mark.asyncio
    async def test_single_page_when_depth_fits_in_one(self) -> None:
        page = FakePage([_blog_page("a/1")])

        await _collect(_make_source(page), ContentType.BLOG, max_depth=10)

        assert len(page.urls) == 1

    @pytest.mark.asyncio
    async def test_offset_past_depth_is_exhausted_without_loading(self) -> None:
        page = FakePage([_blog_page("a/1")])
        source = _make_source(page)

        increment = await source._fetch(page, ContentType.BLOG, "kw", 3, 25)  # type: ignore[arg-type]

        assert increment.exhausted
        assert increment.candidates == []
        assert page.urls == []

    @pytest.mark.asyncio
    async def test_results_wait_timeout_is_tolerated(self) -> None:
        page = FakePage([_blog_page("a/1")], selector_error=PlaywrightTimeoutError("timeout"))
        source = _make_source(page)

        batches = await _collect(source, ContentType.BLOG, max_depth=10)

        assert [c.link for c in batches[0]] == ["https://blog.naver.com/a/1"]
        assert source._session.mobile_flags == [False]


class TestPlaceListing:
    @pytest.mark.asyncio
    async def test_unrendered_listing_is_unavailable(self) -> None:
        page = FakePage(
            [_place_rows("111")], selector_error=PlaywrightTimeoutError("Timeout 15000ms exceeded")
        )
        source = _make_source(page)

        with pytest.raises(CandidateSourceUnavailableError):
            await _collect(source, ContentType.PLACE)

        assert "content" not in page.events
        assert source._session.closed_pages == 1

    @pytest.mark.asyncio
    async def test_each_increment_parses_before_scrolling(self) -> None:
        page = FakePage([_place_rows("111"), _place_rows("111", "222")])
        source = _make_source(page)

        batches = await _collect(source, ContentType.PLACE)

        assert [[c.source_id for c in batch] for batch in batches] == [["111"], ["222"]]
        assert page.events[:8] == [
            "goto",
            "wait",
            "content",
            "click_more",
            "scroll_place",
            "content",
            "click_more",
            "scroll_place",
        ]
        assert source._session.mobile_flags == [True]

    @pytest.mark.asyncio
    async def test_stops_after_empty_scrolls(self) -> None:
        page = FakePage([_place_rows("111")])

        await _collect(_make_source(page, max_empty=2), ContentType.PLACE)

        assert page.events.count("content") == 3


class TestPlaceCoordinates:
    @pytest.mark.asyncio
    async def test_located_keyword_sets_listing_position(self) -> None:
        async def locator(keyword: str) -> tuple[float, float]:
            return (127.0276, 37.4979)

        page = FakePage([_place_rows("111")])
        await _collect(_make_source(page, locator=locator), ContentType.PLACE)

        query = _query(page.urls[0])
        assert float(query["x"][0]) == 127.0276
        assert float(query["y"][0]) == 37.4979
        assert query["query"] == ["강남 맛집"]

    @pytest.mark.asyncio
    async def test_failed_geolocation_uses_default(self) -> None:
        async def locator(keyword: str) -> tuple[float, float]:
            raise RuntimeError("geocoder offline")

        page = FakePage([_place_rows("111")])
        await _collect(_make_source(page, locator=locator), ContentType.PLACE)

        query = _query(page.urls[0])
        assert (float(query["x"][0]), float(query["y"][0])) == DEFAULT_COORDINATES

    @pytest.mark.asyncio
    async def test_unlocated_keyword_uses_default(self) -> None:
        async def locator(keyword: str) -> None:
            return None

        page = FakePage([_place_rows("111")])
        await _collect(_make_source(page, locator=locator), ContentType.PLACE)

        query = _query(page.urls[0])
        assert (float(query["x"][0]), float(query["y"][0])) == DEFAULT_COORDINATES


class TestShoppingResults:
    @pytest.mark.asyncio
    async def test_parses_before_scrolling_and_tolerates_slow_results(self) -> None:
        page = FakePage([SHOPPING_PAGE], selector_error=PlaywrightTimeoutError("timeout"))
        source = _make_source(page, max_empty=1)

        batches = await _collect(source, ContentType.SHOPPING)

        assert [[c.source_id for c in batch] for batch in batches] == [["555"]]
        assert page.events == [
            "goto",
            "wait",
            "content",
            "scroll_shopping",
            "content",
            "scroll_shopping",
        ]
        assert _query(page.urls[0])["sort"] == ["rel"]


class TestPlaceMainKeywordSource:
    @pytest.mark.asyncio
    async def test_reads_keyword_chips_after_settling(self) -> None:
        html = (
            '<div><span class="keyword_item">파스타</span>'
            '<span class="tag">데이트</span><span class="tag">x</span></div>'
        )
        page = FakePage([html])
        session = FakeSession(page)
        source = PlaceMainKeywordSource(session)  # type: ignore[arg-type]

        keywords = await source.main_keywords("https://m.place.naver.com/restaurant/111/home")

        assert keywords == ["파스타", "데이트"]
        assert page.urls == ["https://m.place.naver.com/restaurant/111/home"]
        assert page.events == ["goto", f"settle:{SETTLE_DELAY_MS}", "content"]
        assert session.mobile_flags == [True]
        assert session.closed_pages == 1
