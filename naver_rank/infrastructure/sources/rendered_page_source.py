from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import urlencode

import structlog
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.infrastructure.browser.session import BrowserSession
from naver_rank.infrastructure.sources.incremental_source import (
    Increment,
    IncrementalCandidateSource,
    StreamLimits,
)
from naver_rank.infrastructure.sources.parsers import (
    PLACE_LINK_SELECTOR,
    parse_blog_results,
    parse_place_listing,
    parse_shopping_results,
)

logger = structlog.get_logger(__name__)

PLACE_LIST_URL = "https://m.place.naver.com/restaurant/list"
BLOG_SEARCH_URL = "https://search.naver.com/search.naver"
SHOPPING_SEARCH_URL = "https://search.shopping.naver.com/search/all"

# Seoul City Hall, used when the keyword cannot be geolocated
DEFAULT_COORDINATES = (126.9783882, 37.5666103)

BLOG_PAGE_SIZE = 10
PLACE_RENDER_TIMEOUT_MS = 15000
RESULTS_WAIT_TIMEOUT_MS = 5000

BLOG_RESULT_SELECTOR = '.api_txt_lines, .title_link, .sh_blog_title, a[href*="blog.naver.com"]'
SHOPPING_RESULT_SELECTOR = '[class*="product_item"], [class*="item__"], a[href*="product"]'

CLICK_MORE_BUTTON_JS = """
() => {
  const btn = Array.from(document.querySelectorAll('button, a, div, span')).find(el => {
    const txt = (el.textContent || '').trim();
    return txt === '더보기' || txt === '더 보기';
  });
  if (btn) { btn.click(); return true; }
  return false;
}
"""

SCROLL_PLACE_LIST_JS = """
() => {
  const containers = [
    document.querySelector('[class*="search_list"]'),
    document.querySelector('[class*="place_list"]'),
    document.querySelector('[class*="scroll"]'),
    document.querySelector('main'),
    document.body,
  ].filter(el => el);
  for (const c of containers) {
    if (c.scrollHeight > c.clientHeight) { c.scrollTop = c.scrollHeight; }
  }
  window.scrollTo(0, document.body.scrollHeight);
  const last = document.querySelector('li.UEzoS:last-child');
  if (last) { last.scrollIntoView({ block: 'end' }); }
}
"""

SCROLL_SHOPPING_JS = "() => window.scrollBy(0, window.innerHeight * 2)"

Locator = Callable[[str], Awaitable[tuple[float, float] | None]]


def place_list_url(keyword: str, x: float, y: float) -> str:
    query = urlencode({"query": keyword, "x": x, "y": y, "level": "top", "entry": "pll"})
    return f"{PLACE_LIST_URL}?{query}"


def blog_search_url(keyword: str, start: int) -> str:
    return f"{BLOG_SEARCH_URL}?{urlencode({'where': 'blog', 'query': keyword, 'start': start})}"


def shopping_search_url(keyword: str) -> str:
    return f"{SHOPPING_SEARCH_URL}?{urlencode({'query': keyword, 'sort': 'rel'})}"


def limits_from_settings(settings: Any) -> dict[ContentType, StreamLimits]:
    return {
        ContentType.PLACE: StreamLimits(
            max_iterations=settings.place_max_scrolls,
            max_empty_increments=settings.place_max_empty_scrolls,
            throttle_seconds=settings.place_scroll_delay,
        ),
        ContentType.BLOG: StreamLimits(
            max_iterations=settings.blog_max_pages,
            max_empty_increments=settings.blog_max_empty_pages,
            throttle_seconds=settings.blog_page_delay,
        ),
        ContentType.SHOPPING: StreamLimits(
            max_iterations=settings.shopping_max_scrolls,
            max_empty_increments=settings.shopping_max_empty_scrolls,
            throttle_seconds=settings.shopping_scroll_delay,
        ),
    }


class RenderedPageSource(IncrementalCandidateSource):
    """
    Reads candidates from search pages rendered in the shared headless browser.

    place: mobile listing, each increment parses then clicks "더보기" and scrolls.
    blog: one desktop results page per increment (start = 1, 11, 21, ...).
    shopping: desktop results page, each increment parses then scrolls.
    """

    method = "browser"
    strategy = SourceStrategy.BROWSER

    def __init__(
        self,
        session: BrowserSession,
        limits: Mapping[ContentType, StreamLimits],
        navigation_timeout_ms: int = 30000,
        locator: Locator | None = None,
    ) -> None:
        super().__init__(limits)
        self._session = session
        self._navigation_timeout_ms = navigation_timeout_ms
        self._locator = locator

    async def _coordinates(self, keyword: str) -> tuple[float, float]:
        if self._locator is None:
            return DEFAULT_COORDINATES
        try:
            located = await self._locator(keyword)
        except Exception as exc:
            logger.warning("place_geolocation_failed", keyword=keyword, error=str(exc))
            return DEFAULT_COORDINATES
        return located or DEFAULT_COORDINATES

    @asynccontextmanager
    async def _context(self, content_type: ContentType, keyword: str) -> AsyncIterator[Page]:
        async with self._session.page(mobile=content_type is ContentType.PLACE) as page:
            if content_type is ContentType.PLACE:
                x, y = await self._coordinates(keyword)
                await page.goto(
                    place_list_url(keyword, x, y),
                    wait_until="networkidle",
                    timeout=self._navigation_timeout_ms,
                )
                # The listing is a SPA; no result links means it never rendered
                await page.wait_for_selector(PLACE_LINK_SELECTOR, timeout=PLACE_RENDER_TIMEOUT_MS)

            elif content_type is ContentType.SHOPPING:
                await page.goto(
                    shopping_search_url(keyword),
                    wait_until="networkidle",
                    timeout=self._navigation_timeout_ms,
                )
                await self._soft_wait(page, SHOPPING_RESULT_SELECTOR)

            yield page

    async def _fetch(
        self,
        ctx: Page,
        content_type: ContentType,
        keyword: str,
        index: int,
        max_depth: int,
    ) -> Increment:
        if content_type is ContentType.BLOG:
            return await self._fetch_blog_page(ctx, keyword, index, max_depth)

        if content_type is ContentType.PLACE:
            candidates = parse_place_listing(await ctx.content())
            if await ctx.evaluate(CLICK_MORE_BUTTON_JS):
                logger.debug("place_more_button_clicked", keyword=keyword, index=index)
            await ctx.evaluate(SCROLL_PLACE_LIST_JS)
        else:
            candidates = parse_shopping_results(await ctx.content())
            await ctx.evaluate(SCROLL_SHOPPING_JS)

        logger.debug(
            "rendered_increment_parsed",
            content_type=content_type.value,
            keyword=keyword,
            index=index,
            candidates=len(candidates),
        )
        return Increment(candidates=candidates)

    async def _fetch_blog_page(
        self, page: Page, keyword: str, index: int, max_depth: int
    ) -> Increment:
        start = 1 + BLOG_PAGE_SIZE * index
        if start > max_depth:
            return Increment(exhausted=True)

        await page.goto(
            blog_search_url(keyword, start),
            wait_until="networkidle",
            timeout=self._navigation_timeout_ms,
        )
        await self._soft_wait(page, BLOG_RESULT_SELECTOR)
        candidates = parse_blog_results(await page.content())
        logger.debug("blog_page_parsed", keyword=keyword, start=start, candidates=len(candidates))
        return Increment(
            candidates=candidates,
            exhausted=start + BLOG_PAGE_SIZE > max_depth,
        )

    async def _soft_wait(self, page: Page, selector: str) -> None:
        try:
            await page.wait_for_selector(selector, timeout=RESULTS_WAIT_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            logger.debug("results_selector_timeout", selector=selector)
