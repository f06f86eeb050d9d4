import structlog

from naver_rank.application.interfaces.keyword_insights import MainKeywordSource
from naver_rank.infrastructure.browser.session import BrowserSession
from naver_rank.infrastructure.sources.parsers import parse_place_keywords

logger = structlog.get_logger(__name__)

# Keyword chips render after the first paint
SETTLE_DELAY_MS = 2000


class PlaceMainKeywordSource(MainKeywordSource):
    """Opens a place page in the mobile browser and reads its keyword chips."""

    def __init__(self, session: BrowserSession, navigation_timeout_ms: int = 30000) -> None:
        self._session = session
        self._navigation_timeout_ms = navigation_timeout_ms

    async def main_keywords(self, place_url: str) -> list[str]:
        async with self._session.page(mobile=True) as page:
            await page.goto(
                place_url, wait_until="networkidle", timeout=self._navigation_timeout_ms
            )
            await page.wait_for_timeout(SETTLE_DELAY_MS)
            html = await page.content()

        keywords = parse_place_keywords(html)
        logger.debug("place_keywords_parsed", place_url=place_url, count=len(keywords))
        return keywords
