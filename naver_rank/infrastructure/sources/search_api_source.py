import re
from collections.abc import Mapping
from typing import Any

import structlog

from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy
from naver_rank.infrastructure.external_services.naver_search_client import (
    MAX_DISPLAY,
    MAX_START,
    NaverSearchClient,
)
from naver_rank.infrastructure.sources.incremental_source import (
    Increment,
    IncrementalCandidateSource,
    StreamLimits,
)

logger = structlog.get_logger(__name__)

_TAG = re.compile(r"<[^>]*>")

VERTICALS: dict[ContentType, str] = {
    ContentType.BLOG: "blog",
    ContentType.SHOPPING: "shop",
}


def strip_tags(text: str) -> str:
    return _TAG.sub("", text or "")


def limits_from_settings(settings: Any) -> dict[ContentType, StreamLimits]:
    limits = StreamLimits(
        max_iterations=settings.api_max_pages,
        max_empty_increments=settings.api_max_empty_pages,
        throttle_seconds=settings.api_page_delay,
    )
    return {content_type: limits for content_type in VERTICALS}


def _to_candidate(content_type: ContentType, item: dict) -> RawCandidate:  # type: ignore[type-arg]
    title = strip_tags(item.get("title", ""))
    link = item.get("link", "")
    if content_type is ContentType.SHOPPING:
        return RawCandidate(
            link=link,
            title=title,
            source_id=str(item["productId"]) if item.get("productId") else None,
            extra={"price": item.get("lprice"), "mallName": item.get("mallName")},
        )
    return RawCandidate(link=link, title=title)


class SearchApiSource(IncrementalCandidateSource):
    """Pages through the Naver Open API blog and shop search. Place has no API equivalent."""

    method = "search_api"
    strategy = SourceStrategy.API

    def __init__(
        self,
        client: NaverSearchClient,
        limits: Mapping[ContentType, StreamLimits],
        page_size: int = MAX_DISPLAY,
    ) -> None:
        super().__init__({ct: lim for ct, lim in limits.items() if ct in VERTICALS})
        self._client = client
        self._page_size = max(1, min(page_size, MAX_DISPLAY))

    async def _fetch(
        self,
        ctx: Any,
        content_type: ContentType,
        keyword: str,
        index: int,
        max_depth: int,
    ) -> Increment:
        start = 1 + self._page_size * index
        if start > max_depth or start > MAX_START:
            return Increment(exhausted=True)

        display = min(self._page_size, max_depth - start + 1)
        data = await self._client.search(
            VERTICALS[content_type], keyword, display=display, start=start
        )
        items = data.get("items") or []
        candidates = [_to_candidate(content_type, item) for item in items]

        # A short page means the result set ended
        return Increment(
            candidates=candidates,
            exhausted=len(items) < display or start + display > max_depth,
        )
