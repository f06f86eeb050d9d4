from datetime import datetime
from typing import Any
from uuid import UUID

from naver_rank.api.schemas.base import CamelModel
from naver_rank.domain.enums.content_type import ContentType


class RankHistoryEntryResponse(CamelModel):
    id: UUID
    keyword: str
    target_url: str
    rank: int
    page: int | None = None
    search_type: str
    total_results: int
    found: dict[str, Any] | None = None
    error_message: str | None = None
    searched_at: datetime


class RankHistoryResponse(CamelModel):
    success: bool = True
    content_type: ContentType
    target_id: str
    keyword_id: str
    history: list[RankHistoryEntryResponse]
