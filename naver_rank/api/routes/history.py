from fastapi import APIRouter, Depends, Query

from naver_rank.api.dependencies import get_rank_history_use_case
from naver_rank.api.schemas.history_schemas import RankHistoryEntryResponse, RankHistoryResponse
from naver_rank.application.use_cases.get_rank_history import (
    DEFAULT_HISTORY_LIMIT,
    GetRankHistory,
    GetRankHistoryInput,
)
from naver_rank.domain.enums.content_type import ContentType

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get(
    "/{content_type}", response_model=RankHistoryResponse, response_model_exclude_none=True
)
async def get_rank_history(
    content_type: ContentType,
    user_id: str = Query(alias="userId", min_length=1),
    target_id: str = Query(alias="targetId", min_length=1),
    keyword_id: str = Query(alias="keywordId", min_length=1),
    limit: int = Query(default=DEFAULT_HISTORY_LIMIT, ge=1, le=200),
    use_case: GetRankHistory = Depends(get_rank_history_use_case),
) -> RankHistoryResponse:
    """Stored rank observations for one target/keyword pair, newest first."""
    output = await use_case.execute(
        GetRankHistoryInput(
            account_id=user_id,
            content_type=content_type,
            target_id=target_id,
            keyword_id=keyword_id,
            limit=limit,
        )
    )
    return RankHistoryResponse(
        content_type=output.content_type,
        target_id=target_id,
        keyword_id=keyword_id,
        history=[
            RankHistoryEntryResponse(
                id=record.id,
                keyword=record.observation.keyword,
                target_url=record.observation.target_url,
                rank=record.observation.rank,
                page=record.observation.page,
                search_type=record.observation.search_type,
                total_results=record.observation.total_results,
                found=record.observation.found,
                error_message=record.observation.error_message,
                searched_at=record.observation.searched_at,
            )
            for record in output.history
        ],
    )
