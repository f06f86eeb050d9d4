from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from naver_rank.api.dependencies import get_check_rank_use_case, get_compare_ranks_use_case
from naver_rank.api.schemas.rank_requests import BlogAnalyzeRequest, BlogRankRequest
from naver_rank.api.schemas.rank_responses import (
    BlogAnalyzeResponse,
    BlogRankResponse,
    found_post,
    rank_fields,
)
from naver_rank.application.use_cases.check_rank import CheckRank, CheckRankInput
from naver_rank.application.use_cases.compare_ranks import CompareRanks, CompareRanksInput
from naver_rank.application.use_cases.resolve_many import KeywordOutcome
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.enums.operation_kind import OperationKind

router = APIRouter(prefix="/api/blog", tags=["blog"])


def _outcome_to_response(outcome: KeywordOutcome, blog_url: str) -> BlogRankResponse:
    if outcome.result is None:
        return BlogRankResponse(
            success=False,
            keyword=outcome.keyword,
            rank=-1,
            checked_at=datetime.now(timezone.utc),
            error=outcome.error,
            message=outcome.error,
            blog_url=blog_url,
        )
    return BlogRankResponse(
        **rank_fields(outcome.result),
        blog_url=blog_url,
        found_post=found_post(outcome.result),
    )


@router.post("/check-rank", response_model=BlogRankResponse, response_model_exclude_none=True)
async def check_blog_rank(
    body: BlogRankRequest,
    use_case: CheckRank = Depends(get_check_rank_use_case),
) -> BlogRankResponse:
    output = await use_case.execute(
        CheckRankInput(
            content_type=ContentType.BLOG,
            operation=OperationKind.BLOG_CHECK,
            keyword=body.keyword,
            target_url=body.blog_url,
            account_id=body.user_id,
            target_id=body.target_id,
            keyword_id=body.keyword_id,
            strategy=body.source,
        )
    )
    return BlogRankResponse(
        **rank_fields(output.result),
        blog_url=body.blog_url,
        found_post=found_post(output.result),
        points_deducted=output.points_deducted,
        history_id=output.history_id,
    )


@router.post(
    "/analyze-keyword", response_model=BlogAnalyzeResponse, response_model_exclude_none=True
)
async def analyze_blog_keywords(
    body: BlogAnalyzeRequest,
    use_case: CompareRanks = Depends(get_compare_ranks_use_case),
) -> BlogAnalyzeResponse:
    """Rank one post against up to five keywords."""
    output = await use_case.execute(
        CompareRanksInput(
            content_type=ContentType.BLOG,
            operation=OperationKind.BLOG_CHECK,
            keywords=body.keywords,
            target_url=body.blog_url,
            account_id=body.user_id,
            strategy=body.source,
        )
    )
    return BlogAnalyzeResponse(
        blog_url=body.blog_url,
        total_keywords=len(body.keywords),
        results=[_outcome_to_response(o, body.blog_url) for o in output.results],
        points_deducted=output.points_deducted,
        checked_at=datetime.now(timezone.utc),
    )
