from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from naver_rank.api.dependencies import (
    get_check_rank_use_case,
    get_compare_ranks_use_case,
    get_extract_main_keywords_use_case,
)
from naver_rank.api.schemas.rank_requests import (
    MainKeywordRequest,
    PlaceCompareRequest,
    PlaceRankRequest,
)
from naver_rank.api.schemas.rank_responses import (
    MainKeywordResponse,
    PlaceCompareResponse,
    PlaceRankResponse,
    found_place,
    rank_fields,
)
from naver_rank.application.use_cases.check_rank import CheckRank, CheckRankInput
from naver_rank.application.use_cases.compare_ranks import CompareRanks, CompareRanksInput
from naver_rank.application.use_cases.extract_main_keywords import (
    ExtractMainKeywords,
    ExtractMainKeywordsInput,
)
from naver_rank.application.use_cases.resolve_many import KeywordOutcome
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.enums.operation_kind import OperationKind

router = APIRouter(prefix="/api/place", tags=["place"])


async def _check(
    body: PlaceRankRequest, operation: OperationKind, use_case: CheckRank
) -> PlaceRankResponse:
    output = await use_case.execute(
        CheckRankInput(
            content_type=ContentType.PLACE,
            operation=operation,
            keyword=body.keyword,
            target_url=body.place_url,
            account_id=body.user_id,
            target_id=body.target_id,
            keyword_id=body.keyword_id,
            strategy=body.source,
        )
    )
    return PlaceRankResponse(
        **rank_fields(output.result),
        place_url=body.place_url,
        found_place=found_place(output.result),
        points_deducted=output.points_deducted,
        history_id=output.history_id,
    )


def _outcome_to_response(outcome: KeywordOutcome, place_url: str) -> PlaceRankResponse:
    if outcome.result is None:
        return PlaceRankResponse(
            success=False,
            keyword=outcome.keyword,
            rank=-1,
            checked_at=datetime.now(timezone.utc),
            error=outcome.error,
            message=outcome.error,
            place_url=place_url,
        )
    return PlaceRankResponse(
        **rank_fields(outcome.result),
        place_url=place_url,
        found_place=found_place(outcome.result),
    )


@router.post("/check-rank", response_model=PlaceRankResponse, response_model_exclude_none=True)
async def check_place_rank(
    body: PlaceRankRequest,
    use_case: CheckRank = Depends(get_check_rank_use_case),
) -> PlaceRankResponse:
    """Rank of a place in the mobile map listing for a keyword."""
    return await _check(body, OperationKind.PLACE_CHECK, use_case)


@router.post(
    "/check-rank-once", response_model=PlaceRankResponse, response_model_exclude_none=True
)
async def check_place_rank_once(
    body: PlaceRankRequest,
    use_case: CheckRank = Depends(get_check_rank_use_case),
) -> PlaceRankResponse:
    """Same lookup as /check-rank, billed at the single-check rate."""
    return await _check(body, OperationKind.PLACE_CHECK_CHEAP, use_case)


@router.post("/main-keyword", response_model=MainKeywordResponse, response_model_exclude_none=True)
async def get_main_keywords(
    body: MainKeywordRequest,
    use_case: ExtractMainKeywords = Depends(get_extract_main_keywords_use_case),
) -> MainKeywordResponse:
    output = await use_case.execute(
        ExtractMainKeywordsInput(place_url=body.place_url, account_id=body.user_id)
    )
    return MainKeywordResponse(
        success=output.success,
        place_url=output.place_url,
        keywords=output.keywords,
        checked_at=output.checked_at,
        error=output.error,
        message=output.error,
        points_deducted=output.points_deducted,
    )


@router.post("/compare-rank", response_model=PlaceCompareResponse, response_model_exclude_none=True)
async def compare_place_rank(
    body: PlaceCompareRequest,
    use_case: CompareRanks = Depends(get_compare_ranks_use_case),
) -> PlaceCompareResponse:
    """Rank one place against up to five keywords."""
    output = await use_case.execute(
        CompareRanksInput(
            content_type=ContentType.PLACE,
            operation=OperationKind.PLACE_CHECK,
            keywords=body.keywords,
            target_url=body.place_url,
            account_id=body.user_id,
            strategy=body.source,
        )
    )
    return PlaceCompareResponse(
        place_url=body.place_url,
        total_keywords=len(body.keywords),
        results=[_outcome_to_response(o, body.place_url) for o in output.results],
        points_deducted=output.points_deducted,
        checked_at=datetime.now(timezone.utc),
    )
