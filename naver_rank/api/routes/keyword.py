from fastapi import APIRouter, Depends

from naver_rank.api.dependencies import get_keyword_trend_use_case, get_keyword_volume_use_case
from naver_rank.api.schemas.keyword_schemas import (
    KeywordTrendRequest,
    KeywordTrendResponse,
    KeywordVolumeRequest,
    KeywordVolumeResponse,
    SearchVolume,
    TrendPointResponse,
)
from naver_rank.application.use_cases.keyword_trend import GetKeywordTrend, GetKeywordTrendInput
from naver_rank.application.use_cases.keyword_volume import (
    GetKeywordVolume,
    GetKeywordVolumeInput,
)

router = APIRouter(prefix="/api/keyword", tags=["keyword"])


@router.post(
    "/search-volume", response_model=KeywordVolumeResponse, response_model_exclude_none=True
)
async def get_search_volume(
    body: KeywordVolumeRequest,
    use_case: GetKeywordVolume = Depends(get_keyword_volume_use_case),
) -> KeywordVolumeResponse:
    """Blog document count for a keyword, bucketed into a competition level."""
    output = await use_case.execute(
        GetKeywordVolumeInput(keyword=body.keyword, account_id=body.user_id)
    )
    return KeywordVolumeResponse(
        keyword=output.keyword,
        search_volume=SearchVolume(
            total_results=output.total_results, competition=output.competition
        ),
        points_deducted=output.points_deducted,
        checked_at=output.checked_at,
    )


@router.post("/trend", response_model=KeywordTrendResponse, response_model_exclude_none=True)
async def get_trend(
    body: KeywordTrendRequest,
    use_case: GetKeywordTrend = Depends(get_keyword_trend_use_case),
) -> KeywordTrendResponse:
    """Daily relative search interest from DataLab over the last week, month or year."""
    output = await use_case.execute(
        GetKeywordTrendInput(keyword=body.keyword, period=body.period, account_id=body.user_id)
    )
    return KeywordTrendResponse(
        keyword=output.keyword,
        period=output.period,
        start_date=output.start,
        end_date=output.end,
        trend_data=[TrendPointResponse(period=p.period, ratio=p.ratio) for p in output.points],
        points_deducted=output.points_deducted,
        checked_at=output.checked_at,
    )
