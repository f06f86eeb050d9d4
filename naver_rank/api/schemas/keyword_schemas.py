from datetime import date, datetime

from pydantic import Field

from naver_rank.api.schemas.base import CamelModel
from naver_rank.application.use_cases.keyword_trend import TrendPeriod
from naver_rank.application.use_cases.keyword_volume import Competition


class KeywordVolumeRequest(CamelModel):
    keyword: str = Field(min_length=1)
    user_id: str | None = None


class KeywordTrendRequest(CamelModel):
    keyword: str = Field(min_length=1)
    period: TrendPeriod = TrendPeriod.MONTH
    user_id: str | None = None


class SearchVolume(CamelModel):
    total_results: int
    competition: Competition


class KeywordVolumeResponse(CamelModel):
    success: bool = True
    keyword: str
    search_volume: SearchVolume
    points_deducted: int | None = None
    checked_at: datetime


class TrendPointResponse(CamelModel):
    period: date
    ratio: float


class KeywordTrendResponse(CamelModel):
    success: bool = True
    keyword: str
    period: TrendPeriod
    start_date: date
    end_date: date
    trend_data: list[TrendPointResponse]
    points_deducted: int | None = None
    checked_at: datetime
