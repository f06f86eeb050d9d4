from typing import Annotated

from pydantic import Field, StringConstraints

from naver_rank.api.schemas.base import CamelModel
from naver_rank.domain.enums.content_type import SourceStrategy

MAX_BATCH_KEYWORDS = 5

Keyword = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RankCheckRequest(CamelModel):
    keyword: str = Field(min_length=1)
    user_id: str | None = None
    # History linkage; an observation is stored only when both are given with a userId
    target_id: str | None = None
    keyword_id: str | None = None
    source: SourceStrategy | None = None


class PlaceRankRequest(RankCheckRequest):
    place_url: str = Field(min_length=1)


class BlogRankRequest(RankCheckRequest):
    blog_url: str = Field(min_length=1)


class ShoppingRankRequest(RankCheckRequest):
    product_url: str = Field(min_length=1)


class BatchRankRequest(CamelModel):
    keywords: list[Keyword] = Field(min_length=1, max_length=MAX_BATCH_KEYWORDS)
    user_id: str | None = None
    source: SourceStrategy | None = None


class PlaceCompareRequest(BatchRankRequest):
    place_url: str = Field(min_length=1)


class BlogAnalyzeRequest(BatchRankRequest):
    blog_url: str = Field(min_length=1)


class MainKeywordRequest(CamelModel):
    place_url: str = Field(min_length=1)
    user_id: str | None = None
