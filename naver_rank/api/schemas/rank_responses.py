from datetime import datetime
from typing import Any
from uuid import UUID

from naver_rank.api.schemas.base import CamelModel
from naver_rank.domain.entities.rank_result import RankResult


class FoundPlace(CamelModel):
    place_id: str
    name: str
    href: str
    rank: int


class FoundPost(CamelModel):
    blog_id: str
    log_no: str
    title: str
    href: str
    rank: int


class FoundProduct(CamelModel):
    product_id: str
    title: str
    link: str
    rank: int
    price: str | None = None
    mall_name: str | None = None


class RankCheckResponse(CamelModel):
    success: bool
    keyword: str
    rank: int
    total_results: int = 0
    method: str | None = None
    checked_at: datetime
    message: str | None = None
    error: str | None = None
    points_deducted: int | None = None
    history_id: UUID | None = None


class PlaceRankResponse(RankCheckResponse):
    place_url: str
    found_place: FoundPlace | None = None


class BlogRankResponse(RankCheckResponse):
    blog_url: str
    found_post: FoundPost | None = None


class ShoppingRankResponse(RankCheckResponse):
    product_url: str
    found_product: FoundProduct | None = None


class PlaceCompareResponse(CamelModel):
    success: bool = True
    place_url: str
    total_keywords: int
    results: list[PlaceRankResponse]
    points_deducted: int
    checked_at: datetime


class BlogAnalyzeResponse(CamelModel):
    success: bool = True
    blog_url: str
    total_keywords: int
    results: list[BlogRankResponse]
    points_deducted: int
    checked_at: datetime


class MainKeywordResponse(CamelModel):
    success: bool
    place_url: str
    keywords: list[str]
    checked_at: datetime
    message: str | None = None
    error: str | None = None
    points_deducted: int | None = None


def rank_fields(result: RankResult) -> dict[str, Any]:
    """Fields shared by every single-keyword rank response."""
    return {
        "success": result.success,
        "keyword": result.keyword,
        "rank": result.rank,
        "total_results": result.total_examined,
        "method": result.method,
        "checked_at": result.checked_at,
        "error": result.error,
        "message": result.error,
    }


def found_place(result: RankResult) -> FoundPlace | None:
    if result.match is None:
        return None
    return FoundPlace(
        place_id=result.match.identifier,
        name=result.match.title,
        href=result.match.link,
        rank=result.match.rank,
    )


def found_post(result: RankResult) -> FoundPost | None:
    if result.match is None:
        return None
    blog_id, _, log_no = result.match.identifier.partition("/")
    return FoundPost(
        blog_id=blog_id,
        log_no=log_no,
        title=result.match.title,
        href=result.match.link,
        rank=result.match.rank,
    )


def found_product(result: RankResult) -> FoundProduct | None:
    if result.match is None:
        return None
    price = result.match.extra.get("price")
    return FoundProduct(
        product_id=result.match.identifier,
        title=result.match.title,
        link=result.match.link,
        rank=result.match.rank,
        price=str(price) if price is not None else None,
        mall_name=result.match.extra.get("mallName"),
    )
