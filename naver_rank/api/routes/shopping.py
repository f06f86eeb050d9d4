from fastapi import APIRouter, Depends

from naver_rank.api.dependencies import get_check_rank_use_case
from naver_rank.api.schemas.rank_requests import ShoppingRankRequest
from naver_rank.api.schemas.rank_responses import (
    ShoppingRankResponse,
    found_product,
    rank_fields,
)
from naver_rank.application.use_cases.check_rank import CheckRank, CheckRankInput
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.enums.operation_kind import OperationKind

router = APIRouter(prefix="/api/shopping", tags=["shopping"])


async def _check(
    body: ShoppingRankRequest, operation: OperationKind, use_case: CheckRank
) -> ShoppingRankResponse:
    output = await use_case.execute(
        CheckRankInput(
            content_type=ContentType.SHOPPING,
            operation=operation,
            keyword=body.keyword,
            target_url=body.product_url,
            account_id=body.user_id,
            target_id=body.target_id,
            keyword_id=body.keyword_id,
            strategy=body.source,
        )
    )
    return ShoppingRankResponse(
        **rank_fields(output.result),
        product_url=body.product_url,
        found_product=found_product(output.result),
        points_deducted=output.points_deducted,
        history_id=output.history_id,
    )


@router.post("/check-rank", response_model=ShoppingRankResponse, response_model_exclude_none=True)
async def check_shopping_rank(
    body: ShoppingRankRequest,
    use_case: CheckRank = Depends(get_check_rank_use_case),
) -> ShoppingRankResponse:
    return await _check(body, OperationKind.SHOPPING_CHECK, use_case)


@router.post(
    "/check-rank-once", response_model=ShoppingRankResponse, response_model_exclude_none=True
)
async def check_shopping_rank_once(
    body: ShoppingRankRequest,
    use_case: CheckRank = Depends(get_check_rank_use_case),
) -> ShoppingRankResponse:
    return await _check(body, OperationKind.SHOPPING_CHECK_CHEAP, use_case)
