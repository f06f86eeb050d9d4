"""Unit tests for the RankResult value and the point cost schedule."""
import pytest

from naver_rank.domain.entities.candidate import Candidate
from naver_rank.domain.entities.rank_result import NOT_FOUND, RankResult, page_of
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.enums.operation_kind import OperationKind
from naver_rank.domain.services.point_costs import PointCostSchedule


def _result(**overrides) -> RankResult:  # type: ignore[no-untyped-def]
    fields = dict(
        success=True,
        content_type=ContentType.PLACE,
        keyword="강남 맛집",
        target_url="https://m.place.naver.com/restaurant/1",
    )
    fields.update(overrides)
    return RankResult(**fields)


class TestRankResult:
    def test_not_found_by_default(self) -> None:
        result = _result()
        assert result.rank == NOT_FOUND
        assert not result.found

    def test_found_result(self) -> None:
        match = Candidate(identifier="1", rank=3)
        result = _result(rank=3, total_examined=10, match=match)
        assert result.found

    def test_positive_rank_without_match_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            _result(rank=2, total_examined=5)

    def test_rank_beyond_examined_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            _result(rank=6, total_examined=5, match=Candidate(identifier="1", rank=6))

    def test_not_found_with_match_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            _result(match=Candidate(identifier="1", rank=1))

    def test_zero_rank_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            _result(rank=0)

    def test_failure_factory(self) -> None:
        result = RankResult.failure(
            content_type=ContentType.BLOG,
            keyword="k",
            target_url="bad",
            error="nope",
        )
        assert not result.success
        assert result.rank == NOT_FOUND
        assert result.error == "nope"


class TestPageOf:
    @pytest.mark.parametrize(
        "rank, page_size, expected",
        [(1, 10, 1), (10, 10, 1), (11, 10, 2), (40, 40, 1), (41, 40, 2), (300, 10, 30)],
    )
    def test_page_boundaries(self, rank: int, page_size: int, expected: int) -> None:
        assert page_of(rank, page_size) == expected

    def test_unranked_has_no_page(self) -> None:
        assert page_of(NOT_FOUND, 10) is None


class _Settings:
    cost_place_check = 100
    cost_place_check_cheap = 50
    cost_blog_check = 80
    cost_shopping_check = 100
    cost_shopping_check_cheap = 50
    cost_keyword_volume = 30
    cost_main_keyword_extract = 50


class TestPointCostSchedule:
    def test_from_settings(self) -> None:
        schedule = PointCostSchedule.from_settings(_Settings())
        assert schedule.cost_of(OperationKind.BLOG_CHECK) == 80
        assert schedule.cost_of(OperationKind.MAIN_KEYWORD_EXTRACT) == 50

    def test_batch_cost_counts_attempts(self) -> None:
        schedule = PointCostSchedule.from_settings(_Settings())
        assert schedule.batch_cost(OperationKind.PLACE_CHECK, 3) == 300

    def test_all_zero_schedule_is_valid(self) -> None:
        schedule = PointCostSchedule(costs={kind: 0 for kind in OperationKind})
        assert schedule.batch_cost(OperationKind.BLOG_CHECK, 5) == 0

    def test_missing_cost_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="keyword-volume"):
            PointCostSchedule(
                costs={k: 1 for k in OperationKind if k is not OperationKind.KEYWORD_VOLUME}
            )

    def test_negative_cost_is_rejected(self) -> None:
        costs = {kind: 10 for kind in OperationKind}
        costs[OperationKind.PLACE_CHECK] = -1
        with pytest.raises(ValueError):
            PointCostSchedule(costs=costs)

    def test_costs_are_read_only(self) -> None:
        schedule = PointCostSchedule(costs={kind: 1 for kind in OperationKind})
        with pytest.raises(TypeError):
            schedule.costs[OperationKind.PLACE_CHECK] = 5  # type: ignore[index]
