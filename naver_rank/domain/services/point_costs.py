from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

from naver_rank.domain.enums.operation_kind import OperationKind


class _CostSettings(Protocol):
    cost_place_check: int
    cost_place_check_cheap: int
    cost_blog_check: int
    cost_shopping_check: int
    cost_shopping_check_cheap: int
    cost_keyword_volume: int
    cost_main_keyword_extract: int


@dataclass(frozen=True)
class PointCostSchedule:
    """
    Point price of every billable operation.

    Built once from configuration at start-up and injected wherever a
    price is needed; an all-zero schedule makes the service free to use.
    """

    costs: Mapping[OperationKind, int]

    def __post_init__(self) -> None:
        missing = [kind.value for kind in OperationKind if kind not in self.costs]
        if missing:
            raise ValueError(f"No point cost configured for: {', '.join(missing)}")
        negative = [kind.value for kind, cost in self.costs.items() if cost < 0]
        if negative:
            raise ValueError(f"Point costs must be non-negative: {', '.join(negative)}")
        object.__setattr__(self, "costs", MappingProxyType(dict(self.costs)))

    def cost_of(self, kind: OperationKind) -> int:
        return self.costs[kind]

    def batch_cost(self, kind: OperationKind, count: int) -> int:
        """Cost of ``count`` attempts, independent of how many succeed."""
        return self.costs[kind] * count

    @classmethod
    def from_settings(cls, settings: _CostSettings) -> "PointCostSchedule":
        return cls(
            costs={
                OperationKind.PLACE_CHECK: settings.cost_place_check,
                OperationKind.PLACE_CHECK_CHEAP: settings.cost_place_check_cheap,
                OperationKind.BLOG_CHECK: settings.cost_blog_check,
                OperationKind.SHOPPING_CHECK: settings.cost_shopping_check,
                OperationKind.SHOPPING_CHECK_CHEAP: settings.cost_shopping_check_cheap,
                OperationKind.KEYWORD_VOLUME: settings.cost_keyword_volume,
                OperationKind.MAIN_KEYWORD_EXTRACT: settings.cost_main_keyword_extract,
            }
        )
