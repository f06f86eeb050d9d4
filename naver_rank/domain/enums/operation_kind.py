from enum import Enum


class OperationKind(str, Enum):
    """Billable operations, each with its own entry in the fee schedule."""

    PLACE_CHECK = "place-check"
    PLACE_CHECK_CHEAP = "place-check-cheap"
    BLOG_CHECK = "blog-check"
    SHOPPING_CHECK = "shopping-check"
    SHOPPING_CHECK_CHEAP = "shopping-check-cheap"
    KEYWORD_VOLUME = "keyword-volume"
    MAIN_KEYWORD_EXTRACT = "main-keyword-extract"

    @property
    def label(self) -> str:
        """Human-readable prefix used in point-history memos."""
        return {
            OperationKind.PLACE_CHECK: "Place rank check",
            OperationKind.PLACE_CHECK_CHEAP: "Place single rank check",
            OperationKind.BLOG_CHECK: "Blog rank check",
            OperationKind.SHOPPING_CHECK: "Shopping rank check",
            OperationKind.SHOPPING_CHECK_CHEAP: "Shopping single rank check",
            OperationKind.KEYWORD_VOLUME: "Keyword volume lookup",
            OperationKind.MAIN_KEYWORD_EXTRACT: "Main keyword lookup",
        }[self]
