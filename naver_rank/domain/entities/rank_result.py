import math
from dataclasses import dataclass, field
from datetime import datetime, timezone

from naver_rank.domain.entities.candidate import Candidate
from naver_rank.domain.enums.content_type import ContentType

NOT_FOUND = -1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RankResult:
    """
    Outcome of one rank resolution.

    ``success`` describes the resolution process, not the lookup: a target
    that is absent from the first ``max_depth`` results is a successful
    resolution with ``rank == NOT_FOUND``.
    """

    success: bool
    content_type: ContentType
    keyword: str
    target_url: str
    rank: int = NOT_FOUND
    total_examined: int = 0
    match: Candidate | None = None
    method: str | None = None
    error: str | None = None
    checked_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.rank > 0:
            if self.match is None or self.rank > self.total_examined:
                raise ValueError("A positive rank requires a match within the examined candidates.")
        elif self.rank != NOT_FOUND:
            raise ValueError(f"Rank must be positive or {NOT_FOUND}, got {self.rank}.")
        elif self.match is not None:
            raise ValueError("A not-found result cannot carry a match.")

    @property
    def found(self) -> bool:
        return self.rank != NOT_FOUND

    @classmethod
    def failure(
        cls,
        *,
        content_type: ContentType,
        keyword: str,
        target_url: str,
        error: str,
        method: str | None = None,
    ) -> "RankResult":
        return cls(
            success=False,
            content_type=content_type,
            keyword=keyword,
            target_url=target_url,
            method=method,
            error=error,
        )


def page_of(rank: int, page_size: int) -> int | None:
    """Result page (1-based) a rank falls on, or None for an unranked result."""
    if rank <= 0:
        return None
    return math.ceil(rank / page_size)
