from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from naver_rank.domain.enums.content_type import ContentType


@dataclass(frozen=True)
class RankObservation:
    """What gets written to history for one resolution."""

    content_type: ContentType
    keyword: str
    target_url: str
    rank: int
    page: int | None
    total_results: int
    searched_at: datetime
    found: dict[str, Any] | None = None
    error_message: str | None = None

    @property
    def search_type(self) -> str:
        return self.content_type.search_type


@dataclass(frozen=True)
class HistoryAppendResult:
    success: bool
    history_id: UUID | None = None
    skipped: bool = False
    error: str | None = None


@dataclass
class RankHistoryRecord:
    id: UUID
    account_id: str
    target_id: str
    keyword_id: str
    observation: RankObservation


class RankHistoryStore(ABC):
    """Port for the per-account rank observation log. Audit only, never read by ranking."""

    @abstractmethod
    async def append_observation(
        self,
        account_id: str,
        target_id: str,
        keyword_id: str,
        observation: RankObservation,
    ) -> HistoryAppendResult:
        ...

    @abstractmethod
    async def list_observations(
        self,
        *,
        account_id: str,
        content_type: ContentType,
        target_id: str,
        keyword_id: str,
        limit: int = 30,
    ) -> list[RankHistoryRecord]:
        """Newest first."""
        ...
