from dataclasses import dataclass

from naver_rank.application.interfaces.rank_history_store import (
    RankHistoryRecord,
    RankHistoryStore,
)
from naver_rank.domain.enums.content_type import ContentType

DEFAULT_HISTORY_LIMIT = 30


@dataclass
class GetRankHistoryInput:
    account_id: str
    content_type: ContentType
    target_id: str
    keyword_id: str
    limit: int = DEFAULT_HISTORY_LIMIT


@dataclass
class GetRankHistoryOutput:
    content_type: ContentType
    history: list[RankHistoryRecord]


class GetRankHistory:
    """Use case: Retrieve stored rank observations for one target/keyword pair, newest first."""

    def __init__(self, history: RankHistoryStore) -> None:
        self._history = history

    async def execute(self, input_data: GetRankHistoryInput) -> GetRankHistoryOutput:
        records = await self._history.list_observations(
            account_id=input_data.account_id,
            content_type=input_data.content_type,
            target_id=input_data.target_id,
            keyword_id=input_data.keyword_id,
            limit=input_data.limit,
        )
        return GetRankHistoryOutput(content_type=input_data.content_type, history=records)
