import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from naver_rank.application.interfaces.rank_history_store import (
    HistoryAppendResult,
    RankHistoryRecord,
    RankHistoryStore,
    RankObservation,
)
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.infrastructure.database.models import RankHistoryModel

logger = structlog.get_logger(__name__)


class SqlAlchemyRankHistoryStore(RankHistoryStore):
    """SQLAlchemy-backed implementation of RankHistoryStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append_observation(
        self,
        account_id: str,
        target_id: str,
        keyword_id: str,
        observation: RankObservation,
    ) -> HistoryAppendResult:
        model = RankHistoryModel(
            account_id=account_id,
            content_type=observation.content_type.value,
            target_id=target_id,
            keyword_id=keyword_id,
            keyword=observation.keyword,
            target_url=observation.target_url,
            rank=observation.rank,
            page=observation.page,
            search_type=observation.search_type,
            total_results=observation.total_results,
            found=observation.found,
            error_message=observation.error_message,
            searched_at=observation.searched_at,
        )
        try:
            async with self._session_factory() as session, session.begin():
                session.add(model)
                await session.flush()
                history_id = model.id
        except (SQLAlchemyError, OSError) as exc:
            logger.error(
                "rank_history_write_failed",
                account_id=account_id,
                target_id=target_id,
                error=str(exc),
            )
            return HistoryAppendResult(success=False, error=str(exc))

        logger.info(
            "rank_history_appended",
            history_id=str(history_id),
            keyword=observation.keyword,
            rank=observation.rank,
        )
        return HistoryAppendResult(success=True, history_id=history_id)

    async def list_observations(
        self,
        *,
        account_id: str,
        content_type: ContentType,
        target_id: str,
        keyword_id: str,
        limit: int = 30,
    ) -> list[RankHistoryRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(RankHistoryModel)
                .where(
                    RankHistoryModel.account_id == account_id,
                    RankHistoryModel.content_type == content_type.value,
                    RankHistoryModel.target_id == target_id,
                    RankHistoryModel.keyword_id == keyword_id,
                )
                .order_by(RankHistoryModel.searched_at.desc())
                .limit(limit)
            )
            models = result.scalars().all()

        return [
            RankHistoryRecord(
                id=m.id,
                account_id=m.account_id,
                target_id=m.target_id,
                keyword_id=m.keyword_id,
                observation=RankObservation(
                    content_type=ContentType(m.content_type),
                    keyword=m.keyword,
                    target_url=m.target_url,
                    rank=m.rank,
                    page=m.page,
                    total_results=m.total_results,
                    searched_at=m.searched_at,
                    found=m.found,
                    error_message=m.error_message,
                ),
            )
            for m in models
        ]


class NoOpRankHistoryStore(RankHistoryStore):
    """Discards observations. Used when no database is configured."""

    async def append_observation(
        self,
        account_id: str,
        target_id: str,
        keyword_id: str,
        observation: RankObservation,
    ) -> HistoryAppendResult:
        logger.debug("noop_rank_history_discarded", keyword=observation.keyword)
        return HistoryAppendResult(success=True, skipped=True)

    async def list_observations(
        self,
        *,
        account_id: str,
        content_type: ContentType,
        target_id: str,
        keyword_id: str,
        limit: int = 30,
    ) -> list[RankHistoryRecord]:
        return []
