import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from naver_rank.application.interfaces.balance_service import (
    BalanceCheck,
    BalanceService,
    DebitResult,
)
from naver_rank.infrastructure.database.models import AccountModel, PointHistoryModel

logger = structlog.get_logger(__name__)


class SqlAlchemyBalanceService(BalanceService):
    """
    Point ledger backed by the ``accounts`` and ``point_history`` tables.

    Every call opens its own session so a debit commits independently of
    whatever request it belongs to. Database errors fail closed.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def check_sufficient(self, account_id: str, cost: int) -> BalanceCheck:
        try:
            async with self._session_factory() as session:
                account = await session.get(AccountModel, account_id)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("balance_check_failed", account_id=account_id, error=str(exc))
            return BalanceCheck(
                success=False,
                sufficient=False,
                error="Could not read the point balance.",
            )

        if account is None:
            return BalanceCheck(
                success=False,
                sufficient=False,
                error="Account not found.",
            )
        return BalanceCheck(
            success=True,
            sufficient=account.points >= cost,
            current_balance=account.points,
        )

    async def debit(self, account_id: str, cost: int, memo: str) -> DebitResult:
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    select(AccountModel)
                    .where(AccountModel.id == account_id)
                    .with_for_update()
                )
                account = result.scalar_one_or_none()
                if account is None:
                    return DebitResult(success=False, error="Account not found.")
                if account.points < cost:
                    return DebitResult(
                        success=False,
                        error=f"Insufficient points (required: {cost}P, current: {account.points}P).",
                    )

                account.points -= cost
                session.add(
                    PointHistoryModel(
                        account_id=account_id,
                        delta=-cost,
                        balance_after=account.points,
                        memo=memo,
                    )
                )
        except (SQLAlchemyError, OSError) as exc:
            logger.error("points_debit_db_failed", account_id=account_id, error=str(exc))
            return DebitResult(success=False, error="Could not debit points.")

        logger.info("points_debited", account_id=account_id, cost=cost, memo=memo)
        return DebitResult(success=True, debited=cost)


class NoOpBalanceService(BalanceService):
    """Used when no database is configured: every account can afford everything."""

    async def check_sufficient(self, account_id: str, cost: int) -> BalanceCheck:
        return BalanceCheck(success=True, sufficient=True, skipped=True)

    async def debit(self, account_id: str, cost: int, memo: str) -> DebitResult:
        logger.debug("noop_debit_skipped", account_id=account_id, cost=cost)
        return DebitResult(success=True, skipped=True)
