import structlog

from naver_rank.application.interfaces.balance_service import BalanceService

logger = structlog.get_logger(__name__)


class InsufficientPointsError(Exception):
    """The account cannot pay for the requested operation (or its balance could not be read)."""

    def __init__(
        self, required: int, current: int | None = None, message: str | None = None
    ) -> None:
        self.required = required
        self.current = current
        super().__init__(message or f"Insufficient points (required: {required}P).")


class PointsGate:
    """Balance check before work and best-effort debit after it."""

    def __init__(self, balance: BalanceService) -> None:
        self._balance = balance

    async def ensure(self, account_id: str, cost: int) -> None:
        check = await self._balance.check_sufficient(account_id, cost)
        if not check.success or not check.sufficient:
            logger.info(
                "points_insufficient",
                account_id=account_id,
                required=cost,
                current=check.current_balance,
                error=check.error,
            )
            raise InsufficientPointsError(cost, check.current_balance, check.error)

    async def charge(self, account_id: str, cost: int, memo: str) -> int | None:
        """Debit ``cost`` points. Returns the points taken, or None if the debit did not happen."""
        if cost == 0:
            return 0
        try:
            debit = await self._balance.debit(account_id, cost, memo)
        except Exception:
            logger.exception("points_debit_failed", account_id=account_id, cost=cost)
            return None

        if not debit.success:
            logger.warning(
                "points_debit_rejected", account_id=account_id, cost=cost, error=debit.error
            )
            return None
        if debit.skipped:
            return None
        return debit.debited if debit.debited is not None else cost
