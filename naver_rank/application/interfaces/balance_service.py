from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class BalanceCheck:
    success: bool
    sufficient: bool
    current_balance: int | None = None
    error: str | None = None
    skipped: bool = False


@dataclass(frozen=True)
class DebitResult:
    success: bool
    debited: int | None = None
    error: str | None = None
    skipped: bool = False


class BalanceService(ABC):
    """
    Port for the point-balance ledger.

    Implementations fail closed: if the backing store cannot be reached,
    ``check_sufficient`` reports ``success=False`` and the action is denied.
    """

    @abstractmethod
    async def check_sufficient(self, account_id: str, cost: int) -> BalanceCheck:
        ...

    @abstractmethod
    async def debit(self, account_id: str, cost: int, memo: str) -> DebitResult:
        ...
