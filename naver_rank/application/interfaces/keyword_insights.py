from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date


class KeywordInsightsUnavailableError(Exception):
    """Keyword statistics could not be produced (missing API credentials, upstream failure)."""


@dataclass(frozen=True)
class TrendPoint:
    period: date
    ratio: float


class KeywordInsightsProvider(ABC):
    """Port for keyword-level statistics (result totals, search trends)."""

    @abstractmethod
    async def total_results(self, keyword: str) -> int:
        ...

    @abstractmethod
    async def daily_trend(self, keyword: str, start: date, end: date) -> list[TrendPoint]:
        ...


class MainKeywordSource(ABC):
    """Port for reading the representative keywords a place page advertises."""

    @abstractmethod
    async def main_keywords(self, place_url: str) -> list[str]:
        ...
