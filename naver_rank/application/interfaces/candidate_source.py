from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy


class CandidateSourceUnavailableError(Exception):
    """The very first fetch against the search surface failed."""


class UnsupportedSourceError(Exception):
    def __init__(self, content_type: ContentType, strategy: SourceStrategy) -> None:
        self.content_type = content_type
        self.strategy = strategy
        super().__init__(
            f"The '{strategy.value}' source does not support {content_type.value} rank checks."
        )


class CandidateSource(ABC):
    """
    Port for the ordered stream of search results a rank is read from.

    ``stream`` yields batches (one page load, scroll step or API page each)
    in search-surface order and is finite. Consumers may stop iterating at
    any point; no further fetches happen after that.
    """

    method: str = ""

    @abstractmethod
    def supports(self, content_type: ContentType) -> bool:
        ...

    @abstractmethod
    def stream(
        self, content_type: ContentType, keyword: str, *, max_depth: int
    ) -> AsyncIterator[list[RawCandidate]]:
        ...


class CandidateSourceProvider(ABC):
    """Port for picking the candidate source used for a content type."""

    @abstractmethod
    def get(
        self, content_type: ContentType, strategy: SourceStrategy | None = None
    ) -> CandidateSource:
        """Raise UnsupportedSourceError if the strategy cannot serve the content type."""
        ...
