from collections.abc import Mapping

from naver_rank.application.interfaces.candidate_source import (
    CandidateSource,
    CandidateSourceProvider,
    UnsupportedSourceError,
)
from naver_rank.domain.enums.content_type import ContentType, SourceStrategy


class NaverCandidateSourceProvider(CandidateSourceProvider):
    """Picks the browser or search-API source for a request, falling back to the configured default."""

    def __init__(
        self,
        sources: Mapping[SourceStrategy, CandidateSource],
        defaults: Mapping[ContentType, SourceStrategy],
    ) -> None:
        self._sources = dict(sources)
        self._defaults = dict(defaults)

    def get(
        self, content_type: ContentType, strategy: SourceStrategy | None = None
    ) -> CandidateSource:
        chosen = strategy or self._defaults.get(content_type, SourceStrategy.BROWSER)
        source = self._sources.get(chosen)
        if source is None or not source.supports(content_type):
            raise UnsupportedSourceError(content_type, chosen)
        return source
