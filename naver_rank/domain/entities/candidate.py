from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawCandidate:
    """One search-result entry exactly as a candidate source saw it."""

    link: str
    title: str = ""
    # Identifier reported by the source itself (e.g. the shopping API's productId)
    source_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def emission_key(self) -> tuple[str, str | None]:
        return (self.link, self.source_id)


@dataclass
class Candidate:
    """A de-duplicated candidate with the rank at which it was first seen."""

    identifier: str
    rank: int
    title: str = ""
    link: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
