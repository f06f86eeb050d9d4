"""
Canonical identities of the things being ranked.

A target reference only exists once its identifier has been extracted;
a URL that cannot be parsed never produces a half-filled reference.
"""
from dataclasses import dataclass, field
from typing import ClassVar, Union

from naver_rank.domain.enums.content_type import ContentType


@dataclass(frozen=True)
class PlaceTarget:
    place_id: str
    raw_url: str = field(default="", compare=False)

    content_type: ClassVar[ContentType] = ContentType.PLACE

    @property
    def canonical_id(self) -> str:
        return self.place_id


@dataclass(frozen=True)
class BlogPostTarget:
    handle: str
    post_number: str
    raw_url: str = field(default="", compare=False)

    content_type: ClassVar[ContentType] = ContentType.BLOG

    @property
    def canonical_id(self) -> str:
        return f"{self.handle}/{self.post_number}"


@dataclass(frozen=True)
class ProductTarget:
    product_id: str
    raw_url: str = field(default="", compare=False)

    content_type: ClassVar[ContentType] = ContentType.SHOPPING

    @property
    def canonical_id(self) -> str:
        return self.product_id


TargetReference = Union[PlaceTarget, BlogPostTarget, ProductTarget]
