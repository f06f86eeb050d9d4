from enum import Enum


class ContentType(str, Enum):
    """Search surfaces a target can be ranked on."""

    PLACE = "place"
    BLOG = "blog"
    SHOPPING = "shopping"

    @property
    def search_type(self) -> str:
        """Label stored with every history observation."""
        return {
            ContentType.PLACE: "map_mobile",
            ContentType.BLOG: "blog",
            ContentType.SHOPPING: "shopping",
        }[self]


class SourceStrategy(str, Enum):
    """How candidates are pulled from Naver."""

    BROWSER = "browser"
    API = "api"
