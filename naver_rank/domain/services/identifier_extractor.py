"""
Maps user-supplied URLs and search-result links to canonical identifiers.

Pure functions, no I/O. The same parsing is applied to the target URL and
to every candidate link so both sides of a comparison agree on identity.
"""
import html
import re
from urllib.parse import parse_qsl, unquote, urlsplit

from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.entities.target_reference import (
    BlogPostTarget,
    PlaceTarget,
    ProductTarget,
    TargetReference,
)
from naver_rank.domain.enums.content_type import ContentType

_PLACE_PATH = re.compile(r"/(?:restaurant|place|entry/place)/(\d+)", re.IGNORECASE)
_PLACE_ENCODED_PATH = re.compile(r"%2F(?:restaurant|place)%2F(\d+)", re.IGNORECASE)
_BARE_ID = re.compile(r"^\d+$")

_BLOG_PATH = re.compile(r"blog\.naver\.com/([^/?#&]+)/(\d+)", re.IGNORECASE)

# Tried in this order, first match wins
_PRODUCT_PATTERNS = (
    re.compile(r"products?/(\d+)", re.IGNORECASE),
    re.compile(r"nvMid=(\d+)", re.IGNORECASE),
    re.compile(r"productId=(\d+)", re.IGNORECASE),
)


class IdentifierExtractionError(Exception):
    """Raised when a URL matches none of the patterns for its content type."""

    def __init__(self, content_type: ContentType, raw_url: str) -> None:
        self.content_type = content_type
        self.raw_url = raw_url
        super().__init__(_FAILURE_MESSAGES[content_type])


_FAILURE_MESSAGES: dict[ContentType, str] = {
    ContentType.PLACE: "Cannot extract a place ID from the URL.",
    ContentType.BLOG: (
        "Cannot extract a blog ID and post number from the URL "
        "(expected blog.naver.com/<blogId>/<logNo>)."
    ),
    ContentType.SHOPPING: "Cannot extract a product ID from the URL.",
}


def _normalise_link(link: str) -> list[str]:
    """The link itself plus its URL-decoded forms (result links are often double-encoded)."""
    unescaped = html.unescape(link.strip())
    forms = [unescaped]
    decoded = unquote(unescaped)
    if decoded != unescaped:
        forms.append(decoded)
        if "%2F" in decoded.upper():
            forms.append(unquote(decoded))
    return forms


def _place_id(raw: str) -> str | None:
    stripped = raw.strip()
    if _BARE_ID.match(stripped):
        return stripped

    # The link's own path wins over ids embedded in its query string
    for form in _normalise_link(stripped):
        m = _PLACE_PATH.search(form)
        if m:
            return m.group(1)
    m = _PLACE_ENCODED_PATH.search(html.unescape(stripped))
    return m.group(1) if m else None


def _blog_post(raw: str) -> tuple[str, str] | None:
    for form in _normalise_link(raw):
        m = _BLOG_PATH.search(form)
        if m:
            return m.group(1).lower(), m.group(2)

        params = {key.lower(): value for key, value in parse_qsl(urlsplit(form).query)}
        handle = params.get("blogid")
        post_number = params.get("logno")
        if handle and post_number and post_number.isdigit():
            return handle.lower(), post_number
    return None


def _product_id(raw: str) -> str | None:
    for pattern in _PRODUCT_PATTERNS:
        for form in _normalise_link(raw):
            m = pattern.search(form)
            if m:
                return m.group(1)
    return None


def extract_target(content_type: ContentType, raw_url: str) -> TargetReference:
    """Resolve ``raw_url`` to a target reference or raise IdentifierExtractionError."""
    raw_url = (raw_url or "").strip()

    if content_type is ContentType.PLACE:
        place_id = _place_id(raw_url) if raw_url else None
        if place_id:
            return PlaceTarget(place_id=place_id, raw_url=raw_url)

    elif content_type is ContentType.BLOG:
        post = _blog_post(raw_url) if raw_url else None
        if post:
            return BlogPostTarget(handle=post[0], post_number=post[1], raw_url=raw_url)

    elif content_type is ContentType.SHOPPING:
        product_id = _product_id(raw_url) if raw_url else None
        if product_id:
            return ProductTarget(product_id=product_id, raw_url=raw_url)

    raise IdentifierExtractionError(content_type, raw_url)


def candidate_identifier(content_type: ContentType, candidate: RawCandidate) -> str | None:
    """Canonical identifier of a search-result entry, or None if it cannot be parsed."""
    if candidate.source_id and content_type is not ContentType.BLOG:
        source_id = candidate.source_id.strip()
        if _BARE_ID.match(source_id):
            return source_id

    if not candidate.link:
        return None
    try:
        return extract_target(content_type, candidate.link).canonical_id
    except IdentifierExtractionError:
        return None
