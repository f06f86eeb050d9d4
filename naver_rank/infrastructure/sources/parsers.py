"""
HTML parsing for rendered Naver search pages.

Pure functions over page HTML so the extraction rules can be tested with
fixture markup. Each returns entries in page order with identifiers already
resolved; entries whose links do not parse are dropped.
"""
from bs4 import BeautifulSoup, Tag

from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.services.identifier_extractor import (
    IdentifierExtractionError,
    extract_target,
)

PLACE_ITEM_SELECTOR = "li.UEzoS"
PLACE_NAME_SELECTOR = ".TYaxT, span"
PLACE_LINK_SELECTOR = 'a[href*="/restaurant/"], a[href*="/place/"]'

BLOG_LINK_SELECTOR = ", ".join(
    [
        ".api_txt_lines.total_tit",
        ".title_link",
        ".sh_blog_title",
        '.total_wrap a[href*="blog.naver.com"]',
    ]
)

SHOPPING_ITEM_SELECTOR = ", ".join(
    [
        '[class*="product_item"]',
        '[class*="item__inner"]',
        '[class*="basicList_item"]',
        ".product_info_area a",
        'a[href*="shopping.naver.com/product"]',
        'a[href*="smartstore.naver.com"][href*="products"]',
    ]
)
SHOPPING_TITLE_SELECTOR = '[class*="title"], [class*="name"], .product_title, strong'

PLACE_KEYWORD_SELECTOR = '[class*="keyword"], [class*="tag"], .chip, .tag'

MAX_PLACE_NAME_LENGTH = 30
MAX_PRODUCT_TITLE_LENGTH = 100


def _text(el: Tag) -> str:
    return " ".join(el.get_text(" ", strip=True).split())


def _identifier(content_type: ContentType, href: str) -> str | None:
    if not href:
        return None
    try:
        return extract_target(content_type, href).canonical_id
    except IdentifierExtractionError:
        return None


def parse_place_listing(html: str) -> list[RawCandidate]:
    """Business rows of the mobile place listing (``li.UEzoS``)."""
    soup = BeautifulSoup(html, "html.parser")
    results: list[RawCandidate] = []
    seen: set[str] = set()

    for item in soup.select(PLACE_ITEM_SELECTOR):
        place_id = None
        href = ""
        for anchor in item.find_all("a"):
            href = anchor.get("href") or ""
            place_id = _identifier(ContentType.PLACE, href)
            if place_id:
                break
        if not place_id or place_id in seen:
            continue
        seen.add(place_id)

        name_el = item.select_one(PLACE_NAME_SELECTOR)
        name = _text(name_el) if name_el else ""
        if not name:
            name = _text(item)[:MAX_PLACE_NAME_LENGTH]

        results.append(RawCandidate(link=href, title=name, source_id=place_id))
    return results


def parse_blog_results(html: str) -> list[RawCandidate]:
    """Post links of one blog search results page."""
    soup = BeautifulSoup(html, "html.parser")
    results: list[RawCandidate] = []
    seen: set[str] = set()

    for el in soup.select(BLOG_LINK_SELECTOR):
        href = el.get("href") or ""
        post_key = _identifier(ContentType.BLOG, href)
        if not post_key or post_key in seen:
            continue
        seen.add(post_key)
        results.append(RawCandidate(link=href, title=_text(el)))
    return results


def parse_shopping_results(html: str) -> list[RawCandidate]:
    """Product cards of the shopping search page."""
    soup = BeautifulSoup(html, "html.parser")
    results: list[RawCandidate] = []
    seen: set[str] = set()

    for el in soup.select(SHOPPING_ITEM_SELECTOR):
        link_el = el if el.name == "a" else el.select_one('a[href*="product"]')
        if link_el is None:
            continue
        href = link_el.get("href") or ""
        product_id = _identifier(ContentType.SHOPPING, href)
        if not product_id or product_id in seen:
            continue
        seen.add(product_id)

        title_el = el.select_one(SHOPPING_TITLE_SELECTOR) or el
        title = _text(title_el)[:MAX_PRODUCT_TITLE_LENGTH]
        results.append(RawCandidate(link=href, title=title, source_id=product_id))
    return results


def parse_place_keywords(html: str) -> list[str]:
    """Keyword and tag chip texts of a place detail page, de-duplicated in page order."""
    soup = BeautifulSoup(html, "html.parser")
    keywords: list[str] = []
    for el in soup.select(PLACE_KEYWORD_SELECTOR):
        text = _text(el)
        if 1 < len(text) < 20 and text not in keywords:
            keywords.append(text)
    return keywords
