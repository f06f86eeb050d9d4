"""Unit tests for the rendered-page HTML parsers."""
from naver_rank.infrastructure.sources.parsers import (
    parse_blog_results,
    parse_place_keywords,
    parse_place_listing,
    parse_shopping_results,
)

PLACE_LISTING = """
<ul>
  <li class="UEzoS"><a href="/restaurant/111/home"><span class="TYaxT">Cafe Alpha</span></a></li>
  <li class="UEzoS"><a href="https://ad.example.com/click">Sponsored</a></li>
  <li class="UEzoS"><a href="/place/222?entry=pll"><span class="TYaxT">Beta   Bistro</span></a></li>
  <li class="UEzoS"><a href="/restaurant/111/home"><span class="TYaxT">Cafe Alpha</span></a></li>
  <li class="UEzoS"><a href="/restaurant/333">Gamma Grill</a></li>
</ul>
"""

BLOG_PAGE = """
<div class="total_wrap">
  <a class="title_link" href="https://blog.naver.com/writer/2231">First <b>post</b></a>
  <a class="title_link" href="https://blog.naver.com/writer/2231">First post again</a>
  <a class="title_link" href="https://cafe.naver.com/club/1">Cafe article</a>
  <a class="title_link" href="https://m.blog.naver.com/other/77">Second post</a>
</div>
"""

SHOPPING_PAGE = """
<div class="product_item__a1">
  <a href="https://smartstore.naver.com/shop/products/555">
    <div class="product_title__b2">Wireless Mouse</div>
  </a>
</div>
<div class="product_item__a1">
  <a href="https://shopping.naver.com/product-gate?nvMid=777">
    <strong>Keyboard</strong>
  </a>
</div>
<div class="product_item__a1"><span>No link here</span></div>
"""


class TestParsePlaceListing:
    def test_rows_in_page_order(self) -> None:
        candidates = parse_place_listing(PLACE_LISTING)

        assert [c.source_id for c in candidates] == ["111", "222", "333"]
        assert [c.title for c in candidates] == ["Cafe Alpha", "Beta Bistro", "Gamma Grill"]

    def test_empty_page(self) -> None:
        assert parse_place_listing("<html><body></body></html>") == []


class TestParseBlogResults:
    def test_post_links_are_deduplicated(self) -> None:
        candidates = parse_blog_results(BLOG_PAGE)

        assert [c.link for c in candidates] == [
            "https://blog.naver.com/writer/2231",
            "https://m.blog.naver.com/other/77",
        ]
        assert candidates[0].title == "First post"


class TestParseShoppingResults:
    def test_product_cards(self) -> None:
        candidates = parse_shopping_results(SHOPPING_PAGE)

        assert [c.source_id for c in candidates] == ["555", "777"]
        assert candidates[0].title == "Wireless Mouse"
        assert candidates[1].title == "Keyboard"

    def test_long_titles_are_truncated(self) -> None:
        html = (
            '<div class="product_item__x"><a href="https://smartstore.naver.com/s/products/1">'
            f'<div class="product_title__y">{"A" * 150}</div></a></div>'
        )
        assert len(parse_shopping_results(html)[0].title) == 100


class TestParsePlaceKeywords:
    def test_filters_and_deduplicates(self) -> None:
        html = """
        <a class="tag">파스타</a>
        <a class="tag">파스타</a>
        <a class="tag">x</a>
        <a class="tag">이 문장은 키워드로 쓰기에는 너무 길어서 제외된다</a>
        <span class="keyword_item">데이트</span>
        """
        assert parse_place_keywords(html) == ["파스타", "데이트"]
