"""Unit tests for target and candidate identifier extraction."""
import pytest

from naver_rank.domain.entities.candidate import RawCandidate
from naver_rank.domain.entities.target_reference import (
    BlogPostTarget,
    PlaceTarget,
    ProductTarget,
)
from naver_rank.domain.enums.content_type import ContentType
from naver_rank.domain.services.identifier_extractor import (
    IdentifierExtractionError,
    candidate_identifier,
    extract_target,
)


class TestPlaceExtraction:
    @pytest.mark.parametrize(
        "url",
        [
            "https://m.place.naver.com/restaurant/12345/home",
            "https://m.place.naver.com/place/12345",
            "https://map.naver.com/p/entry/place/12345?c=15.00",
            "https://m.place.naver.com/RESTAURANT/12345",
        ],
    )
    def test_path_forms_resolve_to_same_id(self, url: str) -> None:
        target = extract_target(ContentType.PLACE, url)
        assert target == PlaceTarget(place_id="12345")
        assert target.raw_url == url

    def test_bare_digits_are_an_id(self) -> None:
        assert extract_target(ContentType.PLACE, "987654").canonical_id == "987654"
        assert extract_target(ContentType.PLACE, " 987654 ").canonical_id == "987654"

    def test_encoded_listing_link(self) -> None:
        link = "/restaurant/list?entry=pll&amp;bk_query=x&amp;url=%2Frestaurant%2F4321%2Fhome"
        assert extract_target(ContentType.PLACE, link).canonical_id == "4321"

    def test_double_encoded_link(self) -> None:
        link = "https://m.place.naver.com/go?to=%252Fplace%252F777%252Fhome"
        assert extract_target(ContentType.PLACE, link).canonical_id == "777"

    def test_own_path_wins_over_encoded_link_in_query(self) -> None:
        url = (
            "https://m.place.naver.com/restaurant/456/home"
            "?ref=https%3A%2F%2Fm.place.naver.com%2Fplace%2F789"
        )
        assert extract_target(ContentType.PLACE, url).canonical_id == "456"


class TestBlogExtraction:
    def test_path_and_query_forms_are_equivalent(self) -> None:
        path = extract_target(ContentType.BLOG, "https://blog.naver.com/foo/555")
        query = extract_target(
            ContentType.BLOG, "https://blog.naver.com/PostView.naver?blogId=foo&logNo=555"
        )
        assert path == query == BlogPostTarget(handle="foo", post_number="555")
        assert path.canonical_id == "foo/555"

    def test_query_order_does_not_matter(self) -> None:
        target = extract_target(
            ContentType.BLOG, "https://blog.naver.com/PostView.naver?logNo=555&redirect=Dlog&blogId=foo"
        )
        assert target.canonical_id == "foo/555"

    def test_handle_case_does_not_matter(self) -> None:
        path = extract_target(ContentType.BLOG, "https://blog.naver.com/Foo/555")
        query = extract_target(
            ContentType.BLOG, "https://blog.naver.com/PostView.naver?blogId=foo&logNo=555"
        )
        assert path.canonical_id == query.canonical_id == "foo/555"

    def test_mobile_host(self) -> None:
        assert extract_target(ContentType.BLOG, "https://m.blog.naver.com/foo/555").canonical_id == "foo/555"

    def test_non_numeric_post_number_is_rejected(self) -> None:
        with pytest.raises(IdentifierExtractionError):
            extract_target(ContentType.BLOG, "https://blog.naver.com/PostView.naver?blogId=foo&logNo=abc")


class TestProductExtraction:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://smartstore.naver.com/shop/products/111", "111"),
            ("https://search.shopping.naver.com/catalog/x/product/222", "222"),
            ("https://cr.shopping.naver.com/adcr.nhn?nvMid=333&x=1", "333"),
            ("https://shopping.naver.com/window?productId=444", "444"),
        ],
    )
    def test_each_pattern(self, url: str, expected: str) -> None:
        assert extract_target(ContentType.SHOPPING, url) == ProductTarget(product_id=expected)

    def test_path_pattern_wins_over_query(self) -> None:
        url = "https://smartstore.naver.com/shop/products/1?nvMid=2&productId=3"
        assert extract_target(ContentType.SHOPPING, url).canonical_id == "1"

    def test_nvmid_wins_over_product_id(self) -> None:
        url = "https://shopping.naver.com/x?productId=3&nvMid=2"
        assert extract_target(ContentType.SHOPPING, url).canonical_id == "2"


class TestExtractionFailure:
    @pytest.mark.parametrize("content_type", list(ContentType))
    def test_bare_domain_fails(self, content_type: ContentType) -> None:
        with pytest.raises(IdentifierExtractionError) as exc_info:
            extract_target(content_type, "https://naver.com")
        assert exc_info.value.content_type is content_type
        assert exc_info.value.raw_url == "https://naver.com"

    @pytest.mark.parametrize("content_type", list(ContentType))
    def test_empty_input_fails(self, content_type: ContentType) -> None:
        with pytest.raises(IdentifierExtractionError):
            extract_target(content_type, "")


class TestCandidateIdentifier:
    def test_numeric_source_id_is_trusted_for_products(self) -> None:
        raw = RawCandidate(link="https://adcr.naver.com/redirect", source_id="9001")
        assert candidate_identifier(ContentType.SHOPPING, raw) == "9001"

    def test_source_id_ignored_for_blog(self) -> None:
        raw = RawCandidate(link="https://blog.naver.com/foo/1", source_id="999")
        assert candidate_identifier(ContentType.BLOG, raw) == "foo/1"

    def test_falls_back_to_link(self) -> None:
        raw = RawCandidate(link="https://m.place.naver.com/place/42", source_id="not-a-number")
        assert candidate_identifier(ContentType.PLACE, raw) == "42"

    def test_unparseable_candidate_is_none(self) -> None:
        assert candidate_identifier(ContentType.PLACE, RawCandidate(link="https://ad.example.com")) is None
        assert candidate_identifier(ContentType.PLACE, RawCandidate(link="")) is None
