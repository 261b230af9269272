"""
Response Parser Tests
=====================

Tests for locating, validating, defaulting and enriching LLM output.
"""

import json

import pytest

from src.schemas.product import DEFAULT_MATERIAL, GenericFilters, BottleFilters
from src.services.response_parser import (
    NO_JSON_NOTE,
    NO_PRODUCTS_NOTE,
    ResponseParser,
    locate_json_object,
)
from src.utils.errors import ResponseParseError, ResponseValidationError


@pytest.fixture
def parser() -> ResponseParser:
    return ResponseParser()


class TestLocateJsonObject:
    """Tests for locate_json_object()."""

    def test_object_inside_prose(self) -> None:
        text = 'Here you go: {"products": []} Hope this helps!'
        assert locate_json_object(text) == '{"products": []}'

    def test_braces_inside_strings_ignored(self) -> None:
        text = '{"products": [{"name": "Cap }{ 24mm", "category": "Cap"}]} trailing }'
        assert json.loads(locate_json_object(text))["products"][0]["name"] == "Cap }{ 24mm"

    def test_unbalanced_falls_back_to_last_brace(self) -> None:
        assert locate_json_object('x {"a": {"b": 1}') == '{"a": {"b": 1}'

    def test_no_object(self) -> None:
        assert locate_json_object("no json here") is None
        assert locate_json_object("} {") is None


class TestParseFailClosed:
    """Responses without product data must not raise."""

    def test_refusal_scenario(self, parser: ResponseParser) -> None:
        result = parser.parse("Sorry, I cannot find any product information in this document.")

        assert result.products == []
        assert result.summary.total_products == 0
        assert result.summary.processing_notes == "No product information found in the provided text."
        assert NO_PRODUCTS_NOTE == result.summary.processing_notes

    def test_no_json_returns_empty(self, parser: ResponseParser) -> None:
        result = parser.parse("The document lists two bottles.")

        assert result.products == []
        assert result.summary.total_products == 0
        assert result.summary.processing_notes == NO_JSON_NOTE

    def test_empty_products_array(self, parser: ResponseParser) -> None:
        result = parser.parse('{"products": []}')

        assert result.products == []
        assert result.summary.total_products == 0


class TestParseErrors:
    """Responses with broken structure raise typed errors."""

    def test_invalid_json_raises(self, parser: ResponseParser) -> None:
        with pytest.raises(ResponseParseError):
            parser.parse('{"products": [{"name": "Bottle A",}]}')

    def test_missing_products_array_raises(self, parser: ResponseParser) -> None:
        with pytest.raises(ResponseParseError, match="missing products array"):
            parser.parse('{"items": []}')

    def test_oversized_integer_raises_parse_error(self, parser: ResponseParser) -> None:
        raw = '{"products": [{"name": "Bottle A", "category": "Bottle", "pricing": {"basePrice": %s}}]}' % (
            "9" * 5000
        )

        with pytest.raises(ResponseParseError, match="Failed to parse AI response"):
            parser.parse(raw)

    def test_products_not_a_list_raises(self, parser: ResponseParser) -> None:
        with pytest.raises(ResponseParseError):
            parser.parse('{"products": {"name": "Bottle A"}}')

    def test_missing_name_raises(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response({"name": "Bottle A", "category": "Bottle"}, {"category": "Jar"})

        with pytest.raises(ResponseValidationError, match="Product 2: missing or invalid name"):
            parser.parse(raw)

    def test_non_string_category_raises(self, parser: ResponseParser, llm_response) -> None:
        with pytest.raises(ResponseValidationError):
            parser.parse(llm_response({"name": "Bottle A", "category": 7}))

    def test_blank_name_raises(self, parser: ResponseParser, llm_response) -> None:
        with pytest.raises(ResponseValidationError):
            parser.parse(llm_response({"name": "   ", "category": "Bottle"}))


class TestDefaulting:
    """Products with only name and category get every block defaulted."""

    def test_minimal_product_is_complete(self, parser: ResponseParser, llm_response) -> None:
        result = parser.parse(llm_response({"name": "Mystery Item", "category": "Widget"}))

        product = result.products[0]
        assert product.specifications.material == DEFAULT_MATERIAL
        assert product.specifications.capacity.value == 0
        assert product.specifications.capacity.unit == "ml"
        assert product.specifications.dimensions.unit == "mm"
        assert product.specifications.weight.unit == "g"
        assert product.specifications.minimum_order_quantity == 1000
        assert product.specifications.available_quantity == 5000
        assert product.pricing.base_price == 0
        assert product.pricing.currency == "USD"
        assert product.features == []
        assert product.certifications == []
        assert product.sustainability.recycled_content == 0
        assert product.customization.printing_available is False
        assert isinstance(product.category_filters, GenericFilters)
        assert product.common_filters.location == ["USA"]
        assert product.status == "extracted"

    def test_minimal_product_missing_fields(self, parser: ResponseParser, llm_response) -> None:
        product = parser.parse(llm_response({"name": "Mystery Item", "category": "Widget"})).products[0]

        assert product.missing_fields == [
            "Description",
            "Minimum Order Quantity",
            "Base Price",
            "Material",
            "Product Images",
        ]

    def test_complete_product_has_no_missing_fields(
        self, parser: ResponseParser, llm_response, bottle_product
    ) -> None:
        product = parser.parse(llm_response(bottle_product)).products[0]

        assert product.missing_fields == []

    def test_invalid_block_replaced_and_noted(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {
                "name": "Bottle A",
                "category": "Bottle",
                "ecoScoreDetails": {"recyclability": 500},
            }
        )

        result = parser.parse(raw)

        assert "Product 1: invalid ecoScoreDetails, defaults applied" in result.summary.processing_notes
        assert result.products[0].eco_score_details.recyclability <= 100

    def test_llm_summary_note_comes_first(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {"name": "Bottle A", "category": "Bottle", "ecoScoreDetails": "n/a"},
            notes="Found one bottle",
        )

        notes = parser.parse(raw).summary.processing_notes

        assert notes.startswith("Found one bottle; ")


class TestCoercion:
    """Free-text values are coerced instead of rejected."""

    def test_price_string_coerced(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {"name": "Jar B", "category": "Jar", "pricing": {"basePrice": "$1,250.50", "currency": "eur"}}
        )

        pricing = parser.parse(raw).products[0].pricing

        assert pricing.base_price == 1250.5
        assert pricing.currency == "EUR"

    def test_capacity_string_coerced(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {"name": "Bottle A", "category": "Bottle", "specifications": {"capacity": "250ml"}}
        )

        capacity = parser.parse(raw).products[0].specifications.capacity

        assert capacity.value == 250
        assert capacity.unit == "ml"

    def test_unparseable_number_defaults(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {
                "name": "Bottle A",
                "category": "Bottle",
                "specifications": {"minimumOrderQuantity": "ask supplier"},
            }
        )

        product = parser.parse(raw).products[0]

        assert product.specifications.minimum_order_quantity == 1000
        assert "Minimum Order Quantity" in product.missing_fields

    def test_certification_strings_accepted(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {"name": "Bottle A", "category": "Bottle", "certifications": ["FDA", {"name": "ISO 9001"}]}
        )

        certifications = parser.parse(raw).products[0].certifications

        assert [c.name for c in certifications] == ["FDA", "ISO 9001"]
        assert certifications[0].certification_body == "Unknown"

    def test_eco_score_clamped(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response({"name": "Bottle A", "category": "Bottle", "ecoScore": 250})

        assert parser.parse(raw).products[0].eco_score == 100

    def test_non_finite_numbers_default(self, parser: ResponseParser) -> None:
        raw = (
            '{"products": [{"name": "Bottle A", "category": "Bottle", '
            '"specifications": {"minimumOrderQuantity": 1e999, "availableQuantity": -Infinity}, '
            '"pricing": {"basePrice": NaN}, "ecoScore": Infinity}]}'
        )

        product = parser.parse(raw).products[0]

        assert product.specifications.minimum_order_quantity == 1000
        assert product.specifications.available_quantity == 5000
        assert product.pricing.base_price == 0.0
        assert 0 < product.eco_score <= 100
        assert "Minimum Order Quantity" in product.missing_fields

    def test_long_name_kept(self, parser: ResponseParser, llm_response) -> None:
        long_name = "Bottle " + "A" * 600
        raw = llm_response(
            {"name": "Jar B", "category": "Jar"},
            {"name": long_name, "category": "Bottle " * 50},
        )

        products = parser.parse(raw).products

        assert [p.name for p in products] == ["Jar B", long_name]


class TestEnrichmentApplied:
    """Parsed products are enriched before they are returned."""

    def test_bottle_enrichment(self, parser: ResponseParser, llm_response, bottle_product) -> None:
        product = parser.parse(llm_response(bottle_product)).products[0]

        assert product.broader_category == "Base Packaging"
        assert isinstance(product.category_filters, BottleFilters)
        assert product.eco_score_details.recyclability == 100
        assert product.eco_score == product.eco_score_details.overall
        assert [s.name for s in product.dynamic_specs] == ["Color"]

    def test_llm_filters_preferred(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {
                "name": "Bottle A",
                "category": "Bottle",
                "categoryFilters": [{"Bottle Shape": ["Square"]}, {"Neck Finish": "24/410"}],
            }
        )

        filters = parser.parse(raw).products[0].category_filters

        assert filters.bottle_shape == ["Square"]
        assert filters.extra == {"Neck Finish": ["24/410"]}

    def test_summary_categories(self, parser: ResponseParser, llm_response) -> None:
        raw = llm_response(
            {"name": "Bottle A", "category": "Bottle"},
            {"name": "Jar B", "category": "Jar"},
            {"name": "Bottle C", "category": "Bottle"},
        )

        summary = parser.parse(raw).summary

        assert summary.total_products == 3
        assert summary.categories == ["Bottle", "Jar"]
