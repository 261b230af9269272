"""
LLM Response Parser
===================

Turns one raw LLM completion into validated, defaulted and enriched
ProductCandidate objects.

Failure policy:
    - Refusal phrasing or no JSON object at all: empty result with an
      explanatory note (no exception)
    - JSON located but undecodable, or without a products array:
      ResponseParseError
    - Any product without a string name or category: ResponseValidationError
    - Invalid optional blocks: replaced by defaults and noted
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from src.schemas.product import (
    Certification,
    Customization,
    EcoScoreDetails,
    Pricing,
    ProductCandidate,
    Specifications,
    Sustainability,
    coerce_number,
)
from src.schemas.responses import ExtractionResponse, ExtractionSummary
from src.services.enrichment import enrich_product
from src.utils.errors import ResponseParseError, ResponseValidationError
from src.utils.logger import get_logger, preview

logger = get_logger(__name__)

REFUSAL_PHRASES = ("sorry", "unable to extract", "no actual product information")

NO_PRODUCTS_NOTE = "No product information found in the provided text."
NO_JSON_NOTE = "AI response did not contain valid JSON format."

# (JSON key, field name, model) for optional nested blocks
_OPTIONAL_BLOCKS: list[tuple[str, str, type[BaseModel]]] = [
    ("specifications", "specifications", Specifications),
    ("pricing", "pricing", Pricing),
    ("sustainability", "sustainability", Sustainability),
    ("customization", "customization", Customization),
    ("ecoScoreDetails", "eco_score_details", EcoScoreDetails),
]

_TEXT_FIELDS: list[tuple[str, str]] = [
    ("broaderCategory", "broader_category"),
    ("subcategory", "subcategory"),
    ("description", "description"),
]


def locate_json_object(text: str) -> str | None:
    """
    Find the first balanced {...} span in text.

    Braces inside JSON strings are ignored. When the braces never
    balance, the span from the first '{' to the last '}' is returned.

    Returns:
        The candidate JSON text, or None if no '{' ... '}' span exists
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    end = text.rfind("}")
    if end <= start:
        return None
    return text[start : end + 1]


def _empty_response(note: str) -> ExtractionResponse:
    return ExtractionResponse(
        products=[],
        summary=ExtractionSummary(total_products=0, categories=[], processing_notes=note),
    )


def _spec_value(specs: Any, camel: str, snake: str) -> Any:
    if not isinstance(specs, dict):
        return None
    return specs.get(camel, specs.get(snake))


class ResponseParser:
    """
    Parser/validator for extraction completions.

    Usage:
        parser = ResponseParser()
        result = parser.parse(completion_text)
        result.products, result.summary.processing_notes
    """

    def parse(self, raw_text: str) -> ExtractionResponse:
        """
        Parse one LLM completion.

        Args:
            raw_text: Completion text as returned by the provider

        Returns:
            ExtractionResponse with enriched products and processing notes

        Raises:
            ResponseParseError: If located JSON is invalid or lacks a products array
            ResponseValidationError: If a product lacks a string name or category
        """
        lowered = raw_text.lower()
        if any(phrase in lowered for phrase in REFUSAL_PHRASES):
            logger.info("LLM indicated no product information found")
            return _empty_response(NO_PRODUCTS_NOTE)

        json_text = locate_json_object(raw_text)
        if json_text is None:
            logger.warning(
                "No JSON object found in LLM response",
                response_preview=preview(raw_text, 200),
            )
            return _empty_response(NO_JSON_NOTE)

        try:
            payload = json.loads(json_text)
        except json.JSONDecodeError as e:
            raise ResponseParseError(
                message=f"Failed to parse AI response: {e.msg}",
                details={"position": e.pos, "response_preview": preview(json_text, 500)},
            ) from e
        except (ValueError, RecursionError) as e:
            # Integer literals past the digit limit, or nesting past the recursion limit
            raise ResponseParseError(
                message=f"Failed to parse AI response: {type(e).__name__}",
                details={"response_preview": preview(json_text, 500)},
            ) from e

        if not isinstance(payload, dict) or not isinstance(payload.get("products"), list):
            raise ResponseParseError(
                message="Invalid response structure: missing products array",
                details={"response_preview": preview(json_text, 500)},
            )

        entries: list[Any] = payload["products"]
        self._validate_required(entries)

        notes: list[str] = []
        products = [
            self._build_product(entry, index, notes)
            for index, entry in enumerate(entries, start=1)
        ]

        summary = payload.get("summary")
        llm_note = summary.get("processingNotes") if isinstance(summary, dict) else None
        if isinstance(llm_note, str) and llm_note.strip():
            notes.insert(0, llm_note.strip())

        logger.debug(
            "LLM response parsed",
            products=len(products),
            defaulted_notes=len(notes),
        )
        return ExtractionResponse(
            products=products,
            summary=ExtractionSummary.from_products(products, "; ".join(notes)),
        )

    @staticmethod
    def _validate_required(entries: list[Any]) -> None:
        for index, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                raise ResponseValidationError(
                    message=f"Product {index}: expected an object",
                    details={"index": index},
                )
            for field in ("name", "category"):
                value = entry.get(field)
                if not isinstance(value, str) or not value.strip():
                    raise ResponseValidationError(
                        message=f"Product {index}: missing or invalid {field}",
                        details={"index": index, "field": field},
                    )

    def _build_product(
        self,
        entry: dict[str, Any],
        index: int,
        notes: list[str],
    ) -> ProductCandidate:
        fields: dict[str, Any] = {"name": entry["name"], "category": entry["category"]}

        for key, field_name in _TEXT_FIELDS:
            if key in entry:
                fields[field_name] = entry[key]

        for key, field_name, model in _OPTIONAL_BLOCKS:
            value = entry.get(key)
            if value is None:
                continue
            try:
                fields[field_name] = model.model_validate(value)
            except ValidationError as e:
                logger.warning(
                    "Invalid product block replaced by defaults",
                    product_index=index,
                    block=key,
                    errors=e.error_count(),
                )
                notes.append(f"Product {index}: invalid {key}, defaults applied")

        fields["features"] = entry.get("features")
        fields["images"] = entry.get("images")
        fields["certifications"] = self._certifications(entry.get("certifications"), index, notes)

        eco_score = coerce_number(entry.get("ecoScore"))
        fields["eco_score"] = int(round(min(100.0, max(0.0, eco_score))))

        try:
            product = ProductCandidate(**fields)
        except ValidationError as e:
            raise ResponseValidationError(
                message=f"Product {index}: {e.errors()[0]['msg']}",
                details={"index": index, "errors": e.error_count()},
            ) from e

        defaulted: set[str] = set()
        moq = _spec_value(entry.get("specifications"), "minimumOrderQuantity", "minimum_order_quantity")
        if coerce_number(moq) <= 0:
            defaulted.add("minimum_order_quantity")

        return enrich_product(product, entry, defaulted)

    @staticmethod
    def _certifications(raw: Any, index: int, notes: list[str]) -> list[Certification]:
        if not isinstance(raw, list):
            return []
        certifications: list[Certification] = []
        for item in raw:
            try:
                certifications.append(Certification.model_validate(item))
            except ValidationError:
                notes.append(f"Product {index}: invalid certification skipped")
        return certifications
