"""
Product Schemas
===============

Pydantic models for product records extracted by the LLM.

Every optional block has a deterministic default so downstream
consumers can rely on a fully populated shape. Field names are
snake_case in Python and camelCase on the wire.
"""

import math
import re
from typing import Annotated, Any, ClassVar, Literal, Self, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

DEFAULT_MATERIAL = "Not specified"
DEFAULT_CURRENCY = "USD"
DEFAULT_MINIMUM_ORDER_QUANTITY = 1000
DEFAULT_AVAILABLE_QUANTITY = 5000

_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
_UNIT_PATTERN = re.compile(r"[a-zA-Z]+")
_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}


# =============================================================================
# Lenient coercion for free-text LLM values
# =============================================================================


def coerce_number(value: Any) -> float:
    """
    Coerce an LLM-supplied number.

    Handles:
    - 250 -> 250.0
    - "$1,250.50" -> 1250.5
    - "250ml" -> 250.0
    - None / "n/a" -> 0.0
    - 1e999 / NaN / integers too large for a float -> 0.0
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        match = _NUMBER_PATTERN.search(value.replace(",", ""))
        if not match:
            return 0.0
        number = float(match.group())
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _coerce_count(value: Any) -> int:
    return int(round(coerce_number(value)))


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [str(value)]


Number = Annotated[float, BeforeValidator(coerce_number)]
Count = Annotated[int, BeforeValidator(_coerce_count)]
Text = Annotated[str, BeforeValidator(_coerce_text)]
Flag = Annotated[bool, BeforeValidator(_coerce_flag)]
StrList = Annotated[list[str], BeforeValidator(_coerce_str_list)]


class WireModel(BaseModel):
    """Base model using camelCase aliases for JSON input and output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Specifications
# =============================================================================


class Measure(WireModel):
    """A numeric value with a unit, e.g. capacity or weight."""

    value: Number = 0.0
    unit: Text = ""

    @model_validator(mode="before")
    @classmethod
    def accept_scalar(cls, data: Any) -> Any:
        """Accept bare numbers and strings such as "250ml"."""
        if data is None:
            return {}
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return {"value": data}
        if isinstance(data, str):
            number = coerce_number(data)
            remainder = _NUMBER_PATTERN.sub("", data.replace(",", ""), count=1)
            unit = _UNIT_PATTERN.search(remainder)
            return {"value": number, "unit": unit.group().lower() if unit else ""}
        return data


class Dimensions(WireModel):
    height: Number = 0.0
    width: Number = 0.0
    depth: Number = 0.0
    unit: Text = "mm"

    @field_validator("unit")
    @classmethod
    def default_unit(cls, v: str) -> str:
        return v or "mm"


class Specifications(WireModel):
    """
    Physical specifications of a packaging product.

    Unknown keys supplied by the LLM are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    material: Text = DEFAULT_MATERIAL
    capacity: Measure = Field(default_factory=lambda: Measure(unit="ml"))
    dimensions: Dimensions = Field(default_factory=Dimensions)
    weight: Measure = Field(default_factory=lambda: Measure(unit="g"))
    color: Text = ""
    finish: Text = ""
    closure: Text = ""
    minimum_order_quantity: Count = DEFAULT_MINIMUM_ORDER_QUANTITY
    available_quantity: Count = DEFAULT_AVAILABLE_QUANTITY
    additional_specs: Text = ""

    @field_validator("material")
    @classmethod
    def default_material(cls, v: str) -> str:
        return v or DEFAULT_MATERIAL

    @field_validator("minimum_order_quantity")
    @classmethod
    def default_moq(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_MINIMUM_ORDER_QUANTITY

    @field_validator("available_quantity")
    @classmethod
    def default_available(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_AVAILABLE_QUANTITY

    @model_validator(mode="after")
    def default_units(self) -> Self:
        if not self.capacity.unit:
            self.capacity.unit = "ml"
        if not self.weight.unit:
            self.weight.unit = "g"
        return self

    @property
    def has_material(self) -> bool:
        return bool(self.material) and self.material != DEFAULT_MATERIAL


class DynamicSpec(WireModel):
    """Display-oriented specification entry derived from the main fields."""

    name: str
    value: str
    category: Literal["physical", "technical"]
    display_order: int
    is_required: bool = False


# =============================================================================
# Pricing, sustainability, customization, certifications
# =============================================================================


class PriceBreak(WireModel):
    min_quantity: Count = 0
    price: Number = 0.0


class Pricing(WireModel):
    base_price: Number = 0.0
    currency: Text = DEFAULT_CURRENCY
    price_breaks: list[PriceBreak] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def default_currency(cls, v: str) -> str:
        return v.upper() if v else DEFAULT_CURRENCY


class Sustainability(WireModel):
    recycled_content: Number = 0.0
    biodegradable: Flag = False
    compostable: Flag = False
    refillable: Flag = False
    sustainable_sourcing: Flag = False
    carbon_neutral: Flag = False


class EcoScoreDetails(WireModel):
    """Eco sub-scores, each in [0, 100]."""

    recyclability: int = Field(default=0, ge=0, le=100)
    carbon_footprint: int = Field(default=0, ge=0, le=100)
    sustainable_materials: int = Field(default=0, ge=0, le=100)
    local_sourcing: int = Field(default=0, ge=0, le=100)

    @property
    def overall(self) -> int:
        """Rounded arithmetic mean of the four sub-scores."""
        total = (
            self.recyclability
            + self.carbon_footprint
            + self.sustainable_materials
            + self.local_sourcing
        )
        return round(total / 4)


class Customization(WireModel):
    printing_available: Flag = False
    labeling_available: Flag = False
    color_options: StrList = Field(default_factory=list)
    printing_methods: StrList = Field(default_factory=list)
    custom_sizes: Flag = False


class Certification(WireModel):
    name: str
    certification_body: Text = "Unknown"
    valid_until: str | None = None
    certificate_number: str | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_plain_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data

    @field_validator("certification_body")
    @classmethod
    def default_body(cls, v: str) -> str:
        return v or "Unknown"


# =============================================================================
# Filters
# =============================================================================


class LabelledFilters(WireModel):
    """
    Filter set with explicit fields for known labels.

    LLM output and the storefront both use display labels such as
    "Tube Shape"; labels without a dedicated field land in `extra`.
    """

    LABELS: ClassVar[dict[str, str]] = {}

    extra: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_labels(cls, labels: dict[str, Any], **fields: Any) -> Self:
        lookup = {label.lower(): name for label, name in cls.LABELS.items()}
        values: dict[str, Any] = dict(fields)
        extra: dict[str, list[str]] = {}
        for label, raw in labels.items():
            field_name = lookup.get(str(label).strip().lower())
            if field_name:
                values[field_name] = _coerce_str_list(raw)
            else:
                extra[str(label)] = _coerce_str_list(raw)
        return cls(extra=extra, **values)

    def to_labels(self) -> dict[str, list[str]]:
        labels = {
            label: getattr(self, name)
            for label, name in self.LABELS.items()
            if getattr(self, name)
        }
        labels.update(self.extra)
        return labels


class TubeFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {"Tube Shape": "tube_shape", "Tube Type": "tube_type"}

    kind: Literal["tube"] = "tube"
    tube_shape: StrList = Field(default_factory=list)
    tube_type: StrList = Field(default_factory=list)


class BottleFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {"Bottle Shape": "bottle_shape", "Bottle Type": "bottle_type"}

    kind: Literal["bottle"] = "bottle"
    bottle_shape: StrList = Field(default_factory=list)
    bottle_type: StrList = Field(default_factory=list)


class JarFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {"Jar Shape": "jar_shape", "Jar Type": "jar_type"}

    kind: Literal["jar"] = "jar"
    jar_shape: StrList = Field(default_factory=list)
    jar_type: StrList = Field(default_factory=list)


class CapFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {"Cap Type": "cap_type", "Cap Size": "cap_size"}

    kind: Literal["cap"] = "cap"
    cap_type: StrList = Field(default_factory=list)
    cap_size: StrList = Field(default_factory=list)


class ClosureFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {"Other Closure Type": "closure_type"}

    kind: Literal["closure"] = "closure"
    closure_type: StrList = Field(default_factory=list)


class GenericFilters(LabelledFilters):
    kind: Literal["generic"] = "generic"


CategoryFilters = Annotated[
    Union[TubeFilters, BottleFilters, JarFilters, CapFilters, ClosureFilters, GenericFilters],
    Field(discriminator="kind"),
]

FILTER_KINDS: dict[str, type[LabelledFilters]] = {
    "tube": TubeFilters,
    "bottle": BottleFilters,
    "jar": JarFilters,
    "cap": CapFilters,
    "closure": ClosureFilters,
    "generic": GenericFilters,
}


def filter_kind_for(category: str) -> str:
    """Pick the category filter schema from a free-text category."""
    lowered = category.lower()
    for kind in ("tube", "bottle", "jar", "cap", "closure"):
        if kind in lowered:
            return kind
    return "generic"


class CommonFilters(LabelledFilters):
    LABELS: ClassVar[dict[str, str]] = {
        "Sustainability": "sustainability",
        "Material": "material",
        "Size": "size",
        "Minimum Order": "minimum_order",
        "Location": "location",
        "Color": "color",
        "End Use": "end_use",
    }

    sustainability: StrList = Field(default_factory=list)
    material: StrList = Field(default_factory=list)
    size: StrList = Field(default_factory=list)
    minimum_order: StrList = Field(default_factory=list)
    location: StrList = Field(default_factory=list)
    color: StrList = Field(default_factory=list)
    end_use: StrList = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.to_labels()


# =============================================================================
# Products
# =============================================================================


class SimilarProduct(WireModel):
    """Existing catalog entry resembling an extracted product."""

    existing_product_id: str
    name: str
    score: float = Field(..., ge=0.0, le=1.0)


class ProductCandidate(WireModel):
    """
    Structured product record parsed from one LLM response.

    Attributes:
        name: Product name (required, non-empty)
        category: Primary category such as Bottle or Jar (required, non-empty)
        specifications: Physical specifications with defaults
        category_filters: Category-specific filters (tagged by kind)
        common_filters: Filters shared by all categories
        similar_products: Catalog entries scored above the similarity threshold
        missing_fields: Fields a supplier should still fill in
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    broader_category: Text = ""
    subcategory: Text = ""
    description: Text = ""
    specifications: Specifications = Field(default_factory=Specifications)
    dynamic_specs: list[DynamicSpec] = Field(default_factory=list)
    pricing: Pricing = Field(default_factory=Pricing)
    sustainability: Sustainability = Field(default_factory=Sustainability)
    eco_score: int = Field(default=0, ge=0, le=100)
    eco_score_details: EcoScoreDetails = Field(default_factory=EcoScoreDetails)
    category_filters: CategoryFilters = Field(default_factory=GenericFilters)
    common_filters: CommonFilters = Field(default_factory=CommonFilters)
    customization: Customization = Field(default_factory=Customization)
    features: StrList = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    images: StrList = Field(default_factory=list)
    status: str = "extracted"
    similar_products: list[SimilarProduct] = Field(default_factory=list)
    missing_fields: list[str] = Field(default_factory=list)

    @field_validator("name", "category", mode="before")
    @classmethod
    def normalize_label(cls, v: Any) -> Any:
        """Strip whitespace and collapse internal runs of spaces."""
        if isinstance(v, str):
            return " ".join(v.split())
        return v

    def get_dedup_key(self) -> str:
        """Key for cross-chunk deduplication: lower-cased name|category."""
        return f"{self.name.lower()}|{self.category.lower()}"


class CatalogProduct(WireModel):
    """Existing catalog entry used for similarity scoring."""

    id: str
    name: str = ""
    category: str = ""
    specifications: Specifications = Field(default_factory=Specifications)
