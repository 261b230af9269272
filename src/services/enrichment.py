"""
Product Enrichment
==================

Deterministic post-processing applied to every validated product:
broader category mapping, eco scores, storefront filters, display
specs and the list of fields a supplier still has to fill in.

All functions are pure and work on already-defaulted ProductCandidate
objects.
"""

from typing import Any

from src.schemas.product import (
    DEFAULT_MATERIAL,
    FILTER_KINDS,
    BottleFilters,
    CapFilters,
    ClosureFilters,
    CommonFilters,
    DynamicSpec,
    EcoScoreDetails,
    GenericFilters,
    JarFilters,
    LabelledFilters,
    ProductCandidate,
    TubeFilters,
    filter_kind_for,
)

DEFAULT_BROADER_CATEGORY = "Base Packaging"

BROADER_CATEGORY_MAP: dict[str, str] = {
    "Bottle": "Base Packaging",
    "Jar": "Base Packaging",
    "Tube": "Base Packaging",
    "Cap": "Closure",
    "Closure": "Closure",
    "Other Closure": "Closure",
    "Pump": "Closure",
    "Spray": "Closure",
    "Dropper": "Closure",
    "Dispenser": "Closure",
    "Makeup": "Beauty",
    "Cosmetics": "Beauty",
    "Nail Care": "Beauty",
    "Skin Care": "Personal Care",
    "Hair Care": "Personal Care",
    "Face Cream": "Personal Care",
    "Fragrance": "Personal Care",
    "Laundry Detergent": "Household",
    "Surface Cleaners": "Household",
    "Dish Soap": "Household",
}

# Materials treated as mono-material / readily recyclable
_RECYCLE_READY_MARKERS = ("mono", "pp", "hdpe")


def map_broader_category(category: str) -> str:
    """Map a primary category onto its storefront group."""
    return BROADER_CATEGORY_MAP.get(category, DEFAULT_BROADER_CATEGORY)


def _is_recycle_ready(material: str) -> bool:
    lowered = material.lower()
    return any(marker in lowered for marker in _RECYCLE_READY_MARKERS)


# =============================================================================
# Eco score
# =============================================================================


def calculate_eco_score_details(product: ProductCandidate) -> EcoScoreDetails:
    """
    Score sustainability from material keywords and flags.

    Sub-scores:
        recyclability: mono/pp/hdpe 100, pet/plastic 80, glass 60, else 40
        carbon_footprint: carbon neutral 100, sustainable sourcing 80, else 60
        sustainable_materials: recycled >= 100% 100, >= 50% 80,
            sustainable sourcing 60, else 40
        local_sourcing: sustainable sourcing 80, else 60
    """
    material = product.specifications.material.lower()
    sustainability = product.sustainability

    if _is_recycle_ready(material):
        recyclability = 100
    elif "pet" in material or "plastic" in material:
        recyclability = 80
    elif "glass" in material:
        recyclability = 60
    else:
        recyclability = 40

    if sustainability.carbon_neutral:
        carbon_footprint = 100
    elif sustainability.sustainable_sourcing:
        carbon_footprint = 80
    else:
        carbon_footprint = 60

    if sustainability.recycled_content >= 100:
        sustainable_materials = 100
    elif sustainability.recycled_content >= 50:
        sustainable_materials = 80
    elif sustainability.sustainable_sourcing:
        sustainable_materials = 60
    else:
        sustainable_materials = 40

    local_sourcing = 80 if sustainability.sustainable_sourcing else 60

    return EcoScoreDetails(
        recyclability=recyclability,
        carbon_footprint=carbon_footprint,
        sustainable_materials=sustainable_materials,
        local_sourcing=local_sourcing,
    )


def calculate_eco_score(product: ProductCandidate) -> int:
    """Overall eco score: rounded mean of the four sub-scores."""
    return calculate_eco_score_details(product).overall


# =============================================================================
# Filters
# =============================================================================


def merge_filter_maps(raw: Any) -> dict[str, Any]:
    """
    Flatten LLM filter output into one label map.

    The LLM returns filters as a list of single-key maps, a plain map,
    or nothing at all.
    """
    if isinstance(raw, dict):
        return dict(raw)
    merged: dict[str, Any] = {}
    if isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, dict):
                merged.update(entry)
    return merged


def generate_category_filters(product: ProductCandidate) -> LabelledFilters:
    """Derive category filters from category, material and name."""
    kind = filter_kind_for(product.category)
    material = product.specifications.material

    if kind == "tube":
        tube_type = "Monomaterial" if _is_recycle_ready(material) else "Laminated"
        return TubeFilters(tube_shape=["Round"], tube_type=[tube_type])
    if kind == "bottle":
        return BottleFilters(bottle_shape=["Round"], bottle_type=["Standard"])
    if kind == "jar":
        return JarFilters(jar_shape=["Round"], jar_type=["Standard"])
    if kind == "cap":
        return CapFilters(cap_type=["Screw Cap"], cap_size=["24mm"])
    if kind == "closure":
        name = product.name.lower()
        if "pump" in name:
            closure_type = "Pump"
        elif "spray" in name:
            closure_type = "Spray"
        else:
            closure_type = "Dispenser"
        return ClosureFilters(closure_type=[closure_type])
    return GenericFilters()


def build_category_filters(product: ProductCandidate, raw: Any) -> LabelledFilters:
    """Use LLM-supplied category filters when present, else generate them."""
    labels = merge_filter_maps(raw)
    if not labels:
        return generate_category_filters(product)
    filter_class = FILTER_KINDS[filter_kind_for(product.category)]
    return filter_class.from_labels(labels)


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def generate_common_filters(product: ProductCandidate) -> CommonFilters:
    """Derive common storefront filters from sustainability and specifications."""
    specs = product.specifications
    sustainability = product.sustainability

    sustainability_labels: list[str] = []
    if sustainability.recycled_content > 0:
        sustainability_labels.append("Recycled Content")
    if sustainability.biodegradable:
        sustainability_labels.append("Biodegradable")
    if sustainability.compostable:
        sustainability_labels.append("Compostable")
    if sustainability.carbon_neutral:
        sustainability_labels.append("Carbon Neutral")
    if _is_recycle_ready(specs.material):
        sustainability_labels.append("Recycle Ready")

    size: list[str] = []
    capacity = specs.capacity.value
    if capacity > 0:
        size = [
            f"Unit: {specs.capacity.unit or 'ml'}",
            f"Min: {_format_number(max(1, capacity - 10))}",
            f"Max: {_format_number(capacity + 10)}",
        ]

    moq = specs.minimum_order_quantity
    category = product.category.lower()
    if "tube" in category or "bottle" in category:
        end_use = ["Hand Cream", "Body Wash"]
    elif "pump" in category or "closure" in category:
        end_use = ["Body Lotion", "Shampoo"]
    else:
        end_use = ["General Use"]

    return CommonFilters(
        sustainability=sustainability_labels,
        material=[specs.material or DEFAULT_MATERIAL],
        size=size,
        minimum_order=[f"Min: {max(500, moq - 500)}", f"Max: {moq + 10000}"],
        location=["USA"],
        color=["Clear"],
        end_use=end_use,
    )


def build_common_filters(product: ProductCandidate, raw: Any) -> CommonFilters:
    """Use LLM-supplied common filters when present, else generate them."""
    labels = merge_filter_maps(raw)
    if not labels:
        return generate_common_filters(product)
    return CommonFilters.from_labels(labels)


# =============================================================================
# Display specs and missing fields
# =============================================================================


def build_dynamic_specs(product: ProductCandidate) -> list[DynamicSpec]:
    """Color, Finish and Closure entries for the product detail page."""
    specs = product.specifications
    candidates = [
        ("Color", specs.color, "physical", 5),
        ("Finish", specs.finish, "physical", 6),
        ("Closure", specs.closure, "technical", 7),
    ]
    return [
        DynamicSpec(name=name, value=value, category=category, display_order=order)
        for name, value, category, order in candidates
        if value and value != DEFAULT_MATERIAL
    ]


def find_missing_fields(
    product: ProductCandidate,
    defaulted: set[str] | frozenset[str] = frozenset(),
) -> list[str]:
    """
    List fields the supplier should complete before publishing.

    Args:
        product: Enriched product
        defaulted: Specification fields filled with defaults by the parser
    """
    missing: list[str] = []
    if not product.description:
        missing.append("Description")
    if (
        "minimum_order_quantity" in defaulted
        or product.specifications.minimum_order_quantity <= 0
    ):
        missing.append("Minimum Order Quantity")
    if product.pricing.base_price <= 0:
        missing.append("Base Price")
    if not product.specifications.has_material:
        missing.append("Material")
    if not product.images:
        missing.append("Product Images")
    return missing


def enrich_product(
    product: ProductCandidate,
    raw: dict[str, Any],
    defaulted: set[str] | frozenset[str] = frozenset(),
) -> ProductCandidate:
    """
    Fill derived fields on a validated product.

    Args:
        product: Product with defaults applied
        raw: The product's raw JSON object from the LLM
        defaulted: Specification fields filled with defaults by the parser

    Returns:
        The same product, updated in place
    """
    if not product.broader_category:
        product.broader_category = map_broader_category(product.category)

    if product.eco_score_details == EcoScoreDetails():
        product.eco_score_details = calculate_eco_score_details(product)
    if not product.eco_score:
        product.eco_score = calculate_eco_score(product)

    product.category_filters = build_category_filters(product, raw.get("categoryFilters"))
    product.common_filters = build_common_filters(product, raw.get("commonFilters"))

    if not product.dynamic_specs:
        product.dynamic_specs = build_dynamic_specs(product)
    product.missing_fields = find_missing_fields(product, defaulted)
    return product
