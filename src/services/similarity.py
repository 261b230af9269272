"""
Similarity Scorer
=================

Scores how closely an extracted product resembles an existing catalog
entry, so suppliers can spot products they have already listed.

Score components (weight, precondition):
    - name: normalized Levenshtein similarity (0.4, both names present)
    - category: exact match (0.3, both categories present)
    - material: case-insensitive match (0.2, both materials specified)
    - capacity: 1 - |a - b| / max(a, b) (0.1, both capacities positive)

The weighted sum is divided by the total weight of components whose
preconditions held, so missing data neither helps nor hurts.
"""

from typing import Protocol

from rapidfuzz.distance import Levenshtein

from src.schemas.product import ProductCandidate, SimilarProduct, Specifications
from src.utils.logger import get_logger

logger = get_logger(__name__)

NAME_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.3
MATERIAL_WEIGHT = 0.2
CAPACITY_WEIGHT = 0.1

DEFAULT_THRESHOLD = 0.3
DEFAULT_TOP_K = 5


class ComparableProduct(Protocol):
    name: str
    category: str
    specifications: Specifications


def string_similarity(a: str, b: str) -> float:
    """
    Normalized Levenshtein similarity in [0, 1].

    (len(longer) - distance) / len(longer); two empty strings score 1.0.
    """
    longer = max(len(a), len(b))
    if longer == 0:
        return 1.0
    return (longer - Levenshtein.distance(a, b)) / longer


def score(candidate: ComparableProduct, existing: ComparableProduct) -> float:
    """
    Weighted similarity between two products.

    Returns:
        Score in [0, 1]; 0.0 when no component is comparable
    """
    total = 0.0
    weights = 0.0

    if candidate.name and existing.name:
        total += string_similarity(candidate.name.lower(), existing.name.lower()) * NAME_WEIGHT
        weights += NAME_WEIGHT

    if candidate.category and existing.category:
        if candidate.category == existing.category:
            total += CATEGORY_WEIGHT
        weights += CATEGORY_WEIGHT

    specs_a, specs_b = candidate.specifications, existing.specifications
    if specs_a.has_material and specs_b.has_material:
        if specs_a.material.lower() == specs_b.material.lower():
            total += MATERIAL_WEIGHT
        weights += MATERIAL_WEIGHT

    cap_a, cap_b = specs_a.capacity.value, specs_b.capacity.value
    if cap_a > 0 and cap_b > 0:
        total += (1 - abs(cap_a - cap_b) / max(cap_a, cap_b)) * CAPACITY_WEIGHT
        weights += CAPACITY_WEIGHT

    if weights == 0:
        return 0.0
    return min(1.0, max(0.0, total / weights))


class SimilarityScorer:
    """
    Rank catalog entries by similarity to an extracted product.

    Example:
        scorer = SimilarityScorer(threshold=0.3, top_k=5)
        product.similar_products = scorer.analyze_similarity(product, catalog_products)
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD, top_k: int = DEFAULT_TOP_K) -> None:
        self.threshold = threshold
        self.top_k = top_k

    def analyze_similarity(
        self,
        product: ProductCandidate,
        existing: list,
    ) -> list[SimilarProduct]:
        """
        Find catalog entries scoring strictly above the threshold.

        Args:
            product: Extracted product
            existing: Catalog entries (objects with id, name, category, specifications)

        Returns:
            Up to top_k matches, best first
        """
        matches: list[SimilarProduct] = []
        for entry in existing:
            entry_score = score(product, entry)
            if entry_score > self.threshold:
                matches.append(
                    SimilarProduct(
                        existing_product_id=str(entry.id),
                        name=entry.name,
                        score=entry_score,
                    )
                )
        matches.sort(key=lambda m: m.score, reverse=True)

        if matches:
            logger.debug(
                "Similar catalog products found",
                product=product.name,
                matches=len(matches),
                best_score=round(matches[0].score, 3),
            )
        return matches[: self.top_k]
