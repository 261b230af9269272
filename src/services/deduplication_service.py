"""
Cross-Chunk Deduplication Service
=================================

Removes duplicate products produced by independent chunk extractions.

Products are keyed on lower-cased "name|category"; the first occurrence
wins. No fuzzy matching is attempted, so "Bottle A" and "Bottle-A"
stay separate entries.
"""

from dataclasses import dataclass, field

from src.schemas.product import ProductCandidate
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class DeduplicationStats:
    """Statistics from deduplication process."""

    total_products: int = 0
    unique_products: int = 0
    duplicates_removed: int = 0
    duplicate_groups: int = 0

    @property
    def dedup_rate(self) -> float:
        """Percentage of products that were duplicates."""
        if self.total_products == 0:
            return 0.0
        return (self.duplicates_removed / self.total_products) * 100


@dataclass
class DuplicateGroup:
    """Products sharing one deduplication key."""

    key: str
    products: list[ProductCandidate] = field(default_factory=list)

    @property
    def kept_product(self) -> ProductCandidate | None:
        return self.products[0] if self.products else None

    @property
    def removed_count(self) -> int:
        return max(0, len(self.products) - 1)


class DeduplicationService:
    """
    Stable exact-key product deduplication.

    Example:
        service = DeduplicationService()
        unique_products, stats = service.deduplicate(products)
        print(f"Removed {stats.duplicates_removed} duplicates")
    """

    def deduplicate(
        self,
        products: list[ProductCandidate],
    ) -> tuple[list[ProductCandidate], DeduplicationStats]:
        """
        Remove duplicate products from a list.

        Args:
            products: Products from all chunks, in processing order

        Returns:
            Tuple of (unique products, deduplication stats)
        """
        if not products:
            return [], DeduplicationStats()

        stats = DeduplicationStats(total_products=len(products))
        seen: set[str] = set()
        unique: list[ProductCandidate] = []
        duplicate_keys: set[str] = set()

        for product in products:
            key = product.get_dedup_key()
            if key in seen:
                stats.duplicates_removed += 1
                duplicate_keys.add(key)
                logger.debug("Duplicate product removed", key=key)
                continue
            seen.add(key)
            unique.append(product)

        stats.unique_products = len(unique)
        stats.duplicate_groups = len(duplicate_keys)

        logger.info(
            "Deduplication complete",
            total=stats.total_products,
            unique=stats.unique_products,
            duplicates_removed=stats.duplicates_removed,
            duplicate_groups=stats.duplicate_groups,
        )
        return unique, stats

    def find_duplicates(self, products: list[ProductCandidate]) -> list[DuplicateGroup]:
        """
        Find duplicate groups without removing them.

        Args:
            products: Products to analyze

        Returns:
            Groups with more than one product, in first-seen order
        """
        groups: dict[str, DuplicateGroup] = {}
        for product in products:
            key = product.get_dedup_key()
            groups.setdefault(key, DuplicateGroup(key=key)).products.append(product)
        return [g for g in groups.values() if len(g.products) > 1]
