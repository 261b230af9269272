"""
Product Catalog Access
======================

The pipeline compares extracted products with existing catalog entries.
Storage lives outside this service; callers supply a ProductCatalog.
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from src.schemas.product import CatalogProduct, ProductCandidate


@runtime_checkable
class ProductCatalog(Protocol):
    """Source of existing products to score extracted products against."""

    async def candidates_for(self, product: ProductCandidate) -> list[CatalogProduct]: ...


class InMemoryCatalog:
    """
    Catalog backed by a list held in memory.

    Example:
        catalog = InMemoryCatalog([CatalogProduct(id="p1", name="Bottle A", category="Bottle")])
    """

    def __init__(self, products: Iterable[CatalogProduct] = ()) -> None:
        self._products = list(products)

    def add(self, product: CatalogProduct) -> None:
        self._products.append(product)

    def __len__(self) -> int:
        return len(self._products)

    async def candidates_for(self, product: ProductCandidate) -> list[CatalogProduct]:
        return list(self._products)
