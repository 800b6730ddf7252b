"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pricebook.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return a product by SKU (trimmed, case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, in stable order."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product.

        The bill of materials is replaced wholesale. Raises
        ``DuplicateKeyError`` when another product already uses the SKU
        and ``StorageUnavailableError`` when the store cannot be written.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove a product. BOM lines pointing at it are left dangling."""
