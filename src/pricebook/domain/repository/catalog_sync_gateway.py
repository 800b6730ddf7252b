"""Port for pushing products to the external CRM/ERP catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pricebook.domain.model.product import Product


class CatalogSyncGateway(ABC):

    @abstractmethod
    def push_product(self, product: Product, description: str) -> str:
        """Create or update *product* remotely and return its external id.

        Raises ``TransportError`` (or a subclass) on failure.
        """
