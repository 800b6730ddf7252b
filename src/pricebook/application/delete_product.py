"""Application service: Delete Product use case."""

from __future__ import annotations

from pricebook.domain.exceptions import EntityNotFoundError
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.product import Product
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.product_repository import ProductRepository


class DeleteProductHandler:

    def __init__(self, product_repo: ProductRepository, activity_log: ActivityLog) -> None:
        self._product_repo = product_repo
        self._activity_log = activity_log

    def handle(self, sku: str, actor: str | None = None) -> Product:
        """Delete a product.

        Composites that list it keep the dangling reference; the
        validator reports it so the user can fix the BOM.
        """
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product '{sku}' not found")

        self._product_repo.delete(product.id)
        self._activity_log.append(
            LogKind.WARNING, f"Deleted product: {product.sku}", {"id": product.id}, actor
        )
        return product
