"""Application service: Update Product use case."""

from __future__ import annotations

from decimal import Decimal

from pricebook.application.dto import SaveOutcome
from pricebook.application.save_product import SaveProductHandler
from pricebook.domain.exceptions import EntityNotFoundError, ValidationError
from pricebook.domain.model.value_objects import PriceList, ProductKind
from pricebook.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        save_handler: SaveProductHandler,
    ) -> None:
        self._product_repo = product_repo
        self._save_handler = save_handler

    def handle(
        self,
        sku: str,
        new_sku: str | None = None,
        name: str | None = None,
        kind: ProductKind | None = None,
        purchase_cost: Decimal | None = None,
        margins: dict[PriceList, Decimal] | None = None,
        actor: str | None = None,
    ) -> SaveOutcome:
        """Apply the given edits; arguments left as None are unchanged.

        Changing the kind discards the bill of materials.
        """
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product '{sku}' not found")

        if new_sku is not None:
            product.sku = new_sku.strip()
        if name is not None:
            product.name = name.strip()
        if kind is not None:
            product.change_kind(kind)
        if purchase_cost is not None:
            if product.is_composite:
                raise ValidationError(
                    "The cost of a composite product is calculated from its components"
                )
            product.purchase_cost = purchase_cost
        for price_list, margin in (margins or {}).items():
            product.set_margin(price_list, margin)

        return self._save_handler.handle(product, actor=actor)
