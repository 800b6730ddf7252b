"""Application service: Create Product use case."""

from __future__ import annotations

from decimal import Decimal

from pricebook.application.dto import SaveOutcome
from pricebook.application.save_product import SaveProductHandler
from pricebook.domain.exceptions import ValidationError
from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import PriceList, ProductKind
from pricebook.domain.repository.margin_memory import MarginMemory


class CreateProductHandler:

    def __init__(self, save_handler: SaveProductHandler, margin_memory: MarginMemory) -> None:
        self._save_handler = save_handler
        self._margin_memory = margin_memory

    def draft(
        self,
        sku: str,
        name: str,
        kind: ProductKind = ProductKind.SIMPLE,
    ) -> Product:
        """Build an unsaved product seeded with the last used margins."""
        margins = {pl: self._margin_memory.get(pl) for pl in PriceList}
        return Product.new(sku=sku.strip(), name=name.strip(), kind=kind, margins=margins)

    def handle(
        self,
        sku: str,
        name: str,
        kind: ProductKind = ProductKind.SIMPLE,
        purchase_cost: Decimal | None = None,
        margins: dict[PriceList, Decimal] | None = None,
        actor: str | None = None,
    ) -> SaveOutcome:
        """Create and save a new product.

        Explicit *margins* override the remembered ones. A composite
        starts with an empty bill of materials and no cost of its own.
        """
        product = self.draft(sku, name, kind)
        if purchase_cost is not None:
            if product.is_composite:
                raise ValidationError(
                    "The cost of a composite product is calculated from its components"
                )
            product.purchase_cost = purchase_cost
        for price_list, margin in (margins or {}).items():
            product.set_margin(price_list, margin)
        return self._save_handler.handle(product, actor=actor)
