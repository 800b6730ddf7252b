"""Application service: bill-of-materials editing.

Each edit is saved immediately, which recomputes the composite's cost
and prices.
"""

from __future__ import annotations

from pricebook.application.dto import SaveOutcome
from pricebook.application.save_product import SaveProductHandler
from pricebook.domain.exceptions import EntityNotFoundError, ValidationError
from pricebook.domain.model.product import Product
from pricebook.domain.repository.product_repository import ProductRepository


class EditBomHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        save_handler: SaveProductHandler,
    ) -> None:
        self._product_repo = product_repo
        self._save_handler = save_handler

    def add_component(
        self, composite_sku: str, component_sku: str, quantity: int = 1, actor: str | None = None
    ) -> SaveOutcome:
        composite = self._load_composite(composite_sku)
        component = self._load(component_sku)
        composite.add_component(component, quantity)
        return self._save_handler.handle(composite, actor=actor)

    def set_quantity(
        self, composite_sku: str, component_ref: str, quantity: int, actor: str | None = None
    ) -> SaveOutcome:
        composite = self._load_composite(composite_sku)
        composite.set_component_quantity(self._component_id(component_ref), quantity)
        return self._save_handler.handle(composite, actor=actor)

    def remove_component(
        self, composite_sku: str, component_ref: str, actor: str | None = None
    ) -> SaveOutcome:
        composite = self._load_composite(composite_sku)
        composite.remove_component(self._component_id(component_ref))
        return self._save_handler.handle(composite, actor=actor)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, sku: str) -> Product:
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product '{sku}' not found")
        return product

    def _load_composite(self, sku: str) -> Product:
        product = self._load(sku)
        if not product.is_composite:
            raise ValidationError(f"'{product.sku}' is not a composite product")
        return product

    def _component_id(self, ref: str) -> str:
        """Accept a component SKU, or the raw id of a deleted component."""
        component = self._product_repo.get_by_sku(ref)
        return component.id if component is not None else ref
