"""Product aggregate.

A product is either *simple* (its purchase cost is entered directly) or
*composite* (its cost is derived from a bill of materials that lists
simple products by id). Each product carries one price entry per
price list.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal

from pricebook.domain.exceptions import EntityNotFoundError, ValidationError
from pricebook.domain.model.value_objects import (
    ZERO,
    BomLine,
    PriceEntry,
    PriceList,
    ProductKind,
)


@dataclass
class Product:
    """A catalog entry.

    This is an aggregate root. It is a mutable dataclass because the BOM
    editing methods below work on a draft the user is editing; the
    domain services never mutate a product they were handed and use
    ``copy()`` instead.

    ``purchase_cost`` of a composite is only ever written by the cost
    resolver, never by a user action.
    """

    id: str
    sku: str
    name: str
    kind: ProductKind
    purchase_cost: Decimal = ZERO
    prices: list[PriceEntry] = field(default_factory=list)
    components: list[BomLine] = field(default_factory=list)
    external_ref: str | None = None
    sync_pending: bool = True
    last_synced_at: datetime | None = None
    last_edited_at: datetime | None = None

    # --- Factory --------------------------------------------------------------

    @classmethod
    def new(
        cls,
        sku: str,
        name: str,
        kind: ProductKind = ProductKind.SIMPLE,
        margins: dict[PriceList, Decimal | None] | None = None,
    ) -> Product:
        """Create an unsaved product with one price entry per price list.

        ``margins`` seeds each entry's discount; lists missing from it
        start unset.
        """
        margins = margins or {}
        return cls(
            id=uuid.uuid4().hex,
            sku=sku,
            name=name,
            kind=kind,
            prices=[PriceEntry(pl, discount=margins.get(pl)) for pl in PriceList],
        )

    def copy(self) -> Product:
        """Return an independent copy (lists are not shared)."""
        return replace(self, prices=list(self.prices), components=list(self.components))

    # --- Queries --------------------------------------------------------------

    @property
    def is_simple(self) -> bool:
        return self.kind is ProductKind.SIMPLE

    @property
    def is_composite(self) -> bool:
        return self.kind is ProductKind.COMPOSITE

    def references(self, component_id: str) -> bool:
        return any(line.component_id == component_id for line in self.components)

    def price_for(self, price_list: PriceList) -> PriceEntry | None:
        for entry in self.prices:
            if entry.price_list is price_list:
                return entry
        return None

    # --- Editing --------------------------------------------------------------

    def change_kind(self, kind: ProductKind) -> None:
        """Switch between simple and composite.

        Becoming composite starts an empty BOM; becoming simple drops it.
        """
        if kind is self.kind:
            return
        self.kind = kind
        self.components = []

    def set_margin(self, price_list: PriceList, discount: Decimal | None) -> None:
        for i, entry in enumerate(self.prices):
            if entry.price_list is price_list:
                self.prices[i] = entry.with_discount(discount)
                return
        self.prices.append(PriceEntry(price_list, discount=discount))

    def add_component(self, component: Product, quantity: int = 1) -> None:
        """Append *component* to the BOM. A quantity of 0 becomes 1."""
        if not self.is_composite:
            raise ValidationError(f"'{self.sku}' is not a composite product")
        if not component.is_simple:
            raise ValidationError(
                f"Only simple products can be components, '{component.sku}' is composite"
            )
        if component.id == self.id:
            raise ValidationError("A product cannot be a component of itself")
        if self.references(component.id):
            raise ValidationError(
                f"'{component.sku}' is already in the bill of materials"
            )
        self.components.append(BomLine(component.id, quantity or 1))

    def set_component_quantity(self, component_id: str, quantity: int) -> None:
        """Change a BOM quantity. Any integer is accepted."""
        for i, line in enumerate(self.components):
            if line.component_id == component_id:
                self.components[i] = BomLine(component_id, quantity)
                return
        raise EntityNotFoundError(
            f"Component '{component_id}' is not in the bill of materials"
        )

    def remove_component(self, component_id: str) -> None:
        remaining = [l for l in self.components if l.component_id != component_id]
        if len(remaining) == len(self.components):
            raise EntityNotFoundError(
                f"Component '{component_id}' is not in the bill of materials"
            )
        self.components = remaining

    def mark_synced(self, external_ref: str, synced_at: datetime) -> None:
        self.external_ref = external_ref
        self.last_synced_at = synced_at
        self.sync_pending = False
