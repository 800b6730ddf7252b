"""Domain service: cascading recompute on product save.

Saving a simple product changes the cost of every composite that lists
it as a component. This service works out which products have to be
written, with their costs and prices brought up to date.

It works on a snapshot of the catalog and never mutates it, nor the
product it was handed; everything it returns is a fresh copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from pricebook.domain.exceptions import BomStructureError
from pricebook.domain.model.product import Product
from pricebook.domain.model.settings import AppSettings
from pricebook.domain.service.cost_resolver import (
    affected_composites,
    find_product,
    resolve_cost,
)
from pricebook.domain.service.pricing import compute_prices


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CascadeResult:
    """Products to persist, edited product first, then its dependents."""

    to_persist: list[Product] = field(default_factory=list)

    @property
    def edited(self) -> Product:
        return self.to_persist[0]

    @property
    def cascaded(self) -> list[Product]:
        return self.to_persist[1:]


class CascadeUpdateService:

    def __init__(
        self,
        settings: AppSettings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._settings = settings
        self._clock = clock

    def apply_save(self, edited: Product, all_products: list[Product]) -> CascadeResult:
        """Recompute *edited* and the composites that depend on it.

        Steps:
        1. Reject a save that would nest composites.
        2. Stamp the edited product as pending and recompute its cost
           and prices.
        3. If it is simple, recompute every composite that references it,
           against the catalog with the new values in place. One level only:
           components are always simple, so nothing deeper can change.
        """
        self.check_bom_structure(edited, all_products)
        now = self._clock()

        updated = self._recompute(edited, all_products, now)
        snapshot = self._substitute(updated, all_products)

        cascaded: list[Product] = []
        if updated.is_simple:
            for composite in affected_composites(updated.id, snapshot):
                cascaded.append(self._recompute(composite, snapshot, now))

        return CascadeResult(to_persist=[updated, *cascaded])

    @staticmethod
    def check_bom_structure(edited: Product, all_products: list[Product]) -> None:
        """A composite's components must all be simple products."""
        if not edited.is_composite:
            return
        for line in edited.components:
            if line.component_id == edited.id:
                raise BomStructureError(
                    f"'{edited.sku}' cannot be a component of itself"
                )
            component = find_product(line.component_id, all_products)
            if component is not None and component.is_composite:
                raise BomStructureError(
                    f"'{component.sku}' is a composite product and cannot be a "
                    f"component of '{edited.sku}'"
                )
        parents = affected_composites(edited.id, all_products)
        if parents:
            raise BomStructureError(
                f"'{edited.sku}' is a component of '{parents[0].sku}' and must "
                f"stay a simple product"
            )

    # --- Internal helpers -----------------------------------------------------

    def _recompute(
        self, product: Product, all_products: list[Product], now: datetime
    ) -> Product:
        result = product.copy()
        result.purchase_cost = resolve_cost(result, all_products)
        result.prices = compute_prices(result.purchase_cost, result.prices, self._settings)
        result.sync_pending = True
        result.last_edited_at = now
        return result

    @staticmethod
    def _substitute(product: Product, all_products: list[Product]) -> list[Product]:
        replaced = False
        snapshot: list[Product] = []
        for p in all_products:
            if p.id == product.id:
                snapshot.append(product)
                replaced = True
            else:
                snapshot.append(p)
        if not replaced:
            snapshot.append(product)
        return snapshot
