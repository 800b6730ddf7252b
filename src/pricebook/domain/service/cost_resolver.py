"""Purchase cost of simple and composite products."""

from __future__ import annotations

from decimal import Decimal

from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import ZERO


def find_product(product_id: str, all_products: list[Product]) -> Product | None:
    """Look up a product by id; None when the reference is dangling."""
    for product in all_products:
        if product.id == product_id:
            return product
    return None


def resolve_cost(product: Product, all_products: list[Product]) -> Decimal:
    """Return the purchase cost of *product*.

    Simple products keep their stored cost. A composite costs the sum of
    its components' *stored* costs times their quantities; only one level
    is summed because components are always simple. A component that
    cannot be found counts as 0 (the validator reports it).
    """
    if product.is_simple:
        return product.purchase_cost

    total = ZERO
    for line in product.components:
        component = find_product(line.component_id, all_products)
        if component is not None:
            total += component.purchase_cost * line.quantity
    return total


def affected_composites(component_id: str, all_products: list[Product]) -> list[Product]:
    """Composites whose bill of materials references *component_id*."""
    return [
        p for p in all_products
        if p.is_composite and p.id != component_id and p.references(component_id)
    ]
