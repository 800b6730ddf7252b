"""Human-readable description sent along with a synced product."""

from __future__ import annotations

from pricebook.domain.model.product import Product
from pricebook.domain.service.cost_resolver import find_product


def describe(product: Product, all_products: list[Product]) -> str:
    """List "<qty> x <name>" per component for composites, else the name.

    Dangling component references are left out of the description.
    """
    if not product.is_composite:
        return product.name
    lines = []
    for line in product.components:
        component = find_product(line.component_id, all_products)
        if component is not None:
            lines.append(f"{line.quantity} x {component.name}")
    return "\n".join(lines)
