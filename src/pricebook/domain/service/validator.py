"""Sync-eligibility rules for a product.

Checks run in a fixed order and stop at the first failure. Only that
first failure is shown to the user, so reordering the checks changes
what the user sees.
"""

from __future__ import annotations

from decimal import Decimal

from pricebook.domain.model.product import Product
from pricebook.domain.model.validation import ErrorKind, ValidationResult
from pricebook.domain.model.value_objects import PriceList
from pricebook.domain.service.cost_resolver import find_product


def normalize_sku(sku: str) -> str:
    return sku.strip().lower()


def has_duplicate_sku(product: Product, all_products: list[Product]) -> bool:
    """Blank SKUs are never duplicates; they are reported as missing."""
    wanted = normalize_sku(product.sku)
    if not wanted:
        return False
    return any(
        p.id != product.id and normalize_sku(p.sku) == wanted
        for p in all_products
    )


def _positive(amount: Decimal) -> bool:
    return amount.is_finite() and amount > 0


def validate(product: Product, all_products: list[Product]) -> ValidationResult:
    if not product.sku or not product.sku.strip():
        return ValidationResult.fail(ErrorKind.MISSING_SKU)

    if has_duplicate_sku(product, all_products):
        return ValidationResult.fail(ErrorKind.DUPLICATE_SKU)

    if not product.name or not product.name.strip():
        return ValidationResult.fail(ErrorKind.MISSING_NAME)

    if product.is_simple and not _positive(product.purchase_cost):
        return ValidationResult.fail(ErrorKind.NON_POSITIVE_COST)

    if product.is_composite:
        if not product.components:
            return ValidationResult.fail(ErrorKind.EMPTY_BOM)
        for line in product.components:
            component = find_product(line.component_id, all_products)
            if component is None:
                return ValidationResult.fail(
                    ErrorKind.MISSING_COMPONENT, line.component_id
                )
            if not _positive(component.purchase_cost):
                return ValidationResult.fail(
                    ErrorKind.ZERO_COST_COMPONENT, component.sku
                )

    for price_list in PriceList:
        entry = product.price_for(price_list)
        if entry is None or entry.discount is None:
            return ValidationResult.fail(ErrorKind.MARGIN_NOT_SET, price_list.value)

    return ValidationResult.ok()
