"""Application services: product list and product detail queries."""

from __future__ import annotations

from pricebook.application.dto import (
    BomLineDTO,
    PriceDTO,
    ProductDetailDTO,
    ProductLineDTO,
    format_amount,
    format_margin,
)
from pricebook.domain.exceptions import EntityNotFoundError, ValidationError
from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import PriceList, ProductKind
from pricebook.domain.repository.product_repository import ProductRepository
from pricebook.domain.service.cost_resolver import find_product
from pricebook.domain.service.validator import validate

FILTERS = ("all", "incomplete", "unsynced")


def _price(product: Product, price_list: PriceList, currency: str) -> str:
    entry = product.price_for(price_list)
    return format_amount(entry.final_price, currency) if entry is not None else "-"


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository, currency: str = "EUR") -> None:
        self._product_repo = product_repo
        self._currency = currency

    def handle(
        self,
        filter_mode: str = "all",
        kind: ProductKind | None = None,
    ) -> list[ProductLineDTO]:
        if filter_mode not in FILTERS:
            raise ValidationError(f"Unknown filter '{filter_mode}'")

        all_products = self._product_repo.list_all()
        lines: list[ProductLineDTO] = []
        for p in all_products:
            if kind is not None and p.kind is not kind:
                continue
            result = validate(p, all_products)
            if filter_mode == "incomplete" and result.valid:
                continue
            if filter_mode == "unsynced" and not p.sync_pending:
                continue

            if not result.valid:
                status = f"incomplete: {result.message}"
            elif p.sync_pending:
                status = "unsynced"
            else:
                status = "synced"

            lines.append(
                ProductLineDTO(
                    id=p.id,
                    sku=p.sku,
                    name=p.name,
                    kind=p.kind.value,
                    purchase_cost=format_amount(p.purchase_cost, self._currency),
                    b2b_price=_price(p, PriceList.B2B, self._currency),
                    consumer_price=_price(p, PriceList.CONSUMER, self._currency),
                    status=status,
                )
            )
        return lines


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository, currency: str = "EUR") -> None:
        self._product_repo = product_repo
        self._currency = currency

    def handle(self, sku: str) -> ProductDetailDTO:
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product '{sku}' not found")

        all_products = self._product_repo.list_all()
        components: list[BomLineDTO] = []
        for line in product.components:
            component = find_product(line.component_id, all_products)
            if component is None:
                components.append(
                    BomLineDTO(line.component_id, None, None, line.quantity, "-", "-")
                )
                continue
            components.append(
                BomLineDTO(
                    component_id=component.id,
                    sku=component.sku,
                    name=component.name,
                    quantity=line.quantity,
                    unit_cost=format_amount(component.purchase_cost, self._currency),
                    line_total=format_amount(component.purchase_cost * line.quantity, self._currency),
                )
            )

        return ProductDetailDTO(
            id=product.id,
            sku=product.sku,
            name=product.name,
            kind=product.kind.value,
            purchase_cost=format_amount(product.purchase_cost, self._currency),
            prices=[
                PriceDTO(
                    price_list=e.price_list.value,
                    margin=format_margin(e.discount),
                    final_price=format_amount(e.final_price, self._currency),
                )
                for e in product.prices
            ],
            components=components,
            external_ref=product.external_ref,
            sync_pending=product.sync_pending,
            validation_error=validate(product, all_products).message,
            last_edited_at=_timestamp(product.last_edited_at),
            last_synced_at=_timestamp(product.last_synced_at),
        )


def _timestamp(value) -> str | None:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value is not None else None
