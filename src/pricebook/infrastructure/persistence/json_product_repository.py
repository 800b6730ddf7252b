"""JSON-file-backed implementation of ProductRepository.

Products and BOM lines are stored in two files, the way a relational
store keeps them in two tables: ``products.json`` and
``bom_entries.json`` (rows of ``parent_id``, ``component_id``,
``quantity``). Saving a composite replaces all of its BOM rows.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from pricebook.domain.exceptions import DuplicateKeyError, StorageUnavailableError
from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import BomLine, PriceEntry, PriceList, ProductKind
from pricebook.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):

    def __init__(self, products_path: Path, bom_path: Path) -> None:
        self._products_path = products_path
        self._bom_path = bom_path
        self._ensure_file(self._products_path)
        self._ensure_file(self._bom_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for product in self.list_all():
            if product.id == product_id:
                return product
        return None

    def get_by_sku(self, sku: str) -> Product | None:
        wanted = sku.strip().lower()
        for product in self.list_all():
            if product.sku.strip().lower() == wanted:
                return product
        return None

    def list_all(self) -> list[Product]:
        rows = self._read(self._products_path)
        bom_rows = self._read(self._bom_path)
        return [self._from_row(row, bom_rows) for row in rows]

    def save(self, product: Product) -> None:
        rows = self._read(self._products_path)
        for row in rows:
            if row["id"] != product.id and product.sku and row["sku"] == product.sku:
                raise DuplicateKeyError(f"SKU '{product.sku}' already exists")

        new_row = self._to_row(product)
        for i, row in enumerate(rows):
            if row["id"] == product.id:
                rows[i] = new_row
                break
        else:
            rows.append(new_row)
        self._write(self._products_path, rows)

        bom_rows = [r for r in self._read(self._bom_path) if r["parent_id"] != product.id]
        if product.is_composite:
            bom_rows.extend(
                {
                    "parent_id": product.id,
                    "component_id": line.component_id,
                    "quantity": line.quantity,
                }
                for line in product.components
            )
        self._write(self._bom_path, bom_rows)

    def delete(self, product_id: str) -> None:
        rows = [r for r in self._read(self._products_path) if r["id"] != product_id]
        self._write(self._products_path, rows)
        bom_rows = [r for r in self._read(self._bom_path) if r["parent_id"] != product_id]
        self._write(self._bom_path, bom_rows)

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _from_row(row: dict[str, Any], bom_rows: list[dict[str, Any]]) -> Product:
        return Product(
            id=row["id"],
            sku=row["sku"],
            name=row["name"],
            kind=ProductKind(row.get("type") or ProductKind.SIMPLE.value),
            purchase_cost=Decimal(row["purchase_cost"]),
            prices=[
                PriceEntry(
                    price_list=PriceList(p["price_list"]),
                    calculated_price=Decimal(p["calculated_price"]),
                    discount=Decimal(p["discount"]) if p.get("discount") is not None else None,
                    final_price=Decimal(p["final_price"]),
                )
                for p in row.get("prices", [])
            ],
            components=[
                BomLine(b["component_id"], int(b["quantity"]))
                for b in bom_rows
                if b["parent_id"] == row["id"]
            ],
            external_ref=row.get("external_ref"),
            sync_pending=bool(row.get("needs_sync", True)),
            last_synced_at=_parse_ts(row.get("last_sync")),
            last_edited_at=_parse_ts(row.get("last_edited")),
        )

    @staticmethod
    def _to_row(product: Product) -> dict[str, Any]:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "type": product.kind.value,
            "purchase_cost": str(product.purchase_cost),
            "prices": [
                {
                    "price_list": p.price_list.value,
                    "calculated_price": str(p.calculated_price),
                    "discount": str(p.discount) if p.discount is not None else None,
                    "final_price": str(p.final_price),
                }
                for p in product.prices
            ],
            "external_ref": product.external_ref,
            "needs_sync": product.sync_pending,
            "last_sync": _format_ts(product.last_synced_at),
            "last_edited": _format_ts(product.last_edited_at),
        }

    @staticmethod
    def _read(path: Path) -> list[dict[str, Any]]:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageUnavailableError(f"Cannot read {path.name}: {exc}") from exc

    @staticmethod
    def _write(path: Path, rows: list[dict[str, Any]]) -> None:
        try:
            path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write {path.name}: {exc}") from exc

    @staticmethod
    def _ensure_file(path: Path) -> None:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _format_ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
