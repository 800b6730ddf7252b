"""Data Transfer Objects returned to the CLI by the use-case handlers.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from pricebook.domain.model.product import Product


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def format_amount(amount: Decimal, currency: str = "EUR") -> str:
    """Prefix the currency symbol, or suffix the ISO code when it has none."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{amount:.2f} {currency.upper()}"
    return f"{symbol}{amount:.2f}"


def format_margin(margin: Decimal | None) -> str:
    return "-" if margin is None else f"{margin.normalize():f}%"


@dataclass(frozen=True)
class ProductLineDTO:
    """Output: one row of the product list."""

    id: str
    sku: str
    name: str
    kind: str
    purchase_cost: str  # formatted, e.g. "€12.50"
    b2b_price: str
    consumer_price: str
    status: str  # "synced", "unsynced" or "incomplete: <reason>"


@dataclass(frozen=True)
class BomLineDTO:
    """Output: a bill-of-materials row; ``sku`` is None for a dangling reference."""

    component_id: str
    sku: str | None
    name: str | None
    quantity: int
    unit_cost: str
    line_total: str


@dataclass(frozen=True)
class PriceDTO:
    price_list: str
    margin: str
    final_price: str


@dataclass(frozen=True)
class ProductDetailDTO:
    """Output: a single product as displayed on its detail screen."""

    id: str
    sku: str
    name: str
    kind: str
    purchase_cost: str
    prices: list[PriceDTO]
    components: list[BomLineDTO]
    external_ref: str | None
    sync_pending: bool
    validation_error: str | None
    last_edited_at: str | None
    last_synced_at: str | None


@dataclass(frozen=True)
class SaveOutcome:
    """Output: what a save wrote, edited product first."""

    product: Product
    created: bool
    cascaded: list[Product] = field(default_factory=list)


@dataclass(frozen=True)
class BulkUpdateResult:
    updated: list[str] = field(default_factory=list)  # SKUs
    failed: list[tuple[str, str]] = field(default_factory=list)  # (SKU, error)


@dataclass(frozen=True)
class SyncItemResult:
    sku: str
    ok: bool
    message: str


@dataclass
class SyncSummary:
    """Output: outcome of a bulk sync, one log line per product."""

    items: list[SyncItemResult] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.items if item.ok)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.ok)


@dataclass(frozen=True)
class SyncStatusDTO:
    """Output: pending products split into ready and blocked."""

    ready: list[str] = field(default_factory=list)  # SKUs
    blocked: list[tuple[str, str]] = field(default_factory=list)  # (SKU, reason)
