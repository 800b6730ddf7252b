"""Per-price-list price computation."""

from __future__ import annotations

from decimal import Decimal

from pricebook.domain.model.settings import AppSettings
from pricebook.domain.model.value_objects import PriceEntry, PriceList
from pricebook.domain.service.formula import evaluate


def formula_for(price_list: PriceList, settings: AppSettings) -> str:
    """Consumer has its own formula; every other list uses the B2B one."""
    if price_list is PriceList.CONSUMER:
        return settings.consumer_formula
    return settings.b2b_formula


def compute_prices(
    cost: Decimal,
    entries: list[PriceEntry],
    settings: AppSettings,
) -> list[PriceEntry]:
    """Return *entries* repriced for *cost*.

    Margins are left untouched: an unset margin still prices (as 0) but
    stays unset, so the product remains ineligible for sync.
    """
    return [
        entry.with_price(
            evaluate(cost, entry.discount, formula_for(entry.price_list, settings))
        )
        for entry in entries
    ]
