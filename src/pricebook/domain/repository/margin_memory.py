"""Port for the "last used margin" convenience memory.

New products are seeded with the margins that were used on the last
saved product, per price list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from pricebook.domain.model.value_objects import PriceList


class MarginMemory(ABC):

    @abstractmethod
    def get(self, price_list: PriceList) -> Decimal | None:
        """Return the remembered margin, or None."""

    @abstractmethod
    def set(self, price_list: PriceList, margin: Decimal) -> None:
        """Remember *margin* for *price_list*."""
