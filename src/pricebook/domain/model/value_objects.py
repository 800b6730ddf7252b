"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
Amounts are plain ``Decimal`` values: the catalog is currency-agnostic,
so there is no Money wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from enum import Enum

from pricebook.domain.exceptions import ValidationError

ZERO = Decimal("0")


class ProductKind(Enum):
    SIMPLE = "simple"
    COMPOSITE = "composite"


class PriceList(Enum):
    """Pricing channels, in the order they are checked and displayed."""

    B2B = "B2B"
    CONSUMER = "Consumer"


def to_amount(value: str | float | int | Decimal) -> Decimal:
    """Coerce user or storage input to a finite Decimal."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount


def to_margin(value: str | float | int | Decimal | None) -> Decimal | None:
    """Coerce a margin percentage; ``None`` and blank mean "unset"."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    margin = to_amount(value)
    if margin < 0 or margin > 100:
        raise ValidationError(f"Margin must be between 0 and 100, got {margin}")
    return margin


@dataclass(frozen=True)
class BomLine:
    """One bill-of-materials row: a weak reference by id plus a quantity.

    The quantity is not range-checked here; a zero or negative quantity
    is an editing state the user is allowed to reach.
    """

    component_id: str
    quantity: int


@dataclass(frozen=True)
class PriceEntry:
    """Price of one product on one price list.

    ``discount`` is the margin percentage fed into the formula.
    ``None`` means the margin was never set, which blocks sync.
    """

    price_list: PriceList
    calculated_price: Decimal = ZERO
    discount: Decimal | None = None
    final_price: Decimal = ZERO

    def with_price(self, price: Decimal) -> PriceEntry:
        return replace(self, calculated_price=price, final_price=price)

    def with_discount(self, discount: Decimal | None) -> PriceEntry:
        return replace(self, discount=discount)
