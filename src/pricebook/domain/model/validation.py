"""Validation outcome for a product.

The validator reports the first problem it finds as data. Only one
reason is ever reported, so the order of the checks is part of the
user-facing behaviour.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    MISSING_SKU = "missing_sku"
    DUPLICATE_SKU = "duplicate_sku"
    MISSING_NAME = "missing_name"
    NON_POSITIVE_COST = "non_positive_cost"
    EMPTY_BOM = "empty_bom"
    MISSING_COMPONENT = "missing_component"
    ZERO_COST_COMPONENT = "zero_cost_component"
    MARGIN_NOT_SET = "margin_not_set"


_MESSAGES = {
    ErrorKind.MISSING_SKU: "Missing SKU",
    ErrorKind.DUPLICATE_SKU: "SKU must be unique",
    ErrorKind.MISSING_NAME: "Missing Name",
    ErrorKind.NON_POSITIVE_COST: "Purchase cost must be greater than 0",
    ErrorKind.EMPTY_BOM: "No components added",
    ErrorKind.MISSING_COMPONENT: "Component (ID: {detail}) not found",
    ErrorKind.ZERO_COST_COMPONENT: "Component '{detail}' has 0 cost",
    ErrorKind.MARGIN_NOT_SET: "Margin not set for {detail}",
}


@dataclass(frozen=True)
class ValidationResult:
    """``detail`` carries the component id, component SKU or price list
    name for the kinds that refer to one."""

    valid: bool
    reason: ErrorKind | None = None
    detail: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: ErrorKind, detail: str | None = None) -> ValidationResult:
        return cls(valid=False, reason=reason, detail=detail)

    @property
    def message(self) -> str | None:
        if self.reason is None:
            return None
        return _MESSAGES[self.reason].format(detail=self.detail)
