"""Process-wide application settings (price formulas and UI language)."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FORMULA_B2B = "cost * 1.25 * 1.05 / 0.98"
DEFAULT_FORMULA_CONSUMER = "cost * 1.25"
SUPPORTED_LANGUAGES = ("en", "nl")


@dataclass(frozen=True)
class AppSettings:
    b2b_formula: str = DEFAULT_FORMULA_B2B
    consumer_formula: str = DEFAULT_FORMULA_CONSUMER
    language: str = "en"
