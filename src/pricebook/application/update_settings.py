"""Application service: price formula and language settings."""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

from pricebook.domain.exceptions import ValidationError
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.settings import SUPPORTED_LANGUAGES, AppSettings
from pricebook.domain.model.value_objects import PriceEntry, PriceList
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.settings_repository import SettingsRepository
from pricebook.domain.service.formula import parse_formula
from pricebook.domain.service.pricing import compute_prices


class UpdateSettingsHandler:

    def __init__(self, settings_repo: SettingsRepository, activity_log: ActivityLog) -> None:
        self._settings_repo = settings_repo
        self._activity_log = activity_log

    def handle(
        self,
        b2b_formula: str | None = None,
        consumer_formula: str | None = None,
        language: str | None = None,
        actor: str | None = None,
    ) -> AppSettings:
        """Update the given settings; a malformed formula is rejected.

        Stored prices are not recomputed; products pick up the new
        formula the next time they are saved.
        """
        settings = self._settings_repo.get_app_settings()
        if b2b_formula is not None:
            parse_formula(b2b_formula)
            settings = replace(settings, b2b_formula=b2b_formula.strip())
        if consumer_formula is not None:
            parse_formula(consumer_formula)
            settings = replace(settings, consumer_formula=consumer_formula.strip())
        if language is not None:
            if language not in SUPPORTED_LANGUAGES:
                raise ValidationError(
                    f"Unsupported language '{language}' "
                    f"(choose from {', '.join(SUPPORTED_LANGUAGES)})"
                )
            settings = replace(settings, language=language)

        self._settings_repo.save_app_settings(settings)
        self._activity_log.append(LogKind.INFO, "Updated application settings", actor=actor)
        return settings


def preview_prices(
    settings: AppSettings, cost: Decimal, margin: Decimal | None
) -> list[PriceEntry]:
    """Price a sample cost and margin with the current formulas."""
    entries = [PriceEntry(pl, discount=margin) for pl in PriceList]
    return compute_prices(cost, entries, settings)
