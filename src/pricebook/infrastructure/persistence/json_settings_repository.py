"""JSON-file-backed implementation of SettingsRepository.

``integrations.json`` maps a service name to its settings blob, like
the ``integrations`` table it mirrors. Application settings are stored
under the ``app_settings`` service.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pricebook.domain.exceptions import StorageUnavailableError
from pricebook.domain.model.settings import (
    DEFAULT_FORMULA_B2B,
    DEFAULT_FORMULA_CONSUMER,
    AppSettings,
)
from pricebook.domain.repository.settings_repository import SettingsRepository

APP_SETTINGS_SERVICE = "app_settings"


class JsonSettingsRepository(SettingsRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._cached: AppSettings | None = None
        self._ensure_file()

    # --- SettingsRepository interface -----------------------------------------

    def get_app_settings(self) -> AppSettings:
        if self._cached is None:
            self._cached = self._app_settings_from(
                self.get_integration_settings(APP_SETTINGS_SERVICE) or {}
            )
        return self._cached

    def save_app_settings(self, settings: AppSettings) -> None:
        self.save_integration_settings(
            APP_SETTINGS_SERVICE,
            {
                "priceFormulaB2B": settings.b2b_formula,
                "priceFormulaConsumer": settings.consumer_formula,
                "language": settings.language,
            },
        )
        self._cached = settings

    def get_integration_settings(self, service: str) -> dict[str, Any] | None:
        entry = self._load().get(service)
        return entry["settings"] if entry else None

    def save_integration_settings(self, service: str, settings: dict[str, Any]) -> None:
        data = self._load()
        data[service] = {
            "settings": settings,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self._persist(data)

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _app_settings_from(raw: dict[str, Any]) -> AppSettings:
        # Older stores kept a single "priceFormula" for B2B.
        b2b = raw.get("priceFormulaB2B") or raw.get("priceFormula")
        return AppSettings(
            b2b_formula=b2b or DEFAULT_FORMULA_B2B,
            consumer_formula=raw.get("priceFormulaConsumer") or DEFAULT_FORMULA_CONSUMER,
            language=raw.get("language") or "en",
        )

    def _load(self) -> dict[str, Any]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageUnavailableError(f"Cannot read settings: {exc}") from exc

    def _persist(self, data: dict[str, Any]) -> None:
        try:
            self._file_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot write settings: {exc}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")
