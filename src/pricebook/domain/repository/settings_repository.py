"""Abstract repository for application and integration settings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pricebook.domain.model.settings import AppSettings


class SettingsRepository(ABC):

    @abstractmethod
    def get_app_settings(self) -> AppSettings:
        """Return stored settings, falling back to defaults."""

    @abstractmethod
    def save_app_settings(self, settings: AppSettings) -> None:
        """Persist the application settings."""

    @abstractmethod
    def get_integration_settings(self, service: str) -> dict[str, Any] | None:
        """Return the free-form settings blob of an integration, if any."""

    @abstractmethod
    def save_integration_settings(self, service: str, settings: dict[str, Any]) -> None:
        """Replace the settings blob of an integration."""
