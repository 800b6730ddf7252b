"""Abstract activity log."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pricebook.domain.model.activity import LogEntry, LogKind


class ActivityLog(ABC):

    @abstractmethod
    def append(
        self,
        kind: LogKind,
        message: str,
        details: Any = None,
        actor: str | None = None,
    ) -> None:
        """Record an entry. Implementations must not raise."""

    @abstractmethod
    def list_recent(self, limit: int = 100) -> list[LogEntry]:
        """Return up to *limit* entries, newest first."""
