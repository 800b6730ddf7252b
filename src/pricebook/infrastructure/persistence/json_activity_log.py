"""JSON-file-backed activity log."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pricebook.domain.model.activity import LogEntry, LogKind
from pricebook.domain.repository.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class JsonActivityLog(ActivityLog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def append(
        self,
        kind: LogKind,
        message: str,
        details: Any = None,
        actor: str | None = None,
    ) -> None:
        # Fire-and-forget: failures are logged here, never raised.
        try:
            rows = self._load()
            rows.append(
                {
                    "id": max((r["id"] for r in rows), default=0) + 1,
                    "type": kind.value,
                    "message": message,
                    "details": details,
                    "user_name": actor,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                }
            )
            self._file_path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not write activity log entry %r: %s", message, exc)

    def list_recent(self, limit: int = 100) -> list[LogEntry]:
        try:
            rows = self._load()
        except (OSError, ValueError) as exc:
            logger.warning("Could not read activity log: %s", exc)
            return []
        rows.sort(key=lambda r: r["id"], reverse=True)
        return [
            LogEntry(
                id=r["id"],
                kind=LogKind(r["type"]),
                message=r["message"],
                created_at=datetime.fromisoformat(r["created_at"]),
                details=r.get("details"),
                actor=r.get("user_name"),
            )
            for r in rows[:limit]
        ]

    def _load(self) -> list[dict[str, Any]]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
