"""Activity log entries shown on the log screen."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class LogKind(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SYNC = "sync"
    IMPORT = "import"


@dataclass(frozen=True)
class LogEntry:
    id: int
    kind: LogKind
    message: str
    created_at: datetime
    details: Any = None
    actor: str | None = None
