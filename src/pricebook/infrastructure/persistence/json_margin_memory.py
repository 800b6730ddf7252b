"""JSON-file-backed MarginMemory."""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pricebook.domain.model.value_objects import PriceList
from pricebook.domain.repository.margin_memory import MarginMemory

logger = logging.getLogger(__name__)


class JsonMarginMemory(MarginMemory):
    """Keys are ``last_margin_<price list>``.

    This is a convenience only, so unreadable data just means nothing
    is remembered.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get(self, price_list: PriceList) -> Decimal | None:
        raw = self._load().get(f"last_margin_{price_list.value}")
        if raw is None:
            return None
        try:
            return Decimal(raw)
        except InvalidOperation:
            return None

    def set(self, price_list: PriceList, margin: Decimal) -> None:
        data = self._load()
        data[f"last_margin_{price_list.value}"] = str(margin)
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not remember margin: %s", exc)

    def _load(self) -> dict[str, str]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable margin memory: %s", exc)
            return {}
