"""Application service: Save Product use case.

Every product write goes through here so that dependent composites are
recomputed and written in the same operation.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from pricebook.application.dto import SaveOutcome
from pricebook.domain.exceptions import (
    DuplicateKeyError,
    StorageUnavailableError,
    ValidationError,
)
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.product import Product
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.margin_memory import MarginMemory
from pricebook.domain.repository.product_repository import ProductRepository
from pricebook.domain.repository.settings_repository import SettingsRepository
from pricebook.domain.service.cascade import CascadeUpdateService, utcnow
from pricebook.domain.service.cost_resolver import find_product
from pricebook.domain.service.validator import has_duplicate_sku

logger = logging.getLogger(__name__)


class SaveProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        settings_repo: SettingsRepository,
        activity_log: ActivityLog,
        margin_memory: MarginMemory,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._product_repo = product_repo
        self._settings_repo = settings_repo
        self._activity_log = activity_log
        self._margin_memory = margin_memory
        self._clock = clock

    def handle(self, product: Product, actor: str | None = None) -> SaveOutcome:
        """Save *product* and every composite that depends on it.

        Steps:
        1. Refuse a SKU another product already uses.
        2. Let the cascade service recompute costs and prices.
        3. Persist the edited product first, then its dependents.
        4. Remember the margins used, for the next new product.

        Incomplete products are saved; only sync is gated on validity.
        """
        all_products = self._product_repo.list_all()
        if has_duplicate_sku(product, all_products):
            raise ValidationError(f"SKU '{product.sku.strip()}' already exists")

        created = find_product(product.id, all_products) is None
        settings = self._settings_repo.get_app_settings()
        service = CascadeUpdateService(settings, clock=self._clock)
        result = service.apply_save(product, all_products)

        try:
            for p in result.to_persist:
                self._product_repo.save(p)
        except DuplicateKeyError:
            self._activity_log.append(
                LogKind.ERROR,
                f"Failed to save product {product.sku}: Duplicate SKU",
                actor=actor,
            )
            raise
        except StorageUnavailableError as exc:
            logger.error("Saving %s failed: %s", product.sku, exc)
            self._activity_log.append(
                LogKind.ERROR,
                f"Failed to save product {product.sku}",
                {"error": str(exc)},
                actor,
            )
            raise

        for entry in result.edited.prices:
            if entry.discount is not None:
                self._margin_memory.set(entry.price_list, entry.discount)

        verb = "Created" if created else "Updated"
        self._activity_log.append(
            LogKind.SUCCESS,
            f"{verb} product: {result.edited.sku}",
            {"id": result.edited.id, "name": result.edited.name},
            actor,
        )
        if result.cascaded:
            logger.info(
                "Recomputed %d composite(s) using %s",
                len(result.cascaded),
                result.edited.sku,
            )

        return SaveOutcome(
            product=result.edited,
            created=created,
            cascaded=result.cascaded,
        )
