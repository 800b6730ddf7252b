"""Application service: Bulk Margin Edit use case."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from pricebook.application.dto import BulkUpdateResult
from pricebook.domain.exceptions import DomainException, EntityNotFoundError
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.value_objects import PriceList
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.product_repository import ProductRepository
from pricebook.domain.repository.settings_repository import SettingsRepository
from pricebook.domain.service.cascade import utcnow
from pricebook.domain.service.pricing import compute_prices

logger = logging.getLogger(__name__)


class BulkUpdateMarginsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        settings_repo: SettingsRepository,
        activity_log: ActivityLog,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._product_repo = product_repo
        self._settings_repo = settings_repo
        self._activity_log = activity_log
        self._clock = clock

    def handle(
        self,
        skus: list[str],
        margins: dict[PriceList, Decimal],
        actor: str | None = None,
    ) -> BulkUpdateResult:
        """Set the given margins on every selected product and reprice it.

        Costs do not change, so no cascade is needed. Each product is
        written on its own; one failure does not stop the rest.
        """
        result = BulkUpdateResult()
        if not margins:
            return result

        settings = self._settings_repo.get_app_settings()
        now = self._clock()

        for sku in skus:
            try:
                product = self._product_repo.get_by_sku(sku)
                if product is None:
                    raise EntityNotFoundError(f"Product '{sku}' not found")
                for price_list, margin in margins.items():
                    product.set_margin(price_list, margin)
                product.prices = compute_prices(product.purchase_cost, product.prices, settings)
                product.sync_pending = True
                product.last_edited_at = now
                self._product_repo.save(product)
            except DomainException as exc:
                logger.warning("Bulk margin update failed for %s: %s", sku, exc)
                result.failed.append((sku, str(exc)))
            else:
                result.updated.append(product.sku)

        if result.updated:
            self._activity_log.append(
                LogKind.SUCCESS, f"Bulk updated {len(result.updated)} products", actor=actor
            )
        if result.failed:
            self._activity_log.append(
                LogKind.ERROR,
                f"Bulk update failed for {len(result.failed)} products",
                {"failed": [sku for sku, _ in result.failed]},
                actor,
            )
        return result
