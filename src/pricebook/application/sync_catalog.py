"""Application services: sync status overview and bulk sync."""

from __future__ import annotations

import logging
import threading

from pricebook.application.dto import SyncItemResult, SyncStatusDTO, SyncSummary
from pricebook.application.sync_product import SyncProductHandler
from pricebook.domain.exceptions import DomainException
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.product import Product
from pricebook.domain.model.value_objects import ProductKind
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.product_repository import ProductRepository
from pricebook.domain.service.validator import validate

logger = logging.getLogger(__name__)


class SyncStatusHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> SyncStatusDTO:
        """Split pending products into ready-to-sync and blocked."""
        all_products = self._product_repo.list_all()
        status = SyncStatusDTO()
        for product in all_products:
            if not product.sync_pending:
                continue
            result = validate(product, all_products)
            if result.valid:
                status.ready.append(product.sku)
            else:
                status.blocked.append((product.sku, result.message))
        return status


class SyncCatalogHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        sync_handler: SyncProductHandler,
        activity_log: ActivityLog,
    ) -> None:
        self._product_repo = product_repo
        self._sync_handler = sync_handler
        self._activity_log = activity_log

    def eligible(self, kind: ProductKind | None = None) -> tuple[list[Product], list[Product]]:
        """Return (eligible products, catalog snapshot)."""
        all_products = self._product_repo.list_all()
        targets = [
            p for p in all_products
            if p.sync_pending
            and (kind is None or p.kind is kind)
            and validate(p, all_products).valid
        ]
        return targets, all_products

    def handle(
        self,
        kind: ProductKind | None = None,
        cancel: threading.Event | None = None,
        actor: str | None = None,
    ) -> SyncSummary:
        """Sync every eligible product, one at a time, in catalog order.

        A failure is recorded and the next product is tried. Setting
        *cancel* stops the run before the next product.
        """
        targets, all_products = self.eligible(kind)
        summary = SyncSummary()

        for product in targets:
            if cancel is not None and cancel.is_set():
                summary.cancelled = True
                break
            action = "Updated" if product.external_ref else "Created"
            try:
                self._sync_handler.sync(product, all_products, actor)
            except DomainException as exc:
                summary.items.append(
                    SyncItemResult(product.sku, False, f"[ERROR] Failed {product.sku}: {exc}")
                )
            else:
                summary.items.append(
                    SyncItemResult(product.sku, True, f"[SUCCESS] {action} {product.sku}")
                )

        logger.info(
            "Sync finished: %d succeeded, %d failed%s",
            summary.succeeded,
            summary.failed,
            " (cancelled)" if summary.cancelled else "",
        )
        if summary.items:
            self._activity_log.append(
                LogKind.SYNC,
                f"Bulk sync: {summary.succeeded} succeeded, {summary.failed} failed",
                actor=actor,
            )
        return summary
