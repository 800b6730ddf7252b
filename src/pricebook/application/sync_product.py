"""Application service: Sync Product use case.

A product is only sent to the external catalog when it passes
validation; otherwise the request is refused locally and nothing goes
over the network.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from pricebook.domain.exceptions import (
    EntityNotFoundError,
    SyncRefusedError,
    TransportError,
)
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.product import Product
from pricebook.domain.repository.activity_log import ActivityLog
from pricebook.domain.repository.catalog_sync_gateway import CatalogSyncGateway
from pricebook.domain.repository.product_repository import ProductRepository
from pricebook.domain.service.cascade import utcnow
from pricebook.domain.service.sync_description import describe
from pricebook.domain.service.validator import validate

logger = logging.getLogger(__name__)


class SyncProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        gateway: CatalogSyncGateway,
        activity_log: ActivityLog,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._product_repo = product_repo
        self._gateway = gateway
        self._activity_log = activity_log
        self._clock = clock

    def handle(self, sku: str, actor: str | None = None) -> Product:
        """Sync one product by SKU and return it as stored afterwards."""
        all_products = self._product_repo.list_all()
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"Product '{sku}' not found")
        return self.sync(product, all_products, actor)

    def sync(
        self,
        product: Product,
        all_products: list[Product],
        actor: str | None = None,
    ) -> Product:
        """Push *product* and record the external reference.

        On a transport failure the product is left untouched, so it stays
        pending and can be retried.
        """
        validation = validate(product, all_products)
        if not validation.valid:
            raise SyncRefusedError(f"Cannot sync {product.sku}: {validation.message}")

        description = describe(product, all_products)
        try:
            external_ref = self._gateway.push_product(product, description)
        except TransportError as exc:
            logger.warning("Sync of %s failed: %s", product.sku, exc)
            self._activity_log.append(
                LogKind.ERROR, f"Sync failed for {product.sku}", {"error": str(exc)}, actor
            )
            raise

        synced = product.copy()
        synced.mark_synced(external_ref, self._clock())
        self._product_repo.save(synced)
        self._activity_log.append(LogKind.SYNC, f"Synced product {synced.sku}", actor=actor)
        return synced
