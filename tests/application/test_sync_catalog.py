"""Integration tests for the sync status overview and bulk sync."""

import threading

from pricebook.application.sync_catalog import SyncCatalogHandler, SyncStatusHandler
from pricebook.application.sync_product import SyncProductHandler
from pricebook.domain.model.value_objects import ProductKind
from tests.fakes import (
    FakeActivityLog,
    FakeCatalogGateway,
    FakeProductRepository,
    fixed_clock,
    make_composite,
    make_simple,
)


def _pending(product):
    product.sync_pending = True
    return product


def _catalog():
    return [
        _pending(make_simple("a", "A")),
        _pending(make_simple("b", "B")),
        _pending(make_simple("x", "X", name="")),
        make_simple("s", "S"),
        _pending(make_composite("c", "C", [("a", 1)])),
    ]


def _setup(gateway=None):
    repo = FakeProductRepository(_catalog())
    gateway = gateway or FakeCatalogGateway(failing={"B"})
    log = FakeActivityLog()
    sync = SyncProductHandler(repo, gateway, log, clock=fixed_clock)
    return SyncCatalogHandler(repo, sync, log), repo, gateway, log


class TestSyncStatus:

    def test_pending_split_into_ready_and_blocked(self):
        repo = FakeProductRepository(_catalog())
        status = SyncStatusHandler(repo).handle()
        assert status.ready == ["A", "B", "C"]
        assert status.blocked == [("X", "Missing Name")]


class TestBulkSync:

    def test_failures_isolated(self):
        handler, repo, gateway, log = _setup()
        summary = handler.handle()

        assert [c[0] for c in gateway.calls] == ["A", "B", "C"]
        assert [i.message for i in summary.items] == [
            "[SUCCESS] Created A",
            "[ERROR] Failed B: Upstream Error 500",
            "[SUCCESS] Created C",
        ]
        assert summary.succeeded == 2
        assert summary.failed == 1
        assert repo.get_by_sku("B").sync_pending is True
        assert repo.get_by_sku("C").sync_pending is False
        assert log.messages()[-1] == "Bulk sync: 2 succeeded, 1 failed"

    def test_incomplete_and_synced_products_skipped(self):
        handler, _, gateway, _ = _setup()
        handler.handle()
        skus = [c[0] for c in gateway.calls]
        assert "X" not in skus
        assert "S" not in skus

    def test_kind_filter(self):
        handler, _, gateway, _ = _setup()
        summary = handler.handle(kind=ProductKind.COMPOSITE)
        assert gateway.calls == [("C", "1 x Product A")]
        assert summary.succeeded == 1

    def test_already_linked_product_reported_as_updated(self):
        handler, repo, _, _ = _setup()
        c = repo.get_by_sku("C")
        c.external_ref = "tl-9"
        repo.save(c)
        summary = handler.handle(kind=ProductKind.COMPOSITE)
        assert summary.items[0].message == "[SUCCESS] Updated C"

    def test_cancel_before_start(self):
        handler, _, gateway, log = _setup()
        cancel = threading.Event()
        cancel.set()
        summary = handler.handle(cancel=cancel)
        assert summary.cancelled is True
        assert summary.items == []
        assert gateway.calls == []
        assert log.entries == []

    def test_cancel_stops_before_next_product(self):
        cancel = threading.Event()

        class CancellingGateway(FakeCatalogGateway):
            def push_product(self, product, description):
                cancel.set()
                return super().push_product(product, description)

        handler, repo, gateway, _ = _setup(CancellingGateway())
        summary = handler.handle(cancel=cancel)

        assert summary.cancelled is True
        assert [i.sku for i in summary.items] == ["A"]
        assert repo.get_by_sku("B").sync_pending is True
