"""Integration tests for syncing a single product."""

import pytest

from pricebook.application.sync_product import SyncProductHandler
from pricebook.domain.exceptions import EntityNotFoundError, SyncRefusedError, TransportError
from pricebook.domain.model.activity import LogKind
from tests.fakes import (
    FIXED_NOW,
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


def _setup(products, failing=None):
    repo = FakeProductRepository(products)
    gateway = FakeCatalogGateway(failing)
    log = FakeActivityLog()
    handler = SyncProductHandler(repo, gateway, log, clock=fixed_clock)
    return handler, repo, gateway, log


class TestSyncGate:

    def test_invalid_product_never_reaches_gateway(self):
        handler, repo, gateway, log = _setup([_pending(make_simple("a", "A", consumer=None))])
        with pytest.raises(SyncRefusedError, match="Cannot sync A: Margin not set for Consumer"):
            handler.handle("A")
        assert gateway.calls == []
        assert repo.saved == []
        assert log.entries == []

    def test_composite_with_missing_component_refused(self):
        c = _pending(make_composite("c", "C", [("gone", 1)]))
        handler, _, gateway, _ = _setup([c])
        with pytest.raises(SyncRefusedError, match="not found"):
            handler.handle("C")
        assert gateway.calls == []

    def test_unknown_sku(self):
        handler, _, _, _ = _setup([])
        with pytest.raises(EntityNotFoundError):
            handler.handle("NOPE")


class TestSyncOutcome:

    def test_success_records_reference(self):
        handler, repo, gateway, log = _setup([_pending(make_simple("a", "A", name="Bolt"))])
        handler.handle("A", actor="alice")

        stored = repo.get_by_sku("A")
        assert gateway.calls == [("A", "Bolt")]
        assert stored.external_ref == "tl-A"
        assert stored.sync_pending is False
        assert stored.last_synced_at == FIXED_NOW
        assert log.entries[-1].kind is LogKind.SYNC
        assert log.messages() == ["Synced product A"]

    def test_composite_sends_component_description(self):
        a = make_simple("a", "A", name="Bolt")
        c = _pending(make_composite("c", "C", [("a", 4)]))
        handler, _, gateway, _ = _setup([a, c])
        handler.handle("C")
        assert gateway.calls == [("C", "4 x Bolt")]

    def test_existing_reference_kept(self):
        a = _pending(make_simple("a", "A"))
        a.external_ref = "tl-existing"
        handler, repo, _, _ = _setup([a])
        handler.handle("A")
        assert repo.get_by_sku("A").external_ref == "tl-existing"

    def test_failure_leaves_product_pending(self):
        handler, repo, gateway, log = _setup([_pending(make_simple("a", "A"))], failing={"A"})
        with pytest.raises(TransportError):
            handler.handle("A")

        stored = repo.get_by_sku("A")
        assert len(gateway.calls) == 1
        assert stored.sync_pending is True
        assert stored.external_ref is None
        assert stored.last_synced_at is None
        assert log.messages() == ["Sync failed for A"]
