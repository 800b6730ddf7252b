"""Integration tests for the SaveProduct use case.

Uses in-memory fakes, no file I/O.
"""

from decimal import Decimal

import pytest

from pricebook.application.save_product import SaveProductHandler
from pricebook.domain.exceptions import (
    BomStructureError,
    DuplicateKeyError,
    StorageUnavailableError,
    ValidationError,
)
from pricebook.domain.model.activity import LogKind
from pricebook.domain.model.value_objects import PriceList, ProductKind
from tests.fakes import (
    FIXED_NOW,
    FakeActivityLog,
    FakeMarginMemory,
    FakeProductRepository,
    FakeSettingsRepository,
    fixed_clock,
    make_composite,
    make_simple,
)


def _setup(products=None):
    if products is None:
        products = [
            make_simple("a", "A", cost="10"),
            make_simple("b", "B", cost="5"),
            make_composite("c", "C", [("a", 2), ("b", 3)], cost="35"),
        ]
    repo = FakeProductRepository(products)
    log = FakeActivityLog()
    memory = FakeMarginMemory()
    handler = SaveProductHandler(
        repo, FakeSettingsRepository(), log, memory, clock=fixed_clock
    )
    return handler, repo, log, memory


class TestSaveHappyPath:

    def test_cost_change_cascades_to_composites(self):
        handler, repo, _, _ = _setup()
        a = repo.get_by_sku("A")
        a.purchase_cost = Decimal("20")

        outcome = handler.handle(a)

        assert repo.saved == ["A", "C"]
        assert outcome.created is False
        assert [p.sku for p in outcome.cascaded] == ["C"]
        stored = repo.get_by_sku("C")
        assert stored.purchase_cost == Decimal("55")
        assert stored.sync_pending is True
        assert stored.last_edited_at == FIXED_NOW

    def test_edited_product_repriced(self):
        handler, repo, _, _ = _setup()
        a = repo.get_by_sku("A")
        a.purchase_cost = Decimal("20")
        outcome = handler.handle(a)
        assert outcome.product.price_for(PriceList.B2B).final_price == Decimal("25")
        assert outcome.product.price_for(PriceList.CONSUMER).final_price == Decimal("28")

    def test_update_logged(self):
        handler, repo, log, _ = _setup()
        handler.handle(repo.get_by_sku("B"), actor="alice")
        entry = log.entries[-1]
        assert entry.kind is LogKind.SUCCESS
        assert entry.message == "Updated product: B"
        assert entry.actor == "alice"

    def test_new_product_created(self):
        handler, repo, log, _ = _setup()
        outcome = handler.handle(make_simple("n", "NEW"))
        assert outcome.created is True
        assert repo.get_by_sku("NEW") is not None
        assert log.messages() == ["Created product: NEW"]

    def test_second_blank_sku_product_is_saved(self):
        handler, repo, _, _ = _setup()
        handler.handle(make_simple("n1", "", cost="1"))
        handler.handle(make_simple("n2", " ", cost="2"))
        assert repo.saved == ["", " "]
        assert repo.get_by_id("n2") is not None

    def test_incomplete_product_is_saved(self):
        handler, repo, _, _ = _setup()
        handler.handle(make_simple("n", "NEW", cost="0", b2b=None))
        assert repo.get_by_sku("NEW").sync_pending is True

    def test_margins_remembered(self):
        handler, repo, _, memory = _setup()
        handler.handle(make_simple("n", "NEW", b2b="12", consumer=None))
        assert memory.get(PriceList.B2B) == Decimal("12")
        assert memory.get(PriceList.CONSUMER) is None


class TestSaveFailures:

    def test_duplicate_sku_refused_before_writing(self):
        handler, repo, log, _ = _setup()
        with pytest.raises(ValidationError, match="already exists"):
            handler.handle(make_simple("n", " a "))
        assert repo.saved == []
        assert log.entries == []

    def test_duplicate_key_from_storage_logged(self):
        handler, repo, log, _ = _setup()
        repo.fail_on_save = DuplicateKeyError("SKU 'A' already exists")
        with pytest.raises(DuplicateKeyError):
            handler.handle(repo.get_by_sku("A"))
        assert log.messages() == ["Failed to save product A: Duplicate SKU"]
        assert log.entries[0].kind is LogKind.ERROR

    def test_storage_unavailable_logged_and_raised(self):
        handler, repo, log, _ = _setup()
        repo.fail_on_save = StorageUnavailableError("disk full")
        with pytest.raises(StorageUnavailableError):
            handler.handle(repo.get_by_sku("A"))
        assert log.messages() == ["Failed to save product A"]
        assert log.entries[0].details == {"error": "disk full"}

    def test_nested_composite_rejected(self):
        handler, repo, _, _ = _setup()
        outer = make_composite("o", "OUTER", [("c", 1)])
        with pytest.raises(BomStructureError):
            handler.handle(outer)
        assert repo.saved == []

    def test_component_cannot_become_composite(self):
        handler, repo, _, _ = _setup()
        a = repo.get_by_sku("A")
        a.change_kind(ProductKind.COMPOSITE)
        with pytest.raises(BomStructureError):
            handler.handle(a)
        assert repo.get_by_sku("A").is_simple
