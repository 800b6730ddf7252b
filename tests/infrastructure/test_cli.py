"""End-to-end tests of the CLI against a temporary data directory."""

import pytest
from click.testing import CliRunner

from pricebook.infrastructure import bootstrap
from pricebook.infrastructure.cli.main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("PRICEBOOK_DATA_DIR", str(tmp_path))
    bootstrap.config.cache_clear()
    bootstrap.settings_repository.cache_clear()
    yield CliRunner()
    bootstrap.config.cache_clear()
    bootstrap.settings_repository.cache_clear()


def _ok(runner, *args):
    result = runner.invoke(cli, list(args))
    assert result.exit_code == 0, result.output
    return result.output


def test_add_and_list(runner):
    out = _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt", "--cost", "10",
              "--b2b-margin", "25", "--consumer-margin", "40")
    assert "Product A created" in out

    out = _ok(runner, "product", "list")
    assert "Bolt" in out
    assert "unsynced" in out


def test_composite_cost_follows_component(runner):
    _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt", "--cost", "10",
        "--b2b-margin", "25", "--consumer-margin", "40")
    _ok(runner, "product", "add", "--sku", "KIT", "--name", "Kit", "--kind", "composite")
    _ok(runner, "bom", "add", "KIT", "A", "--quantity", "3")

    out = _ok(runner, "product", "update", "A", "--cost", "20")
    assert "recomputed KIT: cost=€60.00" in out

    out = _ok(runner, "product", "show", "KIT")
    assert "Purchase cost: €60.00" in out


def test_incomplete_product_reported(runner):
    _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt")
    out = _ok(runner, "product", "validate", "A")
    assert "A is incomplete: Purchase cost must be greater than 0" in out


def test_duplicate_sku_is_an_error(runner):
    _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt")
    result = runner.invoke(cli, ["product", "add", "--sku", "a", "--name", "Other"])
    assert result.exit_code != 0
    assert "already exists" in result.output


def test_bad_margin_rejected(runner):
    result = runner.invoke(cli, ["product", "add", "--sku", "A", "--name", "Bolt",
                                 "--b2b-margin", "150"])
    assert result.exit_code != 0
    assert "between 0 and 100" in result.output


def test_sync_status_without_products(runner):
    assert "Everything is up to date." in _ok(runner, "sync", "status")


def test_settings_round_trip(runner):
    _ok(runner, "settings", "set", "--b2b-formula", "cost * 2")
    assert "cost * 2" in _ok(runner, "settings", "show")


def test_delete_logged(runner):
    _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt")
    _ok(runner, "product", "delete", "A", "--yes")
    assert "Deleted product: A" in _ok(runner, "log", "list")


def test_non_finite_cost_rejected(runner):
    result = runner.invoke(cli, ["product", "add", "--sku", "A", "--name", "Bolt", "--cost", "nan"])
    assert result.exit_code != 0
    assert "Invalid amount" in result.output
    assert "No products found." in _ok(runner, "product", "list")


def test_non_finite_margin_rejected(runner):
    result = runner.invoke(cli, ["product", "add", "--sku", "A", "--name", "Bolt",
                                 "--consumer-margin", "nan"])
    assert result.exit_code == 2
    assert "Invalid amount" in result.output


def test_deeply_nested_formula_refused(runner):
    result = runner.invoke(cli, ["settings", "set", "--b2b-formula", "(" * 2000 + "cost" + ")" * 2000])
    assert result.exit_code == 1
    assert "longer than" in result.output


def test_amounts_in_configured_currency(runner, monkeypatch):
    monkeypatch.setenv("PRICEBOOK_CURRENCY", "USD")
    bootstrap.config.cache_clear()
    out = _ok(runner, "product", "add", "--sku", "A", "--name", "Bolt", "--cost", "10")
    assert "cost=$10.00" in out
