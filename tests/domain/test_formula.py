"""Unit tests for the price formula language."""

from decimal import Decimal

import pytest

from pricebook.domain.exceptions import FormulaSyntaxError
from pricebook.domain.service.formula import evaluate, parse_formula


class TestIdentifiers:

    def test_markup(self):
        assert evaluate(Decimal("100"), Decimal("25"), "cost*markup") == Decimal("125")

    def test_discount_factor(self):
        assert evaluate(Decimal("200"), Decimal("25"), "cost * discount_factor") == Decimal("150")

    def test_raw_discount(self):
        assert evaluate(Decimal("10"), Decimal("30"), "cost + discount") == Decimal("40")

    def test_case_insensitive(self):
        assert evaluate(Decimal("100"), Decimal("25"), "COST * Markup") == Decimal("125")

    def test_markup_matches_its_expansion(self):
        for d in (Decimal("0"), Decimal("10"), Decimal("25"), Decimal("33.3"), Decimal("100")):
            assert evaluate(Decimal("80"), d, "cost*markup") == evaluate(
                Decimal("80"), d, "cost*(1+discount/100)"
            )

    def test_null_discount_treated_as_zero(self):
        for cost in (Decimal("0"), Decimal("7.5"), Decimal("1234")):
            assert evaluate(cost, None, "cost*markup") == cost

    def test_accepts_plain_numbers_for_cost(self):
        assert evaluate(100, 25, "cost*markup") == Decimal("125")


class TestArithmetic:

    def test_default_b2b_formula(self):
        expected = Decimal("100") * Decimal("1.25") * Decimal("1.05") / Decimal("0.98")
        assert evaluate(Decimal("100"), None, "cost * 1.25 * 1.05 / 0.98") == expected

    def test_precedence(self):
        assert evaluate(0, None, "2 + 3 * 4") == Decimal("14")

    def test_parentheses(self):
        assert evaluate(Decimal("5"), None, "(cost + 10) * 2") == Decimal("30")

    def test_unary_minus(self):
        assert evaluate(Decimal("3"), None, "-cost + 5") == Decimal("2")

    def test_left_associative_division(self):
        assert evaluate(0, None, "100 / 10 / 2") == Decimal("5")

    def test_percent_divides_by_hundred(self):
        assert evaluate(0, None, "25%") == Decimal("0.25")

    def test_percent_has_division_precedence(self):
        # "10/50%" reads as 10/50/100, not 10/(50/100)
        assert evaluate(0, None, "10/50%") == Decimal("0.002")

    def test_percent_of_cost(self):
        assert evaluate(Decimal("200"), None, "cost + cost * 10%") == Decimal("220")

    def test_deterministic(self):
        results = {evaluate(Decimal("42"), Decimal("12.5"), "cost * markup / 0.98") for _ in range(5)}
        assert len(results) == 1


class TestFallbackToZero:

    @pytest.mark.parametrize("formula", ["", "   ", None, 42])
    def test_empty_or_not_a_string(self, formula):
        assert evaluate(Decimal("10"), Decimal("10"), formula) == Decimal("0")

    @pytest.mark.parametrize(
        "formula",
        [
            "cost * price",  # unknown name
            "cost * (1 + 2",  # unbalanced
            "cost $ 2",  # stray character
            "cost * ",  # dangling operator
            "1.2.3",
            "cost 2",
        ],
    )
    def test_malformed(self, formula):
        assert evaluate(Decimal("10"), Decimal("10"), formula) == Decimal("0")

    def test_division_by_zero(self):
        assert evaluate(Decimal("10"), None, "cost / 0") == Decimal("0")

    def test_zero_over_zero(self):
        assert evaluate(Decimal("0"), None, "cost / cost") == Decimal("0")

    @pytest.mark.parametrize(
        "formula",
        [
            "(" * 2000 + "cost" + ")" * 2000,
            "-" * 150 + "cost",
            " + ".join(["cost"] * 1000),
        ],
    )
    def test_oversized(self, formula):
        assert evaluate(Decimal("10"), None, formula) == Decimal("0")


class TestParseFormula:

    def test_unknown_name_rejected(self):
        with pytest.raises(FormulaSyntaxError, match="Unknown name 'price'"):
            parse_formula("cost * price")

    def test_unbalanced_parenthesis_rejected(self):
        with pytest.raises(FormulaSyntaxError):
            parse_formula("(cost * 2")

    def test_deep_nesting_rejected(self):
        with pytest.raises(FormulaSyntaxError, match="nested more than"):
            parse_formula("(" * 60 + "cost" + ")" * 60)

    def test_long_formula_rejected(self):
        with pytest.raises(FormulaSyntaxError, match="longer than"):
            parse_formula("1" + "%" * 300)

    def test_moderate_nesting_accepted(self):
        parse_formula("(" * 20 + "cost" + ")" * 20)

    def test_empty_rejected(self):
        with pytest.raises(FormulaSyntaxError, match="empty"):
            parse_formula("  ")

    def test_valid_formula_parses(self):
        tree = parse_formula("cost * markup")
        env = {
            "cost": Decimal("4"),
            "discount": Decimal("0"),
            "markup": Decimal("1.5"),
            "discount_factor": Decimal("1"),
        }
        assert tree.evaluate(env) == Decimal("6")
