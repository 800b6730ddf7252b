"""Price formula language.

A formula is a small arithmetic expression over four identifiers:

    cost             the product's purchase cost
    discount         the margin percentage of the price entry (unset = 0)
    markup           1 + discount/100
    discount_factor  1 - discount/100

plus numbers, ``+ - * /``, parentheses, unary minus and a ``%`` suffix
that divides by 100 with the precedence of ``/``, so ``25%`` is
``25/100`` and ``10/50%`` is ``10/50/100``. Identifiers are matched
case-insensitively.

Formulas are parsed into an expression tree once and cached. ``evaluate``
never raises: anything that cannot be evaluated prices at 0, so a broken
formula shows up as a zero price rather than a crash.

Stored formulas written for the older text-substitution evaluator may
price differently here:

    25%2              was 25/1002, now a syntax error (prices at 0)
    cost * 1.25 eur   stray words were dropped, now a syntax error

Check stored formulas with ``pricebook settings preview`` after migrating.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Mapping

from pricebook.domain.exceptions import FormulaSyntaxError, ValidationError
from pricebook.domain.model.value_objects import ZERO, to_amount

logger = logging.getLogger(__name__)

IDENTIFIERS = ("cost", "discount", "markup", "discount_factor")

# Evaluation recurses over the tree, so its size is bounded.
MAX_NESTING = 50
MAX_TOKENS = 200

_HUNDRED = Decimal("100")
_ONE = Decimal("1")

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<number>\d+(?:\.\d*)?|\.\d+)|(?P<name>[a-z_]+)|(?P<op>[-+*/%()]))"
)


# --- Expression tree ----------------------------------------------------------


@dataclass(frozen=True)
class Number:
    value: Decimal

    def evaluate(self, env: Mapping[str, Decimal]) -> Decimal:
        return self.value


@dataclass(frozen=True)
class Variable:
    name: str

    def evaluate(self, env: Mapping[str, Decimal]) -> Decimal:
        return env[self.name]


@dataclass(frozen=True)
class Negate:
    operand: Expression

    def evaluate(self, env: Mapping[str, Decimal]) -> Decimal:
        return -self.operand.evaluate(env)


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Expression
    right: Expression

    def evaluate(self, env: Mapping[str, Decimal]) -> Decimal:
        a = self.left.evaluate(env)
        b = self.right.evaluate(env)
        if self.op == "+":
            return a + b
        if self.op == "-":
            return a - b
        if self.op == "*":
            return a * b
        return a / b


Expression = Number | Variable | Negate | BinaryOp


# --- Parser -------------------------------------------------------------------


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise FormulaSyntaxError(
                f"Unexpected character {text[pos:].lstrip()[:1]!r} in formula"
            )
        if len(tokens) == MAX_TOKENS:
            raise FormulaSyntaxError(f"Formula is longer than {MAX_TOKENS} tokens")
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser.

    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/') unary | '%')*
    unary  := ('-' | '+') unary | atom
    atom   := NUMBER | NAME | '(' expr ')'
    """

    def __init__(self, tokens: list[tuple[str, str]]) -> None:
        self._tokens = tokens
        self._pos = 0
        self._depth = 0

    def parse(self) -> Expression:
        if not self._tokens:
            raise FormulaSyntaxError("Formula is empty")
        expr = self._expr()
        if self._pos != len(self._tokens):
            raise FormulaSyntaxError(
                f"Unexpected {self._tokens[self._pos][1]!r} in formula"
            )
        return expr

    def _peek(self) -> str | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][1]
        return None

    def _next(self) -> tuple[str, str]:
        if self._pos >= len(self._tokens):
            raise FormulaSyntaxError("Formula ends unexpectedly")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _expr(self) -> Expression:
        node = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()[1]
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Expression:
        node = self._unary()
        while self._peek() in ("*", "/", "%"):
            op = self._next()[1]
            if op == "%":
                node = BinaryOp("/", node, Number(_HUNDRED))
            else:
                node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> Expression:
        if self._peek() in ("-", "+"):
            op = self._next()[1]
            self._enter()
            operand = self._unary()
            self._depth -= 1
            return Negate(operand) if op == "-" else operand
        return self._atom()

    def _atom(self) -> Expression:
        kind, text = self._next()
        if kind == "number":
            return Number(Decimal(text))
        if kind == "name":
            if text not in IDENTIFIERS:
                raise FormulaSyntaxError(
                    f"Unknown name {text!r}; use one of: {', '.join(IDENTIFIERS)}"
                )
            return Variable(text)
        if text == "(":
            self._enter()
            node = self._expr()
            if self._next()[1] != ")":
                raise FormulaSyntaxError("Missing closing parenthesis")
            self._depth -= 1
            return node
        raise FormulaSyntaxError(f"Unexpected {text!r} in formula")

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > MAX_NESTING:
            raise FormulaSyntaxError(f"Formula is nested more than {MAX_NESTING} levels deep")


@lru_cache(maxsize=64)
def parse_formula(formula: str) -> Expression:
    """Parse *formula* into an expression tree.

    Raises FormulaSyntaxError when the formula is not well formed.
    """
    return _Parser(_tokenize(formula.lower())).parse()


# --- Evaluation ---------------------------------------------------------------


def variables(cost: Decimal, discount: Decimal | None) -> dict[str, Decimal]:
    d = discount if discount is not None else ZERO
    return {
        "cost": cost,
        "discount": d,
        "markup": _ONE + d / _HUNDRED,
        "discount_factor": _ONE - d / _HUNDRED,
    }


def evaluate(
    cost: Decimal | int | float | str,
    discount: Decimal | int | float | None,
    formula: str,
) -> Decimal:
    """Price for *cost* and *discount* under *formula*; 0 if it cannot be computed."""
    if not isinstance(formula, str) or not formula.strip():
        return ZERO
    try:
        tree = parse_formula(formula)
        env = variables(
            to_amount(cost),
            to_amount(discount) if discount is not None else None,
        )
        result = tree.evaluate(env)
    except (ValidationError, ArithmeticError) as exc:
        logger.warning("Formula evaluation failed for %r: %s", formula, exc)
        return ZERO
    if not result.is_finite():
        return ZERO
    return result
