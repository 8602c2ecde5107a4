"""Tests for the configuration-driven expression evaluator."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

from expression_pool import Expression, ExpressionEvaluator, validate_expression
from expression_pool.operators import add, get_operator_names, make_operators, sub
from demos import get_demo

ITEMS = [Expression(2, "2"), Expression(3, "3"), Expression(5, "5"), Expression(7, "7")]
OPERATORS = make_operators(get_operator_names())


@pytest.fixture
def evaluator():
    return ExpressionEvaluator(ITEMS, OPERATORS)


@pytest.mark.parametrize("text,expected", [
    ("7", 7),
    ("2 + 3 * 5", 17),
    ("(2 + 3) * 5", 25),
    ("7 - 3 - 2", 2),
    ("7 - (3 - 2)", 6),
    ("7 % 5", 2),
    ("2 * 7 % 5", 4),
    ("7 - 7 % 5", 5),
    ("2 ^ 3 & 7", 1),
    ("2 | 5", 7),
    ("7 * 2 / 2", 7),
    ("((7))", 7),
    ("  2+3  ", 5),
])
def test_evaluate(evaluator, text, expected):
    assert evaluator.evaluate(text) == expected


@pytest.mark.parametrize("text", ["2 +", "(2 + 3", "2 3", "4", "", "2 + )"])
def test_syntax_errors(evaluator, text):
    with pytest.raises(SyntaxError):
        evaluator.evaluate(text)


@pytest.mark.parametrize("text", ["5 % 7", "7 / 2", "3 / (2 - 2)"])
def test_guard_violations(evaluator, text):
    with pytest.raises(ValueError):
        evaluator.evaluate(text)


def test_contextual_tokens():
    items = [Expression(0, "+[]"), Expression(1, "-~[]")]
    ev = ExpressionEvaluator(items, [add("+"), sub("-")])
    assert ev.evaluate("-~[]+ +[]") == 1
    assert ev.evaluate("-~[]+-~[]") == 2
    assert ev.evaluate("-~[]- -~[]") == 0
    assert ev.evaluate("+[]-(-~[]+-~[])") == -2


def test_emoji_demo_round_trip():
    demo = get_demo("emoji")
    ev = demo.evaluator()
    one, two, five = (next(e for e in demo.items if e.value == v) for v in (1, 2, 5))
    plus, _, times, _ = demo.operators
    three = Expression(3, plus.build_text(one, two), 2, plus)
    fifteen = times.build_text(three, five)
    assert fifteen.startswith("👉") and "👈" in fifteen
    assert ev.evaluate(fifteen) == 15


def test_palace_words():
    ev = get_demo("palace").evaluator()
    assert ev.evaluate("大锤除以小锤") == 2
    assert ev.evaluate("宫廷玉液酒模大锤") == 20
    assert ev.evaluate("大锤减小锤乘(大锤除以小锤)") == 0


def test_js_demo_not_evaluable():
    with pytest.raises(ValueError):
        get_demo("js").evaluator()


def test_check_expression(evaluator):
    assert evaluator.check(Expression(10, "2 * 5", 2))
    assert not evaluator.check(Expression(11, "2 * 5", 2))


def test_ambiguous_atoms():
    with pytest.raises(ValueError, match="Ambiguous"):
        ExpressionEvaluator([Expression(1, "x"), Expression(2, "x")], [add()])


def test_validate_expression():
    assert validate_expression("2 + 3", ITEMS, OPERATORS) == (True, "")
    assert validate_expression("2 + 3", ITEMS, OPERATORS, expected=5) == (True, "")

    ok, err = validate_expression("2 + 3", ITEMS, OPERATORS, expected=6)
    assert not ok and "expected 6" in err

    ok, err = validate_expression("2 +", ITEMS, OPERATORS)
    assert not ok and err
