"""Tests for the operator contract and the built-in operator set."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent))

from expression_pool import PRIMITIVE, Expression, Inverse, Operator
from expression_pool.operators import (
    OPERATOR_REGISTRY, add, customize, div, get_operator_names, make_operators,
    mod, mul, sub, text_length_mass,
)

SAMPLE = range(-12, 13)


def test_registry_names():
    assert get_operator_names() == ["add", "and", "div", "mod", "mul", "or", "sub", "xor"]
    ops = make_operators(["add", "xor"])
    assert [op.name for op in ops] == ["add", "xor"]


def test_make_operators_unknown_name():
    with pytest.raises(ValueError, match="Unknown operator"):
        make_operators(["add", "pow"])


@pytest.mark.parametrize("name,left,right,expected", [
    ("add", 4, 3, 7),
    ("sub", 4, 7, -3),
    ("mul", -4, 3, -12),
    ("div", 12, 4, 3),
    ("div", -12, 4, -3),
    ("mod", 7, 3, 1),
    ("and", 6, 3, 2),
    ("or", 6, 3, 7),
    ("xor", 6, 3, 5),
])
def test_forward(name, left, right, expected):
    op = OPERATOR_REGISTRY[name]()
    assert op.can_forward(left, right)
    assert op.forward(left, right) == expected


@pytest.mark.parametrize("name,left,right", [
    ("div", 7, 2),
    ("div", 6, 0),
    ("mod", 3, 7),
    ("mod", 5, 5),
    ("mod", 5, 0),
    ("mod", -7, 3),
])
def test_forward_guard(name, left, right):
    assert not OPERATOR_REGISTRY[name]().can_forward(left, right)


@pytest.mark.parametrize("name", get_operator_names())
def test_inverses_agree_with_forward(name):
    op = OPERATOR_REGISTRY[name]()
    for res in SAMPLE:
        for known in SAMPLE:
            if op.can_backward_left(res, known):
                right = op.backward_left(res, known)
                assert op.can_forward(known, right), (res, known, right)
                assert op.forward(known, right) == res
            if op.can_backward_right(res, known):
                left = op.backward_right(res, known)
                assert op.can_forward(left, known), (res, left, known)
                assert op.forward(left, known) == res


def test_backward_support_flags():
    assert add().supports_backward == (True, True)
    assert div().supports_backward == (True, True)
    assert mod().supports_backward == (False, False)
    forward_only = customize(add(), left_inverse=None, right_inverse=None)
    assert forward_only.supports_backward == (False, False)
    assert not forward_only.can_backward_left(3, 1)
    with pytest.raises(NotImplementedError):
        forward_only.backward_left(3, 1)


def test_one_directional_operator():
    op = Operator(
        name="rsub", level=3, symbol=" - ",
        apply=lambda a, b: a - b,
        right_inverse=Inverse(lambda res, right: True, lambda res, right: res + right),
    )
    assert op.supports_backward == (False, True)
    assert op.can_backward_right(5, 2)
    assert op.backward_right(5, 2) == 7
    with pytest.raises(NotImplementedError):
        op.backward_left(5, 2)


def test_primitive_sentinel():
    assert not PRIMITIVE.can_forward(1, 2)
    assert PRIMITIVE.supports_backward == (False, False)
    with pytest.raises(RuntimeError):
        PRIMITIVE.forward(1, 2)
    assert Expression(3, "3").operator is PRIMITIVE


def test_wrap_levels():
    five = Expression(5, "5")
    diff = Expression(1, "3 - 2", 2, sub())
    prod = Expression(6, "2 * 3", 2, mul())

    assert five.wrap(sys.maxsize) == "5"
    assert sub().build_text(five, diff) == "5 - (3 - 2)"
    assert add().build_text(five, diff) == "5 + 3 - 2"
    assert sub().build_text(diff, five) == "3 - 2 - 5"
    assert div().build_text(Expression(12, "12"), prod) == "12 / (2 * 3)"
    assert mul().build_text(diff, prod) == "(3 - 2) * 2 * 3"


def test_custom_symbol_and_brackets():
    op = add("➕", brackets=("👉", "👈"))
    times = mul("✖", brackets=("👉", "👈"))
    total = Expression(3, op.build_text(Expression(1, "👆"), Expression(2, "✌")), 2, op)
    assert total.text == "👆➕✌"
    assert times.build_text(total, Expression(5, "🖐")) == "👉👆➕✌👈✖🖐"


def test_calc_mass():
    a = Expression(1, "-~[]", mass=4)
    b = Expression(0, "+[]", mass=3)
    assert add().calc_mass(a, b) == 7
    assert add(mass=text_length_mass(1)).calc_mass(a, b) == 8


def test_customize_keeps_behaviour():
    plain = sub()
    word = customize(plain, symbol="减")
    assert word is not plain
    assert word.symbol == "减"
    assert word.forward(9, 4) == 5
    assert word.build_text(Expression(9, "九"), Expression(4, "四")) == "九减四"


def test_custom_renderer():
    def render(op, left, right):
        return f"{op.name}({left.text}, {right.text})"

    op = add(render=render)
    assert op.build_text(Expression(1, "1"), Expression(2, "2")) == "add(1, 2)"
