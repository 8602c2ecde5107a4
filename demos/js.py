"""JavaScript without digits or letters.

Every integer is written with ``[]``, ``{}`` and punctuation only, e.g.
``-~[]`` is 1 and ``([]+-~[]+-~[]-[])`` is 11 (string concatenation, then
numeric conversion). Mass is the rendered length so the pool prefers short
text over few operations.

See https://github.com/walfud/zhuangbility and https://github.com/denysdovhan/wtfjs
"""

import sys

from expression_pool import Expression, Operator
from expression_pool.operators import (
    add, bit_and, bit_or, bit_xor, div, mod, mul, sub, text_length_mass,
)

from .base import Demo

CONCAT_PREFIX = "([]+"
CONCAT_SUFFIX = "-[])"


def wrap_split(expr: Expression, level: int, sign: str) -> str:
    """Bracket as usual, then keep a leading sign from fusing into ``++``/``--``."""
    text = expr.wrap(level)
    return f" {text}" if text.startswith(sign) else text


def _render_add(op: Operator, left: Expression, right: Expression) -> str:
    return left.wrap(3) + "+" + wrap_split(right, 3, "+")


def _render_sub(op: Operator, left: Expression, right: Expression) -> str:
    return left.wrap(3) + "-" + wrap_split(right, 4, "-")


def _is_concat(expr: Expression) -> bool:
    return expr.operator.render is _render_concat


def _concat_part(expr: Expression) -> str:
    if _is_concat(expr):
        return expr.text[len(CONCAT_PREFIX):-len(CONCAT_SUFFIX)]
    return wrap_split(expr, 4, "+")


def _render_concat(op: Operator, left: Expression, right: Expression) -> str:
    # nested concatenations are merged into one chain
    return f"{CONCAT_PREFIX}{_concat_part(left)}+{_concat_part(right)}{CONCAT_SUFFIX}"


def _concat_mass(left: Expression, right: Expression) -> int:
    merged = _is_concat(left) or _is_concat(right)
    return len(left.text) + len(right.text) + (0 if merged else 8)


concat = Operator(
    name="concat",
    level=sys.maxsize,
    apply=lambda a, b: int(f"{a}{b}"),
    guard=lambda a, b: b >= 0,
    render=_render_concat,
    mass=_concat_mass,
)


def build() -> Demo:
    items = [
        Expression(-1, "~[]", mass=3),
        Expression(-1, "~{}", mass=3),
        Expression(0, "+[]", mass=3),
        Expression(0, "-[]", mass=3),
        Expression(1, "-~[]", mass=4),
        Expression(1, "-~{}", mass=4),
    ]
    length = text_length_mass(1)
    operators = [
        add("+", render=_render_add, mass=length),
        sub("-", render=_render_sub, mass=length),
        mul("*", mass=length),
        div("/", mass=length),
        mod("%", mass=length),
        bit_and("&", mass=length),
        bit_or("|", mass=length),
        bit_xor("^", mass=length),
        concat,
    ]
    return Demo(
        name="js",
        description="JavaScript expressions without digits or letters",
        items=items,
        operators=operators,
        evaluable=False,
    )
