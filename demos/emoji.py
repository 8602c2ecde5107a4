"""Hand-sign arithmetic: numbers written only with emoji."""

from expression_pool import Expression
from expression_pool.operators import add, div, mul, sub

from .base import Demo

EMOJI_BRACKETS = ("👉", "👈")


def build() -> Demo:
    items = [
        Expression(1, "👆"),
        Expression(2, "✌"),
        Expression(5, "🖐"),
        Expression(6, "🤙"),
        Expression(10, "🤞"),
    ]
    operators = [
        add("➕", brackets=EMOJI_BRACKETS),
        sub("➖", brackets=EMOJI_BRACKETS),
        mul("✖", brackets=EMOJI_BRACKETS),
        div("➗", brackets=EMOJI_BRACKETS),
    ]
    return Demo(
        name="emoji",
        description="Hand-sign emoji numbers with emoji operators and pointing-hand brackets",
        items=items,
        operators=operators,
        brackets=EMOJI_BRACKETS,
    )
