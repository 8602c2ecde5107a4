"""Plain arithmetic: {2, 3, 5, 7} with every built-in operator."""

from expression_pool import Expression
from expression_pool.operators import get_operator_names, make_operators

from .base import Demo


def build() -> Demo:
    items = [
        Expression(2, "2"),
        Expression(3, "3"),
        Expression(5, "5"),
        Expression(7, "7"),
    ]
    return Demo(
        name="arithmetic",
        description="Integers written with 2, 3, 5, 7 and + - * / % & | ^",
        items=items,
        operators=make_operators(get_operator_names()),
    )
