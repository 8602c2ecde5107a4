"""宫廷玉液酒，一百八一杯: a themed vocabulary of hammers and palace wine."""

from expression_pool import Expression
from expression_pool.operators import add, div, mod, mul, sub

from .base import Demo


def build() -> Demo:
    items = [
        Expression(40, "小锤"),
        Expression(80, "大锤"),
        Expression(180, "宫廷玉液酒"),
    ]
    operators = [
        add("加"),
        sub("减"),
        mul("乘"),
        div("除以"),
        mod("模"),
    ]
    return Demo(
        name="palace",
        description="小锤 40, 大锤 80, 宫廷玉液酒 180 with Chinese operator words",
        items=items,
        operators=operators,
    )
