"""Demo record shared by the demonstration configurations."""

from dataclasses import dataclass
from typing import Optional

from expression_pool import Expression, ExpressionEvaluator, ExpressionPool, Operator
from expression_pool.operators import DEFAULT_BRACKETS


@dataclass
class Demo:
    """Base items and operators for one rendering style."""

    name: str
    description: str
    items: list[Expression]
    operators: list[Operator]
    brackets: tuple[str, str] = DEFAULT_BRACKETS
    evaluable: bool = True
    default_range: tuple[int, int] = (0, 100)

    def build_pool(self, first: Optional[int] = None, last: Optional[int] = None, **kwargs) -> ExpressionPool:
        lo, hi = self.default_range
        gen_range = (lo if first is None else first, hi if last is None else last)
        return ExpressionPool(self.items, self.operators, gen_range, **kwargs)

    def evaluator(self) -> ExpressionEvaluator:
        if not self.evaluable:
            raise ValueError(f"Demo {self.name!r} renders text the evaluator cannot parse")
        return ExpressionEvaluator(self.items, self.operators, self.brackets)
