"""Parser and evaluator for generated expression text.

The grammar comes from a pool configuration rather than a fixed syntax:

    expr(L)  -> operand (SYMBOL[level >= L] expr(level + 1))*
    operand  -> ATOM | OPEN expr(0) CLOSE

ATOM is any base item text, SYMBOL any operator symbol, OPEN/CLOSE the bracket
pair. Because atoms and symbols may share characters (``+[]`` versus ``+``),
tokens are matched by position: atoms and OPEN where an operand is expected,
symbols and CLOSE where an operator is expected, longest match first.

Evaluation goes through the operators' own ``can_forward``/``forward``, so a
text that evaluates here to its expression's value satisfies the pool
invariant under that operator set.
"""

import logging
from typing import Iterable, Optional

from .expression import Expression
from .operators import DEFAULT_BRACKETS, Operator

logger = logging.getLogger(__name__)

MAX_RECURSION_DEPTH = 200


class Token:
    __slots__ = ("type", "value", "pos")

    def __init__(self, type_: str, value, pos: int):
        self.type = type_
        self.value = value
        self.pos = pos

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


class Parser:
    """Precedence-climbing parser that evaluates while it parses."""

    def __init__(
        self,
        text: str,
        atoms: list[tuple[str, int]],
        symbols: list[tuple[str, Operator]],
        brackets: tuple[str, str],
    ):
        self.text = text
        self.atoms = atoms
        self.symbols = symbols
        self.open, self.close = brackets
        self.pos = 0
        self._depth = 0

    def _skip_space(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _at_end(self) -> bool:
        self._skip_space()
        return self.pos >= len(self.text)

    def peek_operator(self) -> Optional[Token]:
        """Next SYMBOL or CLOSE token without consuming it."""
        self._skip_space()
        if self.text.startswith(self.close, self.pos):
            return Token("CLOSE", self.close, self.pos)
        for symbol, op in self.symbols:
            if self.text.startswith(symbol, self.pos):
                return Token("SYMBOL", op, self.pos)
        return None

    def consume(self, tok: Token):
        length = len(tok.value.symbol.strip()) if tok.type == "SYMBOL" else len(tok.value)
        self.pos = tok.pos + length

    def parse(self) -> int:
        value = self.parse_expr(0)
        if not self._at_end():
            raise SyntaxError(f"Unexpected text at {self.pos}: {self.text[self.pos:self.pos + 10]!r}")
        return value

    def parse_expr(self, min_level: int) -> int:
        self._depth += 1
        if self._depth > MAX_RECURSION_DEPTH:
            raise ValueError(f"Expression exceeds max depth {MAX_RECURSION_DEPTH}")
        try:
            left = self.parse_operand()
            while True:
                tok = self.peek_operator()
                if tok is None or tok.type != "SYMBOL" or tok.value.level < min_level:
                    break
                self.consume(tok)
                op = tok.value
                right = self.parse_expr(op.level + 1)
                if not op.can_forward(left, right):
                    raise ValueError(f"{op.name} cannot be applied to ({left}, {right})")
                left = op.forward(left, right)
            return left
        finally:
            self._depth -= 1

    def parse_operand(self) -> int:
        if self._at_end():
            raise SyntaxError("Unexpected end of expression")

        if self.text.startswith(self.open, self.pos):
            self.pos += len(self.open)
            value = self.parse_expr(0)
            self._skip_space()
            if not self.text.startswith(self.close, self.pos):
                raise SyntaxError(f"Expected {self.close!r} at {self.pos}")
            self.pos += len(self.close)
            return value

        for atom, value in self.atoms:
            if self.text.startswith(atom, self.pos):
                self.pos += len(atom)
                return value

        raise SyntaxError(f"Unexpected text at {self.pos}: {self.text[self.pos:self.pos + 10]!r}")


class ExpressionEvaluator:
    """Evaluate texts rendered from ``items`` combined by ``operators``."""

    def __init__(
        self,
        items: Iterable[Expression],
        operators: Iterable[Operator],
        brackets: tuple[str, str] = DEFAULT_BRACKETS,
    ):
        atoms: dict[str, int] = {}
        for item in items:
            text = item.text.strip()
            if text in atoms and atoms[text] != item.value:
                raise ValueError(f"Ambiguous atom {text!r}: {atoms[text]} and {item.value}")
            atoms[text] = item.value

        symbols: dict[str, Operator] = {}
        for op in operators:
            if op.symbol is None or op.render is not None:
                logger.debug(f"Operator {op.name!r} has no infix symbol, not parseable")
                continue
            symbol = op.symbol.strip()
            if not symbol:
                raise ValueError(f"Operator {op.name!r} has a blank symbol")
            symbols[symbol] = op

        self.atoms = sorted(atoms.items(), key=lambda kv: -len(kv[0]))
        self.symbols = sorted(symbols.items(), key=lambda kv: -len(kv[0]))
        self.brackets = brackets

    def evaluate(self, text: str) -> int:
        """Parse and evaluate ``text``.

        Raises:
            SyntaxError: text is not produced by this configuration.
            ValueError: an operator guard rejects its operands.
        """
        return Parser(text, self.atoms, self.symbols, self.brackets).parse()

    def check(self, expr: Expression) -> bool:
        """True if ``expr.text`` evaluates to ``expr.value``."""
        return self.evaluate(expr.text) == expr.value


# ---------------------------------------------------------------------------
# Validation utility
# ---------------------------------------------------------------------------

def validate_expression(
    text: str,
    items: Iterable[Expression],
    operators: Iterable[Operator],
    brackets: tuple[str, str] = DEFAULT_BRACKETS,
    expected: Optional[int] = None,
) -> tuple[bool, str]:
    """Validate that ``text`` parses (and equals ``expected`` when given).

    Returns:
        (is_valid, error_message)
    """
    try:
        value = ExpressionEvaluator(items, operators, brackets).evaluate(text)
    except (SyntaxError, ValueError) as e:
        return False, str(e)
    if expected is not None and value != expected:
        return False, f"Evaluates to {value}, expected {expected}"
    return True, ""
