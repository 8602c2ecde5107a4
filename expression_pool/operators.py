"""Binary operators for expression pools.

Every operator is an ``Operator`` instance: a forward computation with its
guard, a text renderer, a mass function and up to two optional inverses.
Backward support is an explicit nullable ``Inverse`` handle per direction.

Precedence levels used by the built-in operators:

    0 -> |
    1 -> ^
    2 -> &
    3 -> +, -
    4 -> %
    5 -> *, /
    sys.maxsize -> primitive
"""

import dataclasses
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .expression import Expression

DEFAULT_BRACKETS = ("(", ")")

IntPredicate = Callable[[int, int], bool]
IntFunction = Callable[[int, int], int]


@dataclass(frozen=True)
class Inverse:
    """Recovers the missing operand from a result and the known operand."""

    check: IntPredicate
    solve: IntFunction


def _always(a: int, b: int) -> bool:
    return True


def _never(a: int, b: int) -> bool:
    return False


@dataclass(frozen=True, eq=False)
class Operator:
    """A binary operator over integers plus its text rendering.

    ``left_level``/``right_level`` are the minimum levels an operand may have
    before it is bracketed. ``render`` replaces the default infix renderer and
    ``mass`` replaces the default mass (sum of operand masses).
    """

    name: str
    level: int
    apply: Optional[IntFunction] = None
    guard: IntPredicate = _always
    symbol: Optional[str] = None
    left_level: Optional[int] = None
    right_level: Optional[int] = None
    brackets: tuple[str, str] = DEFAULT_BRACKETS
    render: Optional[Callable[["Operator", "Expression", "Expression"], str]] = None
    mass: Optional[Callable[["Expression", "Expression"], int]] = None
    left_inverse: Optional[Inverse] = None
    right_inverse: Optional[Inverse] = None

    def __repr__(self):
        return f"Operator({self.name!r}, level={self.level})"

    # --- forward -----------------------------------------------------------

    def can_forward(self, left: int, right: int) -> bool:
        if self.apply is None:
            return False
        return self.guard(left, right)

    def forward(self, left: int, right: int) -> int:
        if self.apply is None:
            raise RuntimeError(f"Operator {self.name!r} has no forward computation")
        return self.apply(left, right)

    def build_text(self, left: "Expression", right: "Expression") -> str:
        if self.render is not None:
            return self.render(self, left, right)
        if self.symbol is None:
            raise RuntimeError(f"Operator {self.name!r} has neither symbol nor renderer")
        left_level = self.level if self.left_level is None else self.left_level
        right_level = self.level if self.right_level is None else self.right_level
        return (
            left.wrap(left_level, self.brackets)
            + self.symbol
            + right.wrap(right_level, self.brackets)
        )

    def calc_mass(self, left: "Expression", right: "Expression") -> int:
        if self.mass is not None:
            return self.mass(left, right)
        return left.mass + right.mass

    # --- backward ----------------------------------------------------------

    @property
    def supports_backward(self) -> tuple[bool, bool]:
        """(left inverse available, right inverse available)."""
        return self.left_inverse is not None, self.right_inverse is not None

    def can_backward_left(self, result: int, left: int) -> bool:
        return self.left_inverse is not None and self.left_inverse.check(result, left)

    def backward_left(self, result: int, left: int) -> int:
        """Right operand such that ``forward(left, right) == result``."""
        if self.left_inverse is None:
            raise NotImplementedError(f"Operator {self.name!r} has no left inverse")
        return self.left_inverse.solve(result, left)

    def can_backward_right(self, result: int, right: int) -> bool:
        return self.right_inverse is not None and self.right_inverse.check(result, right)

    def backward_right(self, result: int, right: int) -> int:
        """Left operand such that ``forward(left, right) == result``."""
        if self.right_inverse is None:
            raise NotImplementedError(f"Operator {self.name!r} has no right inverse")
        return self.right_inverse.solve(result, right)


PRIMITIVE = Operator(name="primitive", level=sys.maxsize, guard=_never)


def customize(op: Operator, **changes) -> Operator:
    """Copy of ``op`` with some fields replaced (symbol, render, mass, ...)."""
    return dataclasses.replace(op, **changes)


def text_length_mass(extra: int = 1) -> Callable[["Expression", "Expression"], int]:
    """Mass measured as rendered length, for generators that want short text."""
    def _mass(left: "Expression", right: "Expression") -> int:
        return len(left.text) + len(right.text) + extra
    return _mass


# ---------------------------------------------------------------------------
# Built-in operators
# ---------------------------------------------------------------------------

def add(symbol: str = " + ", **overrides) -> Operator:
    return Operator(
        name="add", level=3, symbol=symbol, left_level=3, right_level=3,
        apply=lambda a, b: a + b,
        left_inverse=Inverse(_always, lambda res, left: res - left),
        right_inverse=Inverse(_always, lambda res, right: res - right),
        **overrides,
    )


def sub(symbol: str = " - ", **overrides) -> Operator:
    return Operator(
        name="sub", level=3, symbol=symbol, left_level=3, right_level=4,
        apply=lambda a, b: a - b,
        left_inverse=Inverse(_always, lambda res, left: left - res),
        right_inverse=Inverse(_always, lambda res, right: res + right),
        **overrides,
    )


def mul(symbol: str = " * ", **overrides) -> Operator:
    return Operator(
        name="mul", level=5, symbol=symbol, left_level=5, right_level=5,
        apply=lambda a, b: a * b,
        left_inverse=Inverse(lambda res, left: left != 0 and res % left == 0,
                             lambda res, left: res // left),
        right_inverse=Inverse(lambda res, right: right != 0 and res % right == 0,
                              lambda res, right: res // right),
        **overrides,
    )


def div(symbol: str = " / ", **overrides) -> Operator:
    """Exact division; defined only when right divides left."""
    return Operator(
        name="div", level=5, symbol=symbol, left_level=5, right_level=6,
        apply=lambda a, b: a // b,
        guard=lambda a, b: b != 0 and a % b == 0,
        left_inverse=Inverse(lambda res, left: res != 0 and left != 0 and left % res == 0,
                             lambda res, left: left // res),
        right_inverse=Inverse(lambda res, right: right != 0,
                              lambda res, right: res * right),
        **overrides,
    )


def mod(symbol: str = " % ", **overrides) -> Operator:
    """Remainder, defined only for 0 < right < left."""
    return Operator(
        name="mod", level=4, symbol=symbol, left_level=5, right_level=6,
        apply=lambda a, b: a % b,
        guard=lambda a, b: 0 < b < a,
        **overrides,
    )


def bit_and(symbol: str = " & ", **overrides) -> Operator:
    return Operator(
        name="and", level=2, symbol=symbol, left_level=2, right_level=2,
        apply=lambda a, b: a & b,
        **overrides,
    )


def bit_or(symbol: str = " | ", **overrides) -> Operator:
    return Operator(
        name="or", level=0, symbol=symbol, left_level=0, right_level=0,
        apply=lambda a, b: a | b,
        **overrides,
    )


def bit_xor(symbol: str = " ^ ", **overrides) -> Operator:
    return Operator(
        name="xor", level=1, symbol=symbol, left_level=1, right_level=1,
        apply=lambda a, b: a ^ b,
        left_inverse=Inverse(_always, lambda res, left: res ^ left),
        right_inverse=Inverse(_always, lambda res, right: res ^ right),
        **overrides,
    )


# ---------------------------------------------------------------------------
# Operator Registry -- maps names to factories
# ---------------------------------------------------------------------------

OPERATOR_REGISTRY = {
    "add": add,
    "sub": sub,
    "mul": mul,
    "div": div,
    "mod": mod,
    "and": bit_and,
    "or": bit_or,
    "xor": bit_xor,
}


def get_operator_names() -> list[str]:
    """Return sorted list of all available operator names."""
    return sorted(OPERATOR_REGISTRY.keys())


def make_operators(names: list[str], **overrides) -> list[Operator]:
    """Instantiate registered operators by name, sharing keyword overrides."""
    ops = []
    for name in names:
        if name not in OPERATOR_REGISTRY:
            raise ValueError(f"Unknown operator: {name}")
        ops.append(OPERATOR_REGISTRY[name](**overrides))
    return ops
