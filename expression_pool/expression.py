"""Expression: one concrete way to write an integer."""

from dataclasses import dataclass

from .operators import DEFAULT_BRACKETS, PRIMITIVE, Operator


@dataclass(frozen=True)
class Expression:
    """An integer together with a rendered text that denotes it.

    Base items keep the defaults (mass 1, the primitive operator); composed
    expressions carry the top-level operator that built them so that an
    enclosing operator can decide whether to bracket them.
    """

    value: int
    text: str
    mass: int = 1
    operator: Operator = PRIMITIVE

    def wrap(self, level: int, brackets: tuple[str, str] = DEFAULT_BRACKETS) -> str:
        """Text for embedding under an operator that requires ``level``."""
        if self.operator.level >= level:
            return self.text
        return f"{brackets[0]}{self.text}{brackets[1]}"

    def to_dict(self) -> dict:
        return {
            "value": self.value,
            "text": self.text,
            "mass": self.mass,
            "operator": self.operator.name,
        }
