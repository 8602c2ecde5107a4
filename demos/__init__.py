"""Demonstration configurations: base items and operators fed to ExpressionPool."""

from typing import Callable, Optional

from expression_pool import ExpressionPool

from . import arithmetic, emoji, js, palace
from .base import Demo

DEMO_REGISTRY: dict[str, Callable[[], Demo]] = {
    "arithmetic": arithmetic.build,
    "emoji": emoji.build,
    "js": js.build,
    "palace": palace.build,
}


def get_demo_names() -> list[str]:
    return sorted(DEMO_REGISTRY.keys())


def get_demo(name: str) -> Demo:
    if name not in DEMO_REGISTRY:
        raise KeyError(f"Unknown demo: {name}")
    return DEMO_REGISTRY[name]()


def build_demo_pool(
    name: str,
    first: Optional[int] = None,
    last: Optional[int] = None,
    **kwargs,
) -> ExpressionPool:
    """Build the pool of a registered demo; kwargs go to ExpressionPool."""
    return get_demo(name).build_pool(first, last, **kwargs)
