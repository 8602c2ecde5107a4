"""ExpressionPool: covers a range of integers with short generated expressions.

Construction alternates two kinds of rounds until every integer of the
generation range has at least one candidate:

- forward rounds compose every pair of cached values with every operator,
  admitting only candidates below a mass ceiling that rises by one per round;
- backward passes take each still-missing value and use the operators'
  inverses to solve for the other operand among the cached values.

``quality`` decides when to leave forward mode: the search stays forward while
the covered count is below ``quality * (last - first)`` of the generation
range. Lower values hand over to backward inference earlier.

Nothing bounds the loop. If the items and operators cannot reach some target
value inside the cache range, construction never returns. Callers that need to
give up pass a ``threading.Event`` as ``cancel`` and set it.
"""

import logging
import threading
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Union

import numpy as np

from .expression import Expression
from .operators import Operator

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_NUM = 5
DEFAULT_QUALITY = 1.0


class PoolConfigError(ValueError):
    """Invalid construction argument, raised before any search work."""


class OutOfRangeError(ValueError):
    """Query for an integer outside the generation range."""


class BuildCancelled(RuntimeError):
    """Construction stopped because its cancel event was set."""


@dataclass(frozen=True)
class IntRange:
    """Closed integer interval ``first..last``."""

    first: int
    last: int

    @classmethod
    def of(cls, value: Union["IntRange", range, tuple[int, int]]) -> "IntRange":
        if isinstance(value, IntRange):
            return value
        if isinstance(value, range):
            if value.step != 1:
                raise PoolConfigError(f"Range step must be 1, got {value.step}")
            return cls(value.start, value.stop - 1)
        first, last = value
        return cls(int(first), int(last))

    @property
    def span(self) -> int:
        return self.last - self.first

    def covers(self, other: "IntRange") -> bool:
        return self.first <= other.first and self.last >= other.last

    def __contains__(self, value) -> bool:
        if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
            return False
        return self.first <= value <= self.last

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.last + 1))

    def __len__(self) -> int:
        return max(0, self.last - self.first + 1)

    def __str__(self):
        return f"{self.first}..{self.last}"


RangeLike = Union[IntRange, range, tuple[int, int]]
RandomSource = Union[np.random.Generator, int, None]


class ExpressionPool:
    """Generate and serve expressions for every integer of ``gen_range``.

    Args:
        items: Base expressions seeding the cache.
        operators: Operators available to forward and backward search.
        gen_range: Closed interval that must be fully covered.
        cache_range: Interval of intermediate values allowed during search;
            defaults to ``[-2m, 2m]`` with ``m`` the largest absolute bound of
            ``gen_range``.
        max_cache_num: Maximum candidates kept per integer.
        quality: Forward/backward switch threshold in ``[0, 1]``.
        rng: ``numpy.random.Generator``, integer seed, or None.
        cancel: Event checked between search steps; once set, construction
            raises ``BuildCancelled``.
    """

    def __init__(
        self,
        items: Iterable[Expression],
        operators: Iterable[Operator],
        gen_range: RangeLike,
        cache_range: Optional[RangeLike] = None,
        max_cache_num: int = DEFAULT_MAX_CACHE_NUM,
        quality: float = DEFAULT_QUALITY,
        rng: RandomSource = None,
        cancel: Optional[threading.Event] = None,
    ):
        items = tuple(items)
        operators = tuple(operators)
        self._gen_range = IntRange.of(gen_range)

        if cache_range is None:
            m = max(abs(self._gen_range.first), abs(self._gen_range.last)) * 2
            self._cache_range = IntRange(-m, m)
        else:
            self._cache_range = IntRange.of(cache_range)
            if not self._cache_range.covers(self._gen_range):
                raise PoolConfigError(
                    f"cache_range {self._cache_range} should cover gen_range {self._gen_range}"
                )
        if max_cache_num < 1:
            raise PoolConfigError(f"max_cache_num should be at least 1, got {max_cache_num}")
        if not items:
            raise PoolConfigError("Empty initial items")
        if not operators:
            raise PoolConfigError("Empty operators")
        if not 0.0 <= quality <= 1.0:
            raise PoolConfigError(f"quality should be in [0, 1], got {quality}")

        self._items = items
        self._operators = operators
        self._max_cache_num = int(max_cache_num)
        self._quality = float(quality)
        self._rng = np.random.default_rng(rng)
        self._cancel = cancel
        self._build_info: dict = {}
        self._cache: Mapping[int, tuple[Expression, ...]] = MappingProxyType(self._build())

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build(self) -> dict[int, tuple[Expression, ...]]:
        t0 = time.time()
        gen = self._gen_range
        cache: dict[int, list[Expression]] = {}
        for item in self._items:
            self._push(cache.setdefault(item.value, []), item)

        threshold = gen.span * self._quality
        forward = True
        ceiling = 1
        forward_rounds = 0
        backward_passes = 0

        logger.info(
            f"Building pool for {gen} (cache {self._cache_range}, "
            f"{len(self._items)} items, {len(self._operators)} operators, "
            f"max_cache_num={self._max_cache_num}, quality={self._quality})"
        )

        while not all(v in cache for v in gen):
            self._check_cancelled()
            if forward:
                ceiling += 1
                forward_rounds += 1
                self._forward_round(cache, ceiling)
                covered = self._count_covered(cache)
                forward = covered < threshold
                logger.debug(
                    f"Forward round {forward_rounds}: ceiling={ceiling} "
                    f"covered={covered}/{len(gen)} cached={len(cache)}"
                )
            else:
                backward_passes += 1
                self._backward_pass(cache)
                forward = True
                logger.debug(
                    f"Backward pass {backward_passes}: "
                    f"covered={self._count_covered(cache)}/{len(gen)}"
                )

        elapsed = time.time() - t0
        self._build_info = {
            "forward_rounds": forward_rounds,
            "backward_passes": backward_passes,
            "mass_ceiling": ceiling,
            "cached_values": len(cache),
            "elapsed": elapsed,
        }
        logger.info(
            f"Pool covers {gen} after {forward_rounds} forward rounds and "
            f"{backward_passes} backward passes in {elapsed:.2f}s"
        )
        return {v: tuple(cache[v]) for v in gen}

    def _forward_round(self, cache: dict[int, list[Expression]], ceiling: int):
        cache_range = self._cache_range
        known = sorted(k for k in cache if k in cache_range)
        for i in known:
            self._check_cancelled()
            for j in known:
                for op in self._operators:
                    if not op.can_forward(i, j):
                        continue
                    v = op.forward(i, j)
                    if v not in cache_range:
                        continue
                    for _ in range(self._max_cache_num):
                        left = self._sample(cache[i])
                        right = self._sample(cache[j])
                        if left is None or right is None:
                            break
                        mass = op.calc_mass(left, right)
                        current = cache.get(v)
                        if mass >= ceiling:
                            continue
                        if current and mass > min(e.mass for e in current):
                            continue
                        expr = Expression(v, op.build_text(left, right), mass, op)
                        self._push(cache.setdefault(v, []), expr)

    def _backward_pass(self, cache: dict[int, list[Expression]]):
        cache_range = self._cache_range
        missing = [v for v in self._gen_range if v not in cache]
        for v in missing:
            self._check_cancelled()
            known = sorted(k for k in cache if k in cache_range)
            for i in known:
                for op in self._operators:
                    if op.can_backward_left(v, i):
                        j = op.backward_left(v, i)
                        if j in cache:
                            bucket = cache.setdefault(v, [])
                            for _ in range(self._max_cache_num):
                                left = self._sample(cache[i])
                                right = self._sample(cache[j])
                                if left is None or right is None:
                                    break
                                self._keep_lightest(bucket, v, op, left, right)

                    if op.can_backward_right(v, i):
                        j = op.backward_right(v, i)
                        if j in cache:
                            bucket = cache.setdefault(v, [])
                            for left in list(cache[j]):
                                for right in list(cache[i]):
                                    self._keep_lightest(bucket, v, op, left, right)

    def _keep_lightest(
        self,
        bucket: list[Expression],
        value: int,
        op: Operator,
        left: Expression,
        right: Expression,
    ):
        """Add a candidate only if no lighter one is known; drop heavier ones."""
        mass = op.calc_mass(left, right)
        if bucket:
            best = min(e.mass for e in bucket)
            if mass > best:
                return
            if mass < best:
                bucket.clear()
        self._push(bucket, Expression(value, op.build_text(left, right), mass, op))

    def _push(self, bucket: list[Expression], expr: Expression):
        """Append unless already present; evict a random element past the cap."""
        if expr in bucket:
            return
        bucket.append(expr)
        if len(bucket) > self._max_cache_num:
            del bucket[int(self._rng.integers(len(bucket)))]

    def _check_cancelled(self):
        if self._cancel is not None and self._cancel.is_set():
            raise BuildCancelled(f"Build of {self._gen_range} cancelled")

    def _sample(self, candidates: list[Expression]) -> Optional[Expression]:
        if not candidates:
            return None
        return candidates[int(self._rng.integers(len(candidates)))]

    def _count_covered(self, cache: Mapping[int, list]) -> int:
        return sum(1 for v in self._gen_range if v in cache)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _candidates(self, value: int) -> tuple[Expression, ...]:
        if value not in self._gen_range:
            raise OutOfRangeError(f"{value} is not in gen range {self._gen_range}")
        return self._cache[int(value)]

    def get(self, value: int) -> str:
        """Text of a random candidate for ``value``."""
        return self.get_expression(value).text

    def get_expression(self, value: int) -> Expression:
        """A random whole candidate for ``value``."""
        candidates = self._candidates(value)
        return candidates[int(self._rng.integers(len(candidates)))]

    def get_all_expressions(self, value: int) -> list[Expression]:
        """Every candidate kept for ``value``, in no particular order."""
        return list(self._candidates(value))

    @property
    def gen_range(self) -> IntRange:
        return self._gen_range

    @property
    def cache_range(self) -> IntRange:
        return self._cache_range

    @property
    def max_cache_num(self) -> int:
        return self._max_cache_num

    @property
    def quality(self) -> float:
        return self._quality

    @property
    def items(self) -> tuple[Expression, ...]:
        return self._items

    @property
    def operators(self) -> tuple[Operator, ...]:
        return self._operators

    @property
    def cache(self) -> Mapping[int, tuple[Expression, ...]]:
        return self._cache

    @property
    def build_info(self) -> dict:
        return dict(self._build_info)

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, value) -> bool:
        return value in self._gen_range

    def __iter__(self) -> Iterator[int]:
        return iter(self._gen_range)

    def __repr__(self):
        return (
            f"ExpressionPool(gen_range={self._gen_range}, cache_range={self._cache_range}, "
            f"max_cache_num={self._max_cache_num}, quality={self._quality})"
        )
