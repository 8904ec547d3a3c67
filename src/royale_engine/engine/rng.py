"""Injectable random sources.

Every formula that rolls takes a ``RandomSource`` instead of calling the
ambient ``random`` module, so tests can substitute a fixed sequence.

Example:
    >>> rng = SeededRandom(42)
    >>> 0.0 <= rng.next() < 1.0
    True
    >>> rand_int(SequenceRandom([0.0]), 3, 8)
    3
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

from royale_engine.core.exceptions import RandomSourceError
from royale_engine.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """A source of floats uniformly distributed in ``[0, 1)``."""

    def next(self) -> float:
        """Draw the next value."""
        ...


class SeededRandom:
    """Random source backed by ``random.Random``.

    Args:
        seed: Seed for reproducible runs; None seeds from the OS.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = random.Random(seed)
        logger.debug("SeededRandom initialized", seed=seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def next(self) -> float:
        return self._random.random()


class SequenceRandom:
    """Random source that cycles through a fixed sequence of values.

    Args:
        values: Values in ``[0, 1)``; the sequence repeats once exhausted.

    Raises:
        RandomSourceError: If the sequence is empty or holds an
            out-of-range value.
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            raise RandomSourceError("SequenceRandom needs at least one value")
        for value in self._values:
            _check(value)
        self._index = 0

    @property
    def calls(self) -> int:
        """Number of values drawn so far."""
        return self._index

    def next(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


def _check(value: float) -> float:
    if not 0.0 <= value < 1.0:
        raise RandomSourceError("Random value outside [0, 1)", value=value)
    return value


# =============================================================================
# Helpers
# =============================================================================


def draw(rng: RandomSource) -> float:
    """Draw one validated value from ``rng``."""
    return _check(rng.next())


def rand_float(rng: RandomSource, low: float = 0.0, high: float = 1.0) -> float:
    """Uniform float in ``[low, high)``."""
    return low + draw(rng) * (high - low)


def rand_int(rng: RandomSource, low: int, high: int) -> int:
    """Uniform integer in ``[low, high]`` (both inclusive)."""
    if high < low:
        low, high = high, low
    return low + int(draw(rng) * (high - low + 1))


def chance(rng: RandomSource, probability: float) -> bool:
    """Return True with the given probability."""
    if probability <= 0:
        return False
    return draw(rng) < probability


def pick(rng: RandomSource, items: Sequence[T]) -> T | None:
    """Pick one element uniformly, or None from an empty sequence."""
    if not items:
        return None
    return items[int(draw(rng) * len(items))]


def pick_weighted(rng: RandomSource, weights: Sequence[tuple[T, float]]) -> T | None:
    """Pick one key from ``(key, weight)`` pairs proportionally to weight.

    Non-positive weights never win. Returns None when no weight is positive.
    """
    positive = [(key, weight) for key, weight in weights if weight > 0]
    total = sum(weight for _, weight in positive)
    if total <= 0:
        return None
    roll = draw(rng) * total
    for key, weight in positive:
        roll -= weight
        if roll < 0:
            return key
    return positive[-1][0]


def shuffled(rng: RandomSource, items: Iterable[T]) -> list[T]:
    """Return a Fisher-Yates shuffled copy of ``items``."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(draw(rng) * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


__all__ = [
    "RandomSource",
    "SeededRandom",
    "SequenceRandom",
    "draw",
    "rand_float",
    "rand_int",
    "chance",
    "pick",
    "pick_weighted",
    "shuffled",
]
