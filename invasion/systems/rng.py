"""Domain-separated deterministic RNG using xxhash.

Every stochastic operation in the engine takes an explicit ``rng`` callable
returning a float in [0.0, 1.0). This module is where those callables come
from: each value is a pure function of (seed, domain, key, counter), so two
runs with the same seed draw exactly the same numbers.

Formula: RNG_Value = Hash(Seed, Domain, Key, Counter)
"""

from __future__ import annotations

import struct
from typing import Callable, MutableSequence, Sequence, TypeVar

import xxhash

from invasion.core.enums import Domain

T = TypeVar("T")

RandomSource = Callable[[], float]

_MAX_UINT64 = (1 << 64) - 1


def _key_hash(key: str | int) -> int:
    if isinstance(key, int):
        return key & _MAX_UINT64
    return xxhash.xxh64(key.encode("utf-8")).intdigest()


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    ``next_float`` is a pure function of its arguments. ``stream`` wraps it
    in a zero-argument callable with its own counter, which is the shape the
    combat, objective and reward functions expect.
    """

    __slots__ = ("_seed",)

    def __init__(self, seed: int | str) -> None:
        self._seed = _key_hash(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, counter: int) -> int:
        payload = struct.pack("<QiQq", self._seed, domain.value, key, counter)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: str | int, counter: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, _key_hash(key), counter) / (_MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: str | int, counter: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, counter)
        return low + int(f * (high - low + 1))

    def stream(self, domain: Domain, key: str | int = 0) -> RandomSource:
        """Return a zero-argument source of successive floats for (domain, key)."""
        key_hash = _key_hash(key)
        counter = 0

        def _next() -> float:
            nonlocal counter
            value = self._hash(domain, key_hash, counter) / (_MAX_UINT64 + 1)
            counter += 1
            return value

        return _next


def seeded_stream(seed: str | int, domain: Domain = Domain.OBJECTIVES) -> RandomSource:
    """Shortcut for a stream seeded by an arbitrary string or int."""
    return DeterministicRNG(seed).stream(domain)


def fixed_source(value: float) -> RandomSource:
    """A source that always returns *value* (handy for boundary rolls)."""
    return lambda: value


# ---------------------------------------------------------------------------
# Helpers over a RandomSource
# ---------------------------------------------------------------------------

def choice(seq: Sequence[T], rng: RandomSource) -> T:
    """Return a random element from the non-empty sequence."""
    if not seq:
        raise ValueError("Cannot choose from an empty sequence.")
    return seq[min(int(rng() * len(seq)), len(seq) - 1)]


def shuffled(seq: Sequence[T], rng: RandomSource) -> list[T]:
    """Return a Fisher-Yates shuffled copy; the input is left untouched."""
    out: MutableSequence[T] = list(seq)
    for i in range(len(out) - 1, 0, -1):
        j = min(int(rng() * (i + 1)), i)
        out[i], out[j] = out[j], out[i]
    return list(out)


def int_range(low: int, high_exclusive: int, rng: RandomSource) -> int:
    """Integer in [low, high_exclusive)."""
    return low + int(rng() * (high_exclusive - low))
