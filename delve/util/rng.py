"""Deterministic random number generation with isolated streams.

Level generation threads one random generator explicitly through every call.
This module provides the type accepted by those calls and a provider that
derives independent, reproducible streams from a master seed. This ensures
that:

1. A level is fully determined by the master seed and its depth
2. Changes to one stage's random consumption (e.g. which generator is
   picked) don't cascade into another stage (e.g. the carving itself)
3. No random state leaks between separate generator invocations

Usage:
    from delve.util.rng import RNGProvider

    provider = RNGProvider(master_seed)
    select_rng = provider.get("map.select.3")
    build_rng = provider.get("map.build.3")

    generator = random_builder(3, build_rng)

Domain naming convention (hierarchical):
    - "map.select.<depth>", "map.build.<depth>"
    - "map.spawn.<depth>"
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

if TYPE_CHECKING:
    from delve.types import RandomSeed

T = TypeVar("T")


def derive_seed(master_seed: RandomSeed, domain: str) -> int:
    """Derive a stable integer seed for ``domain`` from ``master_seed``."""
    # Use crc32 instead of hash() - hash() is randomized per Python
    # session via PYTHONHASHSEED, which would break cross-session
    # determinism
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream:
    """The random generator owned by one domain.

    Only the ``Random`` methods level generation calls are exposed, so a
    stream can be passed wherever a plain ``Random`` is accepted.
    """

    def __init__(self, domain: str, rng: Random) -> None:
        self._domain = domain
        self._rng = rng

    @property
    def domain(self) -> str:
        return self._domain

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng.randint(a, b)

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        """Return k unique elements from population."""
        return self._rng.sample(population, k)

    def getrandbits(self, k: int) -> int:
        """Return an integer with k random bits."""
        return self._rng.getrandbits(k)


# Type alias for functions that accept either Random or RNGStream.
# Use this in type hints: `def foo(rng: RNG) -> int:`
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Provides isolated RNG streams for the stages of level generation.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get the RNG stream for the named domain.

        The same stream is returned on every call for a domain, so draws
        continue where the previous caller left off.

        Args:
            domain: Hierarchical name like "map.build.3"
        """
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: use system entropy for non-deterministic behavior
                rng = Random()
            else:
                rng = Random(derive_seed(self._master_seed, domain))
            self._streams[domain] = RNGStream(domain, rng)
        return self._streams[domain]
