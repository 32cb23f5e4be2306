"""Random number source used by the simulation."""

import random
from typing import Protocol


class RandomSource(Protocol):
    """Uniform random draws the engine depends on.

    ``random.Random`` satisfies this protocol, so tests can pass a seeded
    instance or a scripted stub.
    """

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        ...

    def randint(self, a: int, b: int) -> int:
        """Return an integer N such that a <= N <= b."""
        ...


def create_random_source(seed: int | None = None) -> RandomSource:
    """Create the default random source, seeded for reproducibility if requested."""
    return random.Random(seed)
