"""Shared fixtures for the civsim test suite."""

import random

import pytest

from civsim.engine.civilization import Civilization
from civsim.engine.events import EventCatalog
from civsim.engine.game import GameEngine
from civsim.models import Difficulty


class ScriptedRandom:
    """Random source that replays fixed draws, then repeats the last one."""

    def __init__(self, floats=(0.99,), ints=(0,)):
        self.floats = list(floats)
        self.ints = list(ints)
        self.randint_calls: list[tuple[int, int]] = []

    def random(self) -> float:
        return self.floats.pop(0) if len(self.floats) > 1 else self.floats[0]

    def randint(self, a: int, b: int) -> int:
        self.randint_calls.append((a, b))
        value = self.ints.pop(0) if len(self.ints) > 1 else self.ints[0]
        assert a <= value <= b, f"scripted index {value} outside {a}..{b}"
        return value


@pytest.fixture
def civ():
    return Civilization()


@pytest.fixture
def quiet_rng():
    """Always rolls a quiet year."""
    return ScriptedRandom(floats=(0.0,))


@pytest.fixture
def catalog():
    return EventCatalog(difficulty=Difficulty.NORMAL, rng=random.Random(7))


@pytest.fixture
def engine(quiet_rng):
    return GameEngine(difficulty=Difficulty.NORMAL, name="Testland", rng=quiet_rng)


@pytest.fixture
def scripted_random():
    """Factory for scripted random sources."""
    return ScriptedRandom
