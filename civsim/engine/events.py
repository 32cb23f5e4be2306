"""Random event generation and the event history log."""

import logging
from dataclasses import replace

from civsim.engine.random_source import RandomSource, create_random_source
from civsim.models import Difficulty, Era, EventDefinition, EventType, GameEvent
from civsim.utils.data_loader import load_event_pool

logger = logging.getLogger(__name__)

QUIET_YEAR_CHANCE = 0.30

QUIET_YEAR = GameEvent(
    name="Peaceful Year",
    description="A calm and untroubled year has passed.",
    event_type=EventType.GOLDEN_AGE,
    happiness_effect=2.0,
    food_effect=10.0,
)

UNEVENTFUL_YEAR = GameEvent(
    name="Uneventful Year",
    description="Nothing of note happened.",
    event_type=EventType.GOLDEN_AGE,
)


def scale_for_difficulty(event: GameEvent, multiplier: float) -> GameEvent:
    """
    Scale an event's effects by difficulty.

    Harm (population loss, negative happiness/economy/ecology) is multiplied;
    positive happiness and economy are divided. Food, energy, materials and
    tech boost are left as authored.
    """
    population_multiplier = event.population_multiplier
    if population_multiplier < 1.0:
        loss = 1.0 - population_multiplier
        population_multiplier = 1.0 - loss * multiplier

    happiness = event.happiness_effect
    if happiness < 0:
        happiness *= multiplier
    elif happiness > 0:
        happiness /= multiplier

    economy = event.economy_effect
    if economy < 0:
        economy *= multiplier
    elif economy > 0:
        economy /= multiplier

    ecology = event.ecology_effect
    if ecology < 0:
        ecology *= multiplier

    return replace(
        event,
        population_multiplier=population_multiplier,
        happiness_effect=happiness,
        economy_effect=economy,
        ecology_effect=ecology,
    )


class EventCatalog:
    """Fixed pool of possible events plus an append-only history."""

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.NORMAL,
        rng: RandomSource | None = None,
        pool: list[EventDefinition] | None = None,
    ):
        """Initialize catalog."""
        self.difficulty = difficulty
        self.rng = rng if rng is not None else create_random_source()
        self._pool = pool if pool is not None else load_event_pool()
        self._history: list[GameEvent] = []

    @property
    def difficulty_multiplier(self) -> float:
        return self.difficulty.multiplier

    def get_events_for_era(self, era: Era) -> list[GameEvent]:
        """The era-filtered pool, in catalog order."""
        return [
            definition.for_era(era)
            for definition in self._pool
            if definition.covers(era)
        ]

    def generate_event(self, era: Era, turn: int) -> GameEvent:
        """Pick this turn's event for the given era, scaled by difficulty."""
        pool = self.get_events_for_era(era)
        if not pool:
            return UNEVENTFUL_YEAR

        multiplier = self.difficulty_multiplier

        if self.rng.random() < QUIET_YEAR_CHANCE / multiplier:
            return QUIET_YEAR

        event = pool[self.rng.randint(0, len(pool) - 1)]
        logger.debug("Turn %d: drew %s from %d candidates", turn, event.name, len(pool))
        return scale_for_difficulty(event, multiplier)

    # History

    def record_event(self, event: GameEvent) -> None:
        self._history.append(event)

    @property
    def history(self) -> tuple[GameEvent, ...]:
        return tuple(self._history)

    def recent(self, count: int) -> list[GameEvent]:
        """The most recent events, oldest first."""
        if count <= 0:
            return []
        return self._history[-count:]

    def restore_history(self, events: list[GameEvent]) -> None:
        """Replace the history with events from a saved snapshot."""
        self._history = list(events)
