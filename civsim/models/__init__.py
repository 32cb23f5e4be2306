"""Data models for civilization simulation entities."""

from dataclasses import dataclass, replace
from enum import Enum

from civsim.models.technology import Technology


class ResourceType(Enum):
    """Types of resources a civilization stockpiles."""

    FOOD = "food"
    MONEY = "money"
    ENERGY = "energy"
    MATERIALS = "materials"

    @property
    def display_name(self) -> str:
        return self.value.title()


class TechBranch(Enum):
    """Independent technology tracks."""

    SCIENCE = "science"
    MEDICINE = "medicine"
    MILITARY = "military"
    INDUSTRY = "industry"
    SPACE = "space"

    @property
    def display_name(self) -> str:
        return self.value.title()


class Era(Enum):
    """Historical stages derived from overall technology level."""

    STONE_AGE = "stone_age"
    BRONZE_AGE = "bronze_age"
    IRON_AGE = "iron_age"
    MEDIEVAL = "medieval"
    RENAISSANCE = "renaissance"
    INDUSTRIAL = "industrial"
    MODERN = "modern"
    INFORMATION = "information"
    SPACE = "space"

    @property
    def rank(self) -> int:
        """Position of the era in historical order (0 = Stone Age)."""
        return _ERA_ORDER.index(self)

    @property
    def display_name(self) -> str:
        return _ERA_NAMES[self]


_ERA_ORDER = list(Era)

_ERA_NAMES = {
    Era.STONE_AGE: "Stone Age",
    Era.BRONZE_AGE: "Bronze Age",
    Era.IRON_AGE: "Iron Age",
    Era.MEDIEVAL: "Medieval Era",
    Era.RENAISSANCE: "Renaissance",
    Era.INDUSTRIAL: "Industrial Era",
    Era.MODERN: "Modern Era",
    Era.INFORMATION: "Information Age",
    Era.SPACE: "Space Age",
}


class Difficulty(Enum):
    """Game difficulty levels."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    NIGHTMARE = "nightmare"

    @property
    def multiplier(self) -> float:
        """Scale applied to harmful event effects (rewards are divided by it)."""
        return _DIFFICULTY_MULTIPLIERS[self]

    @property
    def display_name(self) -> str:
        return self.value.title()


_DIFFICULTY_MULTIPLIERS = {
    Difficulty.EASY: 0.6,
    Difficulty.NORMAL: 1.0,
    Difficulty.HARD: 1.4,
    Difficulty.NIGHTMARE: 2.0,
}


class EventType(Enum):
    """Categories of random events."""

    EPIDEMIC = "epidemic"
    ECONOMIC_CRISIS = "economic_crisis"
    TECH_BREAKTHROUGH = "tech_breakthrough"
    WAR = "war"
    NATURAL_DISASTER = "natural_disaster"
    REVOLUTION = "revolution"
    GOLDEN_AGE = "golden_age"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


class GameResult(Enum):
    """Outcome of the game at a given moment."""

    IN_PROGRESS = "in_progress"
    VICTORY_SPACE = "victory_space"
    VICTORY_ECONOMY = "victory_economy"  # Declared but never produced
    VICTORY_TECH = "victory_tech"  # Declared but never produced
    DEFEAT_POPULATION = "defeat_population"
    DEFEAT_ECOLOGY = "defeat_ecology"
    DEFEAT_ECONOMY = "defeat_economy"

    @property
    def is_victory(self) -> bool:
        return self.value.startswith("victory")

    @property
    def is_defeat(self) -> bool:
        return self.value.startswith("defeat")

    @property
    def display_name(self) -> str:
        return _RESULT_NAMES[self]


_RESULT_NAMES = {
    GameResult.IN_PROGRESS: "In progress",
    GameResult.VICTORY_SPACE: "Victory: the stars are conquered!",
    GameResult.VICTORY_ECONOMY: "Victory: lasting economic stability!",
    GameResult.VICTORY_TECH: "Victory: technological supremacy!",
    GameResult.DEFEAT_POPULATION: "Defeat: the population has died out",
    GameResult.DEFEAT_ECOLOGY: "Defeat: ecological collapse",
    GameResult.DEFEAT_ECONOMY: "Defeat: economic collapse",
}


# Game constants
MAX_BRANCH_LEVEL = 20
TECH_LEVEL_MAX = MAX_BRANCH_LEVEL * len(TechBranch)
VICTORY_STABLE_ECONOMY_TURNS = 50
ECOLOGY_COLLAPSE_THRESHOLD = 5.0
ECONOMY_COLLAPSE_THRESHOLD = -500.0
RESOURCE_FLOOR = -10000.0

INITIAL_POPULATION = 1000
INITIAL_HAPPINESS = 70.0
INITIAL_ECOLOGY = 90.0
INITIAL_MILITARY = 10.0
INITIAL_RESOURCES: dict[ResourceType, float] = {
    ResourceType.FOOD: 500.0,
    ResourceType.MONEY: 200.0,
    ResourceType.ENERGY: 100.0,
    ResourceType.MATERIALS: 150.0,
}


@dataclass(frozen=True)
class GameEvent:
    """A single turn's random occurrence and its effects on a civilization."""

    name: str
    description: str
    event_type: EventType
    population_effect: int = 0  # Absolute change
    population_multiplier: float = 1.0
    happiness_effect: float = 0.0
    ecology_effect: float = 0.0
    military_effect: float = 0.0
    economy_effect: float = 0.0  # Routed to money
    food_effect: float = 0.0
    energy_effect: float = 0.0
    materials_effect: float = 0.0
    tech_boost: int = 0
    duration: int = 1

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.name} ({self.event_type.display_name})"


@dataclass(frozen=True)
class EventDefinition:
    """An entry of the event pool: a template event and the eras it can occur in."""

    event: GameEvent
    min_era: Era = Era.STONE_AGE
    max_era: Era = Era.SPACE
    late_description: str | None = None  # Used from the Medieval era onward

    def covers(self, era: Era) -> bool:
        """Check if the event can occur in the given era."""
        return self.min_era.rank <= era.rank <= self.max_era.rank

    def for_era(self, era: Era) -> GameEvent:
        """The event as it reads in the given era."""
        if self.late_description and era.rank >= Era.MEDIEVAL.rank:
            return replace(self.event, description=self.late_description)
        return self.event


@dataclass(frozen=True)
class BranchStatus:
    """Read-only view of one technology branch."""

    branch: TechBranch
    level: int
    progress: float
    threshold: float


__all__ = [
    "BranchStatus",
    "Difficulty",
    "Era",
    "EventDefinition",
    "EventType",
    "GameEvent",
    "GameResult",
    "ResourceType",
    "TechBranch",
    "Technology",
    "ECOLOGY_COLLAPSE_THRESHOLD",
    "ECONOMY_COLLAPSE_THRESHOLD",
    "INITIAL_ECOLOGY",
    "INITIAL_HAPPINESS",
    "INITIAL_MILITARY",
    "INITIAL_POPULATION",
    "INITIAL_RESOURCES",
    "MAX_BRANCH_LEVEL",
    "RESOURCE_FLOOR",
    "TECH_LEVEL_MAX",
    "VICTORY_STABLE_ECONOMY_TURNS",
]
