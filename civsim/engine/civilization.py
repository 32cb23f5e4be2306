"""The player's civilization: vitals, growth and end-of-game conditions."""

import logging
import math

from civsim.engine.resources import ResourceLedger
from civsim.engine.technology_tree import TechnologyTree
from civsim.models import (
    ECOLOGY_COLLAPSE_THRESHOLD,
    ECONOMY_COLLAPSE_THRESHOLD,
    INITIAL_ECOLOGY,
    INITIAL_HAPPINESS,
    INITIAL_MILITARY,
    INITIAL_POPULATION,
    Era,
    GameEvent,
    GameResult,
    ResourceType,
    TechBranch,
)

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Humanity"

BASE_GROWTH_RATE = 0.02
FOOD_PER_CAPITA = 0.012
MIN_GROWTH_RATE = -0.05
MAX_GROWTH_RATE = 0.05
FAMINE_GROWTH_RATE = -0.01


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


class Civilization:
    """
    Aggregate root of the simulation.

    Owns the resource ledger and technology tree. The orchestrator calls
    apply_event() then process_turn() once per turn, then check_game_result().
    """

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        resources: ResourceLedger | None = None,
        tech: TechnologyTree | None = None,
    ):
        """Initialize a civilization with new-game values."""
        self.name = name
        self.population = INITIAL_POPULATION
        self.happiness = INITIAL_HAPPINESS
        self.ecology = INITIAL_ECOLOGY
        self.military = INITIAL_MILITARY
        self.turn = 0
        self.stable_economy_turns = 0
        self.resources = resources if resources is not None else ResourceLedger()
        self.tech = tech if tech is not None else TechnologyTree()

    # Turn processing

    def apply_event(self, event: GameEvent) -> None:
        """Apply an event's effects to vitals, resources and technology."""
        if event.population_multiplier != 1.0:
            self.population = int(self.population * event.population_multiplier)
        self.population = max(0, self.population + event.population_effect)

        self.happiness += event.happiness_effect
        self.ecology += event.ecology_effect
        self.military += event.military_effect

        resource_effects = {
            ResourceType.MONEY: event.economy_effect,
            ResourceType.FOOD: event.food_effect,
            ResourceType.ENERGY: event.energy_effect,
            ResourceType.MATERIALS: event.materials_effect,
        }
        for resource_type, amount in resource_effects.items():
            if amount != 0.0:
                self.resources.add_resource(resource_type, amount)

        if event.tech_boost > 0:
            # Boost is spread evenly over every branch
            per_branch = event.tech_boost * 20.0 / len(TechBranch)
            for branch in TechBranch:
                self.tech.invest_in_branch(branch, per_branch)

        self._clamp_vitals()
        logger.info("Event applied: %s", event.name)

    def process_turn(self) -> None:
        """Advance one turn: economy, population, ecology and happiness."""
        self.turn += 1

        self.resources.reset_multipliers()
        self.resources.process_turn(self.population, self.tech.get_overall_tech_level())

        self.grow_population()
        self._update_ecology()
        self._update_happiness()
        self._track_stable_economy()

        self._clamp_vitals()
        self.population = max(0, self.population)

    def grow_population(self) -> None:
        growth = math.floor(self.population * self.get_growth_rate())
        self.population = max(0, self.population + growth)

    def get_growth_rate(self) -> float:
        """
        Population growth rate for this turn.

        Scales a 2% base by food availability, happiness, medicine and
        ecology. Famine or misery forces decline.
        """
        food = self.resources.get_resource(ResourceType.FOOD)
        food_needed = self.population * FOOD_PER_CAPITA
        food_ratio = food / food_needed if food_needed > 0 else 1.0
        food_ratio = clamp(food_ratio, 0.0, 2.0)

        rate = (
            BASE_GROWTH_RATE
            * food_ratio
            * (self.happiness / 100.0)
            * self.tech.get_medicine_bonus()
            * (self.ecology / 100.0)
        )

        if food_ratio < 0.5 or self.happiness < 20.0:
            rate = min(rate, FAMINE_GROWTH_RATE)

        return clamp(rate, MIN_GROWTH_RATE, MAX_GROWTH_RATE)

    def _update_ecology(self) -> None:
        industrial_damage = self.tech.get_branch_level(TechBranch.INDUSTRY) * 0.15
        science_help = self.tech.get_branch_level(TechBranch.SCIENCE) * 0.08
        pop_pressure = math.log10(max(1, self.population)) * 0.3

        self.ecology += science_help - industrial_damage - pop_pressure + 0.5
        self.ecology = clamp(self.ecology, 0.0, 100.0)

    def _update_happiness(self) -> None:
        drift = (50.0 - self.happiness) * 0.02
        food_mood = clamp(
            self.resources.get_net_income(ResourceType.FOOD) * 0.05, -5.0, 5.0
        )
        money_mood = clamp(
            self.resources.get_net_income(ResourceType.MONEY) * 0.03, -3.0, 3.0
        )
        ecology_mood = (self.ecology - 50.0) * 0.02

        self.happiness += drift + food_mood + money_mood + ecology_mood
        self.happiness = clamp(self.happiness, 0.0, 100.0)

    def _track_stable_economy(self) -> None:
        money = self.resources.get_resource(ResourceType.MONEY)
        food = self.resources.get_resource(ResourceType.FOOD)
        if money > 0 and food > 0 and self.happiness > 50.0:
            self.stable_economy_turns += 1
        else:
            self.stable_economy_turns = max(0, self.stable_economy_turns - 1)

    def _clamp_vitals(self) -> None:
        self.happiness = clamp(self.happiness, 0.0, 100.0)
        self.ecology = clamp(self.ecology, 0.0, 100.0)
        self.military = max(0.0, self.military)

    # Direct modifiers

    def modify_population(self, delta: int) -> None:
        self.population = max(0, self.population + delta)

    def modify_happiness(self, delta: float) -> None:
        self.happiness = clamp(self.happiness + delta, 0.0, 100.0)

    def modify_ecology(self, delta: float) -> None:
        self.ecology = clamp(self.ecology + delta, 0.0, 100.0)

    def modify_military(self, delta: float) -> None:
        self.military = max(0.0, self.military + delta)

    # Queries

    @property
    def current_era(self) -> Era:
        return self.tech.get_current_era()

    def is_alive(self) -> bool:
        return self.population > 0

    def check_game_result(self) -> GameResult:
        """
        Evaluate win/loss conditions, defeats first.

        Economic and technological victories are never produced here.
        """
        money = self.resources.get_resource(ResourceType.MONEY)
        food = self.resources.get_resource(ResourceType.FOOD)

        if self.population <= 0:
            return GameResult.DEFEAT_POPULATION
        if self.ecology <= ECOLOGY_COLLAPSE_THRESHOLD:
            return GameResult.DEFEAT_ECOLOGY
        if money <= ECONOMY_COLLAPSE_THRESHOLD and food <= 0:
            return GameResult.DEFEAT_ECONOMY

        if self.current_era == Era.SPACE:
            return GameResult.VICTORY_SPACE

        return GameResult.IN_PROGRESS
