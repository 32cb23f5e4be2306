"""Turn orchestration: events, civilization turns and player actions."""

import logging
from dataclasses import dataclass
from pathlib import Path

from civsim.engine.civilization import DEFAULT_NAME, Civilization
from civsim.engine.events import EventCatalog
from civsim.engine.random_source import RandomSource, create_random_source
from civsim.models import (
    Difficulty,
    Era,
    GameEvent,
    GameResult,
    ResourceType,
    TechBranch,
)
from civsim.utils.save_system import DEFAULT_SAVE_PATH, SaveSystem

logger = logging.getLogger(__name__)

MAX_INVESTMENT = 500.0


@dataclass
class TurnReport:
    """What happened during one turn."""

    turn: int
    event: GameEvent
    result: GameResult
    previous_era: Era
    era: Era

    @property
    def era_changed(self) -> bool:
        return self.era != self.previous_era


class GameEngine:
    """
    Drives the game loop.

    Per turn: generate an event for the current era, record and apply it,
    advance the civilization, then evaluate the end conditions. Player
    actions (invest, research) check affordability before touching state.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.NORMAL,
        name: str = DEFAULT_NAME,
        rng: RandomSource | None = None,
        max_investment: float = MAX_INVESTMENT,
        save_system: SaveSystem | None = None,
    ):
        """Initialize engine with a fresh game."""
        self.rng = rng if rng is not None else create_random_source()
        self.max_investment = max_investment
        self.save_system = save_system if save_system is not None else SaveSystem()
        self.new_game(name, difficulty)

    def new_game(self, name: str, difficulty: Difficulty) -> None:
        """Start over with a new civilization and an empty event history."""
        self.difficulty = difficulty
        self.civ = Civilization(name or DEFAULT_NAME)
        self.events = EventCatalog(difficulty=difficulty, rng=self.rng)
        self.result = GameResult.IN_PROGRESS
        logger.info(
            "New game started: %s (Difficulty: %s)",
            self.civ.name,
            difficulty.display_name,
        )

    @property
    def is_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def last_error(self) -> str:
        return self.save_system.last_error

    def play_turn(self) -> TurnReport | None:
        """Play one turn; returns None once the game has ended."""
        if self.is_over:
            return None

        previous_era = self.civ.current_era
        logger.info("=== Turn %d ===", self.civ.turn + 1)

        event = self.events.generate_event(previous_era, self.civ.turn)
        self.events.record_event(event)
        self.civ.apply_event(event)
        self.civ.process_turn()

        self.result = self.civ.check_game_result()
        era = self.civ.current_era

        logger.info(
            "Turn processed. Pop: %d Tech: %d",
            self.civ.population,
            self.civ.tech.get_overall_tech_level(),
        )
        if era != previous_era:
            logger.info("Era changed to: %s", era.display_name)
        if self.is_over:
            logger.info(
                "Game ended: %s at turn %d", self.result.display_name, self.civ.turn
            )

        return TurnReport(
            turn=self.civ.turn,
            event=event,
            result=self.result,
            previous_era=previous_era,
            era=era,
        )

    # Player actions

    def invest(self, branch: TechBranch, amount: float) -> bool:
        """Spend money on a technology branch."""
        money = self.civ.resources.get_resource(ResourceType.MONEY)
        if money <= 0 or amount <= 0 or amount > money or amount > self.max_investment:
            logger.debug(
                "Rejected investment of %.1f in %s (money %.1f)",
                amount,
                branch.display_name,
                money,
            )
            return False

        self.civ.resources.remove_resource(ResourceType.MONEY, amount)
        self.civ.tech.invest_in_branch(branch, amount)
        logger.info("Invested %.1f in %s", amount, branch.display_name)
        return True

    def research(self, name: str) -> bool:
        """Pay for and research an available technology."""
        tech = next(
            (t for t in self.civ.tech.get_available_techs() if t.name == name), None
        )
        if tech is None:
            logger.debug("Technology %r is not available", name)
            return False

        money = self.civ.resources.get_resource(ResourceType.MONEY)
        if money < tech.cost:
            logger.debug("Cannot afford %s: need %d, have %.0f", name, tech.cost, money)
            return False

        self.civ.resources.remove_resource(ResourceType.MONEY, tech.cost)
        return self.civ.tech.research_tech(name)

    # Persistence

    def save(self, path: Path = DEFAULT_SAVE_PATH) -> bool:
        return self.save_system.save_game(self.civ, self.events, self.difficulty, path)

    def load(self, path: Path = DEFAULT_SAVE_PATH) -> bool:
        """Replace the current game with a saved one; untouched on failure."""
        loaded = self.save_system.load_game(path, rng=self.rng)
        if loaded is None:
            return False

        self.civ = loaded.civilization
        self.events = loaded.events
        self.difficulty = loaded.difficulty
        self.result = GameResult.IN_PROGRESS
        return True
