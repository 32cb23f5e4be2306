"""Versioned JSON encoding of a game in progress."""

import json
from dataclasses import asdict, dataclass
from typing import Any

from civsim.engine.civilization import Civilization
from civsim.engine.events import EventCatalog
from civsim.engine.random_source import RandomSource
from civsim.engine.resources import ResourceLedger
from civsim.engine.technology_tree import TechnologyTree
from civsim.models import (
    MAX_BRANCH_LEVEL,
    Difficulty,
    EventType,
    GameEvent,
    ResourceType,
    TechBranch,
)

SAVE_FORMAT = "civsim-save"
SAVE_VERSION = 2
LEGACY_HEADER = "CIVSIM_SAVE_V1"


class SaveFormatError(ValueError):
    """Raised when save data cannot be decoded."""


class LegacySaveFormatError(SaveFormatError):
    """Raised for saves in the old whitespace-delimited text format."""


@dataclass
class LoadedGame:
    """Everything restored from a save."""

    civilization: Civilization
    events: EventCatalog
    difficulty: Difficulty


# Encoding


def civilization_to_dict(civ: Civilization) -> dict[str, Any]:
    """Encode a civilization; transient multipliers and base rates are omitted."""
    return {
        "name": civ.name,
        "population": civ.population,
        "happiness": civ.happiness,
        "ecology": civ.ecology,
        "military": civ.military,
        "turn": civ.turn,
        "stable_economy_turns": civ.stable_economy_turns,
        "resources": {
            rt.value: civ.resources.get_resource(rt) for rt in ResourceType
        },
        "technology": {
            "branches": {
                status.branch.value: {
                    "level": status.level,
                    "progress": status.progress,
                }
                for status in civ.tech.branch_status()
            },
            "researched": [tech.name for tech in civ.tech.get_researched_techs()],
        },
    }


def event_to_dict(event: GameEvent) -> dict[str, Any]:
    data = asdict(event)
    data["event_type"] = event.event_type.value
    return data


def events_to_dict(events: EventCatalog) -> dict[str, Any]:
    return {
        "difficulty": events.difficulty.value,
        "history": [event_to_dict(event) for event in events.history],
    }


def serialize_civilization(civ: Civilization) -> str:
    return json.dumps(civilization_to_dict(civ))


def serialize_game(
    civ: Civilization, events: EventCatalog, difficulty: Difficulty
) -> str:
    """Encode a whole game as a versioned JSON document."""
    document = {
        "format": SAVE_FORMAT,
        "version": SAVE_VERSION,
        "difficulty": difficulty.value,
        "civilization": civilization_to_dict(civ),
        "events": events_to_dict(events),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


# Decoding


def _field(data: Any, key: str, expected: type | tuple[type, ...]) -> Any:
    """Fetch a field and check its type."""
    if not isinstance(data, dict):
        raise SaveFormatError(f"Expected an object holding '{key}'")
    if key not in data:
        raise SaveFormatError(f"Missing field '{key}'")

    value = data[key]
    # bool is an int subclass; never accept it for numbers
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise SaveFormatError(f"Field '{key}' has wrong type")
    if not isinstance(value, expected):
        raise SaveFormatError(f"Field '{key}' has wrong type")
    return value


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _number(data: Any, key: str) -> float:
    return float(_field(data, key, (int, float)))


def _enum(enum_type: type, value: Any, what: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        raise SaveFormatError(f"Unknown {what} '{value}'") from None


def _parse_json(text: str) -> Any:
    if text.lstrip().startswith(LEGACY_HEADER):
        raise LegacySaveFormatError(
            f"Save uses the old {LEGACY_HEADER} text format, "
            "which is no longer supported"
        )
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SaveFormatError(f"Save data is not valid JSON: {e}") from e
    except RecursionError as e:
        raise SaveFormatError("Save data is nested too deeply") from e


def civilization_from_dict(data: Any) -> Civilization:
    """Decode a civilization, validating every field before building anything."""
    name = _field(data, "name", str)
    population = _field(data, "population", int)
    happiness = _number(data, "happiness")
    ecology = _number(data, "ecology")
    military = _number(data, "military")
    turn = _field(data, "turn", int)
    stable_turns = _field(data, "stable_economy_turns", int)

    if population < 0 or turn < 0 or stable_turns < 0:
        raise SaveFormatError("Population, turn and stable turns must be non-negative")

    resource_data = _field(data, "resources", dict)
    stocks = {rt: _number(resource_data, rt.value) for rt in ResourceType}

    tech_data = _field(data, "technology", dict)
    branch_data = _field(tech_data, "branches", dict)
    branches: dict[TechBranch, tuple[int, float]] = {}
    for branch in TechBranch:
        entry = _field(branch_data, branch.value, dict)
        level = _field(entry, "level", int)
        if not 0 <= level <= MAX_BRANCH_LEVEL:
            raise SaveFormatError(
                f"Branch level {level} out of range for {branch.value}"
            )
        branches[branch] = (level, _number(entry, "progress"))

    researched = _field(tech_data, "researched", list)
    if not all(isinstance(tech_name, str) for tech_name in researched):
        raise SaveFormatError("Researched technologies must be names")

    tech = TechnologyTree()
    catalog_names = {t.name for t in tech.technologies}
    unknown = [tech_name for tech_name in researched if tech_name not in catalog_names]
    if unknown:
        raise SaveFormatError(f"Unknown technologies: {', '.join(unknown)}")

    for branch, (level, progress) in branches.items():
        tech.set_branch_state(branch, level, progress)
    for technology in tech.technologies:
        technology.researched = technology.name in researched

    civ = Civilization(name=name, resources=ResourceLedger(stocks), tech=tech)
    civ.population = population
    civ.happiness = happiness
    civ.ecology = ecology
    civ.military = military
    civ.turn = turn
    civ.stable_economy_turns = stable_turns
    return civ


def event_from_dict(data: Any) -> GameEvent:
    return GameEvent(
        name=_field(data, "name", str),
        description=_field(data, "description", str),
        event_type=_enum(EventType, _field(data, "event_type", str), "event type"),
        population_effect=_field(data, "population_effect", int),
        population_multiplier=_number(data, "population_multiplier"),
        happiness_effect=_number(data, "happiness_effect"),
        ecology_effect=_number(data, "ecology_effect"),
        military_effect=_number(data, "military_effect"),
        economy_effect=_number(data, "economy_effect"),
        food_effect=_number(data, "food_effect"),
        energy_effect=_number(data, "energy_effect"),
        materials_effect=_number(data, "materials_effect"),
        tech_boost=_field(data, "tech_boost", int),
        duration=_field(data, "duration", int),
    )


def events_from_dict(data: Any, rng: RandomSource | None = None) -> EventCatalog:
    difficulty = _enum(Difficulty, _field(data, "difficulty", str), "difficulty")
    history = [event_from_dict(entry) for entry in _field(data, "history", list)]

    events = EventCatalog(difficulty=difficulty, rng=rng)
    events.restore_history(history)
    return events


def deserialize_civilization(text: str) -> Civilization:
    return civilization_from_dict(_parse_json(text))


def deserialize_game(text: str, rng: RandomSource | None = None) -> LoadedGame:
    """Decode a save document produced by serialize_game()."""
    document = _parse_json(text)

    if _field(document, "format", str) != SAVE_FORMAT:
        raise SaveFormatError("Not a civsim save file")
    version = _field(document, "version", int)
    if version != SAVE_VERSION:
        raise SaveFormatError(f"Unsupported save version {version}")

    difficulty = _enum(Difficulty, _field(document, "difficulty", str), "difficulty")
    civilization = civilization_from_dict(_field(document, "civilization", dict))
    events = events_from_dict(_field(document, "events", dict), rng=rng)
    if events.difficulty != difficulty:
        raise SaveFormatError(
            f"Difficulty mismatch: game is '{difficulty.value}', "
            f"events are '{events.difficulty.value}'"
        )

    return LoadedGame(civilization=civilization, events=events, difficulty=difficulty)
