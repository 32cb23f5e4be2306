"""Data loaders for the static event pool."""

import json
from dataclasses import fields
from pathlib import Path

from civsim.models import Era, EventDefinition, EventType, GameEvent

DATA_DIR = Path(__file__).parent.parent / "data"

# GameEvent fields an event entry may set under "effects"
EFFECT_FIELDS = {f.name for f in fields(GameEvent)} - {
    "name",
    "description",
    "event_type",
}
INTEGER_EFFECTS = {"population_effect", "tech_boost", "duration"}


class CatalogError(ValueError):
    """Raised when a static data catalog is malformed."""


def read_catalog(json_path: Path) -> list[dict]:
    """Read a JSON catalog file holding a list of entries."""
    try:
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {json_path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {json_path} must contain a list of entries")

    return data


def parse_era(value: str, event_name: str) -> Era:
    """Map an era string to the Era enum."""
    try:
        return Era(value)
    except ValueError:
        raise CatalogError(f"Unknown era '{value}' for event '{event_name}'") from None


def parse_event_definition(entry: dict) -> EventDefinition:
    """
    Parse one event pool entry.

    Expected format:
        {"name": "Drought", "description": "...", "type": "natural_disaster",
         "min_era": "stone_age", "max_era": "space",
         "late_description": "...",
         "effects": {"food_effect": -80.0, "happiness_effect": -10.0}}

    Only name, description and type are required.
    """
    missing = [key for key in ("name", "description", "type") if key not in entry]
    if missing:
        raise CatalogError(f"Event entry missing fields: {', '.join(missing)}")

    name = entry["name"]

    try:
        event_type = EventType(entry["type"])
    except ValueError:
        raise CatalogError(
            f"Unknown event type '{entry['type']}' for event '{name}'"
        ) from None

    effects: dict[str, int | float] = {}
    for key, value in entry.get("effects", {}).items():
        if key not in EFFECT_FIELDS:
            raise CatalogError(f"Unknown effect '{key}' for event '{name}'")
        effects[key] = int(value) if key in INTEGER_EFFECTS else float(value)

    min_era = parse_era(entry.get("min_era", Era.STONE_AGE.value), name)
    max_era = parse_era(entry.get("max_era", Era.SPACE.value), name)
    if min_era.rank > max_era.rank:
        raise CatalogError(f"Event '{name}' has an empty era window")

    return EventDefinition(
        event=GameEvent(
            name=name,
            description=entry["description"],
            event_type=event_type,
            **effects,
        ),
        min_era=min_era,
        max_era=max_era,
        late_description=entry.get("late_description"),
    )


def load_event_pool(json_path: Path | None = None) -> list[EventDefinition]:
    """Load the event pool from JSON, preserving file order."""
    if json_path is None:
        # Default to civsim/data/events.json
        json_path = DATA_DIR / "events.json"

    return [parse_event_definition(entry) for entry in read_catalog(json_path)]
