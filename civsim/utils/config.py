"""Game configuration loaded from JSON files."""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path

from civsim.models import Difficulty

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised for unreadable or invalid configuration."""


@dataclass(frozen=True)
class GameConfig:
    """Settings for a game session."""

    civilization_name: str = "Humanity"
    difficulty: Difficulty = Difficulty.NORMAL
    seed: int | None = None  # None = nondeterministic
    save_path: Path = Path("savegame.json")
    max_investment: float = 500.0
    log_level: str = "INFO"
    log_file: Path | None = None

    def with_overrides(self, **overrides) -> "GameConfig":
        """Copy with command-line values applied; None values are ignored."""
        return replace(
            self,
            **{key: value for key, value in overrides.items() if value is not None},
        )


def parse_config(data: dict) -> GameConfig:
    """
    Build a config from a JSON object.

    Example:
        {"civilization_name": "Atlantis", "difficulty": "hard", "seed": 42,
         "save_path": "atlantis.json", "max_investment": 300,
         "log_level": "DEBUG", "log_file": "civsim.log"}
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    known = {f.name for f in fields(GameConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    values: dict = {}

    if "civilization_name" in data:
        if not isinstance(data["civilization_name"], str):
            raise ConfigError("civilization_name must be a string")
        values["civilization_name"] = data["civilization_name"]

    if "difficulty" in data:
        try:
            values["difficulty"] = Difficulty(data["difficulty"])
        except ValueError:
            raise ConfigError(f"Unknown difficulty '{data['difficulty']}'") from None

    if "seed" in data:
        seed = data["seed"]
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise ConfigError("seed must be an integer or null")
        values["seed"] = seed

    if "save_path" in data:
        if not isinstance(data["save_path"], str):
            raise ConfigError("save_path must be a string")
        values["save_path"] = Path(data["save_path"])

    if "max_investment" in data:
        amount = data["max_investment"]
        if (
            isinstance(amount, bool)
            or not isinstance(amount, (int, float))
            or amount <= 0
        ):
            raise ConfigError("max_investment must be a positive number")
        values["max_investment"] = float(amount)

    if "log_level" in data:
        level = str(data["log_level"]).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level '{data['log_level']}'")
        values["log_level"] = level

    if data.get("log_file") is not None:
        if not isinstance(data["log_file"], str):
            raise ConfigError("log_file must be a string or null")
        values["log_file"] = Path(data["log_file"])

    return GameConfig(**values)


def load_config(config_path: Path | None = None) -> GameConfig:
    """Load configuration from a JSON file, or defaults when no path is given."""
    if config_path is None:
        return GameConfig()

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read configuration {config_path}: {e}") from e

    return parse_config(data)
