"""Saving and loading games to and from files."""

import logging
from pathlib import Path

from civsim.engine.civilization import Civilization
from civsim.engine.events import EventCatalog
from civsim.engine.random_source import RandomSource
from civsim.models import Difficulty
from civsim.utils.serialization import (
    LegacySaveFormatError,
    LoadedGame,
    SaveFormatError,
    deserialize_game,
    serialize_game,
)

logger = logging.getLogger(__name__)

DEFAULT_SAVE_PATH = Path("savegame.json")


class SaveSystem:
    """File persistence for games; failures are reported, never raised."""

    def __init__(self):
        self.last_error = ""

    def save_game(
        self,
        civ: Civilization,
        events: EventCatalog,
        difficulty: Difficulty,
        path: Path = DEFAULT_SAVE_PATH,
    ) -> bool:
        """Write a save file, replacing any previous one only once fully written."""
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            text = serialize_game(civ, events, difficulty)
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            self.last_error = f"Save failed: {e}"
            logger.error(self.last_error)
            return False

        self.last_error = ""
        logger.info("Game saved to: %s", path)
        return True

    def load_game(
        self, path: Path = DEFAULT_SAVE_PATH, rng: RandomSource | None = None
    ) -> LoadedGame | None:
        """Read a save file; returns None and sets last_error on failure."""
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            self.last_error = f"Cannot open file for reading: {path} ({e.strerror})"
            logger.error(self.last_error)
            return None
        except UnicodeDecodeError as e:
            self.last_error = f"Invalid save file format: not UTF-8 text ({e.reason})"
            logger.error(self.last_error)
            return None

        try:
            loaded = deserialize_game(text, rng=rng)
        except LegacySaveFormatError as e:
            self.last_error = f"Outdated save format: {e}"
            logger.error(self.last_error)
            return None
        except SaveFormatError as e:
            self.last_error = f"Invalid save file format: {e}"
            logger.error(self.last_error)
            return None

        self.last_error = ""
        logger.info("Game loaded from: %s", path)
        return loaded

    @staticmethod
    def save_exists(path: Path = DEFAULT_SAVE_PATH) -> bool:
        return Path(path).is_file()

    @staticmethod
    def delete_save(path: Path = DEFAULT_SAVE_PATH) -> bool:
        """Delete a save file; returns False if there was nothing to delete."""
        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Cannot delete save %s: %s", path, e)
            return False
        return True
