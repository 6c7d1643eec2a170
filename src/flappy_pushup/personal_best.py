"""
personal_best.py: Durable storage for the local high score.
"""

import json
import logging
import os

from .errors import StorageUnavailable

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "flappyPushupHighScore"
PLAYER_NAME_KEY = "flappyPushupName"


class PersonalBestStore:
    """Keeps the high score and last used name in a small JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageUnavailable(f"Unexpected content in {self.path}")
        return data

    def _write(self, data: dict):
        try:
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
        except OSError as e:
            raise StorageUnavailable(f"Cannot write {self.path}: {e}") from e

    def load(self) -> int:
        value = self._read().get(HIGH_SCORE_KEY, 0)
        try:
            return max(0, int(value))
        except (TypeError, ValueError) as e:
            raise StorageUnavailable(f"Invalid high score {value!r}") from e

    def save(self, score: int):
        data = self._read()
        data[HIGH_SCORE_KEY] = int(score)
        self._write(data)

    def load_name(self) -> str:
        """Last submitted player name, or an empty string."""
        try:
            name = self._read().get(PLAYER_NAME_KEY, "")
        except StorageUnavailable as e:
            logger.warning("Could not load player name: %s", e)
            return ""
        return name if isinstance(name, str) else ""

    def save_name(self, name: str):
        try:
            data = self._read()
            data[PLAYER_NAME_KEY] = name
            self._write(data)
        except StorageUnavailable as e:
            logger.warning("Could not save player name: %s", e)
