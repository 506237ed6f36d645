"""
High-score persistence.

The engine only knows the HighScoreStore protocol: load() once at
construction and save() whenever the high score goes up. Store failures are
never fatal to a game; the YAML store logs them and carries on.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Protocol

import yaml

logger = logging.getLogger(__name__)

# Key the high score is stored under.
HIGH_SCORE_KEY = "tetrisHighScore"


class HighScoreStore(Protocol):
    """Key-value hook for the persisted high score."""

    def load(self) -> int | None:
        ...

    def save(self, value: int) -> None:
        ...


class MemoryHighScoreStore:
    """In-process store; remembers the value and counts writes."""

    def __init__(self, initial: int | None = None) -> None:
        self.value = initial
        self.writes = 0

    def load(self) -> int | None:
        return self.value

    def save(self, value: int) -> None:
        self.value = value
        self.writes += 1


class YamlHighScoreStore:
    """High score kept in a small YAML mapping file.

    The file holds ``{tetrisHighScore: <int>}``; other keys are preserved on
    save. Missing files read as no stored value.

    Attributes:
        path: Location of the YAML file.
    """

    def __init__(self, path: str | pathlib.Path) -> None:
        self.path = pathlib.Path(path).expanduser()

    def load(self) -> int | None:
        """Read the stored high score.

        Returns:
            The stored integer, or None if absent, unreadable or not a number.
        """
        data = self._read()
        value = data.get(HIGH_SCORE_KEY)
        if value is None:
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring non-integer high score %r in %s", value, self.path)
            return None

    def save(self, value: int) -> None:
        """Write the high score, keeping any other keys in the file."""
        data = self._read()
        data[HIGH_SCORE_KEY] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False)
        except OSError as e:
            logger.warning("Could not write high score to %s: %s", self.path, e)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not read high score from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return data
