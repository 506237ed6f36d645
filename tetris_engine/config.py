"""Runtime configuration loaded from YAML."""

from __future__ import annotations

import pathlib
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "board_width": 10,
    "board_height": 20,
    "cell_size": 30,
    "preview_cell_size": 25,
    "fps": 60,
    "drop_interval_ms": 1000,
    "high_score_path": "~/.tetris_engine/highscore.yaml",
    "seed": None,
    "log_level": "INFO",
}


def load_config(config_path: str | pathlib.Path | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file on top of DEFAULT_CONFIG.

    Args:
        config_path: Path to the YAML config file, or None for defaults only.

    Returns:
        Dict of configuration key-value pairs.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the file does not contain a mapping.
    """
    config = dict(DEFAULT_CONFIG)
    if config_path is None:
        return config

    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    config.update(data)
    return config
