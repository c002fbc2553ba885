"""
Configuration loading (YAML).
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .questions import Subject, Difficulty


DEFAULT_CONFIG: Dict[str, Any] = {
    "game": {
        "grid_size": 10,
        "tick_ms": 150,
        "subject": "math",
        "difficulty": "easy",
        "seed": None,
    },
    "display": {
        "cell_size": 60,
        "panel_width": 260,
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: dict) -> dict:
    """
    Normalizes subject/difficulty names in place and checks ranges.

    Raises:
        ValueError: unknown subject or difficulty, bad grid size or tick
    """
    game = config["game"]

    game["subject"] = Subject.parse(game["subject"]).value
    game["difficulty"] = Difficulty.parse(game["difficulty"]).value

    if int(game["grid_size"]) < 3:
        raise ValueError(f"grid_size must be at least 3, got {game['grid_size']}")
    if int(game["tick_ms"]) <= 0:
        raise ValueError(f"tick_ms must be positive, got {game['tick_ms']}")

    return config


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[dict] = None) -> dict:
    """
    Loads a YAML config and fills in defaults.

    Args:
        path: YAML file (None = defaults only)
        overrides: dict merged last, e.g. from command line flags
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is not None:
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        config = _merge(config, loaded)

    if overrides:
        config = _merge(config, overrides)

    return validate_config(config)


def save_config(config: dict, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, allow_unicode=True)
