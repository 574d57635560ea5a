"""Application settings sourced from environment variables.

Values are read when ``load_settings`` is called so tests (and ``run.py
--env-file``) can adjust the environment before the app is configured.
"""

import os

DEFAULTS = {
    "SECRET_KEY": "dev-secret-change-me",
    "DUNGEON_WIDTH": 40,
    "DUNGEON_DEPTH": 40,
    "DUNGEON_HEIGHT": 3,
    "DUNGEON_MAX_ROOM_SIZE": 12,
    "DUNGEON_DOOR_WIDTH": 2,
    "DUNGEON_BRANCH_CHANCE": 0.25,
    "DUNGEON_UNREACHED_POLICY": "bridge",
    "DUNGEON_STRICT_CONNECTIVITY": False,
    "DUNGEON_ENABLE_GENERATION_METRICS": True,
    "DUNGEON_WALL_TABLE": None,
    "DUNGEON_MAX_BOUNDS": 128,
    "DUNGEON_DISABLE_CACHE": False,
}

_BOOL_KEYS = ("DUNGEON_STRICT_CONNECTIVITY", "DUNGEON_ENABLE_GENERATION_METRICS", "DUNGEON_DISABLE_CACHE")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> dict:
    settings = {}
    for key, default in DEFAULTS.items():
        if key in _BOOL_KEYS:
            settings[key] = _env_flag(key, default)
        else:
            settings[key] = os.getenv(key) or default
    return settings


__all__ = ["DEFAULTS", "load_settings"]
