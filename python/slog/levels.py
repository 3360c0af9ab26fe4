# Fixed five-level severity table. Unknown names resolve to INFO, never fail.

from __future__ import annotations
from enum import IntEnum
from typing import Any

class Level(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

DEFAULT_LEVEL = Level.INFO

def parse(name: Any) -> Level:
    """Resolve a level name (case-insensitive), rank or Level to a Level.

    Anything unrecognised degrades to INFO.
    """
    if isinstance(name, Level):
        return name
    if isinstance(name, int) and not isinstance(name, bool):
        try:
            return Level(name)
        except ValueError:
            return DEFAULT_LEVEL
    if isinstance(name, str):
        return Level.__members__.get(name.strip().upper(), DEFAULT_LEVEL)
    return DEFAULT_LEVEL

def rank(level: Any) -> int:
    return int(parse(level))

def level_name(level: Any) -> str:
    return parse(level).name
