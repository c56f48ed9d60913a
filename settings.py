from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_HISTORY_SIZE_ENV = "HISTORY_SIZE"
_CAPACITY_ENV = "BOTTLE_CAPACITY_LITERS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    history_size: int
    capacity_liters: float
    log_level: str


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        history_size=_read_positive_int(_HISTORY_SIZE_ENV, 10),
        capacity_liters=_read_positive_float(_CAPACITY_ENV, 1.0),
        log_level=_read_log_level("INFO"),
    )
