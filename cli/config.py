from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_REPLAY_INTERVAL = 0.0
DEFAULT_TIMEOUT = 30.0

_BASE_URL_ENV = "API_BASE_URL"
_REPLAY_INTERVAL_ENV = "CLI_REPLAY_INTERVAL"
_TIMEOUT_ENV = "CLI_TIMEOUT"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    replay_interval: float = DEFAULT_REPLAY_INTERVAL
    timeout: float = DEFAULT_TIMEOUT


def _read_float(value: Optional[str], default: float, allow_zero: bool = False) -> float:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if parsed > 0 or (allow_zero and parsed == 0):
        return parsed
    return default


def load_config(
    base_url: Optional[str] = None,
    replay_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if replay_interval is None:
        replay_interval = _read_float(
            os.getenv(_REPLAY_INTERVAL_ENV), DEFAULT_REPLAY_INTERVAL, allow_zero=True
        )
    if timeout is None:
        timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/"),
        replay_interval=replay_interval,
        timeout=timeout,
    )
