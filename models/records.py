"""Domain models shared across services."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Union


@dataclass(frozen=True, slots=True)
class NumericReading:
    """A fill-level reading that parsed to a finite number."""

    value: float


@dataclass(frozen=True, slots=True)
class InvalidReading:
    """A missing or malformed reading; the raw payload is kept for logging."""

    raw: Any = None


Reading = Union[NumericReading, InvalidReading]


@dataclass(frozen=True, slots=True)
class ReadingEvent:
    """One reading routed to one entity, in arrival order."""

    entity_key: str
    reading: Reading


def parse_reading(raw: Any) -> Reading:
    """Classify a raw value as numeric or invalid. Never raises."""
    if raw is None or isinstance(raw, bool):
        return InvalidReading(raw)

    value: Optional[float]
    if isinstance(raw, (numbers.Real, Decimal)):
        try:
            value = float(raw)
        except (OverflowError, ValueError):
            return InvalidReading(raw)
    elif isinstance(raw, str):
        candidate = raw.strip()
        # underscores are Python-only digit separators
        if not candidate or "_" in candidate:
            return InvalidReading(raw)
        try:
            value = float(candidate)
        except ValueError:
            return InvalidReading(raw)
    else:
        return InvalidReading(raw)

    if not math.isfinite(value):
        return InvalidReading(raw)
    return NumericReading(value)
