"""Per-entity rolling aggregation of fill-level readings."""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from models.records import InvalidReading, NumericReading, Reading
from services.filtering import DEFAULT_WINDOW, FilteredAverage, filtered_average

logger = logging.getLogger(__name__)


@dataclass
class EntityState:
    """Mutable aggregation state for one tracked entity."""

    capacity: float
    history_size: int = DEFAULT_WINDOW
    history: Deque[float] = field(default_factory=deque)
    initial_level: Optional[float] = None
    high_water_average: Optional[float] = None

    def __post_init__(self) -> None:
        self.history = deque(self.history, maxlen=self.history_size)


@dataclass(frozen=True)
class EntitySnapshot:
    """Externally visible metrics for one entity. ``None`` means unknown."""

    entity_key: str
    current_average: Optional[float]
    consumed_percent: Optional[float]
    consumed_quantity: Optional[float]
    capacity: float
    history_size: int
    valid_count: int
    removed_count: int
    high_water_average: Optional[float]
    initial_level: Optional[float]
    history: List[float] = field(default_factory=list)
    retained: List[float] = field(default_factory=list)


class EntityAggregator:
    """Folds raw readings for one entity into a bounded history.

    Valid readings slide the window forward and can only raise the
    high-water average. Invalid readings erode the oldest sample instead of
    being stored, and withdraw the high-water average once fewer than
    ``history_size`` valid samples remain.
    """

    def __init__(
        self,
        entity_key: str,
        capacity: float,
        history_size: int = DEFAULT_WINDOW,
    ) -> None:
        self.entity_key = entity_key
        self.state = EntityState(capacity=capacity, history_size=history_size)

    def ingest(self, reading: Reading) -> None:
        if isinstance(reading, NumericReading):
            self._ingest_value(reading.value)
        elif isinstance(reading, InvalidReading):
            self._ingest_invalid(reading)
        else:
            raise TypeError(f"Unsupported reading type: {type(reading).__name__}")

    def snapshot(self) -> EntitySnapshot:
        state = self.state
        valid = self._valid_history()
        result = (
            filtered_average(valid, window=state.history_size)
            if valid
            else FilteredAverage()
        )
        current = result.average

        consumed_percent: Optional[float] = None
        consumed_quantity: Optional[float] = None
        if current is not None and state.high_water_average is not None:
            consumed_percent = max(0.0, state.high_water_average - current)
            consumed_quantity = consumed_percent / 100 * state.capacity

        return EntitySnapshot(
            entity_key=self.entity_key,
            current_average=current,
            consumed_percent=consumed_percent,
            consumed_quantity=consumed_quantity,
            capacity=state.capacity,
            history_size=len(state.history),
            valid_count=len(valid),
            removed_count=result.removed_count,
            high_water_average=state.high_water_average,
            initial_level=state.initial_level,
            history=list(state.history),
            retained=list(result.retained),
        )

    def _valid_history(self) -> List[float]:
        return [v for v in self.state.history if math.isfinite(v)]

    def _ingest_value(self, value: float) -> None:
        state = self.state
        # deque(maxlen=...) evicts the oldest sample on overflow
        state.history.append(value)

        valid = self._valid_history()
        if len(valid) >= state.history_size:
            average = filtered_average(valid, window=state.history_size).average
            if average is not None:
                self._raise_high_water(average)

        peak = max(state.history)
        if state.initial_level is None or peak > state.initial_level:
            if state.initial_level is not None:
                logger.debug(
                    "Fill level peak rose, probable refill",
                    extra={"entity_key": self.entity_key, "reading": peak},
                )
            state.initial_level = peak

    def _ingest_invalid(self, reading: InvalidReading) -> None:
        state = self.state
        if state.history:
            state.history.popleft()

        valid = self._valid_history()
        logger.debug(
            "Invalid reading eroded history",
            extra={
                "entity_key": self.entity_key,
                "reading": repr(reading.raw),
                "valid_count": len(valid),
            },
        )
        if len(valid) >= state.history_size:
            self._raise_high_water(math.fsum(valid) / len(valid))
        elif state.high_water_average is not None:
            logger.info(
                "High-water average withdrawn",
                extra={
                    "entity_key": self.entity_key,
                    "valid_count": len(valid),
                    "reason": "insufficient history",
                },
            )
            state.high_water_average = None

    def _raise_high_water(self, average: float) -> None:
        state = self.state
        if state.high_water_average is None or average > state.high_water_average:
            state.high_water_average = average
