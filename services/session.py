"""Session lifecycle around the entity registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock
from typing import Any, Iterable, List, Optional, Tuple

from models.records import ReadingEvent, parse_reading
from services.aggregator import EntitySnapshot
from services.ingestion import extract_events, extract_track_levels
from services.registry import EntityRegistry
from settings import get_settings

logger = logging.getLogger(__name__)


class SessionInactiveError(RuntimeError):
    """Raised when readings arrive while no session is running."""


@dataclass(frozen=True)
class SessionStatus:
    active: bool
    message_count: int
    entity_count: int
    track_levels: str
    last_message: Optional[Any] = None


@dataclass(frozen=True)
class SessionTable:
    """Sorted snapshots together with the message count they reflect."""

    message_count: int
    rows: List[EntitySnapshot]


class MonitorSession:
    """Owns the registry and the message bookkeeping for one connection."""

    def __init__(self, registry: EntityRegistry) -> None:
        self.registry = registry
        self.active = False
        self.message_count = 0
        self.last_message: Optional[Any] = None
        self.track_levels = ""
        self._lock = Lock()

    def start(self) -> SessionStatus:
        with self._lock:
            self._clear()
            self.active = True
            logger.info("Monitoring session started")
            return self._status()

    def stop(self) -> SessionStatus:
        with self._lock:
            self._clear()
            self.active = False
            logger.info("Monitoring session stopped, state cleared")
            return self._status()

    def status(self) -> SessionStatus:
        with self._lock:
            return self._status()

    def handle_message(self, message: Any) -> SessionTable:
        """Apply one inference data message and return the refreshed table.

        Raises ``SessionInactiveError`` unless the session has been started.
        """
        events = extract_events(message)
        levels = extract_track_levels(message)
        with self._lock:
            self._require_active()
            if levels:
                self.track_levels = levels
            self.last_message = message
            return self._apply(events)

    def ingest_batch(self, readings: Iterable[Tuple[str, Any]]) -> SessionTable:
        """Apply explicit ``(entity_key, raw_reading)`` pairs as one message."""
        events = [
            ReadingEvent(entity_key=key, reading=parse_reading(raw))
            for key, raw in readings
        ]
        with self._lock:
            self._require_active()
            return self._apply(events)

    def table(self) -> SessionTable:
        with self._lock:
            return SessionTable(
                message_count=self.message_count,
                rows=self.registry.snapshots(),
            )

    def snapshot(self, entity_key: str) -> EntitySnapshot:
        with self._lock:
            return self.registry.snapshot(entity_key)

    def _require_active(self) -> None:
        if not self.active:
            logger.warning(
                "Readings dropped, session is not running",
                extra={"message_count": self.message_count},
            )
            raise SessionInactiveError("Monitoring session is not running.")

    def _apply(self, events: List[ReadingEvent]) -> SessionTable:
        self.registry.apply(events)
        self.message_count += 1
        snapshots = self.registry.snapshots()
        for snapshot in snapshots:
            self._log_snapshot(snapshot)
        return SessionTable(message_count=self.message_count, rows=snapshots)

    def _log_snapshot(self, snapshot: EntitySnapshot) -> None:
        if snapshot.current_average is None:
            logger.debug(
                "No valid data (unknown)",
                extra={"entity_key": snapshot.entity_key},
            )
            return
        if snapshot.removed_count:
            logger.debug(
                "Outliers removed before averaging",
                extra={
                    "entity_key": snapshot.entity_key,
                    "removed_count": snapshot.removed_count,
                    "reading": snapshot.retained,
                },
            )
        logger.debug(
            "Average updated",
            extra={
                "entity_key": snapshot.entity_key,
                "reading": snapshot.history,
                "history_size": snapshot.history_size,
                "average": snapshot.current_average,
                "high_water": snapshot.high_water_average,
                "message_count": self.message_count,
            },
        )

    def _clear(self) -> None:
        self.registry.reset()
        self.message_count = 0
        self.last_message = None
        self.track_levels = ""

    def _status(self) -> SessionStatus:
        return SessionStatus(
            active=self.active,
            message_count=self.message_count,
            entity_count=len(self.registry),
            track_levels=self.track_levels,
            last_message=self.last_message,
        )


@lru_cache
def build_default_session(
    history_size: Optional[int] = None,
    capacity: Optional[float] = None,
) -> MonitorSession:
    """Factory that wires a session from environment settings."""
    settings = get_settings()
    registry = EntityRegistry(
        default_capacity=capacity or settings.capacity_liters,
        history_size=history_size or settings.history_size,
    )
    return MonitorSession(registry=registry)
