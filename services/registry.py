"""Lazily populated mapping from entity key to its aggregator."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.records import Reading, ReadingEvent, parse_reading
from services.aggregator import EntityAggregator, EntitySnapshot
from services.filtering import DEFAULT_WINDOW


class EntityRegistry:
    """Owns one aggregator per entity key for the lifetime of a session."""

    def __init__(
        self,
        default_capacity: float = 1.0,
        history_size: int = DEFAULT_WINDOW,
        capacities: Optional[Mapping[str, float]] = None,
    ) -> None:
        self.default_capacity = default_capacity
        self.history_size = history_size
        self._capacities: Dict[str, float] = dict(capacities or {})
        self._entities: Dict[str, EntityAggregator] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_key: object) -> bool:
        return entity_key in self._entities

    def keys(self) -> List[str]:
        return sorted(self._entities)

    def get_or_create(self, entity_key: str) -> EntityAggregator:
        aggregator = self._entities.get(entity_key)
        if aggregator is None:
            capacity = self._capacities.get(entity_key, self.default_capacity)
            aggregator = EntityAggregator(
                entity_key, capacity=capacity, history_size=self.history_size
            )
            self._entities[entity_key] = aggregator
        return aggregator

    def ingest(self, entity_key: str, raw: Any) -> Reading:
        """Parse ``raw`` and fold it into ``entity_key``'s state."""
        reading = parse_reading(raw)
        self.get_or_create(entity_key).ingest(reading)
        return reading

    def apply(self, events: Iterable[ReadingEvent]) -> int:
        """Apply a batch of events in arrival order and return how many ran."""
        applied = 0
        for event in events:
            self.get_or_create(event.entity_key).ingest(event.reading)
            applied += 1
        return applied

    def snapshot(self, entity_key: str) -> EntitySnapshot:
        aggregator = self._entities.get(entity_key)
        if aggregator is None:
            raise KeyError(f"Entity {entity_key!r} has not been seen.")
        return aggregator.snapshot()

    def snapshots(self) -> List[EntitySnapshot]:
        return [self._entities[key].snapshot() for key in self.keys()]

    def reset(self) -> None:
        self._entities = {}
