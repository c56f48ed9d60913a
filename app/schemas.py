"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from services.aggregator import EntitySnapshot
from services.session import SessionStatus


class ReadingIn(BaseModel):
    """A raw reading for one entity; malformed values are accepted as invalid."""

    entity_key: str = Field(..., min_length=1, description="Entity label, e.g. bottle colour.")
    reading: Any = Field(
        default=None, description="Fill level percent, numeric string, or null."
    )


class ReadingBatch(BaseModel):
    """Readings delivered together, applied in list order."""

    readings: List[ReadingIn] = Field(default_factory=list)


class EntitySnapshotOut(BaseModel):
    """Current estimate for one entity. ``None`` fields are unknown."""

    entity_key: str
    current_average: Optional[float] = None
    consumed_percent: Optional[float] = Field(default=None, ge=0)
    consumed_quantity: Optional[float] = Field(default=None, ge=0)
    capacity: float
    history_size: int = Field(..., ge=0)
    valid_count: int = Field(..., ge=0)
    removed_count: int = Field(..., ge=0)
    high_water_average: Optional[float] = None
    initial_level: Optional[float] = None

    @classmethod
    def from_snapshot(cls, snapshot: EntitySnapshot) -> "EntitySnapshotOut":
        return cls(
            entity_key=snapshot.entity_key,
            current_average=snapshot.current_average,
            consumed_percent=snapshot.consumed_percent,
            consumed_quantity=snapshot.consumed_quantity,
            capacity=snapshot.capacity,
            history_size=snapshot.history_size,
            valid_count=snapshot.valid_count,
            removed_count=snapshot.removed_count,
            high_water_average=snapshot.high_water_average,
            initial_level=snapshot.initial_level,
        )


class EntityTable(BaseModel):
    """All known entities sorted by key."""

    message_count: int = Field(..., ge=0)
    rows: List[EntitySnapshotOut] = Field(default_factory=list)


class SessionStatusOut(BaseModel):
    active: bool
    message_count: int = Field(..., ge=0)
    entity_count: int = Field(..., ge=0)
    track_levels: str = ""
    last_message: Optional[Dict[str, Any]] = Field(
        default=None, description="Most recent raw data message, for preview."
    )

    @classmethod
    def from_status(cls, status: SessionStatus) -> "SessionStatusOut":
        return cls(
            active=status.active,
            message_count=status.message_count,
            entity_count=status.entity_count,
            track_levels=status.track_levels,
            last_message=status.last_message,
        )


DataMessage = Dict[str, Any]
