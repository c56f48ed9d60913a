"""Translate inference data-channel messages into reading events."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from models.records import ReadingEvent, parse_reading

logger = logging.getLogger(__name__)

ENTITY_KEY_FIELD = "bottle_color"
READING_FIELD = "fill_level_percent"


def _output_data(message: Any) -> Mapping[str, Any]:
    if not isinstance(message, Mapping):
        return {}
    output = message.get("serialized_output_data")
    return output if isinstance(output, Mapping) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _decode_item(item: Any) -> Optional[Dict[str, Any]]:
    if isinstance(item, str):
        try:
            decoded = json.loads(item)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Failed to decode score item",
                extra={"reading": item, "reason": str(exc)},
            )
            return None
        return decoded if isinstance(decoded, dict) else None
    if isinstance(item, Mapping):
        return dict(item)
    return None


def extract_events(message: Any) -> List[ReadingEvent]:
    """Return the ordered reading events carried by one data message.

    Score items may be JSON strings or objects. Items that cannot be
    decoded or carry a missing or empty entity key are skipped; the
    reading itself is passed through ``parse_reading`` so malformed values
    still reach the aggregator as invalid readings.
    """
    events: List[ReadingEvent] = []
    for item in _as_list(_output_data(message).get("percentage")):
        payload = _decode_item(item)
        if payload is None:
            continue
        raw_key = payload.get(ENTITY_KEY_FIELD)
        entity_key = "" if raw_key is None else str(raw_key)
        if not entity_key:
            continue
        events.append(
            ReadingEvent(
                entity_key=entity_key,
                reading=parse_reading(payload.get(READING_FIELD)),
            )
        )
    return events


def extract_track_levels(message: Any) -> str:
    """Summarise tracker ids with their raw scores as ``#id=score`` pairs."""
    output = _output_data(message)
    predictions_block = output.get("predictions")
    predictions = _as_list(
        predictions_block.get("predictions") if isinstance(predictions_block, Mapping) else None
    )
    scores = _as_list(output.get("percentage"))

    parts: List[str] = []
    for prediction, score in zip(predictions, scores):
        track_id = prediction.get("tracker_id") if isinstance(prediction, Mapping) else None
        if track_id is None or score is None:
            continue
        parts.append(f"#{track_id}={score}")
    return ", ".join(parts)
