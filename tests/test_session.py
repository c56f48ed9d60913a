from __future__ import annotations

import json

import pytest

from services.registry import EntityRegistry
from services.session import MonitorSession, SessionInactiveError


@pytest.fixture()
def session() -> MonitorSession:
    service = MonitorSession(EntityRegistry(default_capacity=1.0, history_size=10))
    service.start()
    return service


def _message(*items, tracker_ids=()) -> dict:
    output = {"percentage": list(items)}
    if tracker_ids:
        output["predictions"] = {"predictions": [{"tracker_id": tid} for tid in tracker_ids]}
    return {"serialized_output_data": output}


def _score(color: str, value) -> str:
    return json.dumps({"bottle_color": color, "fill_level_percent": value})


def test_handle_message_updates_table_and_counters(session: MonitorSession) -> None:
    message = _message(_score("red", 55), _score("blue", 30), tracker_ids=(1, 2))

    table = session.handle_message(message)

    assert table.message_count == 1
    rows = table.rows
    assert [row.entity_key for row in rows] == ["blue", "red"]
    assert rows[1].current_average == pytest.approx(55.0)
    status = session.status()
    assert status.active is True
    assert status.message_count == 1
    assert status.entity_count == 2
    assert status.track_levels.startswith("#1=")
    assert status.last_message == message


def test_ramp_scenario_through_messages(session: MonitorSession) -> None:
    for value in range(10, 101, 10):
        rows = session.handle_message(_message(_score("red", value))).rows

    (row,) = rows
    assert row.current_average == pytest.approx(55.0)
    assert row.removed_count == 0
    assert row.high_water_average == pytest.approx(55.0)
    assert session.message_count == 10


def test_sustained_drawdown_reports_consumption(session: MonitorSession) -> None:
    for _ in range(10):
        session.handle_message(_message(_score("green", 80)))
    for _ in range(10):
        rows = session.handle_message(_message(_score("green", 60))).rows

    (row,) = rows
    assert row.current_average == pytest.approx(60.0)
    assert row.high_water_average == pytest.approx(80.0)
    assert row.consumed_percent == pytest.approx(20.0)
    assert row.consumed_quantity == pytest.approx(0.2)


def test_ingest_batch_counts_as_one_message(session: MonitorSession) -> None:
    table = session.ingest_batch([("blue", 50)] * 9 + [("blue", None)])

    (row,) = table.rows
    assert row.history_size == 8
    assert row.current_average == pytest.approx(50.0)
    assert row.high_water_average is None
    assert session.message_count == 1


def test_stop_clears_everything(session: MonitorSession) -> None:
    session.handle_message(_message(_score("red", 10), tracker_ids=(3,)))

    status = session.stop()

    assert status.active is False
    assert status.message_count == 0
    assert status.entity_count == 0
    assert status.track_levels == ""
    assert status.last_message is None
    assert session.table().rows == []


def test_snapshot_of_unknown_entity_raises(session: MonitorSession) -> None:
    with pytest.raises(KeyError):
        session.snapshot("missing")


def test_readings_after_stop_are_rejected(session: MonitorSession) -> None:
    session.stop()

    with pytest.raises(SessionInactiveError):
        session.ingest_batch([("red", 40)])
    with pytest.raises(SessionInactiveError):
        session.handle_message(_message(_score("red", 40)))

    status = session.status()
    assert status.entity_count == 0
    assert status.message_count == 0
    assert status.last_message is None


def test_readings_before_start_are_rejected() -> None:
    idle = MonitorSession(EntityRegistry())

    with pytest.raises(SessionInactiveError):
        idle.ingest_batch([("red", 40)])

    assert len(idle.registry) == 0


def test_table_pairs_rows_with_message_count(session: MonitorSession) -> None:
    session.ingest_batch([("red", 40)])
    session.ingest_batch([("blue", 20)])

    table = session.table()

    assert table.message_count == 2
    assert [row.entity_key for row in table.rows] == ["blue", "red"]
