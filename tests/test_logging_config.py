from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.aggregator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Average updated",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_known_extra_keys_are_appended() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(
        _record(entity_key="red", average=55.0, reading=[10.0, 20.5], high_water=None)
    )

    assert line == "Average updated | entity_key=red reading=[10.000,20.500] average=55.000"


def test_message_without_context_is_unchanged() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    assert formatter.format(_record()) == "INFO Average updated"


def test_custom_extra_keys_restrict_output() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", extra_keys=["message_count"])

    line = formatter.format(_record(entity_key="red", message_count=4))

    assert line == "Average updated | message_count=4"
