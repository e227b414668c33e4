from __future__ import annotations

import json
import logging
import sys

import pytest

from cheese_shop.logconfig import JsonFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="cheese_shop.catalog.store",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Created cheese %d",
        args=(5,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_message_and_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(cheese_id=5)))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "cheese_shop.catalog.store"
    assert payload["message"] == "Created cheese 5"
    assert payload["cheese_id"] == 5
    assert payload["time"]
    assert "pathname" not in payload
    assert "args" not in payload


def test_json_formatter_includes_exception() -> None:
    try:
        raise OSError("disk full")
    except OSError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))
    assert "OSError: disk full" in payload["exc_info"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_configure_logging_selects_formatter(restore_root_logger) -> None:
    root = restore_root_logger

    configure_logging(level="debug", json_logs=True)
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)

    configure_logging(level="WARNING")
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)
