"""Structured Logging — JSON shape and handler installation."""

import json
import logging

import pytest

from jobtracker.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "jobtracker.services.record_store", logging.INFO, __file__, 1,
        "Application created", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_line_includes_only_present_extras():
    line = json.loads(JSONFormatter().format(
        _record(user_id="u-1", record_id="r-1"),
    ))
    assert line["message"] == "Application created"
    assert line["level"] == "INFO"
    assert line["user_id"] == "u-1"
    assert line["record_id"] == "r-1"
    assert "error_code" not in line
    assert line["timestamp"].endswith("+00:00")


@pytest.fixture
def restore_root_logging():
    handlers, level = list(logging.root.handlers), logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def test_setup_logging_does_not_stack_handlers(restore_root_logging):
    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")

    ours = [h for h in logging.root.handlers if h.get_name() == "jobtracker"]
    assert len(ours) == 1
    assert not isinstance(ours[0].formatter, JSONFormatter)
    assert logging.root.level == logging.WARNING
