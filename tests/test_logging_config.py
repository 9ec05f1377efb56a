"""JSON 로그 포맷 테스트."""

import json
import logging

from tripcommit.logging_config import JSONFormatter, configure_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("tripcommit.test", logging.INFO, __file__, 1, "commitment updated", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    line = JSONFormatter().format(_record(trip_id=3, status="confirmed", ignored=object()))
    data = json.loads(line)
    assert data["message"] == "commitment updated"
    assert data["level"] == "INFO"
    assert data["logger"] == "tripcommit.test"
    assert data["trip_id"] == 3
    assert data["status"] == "confirmed"
    assert "ignored" not in data
    assert "lineno" not in data


def test_configure_logging_replaces_handlers():
    logger = configure_logging(log_format="json", log_level="debug", logger_name="tripcommit.test_cfg")
    configure_logging(log_format="text", log_level="debug", logger_name="tripcommit.test_cfg")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
