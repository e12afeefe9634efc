"""Unit tests for structured logging and correlation ids"""

import json
import logging
import sys

from observability.logging_config import JSONFormatter, RequestIDFilter
from observability.request_id import correlation_scope, get_request_id


def make_record(message="Matching completed", **extra):
    record = logging.LogRecord(
        name="matching.orchestrator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationScope:
    """Test correlation id binding"""

    def test_outside_scope(self):
        assert get_request_id() == "no-request-id"

    def test_explicit_id(self):
        with correlation_scope("task-42") as request_id:
            assert request_id == "task-42"
            assert get_request_id() == "task-42"
        assert get_request_id() == "no-request-id"

    def test_generated_id(self):
        with correlation_scope() as request_id:
            assert len(request_id) == 36


class TestJSONFormatter:
    """Test JSON log line shape"""

    def test_basic_fields(self):
        record = make_record()
        with correlation_scope("req-1"):
            RequestIDFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"
        assert data["logger"] == "matching.orchestrator"
        assert data["message"] == "Matching completed"

    def test_extra_fields_copied(self):
        record = make_record(buy_request_id="abc", notification_type="NEW_MATCH")

        data = json.loads(JSONFormatter().format(record))

        assert data["buy_request_id"] == "abc"
        assert data["notification_type"] == "NEW_MATCH"
        assert "match_id" not in data

    def test_exception_included(self):
        try:
            raise RuntimeError("store exploded")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert data["error"] == "store exploded"
        assert "Traceback" in data["traceback"]

    def test_non_ascii_preserved(self):
        data = json.loads(JSONFormatter().format(make_record("አዲስ ተዛማጅ")))
        assert data["message"] == "አዲስ ተዛማጅ"
