"""Tests for structured logging."""

import json
import logging

from chatsession.logging_config import (
    JSONFormatter,
    bind_log_context,
    reset_log_context,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="chatsession.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        """Test that a record renders as JSON with the formatted message."""
        entry = json.loads(JSONFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "chatsession.test"
        assert entry["msg"] == "hello world"
        assert "context" not in entry

    def test_bound_context_merged_with_extra(self):
        """Test that bound ids and call-site context both appear."""
        token = bind_log_context(conversation_id="c1", request_id="r1")
        try:
            entry = json.loads(
                JSONFormatter().format(_record(context={"request_id": "r2", "n": 1}))
            )
        finally:
            reset_log_context(token)

        assert entry["context"] == {"conversation_id": "c1", "request_id": "r2", "n": 1}

    def test_reset_removes_context(self):
        """Test that resetting the token drops the bound fields."""
        token = bind_log_context(conversation_id="c1")
        reset_log_context(token)

        entry = json.loads(JSONFormatter().format(_record()))

        assert "context" not in entry

    def test_exception_included(self):
        """Test that exception text is attached."""
        try:
            raise ValueError("bad")
        except ValueError:
            import sys

            record = _record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in entry["exception"]
