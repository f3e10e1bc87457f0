"""
Tests for structured logging helpers.
"""

import json
import logging

from common.logging import RequestContextLogger, StructuredFormatter, request_id_var


def _record(**extra):
    record = logging.LogRecord("business", logging.INFO, __file__, 10, "Business event: %s", ("X",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:

    def test_json_output_with_extras(self):
        entry = json.loads(StructuredFormatter().format(_record(event_type="USER_UPDATED")))
        assert entry["message"] == "Business event: X"
        assert entry["level"] == "INFO"
        assert entry["event_type"] == "USER_UPDATED"

    def test_request_id_included(self):
        with RequestContextLogger(request_id="req-1"):
            entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["request_id"] == "req-1"
        assert request_id_var.get() is None

    def test_generated_request_id(self):
        with RequestContextLogger() as ctx:
            assert request_id_var.get() == ctx.request_id
        assert ctx.request_id
