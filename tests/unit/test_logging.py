"""
Unit tests for log formatting
"""

import logging
from core.logging import ContextFormatter


def make_record(**extra):
    record = logging.LogRecord("services.checklist_clone", logging.ERROR, __file__, 1, "Clone failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_plain_message_unchanged():
    formatter = ContextFormatter("%(levelname)s %(message)s")

    assert formatter.format(make_record()) == "ERROR Clone failed"


def test_error_context_appended():
    formatter = ContextFormatter("%(message)s")

    line = formatter.format(make_record(error_context={"source_checklist_id": "c1", "rolled_back": True}))

    assert line == "Clone failed | source_checklist_id=c1, rolled_back=True"
