"""Tests for the run-aware log formatter."""
import logging
from app.core.logging import ContextFormatter

FORMAT = "%(levelname)s [run_id=%(run_id)s stage=%(stage)s] - %(message)s"


def _record(**extra):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_defaults_when_context_missing():
    assert ContextFormatter(FORMAT).format(_record()) == "INFO [run_id=- stage=-] - hello"


def test_renders_run_context():
    line = ContextFormatter(FORMAT).format(_record(run_id="abc", stage="INVOKE_LLM"))
    assert line == "INFO [run_id=abc stage=INVOKE_LLM] - hello"


def test_partial_context_fills_only_missing_field():
    line = ContextFormatter(FORMAT).format(_record(run_id="abc"))
    assert line == "INFO [run_id=abc stage=-] - hello"
