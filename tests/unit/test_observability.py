"""Unit tests for the structured logging helpers in ``observability``."""

from __future__ import annotations

import logging

import pytest

from lib_layered_registry import Registry, bind_trace_id, get_logger
from lib_layered_registry.observability import TRACE_ID, log_info, make_event


def test_null_handler_present() -> None:
    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="lib_layered_registry")
    bind_trace_id("trace-123")
    try:
        log_info("config_layer_replaced", layer="config", path=None)
    finally:
        bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "layer": "config", "path": None}


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("env", None, {"keys": 3}) == {"layer": "env", "path": None, "keys": 3}
    assert make_event("defaults", "/x") == {"layer": "defaults", "path": "/x"}


def test_registry_operations_emit_structured_events(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_layered_registry")
    registry = Registry(environ={})
    registry.merge_config_map({"a": 1})
    registry.register_alias("b", "a")
    messages = [record.getMessage() for record in caplog.records]
    assert "config_layer_merged" in messages
    assert "alias_registered" in messages
    merged = next(record for record in caplog.records if record.getMessage() == "config_layer_merged")
    assert getattr(merged, "context")["layer"] == "config"
