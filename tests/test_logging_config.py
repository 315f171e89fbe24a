"""Tests for readmegen.logging_config."""

import io
import json
import logging

import pytest

from readmegen.logging_config import new_request_id, request_id_ctx, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_lines_carry_request_id():
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)

    token = request_id_ctx.set("abc123")
    try:
        logging.getLogger("readmegen.relay").info("Prompt sent to %s", "model-x")
    finally:
        request_id_ctx.reset(token)

    entry = json.loads(stream.getvalue().strip())
    assert entry["message"] == "Prompt sent to model-x"
    assert entry["logger"] == "readmegen.relay"
    assert entry["level"] == "INFO"
    assert entry["request_id"] == "abc123"


def test_request_id_defaults_to_dash_outside_a_request():
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)

    logging.getLogger("readmegen.relay").info("startup")

    assert json.loads(stream.getvalue())["request_id"] == "-"


def test_plain_format_for_terminals():
    stream = io.StringIO()
    setup_logging("INFO", stream=stream, json_lines=False)

    logging.getLogger("readmegen.cli").info("Sending files generation request")

    line = stream.getvalue().strip()
    assert "INFO readmegen.cli: Sending files generation request" in line
    with pytest.raises(ValueError):
        json.loads(line)


def test_level_filters_records():
    stream = io.StringIO()
    setup_logging("WARNING", stream=stream, json_lines=False)

    logging.getLogger("readmegen.cli").info("hidden")
    logging.getLogger("readmegen.cli").warning("shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "shown" in output


def test_setup_replaces_existing_handlers():
    setup_logging("INFO", stream=io.StringIO())
    setup_logging("INFO", stream=io.StringIO())

    assert len(logging.getLogger().handlers) == 1


def test_new_request_id_is_short_and_unique():
    first, second = new_request_id(), new_request_id()
    assert len(first) == 12
    assert first != second
