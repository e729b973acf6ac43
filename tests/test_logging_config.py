from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import pytest

from traction_ai.errors import ConfigurationError
from traction_ai.logging import JsonFormatter, setup_logging


pytestmark = pytest.mark.usefixtures("restore_traction_logger")


def test_json_formatter_includes_extra_context() -> None:
    stream = io.StringIO()
    logger = setup_logging({"logging": {"level": "debug", "format": "json"}}, stream=stream)

    logging.getLogger("traction_ai.monitor").info(
        "System status changed", extra={"event": "monitor.status_changed", "current": "critical"}
    )

    payload = json.loads(stream.getvalue().strip())
    assert logger.level == logging.DEBUG
    assert payload["message"] == "System status changed"
    assert payload["logger"] == "traction_ai.monitor"
    assert payload["level"] == "INFO"
    assert payload["event"] == "monitor.status_changed"
    assert payload["current"] == "critical"


def test_text_format_and_level_filtering() -> None:
    stream = io.StringIO()
    setup_logging({"logging": {"level": "warning", "format": "text"}}, stream=stream)

    logging.getLogger("traction_ai.scheduler").info("hidden")
    logging.getLogger("traction_ai.scheduler").warning("shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "WARNING traction_ai.scheduler: shown" in output


def test_setup_logging_replaces_previous_handler() -> None:
    first, second = io.StringIO(), io.StringIO()
    setup_logging({"logging": {"format": "text"}}, stream=first)
    setup_logging({"logging": {"format": "text"}}, stream=second)

    logging.getLogger("traction_ai").warning("once")

    assert first.getvalue() == ""
    assert second.getvalue().count("once") == 1


def test_file_output(tmp_path: Path) -> None:
    target = tmp_path / "logs" / "traction.log"
    logger = setup_logging({"logging": {"output": str(target), "format": "json"}})

    logging.getLogger("traction_ai").error("disk")
    for handler in logger.handlers:
        handler.flush()

    assert json.loads(target.read_text(encoding="utf8").strip())["message"] == "disk"


def test_invalid_level_and_format_are_rejected() -> None:
    stream = io.StringIO()
    setup_logging({"logging": {"format": "text"}}, stream=stream)

    with pytest.raises(ConfigurationError):
        setup_logging({"logging": {"format": "xml"}}, stream=io.StringIO())
    with pytest.raises(ConfigurationError):
        setup_logging({"logging": {"level": "chatty"}}, stream=io.StringIO())

    logging.getLogger("traction_ai").warning("still here")
    assert "still here" in stream.getvalue()


def test_json_formatter_serialises_exceptions() -> None:
    formatter = JsonFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("traction_ai", logging.ERROR, __file__, 1, "failed", (), None)
        record.exc_info = sys.exc_info()

    payload = json.loads(formatter.format(record))

    assert "RuntimeError: boom" in payload["exc_info"]
