"""Logging configuration for traction-ai.

Records are emitted either as one JSON object per line (the default) or as
plain text.  Structured context passed through ``extra=`` is preserved in
the JSON payload.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, TextIO

from ..errors import ConfigurationError

__all__ = ["JsonFormatter", "TEXT_FORMAT", "setup_logging"]


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_LOGGER_NAME = "traction_ai"
_HANDLER_MARKER = "_traction_ai_handler"

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Serialise log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRIBUTES or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    name = str(value or "info").upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level: {value!r}")
    return level


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    lowered = target.lower()
    if lowered == "stderr":
        return logging.StreamHandler(sys.stderr)
    if lowered == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf8")


def setup_logging(
    config: Optional[Mapping[str, Any]] = None,
    *,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``traction_ai`` logger from ``config["logging"]``.

    Recognised keys are ``level``, ``output`` (``stdout``, ``stderr`` or a
    file path) and ``format`` (``json`` or ``text``).  Calling this again
    replaces the handler installed by the previous call.  ``stream`` takes
    precedence over ``output`` and is mainly useful in tests.
    """

    logging_cfg: Mapping[str, Any] = {}
    if config is not None:
        section = config.get("logging", {})
        if isinstance(section, Mapping):
            logging_cfg = section

    fmt = str(logging_cfg.get("format", "json")).lower()
    if fmt not in {"json", "text"}:
        raise ConfigurationError(f"Unknown logging format: {fmt!r}")
    level = _resolve_level(logging_cfg.get("level", "info"))

    if stream is not None:
        handler: logging.Handler = logging.StreamHandler(stream)
    else:
        handler = _build_handler(str(logging_cfg.get("output", "stderr")))
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
