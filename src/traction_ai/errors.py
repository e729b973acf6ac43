"""Exception hierarchy for the traction monitoring core."""

from __future__ import annotations

from typing import Any

__all__ = [
    "AnalysisInProgressError",
    "ConfigurationError",
    "InvalidSampleError",
    "TelemetryFormatError",
    "TractionError",
]


class TractionError(Exception):
    """Base class for errors raised by :mod:`traction_ai`."""


class InvalidSampleError(TractionError, ValueError):
    """A telemetry sample carries a non-finite or out-of-domain field."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid sample field '{field}' ({value!r}): {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class AnalysisInProgressError(TractionError, RuntimeError):
    """A trailing analysis was requested while another one is still running."""


class ConfigurationError(TractionError, ValueError):
    """Settings or thresholds failed validation."""


class TelemetryFormatError(TractionError, ValueError):
    """A recorded telemetry file could not be decoded or parsed as CSV."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unreadable telemetry file {path}: {reason}")
        self.path = path
        self.reason = reason
