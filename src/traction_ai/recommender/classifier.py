"""Deterministic slip severity classifier.

Each incoming sample is mapped to a :class:`SystemStatus`, an advisory text
and the agent updates implied by that severity.  The slip ratio is the only
input considered:

- ``slip > critical``: critical, slip-detection and brake-control raise alerts.
- ``warning < slip <= critical``: warning, slip-detection watches elevated slip.
- ``slip <= warning``: normal, slip-detection and brake-control back to active.

Agents not listed for a bucket keep their previous state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from ..agents.registry import BRAKE_CONTROL, SLIP_DETECTION, AgentStatus, AgentUpdate
from ..errors import ConfigurationError
from ..telemetry.model import Sample

__all__ = [
    "CRITICAL_RECOMMENDATION",
    "Classification",
    "ClassificationThresholds",
    "DEFAULT_CLASSIFICATION_THRESHOLDS",
    "DEFAULT_SLIP_CRITICAL",
    "DEFAULT_SLIP_WARNING",
    "NORMAL_RECOMMENDATION",
    "SystemStatus",
    "WARNING_RECOMMENDATION",
    "classify",
    "classify_slip",
]


class SystemStatus(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


CRITICAL_RECOMMENDATION = "Critical slip detected! Reducing throttle and applying optimal brake force."
WARNING_RECOMMENDATION = "Moderate slip detected. Adjusting traction control parameters."
NORMAL_RECOMMENDATION = "Optimal traction maintained. All agents functioning normally."

DEFAULT_SLIP_WARNING = 8.0
DEFAULT_SLIP_CRITICAL = 12.0


@dataclass(frozen=True, slots=True)
class ClassificationThresholds:
    """Slip ratio limits, in percent, separating the severity buckets.

    ``warning`` is inclusive toward normal, ``critical`` is inclusive toward
    warning: a slip of exactly ``critical`` is still a warning.
    """

    warning: float = DEFAULT_SLIP_WARNING
    critical: float = DEFAULT_SLIP_CRITICAL

    def __post_init__(self) -> None:
        for name in ("warning", "critical"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(f"Slip threshold '{name}' must be a finite number, got {value!r}")
        if self.warning >= self.critical:
            raise ConfigurationError(
                f"Slip warning threshold ({self.warning}) must be below the critical threshold ({self.critical})"
            )

    @classmethod
    def from_config(cls, payload: Mapping[str, Any] | None) -> "ClassificationThresholds":
        data = dict(payload or {})
        return cls(
            warning=float(data.get("slip_warning", DEFAULT_SLIP_WARNING)),
            critical=float(data.get("slip_critical", DEFAULT_SLIP_CRITICAL)),
        )


DEFAULT_CLASSIFICATION_THRESHOLDS = ClassificationThresholds()


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of classifying one sample."""

    status: SystemStatus
    recommendation: str
    updates: tuple[AgentUpdate, ...]
    slip_ratio: float


_CRITICAL_UPDATES = (
    AgentUpdate(SLIP_DETECTION, AgentStatus.ALERT, "Detecting excessive slip", 85),
    AgentUpdate(BRAKE_CONTROL, AgentStatus.ALERT, "Increasing brake force", 88),
)
_WARNING_UPDATES = (
    AgentUpdate(SLIP_DETECTION, AgentStatus.ACTIVE, "Monitoring elevated slip", 90),
)
_NORMAL_UPDATES = (
    AgentUpdate(SLIP_DETECTION, AgentStatus.ACTIVE, "Monitoring wheel slip", 98),
    AgentUpdate(BRAKE_CONTROL, AgentStatus.ACTIVE, "Optimizing brake force", 95),
)


def classify_slip(
    slip_ratio: float,
    thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS,
) -> SystemStatus:
    if slip_ratio > thresholds.critical:
        return SystemStatus.CRITICAL
    if slip_ratio > thresholds.warning:
        return SystemStatus.WARNING
    return SystemStatus.NORMAL


def classify(
    sample: Sample,
    thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS,
) -> Classification:
    """Classify ``sample``; the result depends on nothing but its arguments."""

    status = classify_slip(sample.slip_ratio, thresholds)
    if status is SystemStatus.CRITICAL:
        recommendation, updates = CRITICAL_RECOMMENDATION, _CRITICAL_UPDATES
    elif status is SystemStatus.WARNING:
        recommendation, updates = WARNING_RECOMMENDATION, _WARNING_UPDATES
    else:
        recommendation, updates = NORMAL_RECOMMENDATION, _NORMAL_UPDATES
    return Classification(
        status=status,
        recommendation=recommendation,
        updates=updates,
        slip_ratio=sample.slip_ratio,
    )
