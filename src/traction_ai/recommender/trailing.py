"""Trailing-window slip analysis requested on demand by the operator."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..errors import ConfigurationError
from ..telemetry.model import Sample

__all__ = [
    "AnalysisThresholds",
    "DEFAULT_ANALYSIS_THRESHOLDS",
    "DEFAULT_ANALYSIS_WINDOW",
    "EXCELLENT_TRACTION_ADVISORY",
    "HIGH_SLIP_ADVISORY",
    "MODERATE_LOSS_ADVISORY",
    "NO_DATA_ADVISORY",
    "TrailingAnalysis",
    "analyze_window",
]


DEFAULT_ANALYSIS_WINDOW = 10
DEFAULT_AVERAGE_MODERATE = 6.0
DEFAULT_AVERAGE_HIGH = 10.0

HIGH_SLIP_ADVISORY = (
    "AI Analysis: High average slip ratio detected. Recommend reducing speed and "
    "checking tire pressure. Surface conditions may be compromised."
)
MODERATE_LOSS_ADVISORY = (
    "AI Analysis: Moderate traction loss. System is compensating effectively. "
    "Consider smoother acceleration patterns."
)
EXCELLENT_TRACTION_ADVISORY = (
    "AI Analysis: Excellent traction control. All parameters within optimal range. "
    "Current driving conditions are ideal."
)
NO_DATA_ADVISORY = "AI Analysis: No telemetry available yet."


@dataclass(frozen=True, slots=True)
class AnalysisThresholds:
    """Average slip limits, in percent, for the trailing advisory buckets."""

    moderate: float = DEFAULT_AVERAGE_MODERATE
    high: float = DEFAULT_AVERAGE_HIGH

    def __post_init__(self) -> None:
        for name in ("moderate", "high"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ConfigurationError(f"Average slip threshold '{name}' must be a finite number, got {value!r}")
        if self.moderate >= self.high:
            raise ConfigurationError(
                f"Moderate average threshold ({self.moderate}) must be below the high threshold ({self.high})"
            )

    @classmethod
    def from_config(cls, payload: Mapping[str, Any] | None) -> "AnalysisThresholds":
        data = dict(payload or {})
        return cls(
            moderate=float(data.get("average_moderate", DEFAULT_AVERAGE_MODERATE)),
            high=float(data.get("average_high", DEFAULT_AVERAGE_HIGH)),
        )


DEFAULT_ANALYSIS_THRESHOLDS = AnalysisThresholds()


@dataclass(frozen=True, slots=True)
class TrailingAnalysis:
    """Advisory derived from the trailing window.

    ``average_slip`` is ``None`` when no samples were available, in which
    case ``advisory`` holds :data:`NO_DATA_ADVISORY`.
    """

    advisory: str
    average_slip: Optional[float]
    sample_count: int

    @property
    def has_data(self) -> bool:
        return self.average_slip is not None


def _advisory_for(average: float, thresholds: AnalysisThresholds) -> str:
    if average > thresholds.high:
        return HIGH_SLIP_ADVISORY
    if average > thresholds.moderate:
        return MODERATE_LOSS_ADVISORY
    return EXCELLENT_TRACTION_ADVISORY


def analyze_window(
    samples: Sequence[Sample],
    thresholds: AnalysisThresholds = DEFAULT_ANALYSIS_THRESHOLDS,
    *,
    window: int = DEFAULT_ANALYSIS_WINDOW,
) -> TrailingAnalysis:
    """Average the slip ratio over the last ``window`` entries of ``samples``.

    Fewer than ``window`` samples are averaged as they are; an empty
    sequence yields the no-data result instead of a division by zero.
    """

    if window <= 0:
        raise ConfigurationError(f"Analysis window must be positive, got {window}")
    recent = list(samples)[-window:]
    if not recent:
        return TrailingAnalysis(advisory=NO_DATA_ADVISORY, average_slip=None, sample_count=0)

    slips = np.fromiter((sample.slip_ratio for sample in recent), dtype=float, count=len(recent))
    average = float(np.mean(slips))
    return TrailingAnalysis(
        advisory=_advisory_for(average, thresholds),
        average_slip=average,
        sample_count=len(recent),
    )
