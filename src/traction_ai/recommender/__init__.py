"""Rule tables turning telemetry into statuses and advisories."""

from traction_ai.recommender.classifier import (
    Classification,
    ClassificationThresholds,
    SystemStatus,
    classify,
    classify_slip,
)
from traction_ai.recommender.trailing import (
    AnalysisThresholds,
    NO_DATA_ADVISORY,
    TrailingAnalysis,
    analyze_window,
)

__all__ = [
    "AnalysisThresholds",
    "Classification",
    "ClassificationThresholds",
    "NO_DATA_ADVISORY",
    "SystemStatus",
    "TrailingAnalysis",
    "analyze_window",
    "classify",
    "classify_slip",
]
