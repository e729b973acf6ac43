"""Top-level package for traction-ai.

The package turns a periodic stream of wheel telemetry into a system
severity (normal, warning, critical), per-agent status records and an
operator advisory.  :class:`TractionMonitor` is the entry point used by a
presentation layer; :class:`TickScheduler` drives it from any sample
source.
"""

from ._version import __version__
from .agents import Agent, AgentRegistry, AgentStatus, AgentUpdate
from .errors import (
    AnalysisInProgressError,
    ConfigurationError,
    InvalidSampleError,
    TelemetryFormatError,
    TractionError,
)
from .monitor import MonitorSnapshot, RecommendationSource, TractionMonitor
from .recommender import (
    AnalysisThresholds,
    Classification,
    ClassificationThresholds,
    SystemStatus,
    TrailingAnalysis,
    analyze_window,
    classify,
)
from .scheduler import TickScheduler
from .settings import TractionSettings, load_settings
from .telemetry import SimulatedSampleGenerator, Sample, TelemetryBuffer

__all__ = [
    "Agent",
    "AgentRegistry",
    "AgentStatus",
    "AgentUpdate",
    "AnalysisInProgressError",
    "AnalysisThresholds",
    "Classification",
    "ClassificationThresholds",
    "ConfigurationError",
    "InvalidSampleError",
    "MonitorSnapshot",
    "RecommendationSource",
    "Sample",
    "SimulatedSampleGenerator",
    "SystemStatus",
    "TelemetryBuffer",
    "TelemetryFormatError",
    "TickScheduler",
    "TractionError",
    "TractionMonitor",
    "TractionSettings",
    "TrailingAnalysis",
    "analyze_window",
    "classify",
    "load_settings",
    "__version__",
]
