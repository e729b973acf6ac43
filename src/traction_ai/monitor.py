"""Process-wide traction monitoring state.

:class:`TractionMonitor` owns the telemetry buffer, the agent registry and
the recommendation state.  All reads and writes go through one
:class:`threading.Lock`, so a periodic tick and an on-demand analysis never
observe each other half-applied:

* :meth:`TractionMonitor.on_tick` validates, buffers and classifies one
  sample inside a single critical section.
* :meth:`TractionMonitor.request_analysis` snapshots the trailing window,
  waits for the configured delay outside the lock and then publishes the
  advisory in a second critical section.  Cancelling the wait publishes
  nothing.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .agents.registry import Agent, AgentRegistry
from .errors import AnalysisInProgressError, InvalidSampleError
from .recommender.classifier import Classification, SystemStatus, classify
from .recommender.trailing import TrailingAnalysis, analyze_window
from .settings import TractionSettings
from .telemetry.buffer import TelemetryBuffer
from .telemetry.model import Sample, validate_sample

__all__ = [
    "INITIAL_RECOMMENDATION",
    "MonitorSnapshot",
    "RecommendationSource",
    "TractionMonitor",
]


logger = logging.getLogger(__name__)


INITIAL_RECOMMENDATION = "All systems operating normally"


class RecommendationSource(str, Enum):
    INITIAL = "initial"
    CLASSIFIER = "classifier"
    ANALYSIS = "analysis"


@dataclass(frozen=True, slots=True)
class MonitorSnapshot:
    """Consistent read of everything the presentation layer renders."""

    status: SystemStatus
    recommendation: str
    recommendation_source: RecommendationSource
    agents: tuple[Agent, ...]
    latest_sample: Optional[Sample]
    history: tuple[Sample, ...]
    processing: bool
    ticks: int


class TractionMonitor:
    """Serialized owner of buffer, agent registry and recommendation state."""

    def __init__(self, settings: TractionSettings | None = None) -> None:
        self.settings = settings or TractionSettings()
        self._lock = threading.Lock()
        self._buffer = TelemetryBuffer(self.settings.buffer_capacity)
        self._registry = AgentRegistry(self.settings.agents)
        self._status = SystemStatus.NORMAL
        self._recommendation = INITIAL_RECOMMENDATION
        self._recommendation_source = RecommendationSource.INITIAL
        self._processing = False
        self._ticks = 0

    # -- periodic path -----------------------------------------------------

    def on_tick(self, sample: Sample) -> Classification:
        """Buffer ``sample`` and apply its classification atomically.

        Raises :class:`InvalidSampleError` without modifying any state when
        the sample is rejected.
        """

        try:
            validate_sample(sample)
        except InvalidSampleError as exc:
            logger.warning(
                "Rejected telemetry sample",
                extra={
                    "event": "monitor.sample_rejected",
                    "field": exc.field,
                    "reason": exc.reason,
                },
            )
            raise

        classification = classify(sample, self.settings.thresholds)
        with self._lock:
            self._registry.apply(classification.updates)
            self._buffer.append(sample)
            previous = self._status
            self._status = classification.status
            self._recommendation = classification.recommendation
            self._recommendation_source = RecommendationSource.CLASSIFIER
            self._ticks += 1

        if previous is not classification.status:
            logger.info(
                "System status changed",
                extra={
                    "event": "monitor.status_changed",
                    "previous": previous.value,
                    "current": classification.status.value,
                    "slip_ratio": classification.slip_ratio,
                },
            )
        return classification

    # -- on-demand path ----------------------------------------------------

    async def request_analysis(self) -> TrailingAnalysis:
        """Run the trailing analysis and publish its advisory after the delay.

        With an empty buffer the no-data result is returned immediately and
        nothing is published.  Raises :class:`AnalysisInProgressError` when
        another analysis is still waiting.
        """

        with self._lock:
            if self._processing:
                raise AnalysisInProgressError("A trailing analysis is already in progress")
            window = self._buffer.window(self.settings.analysis_window)
            if not window:
                logger.info("Trailing analysis skipped: no telemetry", extra={"event": "monitor.analysis_no_data"})
                return analyze_window(window, self.settings.analysis_thresholds, window=self.settings.analysis_window)
            self._processing = True

        try:
            await asyncio.sleep(self.settings.analysis_delay)
            result = analyze_window(
                window,
                self.settings.analysis_thresholds,
                window=self.settings.analysis_window,
            )
        except BaseException as exc:
            with self._lock:
                self._processing = False
            if isinstance(exc, asyncio.CancelledError):
                logger.info("Trailing analysis cancelled", extra={"event": "monitor.analysis_cancelled"})
            raise

        with self._lock:
            self._recommendation = result.advisory
            self._recommendation_source = RecommendationSource.ANALYSIS
            self._processing = False

        logger.info(
            "Trailing analysis published",
            extra={
                "event": "monitor.analysis_published",
                "average_slip": result.average_slip,
                "sample_count": result.sample_count,
            },
        )
        return result

    # -- read accessors ----------------------------------------------------

    @property
    def is_processing(self) -> bool:
        with self._lock:
            return self._processing

    def get_status(self) -> SystemStatus:
        with self._lock:
            return self._status

    def get_agents(self) -> tuple[Agent, ...]:
        with self._lock:
            return self._registry.list()

    def get_recommendation(self) -> str:
        with self._lock:
            return self._recommendation

    def get_latest_sample(self) -> Optional[Sample]:
        with self._lock:
            return self._buffer.latest()

    def history(self, n: int | None = None) -> tuple[Sample, ...]:
        """Chart history: the last ``n`` samples, or the whole buffer."""

        with self._lock:
            size = self._buffer.capacity if n is None else n
            return self._buffer.window(size)

    def snapshot(self) -> MonitorSnapshot:
        with self._lock:
            return MonitorSnapshot(
                status=self._status,
                recommendation=self._recommendation,
                recommendation_source=self._recommendation_source,
                agents=self._registry.list(),
                latest_sample=self._buffer.latest(),
                history=self._buffer.window(self._buffer.capacity),
                processing=self._processing,
                ticks=self._ticks,
            )
