"""Periodic tick loop feeding samples into a :class:`TractionMonitor`."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Iterator, Optional

from .errors import InvalidSampleError
from .monitor import TractionMonitor
from .recommender.classifier import Classification
from .telemetry.model import Sample

__all__ = ["TickScheduler"]


logger = logging.getLogger(__name__)


class TickScheduler:
    """Pull one sample per interval from ``source`` and hand it to the monitor.

    Ticks run one after another on the event loop, so two classifications
    never overlap.  :meth:`stop` only prevents future ticks; the tick in
    progress, if any, has already completed atomically inside the monitor.
    Finite sources end the loop when exhausted.  Invalid samples are logged
    and skipped unless ``stop_on_invalid`` is set.
    """

    def __init__(
        self,
        monitor: TractionMonitor,
        source: Iterable[Sample],
        *,
        interval: Optional[float] = None,
        max_ticks: Optional[int] = None,
        stop_on_invalid: bool = False,
        on_tick: Callable[[Sample, Classification], None] | None = None,
    ) -> None:
        resolved_interval = monitor.settings.tick_interval if interval is None else interval
        if resolved_interval < 0:
            raise ValueError("Tick interval must be non-negative")
        if max_ticks is not None and max_ticks < 0:
            raise ValueError("max_ticks must be non-negative")
        self.monitor = monitor
        self.interval = float(resolved_interval)
        self.max_ticks = max_ticks
        self.stop_on_invalid = stop_on_invalid
        self._source: Iterator[Sample] = iter(source)
        self._callback = on_tick
        self._task: asyncio.Task[int] | None = None
        self._stopping = False
        self.ticks = 0
        self.rejected = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "asyncio.Task[int]":
        """Schedule the loop on the running event loop and return its task."""

        if self.running:
            raise RuntimeError("TickScheduler is already running")
        self._stopping = False
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    async def stop(self) -> int:
        """Stop scheduling ticks and wait for the loop to wind down.

        Cancelling the caller while it waits propagates as usual; an error
        raised by the loop itself (see ``stop_on_invalid``) is re-raised.
        """

        self._stopping = True
        task = self._task
        if task is None:
            return self.ticks
        if not task.done():
            task.cancel()
        # asyncio.wait never raises the task's outcome, only our own cancellation.
        await asyncio.wait({task})
        if not task.cancelled():
            task.result()
        logger.info("Tick scheduler stopped", extra={"event": "scheduler.stopped", "ticks": self.ticks})
        return self.ticks

    async def run(self) -> int:
        """Run ticks until stopped, the source ends or ``max_ticks`` is hit."""

        logger.info(
            "Tick scheduler started",
            extra={"event": "scheduler.started", "interval": self.interval},
        )
        while not self._stopping and not self._exhausted_budget():
            if not self._tick_once():
                break
            if self._exhausted_budget():
                break
            await asyncio.sleep(self.interval)
        return self.ticks

    def _exhausted_budget(self) -> bool:
        return self.max_ticks is not None and self.ticks + self.rejected >= self.max_ticks

    def _tick_once(self) -> bool:
        try:
            sample = next(self._source)
        except StopIteration:
            logger.info("Sample source exhausted", extra={"event": "scheduler.source_exhausted"})
            return False
        try:
            classification = self.monitor.on_tick(sample)
        except InvalidSampleError:
            self.rejected += 1
            if self.stop_on_invalid:
                raise
            return True
        self.ticks += 1
        if self._callback is not None:
            self._callback(sample, classification)
        return True
