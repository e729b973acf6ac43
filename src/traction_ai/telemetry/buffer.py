"""Bounded chronological history of telemetry samples.

The buffer keeps the most recent ``capacity`` samples in arrival order and
evicts from the front once the capacity is exceeded.  It performs no
validation and never fails on append.
"""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

from .model import Sample

__all__ = ["DEFAULT_BUFFER_CAPACITY", "TelemetryBuffer"]


DEFAULT_BUFFER_CAPACITY = 20


class TelemetryBuffer:
    """FIFO buffer holding at most ``capacity`` samples."""

    def __init__(self, capacity: int = DEFAULT_BUFFER_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("TelemetryBuffer requires a positive capacity")
        self._capacity = capacity
        self._samples: deque[Sample] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return bool(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(tuple(self._samples))

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, sample: Sample) -> Optional[Sample]:
        """Append ``sample`` and return the evicted sample, if any."""

        evicted: Optional[Sample] = None
        if len(self._samples) == self._capacity:
            evicted = self._samples[0]
        self._samples.append(sample)
        return evicted

    def latest(self) -> Optional[Sample]:
        if not self._samples:
            return None
        return self._samples[-1]

    def window(self, n: int) -> tuple[Sample, ...]:
        """Return the last ``min(n, len(self))`` samples, oldest first."""

        if n <= 0:
            return ()
        size = len(self._samples)
        start = max(size - n, 0)
        return tuple(self._samples[index] for index in range(start, size))

    def clear(self) -> None:
        self._samples.clear()
