"""Synthetic telemetry source for demos and soak tests."""

from __future__ import annotations

import time
from typing import Callable, Iterator, Optional

import numpy as np

from .model import Sample

__all__ = ["SimulatedSampleGenerator", "wall_clock_label"]


def wall_clock_label() -> str:
    return time.strftime("%H:%M:%S")


class SimulatedSampleGenerator:
    """Draw uniformly distributed samples in the dashboard's nominal ranges.

    Parameters
    ----------
    seed:
        Seed for :func:`numpy.random.default_rng`. Two generators built with the
        same seed and clock produce identical sequences.
    clock:
        Callable returning the timestamp label of the next sample. Defaults to
        the local wall clock formatted as ``HH:MM:SS``.
    limit:
        Optional number of samples after which iteration stops.
    """

    WHEEL_SPEED_RANGE = (60.0, 100.0)
    SLIP_RATIO_RANGE = (0.0, 15.0)
    BRAKE_FORCE_RANGE = (30.0, 60.0)
    THROTTLE_RANGE = (40.0, 60.0)

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        clock: Callable[[], str] | None = None,
        limit: Optional[int] = None,
    ) -> None:
        if limit is not None and limit < 0:
            raise ValueError("limit must be non-negative")
        self._rng = np.random.default_rng(seed)
        self._clock = clock or wall_clock_label
        self._limit = limit
        self._produced = 0

    @property
    def produced(self) -> int:
        return self._produced

    def next_sample(self) -> Sample:
        wheel_speed, slip_ratio, brake_force, throttle = (
            float(self._rng.uniform(low, high))
            for low, high in (
                self.WHEEL_SPEED_RANGE,
                self.SLIP_RATIO_RANGE,
                self.BRAKE_FORCE_RANGE,
                self.THROTTLE_RANGE,
            )
        )
        self._produced += 1
        return Sample(
            timestamp=self._clock(),
            wheel_speed=wheel_speed,
            slip_ratio=slip_ratio,
            brake_force=brake_force,
            throttle_position=throttle,
        )

    def __iter__(self) -> Iterator[Sample]:
        return self

    def __next__(self) -> Sample:
        if self._limit is not None and self._produced >= self._limit:
            raise StopIteration
        return self.next_sample()
