"""Convenience re-exports for test helpers."""

from __future__ import annotations

from .telemetry import FixedClock, build_sample, slip_series

__all__ = ["FixedClock", "build_sample", "slip_series"]
