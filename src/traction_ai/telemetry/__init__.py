"""Telemetry samples, history buffer and sample sources."""

from .buffer import DEFAULT_BUFFER_CAPACITY, TelemetryBuffer
from .generator import SimulatedSampleGenerator
from .io import iter_samples_csv, read_samples_csv, write_samples_csv
from .model import Sample, validate_sample

__all__ = [
    "DEFAULT_BUFFER_CAPACITY",
    "Sample",
    "SimulatedSampleGenerator",
    "TelemetryBuffer",
    "iter_samples_csv",
    "read_samples_csv",
    "validate_sample",
    "write_samples_csv",
]
