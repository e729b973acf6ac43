"""Telemetry sample model and validation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import InvalidSampleError

__all__ = ["PERCENT_FIELDS", "Sample", "validate_sample"]


PERCENT_FIELDS = ("slip_ratio", "brake_force", "throttle_position")

# Accept the camelCase keys emitted by the dashboard feed as well.
_FIELD_ALIASES: Mapping[str, str] = {
    "wheelSpeed": "wheel_speed",
    "slipRatio": "slip_ratio",
    "brakeForce": "brake_force",
    "throttlePosition": "throttle_position",
}


@dataclass(frozen=True, slots=True)
class Sample:
    """One timestamped telemetry reading.

    ``slip_ratio``, ``brake_force`` and ``throttle_position`` are expressed
    as percentages, ``wheel_speed`` in km/h.
    """

    timestamp: str
    wheel_speed: float
    slip_ratio: float
    brake_force: float
    throttle_position: float

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Sample":
        """Build a sample from a mapping using snake_case or camelCase keys."""

        data = {_FIELD_ALIASES.get(str(key), str(key)): value for key, value in payload.items()}
        values: dict[str, float] = {}
        for name in ("wheel_speed", "slip_ratio", "brake_force", "throttle_position"):
            if name not in data:
                raise InvalidSampleError(name, None, "missing field")
            try:
                values[name] = float(data[name])
            except (TypeError, ValueError):
                raise InvalidSampleError(name, data[name], "not a number") from None
        timestamp = data.get("timestamp")
        if timestamp is None:
            raise InvalidSampleError("timestamp", None, "missing field")
        return cls(timestamp=str(timestamp), **values)

    def as_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "wheel_speed": self.wheel_speed,
            "slip_ratio": self.slip_ratio,
            "brake_force": self.brake_force,
            "throttle_position": self.throttle_position,
        }


def validate_sample(sample: Sample) -> Sample:
    """Return ``sample`` unchanged or raise :class:`InvalidSampleError`."""

    if not isinstance(sample.timestamp, str) or not sample.timestamp:
        raise InvalidSampleError("timestamp", sample.timestamp, "expected a non-empty label")

    for name in ("wheel_speed",) + PERCENT_FIELDS:
        value = getattr(sample, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidSampleError(name, value, "not a number")
        if not math.isfinite(value):
            raise InvalidSampleError(name, value, "not finite")
        if value < 0.0:
            raise InvalidSampleError(name, value, "must not be negative")
        if name in PERCENT_FIELDS and value > 100.0:
            raise InvalidSampleError(name, value, "percentage above 100")
    return sample
