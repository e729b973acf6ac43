"""Typed runtime settings assembled from bundled defaults and overrides."""

from __future__ import annotations

import math
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .agents.registry import DEFAULT_AGENT_SEEDS, Agent, agent_from_mapping
from .configuration import deep_merge, discover_project_config
from .errors import ConfigurationError
from .recommender.classifier import DEFAULT_CLASSIFICATION_THRESHOLDS, ClassificationThresholds
from .recommender.trailing import (
    DEFAULT_ANALYSIS_THRESHOLDS,
    DEFAULT_ANALYSIS_WINDOW,
    AnalysisThresholds,
)
from .resources import load_defaults
from .telemetry.buffer import DEFAULT_BUFFER_CAPACITY

__all__ = [
    "DEFAULT_ANALYSIS_DELAY",
    "DEFAULT_TICK_INTERVAL",
    "TractionSettings",
    "load_settings",
]


DEFAULT_ANALYSIS_DELAY = 2.0
DEFAULT_TICK_INTERVAL = 1.5


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name)
    if value is None:
        return {}
    if not isinstance(value, MappingABC):
        raise ConfigurationError(f"Configuration section '{name}' must be a table, got {type(value).__name__}")
    return value


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"'{name}' must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"'{name}' must be an integer, got {value!r}")
    number = int(value)
    if number <= 0:
        raise ConfigurationError(f"'{name}' must be a positive integer, got {value!r}")
    return number


def _non_negative_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}") from None
    if not math.isfinite(number) or number < 0.0:
        raise ConfigurationError(f"'{name}' must be a finite, non-negative number, got {value!r}")
    return number


@dataclass(frozen=True)
class TractionSettings:
    """Policy constants and runtime knobs for a :class:`TractionMonitor`."""

    thresholds: ClassificationThresholds = DEFAULT_CLASSIFICATION_THRESHOLDS
    analysis_thresholds: AnalysisThresholds = DEFAULT_ANALYSIS_THRESHOLDS
    analysis_window: int = DEFAULT_ANALYSIS_WINDOW
    analysis_delay: float = DEFAULT_ANALYSIS_DELAY
    buffer_capacity: int = DEFAULT_BUFFER_CAPACITY
    tick_interval: float = DEFAULT_TICK_INTERVAL
    agents: tuple[Agent, ...] = DEFAULT_AGENT_SEEDS
    logging: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "TractionSettings":
        """Build settings from a merged configuration mapping.

        Missing sections fall back to the module defaults; invalid values
        raise :class:`ConfigurationError`.
        """

        data = dict(config or {})
        thresholds_cfg = _section(data, "thresholds")
        analysis_cfg = _section(data, "analysis")
        buffer_cfg = _section(data, "buffer")
        scheduler_cfg = _section(data, "scheduler")

        try:
            thresholds = ClassificationThresholds.from_config(thresholds_cfg)
            analysis_thresholds = AnalysisThresholds.from_config(analysis_cfg)
        except ConfigurationError:
            raise
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid threshold value: {exc}") from exc

        agents: tuple[Agent, ...] = DEFAULT_AGENT_SEEDS
        raw_agents = data.get("agents")
        if raw_agents is not None:
            if not isinstance(raw_agents, list) or not raw_agents:
                raise ConfigurationError("'agents' must be a non-empty list of tables")
            try:
                agents = tuple(agent_from_mapping(entry) for entry in raw_agents)
            except (TypeError, ValueError, AttributeError) as exc:
                raise ConfigurationError(f"Invalid agent seed: {exc}") from exc
            identifiers = [agent.id for agent in agents]
            if len(set(identifiers)) != len(identifiers):
                raise ConfigurationError(f"Duplicate agent ids in configuration: {identifiers}")

        return cls(
            thresholds=thresholds,
            analysis_thresholds=analysis_thresholds,
            analysis_window=_positive_int(
                analysis_cfg.get("window", DEFAULT_ANALYSIS_WINDOW), "analysis.window"
            ),
            analysis_delay=_non_negative_float(
                analysis_cfg.get("delay", DEFAULT_ANALYSIS_DELAY), "analysis.delay"
            ),
            buffer_capacity=_positive_int(
                buffer_cfg.get("capacity", DEFAULT_BUFFER_CAPACITY), "buffer.capacity"
            ),
            tick_interval=_non_negative_float(
                scheduler_cfg.get("interval", DEFAULT_TICK_INTERVAL), "scheduler.interval"
            ),
            agents=agents,
            logging=dict(_section(data, "logging")),
        )


def load_settings(
    path: Optional[Path] = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> TractionSettings:
    """Merge bundled defaults, project configuration and ``overrides``."""

    merged = deep_merge(load_defaults(), discover_project_config(path))
    if overrides:
        merged = deep_merge(merged, overrides)
    return TractionSettings.from_config(merged)
