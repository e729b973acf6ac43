"""Command handlers for the traction-ai CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..configuration import deep_merge
from ..errors import ConfigurationError, TractionError
from ..monitor import MonitorSnapshot, TractionMonitor
from ..recommender.trailing import TrailingAnalysis
from ..scheduler import TickScheduler
from ..settings import TractionSettings
from ..telemetry.generator import SimulatedSampleGenerator
from ..telemetry.io import read_samples_csv
from ..telemetry.model import Sample
from ..visualization.sparkline import slip_sparkline
from .errors import CliError, ExitCategory

__all__ = ["handle_replay", "handle_simulate", "render_report"]


logger = logging.getLogger(__name__)


def _settings_from_namespace(namespace: argparse.Namespace, config: Mapping[str, Any]) -> TractionSettings:
    overrides: dict[str, Any] = {}
    if getattr(namespace, "analysis_delay", None) is not None:
        overrides["analysis"] = {"delay": namespace.analysis_delay}
    if getattr(namespace, "interval", None) is not None:
        overrides["scheduler"] = {"interval": namespace.interval}
    try:
        return TractionSettings.from_config(deep_merge(config, overrides))
    except ConfigurationError as exc:
        raise CliError.from_exception(exc, context={"config_path": config.get("_config_path")}) from exc


async def _drive(
    monitor: TractionMonitor,
    source: Iterable[Sample],
    *,
    max_ticks: Optional[int],
    analyze: bool,
) -> tuple[int, int, Optional[TrailingAnalysis]]:
    scheduler = TickScheduler(monitor, source, max_ticks=max_ticks)
    await scheduler.run()
    analysis = await monitor.request_analysis() if analyze else None
    return scheduler.ticks, scheduler.rejected, analysis


def _format_sample(sample: Optional[Sample]) -> str:
    if sample is None:
        return "no telemetry"
    return (
        f"{sample.timestamp}  speed {sample.wheel_speed:.1f} km/h  slip {sample.slip_ratio:.1f}%  "
        f"brake {sample.brake_force:.1f}%  throttle {sample.throttle_position:.1f}%"
    )


def render_report(
    snapshot: MonitorSnapshot,
    *,
    analysis: Optional[TrailingAnalysis] = None,
    rejected: int = 0,
    output_format: str = "text",
) -> str:
    """Render ``snapshot`` as a plain-text or JSON status report."""

    if output_format == "json":
        payload: dict[str, Any] = {
            "status": snapshot.status.value,
            "recommendation": snapshot.recommendation,
            "recommendation_source": snapshot.recommendation_source.value,
            "agents": [agent.as_dict() for agent in snapshot.agents],
            "latest_sample": snapshot.latest_sample.as_dict() if snapshot.latest_sample else None,
            "history": [sample.slip_ratio for sample in snapshot.history],
            "ticks": snapshot.ticks,
            "rejected": rejected,
        }
        if analysis is not None:
            payload["analysis"] = {
                "advisory": analysis.advisory,
                "average_slip": analysis.average_slip,
                "sample_count": analysis.sample_count,
            }
        return json.dumps(payload, indent=2, sort_keys=True)

    lines = [
        f"Status: {snapshot.status.value.upper()}",
        f"Recommendation: {snapshot.recommendation}",
        f"Latest: {_format_sample(snapshot.latest_sample)}",
        f"Slip history: {slip_sparkline(snapshot.history) or '-'}",
        f"Ticks: {snapshot.ticks} (rejected {rejected})",
        "Agents:",
    ]
    for agent in snapshot.agents:
        lines.append(
            f"  {agent.name:<24} {agent.status.value.upper():<6} {agent.confidence:>3}%  {agent.last_action}"
        )
    if analysis is not None:
        average = "n/a" if analysis.average_slip is None else f"{analysis.average_slip:.2f}%"
        lines.append(f"Trailing analysis: average slip {average} over {analysis.sample_count} samples")
    return "\n".join(lines)


def handle_simulate(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    if namespace.ticks < 0:
        raise CliError(
            "--ticks must be non-negative",
            category=ExitCategory.USAGE,
            context={"ticks": namespace.ticks},
        )
    settings = _settings_from_namespace(namespace, config)
    monitor = TractionMonitor(settings)
    generator = SimulatedSampleGenerator(namespace.seed, limit=namespace.ticks)
    ticks, rejected, analysis = asyncio.run(
        _drive(monitor, generator, max_ticks=namespace.ticks, analyze=namespace.analyze)
    )
    logger.info("Simulation finished", extra={"event": "cli.simulate_done", "ticks": ticks})
    return render_report(
        monitor.snapshot(),
        analysis=analysis,
        rejected=rejected,
        output_format=namespace.output_format,
    )


def handle_replay(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    path = Path(namespace.telemetry)
    if not path.is_file():
        raise CliError(
            f"Telemetry file not found: {path}",
            category=ExitCategory.NOT_FOUND,
            context={"path": path},
        )
    try:
        samples = read_samples_csv(path)
    except (TractionError, OSError) as exc:
        raise CliError.from_exception(exc, context={"path": path}) from exc

    settings = _settings_from_namespace(namespace, config)
    monitor = TractionMonitor(settings)
    ticks, rejected, analysis = asyncio.run(
        _drive(monitor, samples, max_ticks=None, analyze=namespace.analyze)
    )
    logger.info("Replay finished", extra={"event": "cli.replay_done", "ticks": ticks, "path": str(path)})
    return render_report(
        monitor.snapshot(),
        analysis=analysis,
        rejected=rejected,
        output_format=namespace.output_format,
    )
