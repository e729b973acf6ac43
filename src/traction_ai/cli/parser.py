"""Argument parsing for the traction-ai CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from .workflows import handle_replay, handle_simulate


def _add_report_arguments(parser: argparse.ArgumentParser, analysis_cfg: Mapping[str, Any]) -> None:
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Request a trailing analysis once all ticks have been processed.",
    )
    parser.add_argument(
        "--analysis-delay",
        dest="analysis_delay",
        type=float,
        default=analysis_cfg.get("delay"),
        help="Seconds the trailing analysis waits before publishing.",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=("text", "json"),
        default="text",
        help="Report format.",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = dict(config.get("logging", {}) or {})
    scheduler_cfg = dict(config.get("scheduler", {}) or {})
    analysis_cfg = dict(config.get("analysis", {}) or {})

    parser = argparse.ArgumentParser(
        prog="traction-ai",
        description="Traction control monitor: slip severity, agent status and trailing analysis.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="A YAML settings file, or a pyproject.toml (or its directory) with a [tool.traction_ai] table.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    simulate = subparsers.add_parser(
        "simulate",
        help="Drive the monitor with simulated telemetry.",
    )
    simulate.add_argument("--ticks", type=int, default=20, help="Number of samples to generate.")
    simulate.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs.")
    simulate.add_argument(
        "--interval",
        type=float,
        default=scheduler_cfg.get("interval"),
        help="Seconds between ticks.",
    )
    _add_report_arguments(simulate, analysis_cfg)
    simulate.set_defaults(handler=handle_simulate)

    replay = subparsers.add_parser(
        "replay",
        help="Feed recorded telemetry from a CSV file through the monitor.",
    )
    replay.add_argument("telemetry", type=Path, help="CSV file with one sample per row.")
    replay.add_argument(
        "--interval",
        type=float,
        default=0.0,
        help="Seconds between ticks (default: replay as fast as possible).",
    )
    _add_report_arguments(replay, analysis_cfg)
    replay.set_defaults(handler=handle_replay)

    return parser
