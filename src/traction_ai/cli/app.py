"""Command line application entry point for traction-ai."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from ..configuration import deep_merge, discover_project_config
from ..errors import ConfigurationError
from ..logging.config import setup_logging
from ..resources import load_defaults
from .errors import CliError
from .parser import build_parser


def _preliminary_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", dest="config_path", type=Path, default=None)
    parser.add_argument("--log-level", dest="log_level", default=None)
    parser.add_argument("--log-output", dest="log_output", default=None)
    parser.add_argument("--log-format", dest="log_format", default=None)
    return parser


def _configure(preliminary: argparse.Namespace) -> dict[str, Any]:
    """Load defaults plus project configuration and install logging."""

    try:
        config = deep_merge(load_defaults(), discover_project_config(preliminary.config_path))
    except ConfigurationError as exc:
        raise CliError.from_exception(exc, context={"config_path": preliminary.config_path}) from exc

    logging_config = dict(config.get("logging", {}) or {})
    for key in ("level", "output", "format"):
        value = getattr(preliminary, f"log_{key}")
        if value is not None:
            logging_config[key] = value
    config["logging"] = logging_config

    try:
        setup_logging(config)
    except (ConfigurationError, OSError) as exc:
        raise CliError.from_exception(exc, context={"logging": logging_config}) from exc
    return config


def _write_line(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the traction-ai command line interface."""

    preliminary, remaining = _preliminary_parser().parse_known_args(args)
    try:
        config = _configure(preliminary)
        namespace = build_parser(config).parse_args(list(remaining), namespace=preliminary)
        result = namespace.handler(namespace, config=config)
    except CliError as exc:
        exc.log()
        _write_line(exc.message)
        raise SystemExit(exc.status_code) from exc
    if result:
        _write_line(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
