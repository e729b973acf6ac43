"""Command line utilities for traction-ai."""

from traction_ai.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
