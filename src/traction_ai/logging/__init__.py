"""Logging utilities for traction-ai."""

from traction_ai.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
