"""Visualisation helpers for traction-ai text reports."""

from traction_ai.visualization.sparkline import SPARKLINE_BLOCKS, render_sparkline, slip_sparkline

__all__ = ["SPARKLINE_BLOCKS", "render_sparkline", "slip_sparkline"]
