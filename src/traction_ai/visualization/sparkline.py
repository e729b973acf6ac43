"""Text sparklines for telemetry history."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from ..telemetry.model import Sample

__all__ = ["SPARKLINE_BLOCKS", "render_sparkline", "slip_sparkline"]


SPARKLINE_BLOCKS: Sequence[str] = "▁▂▃▄▅▆▇█"


def render_sparkline(
    values: Iterable[float],
    *,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
    blocks: Sequence[str] = SPARKLINE_BLOCKS,
) -> str:
    """Render ``values`` with one block character per value.

    ``lower`` and ``upper`` pin the scale; values outside it are clamped.
    Without them the scale spans the observed minimum and maximum, and a
    flat series renders with the lowest block.
    """

    data = [float(value) for value in values]
    palette = tuple(blocks)
    if not data or not palette:
        return ""

    low = min(data) if lower is None else float(lower)
    high = max(data) if upper is None else float(upper)
    span = high - low
    top = len(palette) - 1
    if top == 0 or span <= 0 or math.isclose(span, 0.0):
        return palette[0] * len(data)

    rendered: list[str] = []
    for value in data:
        index = int(round((value - low) / span * top))
        rendered.append(palette[max(0, min(top, index))])
    return "".join(rendered)


def slip_sparkline(samples: Sequence[Sample], *, ceiling: float = 15.0) -> str:
    """Slip ratio history on a fixed ``0..ceiling`` percent scale."""

    return render_sparkline((sample.slip_ratio for sample in samples), lower=0.0, upper=ceiling)
