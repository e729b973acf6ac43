"""CSV replay helpers for recorded telemetry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List

import pandas as pd

from ..errors import InvalidSampleError, TelemetryFormatError
from .model import Sample

__all__ = ["CSV_COLUMNS", "iter_samples_csv", "read_samples_csv", "write_samples_csv"]


logger = logging.getLogger(__name__)


CSV_COLUMNS = ("timestamp", "wheel_speed", "slip_ratio", "brake_force", "throttle_position")

# Header occupies the first line of the file.
_FIRST_DATA_LINE = 2


def iter_samples_csv(path: str | Path) -> Iterator[Sample]:
    """Yield samples from a CSV file with a header row.

    Both snake_case and camelCase column names are accepted.  Cells are read
    as text and converted by :meth:`Sample.from_mapping`; rows that fail to
    parse raise :class:`InvalidSampleError` annotated with the line number.
    Files that are not UTF-8 text or not CSV at all raise
    :class:`TelemetryFormatError`.
    """

    source = Path(path)
    try:
        frame = pd.read_csv(source, dtype=str, keep_default_na=False, encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise TelemetryFormatError(str(source), f"not UTF-8 text ({exc})") from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise TelemetryFormatError(str(source), str(exc).strip()) from exc

    for offset, row in enumerate(frame.to_dict(orient="records")):
        line = offset + _FIRST_DATA_LINE
        try:
            yield Sample.from_mapping(row)
        except InvalidSampleError as exc:
            logger.warning(
                "Rejected telemetry row",
                extra={"event": "telemetry.csv_row_rejected", "path": str(source), "line": line},
            )
            raise InvalidSampleError(exc.field, exc.value, f"{exc.reason} (line {line} of {source})") from exc


def read_samples_csv(path: str | Path) -> List[Sample]:
    return list(iter_samples_csv(path))


def write_samples_csv(samples: Iterable[Sample], destination: str | Path) -> Path:
    target = Path(destination)
    target.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame([sample.as_dict() for sample in samples], columns=list(CSV_COLUMNS))
    frame.to_csv(target, index=False)
    return target
