"""Exit categories and the error type raised by traction-ai command handlers.

Every failure surfaces as a :class:`CliError`.  Its :class:`ExitCategory`
decides the process exit status:

* ``runtime`` (1): anything not covered below.
* ``usage`` (2): invalid flags or configuration.
* ``io`` (3): unreadable or malformed telemetry.
* ``not_found`` (4): a named input file does not exist.

:meth:`CliError.from_exception` derives the category from the
:mod:`traction_ai.errors` hierarchy, so handlers only wrap what they catch.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import ConfigurationError, InvalidSampleError, TelemetryFormatError

__all__ = ["CliError", "ExitCategory", "category_for"]


logger = logging.getLogger(__name__)


class ExitCategory(str, Enum):
    RUNTIME = "runtime"
    USAGE = "usage"
    IO = "io"
    NOT_FOUND = "not_found"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ExitCategory.RUNTIME: 1,
    ExitCategory.USAGE: 2,
    ExitCategory.IO: 3,
    ExitCategory.NOT_FOUND: 4,
}

# First match wins, so subclasses must precede their bases.
_EXCEPTION_CATEGORIES: tuple[tuple[type[BaseException], ExitCategory], ...] = (
    (ConfigurationError, ExitCategory.USAGE),
    (InvalidSampleError, ExitCategory.IO),
    (TelemetryFormatError, ExitCategory.IO),
    (FileNotFoundError, ExitCategory.NOT_FOUND),
    (OSError, ExitCategory.IO),
)


def category_for(exc: BaseException) -> ExitCategory:
    for error_type, category in _EXCEPTION_CATEGORIES:
        if isinstance(exc, error_type):
            return category
    return ExitCategory.RUNTIME


def _loggable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class CliError(RuntimeError):
    """A command failure carrying its exit category and log context."""

    def __init__(
        self,
        message: str,
        *,
        category: ExitCategory | str = ExitCategory.RUNTIME,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = ExitCategory(category)
        self.context = {key: _loggable(value) for key, value in (context or {}).items()}
        self.logged = False

    @property
    def status_code(self) -> int:
        return self.category.status_code

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        *,
        context: Optional[Mapping[str, Any]] = None,
    ) -> "CliError":
        """Wrap ``exc`` using the category of the closest known error type."""

        details = dict(context or {})
        if isinstance(exc, InvalidSampleError):
            details.setdefault("field", exc.field)
        elif isinstance(exc, TelemetryFormatError):
            details.setdefault("path", exc.path)
        return cls(str(exc), category=category_for(exc), context=details)

    def as_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "category": self.category.value,
            "message": self.message,
            "context": dict(self.context),
        }

    def log(self, target: Optional[logging.Logger] = None) -> None:
        """Emit the error once at error level with its structured context."""

        if self.logged:
            return
        (target or logger).error(
            self.message,
            extra={
                "event": "cli.error",
                "category": self.category.value,
                "status_code": self.status_code,
                "context": dict(self.context),
            },
            exc_info=self,
        )
        self.logged = True
