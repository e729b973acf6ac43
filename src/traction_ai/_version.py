"""Resolve and validate the installed ``traction_ai`` version."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

_DISTRIBUTION_NAME = "traction-ai"
_CHANGELOG_HEADING = re.compile(r"^## v(?P<version>\d+\.\d+\.\d+)\b")


def _version_from_changelog() -> str:
    """Return the newest version heading found in ``CHANGELOG.md``.

    Used when running from a source checkout that was never installed, so no
    distribution metadata is available.
    """

    parents = Path(__file__).resolve().parents
    candidates = [parents[index] / "CHANGELOG.md" for index in (1, 2) if len(parents) > index]

    for changelog in candidates:
        if not changelog.is_file():
            continue
        for line in changelog.read_text(encoding="utf-8").splitlines():
            match = _CHANGELOG_HEADING.match(line)
            if match:
                return match.group("version")

    raise RuntimeError(
        "Unable to determine the 'traction_ai' version from package metadata or "
        "CHANGELOG.md."
    )


def _load_version() -> str:
    try:
        raw_version = metadata.version(_DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        raw_version = _version_from_changelog()

    try:
        parsed = Version(raw_version)
    except InvalidVersion as exc:
        raise RuntimeError(
            f"Invalid version string for 'traction_ai': {raw_version!r}."
        ) from exc

    if len(parsed.release) != 3:
        raise RuntimeError(
            "The 'traction_ai' version must follow the MAJOR.MINOR.PATCH format. "
            f"Found: {raw_version!r}."
        )

    return raw_version


__version__ = _load_version()

__all__ = ["__version__"]
