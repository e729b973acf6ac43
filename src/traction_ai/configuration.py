"""Discovery of user configuration layered over the bundled defaults.

Two file kinds are understood: the ``[tool.traction_ai]`` table of a
``pyproject.toml`` and a standalone YAML file laid out like
``resources/defaults.yaml``.  Either one is merged onto the defaults with
:func:`deep_merge`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping as ABCMapping
from pathlib import Path
from typing import Any, Iterator

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore

from .errors import ConfigurationError
from .resources import load_yaml_mapping

__all__ = [
    "CONFIG_ENV_VAR",
    "PYPROJECT_FILENAME",
    "YAML_SUFFIXES",
    "deep_merge",
    "discover_project_config",
    "load_project_config",
]


CONFIG_ENV_VAR = "TRACTION_AI_CONFIG"
PYPROJECT_FILENAME = "pyproject.toml"
YAML_SUFFIXES = (".yaml", ".yml")
_TOOL_TABLE = ("tool", "traction_ai")


def _plain(value: Any) -> Any:
    if isinstance(value, ABCMapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def deep_merge(base: ABCMapping[str, Any], overlay: ABCMapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``overlay`` merged in; nested tables merge key by key."""

    merged = {str(key): value for key, value in base.items()}
    for key, value in overlay.items():
        current = merged.get(str(key))
        if isinstance(current, ABCMapping) and isinstance(value, ABCMapping):
            merged[str(key)] = deep_merge(current, value)
        else:
            merged[str(key)] = value
    return merged


def _config_file(candidate: Path) -> Path:
    """Map a directory to its ``pyproject.toml`` and check file kinds."""

    candidate = candidate.expanduser()
    if candidate.is_dir() or not candidate.suffix:
        return candidate / PYPROJECT_FILENAME
    if candidate.name == PYPROJECT_FILENAME or candidate.suffix.lower() in YAML_SUFFIXES:
        return candidate
    raise ConfigurationError(
        f"Unsupported configuration file {candidate}: expected {PYPROJECT_FILENAME} or a YAML file"
    )


def _read_tool_table(path: Path) -> dict[str, Any] | None:
    try:
        with path.open("rb") as handle:
            document: Any = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Malformed TOML in {path}: {exc}") from exc
    for key in _TOOL_TABLE:
        document = document.get(key) if isinstance(document, ABCMapping) else None
    if not isinstance(document, ABCMapping):
        return None
    return _plain(document)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        return _plain(load_yaml_mapping(path))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc


def load_project_config(path: Path) -> tuple[dict[str, Any], Path] | None:
    """Load the configuration stored at ``path``.

    ``path`` may be a directory holding a ``pyproject.toml``, the
    ``pyproject.toml`` itself or a YAML file.  Returns ``None`` when the file
    does not exist or a ``pyproject.toml`` has no ``[tool.traction_ai]``
    table.  Unreadable content raises :class:`ConfigurationError`.
    """

    target = _config_file(path)
    if not target.is_file():
        return None
    target = target.resolve()
    if target.suffix.lower() in YAML_SUFFIXES:
        return _read_yaml(target), target
    payload = _read_tool_table(target)
    if payload is None:
        return None
    return payload, target


def _candidates(path: Path | None) -> Iterator[Path]:
    seen: set[Path] = set()
    env_config = os.environ.get(CONFIG_ENV_VAR)
    for candidate in (path, Path(env_config) if env_config else None, Path.cwd()):
        if candidate is None:
            continue
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved not in seen:
            seen.add(resolved)
            yield resolved


def discover_project_config(path: Path | None = None) -> dict[str, Any]:
    """Locate the configuration for the current invocation.

    Candidates are tried in order: ``path``, the file or directory named by
    ``TRACTION_AI_CONFIG`` and finally the working directory.  The returned
    mapping always carries a ``_config_path`` entry, ``None`` when nothing
    was found.
    """

    for candidate in _candidates(path):
        loaded = load_project_config(candidate)
        if loaded is None:
            continue
        payload, source = loaded
        payload["_config_path"] = str(source)
        return payload
    return {"_config_path": None}
