"""Bundled resources distributed with traction-ai."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

__all__ = ["DEFAULTS_RESOURCE_NAME", "load_defaults", "load_yaml_mapping"]


DEFAULTS_RESOURCE_NAME = "defaults.yaml"


def _deep_copy_mapping(source: Mapping[str, Any]) -> dict[str, Any]:
    copied: dict[str, Any] = {}
    for key, value in source.items():
        key_str = str(key)
        if isinstance(value, MappingABC):
            copied[key_str] = _deep_copy_mapping(value)
        elif isinstance(value, list):
            copied[key_str] = [
                _deep_copy_mapping(item) if isinstance(item, MappingABC) else item for item in value
            ]
        else:
            copied[key_str] = value
    return copied


def _mapping_from_text(payload: str, *, source: str) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in configuration: {source}") from exc

    if data is None:
        return MappingProxyType({})
    if not isinstance(data, MappingABC):
        raise TypeError(f"Configuration in {source!s} must decode to a mapping")
    return MappingProxyType(_deep_copy_mapping(data))


def load_yaml_mapping(path: str | Path) -> Mapping[str, Any]:
    """Read a YAML file that must decode to a mapping."""

    candidate = Path(path).expanduser()
    if not candidate.is_file():
        raise FileNotFoundError(candidate)
    return _mapping_from_text(candidate.read_text(encoding="utf-8"), source=str(candidate))


def load_defaults() -> Mapping[str, Any]:
    """Return the defaults bundled as ``traction_ai/resources/defaults.yaml``."""

    resource = resources.files(__name__).joinpath(DEFAULTS_RESOURCE_NAME)
    return _mapping_from_text(resource.read_text(encoding="utf-8"), source=str(resource))
