"""Utility helpers for reading datasets and parsing day offsets."""

from __future__ import annotations

import json
import math
import os
from collections.abc import Mapping
from functools import cache
from os import PathLike
from pathlib import Path
from typing import Any, TextIO, Union

import yaml

from .const import ENV_DATA_DIR, ENV_EXTRA_DATA_DIRS, ENV_OVERLAY_DIR

__all__ = [
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "deep_update",
    "coerce_days",
]

PathType = Union[str, PathLike]

# Bundled datasets live next to this module. ``PLANTING_CALENDAR_DATA_DIR``
# replaces that directory, ``PLANTING_CALENDAR_EXTRA_DATA_DIRS`` appends more
# directories (``os.pathsep`` separated) and ``PLANTING_CALENDAR_OVERLAY_DIR``
# holds user files merged last.
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"

_PATH_CACHE: tuple[Path, ...] | None = None
_ENV_STATE: tuple[str | None, str | None] | None = None


def _open_text(path: Path) -> TextIO:
    return open(path, encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML.

    A :class:`FileNotFoundError` is raised if the file does not exist and a
    :class:`ValueError` naming the file when it cannot be decoded.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    try:
        with _open_text(p) as f:
            if p.suffix.lower() in {".yaml", ".yml"}:
                return yaml.safe_load(f) or {}
            return json.load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {p}: {exc}") from exc


def deep_update(base: dict[str, Any], other: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


def get_data_dir() -> Path:
    """Return base dataset directory honoring ``PLANTING_CALENDAR_DATA_DIR``."""

    env = os.getenv(ENV_DATA_DIR)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def get_extra_dirs() -> tuple[Path, ...]:
    """Return additional dataset directories that exist on disk."""

    env = os.getenv(ENV_EXTRA_DATA_DIRS)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        if not part:
            continue
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def overlay_dir() -> Path | None:
    """Return the overlay directory or ``None`` when not configured."""

    env = os.getenv(ENV_OVERLAY_DIR)
    return Path(env).expanduser() if env else None


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets.

    The result is cached and refreshed automatically when the relevant
    environment variables change.
    """

    global _PATH_CACHE, _ENV_STATE
    env_state = (os.getenv(ENV_DATA_DIR), os.getenv(ENV_EXTRA_DATA_DIRS))
    if _PATH_CACHE is None or _ENV_STATE != env_state:
        _PATH_CACHE = (get_data_dir(), *get_extra_dirs())
        _ENV_STATE = env_state
    return _PATH_CACHE


def _merge(data: Any, extra: Any) -> Any:
    if isinstance(extra, dict) and isinstance(data, dict):
        return deep_update(data, extra)
    return extra


@cache
def _load_dataset(filename: str, overlay: str | None) -> Any:
    data: Any = {}
    for base in dataset_paths():
        path = base / filename
        if path.exists():
            data = _merge(data, load_data(path))

    if overlay:
        overlay_path = Path(overlay) / filename
        if overlay_path.exists():
            data = _merge(data, load_data(overlay_path))
    return data


def load_dataset(filename: str) -> Any:
    """Return dataset ``filename`` merged across all search directories.

    Mapping datasets are deep merged in search order with the overlay applied
    last; any other top-level type replaces what was loaded before it. An
    empty mapping is returned when no directory holds the file. Results are
    cached, use :func:`clear_dataset_cache` to reload.
    """

    overlay = overlay_dir()
    return _load_dataset(filename, str(overlay) if overlay else None)


def clear_dataset_cache() -> None:
    """Clear cached dataset results loaded via :func:`load_dataset`."""

    global _PATH_CACHE, _ENV_STATE
    _load_dataset.cache_clear()
    _PATH_CACHE = None
    _ENV_STATE = None


def coerce_days(value: Any) -> int | None:
    """Return ``value`` as a whole number of days or ``None``.

    Integers pass through, floats are accepted only when integral and numeric
    strings are parsed. Booleans and anything else are treated as missing.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
            return coerce_days(number)
    return None
