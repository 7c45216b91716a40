"""Utility helpers for reading data files used across the greenhouse engine."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Union, TextIO
from os import PathLike

import yaml

__all__ = [
    "load_data",
    "load_dataset",
    "clear_dataset_cache",
    "dataset_paths",
    "get_data_dir",
    "get_extra_dirs",
    "overlay_dir",
    "normalize_key",
    "deep_update",
]


PathType = Union[str, PathLike]


def _open_text(path: Path) -> TextIO:
    return open(path, "r", encoding="utf-8")


def load_data(path: PathType) -> Any:
    """Return the parsed contents of ``path`` supporting JSON or YAML."""

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


def deep_update(base: Dict[str, Any], other: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``other`` into ``base`` and return ``base``."""

    for key, value in other.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, Mapping)
        ):
            deep_update(base[key], value)
        else:
            base[key] = value
    return base


# Default data directory is the ``data`` folder shipped next to this module.
# It can be overridden using ``GREENHOUSE_DATA_DIR``. Additional directories
# listed in ``GREENHOUSE_EXTRA_DATA_DIRS`` (``os.pathsep`` separated) are
# merged in order after it, and ``GREENHOUSE_OVERLAY_DIR`` is merged last so
# a deployment can reword individual advisories without copying everything.
DATA_ENV = "GREENHOUSE_DATA_DIR"
EXTRA_ENV = "GREENHOUSE_EXTRA_DATA_DIRS"
OVERLAY_ENV = "GREENHOUSE_OVERLAY_DIR"
DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"

# Cached dataset search path info
_PATH_CACHE: tuple[Path, ...] | None = None
_ENV_STATE: tuple[str | None, str | None] | None = None


def get_data_dir() -> Path:
    """Return base dataset directory honoring the ``GREENHOUSE_DATA_DIR`` env."""

    env = os.getenv(DATA_ENV)
    return Path(env).expanduser() if env else DEFAULT_DATA_DIR


def overlay_dir() -> Path | None:
    """Return the overlay directory defined via ``GREENHOUSE_OVERLAY_DIR``."""

    env = os.getenv(OVERLAY_ENV)
    return Path(env).expanduser() if env else None


def get_extra_dirs() -> tuple[Path, ...]:
    """Return additional dataset directories from ``GREENHOUSE_EXTRA_DATA_DIRS``."""

    env = os.getenv(EXTRA_ENV)
    if not env:
        return ()
    dirs: list[Path] = []
    for part in env.split(os.pathsep):
        path = Path(part).expanduser()
        if path.is_dir():
            dirs.append(path)
    return tuple(dirs)


def dataset_paths() -> tuple[Path, ...]:
    """Return directories searched when loading datasets.

    Results are cached but refreshed automatically if the relevant
    environment variables change between calls.
    """

    global _PATH_CACHE, _ENV_STATE
    env_state = (os.getenv(DATA_ENV), os.getenv(EXTRA_ENV))
    if _PATH_CACHE is None or _ENV_STATE != env_state:
        _PATH_CACHE = (get_data_dir(), *get_extra_dirs())
        _ENV_STATE = env_state
    return _PATH_CACHE


def _candidate_files(base: Path, filename: str) -> list[Path]:
    """Return ``filename`` in ``base`` plus its YAML variants when missing."""

    path = base / filename
    if path.exists():
        return [path]
    stem = path.with_suffix("")
    return [p for p in (stem.with_suffix(".yaml"), stem.with_suffix(".yml")) if p.exists()]


@lru_cache(maxsize=None)
def load_dataset(filename: str) -> Dict[str, Any]:
    """Return dataset ``filename`` merged with any overlay data.

    Missing files simply contribute nothing so callers can rely on their
    built-in defaults.
    """

    data: Dict[str, Any] = {}
    bases = list(dataset_paths())
    overlay = overlay_dir()
    if overlay:
        bases.append(overlay)

    for base in bases:
        for path in _candidate_files(base, filename):
            extra = load_data(str(path))
            if isinstance(extra, dict) and isinstance(data, dict):
                deep_update(data, extra)
            else:
                data = extra

    return data


def clear_dataset_cache() -> None:
    """Clear cached dataset results loaded via :func:`load_dataset`."""

    global _PATH_CACHE, _ENV_STATE
    load_dataset.cache_clear()
    _PATH_CACHE = None
    _ENV_STATE = None


def normalize_key(key: str) -> str:
    """Return ``key`` normalized for case-insensitive lookups.

    Whitespace, hyphens and underscores collapse to a single underscore so
    ``"Wind stress"``, ``"wind-stress"`` and ``"WIND_STRESS"`` all match.
    """

    value = str(key).casefold()
    for sep in ("_", "-"):
        value = value.replace(sep, " ")
    parts = [p for p in value.strip().split() if p]
    return "_".join(parts)
