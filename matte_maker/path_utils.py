"""Path normalization utilities.

This module centralizes the project's path rules:

- Use absolute paths when interacting with the filesystem/UI.
- Store image paths relative to the matte config file whenever they live on
  the same device, so a folder holding a config and its photos can be moved
  or synced as a unit.

Keep this module free of Qt dependencies.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

_DRIVE_PREFIX_LEN = 2

K = TypeVar("K")


def _normalize_drive_letter(path_str: str) -> str:
    # Normalize drive letter casing on Windows ("c:\\" -> "C:\\").
    if len(path_str) >= _DRIVE_PREFIX_LEN and path_str[1] == ":":
        return path_str[0].upper() + path_str[1:]
    return path_str


def abs_path(path: str | Path) -> Path:
    """Return an absolute path without requiring that it exists."""
    p = Path(path).expanduser()
    try:
        return p.resolve(strict=False)
    except OSError:
        return p.absolute()


def abs_path_str(path: str | Path) -> str:
    """Absolute, OS-native path string (Windows uses backslashes)."""
    return _normalize_drive_letter(str(abs_path(path)))


def abs_dir(path: str | Path) -> Path:
    """Absolute directory path.

    If the path exists and is not a directory, returns its parent.
    """
    p = abs_path(path)
    if p.exists() and not p.is_dir():
        return p.parent
    return p


def abs_dir_str(path: str | Path) -> str:
    return _normalize_drive_letter(str(abs_dir(path)))


def _device_of(path: str) -> int:
    return os.stat(path).st_dev


def to_absolute(path: str, config_path: str | None = None) -> str:
    """Absolutize ``path`` against the directory of ``config_path``.

    ``imgs/x.jpg`` with ``/home/bob/d/c.json`` gives ``/home/bob/d/imgs/x.jpg``;
    ``../y.jpg`` gives ``/home/bob/y.jpg``. Absolute inputs pass through
    normalized. Without a config path the input is returned as-is.

    The result is always normalized, so ``to_relative(to_absolute(p, cfg), cfg) == p``
    holds for normalized relative paths (the only kind ``to_relative`` produces);
    ``./imgs/x.jpg`` or ``imgs//x.jpg`` come back as ``imgs/x.jpg``.
    """
    if not config_path:
        return path
    cfg_dir = os.path.dirname(os.path.abspath(config_path))
    return os.path.normpath(os.path.join(cfg_dir, path))


def to_relative(path: str, config_path: str | None = None) -> str:
    """Relativize an absolute ``path`` against the directory of ``config_path``.

    Only done when both live on the same device; ``/media/ext/x.jpg`` stays
    absolute next to ``/home/bob/d/cfg.json``. Both paths are stat'ed, so a
    missing file raises ``FileNotFoundError``.
    """
    if not config_path:
        return path
    cfg_dir = os.path.dirname(os.path.abspath(config_path))
    if _device_of(cfg_dir) != _device_of(path):
        return path
    return os.path.relpath(path, cfg_dir)


def rewrite_all_paths(regions: Mapping[K, Any], old_config: str | None, new_config: str | None) -> dict[K, Any]:
    """Re-anchor every region's ``path`` from ``old_config`` to ``new_config``.

    Regions are dataclasses carrying a ``path`` field; new instances are returned.
    """
    out: dict[K, Any] = {}
    for key, region in regions.items():
        absolute = to_absolute(region.path, old_config)
        out[key] = dataclasses.replace(region, path=to_relative(absolute, new_config))
    return out
