"""Forward migrations for persisted matte configs.

Each step upgrades a raw config dict from one ``version`` to the next. Steps
are listed explicitly so each can be exercised on its own; versions with no
step are carried forward unchanged.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from matte_maker.logger import get_logger

_logger = get_logger("migrations")

CURRENT_VERSION = 2
DEFAULT_CSS_FONT_FAMILY = "Arial"

# Migration function signature: (settings: dict) -> None, mutating in place.
MigrationFn = Callable[[dict[str, Any]], None]


def bold_font_name(css_font_family: str) -> str:
    """ImageMagick name of the bold face for a CSS family ("Times New Roman" -> "TimesNewRoman-Bold")."""
    return f"{css_font_family.replace(' ', '')}-Bold"


def _default_version(settings: dict[str, Any]) -> None:
    settings["version"] = 0


def _upgrade_font_fields(settings: dict[str, Any]) -> None:
    # v1 stored only the CSS family under "fontFamily".
    legacy = settings.pop("fontFamily", None)
    if isinstance(legacy, str) and legacy:
        settings["cssFontFamily"] = legacy
        settings["imFontName"] = bold_font_name(legacy)
        return
    settings.setdefault("cssFontFamily", DEFAULT_CSS_FONT_FAMILY)
    settings.setdefault("imFontName", bold_font_name(settings["cssFontFamily"]))


MIGRATIONS: list[tuple[int | None, MigrationFn]] = [
    (None, _default_version),
    (1, _upgrade_font_fields),
]


def _step_for(version: int | None) -> MigrationFn | None:
    for from_version, fn in MIGRATIONS:
        if from_version == version:
            return fn
    return None


def migrate_settings(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` upgraded to ``CURRENT_VERSION``.

    A missing or null version is treated as pre-versioning. Documents already at
    (or beyond) the current version come back unchanged.
    """
    settings = copy.deepcopy(dict(raw))
    settings.setdefault("version", None)
    if settings["version"] is not None and (
        isinstance(settings["version"], bool) or not isinstance(settings["version"], int)
    ):
        _logger.warning("unrecognized settings version %r; leaving document as-is", settings["version"])
        return settings

    while settings["version"] is None or settings["version"] < CURRENT_VERSION:
        version = settings["version"]
        fn = _step_for(version)
        if fn is not None:
            fn(settings)
            _logger.debug("applied settings migration from version %s", version)
        if version is None:
            # Defaulting already set the version; the next pass handles 0.
            continue
        settings["version"] = version + 1

    return settings
