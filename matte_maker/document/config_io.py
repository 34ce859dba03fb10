"""Reading and writing matte config files.

On-disk shape (keys kept stable across versions)::

    {"version": 2, "curTemplate": 0, "cssFontFamily": "...", "imFontName": "...",
     "metrics": {"box1": {"crop": {...}, "width": .., "height": .., "pos": {...},
                          "path": "...", "caption": "..."}},
     "savedAt": "2024-01-01T00:00:00.000Z"}

The auto-save slot additionally carries ``saveFile``; explicit saves omit it
because the file's own location is the save file.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from matte_maker.logger import get_logger

from .migrations import CURRENT_VERSION, migrate_settings
from .model import BoxId, ConfigFormatError, Document, RegionMetrics

_logger = get_logger("config_io")


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def to_config_dict(doc: Document, *, include_save_file: bool = True, saved_at: str | None = None) -> dict[str, Any]:
    out: dict[str, Any] = {
        "metrics": {box.value: region.to_dict() for box, region in doc.sorted_regions()},
        "curTemplate": doc.template_index,
        "cssFontFamily": doc.css_font_family,
        "imFontName": doc.im_font_name,
        "version": CURRENT_VERSION,
        "savedAt": saved_at or utc_timestamp(),
    }
    if include_save_file:
        out["saveFile"] = doc.save_file
    return out


def from_config_dict(
    raw: Mapping[str, Any],
    *,
    save_file: str | None = None,
) -> Document:
    """Migrate and validate a raw config dict into a Document.

    ``save_file`` overrides any ``saveFile`` recorded in the dict (a file that
    was opened is its own save file).
    """
    if not isinstance(raw, Mapping):
        raise ConfigFormatError("config root must be a JSON object")
    settings = migrate_settings(raw)

    template_index = settings.get("curTemplate", 0)
    if isinstance(template_index, bool) or not isinstance(template_index, int):
        raise ConfigFormatError(f"curTemplate must be an integer, got {template_index!r}")

    metrics = settings.get("metrics") or {}
    if not isinstance(metrics, Mapping):
        raise ConfigFormatError("metrics must be an object")

    regions: dict[BoxId, RegionMetrics] = {}
    for key, value in metrics.items():
        if value is None:
            continue
        try:
            box = BoxId(key)
        except ValueError:
            raise ConfigFormatError(f"unknown box id {key!r}") from None
        regions[box] = RegionMetrics.from_dict(value)

    stored_save_file = settings.get("saveFile")
    return Document(
        template_index=template_index,
        regions=regions,
        css_font_family=str(settings.get("cssFontFamily") or "Arial"),
        im_font_name=str(settings.get("imFontName") or "Arial-Bold"),
        save_file=save_file if save_file is not None else (stored_save_file or None),
        saved_at=settings.get("savedAt"),
    )


def write_config_file(doc: Document, path: str) -> dict[str, Any]:
    """Write ``doc`` to ``path`` as pretty-printed JSON; returns what was written."""
    payload = to_config_dict(doc, include_save_file=False)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    _logger.info("config saved: %s", path)
    return payload


def read_config_file(path: str) -> dict[str, Any]:
    """Load the raw JSON of a config file.

    Raises:
        OSError: the file cannot be read.
        ConfigFormatError: the file is not a JSON object.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFormatError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigFormatError(f"{path} does not contain a JSON object")
    _logger.debug("config read: %s (savedAt=%s)", path, data.get("savedAt"))
    return data
