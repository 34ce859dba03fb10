from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class ConfigFormatError(ValueError):
    """A matte config document is structurally invalid."""


class BoxId(str, Enum):
    """Display ids of layout boxes, in partition order."""

    BOX1 = "box1"
    BOX2 = "box2"
    BOX3 = "box3"
    BOX4 = "box4"
    BOX5 = "box5"
    BOX6 = "box6"
    BOX7 = "box7"

    @property
    def index(self) -> int:
        return list(BoxId).index(self)


@dataclass(frozen=True, slots=True)
class CropRect:
    """Crop in source-image pixels."""

    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return {"cropX": self.x, "cropY": self.y, "cropW": self.width, "cropH": self.height}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> CropRect:
        return cls(
            x=_as_int(raw, "cropX"),
            y=_as_int(raw, "cropY"),
            width=_as_int(raw, "cropW"),
            height=_as_int(raw, "cropH"),
        )


@dataclass(frozen=True, slots=True)
class Position:
    top: int
    left: int


@dataclass(frozen=True, slots=True)
class RegionMetrics:
    """Placement of one image inside a box.

    ``width``/``height`` are the rendered size (the box size), ``position`` is
    the box's top-left on the matte and ``path`` is relative to the save file
    whenever possible. ``crop`` is None until the crop is known.
    """

    crop: CropRect | None
    width: int
    height: int
    position: Position
    path: str
    caption: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "crop": self.crop.to_dict() if self.crop is not None else None,
            "width": self.width,
            "height": self.height,
            "pos": {"top": self.position.top, "left": self.position.left},
            "path": self.path,
        }
        if self.caption is not None:
            out["caption"] = self.caption
        return out

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RegionMetrics:
        if not isinstance(raw, Mapping):
            raise ConfigFormatError(f"region must be an object, got {type(raw).__name__}")
        crop_raw = raw.get("crop")
        if crop_raw is not None and not isinstance(crop_raw, Mapping):
            raise ConfigFormatError("region crop must be an object")
        pos = raw.get("pos")
        if not isinstance(pos, Mapping):
            raise ConfigFormatError("region is missing 'pos'")
        path = raw.get("path")
        if not isinstance(path, str) or not path:
            raise ConfigFormatError("region is missing 'path'")
        caption = raw.get("caption")
        return cls(
            crop=CropRect.from_dict(crop_raw) if crop_raw is not None else None,
            width=_as_int(raw, "width"),
            height=_as_int(raw, "height"),
            position=Position(top=_as_int(pos, "top"), left=_as_int(pos, "left")),
            path=path,
            caption=str(caption) if caption is not None else None,
        )


def _frozen_regions(regions: Mapping[BoxId, RegionMetrics] | None = None) -> Mapping[BoxId, RegionMetrics]:
    return MappingProxyType(dict(regions or {}))


@dataclass(frozen=True)
class Document:
    """The single in-memory matte. Transitions live in ``ops.document_ops``."""

    template_index: int = 0
    regions: Mapping[BoxId, RegionMetrics] = field(default_factory=_frozen_regions)
    css_font_family: str = "Arial"
    im_font_name: str = "Arial-Bold"
    save_file: str | None = None
    saved_at: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.regions, MappingProxyType):
            object.__setattr__(self, "regions", _frozen_regions(self.regions))

    def sorted_regions(self) -> list[tuple[BoxId, RegionMetrics]]:
        return sorted(self.regions.items(), key=lambda kv: kv[0].index)


def _as_int(raw: Mapping[str, Any], key: str) -> int:
    val = raw.get(key)
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        raise ConfigFormatError(f"expected a number for '{key}', got {val!r}")
    return int(round(val))
