"""Pure transitions of the matte Document.

Every function takes a Document and returns a new one; nothing here touches
Qt or performs auto-save (see ``MatteController``).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from matte_maker.document.config_io import from_config_dict
from matte_maker.document.model import BoxId, ConfigFormatError, CropRect, Document, Position, RegionMetrics
from matte_maker.layout.geometry import Rect
from matte_maker.layout.templates import TEMPLATES, template_boxes
from matte_maker.path_utils import rewrite_all_paths, to_relative
from matte_maker.render.fonts import FontChoice


def new_document(font: FontChoice | None = None) -> Document:
    doc = Document()
    return set_font(doc, font) if font is not None else doc


def select_template(doc: Document, index: int) -> Document:
    """Switch layout; all placed images are discarded since box geometry changes."""
    template_boxes(index)
    return dataclasses.replace(doc, template_index=index, regions={})


def box_rect(doc: Document, box: BoxId) -> Rect:
    boxes = template_boxes(doc.template_index)
    if box not in boxes:
        raise KeyError(f"{box.value} is not part of template {TEMPLATES[doc.template_index].name!r}")
    return boxes[box]


def assign_image(doc: Document, box: BoxId, path: str, crop: CropRect | None) -> Document:
    """Place the image at absolute ``path`` into ``box``.

    Size and position come from the template; the stored path is made
    relative to the save file when both share a device.
    """
    rect = box_rect(doc, box)
    region = RegionMetrics(
        crop=crop,
        width=rect.width,
        height=rect.height,
        position=Position(top=rect.y, left=rect.x),
        path=to_relative(path, doc.save_file),
    )
    return _with_region(doc, box, region)


def update_crop(doc: Document, box: BoxId, crop: CropRect) -> Document:
    return _with_region(doc, box, dataclasses.replace(_region(doc, box), crop=crop))


def set_caption(doc: Document, box: BoxId, caption: str | None) -> Document:
    return _with_region(doc, box, dataclasses.replace(_region(doc, box), caption=caption))


def remove_image(doc: Document, box: BoxId) -> Document:
    if box not in doc.regions:
        return doc
    regions = dict(doc.regions)
    del regions[box]
    return dataclasses.replace(doc, regions=regions)


def set_font(doc: Document, font: FontChoice) -> Document:
    return dataclasses.replace(doc, css_font_family=font.css_font_family, im_font_name=font.im_font_name)


def rebase_save_file(doc: Document, new_save_file: str) -> Document:
    """Move the document to a new save file, re-anchoring relative image paths."""
    regions = rewrite_all_paths(doc.regions, doc.save_file, new_save_file)
    return dataclasses.replace(doc, regions=regions, save_file=new_save_file)


def renderable_regions(doc: Document) -> list[tuple[BoxId, RegionMetrics]]:
    """Regions ready for rendering (crop known), in box order."""
    return [(box, region) for box, region in doc.sorted_regions() if region.crop is not None]


def pending_regions(doc: Document) -> list[BoxId]:
    return [box for box, region in doc.sorted_regions() if region.crop is None]


def document_from_config(raw: Mapping[str, Any], save_file: str | None = None) -> Document:
    """Migrate, parse and check a config against the template catalog.

    Raises:
        ConfigFormatError: malformed config, unknown template, or regions that
            are not boxes of the selected template.
    """
    doc = from_config_dict(raw, save_file=save_file)
    try:
        boxes = template_boxes(doc.template_index)
    except IndexError:
        raise ConfigFormatError(f"unknown template index {doc.template_index}") from None
    stray = sorted(b.value for b in doc.regions if b not in boxes)
    if stray:
        raise ConfigFormatError(f"regions {stray} do not exist in template {TEMPLATES[doc.template_index].name!r}")
    return doc


def _region(doc: Document, box: BoxId) -> RegionMetrics:
    try:
        return doc.regions[box]
    except KeyError:
        raise KeyError(f"{box.value} has no image") from None


def _with_region(doc: Document, box: BoxId, region: RegionMetrics) -> Document:
    regions = dict(doc.regions)
    regions[box] = region
    return dataclasses.replace(doc, regions=regions)
