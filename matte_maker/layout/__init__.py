"""Layout package public API.

Pure geometry: no Qt imports here, so the partitioner can be used by the
command generator, the tests, and the preview canvas alike.
"""

from .geometry import (
    BUFFER_SIZE,
    GUTTER,
    LAYOUT_HEIGHT,
    MATTE_FULL_HEIGHT,
    MATTE_WIDTH,
    CutInstruction,
    Edge,
    Ratio,
    Rect,
    TemplateError,
    aspect,
    partition,
    pct,
)
from .templates import TEMPLATES, Template, partition_template, template_boxes, validate_catalog

__all__ = [
    "BUFFER_SIZE",
    "GUTTER",
    "LAYOUT_HEIGHT",
    "MATTE_FULL_HEIGHT",
    "MATTE_WIDTH",
    "TEMPLATES",
    "CutInstruction",
    "Edge",
    "Ratio",
    "Rect",
    "Template",
    "TemplateError",
    "aspect",
    "partition",
    "partition_template",
    "pct",
    "template_boxes",
    "validate_catalog",
]
