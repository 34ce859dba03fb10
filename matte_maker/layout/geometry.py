"""Recursive canvas partitioning.

A layout starts as one rectangle covering the matte and is refined by an
ordered list of cuts. Each cut pops the rectangle at ``target_index`` and
appends two pieces: the *primary* piece anchored at the named edge, then the
*remainder*, separated from it by a fixed gutter. Box numbering therefore
follows append order, and templates are written against that order.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from matte_maker.document.model import BoxId

MATTE_WIDTH = 4200
MATTE_FULL_HEIGHT = 3250
BUFFER_SIZE = 120
LAYOUT_HEIGHT = MATTE_FULL_HEIGHT - BUFFER_SIZE
GUTTER = 50


class TemplateError(ValueError):
    """A layout template cannot be partitioned (authoring bug)."""


class Edge(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def horizontal(self) -> bool:
        """True for cuts that split the width (left/right)."""
        return self in (Edge.LEFT, Edge.RIGHT)


class RatioKind(str, Enum):
    PCT = "pct"
    ASPECT = "aspect"


@dataclass(frozen=True, slots=True)
class Ratio:
    """Primary piece size: a fraction of the target, or an aspect (w/h) against the other axis."""

    kind: RatioKind
    value: float


def pct(value: float) -> Ratio:
    return Ratio(RatioKind.PCT, float(value))


def aspect(value: float) -> Ratio:
    return Ratio(RatioKind.ASPECT, float(value))


@dataclass(frozen=True, slots=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    def overlaps(self, other: Rect) -> bool:
        return self.x < other.x2 and other.x < self.x2 and self.y < other.y2 and other.y < self.y2


@dataclass(frozen=True, slots=True)
class CutInstruction:
    target_index: int
    edge: Edge
    ratio: Ratio


def round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def _primary_thickness(rect: Rect, cut: CutInstruction) -> int:
    ratio = cut.ratio
    if ratio.kind is RatioKind.PCT:
        if not 0.0 < ratio.value < 1.0:
            raise TemplateError(f"pct ratio must be within (0, 1): {ratio.value}")
        along = rect.width if cut.edge.horizontal else rect.height
        return round_half_up(along * ratio.value)

    if ratio.value <= 0:
        raise TemplateError(f"aspect ratio must be positive: {ratio.value}")
    # aspect is width/height: derive the cut-axis size from the perpendicular one.
    if cut.edge.horizontal:
        return round_half_up(rect.height * ratio.value)
    return round_half_up(rect.width / ratio.value)


def cut_rect(rect: Rect, cut: CutInstruction, gutter: int = GUTTER) -> tuple[Rect, Rect]:
    """Split ``rect`` into (primary, remainder) according to ``cut``."""
    x, y, w, h = rect.x, rect.y, rect.width, rect.height
    thick = _primary_thickness(rect, cut)
    along = w if cut.edge.horizontal else h
    rest = along - thick - gutter
    if thick <= 0 or rest <= 0:
        raise TemplateError(f"cut {cut} leaves a degenerate piece of {rect} (primary={thick}, remainder={rest})")

    if cut.edge is Edge.LEFT:
        return Rect(x, y, thick, h), Rect(x + thick + gutter, y, rest, h)
    if cut.edge is Edge.RIGHT:
        return Rect(x + w - thick, y, thick, h), Rect(x, y, rest, h)
    if cut.edge is Edge.TOP:
        return Rect(x, y, w, thick), Rect(x, y + thick + gutter, w, rest)
    return Rect(x, y + h - thick, w, thick), Rect(x, y, w, rest)


def partition(cuts: Iterable[CutInstruction], top_buffer: bool = False) -> list[tuple[BoxId, Rect]]:
    """Apply ``cuts`` to the matte and return the named boxes in order.

    Raises:
        TemplateError: a cut targets a missing box, produces a degenerate
            piece, or the layout needs more boxes than there are box ids.
    """
    boxes: list[Rect] = [Rect(0, BUFFER_SIZE if top_buffer else 0, MATTE_WIDTH, LAYOUT_HEIGHT)]
    for n, cut in enumerate(cuts):
        if not 0 <= cut.target_index < len(boxes):
            raise TemplateError(f"cut #{n} targets box {cut.target_index} but only {len(boxes)} exist")
        target = boxes.pop(cut.target_index)
        boxes.extend(cut_rect(target, cut))

    ids = list(BoxId)
    if len(boxes) > len(ids):
        raise TemplateError(f"layout produces {len(boxes)} boxes; at most {len(ids)} are supported")
    return list(zip(ids, boxes))
