"""Built-in matte layouts.

Left-hand family (the right-hand one is mirrored)::

    +---------+----------+
    |         |    2     |
    |         +-----+----+
    |    1    |  4  |    |
    |         +--+--+ 3  |
    |         | 5|6 |    |
    +---------+--+--+----+

Numbers are display ids after all cuts of the 6-box layout. Each cut refers to
the box list as it stands when the cut runs, not to the final numbering.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from matte_maker.document.model import BoxId
from matte_maker.logger import get_logger

from .geometry import CutInstruction, Edge, Rect, TemplateError, partition, pct

_logger = get_logger("templates")


@dataclass(frozen=True, slots=True)
class Template:
    name: str
    cuts: tuple[CutInstruction, ...]
    top_buffer: bool = False


def _cuts(*spec: tuple[int, Edge, float]) -> tuple[CutInstruction, ...]:
    return tuple(CutInstruction(box, edge, pct(value)) for box, edge, value in spec)


_L, _R, _T = Edge.LEFT, Edge.RIGHT, Edge.TOP

TEMPLATES: tuple[Template, ...] = (
    Template("Left, 6 Boxes", _cuts((0, _L, 0.4818), (1, _T, 0.4891), (2, _R, 0.4432), (3, _T, 0.48), (4, _L, 0.48))),
    Template(
        "Left, 7 Boxes",
        _cuts((0, _L, 0.4818), (1, _T, 0.4891), (2, _R, 0.4432), (3, _T, 0.48), (4, _L, 0.48), (5, _T, 0.47)),
    ),
    Template("Left, 5 Boxes", _cuts((0, _L, 0.4818), (1, _T, 0.4891), (2, _R, 0.4432), (3, _T, 0.48))),
    Template("Right, 6 Boxes", _cuts((0, _R, 0.4818), (1, _T, 0.4891), (2, _L, 0.4432), (3, _T, 0.48), (4, _R, 0.48))),
    Template(
        "Right, 7 Boxes",
        _cuts((0, _R, 0.4818), (1, _T, 0.4891), (2, _L, 0.4432), (3, _T, 0.48), (4, _R, 0.48), (5, _T, 0.47)),
    ),
    Template("Right, 5 Boxes", _cuts((0, _R, 0.4818), (1, _T, 0.4891), (2, _L, 0.4432), (3, _T, 0.48))),
    Template(
        "Cover (Left)",
        _cuts((0, _L, 0.4818), (1, _T, 0.4891), (2, _R, 0.4432), (3, _T, 0.48)),
        top_buffer=True,
    ),
)


def partition_template(template: Template) -> list[tuple[BoxId, Rect]]:
    return partition(template.cuts, top_buffer=template.top_buffer)


@lru_cache(maxsize=None)
def _boxes_for(index: int) -> tuple[tuple[BoxId, Rect], ...]:
    return tuple(partition_template(TEMPLATES[index]))


def template_boxes(index: int) -> dict[BoxId, Rect]:
    """Boxes of the catalog template at ``index`` (cached).

    Raises:
        IndexError: ``index`` is not a catalog position.
    """
    if not 0 <= index < len(TEMPLATES):
        raise IndexError(f"no template at index {index}")
    return dict(_boxes_for(index))


def validate_catalog() -> None:
    """Partition every template once; any authoring bug aborts startup."""
    for i, template in enumerate(TEMPLATES):
        try:
            boxes = _boxes_for(i)
        except TemplateError:
            _logger.critical("template %d (%s) is invalid", i, template.name)
            raise
        _logger.debug("template %d (%s): %d boxes", i, template.name, len(boxes))
