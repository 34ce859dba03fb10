"""ImageMagick ``convert`` argument generation for the final matte.

The argument vector is a fixed grammar: the flags and their order determine
what ImageMagick draws, so changes here change the rendered output. Every
region becomes a parenthesised sub-image (load, normalize, crop, resize,
optional caption) composited at its box position on a black canvas.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from matte_maker.document.model import BoxId, RegionMetrics
from matte_maker.layout.geometry import MATTE_FULL_HEIGHT, MATTE_WIDTH, round_half_up
from matte_maker.logger import get_logger
from matte_maker.path_utils import to_absolute

_logger = get_logger("convert_command")

CONVERT_PROGRAM = "convert"
POINT_SIZE = 72
CAPTION_WIDTH_FRACTION = 0.85
CAPTION_HEIGHT = 225
# (opacity, sigma) pairs stacked under the caption, outermost last.
CAPTION_SHADOWS: tuple[tuple[int, int], ...] = ((100, 6), (90, 12), (80, 20))


class MissingCropError(AssertionError):
    """A region without crop data reached the command generator."""


def caption_text(caption: str | None) -> str:
    """Caption as passed to ``-annotate``; newlines become a literal backslash-n."""
    return (caption or "").strip().replace("\n", "\\n")


def caption_args(caption: str, render_width: int) -> list[str]:
    """White caption text with a soft three-layer shadow, anchored bottom-centre."""
    args = [
        "(",
        "-background",
        "none",
        "-size",
        f"{round_half_up(render_width * CAPTION_WIDTH_FRACTION)}x{CAPTION_HEIGHT}",
        "xc:none",
        "-stroke",
        "none",
        "-fill",
        "white",
        "-gravity",
        "south",
        "-annotate",
        "0",
        caption_text(caption),
        "-fill",
        "black",
    ]
    for opacity, sigma in CAPTION_SHADOWS:
        args += ["(", "+clone", "-shadow", f"{opacity}x{sigma}+0+0", ")", "+swap"]
    args += [
        "-layers",
        "merge",
        "+repage",
        ")",
        "-gravity",
        "south",
        "-geometry",
        "+0+0",
        "-composite",
    ]
    return args


def region_args(box: BoxId, region: RegionMetrics, save_file: str | None = None) -> list[str]:
    crop = region.crop
    if crop is None:
        raise MissingCropError(f"{box.value} has no crop; callers must only pass cropped regions")

    args = [
        "(",
        to_absolute(region.path, save_file),
        "-normalize",
        "-crop",
        f"{crop.width}x{crop.height}+{crop.x}+{crop.y}",
        "-resize",
        f"{region.width}x{region.height}",
    ]
    if caption_text(region.caption):
        args += caption_args(region.caption or "", region.width)
    args += [
        ")",
        "-gravity",
        "northwest",
        "-geometry",
        f"+{region.position.left}+{region.position.top}",
        "-composite",
    ]
    return args


def build_render_command(
    regions: Mapping[BoxId, RegionMetrics] | Iterable[tuple[BoxId, RegionMetrics]],
    *,
    font_name: str,
    save_file: str | None = None,
    output_path: str = "out.png",
    canvas_size: tuple[int, int] = (MATTE_WIDTH, MATTE_FULL_HEIGHT),
) -> list[str]:
    """Build the ``convert`` arguments (program name excluded) rendering ``regions``.

    Regions are emitted in box-id order regardless of input order. Relative
    image paths are resolved against ``save_file``.

    Raises:
        MissingCropError: a region has no crop.
    """
    items = regions.items() if isinstance(regions, Mapping) else regions
    ordered = sorted(items, key=lambda kv: kv[0].index)

    width, height = canvas_size
    args = [
        "-size",
        f"{width}x{height}",
        "-font",
        font_name,
        "-pointsize",
        str(POINT_SIZE),
        "xc:black",
    ]
    for box, region in ordered:
        args += region_args(box, region, save_file)
    args.append(output_path)

    _logger.debug("render command: %d regions, %d args -> %s", len(ordered), len(args), output_path)
    return args
