"""Image header probing using pyvips.

Pure functions, no Qt dependencies.
"""

from typing import Any

from matte_maker.document.model import CropRect
from matte_maker.logger import get_logger

_logger = get_logger("image_probe")

try:
    import pyvips  # type: ignore
except ImportError:
    pyvips = None  # type: ignore
    _logger.warning("pyvips is not available; image probing will raise ImportError when used")


def _get_pyvips_module() -> Any:
    """Return the pyvips module or raise ImportError if unavailable."""
    if pyvips is None:
        _logger.error("pyvips requested but not available")
        raise ImportError("pyvips is not available")
    return pyvips


def probe_size(path: str) -> tuple[int, int]:
    """Return (width, height) of the image at ``path`` without decoding pixels.

    Raises:
        ImportError: pyvips is missing.
        Exception: pyvips cannot open the file.
    """
    vips = _get_pyvips_module()
    try:
        image = vips.Image.new_from_file(path, access="sequential")
    except Exception as e:
        _logger.error("Failed to open image %s: %s", path, e)
        raise
    return int(image.width), int(image.height)


def cover_crop(img_width: int, img_height: int, box_width: int, box_height: int) -> CropRect:
    """Largest centred crop of the image with the box's aspect ratio.

    Resizing the crop to the box then fills it without distortion.
    """
    if img_width <= 0 or img_height <= 0 or box_width <= 0 or box_height <= 0:
        raise ValueError(f"invalid sizes: image {img_width}x{img_height}, box {box_width}x{box_height}")

    box_aspect = box_width / box_height
    if img_width / img_height > box_aspect:
        # Image is wider than the box: trim the sides.
        height = img_height
        width = max(1, min(img_width, round(img_height * box_aspect)))
    else:
        width = img_width
        height = max(1, min(img_height, round(img_width / box_aspect)))
    return CropRect(x=(img_width - width) // 2, y=(img_height - height) // 2, width=width, height=height)
