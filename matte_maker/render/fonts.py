"""Bold font discovery via ``convert -list font``.

ImageMagick prints blocks like::

      Font: DejaVu-Sans-Bold
        family: DejaVu Sans
        style: Normal
        glyphs: /usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf

Captions are always drawn bold, so only bold faces are offered, each paired
with the CSS family used for the on-screen preview.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass

from matte_maker.logger import get_logger

from .process_runner import ProcessRunner

_logger = get_logger("fonts")

_FONT_BLOCK = re.compile(r"^ {2}Font: (?P<name>.+)\n(?P<attrs>(?: {4}.+\n)+)", re.MULTILINE)
_FONT_ATTR = re.compile(r" {4}(?P<attr>\w+): (?P<val>.+)\n")
_BOLD_NAME = re.compile(r"Bold$")
_BOLD_GLYPHS = re.compile(r"Bold\.[a-zA-Z]+$")
_GLYPH_SUFFIX = re.compile(r"(?:[- ]?Bold)?\.[a-z]+$")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")


@dataclass(frozen=True, slots=True)
class ParsedFont:
    name: str
    family: str
    glyphs: str


@dataclass(frozen=True, slots=True)
class FontChoice:
    css_font_family: str
    im_font_name: str


DEFAULT_FONT = FontChoice("Arial", "Arial-Bold")


def parse_convert_list_font(output: str) -> list[ParsedFont]:
    fonts: list[ParsedFont] = []
    if not output.endswith("\n"):
        output += "\n"
    for block in _FONT_BLOCK.finditer(output):
        attrs = {m.group("attr"): m.group("val") for m in _FONT_ATTR.finditer(block.group("attrs"))}
        family = attrs.get("family")
        glyphs = attrs.get("glyphs")
        if family and glyphs:
            fonts.append(ParsedFont(block.group("name"), family, glyphs))
    return fonts


def bold_only(fonts: Iterable[ParsedFont]) -> list[ParsedFont]:
    return [f for f in fonts if _BOLD_NAME.search(f.name) or _BOLD_GLYPHS.search(f.glyphs or "")]


def no_cjk(fonts: Iterable[ParsedFont]) -> list[ParsedFont]:
    return [f for f in fonts if "CJK" not in (f.family or "")]


def infer_family(font: ParsedFont) -> str:
    """Declared family, or one guessed from the glyph file ("OpenSans-Bold.ttf" -> "Open Sans")."""
    if font.family != "unknown":
        return font.family
    stem = _GLYPH_SUFFIX.sub("", os.path.basename(font.glyphs or ""))
    return _CAMEL_BOUNDARY.sub(r"\1 \2", stem)


def normalize(fonts: Iterable[ParsedFont]) -> list[FontChoice]:
    return [FontChoice(css_font_family=infer_family(f), im_font_name=f.name) for f in fonts]


def sort_by_family(fonts: Iterable[FontChoice]) -> list[FontChoice]:
    return sorted(fonts, key=lambda f: f.css_font_family.lower())


def bold_fonts_from_listing(output: str) -> list[FontChoice]:
    return sort_by_family(normalize(bold_only(no_cjk(parse_convert_list_font(output)))))


def list_bold_fonts(runner: ProcessRunner, executable: str = "convert") -> list[FontChoice]:
    """Ask ImageMagick for its fonts and keep the bold, non-CJK ones.

    A non-zero exit still yields whatever was printed; a missing executable
    yields an empty list.
    """
    try:
        res = runner.run([executable, "-list", "font"])
    except OSError as e:
        _logger.warning("font listing failed (%s): %s", executable, e)
        return []
    if not res.ok:
        _logger.warning("font listing exited with %d: %s", res.returncode, res.stderr.strip())
    fonts = bold_fonts_from_listing(res.stdout)
    _logger.info("found %d bold fonts", len(fonts))
    return fonts


def find_font(fonts: Iterable[FontChoice], im_font_name: str) -> FontChoice | None:
    for f in fonts:
        if f.im_font_name == im_font_name:
            return f
    return None
