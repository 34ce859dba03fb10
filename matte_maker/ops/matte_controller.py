"""Owner of the in-memory matte document.

All edits go through ``MatteController``: it applies a pure transition from
``document_ops``, swaps the document, and writes the auto-save slot. The Qt
backend wraps it; tests drive it directly.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence

from matte_maker.document.config_io import read_config_file, to_config_dict, write_config_file
from matte_maker.document.model import BoxId, ConfigFormatError, CropRect, Document
from matte_maker.logger import get_logger
from matte_maker.path_utils import abs_path_str, to_absolute
from matte_maker.render.convert_command import build_render_command
from matte_maker.render.fonts import DEFAULT_FONT, FontChoice, find_font
from matte_maker.render.image_probe import cover_crop, probe_size
from matte_maker.render.shell_escape import format_command_line
from matte_maker.settings_manager import SettingsManager

from . import document_ops as ops

_logger = get_logger("matte_controller")

AUTOSAVE_KEY = "autosave"

SizeProbe = Callable[[str], tuple[int, int]]


class MatteController:
    def __init__(
        self,
        settings: SettingsManager,
        *,
        fonts: Sequence[FontChoice] = (),
        probe: SizeProbe = probe_size,
    ) -> None:
        self._settings = settings
        self._probe = probe
        self.fonts: list[FontChoice] = list(fonts)
        self._doc = ops.new_document()

    @property
    def document(self) -> Document:
        return self._doc

    @property
    def settings(self) -> SettingsManager:
        return self._settings

    @property
    def fallback_font(self) -> FontChoice:
        return self.fonts[0] if self.fonts else DEFAULT_FONT

    # ---- persistence ----
    def _commit(self, doc: Document) -> Document:
        self._doc = doc
        self.autosave()
        return doc

    def autosave(self) -> None:
        self._settings.set(AUTOSAVE_KEY, to_config_dict(self._doc, include_save_file=True))

    def restore_autosave(self) -> bool:
        """Resume the last session's document; False when there is none usable."""
        raw = self._settings.get(AUTOSAVE_KEY)
        if not isinstance(raw, dict):
            return False
        try:
            doc = ops.document_from_config(raw)
        except ConfigFormatError as e:
            _logger.warning("discarding unusable auto-save: %s", e)
            return False
        _logger.info("Loading settings saved at %s", doc.saved_at)
        self._doc = doc
        return True

    def save(self) -> bool:
        """Write to the current save file; False when there is none yet."""
        save_file = self._doc.save_file
        if not save_file:
            return False
        self._write(self._doc, save_file)
        return True

    def save_as(self, path: str) -> None:
        target = abs_path_str(path)
        # Relative image paths must follow the config to its new directory.
        self._write(ops.rebase_save_file(self._doc, target), target)

    def _write(self, doc: Document, save_file: str) -> None:
        # The document only switches over once the file is on disk.
        payload = write_config_file(doc, save_file)
        self._commit(dataclasses.replace(doc, saved_at=payload["savedAt"]))
        self._settings.remember_config_path(save_file)

    def load(self, path: str) -> Document:
        """Open a config file; it becomes the save file.

        Raises:
            OSError: the file cannot be read.
            ConfigFormatError: the file is not a usable config.
        """
        target = abs_path_str(path)
        raw = read_config_file(target)
        _logger.info("Loading settings from %s", target)
        doc = self._commit(ops.document_from_config(raw, save_file=target))
        self._settings.remember_config_path(target)
        return doc

    # ---- edits ----
    def new_matte(self) -> Document:
        doc = ops.select_template(self._doc, 0)
        return self._commit(dataclasses.replace(doc, save_file=None, saved_at=None))

    def change_template(self, index: int) -> Document:
        return self._commit(ops.select_template(self._doc, index))

    def assign_image(self, box: BoxId, path: str) -> Document:
        """Place an image with a centred cover crop.

        When the image size cannot be read the crop stays unset and the region
        is left out of renders until a crop is supplied.
        """
        absolute = abs_path_str(path)
        rect = ops.box_rect(self._doc, box)
        crop: CropRect | None = None
        try:
            img_w, img_h = self._probe(absolute)
            crop = cover_crop(img_w, img_h, rect.width, rect.height)
        except Exception as e:
            _logger.warning("could not read image size of %s: %s", absolute, e)
        return self._commit(ops.assign_image(self._doc, box, absolute, crop))

    def set_crop(self, box: BoxId, crop: CropRect) -> Document:
        return self._commit(ops.update_crop(self._doc, box, crop))

    def set_caption(self, box: BoxId, caption: str | None) -> Document:
        return self._commit(ops.set_caption(self._doc, box, caption))

    def remove_image(self, box: BoxId) -> Document:
        return self._commit(ops.remove_image(self._doc, box))

    def change_font(self, font: FontChoice) -> Document:
        return self._commit(ops.set_font(self._doc, font))

    def change_font_by_name(self, im_font_name: str) -> FontChoice | None:
        """Select an installed font by ImageMagick name; None when it is not installed."""
        font = find_font(self.fonts, im_font_name)
        if font is not None:
            self.change_font(font)
        return font

    # ---- rendering ----
    def image_path(self, box: BoxId) -> str:
        return to_absolute(self._doc.regions[box].path, self._doc.save_file)

    def render_args(self, output_path: str = "out.png") -> list[str]:
        pending = ops.pending_regions(self._doc)
        if pending:
            _logger.warning("skipping regions without crop: %s", ", ".join(b.value for b in pending))
        return build_render_command(
            ops.renderable_regions(self._doc),
            font_name=self._doc.im_font_name,
            save_file=self._doc.save_file,
            output_path=output_path,
        )

    def convert_argv(self, output_path: str) -> list[str]:
        return [self._settings.convert_executable, *self.render_args(output_path)]

    def copy_command_text(self) -> str:
        return format_command_line(self._settings.convert_executable, self.render_args())

