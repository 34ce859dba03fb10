"""Scaled preview of the matte: template boxes, placed images and captions."""

from __future__ import annotations

import math

from PySide6.QtCore import QPoint, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QFont, QMouseEvent, QPainter, QPaintEvent, QPixmap
from PySide6.QtWidgets import QWidget

from .app.backend import MatteBackend
from .document.model import BoxId
from .layout.geometry import MATTE_FULL_HEIGHT, MATTE_WIDTH, Rect
from .layout.templates import template_boxes
from .logger import get_logger

_logger = get_logger("ui_canvas")

SCALE = 0.252
EMPTY_BOX_COLOR = QColor(60, 60, 60)
CAPTION_POINT_SIZE = 72


class MatteCanvas(QWidget):
    """Draws the current document at preview scale.

    Emits ``boxClicked(box_id)`` and ``boxDoubleClicked(box_id)``; the window
    decides what a click means (assign, remove, caption).
    """

    boxClicked = Signal(str)
    boxDoubleClicked = Signal(str)

    def __init__(self, backend: MatteBackend, parent: QWidget | None = None):
        super().__init__(parent)
        self._backend = backend
        self._pixmaps: dict[str, QPixmap] = {}
        self.setFixedSize(math.ceil(MATTE_WIDTH * SCALE), math.floor(MATTE_FULL_HEIGHT * SCALE))
        backend.matte.regionsChanged.connect(self._on_regions_changed)
        backend.matte.cssFontFamilyChanged.connect(self.update)

    def _on_regions_changed(self) -> None:
        self.prune_pixmap_cache()
        self.update()

    def prune_pixmap_cache(self) -> None:
        """Drop cached pixmaps of images no longer placed in the document."""
        controller = self._backend.controller
        live = {controller.image_path(box) for box in controller.document.regions}
        for path in [p for p in self._pixmaps if p not in live]:
            del self._pixmaps[path]

    def _scaled(self, rect: Rect) -> QRectF:
        return QRectF(rect.x * SCALE, rect.y * SCALE, rect.width * SCALE, rect.height * SCALE)

    def _pixmap(self, path: str) -> QPixmap:
        pix = self._pixmaps.get(path)
        if pix is None:
            pix = QPixmap(path)
            if pix.isNull():
                _logger.warning("preview could not load %s", path)
            self._pixmaps[path] = pix
        return pix

    def box_at(self, pos: QPoint) -> BoxId | None:
        doc = self._backend.controller.document
        for box, rect in template_boxes(doc.template_index).items():
            if self._scaled(rect).contains(pos.x(), pos.y()):
                return box
        return None

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: ARG002
        controller = self._backend.controller
        doc = controller.document
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, True)
        painter.fillRect(self.rect(), Qt.GlobalColor.black)

        caption_font = QFont(doc.css_font_family)
        caption_font.setBold(True)
        caption_font.setPointSizeF(max(1.0, CAPTION_POINT_SIZE * SCALE))

        for box, rect in template_boxes(doc.template_index).items():
            target = self._scaled(rect)
            region = doc.regions.get(box)
            if region is None:
                painter.fillRect(target, EMPTY_BOX_COLOR)
                painter.setPen(Qt.GlobalColor.lightGray)
                painter.drawText(target, Qt.AlignmentFlag.AlignCenter, box.value)
                continue

            pix = self._pixmap(controller.image_path(box))
            if pix.isNull() or region.crop is None:
                painter.fillRect(target, EMPTY_BOX_COLOR)
            else:
                crop = region.crop
                painter.drawPixmap(target, pix, QRectF(crop.x, crop.y, crop.width, crop.height))

            if region.caption and region.caption.strip():
                painter.setFont(caption_font)
                painter.setPen(Qt.GlobalColor.white)
                painter.drawText(
                    target,
                    int(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom),
                    region.caption.strip(),
                )
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        box = self.box_at(event.position().toPoint())
        if box is not None and event.button() == Qt.MouseButton.LeftButton:
            self.boxClicked.emit(box.value)
        super().mousePressEvent(event)

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        box = self.box_at(event.position().toPoint())
        if box is not None:
            self.boxDoubleClicked.emit(box.value)
        super().mouseDoubleClickEvent(event)
