from __future__ import annotations

from PySide6.QtCore import Property, QObject, Signal


class MatteState(QObject):
    """Bindable view of the current document for the window and canvas."""

    templateIndexChanged = Signal(int)
    cssFontFamilyChanged = Signal(str)
    imFontNameChanged = Signal(str)
    saveFileChanged = Signal(str)
    renderingChanged = Signal(bool)
    regionsChanged = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._template_index = 0
        self._css_font_family = "Arial"
        self._im_font_name = "Arial-Bold"
        self._save_file = ""
        self._rendering = False

    # ---- read-only properties (mutate via backend) ----
    def _get_template_index(self) -> int:
        return int(self._template_index)

    templateIndex = Property(int, _get_template_index, notify=templateIndexChanged)  # type: ignore[arg-type]

    def _get_css_font_family(self) -> str:
        return str(self._css_font_family)

    cssFontFamily = Property(str, _get_css_font_family, notify=cssFontFamilyChanged)  # type: ignore[arg-type]

    def _get_im_font_name(self) -> str:
        return str(self._im_font_name)

    imFontName = Property(str, _get_im_font_name, notify=imFontNameChanged)  # type: ignore[arg-type]

    def _get_save_file(self) -> str:
        return str(self._save_file)

    saveFile = Property(str, _get_save_file, notify=saveFileChanged)  # type: ignore[arg-type]

    def _get_rendering(self) -> bool:
        return bool(self._rendering)

    rendering = Property(bool, _get_rendering, notify=renderingChanged)  # type: ignore[arg-type]

    # ---- internal mutation helpers (called by backend) ----
    def _set_template_index(self, index: int) -> None:
        i = int(index)
        if i == self._template_index:
            return
        self._template_index = i
        self.templateIndexChanged.emit(i)

    def _set_font(self, css_font_family: str, im_font_name: str) -> None:
        css = str(css_font_family)
        im = str(im_font_name)
        if css != self._css_font_family:
            self._css_font_family = css
            self.cssFontFamilyChanged.emit(css)
        if im != self._im_font_name:
            self._im_font_name = im
            self.imFontNameChanged.emit(im)

    def _set_save_file(self, path: str | None) -> None:
        p = str(path or "")
        if p == self._save_file:
            return
        self._save_file = p
        self.saveFileChanged.emit(p)

    def _set_rendering(self, value: bool) -> None:
        v = bool(value)
        if v == self._rendering:
            return
        self._rendering = v
        self.renderingChanged.emit(v)
