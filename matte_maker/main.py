import os
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QFileDialog, QInputDialog, QMainWindow, QMessageBox

from matte_maker.app.backend import MatteBackend
from matte_maker.document.model import BoxId, ConfigFormatError
from matte_maker.layout.templates import TEMPLATES, validate_catalog
from matte_maker.logger import get_logger
from matte_maker.ops.matte_controller import MatteController
from matte_maker.render.fonts import list_bold_fonts
from matte_maker.render.process_runner import SubprocessRunner
from matte_maker.settings_manager import SettingsManager
from matte_maker.ui_canvas import MatteCanvas
from matte_maker.ui_menus import build_menus

# --- CLI logging options -----------------------------------------------------
# To prevent Qt from exiting due to unknown options, we preemptively parse
# our own options, reflect them in environment variables (MATTE_MAKER_LOG_LEVEL,
# MATTE_MAKER_LOG_CATS), and remove them from sys.argv.


def _apply_cli_logging_options() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Matte Maker", add_help=False)
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    args, remaining = parser.parse_known_args()
    if args.log_level:
        os.environ["MATTE_MAKER_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["MATTE_MAKER_LOG_CATS"] = args.log_cats
    sys.argv[:] = [sys.argv[0], *remaining]


_apply_cli_logging_options()
logger = get_logger("main")
_BASE_DIR = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parent))

NOTICE_MS = 2000
IMAGE_FILTER = "Images (*.jpg *.jpeg *.png *.tif *.tiff *.webp *.heic *.gif *.bmp)"
CONFIG_FILTER = "JSON Configs (*.json)"


class MainWindow(QMainWindow):
    def __init__(self, backend: MatteBackend):
        super().__init__()
        self.backend = backend
        self.setWindowTitle("Matte Maker")
        self._removing = False

        # Menu/action placeholders (populated in build_menus)
        self.export_action = None
        self.template_group = None
        self.template_actions: list = []
        self.font_group = None
        self.font_actions: dict = {}

        self.canvas = MatteCanvas(backend, self)
        self.canvas.boxClicked.connect(self._on_box_clicked)
        self.canvas.boxDoubleClicked.connect(self._on_box_double_clicked)
        self.setCentralWidget(self.canvas)

        build_menus(self)

        backend.event_.connect(self._on_backend_event)
        state = backend.matte
        state.templateIndexChanged.connect(self._sync_template_menu)
        state.imFontNameChanged.connect(self._sync_font_menu)
        state.saveFileChanged.connect(self._sync_title)
        state.renderingChanged.connect(lambda busy: self.export_action.setEnabled(not busy))
        self._sync_template_menu(state.templateIndex)
        self._sync_font_menu(state.imFontName)
        self._sync_title(state.saveFile)

    # ---- dialogs ----
    def _config_dir(self) -> str:
        doc = self.backend.controller.document
        if doc.save_file:
            return os.path.dirname(doc.save_file)
        return self.backend.controller.settings.last_config_dir or os.path.expanduser("~")

    def open_config(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open Matte Config", self._config_dir(), CONFIG_FILTER)
        if path:
            self.backend.dispatch("open", {"path": path})

    def save_config_as(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Save Matte Config", self._config_dir(), CONFIG_FILTER)
        if path:
            self.backend.dispatch("saveAs", {"path": path})

    def export_png(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Export as PNG", self._config_dir(), "PNG files (*.png)")
        if path:
            self.backend.dispatch("export", {"outputPath": path})

    def begin_remove(self) -> None:
        self._removing = True
        self.statusBar().showMessage("Select box to remove image from", NOTICE_MS)

    # ---- canvas interaction ----
    def _on_box_clicked(self, box_id: str) -> None:
        if self._removing:
            self._removing = False
            self.backend.dispatch("removeImage", {"box": box_id})
            return
        if BoxId(box_id) in self.backend.controller.document.regions:
            return
        path, _ = QFileDialog.getOpenFileName(self, f"Choose image for {box_id}", self._config_dir(), IMAGE_FILTER)
        if path:
            self.backend.dispatch("assignImage", {"box": box_id, "path": path})

    def _on_box_double_clicked(self, box_id: str) -> None:
        region = self.backend.controller.document.regions.get(BoxId(box_id))
        if region is None:
            return
        text, ok = QInputDialog.getMultiLineText(self, "Caption", f"Caption for {box_id}:", region.caption or "")
        if ok:
            self.backend.dispatch("setCaption", {"box": box_id, "caption": text})

    # ---- backend events ----
    def _on_backend_event(self, ev: dict) -> None:
        name = ev.get("name")
        if name == "toast":
            self.statusBar().showMessage(str(ev.get("message", "")), NOTICE_MS)
        elif name == "infoBox":
            QMessageBox.information(self, str(ev.get("title", "")), str(ev.get("message", "")))
        elif name == "error":
            QMessageBox.warning(self, "Matte Maker", str(ev.get("message", "")))
        elif name == "needSaveFile":
            self.save_config_as()
        elif name == "needOpenFile":
            self.open_config()
        elif name == "needExportPath":
            self.export_png()

    def _sync_template_menu(self, index: int) -> None:
        if 0 <= index < len(self.template_actions):
            self.template_actions[index].setChecked(True)

    def _sync_font_menu(self, im_font_name: str) -> None:
        action = self.font_actions.get(im_font_name)
        if action is not None:
            action.setChecked(True)

    def _sync_title(self, save_file: str) -> None:
        self.setWindowTitle(f"Matte Maker - {save_file}" if save_file else "Matte Maker")

    def closeEvent(self, event) -> None:
        self.backend.render_controller.wait()
        super().closeEvent(event)


def build_backend(settings: SettingsManager, config_path: str | None = None) -> MatteBackend:
    """Wire controller and backend, restoring the previous session or ``config_path``."""
    validate_catalog()
    runner = SubprocessRunner()
    fonts = list_bold_fonts(runner, settings.convert_executable)
    controller = MatteController(settings, fonts=fonts)

    if config_path and os.path.exists(config_path):
        try:
            controller.load(config_path)
        except (OSError, ConfigFormatError) as e:
            logger.error("could not open %s: %s", config_path, e)
    else:
        controller.restore_autosave()

    backend = MatteBackend(controller, runner)
    if fonts:
        # Re-select so a font missing on this machine falls back with a notice.
        backend.dispatch("setFont", {"imFontName": controller.document.im_font_name})
    logger.debug("startup: template=%s", TEMPLATES[controller.document.template_index].name)
    return backend


def run(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv
    import argparse

    parser = argparse.ArgumentParser(description="Matte Maker")
    parser.add_argument("config", nargs="?", help="Matte config (.json) to open")
    args, _ = parser.parse_known_args(argv[1:])

    app = QApplication(argv)
    settings = SettingsManager((_BASE_DIR / "settings.json").as_posix())
    backend = build_backend(settings, args.config)

    window = MainWindow(backend)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
