from __future__ import annotations

from typing import Any

from PySide6.QtCore import Property, QObject, QUrl, Signal, Slot
from PySide6.QtGui import QGuiApplication

from matte_maker.app.state.matte_state import MatteState
from matte_maker.document.model import BoxId, ConfigFormatError, CropRect
from matte_maker.logger import get_logger
from matte_maker.ops.matte_controller import MatteController
from matte_maker.render.process_runner import ProcessRunner, SubprocessRunner
from matte_maker.render.render_worker import RenderController

_logger = get_logger("backend")


class MatteBackend(QObject):
    """Single backend object the window talks to.

    UI → Python: backend.dispatch(cmd, payload)
    Python → UI: backend.event(dict), backend.taskEvent(dict)
    UI bindings: backend.matte
    """

    # QObject already has an .event() handler method, so we must not shadow it.
    event_ = Signal(object, name="event")
    taskEvent = Signal(object, name="taskEvent")

    def __init__(
        self,
        controller: MatteController,
        runner: ProcessRunner | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._matte = MatteState(self)

        self._render = RenderController(runner or SubprocessRunner(), self)
        self._render.started.connect(self._on_render_started)
        self._render.finished.connect(self._on_render_finished)
        self._render.failed.connect(self._on_render_failed)

        self._sync_state()

    def _get_matte(self) -> QObject:
        return self._matte

    matte = Property(QObject, _get_matte, constant=True)  # type: ignore[arg-type]

    @property
    def controller(self) -> MatteController:
        return self._controller

    @property
    def render_controller(self) -> RenderController:
        return self._render

    # ---- command entry ----
    @Slot(str, "QVariant")  # type: ignore[call-overload]
    def dispatch(self, cmd: str, payload: object | None = None) -> None:  # noqa: PLR0911, PLR0912
        command = str(cmd or "").strip()
        if not command:
            self._emit_event("error", "error", "Empty cmd")
            return

        try:
            if command == "new":
                self._controller.new_matte()
                self._sync_state()
                return

            if command == "open":
                self._cmd_open(payload)
                return

            if command == "save":
                self._cmd_save()
                return

            if command == "saveAs":
                self._cmd_save_as(payload)
                return

            if command == "export":
                self._cmd_export(payload)
                return

            if command == "copyCommand":
                self._cmd_copy_command()
                return

            if command == "setTemplate":
                index = int(_get_payload_value(payload, "index", default=payload))
                self._controller.change_template(index)
                self._sync_state()
                return

            if command == "setFont":
                self._cmd_set_font(payload)
                return

            if command == "removeImage":
                self._controller.remove_image(_payload_box(payload))
                self._sync_state()
                return

            if command == "assignImage":
                path = _local_path(_get_payload_value(payload, "path", default=""))
                if not path:
                    return
                self._controller.assign_image(_payload_box(payload), path)
                self._sync_state()
                return

            if command == "setCrop":
                self._cmd_set_crop(payload)
                return

            if command == "setCaption":
                caption = _get_payload_value(payload, "caption", default=None)
                self._controller.set_caption(_payload_box(payload), None if caption is None else str(caption))
                self._sync_state()
                return
        except (KeyError, ValueError, IndexError, TypeError) as e:
            _logger.warning("command %s rejected: %s", command, e)
            self._emit_event("error", "error", f"{command}: {e}")
            return
        except OSError as e:
            _logger.error("command %s failed: %s", command, e)
            self._emit_event("error", "error", f"{command} failed: {e}")
            return

        self._emit_event("error", "warning", f"Unknown cmd: {command}")

    # ---- cmd handlers ----
    def _cmd_open(self, payload: object | None) -> None:
        path = _local_path(_get_payload_value(payload, "path", default=payload))
        if not path:
            doc = self._controller.document
            self.event_.emit({"type": "event", "name": "needOpenFile", "defaultPath": doc.save_file or ""})
            return
        try:
            self._controller.load(path)
        except ConfigFormatError as e:
            _logger.error("config load failed: %s", e)
            self._emit_event("error", "error", f"Could not open {path}: {e}")
            return
        self._sync_state()
        self._emit_event("toast", "info", f"Loaded config {path}")

    def _cmd_save(self) -> None:
        if not self._controller.save():
            self.event_.emit({"type": "event", "name": "needSaveFile"})
            return
        self._emit_event("toast", "info", f"Config saved to {self._controller.document.save_file}")

    def _cmd_save_as(self, payload: object | None) -> None:
        path = _local_path(_get_payload_value(payload, "path", default=payload))
        if not path:
            self.event_.emit({"type": "event", "name": "needSaveFile"})
            return
        self._controller.save_as(path)
        self._sync_state()
        self._emit_event("toast", "info", f"Config saved to {self._controller.document.save_file}")

    def _cmd_export(self, payload: object | None) -> None:
        out = _local_path(_get_payload_value(payload, "outputPath", default=payload))
        if not out:
            self.event_.emit({"type": "event", "name": "needExportPath"})
            return
        argv = self._controller.convert_argv(out)
        if not self._render.start(argv, out):
            self._emit_event("toast", "warning", "An export is already running; please wait for it to finish")

    def _cmd_copy_command(self) -> None:
        text = self._controller.copy_command_text()
        cb = QGuiApplication.clipboard()
        if cb is None:
            _logger.warning("clipboard unavailable; convert command not copied")
            self._emit_event("error", "warning", "Clipboard unavailable; convert command not copied")
            return
        cb.setText(text)
        _logger.debug("copied convert command (%d chars)", len(text))
        self._emit_event("toast", "info", "Copied convert command to clipboard")

    def _cmd_set_font(self, payload: object | None) -> None:
        name = str(_get_payload_value(payload, "imFontName", default=payload) or "")
        if self._controller.change_font_by_name(name) is None:
            fallback = self._controller.fallback_font
            self._emit_event(
                "toast",
                "warning",
                f'Unable to find font "{name}" locally; falling back on {fallback.css_font_family}',
            )
            self._controller.change_font(fallback)
        self._sync_state()

    def _cmd_set_crop(self, payload: object | None) -> None:
        crop = CropRect(
            x=int(_get_payload_value(payload, "x", default=0)),
            y=int(_get_payload_value(payload, "y", default=0)),
            width=int(_get_payload_value(payload, "width", default=0)),
            height=int(_get_payload_value(payload, "height", default=0)),
        )
        if crop.width <= 0 or crop.height <= 0 or crop.x < 0 or crop.y < 0:
            raise ValueError(f"invalid crop {crop}")
        self._controller.set_crop(_payload_box(payload), crop)
        self._sync_state()

    # ---- render slots ----
    @Slot(str)
    def _on_render_started(self, output_path: str) -> None:
        self._matte._set_rendering(True)
        self.taskEvent.emit({"type": "task", "name": "render", "state": "started", "outputPath": output_path})
        self._emit_event("toast", "info", f"Exporting PNG to {output_path}, please wait...")

    @Slot(str, str)
    def _on_render_finished(self, output_path: str, warnings: str) -> None:
        self._matte._set_rendering(False)
        self.taskEvent.emit(
            {"type": "task", "name": "render", "state": "finished", "outputPath": output_path, "warnings": warnings}
        )
        with_warnings = f" with warnings: {warnings}" if warnings else ""
        self._emit_event("toast", "info", f"Exported PNG to {output_path}{with_warnings}")

    @Slot(str, str)
    def _on_render_failed(self, output_path: str, message: str) -> None:
        self._matte._set_rendering(False)
        self.taskEvent.emit(
            {"type": "task", "name": "render", "state": "error", "outputPath": output_path, "message": message}
        )
        self.event_.emit(
            {"type": "event", "name": "infoBox", "level": "error", "title": "Exporting Error", "message": message}
        )

    # ---- helpers ----
    def _emit_event(self, name: str, level: str, message: str) -> None:
        self.event_.emit({"type": "event", "name": name, "level": level, "message": message})

    def _sync_state(self) -> None:
        doc = self._controller.document
        self._matte._set_template_index(doc.template_index)
        self._matte._set_font(doc.css_font_family, doc.im_font_name)
        self._matte._set_save_file(doc.save_file)
        self._matte.regionsChanged.emit()


def _local_path(value: object) -> str:
    p = str(value or "")
    if p.startswith("file:"):
        url = QUrl(p)
        if url.isLocalFile():
            p = url.toLocalFile()
    return p


def _payload_box(payload: object | None) -> BoxId:
    return BoxId(str(_get_payload_value(payload, "box", default="")))


def _get_payload_value(payload: object | None, key: str, *, default: Any) -> Any:
    """Extract a value from a command payload.

    Supports:
    - dict-like payloads (Python dict)
    - None
    - otherwise returns default
    """

    if payload is None:
        return default

    if isinstance(payload, dict):
        return payload.get(key, default)

    return default
