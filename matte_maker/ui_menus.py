from typing import TYPE_CHECKING

from PySide6.QtGui import QAction, QActionGroup, QKeySequence

from .layout.templates import TEMPLATES
from .logger import get_logger

if TYPE_CHECKING:
    from .main import MainWindow

_logger = get_logger("ui_menus")


def build_menus(window: "MainWindow") -> None:
    """Build the menu bar; every action maps to one backend command."""
    menu_bar = window.menuBar()
    backend = window.backend

    # File menu
    file_menu = menu_bar.addMenu("File(&F)")
    new_action = QAction("New Matte(&N)", window)
    new_action.setShortcut(QKeySequence("Ctrl+N"))
    new_action.triggered.connect(lambda: backend.dispatch("new", None))
    file_menu.addAction(new_action)
    file_menu.addSeparator()

    open_action = QAction("Open Matte Config...(&O)", window)
    open_action.setShortcut(QKeySequence("Ctrl+O"))
    open_action.triggered.connect(window.open_config)
    file_menu.addAction(open_action)

    save_action = QAction("Save Matte Config(&S)", window)
    save_action.setShortcut(QKeySequence("Ctrl+S"))
    save_action.triggered.connect(lambda: backend.dispatch("save", None))
    file_menu.addAction(save_action)

    save_as_action = QAction("Save Matte Config As...(&A)", window)
    save_as_action.triggered.connect(window.save_config_as)
    file_menu.addAction(save_as_action)
    file_menu.addSeparator()

    window.export_action = QAction("Export as PNG...(&E)", window)
    window.export_action.setShortcut(QKeySequence("Ctrl+E"))
    window.export_action.triggered.connect(window.export_png)
    file_menu.addAction(window.export_action)
    file_menu.addSeparator()

    exit_action = QAction("Exit(&X)", window)
    exit_action.triggered.connect(window.close)
    file_menu.addAction(exit_action)

    # Edit menu
    edit_menu = menu_bar.addMenu("Edit(&E)")
    copy_action = QAction("Copy Convert Command(&C)", window)
    copy_action.setShortcut(QKeySequence("Ctrl+C"))
    copy_action.triggered.connect(lambda: backend.dispatch("copyCommand", None))
    edit_menu.addAction(copy_action)
    edit_menu.addSeparator()

    remove_action = QAction("Remove Image(&R)", window)
    remove_action.triggered.connect(window.begin_remove)
    edit_menu.addAction(remove_action)

    # Template menu (radio group)
    template_menu = menu_bar.addMenu("Template(&T)")
    window.template_group = QActionGroup(window)
    window.template_group.setExclusive(True)
    window.template_actions = []
    for i, template in enumerate(TEMPLATES):
        action = QAction(template.name, window, checkable=True)
        action.triggered.connect(lambda _checked=False, i=i: backend.dispatch("setTemplate", {"index": i}))
        window.template_group.addAction(action)
        template_menu.addAction(action)
        window.template_actions.append(action)

    # Font menu (radio group over installed bold fonts)
    font_menu = menu_bar.addMenu("Font(&O)")
    window.font_group = QActionGroup(window)
    window.font_group.setExclusive(True)
    window.font_actions = {}
    for font in backend.controller.fonts:
        action = QAction(font.css_font_family, window, checkable=True)
        action.triggered.connect(
            lambda _checked=False, name=font.im_font_name: backend.dispatch("setFont", {"imFontName": name})
        )
        window.font_group.addAction(action)
        font_menu.addAction(action)
        window.font_actions[font.im_font_name] = action
    if not window.font_actions:
        empty = QAction("(no bold fonts found)", window)
        empty.setEnabled(False)
        font_menu.addAction(empty)

    _logger.debug("menus built: %d templates, %d fonts", len(TEMPLATES), len(window.font_actions))
