# vizr/ui/main_window.py
from __future__ import annotations
from typing import Any, Optional
from vizr.qt import QtCore, QtGui, QtWidgets
from vizr.core.config import Settings, get_settings
from vizr.core.logging import get_logger
from vizr.core.sources import read_payload_text
from vizr.ui.player_widget import PlayerWidget
from vizr.ui.inspector_tabs import InspectorTabs
from vizr.ui.theme import apply_fusion_theme
from app_config import APP_NAME, APP_PNG, PAYLOAD_FILE_FILTER

class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, settings: Optional[Settings] = None, dark: Optional[bool] = None,
                 autostart: bool = True):
        super().__init__()
        self._log = get_logger(__name__)
        self.setWindowTitle(APP_NAME)
        if QtCore.QFileInfo.exists(APP_PNG):
            self.setWindowIcon(QtGui.QIcon(APP_PNG))
        self.resize(1100, 640)
        self.settings = settings or get_settings()

        if dark is None:
            dark = self.settings.get_bool("ui/dark_mode")
        self.player = PlayerWidget(self, dark=dark, autostart=autostart)
        self.inspector = InspectorTabs(self)
        self.inspector.setVisible(self.settings.get_bool("ui/show_inspector"))

        splitter = QtWidgets.QSplitter()
        splitter.addWidget(self.player)
        splitter.addWidget(self.inspector)
        splitter.setStretchFactor(0, 1)
        self.setCentralWidget(splitter)

        self.player.visualizationApplied.connect(self.inspector.show_scene)
        self.player.darkModeToggled.connect(self._on_dark_toggled)

        self._build_menu()
        self._restore_state()

    # Menus
    def _build_menu(self):
        bar = self.menuBar()
        file_menu = bar.addMenu("&File")

        open_act = QtGui.QAction("&Open visualization...", self)
        open_act.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self._open_dialog)
        file_menu.addAction(open_act)

        sample_act = QtGui.QAction("Load &sample", self)
        sample_act.triggered.connect(self.player.load_sample)
        file_menu.addAction(sample_act)

        file_menu.addSeparator()
        exit_act = QtGui.QAction("E&xit", self)
        exit_act.triggered.connect(self.close)
        file_menu.addAction(exit_act)

        edit_menu = bar.addMenu("&Edit")
        paste_act = QtGui.QAction("&Paste visualization", self)
        paste_act.setShortcut(QtGui.QKeySequence.StandardKey.Paste)
        paste_act.triggered.connect(self.paste_visualization)
        edit_menu.addAction(paste_act)

        view_menu = bar.addMenu("&View")
        self.play_act = QtGui.QAction("&Play / Pause", self)
        self.play_act.setShortcut(QtGui.QKeySequence(QtCore.Qt.Key.Key_Space))
        self.play_act.triggered.connect(self.player.toggle_play)
        view_menu.addAction(self.play_act)

        self.dark_act = QtGui.QAction("&Dark mode", self, checkable=True)
        self.dark_act.setChecked(self.player.dark)
        self.dark_act.toggled.connect(self.set_dark)
        view_menu.addAction(self.dark_act)

        inspector_act = QtGui.QAction("Show &inspector", self, checkable=True)
        inspector_act.setChecked(self.settings.get_bool("ui/show_inspector"))
        inspector_act.toggled.connect(self._on_inspector_toggled)
        view_menu.addAction(inspector_act)

        debug_act = QtGui.QAction("&Log debug dump", self)
        debug_act.triggered.connect(self.player.log_debug)
        view_menu.addAction(debug_act)

    # Payload delivery
    def deliver(self, payload: Any) -> None:
        """Hand a new payload to the player; replaces the current scene."""
        self.inspector.show_payload(payload)
        self.player.set_visualization(payload)

    def open_path(self, path: str) -> bool:
        try:
            text = read_payload_text(path)
        except (OSError, UnicodeDecodeError) as ex:
            self._log.warning("Could not read %s: %s", path, ex)
            QtWidgets.QMessageBox.warning(self, APP_NAME, f"Could not read {path}:\n{ex}")
            return False
        self.deliver(text)
        return True

    def _open_dialog(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(
            self, "Open visualization", self.settings.get("paths/last_open_dir", ""), PAYLOAD_FILE_FILTER
        )
        if not path:
            return
        self.settings.set("paths/last_open_dir", QtCore.QFileInfo(path).absolutePath())
        self.open_path(path)

    def paste_visualization(self):
        text = QtGui.QGuiApplication.clipboard().text()
        if not text.strip():
            self._log.info("Paste ignored: clipboard is empty")
            return
        self.deliver(text)

    # Theme
    @QtCore.Slot(bool)
    def set_dark(self, dark: bool) -> None:
        if self.player.dark != dark:
            self.player.set_dark(dark)
        self._on_dark_toggled(dark)

    def _on_dark_toggled(self, dark: bool) -> None:
        self.settings.set("ui/dark_mode", bool(dark))
        if self.dark_act.isChecked() != dark:
            self.dark_act.blockSignals(True)
            self.dark_act.setChecked(dark)
            self.dark_act.blockSignals(False)
        app = QtWidgets.QApplication.instance()
        if isinstance(app, QtWidgets.QApplication):
            apply_fusion_theme(app, dark)

    def _on_inspector_toggled(self, visible: bool) -> None:
        self.inspector.setVisible(visible)
        self.settings.set("ui/show_inspector", bool(visible))

    def _restore_state(self):
        g = self.settings.get("ui/main_geometry")
        if isinstance(g, QtCore.QByteArray):
            self.restoreGeometry(g)

    def closeEvent(self, e: QtGui.QCloseEvent) -> None:
        self.settings.set("ui/main_geometry", self.saveGeometry())
        self.player.shutdown()
        return super().closeEvent(e)

    def dev_seed_from_config(self) -> None:
        """Auto-open DEV_STARTUP_VIZ when DEV_MODE is on."""
        from app_config import DEV_MODE, DEV_STARTUP_VIZ
        import os
        if not DEV_MODE:
            return
        path = (DEV_STARTUP_VIZ or "").strip()
        if path and os.path.isabs(path) and os.path.exists(path):
            self.open_path(path)
