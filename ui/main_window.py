"""Main application window."""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QStatusBar, QLabel, QMessageBox, QFileDialog, QApplication
)
from PySide6.QtGui import QKeySequence, QShortcut, QAction

import config
from core.geo_objects import GeoSet
from core.persistence import load_map, save_map
from tools.draw_tool import DrawRectangleTool
from tools.pan_tool import PanTool
from tools.selection_tool import SelectionTool
from tools.zoom_tools import ZoomInTool, ZoomOutTool
from .key_dispatch import install_key_dispatch
from .map_view import MapView
from .progress_worker import run_with_progress
from .toolbar import ToolBar

logger = logging.getLogger(__name__)

TOOL_CLASSES = {
    "select": SelectionTool,
    "pan": PanTool,
    "zoom_in": ZoomInTool,
    "zoom_out": ZoomOutTool,
    "draw": DrawRectangleTool,
}


class MainWindow(QMainWindow):
    """Main application window around a single map view.

    Manages:
    - Persistent tool selection from the toolbar and shortcuts
    - Open/save of map documents in a worker thread
    - Undo/redo
    - Status bar with pointer coordinates and map scale
    """

    def __init__(self):
        super().__init__()
        self.setMinimumSize(900, 600)

        self._current_path: Optional[Path] = None
        self._runner = None

        self._setup_ui()
        self._setup_menus()
        self._setup_shortcuts()
        self._connect_signals()

        app = QApplication.instance()
        if app is not None:
            self.key_filter = install_key_dispatch(app, self.map_view.dispatcher, self)

        self._update_title()

    def _setup_ui(self):
        """Create the main layout."""
        # Toolbar
        self.toolbar = ToolBar()
        self.addToolBar(self.toolbar)

        # Map
        self.map_view = MapView()
        self.setCentralWidget(self.map_view)

        # Status bar
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.coordinates_label = QLabel("")
        self.coordinates_label.setMinimumWidth(200)
        self.scale_label = QLabel("")
        self.status_bar.addPermanentWidget(self.coordinates_label)
        self.status_bar.addPermanentWidget(self.scale_label)
        self.status_bar.showMessage("Ready - Open a map or draw rectangles")
        self._on_scale_changed(self.map_view.scale_factor())

    def _setup_menus(self):
        """Create the menu bar."""
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction("Open...", self.open_map_dialog)
        file_menu.addAction("Save", self.save_map)
        file_menu.addAction("Save As...", self.save_map_as)
        file_menu.addSeparator()
        file_menu.addAction("Quit", self.close)

        edit_menu = self.menuBar().addMenu("&Edit")
        self.undo_action = edit_menu.addAction("Undo", self.map_view.undo)
        self.redo_action = edit_menu.addAction("Redo", self.map_view.redo)
        self.undo_action.setEnabled(False)
        self.redo_action.setEnabled(False)

        view_menu = self.menuBar().addMenu("&View")
        view_menu.addAction("Show All", self.map_view.show_all)
        self.wheel_zoom_action = QAction("Zoom with Mouse Wheel", self)
        self.wheel_zoom_action.setCheckable(True)
        self.wheel_zoom_action.setChecked(self.map_view.dispatcher.zoom_with_mouse_wheel)
        self.wheel_zoom_action.toggled.connect(self._on_wheel_zoom_toggled)
        view_menu.addAction(self.wheel_zoom_action)

    def _setup_shortcuts(self):
        """Set up keyboard shortcuts."""
        shortcuts = config.SHORTCUTS

        # Tools
        QShortcut(QKeySequence(shortcuts["select_tool"]), self,
                  lambda: self.toolbar.set_tool("select"))
        QShortcut(QKeySequence(shortcuts["pan_tool"]), self,
                  lambda: self.toolbar.set_tool("pan"))
        QShortcut(QKeySequence(shortcuts["zoom_in_tool"]), self,
                  lambda: self.toolbar.set_tool("zoom_in"))
        QShortcut(QKeySequence(shortcuts["zoom_out_tool"]), self,
                  lambda: self.toolbar.set_tool("zoom_out"))
        QShortcut(QKeySequence(shortcuts["draw_tool"]), self,
                  lambda: self.toolbar.set_tool("draw"))

        # View
        QShortcut(QKeySequence(shortcuts["show_all"]), self, self.map_view.show_all)

        # File
        QShortcut(QKeySequence(shortcuts["open"]), self, self.open_map_dialog)
        QShortcut(QKeySequence(shortcuts["save"]), self, self.save_map)

        # Undo
        QShortcut(QKeySequence(shortcuts["undo"]), self, self.map_view.undo)
        QShortcut(QKeySequence(shortcuts["redo"]), self, self.map_view.redo)

    def _connect_signals(self):
        """Connect signals between components."""
        self.toolbar.tool_changed.connect(self._on_tool_changed)
        self.toolbar.open_requested.connect(self.open_map_dialog)
        self.toolbar.save_requested.connect(self.save_map)
        self.toolbar.undo_requested.connect(self.map_view.undo)
        self.toolbar.redo_requested.connect(self.map_view.redo)

        self.map_view.scale_changed.connect(self._on_scale_changed)
        self.map_view.map_changed.connect(self._update_title)
        self.map_view.undo_manager.add_listener(self._on_undo_state_changed)
        self.map_view.dispatcher.add_motion_listener(self._on_pointer_moved)

    def _on_tool_changed(self, tool_name: str):
        """Handle tool change."""
        tool = TOOL_CLASSES[tool_name](self.map_view)
        self.map_view.set_tool(tool)
        logger.debug("Selected tool: %s", tool_name)

    def _on_wheel_zoom_toggled(self, checked: bool):
        self.map_view.dispatcher.zoom_with_mouse_wheel = checked

    def _on_scale_changed(self, scale: float):
        self.scale_label.setText(f"Scale: {scale:.3g} px/unit")

    def _on_undo_state_changed(self, can_undo: bool, can_redo: bool):
        self.toolbar.set_undo_state(can_undo, can_redo)
        manager = self.map_view.undo_manager
        self.undo_action.setEnabled(can_undo)
        self.redo_action.setEnabled(can_redo)
        self.undo_action.setText(f"Undo {manager.undo_name()}" if can_undo else "Undo")
        self.redo_action.setText(f"Redo {manager.redo_name()}" if can_redo else "Redo")

    def _on_pointer_moved(self, point, surface):
        if point is None:
            self.coordinates_label.setText("")
        else:
            self.coordinates_label.setText(f"X: {point.x():.2f}  Y: {point.y():.2f}")

    def _update_title(self):
        name = self._current_path.name if self._current_path else "Untitled"
        marker = "*" if self.map_view.geo_set.modified else ""
        self.setWindowTitle(f"{marker}{name} - Flex Map Tools")

    # File operations

    def open_map_dialog(self):
        if not self._confirm_discard_changes():
            return
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Map", "", config.MAP_FILE_FILTER
        )
        if path:
            self.open_map(Path(path))

    def open_map(self, path: Path):
        """Load a map document in the background."""
        path = Path(path)
        if not path.exists():
            self._show_error(f"File not found: {path}")
            return
        self.status_bar.showMessage(f"Loading {path.name}...")

        def on_result(geo_set: GeoSet):
            self._current_path = path
            self.map_view.set_geo_set(geo_set)
            self._update_title()
            self.status_bar.showMessage(f"Loaded: {path.name} ({len(geo_set)} objects)")

        self._start_runner("Opening map", lambda monitor: load_map(path, monitor), on_result)

    def save_map(self):
        """Save to the current file, asking for a name the first time."""
        if self._current_path is None:
            self.save_map_as()
            return
        self._save_to(self._current_path)

    def save_map_as(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Map", "", config.MAP_FILE_FILTER
        )
        if not path:
            return
        path = Path(path)
        if not path.name.endswith(config.MAP_FILE_SUFFIX):
            path = path.with_name(path.name + config.MAP_FILE_SUFFIX)
        self._save_to(path)

    def _save_to(self, path: Path):
        # the worker writes a snapshot so the map can't change under it
        geo_set = self.map_view.geo_set
        saved_state = geo_set.to_dict()
        snapshot = GeoSet.from_dict(saved_state)
        self.status_bar.showMessage(f"Saving {path.name}...")

        def on_result(_):
            self._current_path = path
            # edits made while the worker ran are not in the file
            if self.map_view.geo_set is geo_set and geo_set.to_dict() == saved_state:
                geo_set.mark_saved()
            self._update_title()
            self.status_bar.showMessage(f"Saved: {path.name}")

        self._start_runner("Saving map", lambda monitor: save_map(snapshot, path, monitor), on_result)

    def _start_runner(self, title: str, fn, on_result):
        self._runner = run_with_progress(
            self, title, fn, on_result=on_result, on_error=self._show_error
        )
        self._runner.worker.aborted.connect(
            lambda: self.status_bar.showMessage("Cancelled")
        )
        self._runner.destroyed.connect(self._forget_runner)

    def _forget_runner(self):
        self._runner = None

    def _show_error(self, message: str):
        self.status_bar.showMessage("Error")
        QMessageBox.critical(self, "Error", message)

    def _confirm_discard_changes(self) -> bool:
        """Ask before replacing a modified map. Returns True to go ahead."""
        if not self.map_view.geo_set.modified:
            return True
        reply = QMessageBox.question(
            self,
            "Unsaved Changes",
            "The map has unsaved changes. Discard them?",
            QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Cancel
        )
        return reply == QMessageBox.Discard

    def closeEvent(self, event):
        """Handle window close with unsaved changes check."""
        if self._runner is not None and self._runner.is_running():
            self._runner.cancel()
            self._runner.wait()

        if not self.map_view.geo_set.modified:
            event.accept()
            return

        reply = QMessageBox.question(
            self,
            "Unsaved Changes",
            "The map has unsaved changes.\n\nSave before closing?",
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Save
        )

        if reply == QMessageBox.Save:
            if self._save_before_close():
                event.accept()
            else:
                event.ignore()
        elif reply == QMessageBox.Discard:
            event.accept()
        else:
            event.ignore()

    def _save_before_close(self) -> bool:
        path = self._current_path
        if path is None:
            name, _ = QFileDialog.getSaveFileName(
                self, "Save Map", "", config.MAP_FILE_FILTER
            )
            if not name:
                return False
            path = Path(name)
        try:
            save_map(self.map_view.geo_set, path)
        except OSError as e:
            logger.error("Could not save %s: %s", path, e)
            self._show_error(f"Could not save {path.name}: {e}")
            return False
        return True
