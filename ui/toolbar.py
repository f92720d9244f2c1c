"""Toolbar for map tool selection and common actions."""

from PySide6.QtWidgets import (
    QToolBar, QWidget, QPushButton, QButtonGroup, QLabel, QSizePolicy
)
from PySide6.QtCore import Signal


class ToolBar(QToolBar):
    """Main toolbar with tool selection and action buttons.

    Provides:
    - Open/Save buttons
    - Undo/Redo buttons
    - Tool selection (Select, Pan, Zoom In, Zoom Out, Rectangle)
    - Current tool indicator
    """

    # Signals
    tool_changed = Signal(str)  # tool name
    open_requested = Signal()
    save_requested = Signal()
    undo_requested = Signal()
    redo_requested = Signal()

    def __init__(self, parent=None):
        super().__init__("Main Toolbar", parent)
        self.setMovable(False)
        self._current_tool = "select"
        self._tool_buttons = {}
        self._setup_ui()

    def _setup_ui(self):
        """Create the toolbar UI."""
        # File operations
        self.open_button = QPushButton("Open")
        self.open_button.clicked.connect(self.open_requested.emit)
        self.addWidget(self.open_button)

        self.save_button = QPushButton("Save")
        self.save_button.clicked.connect(self.save_requested.emit)
        self.addWidget(self.save_button)

        self.addSeparator()

        self.undo_button = QPushButton("Undo")
        self.undo_button.setEnabled(False)
        self.undo_button.clicked.connect(self.undo_requested.emit)
        self.addWidget(self.undo_button)

        self.redo_button = QPushButton("Redo")
        self.redo_button.setEnabled(False)
        self.redo_button.clicked.connect(self.redo_requested.emit)
        self.addWidget(self.redo_button)

        self.addSeparator()

        self.addWidget(QLabel("Tool:"))

        # Tool buttons
        self.tool_button_group = QButtonGroup(self)
        self.tool_button_group.setExclusive(True)

        for name, label, tip in (
            ("select", "Select", "Select objects, Shift extends (V)"),
            ("pan", "Pan", "Drag the map; hold Space for a moment (H)"),
            ("zoom_in", "Zoom In", "Click or drag to zoom in; hold Ctrl (Z)"),
            ("zoom_out", "Zoom Out", "Click to zoom out; hold Ctrl+Alt (X)"),
            ("draw", "Rectangle", "Drag to draw a rectangle (R)"),
        ):
            button = QPushButton(label)
            button.setCheckable(True)
            button.setToolTip(tip)
            button.setProperty("tool_name", name)
            self.tool_button_group.addButton(button)
            self.addWidget(button)
            self._tool_buttons[name] = button

        self._tool_buttons["select"].setChecked(True)
        self.tool_button_group.buttonClicked.connect(self._on_tool_button_clicked)

        # Spacer to push status to right
        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.addWidget(spacer)

        # Current tool indicator
        self.tool_indicator = QLabel("Tool: Select")
        self.tool_indicator.setStyleSheet("font-weight: bold; padding: 0 10px;")
        self.addWidget(self.tool_indicator)

    def _on_tool_button_clicked(self, button):
        """Handle tool button click."""
        self._set_tool(button.property("tool_name"))

    def _set_tool(self, tool_name: str):
        """Set the current tool."""
        self._current_tool = tool_name
        self.tool_indicator.setText(f"Tool: {self._tool_buttons[tool_name].text()}")
        self.tool_changed.emit(tool_name)

    def set_tool(self, tool_name: str):
        """Programmatically set the current tool."""
        if tool_name not in self._tool_buttons:
            raise ValueError(f"Unknown tool: {tool_name}")
        self._tool_buttons[tool_name].setChecked(True)
        self._set_tool(tool_name)

    def get_current_tool(self) -> str:
        """Get the current tool name."""
        return self._current_tool

    def set_undo_state(self, can_undo: bool, can_redo: bool):
        """Enable or disable the undo and redo buttons."""
        self.undo_button.setEnabled(can_undo)
        self.redo_button.setEnabled(can_redo)
