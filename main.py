#!/usr/bin/env python
"""Flex Map Tools - Interactive map viewer with modifier-key tool switching.

Usage:
    python main.py [map_file]

Controls:
    - Hold Space: Pan temporarily
    - Hold Ctrl (Command on macOS): Zoom in temporarily
    - Hold Ctrl+Alt: Zoom out temporarily
    - Mouse wheel: Zoom at the pointer (View menu toggles this)
    - V / H / Z / X / R: Select, Pan, Zoom In, Zoom Out, Rectangle tool
    - Delete or Backspace: Remove selected objects
    - Ctrl+0: Show all
    - Ctrl+O / Ctrl+S: Open / Save
    - Ctrl+Z / Ctrl+Shift+Z: Undo / Redo
"""

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

import config
from ui.main_window import MainWindow


def main():
    """Main entry point."""
    logging.basicConfig(level=logging.INFO, format=config.LOG_FORMAT)

    # Enable high DPI scaling
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Flex Map Tools")
    app.setApplicationVersion("1.0.0")

    # Create main window
    window = MainWindow()
    window.show()

    # If a map file was provided as argument, load it
    if len(sys.argv) > 1:
        path = Path(sys.argv[1])
        if path.is_file():
            window.open_map(path)
        else:
            logging.getLogger(__name__).warning("Not a map file: %s", path)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
