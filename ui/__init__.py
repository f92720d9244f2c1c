"""User interface components."""

from .map_view import MapView
from .toolbar import ToolBar
from .main_window import MainWindow

__all__ = ["MapView", "ToolBar", "MainWindow"]
