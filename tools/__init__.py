"""Map tools and the dispatcher that routes input to them."""

from .base_tool import KeyStroke, MapTool
from .rectangle_tool import RectangleTool
from .selection_tool import SelectionTool
from .pan_tool import PanTool
from .zoom_tools import ZoomInTool, ZoomOutTool
from .draw_tool import DrawRectangleTool
from .dispatcher import DispatcherState, ModifierState, ToolDispatcher

__all__ = [
    "KeyStroke",
    "MapTool",
    "RectangleTool",
    "SelectionTool",
    "PanTool",
    "ZoomInTool",
    "ZoomOutTool",
    "DrawRectangleTool",
    "DispatcherState",
    "ModifierState",
    "ToolDispatcher",
]
