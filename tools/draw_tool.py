"""Tool for drawing new rectangular map objects."""

from PySide6.QtCore import QPointF

from .rectangle_tool import RectangleTool


class DrawRectangleTool(RectangleTool):
    """Drag to add a rectangle to the map.

    A rectangle being drawn survives a pause, so the user can pan with
    the space key and then finish it.
    """

    cursor_name = "crosshair"

    def end_drag(self, point: QPointF, event=None):
        rect = self.get_rectangle()
        large_enough = self.is_rectangle_large_enough()
        super().end_drag(point, event)
        if large_enough:
            self.surface.add_object(rect)

    def deactivate(self):
        self.clear_rectangle()
        super().deactivate()
