"""Selection tool: click or drag to select map objects."""

from PySide6.QtCore import QPointF

import config
from .rectangle_tool import RectangleTool


class SelectionTool(RectangleTool):
    """Select objects with a click or a rubber-band rectangle.

    Holding Shift extends the current selection instead of replacing it.
    """

    cursor_name = "selectionarrow"

    def end_drag(self, point: QPointF, event=None):
        rect = self.get_rectangle()
        super().end_drag(point, event)
        if rect is not None:
            self.surface.select_by_rectangle(rect, self.shift_down(event))
        self.set_default_cursor()

    def mouse_clicked(self, point: QPointF, event=None):
        super().mouse_clicked(point, event)
        self.surface.select_by_point(
            point, self.shift_down(event), config.CLICK_PIXEL_TOLERANCE
        )
