"""Zoom in and zoom out tools."""

from PySide6.QtCore import Qt, QPointF

import config
from .base_tool import MapTool
from .rectangle_tool import RectangleTool


class ZoomInTool(RectangleTool):
    """Zoom in with a click, or onto a dragged rectangle.

    Clicking with any other button than the left one zooms out and
    briefly shows the zoom-out cursor.
    """

    cursor_name = "zoomin"

    def mouse_clicked(self, point: QPointF, event=None):
        super().mouse_clicked(point, event)
        button = self.mouse_button(event)
        if button == Qt.LeftButton:
            self.surface.zoom_in(point)
        elif button != Qt.NoButton:
            self._flash_zoom_out_cursor()
            self.surface.zoom_out(point)

    def end_drag(self, point: QPointF, event=None):
        rect = self.get_rectangle()
        large_enough = self.is_rectangle_large_enough()
        super().end_drag(point, event)
        if not large_enough:
            return
        button = self.mouse_button(event)
        if button == Qt.LeftButton:
            self.surface.zoom_on_rectangle(rect)
        elif button != Qt.NoButton:
            self._flash_zoom_out_cursor()
            self.surface.zoom_out(point)

    def _flash_zoom_out_cursor(self):
        self.surface.flash_cursor(
            "zoomout", self.cursor_name, config.ZOOM_OUT_CURSOR_VISIBLE_MS
        )


class ZoomOutTool(MapTool):
    """Zoom out with a click. A drag counts as a click where it ends."""

    cursor_name = "zoomout"

    def mouse_clicked(self, point: QPointF, event=None):
        self.surface.zoom_out(point)
