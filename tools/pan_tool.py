"""Pan tool: drag the map with the mouse."""

from typing import Optional

from PySide6.QtCore import QPointF, QRectF

from .base_tool import KeyStroke, MapTool


class PanTool(MapTool):
    """Move the visible area of the map by dragging.

    Releasing Escape during a drag moves the map back to where the
    drag started.
    """

    cursor_name = "pan"

    def __init__(self, surface):
        super().__init__(surface)
        self.drag_start: Optional[QPointF] = None
        self.initial_visible_area: Optional[QRectF] = None

    def mouse_down(self, point: QPointF, event=None):
        self.surface.set_tool_cursor("panclicked")

    def mouse_clicked(self, point: QPointF, event=None):
        self.set_default_cursor()

    def start_drag(self, point: QPointF, event=None):
        self.drag_start = QPointF(point)
        self.initial_visible_area = self.surface.visible_area()

    def update_drag(self, point: QPointF, event=None):
        # missed the start of the drag, e.g. the tool was swapped in mid-drag
        if self.drag_start is None:
            self.drag_start = QPointF(point)
            self.initial_visible_area = self.surface.visible_area()
            return
        dx = self.drag_start.x() - point.x()
        dy = self.drag_start.y() - point.y()
        self.surface.offset_visible_area(dx, dy)

    def end_drag(self, point: QPointF, event=None):
        self.drag_start = None
        self.set_default_cursor()

    def is_dragging(self) -> bool:
        return self.drag_start is not None

    def key_event(self, stroke: KeyStroke) -> bool:
        if self.is_escape_release(stroke) and self.drag_start is not None:
            self.drag_start = None
            if self.initial_visible_area is not None:
                self.surface.zoom_on_rectangle(self.initial_visible_area)
            self.set_default_cursor()
        return False
