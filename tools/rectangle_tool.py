"""Rubber-band rectangle base tool."""

from typing import Optional

from PySide6.QtCore import QPointF, QRectF

import config
from .base_tool import KeyStroke, MapTool


class RectangleTool(MapTool):
    """Base for tools that let the user drag a rectangle.

    The rectangle is kept in world coordinates and exposed through
    overlay_rect() so the surface can draw it. Releasing Escape while
    dragging cancels the rectangle.
    """

    def __init__(self, surface):
        super().__init__(surface)
        self.drag_start: Optional[QPointF] = None
        self.drag_current: Optional[QPointF] = None

    def start_drag(self, point: QPointF, event=None):
        self.drag_start = QPointF(point)

    def update_drag(self, point: QPointF, event=None):
        # missed the start of the drag
        if self.drag_start is None:
            self.drag_start = QPointF(point)
            return
        self.drag_current = QPointF(point)
        self.surface.refresh()

    def end_drag(self, point: QPointF, event=None):
        self.clear_rectangle()

    def mouse_clicked(self, point: QPointF, event=None):
        self.clear_rectangle()

    def is_dragging(self) -> bool:
        return self.drag_start is not None

    def key_event(self, stroke: KeyStroke) -> bool:
        if self.is_escape_release(stroke):
            self.clear_rectangle()
        return False

    def clear_rectangle(self):
        """Forget the rectangle and remove it from the map."""
        self.drag_start = None
        self.drag_current = None
        self.surface.refresh()

    def get_rectangle(self) -> Optional[QRectF]:
        """Normalized rectangle between drag start and current position."""
        if self.drag_start is None or self.drag_current is None:
            return None
        x = min(self.drag_start.x(), self.drag_current.x())
        y = min(self.drag_start.y(), self.drag_current.y())
        w = abs(self.drag_current.x() - self.drag_start.x())
        h = abs(self.drag_current.y() - self.drag_start.y())
        return QRectF(x, y, w, h)

    def is_rectangle_large_enough(self) -> bool:
        """Check the rectangle is at least MIN_RECT_DIM_PX on screen."""
        rect = self.get_rectangle()
        if rect is None:
            return False
        min_dim = config.MIN_RECT_DIM_PX / self.surface.scale_factor()
        return rect.width() >= min_dim and rect.height() >= min_dim

    def overlay_rect(self) -> Optional[QRectF]:
        return self.get_rectangle()
