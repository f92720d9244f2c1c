"""Interactive map surface."""

import logging
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QPainter, QColor, QPen, QBrush, QCursor
from PySide6.QtCore import Qt, Signal, QPointF, QRectF, QTimer

import config
from core.geo_objects import GeoObject, GeoSet
from core.undo import UndoManager
from tools.base_tool import MapTool
from tools.dispatcher import ToolDispatcher
from . import focus_utils

logger = logging.getLogger(__name__)


class MapView(QWidget):
    """Widget displaying a map document and routing input to map tools.

    World coordinates have the y axis pointing up. The view is defined by
    a scale (pixels per world unit) and the world position of the
    widget's top-left corner. Pointer events are converted to world
    coordinates and handed to the ToolDispatcher; the tools call back
    into this widget to pan, zoom, select and edit.
    """

    # Signals
    scale_changed = Signal(float)
    selection_changed = Signal()
    map_changed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.geo_set = GeoSet()
        self.undo_manager = UndoManager()
        self.undo_manager.reset(self.geo_set.to_dict())

        self._scale = config.DEFAULT_SCALE
        self._top_left = QPointF(0.0, 0.0)
        self._cursor_name = "arrow"

        # Pointer state of the widget glue; tool state lives in the dispatcher
        self._press_pos: Optional[QPointF] = None
        self._drag_started = False
        self._wheel_remainder = 0

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(200, 150)

        self.dispatcher = ToolDispatcher(self)
        self.dispatcher.active_tool.set_default_cursor()

    # Coordinate conversion

    def user_to_world(self, pos) -> QPointF:
        """Convert widget pixel coordinates to world coordinates."""
        x = pos.x() / self._scale + self._top_left.x()
        y = -pos.y() / self._scale + self._top_left.y()
        return QPointF(x, y)

    def world_to_user(self, point) -> QPointF:
        """Convert world coordinates to widget pixel coordinates."""
        x = (point.x() - self._top_left.x()) * self._scale
        y = (self._top_left.y() - point.y()) * self._scale
        return QPointF(x, y)

    def world_rect_to_user(self, rect: QRectF) -> QRectF:
        top_left = self.world_to_user(QPointF(rect.x(), rect.y() + rect.height()))
        return QRectF(top_left.x(), top_left.y(),
                      rect.width() * self._scale, rect.height() * self._scale)

    # Visible area

    def scale_factor(self) -> float:
        return self._scale

    def set_scale_factor(self, scale: float):
        if scale <= 0:
            return
        self._scale = scale
        self.scale_changed.emit(scale)
        self.update()

    def visible_width(self) -> float:
        return self.width() / self._scale

    def visible_height(self) -> float:
        return self.height() / self._scale

    def visible_area(self) -> QRectF:
        """Visible world rectangle; its y is the lower edge."""
        w = self.visible_width()
        h = self.visible_height()
        return QRectF(self._top_left.x(), self._top_left.y() - h, w, h)

    def offset_visible_area(self, dx: float, dy: float):
        """Shift the visible area by dx, dy world units."""
        self._top_left = QPointF(self._top_left.x() + dx, self._top_left.y() + dy)
        self.update()

    def center_on_point(self, x: float, y: float):
        self._top_left = QPointF(x - self.visible_width() / 2,
                                 y + self.visible_height() / 2)
        self.update()

    def zoom_on_point(self, factor: float, point: QPointF):
        """Scale by factor and center the visible area on point."""
        self.set_scale_factor(self._scale * factor)
        self.center_on_point(point.x(), point.y())

    def zoom_in(self, point: Optional[QPointF] = None):
        """Zoom in one step, centered on point or the current center."""
        if point is None:
            point = self.visible_area().center()
        self.zoom_on_point(1.0 + config.ZOOM_STEP, point)

    def zoom_out(self, point: Optional[QPointF] = None):
        """Zoom out one step, centered on point or the current center."""
        if point is None:
            point = self.visible_area().center()
        self.zoom_on_point(1.0 / (1.0 + config.ZOOM_STEP), point)

    def zoom_on_rectangle(self, rect: Optional[QRectF]):
        """Make sure the world rectangle is entirely visible."""
        if rect is None or rect.width() <= 0 or rect.height() <= 0:
            return
        scale = min(self.width() / rect.width(), self.height() / rect.height())
        self.set_scale_factor(scale)
        center = rect.center()
        self.center_on_point(center.x(), center.y())

    def show_all(self):
        """Zoom so that all visible objects fit in the view."""
        bounds = self.geo_set.get_bounds()
        if bounds is None:
            self.update()
            return
        x, y, w, h = bounds
        border = max(w, h) * config.SHOW_ALL_BORDER_PERCENTAGE / 100.0
        if border == 0:
            border = 1.0
        self.zoom_on_rectangle(QRectF(x - border, y - border,
                                      w + 2 * border, h + 2 * border))

    # Document

    def set_geo_set(self, geo_set: GeoSet):
        """Replace the displayed map document."""
        self.geo_set = geo_set
        logger.info("Showing map with %d object(s)", len(geo_set))
        self.undo_manager.reset(geo_set.to_dict())
        self.map_changed.emit()
        self.selection_changed.emit()
        self.show_all()

    def select_by_point(self, point: QPointF, extend: bool, tolerance_px: float) -> bool:
        tolerance = tolerance_px / self._scale
        changed = self.geo_set.select_by_point(point.x(), point.y(), extend, tolerance)
        if changed:
            self.selection_changed.emit()
            self.update()
        return changed

    def select_by_rectangle(self, rect: QRectF, extend: bool) -> bool:
        changed = self.geo_set.select_by_rectangle(
            rect.x(), rect.y(), rect.width(), rect.height(), extend
        )
        if changed:
            self.selection_changed.emit()
            self.update()
        return changed

    def remove_selected(self) -> bool:
        """Delete the selected objects. Returns True if any were removed."""
        removed = self.geo_set.remove_selected()
        if removed:
            self.map_changed.emit()
            self.selection_changed.emit()
            self.update()
        return removed

    def add_object(self, rect: QRectF) -> GeoObject:
        """Add a rectangle object and record it for undo."""
        object_id = self.geo_set.next_id()
        obj = GeoObject(
            object_id=object_id,
            x=rect.x(), y=rect.y(),
            width=rect.width(), height=rect.height(),
            name=f"Rectangle {object_id}",
            color=config.OBJECT_COLOR,
        )
        self.geo_set.add(obj)
        logger.debug("Added object %d at (%.2f, %.2f)", object_id, rect.x(), rect.y())
        self.add_undo("Add Rectangle")
        self.map_changed.emit()
        self.update()
        return obj

    def add_undo(self, name: str):
        """Record the current document state as the result of action name."""
        self.undo_manager.add(name, self.geo_set.to_dict())

    def undo(self):
        state = self.undo_manager.undo()
        if state is not None:
            self._apply_state(state)

    def redo(self):
        state = self.undo_manager.redo()
        if state is not None:
            self._apply_state(state)

    def _apply_state(self, state: dict):
        self.geo_set = GeoSet.from_dict(state)
        self.geo_set.modified = True
        self.map_changed.emit()
        self.selection_changed.emit()
        self.update()

    def refresh(self):
        self.update()

    # Tools

    def set_tool(self, tool: MapTool):
        """Select the persistent tool, e.g. from the toolbar."""
        self.dispatcher.select_tool(tool)
        self.update()

    def set_tool_cursor(self, name: str):
        """Show the cursor registered under name in config.CURSOR_NAMES."""
        shape_name = config.CURSOR_NAMES.get(name, "ArrowCursor")
        self.setCursor(QCursor(getattr(Qt.CursorShape, shape_name)))
        self._cursor_name = name

    def cursor_name(self) -> str:
        return self._cursor_name

    def flash_cursor(self, name: str, restore: str, msec: int):
        """Show a cursor for msec, then switch to restore unless changed."""
        self.set_tool_cursor(name)

        def _restore():
            if self._cursor_name == name:
                self.set_tool_cursor(restore)

        QTimer.singleShot(msec, _restore)

    def window_has_focus(self) -> bool:
        return focus_utils.parent_window_has_focus(self)

    def focus_owner_listens_for_key(self, key: int) -> bool:
        return focus_utils.focus_owner_listens_for_key(key)

    # Qt events

    def mousePressEvent(self, event):
        self._press_pos = event.position()
        self._drag_started = False
        self.dispatcher.pointer_down(self.user_to_world(event.position()), event)

    def mouseMoveEvent(self, event):
        pos = event.position()
        point = self.user_to_world(pos)
        if self._press_pos is None:
            self.dispatcher.pointer_moved(point, event)
            return
        if not self._drag_started:
            if (pos - self._press_pos).manhattanLength() < config.DRAG_START_DISTANCE:
                return
            self._drag_started = True
        self.dispatcher.pointer_dragged(point, event)

    def mouseReleaseEvent(self, event):
        point = self.user_to_world(event.position())
        self._press_pos = None
        self.dispatcher.pointer_up(point, event)
        # Qt has no click events; the dispatcher drops it after a drag
        self.dispatcher.pointer_clicked(point, event)
        self.update()

    def enterEvent(self, event):
        self.dispatcher.pointer_entered(self.user_to_world(event.position()), event)
        super().enterEvent(event)

    def leaveEvent(self, event):
        pos = QPointF(self.mapFromGlobal(QCursor.pos()))
        self._press_pos = None
        self.dispatcher.pointer_exited(self.user_to_world(pos), event)
        super().leaveEvent(event)

    def wheelEvent(self, event):
        self._wheel_remainder += event.angleDelta().y()
        notches = int(self._wheel_remainder / config.WHEEL_NOTCH_DELTA)
        self._wheel_remainder -= notches * config.WHEEL_NOTCH_DELTA
        if notches == 0:
            event.accept()
            return
        # Qt counts rotation away from the user as positive; that zooms in
        if self.dispatcher.wheel(-notches, self.user_to_world(event.position())):
            event.accept()
        else:
            event.ignore()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(*config.BACKGROUND_COLOR))

        for obj in self.geo_set.objects:
            if not obj.visible:
                continue
            rect = self.world_rect_to_user(QRectF(obj.x, obj.y, obj.width, obj.height))
            fill = QColor(*obj.color)
            fill.setAlpha(120)
            painter.setBrush(QBrush(fill))
            if obj.selected:
                painter.setPen(QPen(QColor(*config.SELECTION_COLOR), 2))
            else:
                painter.setPen(QPen(QColor(*obj.color), 1))
            painter.drawRect(rect)

        # Rubber bands of the active tool and of a paused tool
        painter.setBrush(Qt.NoBrush)
        painter.setPen(QPen(QColor(*config.RUBBER_BAND_COLOR), 1, Qt.DashLine))
        for tool in (self.dispatcher.active_tool, self.dispatcher.suspended_tool):
            if tool is None:
                continue
            overlay = tool.overlay_rect()
            if overlay is not None:
                painter.drawRect(self.world_rect_to_user(overlay))

        painter.end()
