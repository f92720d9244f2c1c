"""Base class for map tools."""

from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from PySide6.QtCore import Qt, QPointF

if TYPE_CHECKING:
    from ui.map_view import MapView


KEY_ESCAPE = int(Qt.Key.Key_Escape)


@dataclass(frozen=True)
class KeyStroke:
    """A key press or release delivered to the tool dispatcher.

    Attributes:
        key: Qt key code as an int
        released: True for a key release, False for a key press
        event: The original QKeyEvent, if any
    """

    key: int
    released: bool
    event: Any = None

    @property
    def pressed(self) -> bool:
        return not self.released


class MapTool:
    """Base class for map tools.

    A map tool interprets pointer and key input for a map surface. The
    ToolDispatcher forwards events to exactly one active tool; all
    callbacks do nothing by default. Points are in world coordinates,
    events are the original Qt events (None when synthesized).

    activate/deactivate bracket a tool's life as the current tool.
    pause/resume bracket a temporary suspension, e.g. while the space
    key switches to panning; a paused tool keeps unfinished work.
    """

    cursor_name = "arrow"

    def __init__(self, surface: "MapView"):
        self.surface = surface

    def activate(self):
        """Called when the tool becomes the current tool."""

    def deactivate(self):
        """Called when the tool is no longer the current tool."""
        self.surface.set_tool_cursor("arrow")

    def pause(self):
        """Called when another tool temporarily replaces this one."""

    def resume(self):
        """Called when a paused tool becomes current again."""

    def mouse_down(self, point: QPointF, event=None):
        pass

    def mouse_clicked(self, point: QPointF, event=None):
        pass

    def mouse_moved(self, point: QPointF, event=None):
        pass

    def mouse_entered(self, point: QPointF, event=None):
        pass

    def mouse_exited(self, point: QPointF, event=None):
        pass

    def start_drag(self, point: QPointF, event=None):
        pass

    def update_drag(self, point: QPointF, event=None):
        pass

    def end_drag(self, point: QPointF, event=None):
        """A drag ended.

        Tools that don't track drags still get a click when the mouse is
        pressed, moved and released.
        """
        self.mouse_clicked(point, event)

    def is_dragging(self) -> bool:
        return False

    def key_event(self, stroke: KeyStroke) -> bool:
        """Handle a key event.

        Returns:
            True if the event was consumed
        """
        return False

    def overlay_rect(self):
        """Rectangle in world coordinates to draw on top of the map, or None."""
        return None

    def set_default_cursor(self):
        """Show this tool's default cursor on the surface."""
        self.surface.set_tool_cursor(self.cursor_name)

    @staticmethod
    def mouse_button(event) -> Qt.MouseButton:
        """Button of a mouse event; synthesized events count as left clicks."""
        if event is None:
            return Qt.LeftButton
        return event.button()

    @staticmethod
    def shift_down(event) -> bool:
        if event is None:
            return False
        return bool(event.modifiers() & Qt.ShiftModifier)

    @staticmethod
    def is_escape_release(stroke: KeyStroke) -> bool:
        return stroke.released and stroke.key == KEY_ESCAPE
