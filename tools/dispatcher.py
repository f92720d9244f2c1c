"""Routes map input to the active tool and swaps tools on modifier keys.

Holding space switches to the pan tool, the primary modifier (Ctrl, or
Command on macOS) to the zoom-in tool and primary plus secondary (Alt)
to the zoom-out tool. The tool that was active before is paused and
resumed once the keys are released.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from PySide6.QtCore import Qt, QPointF

import config
from .base_tool import KeyStroke, MapTool
from .pan_tool import PanTool
from .selection_tool import SelectionTool
from .zoom_tools import ZoomInTool, ZoomOutTool

logger = logging.getLogger(__name__)

KEY_SPACE = int(Qt.Key.Key_Space)
KEY_PRIMARY = int(Qt.Key.Key_Control)
KEY_SECONDARY = int(Qt.Key.Key_Alt)
KEY_DELETE = int(Qt.Key.Key_Delete)
KEY_BACKSPACE = int(Qt.Key.Key_Backspace)

MODIFIER_KEYS = (KEY_SPACE, KEY_PRIMARY, KEY_SECONDARY)

# Called with the world position (None when the pointer left) and the surface
MotionListener = Callable[[Optional[QPointF], object], None]


@dataclass
class ModifierState:
    """Which of the tool-switching keys are currently held."""

    space: bool = False
    primary: bool = False
    secondary: bool = False

    def update(self, stroke: KeyStroke) -> None:
        """Track a press or release; other keys are ignored."""
        if stroke.key == KEY_SPACE:
            self.space = stroke.pressed
        elif stroke.key == KEY_PRIMARY:
            self.primary = stroke.pressed
        elif stroke.key == KEY_SECONDARY:
            self.secondary = stroke.pressed


@dataclass
class DispatcherState:
    """Complete mutable state of a ToolDispatcher.

    Invariant: suspended_tool is never the active tool.
    """

    modifiers: ModifierState = field(default_factory=ModifierState)
    active_tool: Optional[MapTool] = None
    suspended_tool: Optional[MapTool] = None
    # a pointer drag is in progress
    dragging: bool = False
    # the click following the release that ended a drag is swallowed
    click_suppressed: bool = False
    mouse_over: bool = False


class ToolDispatcher:
    """Event router between a map surface and its tools.

    The surface feeds pointer events with points already converted to
    world coordinates. Key events come from an application-wide filter
    that runs before focus-based routing; dispatch_key() returns whether
    the event was consumed.

    All methods must be called from the GUI thread.
    """

    def __init__(
        self,
        surface,
        tool: Optional[MapTool] = None,
        zoom_with_mouse_wheel: bool = config.ZOOM_WITH_MOUSE_WHEEL,
    ):
        self.surface = surface
        self.state = DispatcherState()
        self.state.active_tool = tool if tool is not None else SelectionTool(surface)
        self.zoom_with_mouse_wheel = zoom_with_mouse_wheel
        self._motion_listeners: List[MotionListener] = []

    @property
    def active_tool(self) -> Optional[MapTool]:
        return self.state.active_tool

    @property
    def suspended_tool(self) -> Optional[MapTool]:
        return self.state.suspended_tool

    @property
    def modifiers(self) -> ModifierState:
        return self.state.modifiers

    # Pointer events

    def pointer_down(self, point: QPointF, event=None):
        self.state.mouse_over = True
        self.state.dragging = False
        self.state.click_suppressed = False
        tool = self.state.active_tool
        if tool is not None:
            tool.mouse_down(point, event)

    def pointer_dragged(self, point: QPointF, event=None):
        self.state.mouse_over = True
        tool = self.state.active_tool
        if tool is not None:
            if not self.state.dragging:
                tool.start_drag(point, event)
            else:
                tool.update_drag(point, event)
        self.state.dragging = True
        self._notify_motion_listeners(point)

    def pointer_up(self, point: QPointF, event=None):
        self.state.mouse_over = True
        tool = self.state.active_tool
        if self.state.dragging:
            if tool is not None:
                tool.end_drag(point, event)
            self.state.click_suppressed = True
        self.state.dragging = False

    def pointer_clicked(self, point: QPointF, event=None):
        self.state.mouse_over = True
        suppressed = self.state.dragging or self.state.click_suppressed
        self.state.dragging = False
        self.state.click_suppressed = False
        tool = self.state.active_tool
        if tool is not None and not suppressed:
            tool.mouse_clicked(point, event)

    def pointer_entered(self, point: QPointF, event=None):
        self.state.mouse_over = True
        tool = self.state.active_tool
        if tool is not None:
            tool.mouse_entered(point, event)

    def pointer_exited(self, point: QPointF, event=None):
        self.state.mouse_over = False
        self.state.dragging = False
        self.state.click_suppressed = False
        tool = self.state.active_tool
        if tool is not None:
            tool.mouse_exited(point, event)
        self._notify_motion_listeners(None)

    def pointer_moved(self, point: QPointF, event=None):
        self.state.mouse_over = True
        tool = self.state.active_tool
        if tool is not None:
            tool.mouse_moved(point, event)
        self._notify_motion_listeners(point)

    def wheel(self, rotation: int, point: QPointF) -> bool:
        """Zoom one step per wheel notch, centered on point.

        Args:
            rotation: Number of notches; negative values zoom in
            point: Pointer position in world coordinates

        Returns:
            True if the wheel event was used for zooming
        """
        if not self.zoom_with_mouse_wheel:
            return False
        for _ in range(abs(rotation)):
            if rotation < 0:
                self.surface.zoom_in(point)
            else:
                self.surface.zoom_out(point)
        return True

    # Motion listeners

    def add_motion_listener(self, listener: MotionListener):
        self._motion_listeners.append(listener)

    def remove_motion_listener(self, listener: MotionListener):
        if listener in self._motion_listeners:
            self._motion_listeners.remove(listener)

    def _notify_motion_listeners(self, point: Optional[QPointF]):
        for listener in list(reversed(self._motion_listeners)):
            listener(point, self.surface)

    # Tool switching

    def set_tool(self, tool: Optional[MapTool], remember_current: bool = False):
        """Make a tool the active tool.

        Args:
            tool: The new tool, may be None
            remember_current: Pause the current tool and keep it for
                restore_suspended_tool() instead of deactivating it
        """
        current = self.state.active_tool
        if remember_current and current is not None:
            current.pause()
            self.state.suspended_tool = current
        elif current is not None:
            current.deactivate()

        self.state.active_tool = tool
        if self.state.suspended_tool is tool:
            self.state.suspended_tool = None
        if tool is not None:
            tool.activate()
            tool.set_default_cursor()
        logger.debug("Active tool: %s (suspended: %s)",
                     type(tool).__name__, type(self.state.suspended_tool).__name__)

    def select_tool(self, tool: MapTool):
        """Make a tool the persistent tool, dropping any suspended tool."""
        suspended = self.state.suspended_tool
        self.state.suspended_tool = None
        if suspended is not None:
            suspended.deactivate()
        self.set_tool(tool)

    def restore_suspended_tool(self):
        """Replace a temporary tool by the tool it suspended."""
        suspended = self.state.suspended_tool
        self.state.suspended_tool = None
        if suspended is None:
            return
        current = self.state.active_tool
        if current is not None:
            current.deactivate()
        self.state.active_tool = suspended
        suspended.resume()
        suspended.set_default_cursor()
        logger.debug("Restored tool: %s", type(suspended).__name__)

    def _tool_for_modifiers(self) -> Optional[MapTool]:
        """Temporary tool for the held modifier keys, or None for no change.

        Rules are checked in order. Note that secondary switches zoom-in
        to zoom-out but not the other way round.
        """
        m = self.state.modifiers
        tool = self.state.active_tool
        pan_current = isinstance(tool, PanTool)
        zoom_in_current = isinstance(tool, ZoomInTool)
        zoom_out_current = isinstance(tool, ZoomOutTool)

        if m.space and not m.primary and not m.secondary and not pan_current:
            return PanTool(self.surface)
        if m.primary and m.secondary and not zoom_out_current:
            return ZoomOutTool(self.surface)
        if m.secondary and zoom_in_current:
            return ZoomOutTool(self.surface)
        if m.primary and not zoom_in_current:
            return ZoomInTool(self.surface)
        return None

    # Key events

    def dispatch_key(self, stroke: KeyStroke) -> bool:
        """Handle a key event before it reaches the focused widget.

        Returns:
            True if the event was consumed
        """
        self.state.modifiers.update(stroke)
        tool = self.state.active_tool
        tool_declined = False

        if stroke.released and stroke.key in (KEY_DELETE, KEY_BACKSPACE):
            if not self.surface.window_has_focus():
                return False
            # text fields need delete and backspace themselves
            if self.surface.focus_owner_listens_for_key(stroke.key):
                return False
            if tool is not None and tool.key_event(stroke):
                return True
            tool_declined = True
            if self.surface.remove_selected():
                self.surface.add_undo("Delete")
                return True

        if tool is not None and not tool_declined and tool.key_event(stroke):
            return True

        # tool switching only applies while the pointer is over the map
        if not self.state.mouse_over:
            return False

        if stroke.key not in MODIFIER_KEYS:
            return False

        if (stroke.key == KEY_SPACE and stroke.released
                and isinstance(tool, PanTool)
                and not isinstance(self.state.suspended_tool, PanTool)):
            self.restore_suspended_tool()
            return True

        new_tool = self._tool_for_modifiers()
        if new_tool is not None:
            # keep the first suspended tool when chords overlap
            self.set_tool(new_tool, self.state.suspended_tool is None)
            return True

        if stroke.released:
            self.restore_suspended_tool()

        # space would otherwise trigger the focused button
        return stroke.key == KEY_SPACE
