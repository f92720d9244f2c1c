"""
Shared fixtures for Flex Map Tools tests.

Provides a fake map surface recording every call the dispatcher and the
tools make, a recording tool, and fake Qt input events.
"""
import sys
import os
import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Run Qt headless unless a platform is chosen explicitly
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import Qt, QPointF, QRectF

from tools.base_tool import KeyStroke, MapTool


# ── Fake surface ────────────────────────────────────────────────────────

class FakeSurface:
    """Stands in for MapView; records calls as (name, args) tuples."""

    def __init__(self, scale=1.0):
        self.calls = []
        self.scale = scale
        self.cursor = "arrow"
        self.has_focus = True
        self.listening_keys = set()
        self.removable = False
        self.area = QRectF(0, 0, 100, 80)

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def names(self):
        return [c[0] for c in self.calls]

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    # dispatcher -> surface
    def zoom_in(self, point=None):
        self._record("zoom_in", point)

    def zoom_out(self, point=None):
        self._record("zoom_out", point)

    def remove_selected(self):
        self._record("remove_selected")
        removed = self.removable
        self.removable = False
        return removed

    def add_undo(self, name):
        self._record("add_undo", name)

    def window_has_focus(self):
        return self.has_focus

    def focus_owner_listens_for_key(self, key):
        return key in self.listening_keys

    # tools -> surface
    def set_tool_cursor(self, name):
        self.cursor = name
        self._record("set_tool_cursor", name)

    def flash_cursor(self, name, restore, msec):
        self.cursor = name
        self._record("flash_cursor", name, restore, msec)

    def scale_factor(self):
        return self.scale

    def visible_area(self):
        return QRectF(self.area)

    def offset_visible_area(self, dx, dy):
        self.area.translate(dx, dy)
        self._record("offset_visible_area", dx, dy)

    def zoom_on_rectangle(self, rect):
        self.area = QRectF(rect)
        self._record("zoom_on_rectangle", QRectF(rect))

    def select_by_point(self, point, extend, tolerance_px):
        self._record("select_by_point", point, extend, tolerance_px)
        return True

    def select_by_rectangle(self, rect, extend):
        self._record("select_by_rectangle", rect, extend)
        return True

    def add_object(self, rect):
        self._record("add_object", rect)

    def refresh(self):
        pass


class RecordingTool(MapTool):
    """Tool recording its callbacks in a list of names."""

    cursor_name = "crosshair"

    def __init__(self, surface, consume_keys=()):
        super().__init__(surface)
        self.events = []
        self.consume_keys = set(consume_keys)

    def activate(self):
        self.events.append("activate")

    def deactivate(self):
        self.events.append("deactivate")

    def pause(self):
        self.events.append("pause")

    def resume(self):
        self.events.append("resume")

    def mouse_down(self, point, event=None):
        self.events.append("mouse_down")

    def mouse_clicked(self, point, event=None):
        self.events.append("mouse_clicked")

    def mouse_moved(self, point, event=None):
        self.events.append("mouse_moved")

    def mouse_entered(self, point, event=None):
        self.events.append("mouse_entered")

    def mouse_exited(self, point, event=None):
        self.events.append("mouse_exited")

    def start_drag(self, point, event=None):
        self.events.append("start_drag")

    def update_drag(self, point, event=None):
        self.events.append("update_drag")

    def end_drag(self, point, event=None):
        self.events.append("end_drag")

    def key_event(self, stroke):
        self.events.append(("key", stroke.key, stroke.released))
        return stroke.key in self.consume_keys


# ── Fake Qt events ──────────────────────────────────────────────────────

class FakeMouseEvent:
    """Minimal mouse event with button() and modifiers()."""

    def __init__(self, button=Qt.LeftButton, modifiers=Qt.NoModifier):
        self._button = button
        self._modifiers = modifiers

    def button(self):
        return self._button

    def modifiers(self):
        return self._modifiers


def press(key):
    return KeyStroke(key=int(key), released=False)


def release(key):
    return KeyStroke(key=int(key), released=True)


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def surface():
    """Fake surface at scale 1"""
    return FakeSurface()


@pytest.fixture
def recording_tool(surface):
    return RecordingTool(surface)


@pytest.fixture
def dispatcher(surface, recording_tool):
    """Dispatcher with a recording tool and the pointer over the surface"""
    from tools.dispatcher import ToolDispatcher
    d = ToolDispatcher(surface, recording_tool)
    d.pointer_entered(QPointF(0, 0))
    recording_tool.events.clear()
    return d


@pytest.fixture
def selection_dispatcher(surface):
    """Dispatcher with its default selection tool and the pointer over the surface"""
    from tools.dispatcher import ToolDispatcher
    d = ToolDispatcher(surface)
    d.pointer_entered(QPointF(0, 0))
    return d
