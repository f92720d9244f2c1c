"""
Tests for the individual map tools against a fake surface.

Covers:
- Rubber-band rectangle handling and Escape cancel
- Selection by click and rectangle, Shift extension
- Panning and Escape restore
- Zoom in / zoom out clicks, right clicks and rectangles
- Drawing rectangles, pause keeping the partial rectangle
"""
from PySide6.QtCore import Qt, QPointF, QRectF

import config
from tools.base_tool import KEY_ESCAPE, KeyStroke, MapTool
from tools.draw_tool import DrawRectangleTool
from tools.pan_tool import PanTool
from tools.rectangle_tool import RectangleTool
from tools.selection_tool import SelectionTool
from tools.zoom_tools import ZoomInTool, ZoomOutTool

from conftest import FakeMouseEvent, release


def drag(tool, start, end, event=None):
    tool.start_drag(start, event)
    tool.update_drag(end, event)
    tool.end_drag(end, event)


# ══════════════════════════════════════════════════════════════════════════
# Base tool
# ══════════════════════════════════════════════════════════════════════════

class TestMapTool:

    def test_end_drag_falls_back_to_click(self, surface):
        clicks = []

        class ClickTool(MapTool):
            def mouse_clicked(self, point, event=None):
                clicks.append(point)

        ClickTool(surface).end_drag(QPointF(1, 2))
        assert clicks == [QPointF(1, 2)]

    def test_deactivate_resets_cursor(self, surface):
        tool = PanTool(surface)
        tool.set_default_cursor()
        tool.deactivate()
        assert surface.cursor == "arrow"

    def test_synthesized_event_counts_as_left_button(self):
        assert MapTool.mouse_button(None) == Qt.LeftButton
        assert not MapTool.shift_down(None)

    def test_shift_down(self):
        assert MapTool.shift_down(FakeMouseEvent(modifiers=Qt.ShiftModifier))

    def test_key_stroke_pressed(self):
        assert KeyStroke(key=1, released=False).pressed
        assert not KeyStroke(key=1, released=True).pressed


# ══════════════════════════════════════════════════════════════════════════
# Rectangle tool
# ══════════════════════════════════════════════════════════════════════════

class TestRectangleTool:

    def test_rectangle_is_normalized(self, surface):
        tool = RectangleTool(surface)
        tool.start_drag(QPointF(10, 10))
        tool.update_drag(QPointF(4, 2))
        assert tool.get_rectangle() == QRectF(4, 2, 6, 8)
        assert tool.overlay_rect() == QRectF(4, 2, 6, 8)
        assert tool.is_dragging()

    def test_no_rectangle_before_first_update(self, surface):
        tool = RectangleTool(surface)
        tool.start_drag(QPointF(1, 1))
        assert tool.get_rectangle() is None
        assert not tool.is_rectangle_large_enough()

    def test_update_without_start_starts(self, surface):
        tool = RectangleTool(surface)
        tool.update_drag(QPointF(1, 1))
        assert tool.drag_start == QPointF(1, 1)
        assert tool.get_rectangle() is None

    def test_minimum_size_depends_on_scale(self):
        from conftest import FakeSurface
        tool = RectangleTool(FakeSurface(scale=1.0))
        tool.start_drag(QPointF(0, 0))
        tool.update_drag(QPointF(2, 2))
        assert not tool.is_rectangle_large_enough()

        zoomed = RectangleTool(FakeSurface(scale=10.0))
        zoomed.start_drag(QPointF(0, 0))
        zoomed.update_drag(QPointF(0.5, 0.5))
        assert zoomed.is_rectangle_large_enough()

    def test_escape_release_cancels_without_consuming(self, surface):
        tool = RectangleTool(surface)
        tool.start_drag(QPointF(0, 0))
        tool.update_drag(QPointF(5, 5))
        assert not tool.key_event(release(KEY_ESCAPE))
        assert tool.get_rectangle() is None
        assert not tool.is_dragging()


# ══════════════════════════════════════════════════════════════════════════
# Selection tool
# ══════════════════════════════════════════════════════════════════════════

class TestSelectionTool:

    def test_click_selects_with_pixel_tolerance(self, surface):
        SelectionTool(surface).mouse_clicked(QPointF(3, 4), FakeMouseEvent())
        assert surface.calls_named("select_by_point") == [
            ("select_by_point", QPointF(3, 4), False, config.CLICK_PIXEL_TOLERANCE)
        ]

    def test_shift_click_extends(self, surface):
        event = FakeMouseEvent(modifiers=Qt.ShiftModifier)
        SelectionTool(surface).mouse_clicked(QPointF(3, 4), event)
        assert surface.calls_named("select_by_point")[0][2] is True

    def test_drag_selects_rectangle(self, surface):
        tool = SelectionTool(surface)
        drag(tool, QPointF(0, 0), QPointF(20, 10), FakeMouseEvent())
        assert surface.calls_named("select_by_rectangle") == [
            ("select_by_rectangle", QRectF(0, 0, 20, 10), False)
        ]
        assert tool.get_rectangle() is None
        assert surface.cursor == "selectionarrow"

    def test_cancelled_drag_selects_nothing(self, surface):
        tool = SelectionTool(surface)
        tool.start_drag(QPointF(0, 0))
        tool.update_drag(QPointF(20, 10))
        tool.key_event(release(KEY_ESCAPE))
        tool.end_drag(QPointF(20, 10))
        assert surface.calls_named("select_by_rectangle") == []


# ══════════════════════════════════════════════════════════════════════════
# Pan tool
# ══════════════════════════════════════════════════════════════════════════

class TestPanTool:

    def test_press_shows_closed_hand(self, surface):
        tool = PanTool(surface)
        tool.mouse_down(QPointF(0, 0))
        assert surface.cursor == "panclicked"
        tool.mouse_clicked(QPointF(0, 0))
        assert surface.cursor == "pan"

    def test_drag_offsets_visible_area(self, surface):
        tool = PanTool(surface)
        tool.start_drag(QPointF(10, 10))
        tool.update_drag(QPointF(14, 7))
        assert surface.calls_named("offset_visible_area") == [
            ("offset_visible_area", -4.0, 3.0)
        ]
        tool.end_drag(QPointF(14, 7))
        assert not tool.is_dragging()
        assert surface.cursor == "pan"

    def test_escape_restores_initial_area(self, surface):
        tool = PanTool(surface)
        initial = surface.visible_area()
        tool.start_drag(QPointF(10, 10))
        tool.update_drag(QPointF(30, 10))
        assert not tool.key_event(release(KEY_ESCAPE))
        assert surface.calls_named("zoom_on_rectangle") == [
            ("zoom_on_rectangle", initial)
        ]
        assert not tool.is_dragging()

    def test_escape_without_drag_does_nothing(self, surface):
        PanTool(surface).key_event(release(KEY_ESCAPE))
        assert surface.calls_named("zoom_on_rectangle") == []


# ══════════════════════════════════════════════════════════════════════════
# Zoom tools
# ══════════════════════════════════════════════════════════════════════════

class TestZoomTools:

    def test_left_click_zooms_in(self, surface):
        ZoomInTool(surface).mouse_clicked(QPointF(5, 5), FakeMouseEvent())
        assert surface.calls_named("zoom_in") == [("zoom_in", QPointF(5, 5))]

    def test_synthesized_click_zooms_in(self, surface):
        ZoomInTool(surface).mouse_clicked(QPointF(5, 5))
        assert len(surface.calls_named("zoom_in")) == 1

    def test_right_click_zooms_out_and_flashes_cursor(self, surface):
        ZoomInTool(surface).mouse_clicked(QPointF(5, 5), FakeMouseEvent(Qt.RightButton))
        assert surface.calls_named("zoom_out") == [("zoom_out", QPointF(5, 5))]
        assert surface.calls_named("flash_cursor") == [
            ("flash_cursor", "zoomout", "zoomin", config.ZOOM_OUT_CURSOR_VISIBLE_MS)
        ]

    def test_no_button_does_nothing(self, surface):
        ZoomInTool(surface).mouse_clicked(QPointF(5, 5), FakeMouseEvent(Qt.NoButton))
        assert surface.calls_named("zoom_in") == []
        assert surface.calls_named("zoom_out") == []

    def test_drag_zooms_on_rectangle(self, surface):
        tool = ZoomInTool(surface)
        drag(tool, QPointF(0, 0), QPointF(40, 30), FakeMouseEvent())
        assert surface.calls_named("zoom_on_rectangle") == [
            ("zoom_on_rectangle", QRectF(0, 0, 40, 30))
        ]

    def test_tiny_drag_does_not_zoom(self, surface):
        tool = ZoomInTool(surface)
        drag(tool, QPointF(0, 0), QPointF(1, 1), FakeMouseEvent())
        assert surface.calls_named("zoom_on_rectangle") == []
        assert surface.calls_named("zoom_in") == []

    def test_right_drag_zooms_out(self, surface):
        tool = ZoomInTool(surface)
        drag(tool, QPointF(0, 0), QPointF(40, 30), FakeMouseEvent(Qt.RightButton))
        assert surface.calls_named("zoom_out") == [("zoom_out", QPointF(40, 30))]

    def test_zoom_out_tool_click(self, surface):
        ZoomOutTool(surface).mouse_clicked(QPointF(2, 3))
        assert surface.calls_named("zoom_out") == [("zoom_out", QPointF(2, 3))]

    def test_zoom_out_tool_drag_counts_as_click(self, surface):
        tool = ZoomOutTool(surface)
        drag(tool, QPointF(0, 0), QPointF(9, 9))
        assert surface.calls_named("zoom_out") == [("zoom_out", QPointF(9, 9))]


# ══════════════════════════════════════════════════════════════════════════
# Draw tool
# ══════════════════════════════════════════════════════════════════════════

class TestDrawRectangleTool:

    def test_drag_adds_object(self, surface):
        tool = DrawRectangleTool(surface)
        drag(tool, QPointF(10, 10), QPointF(0, 5))
        assert surface.calls_named("add_object") == [
            ("add_object", QRectF(0, 5, 10, 5))
        ]

    def test_tiny_drag_adds_nothing(self, surface):
        tool = DrawRectangleTool(surface)
        drag(tool, QPointF(0, 0), QPointF(1, 10))
        assert surface.calls_named("add_object") == []

    def test_pause_keeps_partial_rectangle(self, surface):
        tool = DrawRectangleTool(surface)
        tool.start_drag(QPointF(0, 0))
        tool.update_drag(QPointF(10, 10))
        tool.pause()
        tool.resume()
        assert tool.get_rectangle() == QRectF(0, 0, 10, 10)

    def test_deactivate_drops_partial_rectangle(self, surface):
        tool = DrawRectangleTool(surface)
        tool.start_drag(QPointF(0, 0))
        tool.update_drag(QPointF(10, 10))
        tool.deactivate()
        assert tool.get_rectangle() is None
        assert surface.cursor == "arrow"
