"""Configuration constants for Flex Map Tools."""

from typing import Dict, Tuple

# Zoom step for zoom in/out; zooming in scales by (1 + ZOOM_STEP)
ZOOM_STEP = 1.0 / 3.0

# Smallest rectangle (in pixels) that counts as a rubber-band drag
MIN_RECT_DIM_PX = 3

# Pixel tolerance for selecting objects with a click
CLICK_PIXEL_TOLERANCE = 2

# Pointer movement (pixels) before a press turns into a drag
DRAG_START_DISTANCE = 3

# Qt reports wheel rotation in eighths of a degree, 120 per notch
WHEEL_NOTCH_DELTA = 120

# Zoom with the mouse wheel by default
ZOOM_WITH_MOUSE_WHEEL = True

# How long the zoom-out cursor stays visible after a right click (ms)
ZOOM_OUT_CURSOR_VISIBLE_MS = 500

# Undo history length
MAX_UNDO_HISTORY = 50

# Progress dialog is only shown for operations taking longer than this (ms)
PROGRESS_DIALOG_DELAY_MS = 2000
PROGRESS_POLL_MS = 50

# Border around the map when showing everything, in percent of map size
SHOW_ALL_BORDER_PERCENTAGE = 2

# Initial scale (pixels per world unit)
DEFAULT_SCALE = 1.0

# Map document files
MAP_FILE_SUFFIX = ".flexmap.json"
MAP_FILE_FILTER = "Flex Map (*.flexmap.json);;All Files (*)"
MAP_FILE_VERSION = 1

# Colors (RGB)
BACKGROUND_COLOR: Tuple[int, int, int] = (255, 255, 255)
OBJECT_COLOR: Tuple[int, int, int] = (70, 110, 180)
SELECTION_COLOR: Tuple[int, int, int] = (255, 80, 0)
RUBBER_BAND_COLOR: Tuple[int, int, int] = (40, 40, 40)

# Cursor names used by the map tools, mapped to Qt cursor shape names
CURSOR_NAMES: Dict[str, str] = {
    "arrow": "ArrowCursor",
    "selectionarrow": "ArrowCursor",
    "pan": "OpenHandCursor",
    "panclicked": "ClosedHandCursor",
    "zoomin": "CrossCursor",
    "zoomout": "PointingHandCursor",
    "crosshair": "CrossCursor",
}

# Keyboard shortcuts
SHORTCUTS = {
    "select_tool": "V",
    "pan_tool": "H",
    "zoom_in_tool": "Z",
    "zoom_out_tool": "X",
    "draw_tool": "R",
    "show_all": "Ctrl+0",
    "open": "Ctrl+O",
    "save": "Ctrl+S",
    "undo": "Ctrl+Z",
    "redo": "Ctrl+Shift+Z",
}

# Logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
