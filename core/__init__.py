"""Map document, undo history, persistence and progress reporting."""

from .geo_objects import GeoObject, GeoSet
from .undo import UndoManager
from .progress import OperationAborted, ProgressMailbox, ProgressMonitor
from .persistence import MapFileError, save_map, load_map

__all__ = [
    "GeoObject",
    "GeoSet",
    "UndoManager",
    "OperationAborted",
    "ProgressMailbox",
    "ProgressMonitor",
    "MapFileError",
    "save_map",
    "load_map",
]
