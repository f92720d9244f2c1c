"""Save and load map documents."""

import json
import logging
from pathlib import Path
from typing import Optional

import config
from .geo_objects import GeoObject, GeoSet
from .progress import OperationAborted, ProgressMonitor

logger = logging.getLogger(__name__)


class MapFileError(ValueError):
    """Raised when a map document cannot be read."""


def _report(monitor: Optional[ProgressMonitor], done: int, total: int) -> None:
    if monitor is None:
        return
    percentage = 100 if total == 0 else done * 100 // total
    if not monitor.progress(percentage):
        raise OperationAborted()


def save_map(
    geo_set: GeoSet, path: Path, monitor: Optional[ProgressMonitor] = None
) -> None:
    """Save a map document as JSON.

    The work is reported as two tasks: collecting the objects and
    writing the file.

    Args:
        geo_set: Map objects to save
        path: Destination file
        monitor: Optional progress monitor; cancelling it raises
            OperationAborted and leaves any existing file untouched
    """
    path = Path(path)
    total = len(geo_set.objects)
    if monitor is not None:
        monitor.set_total_tasks(2)
        monitor.set_message("Collecting objects")

    objects = []
    for i, obj in enumerate(geo_set.objects):
        objects.append(obj.to_dict())
        _report(monitor, i + 1, total)

    data = {"version": config.MAP_FILE_VERSION, "objects": objects}

    if monitor is not None:
        monitor.next_task(f"Writing {path.name}")
        monitor.check_aborted()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    geo_set.mark_saved()
    if monitor is not None:
        monitor.complete()
    logger.info("Saved %d object(s) to %s", total, path)


def load_map(path: Path, monitor: Optional[ProgressMonitor] = None) -> GeoSet:
    """Load a map document.

    Args:
        path: File written by save_map
        monitor: Optional progress monitor

    Returns:
        GeoSet with the loaded objects, not marked as modified

    Raises:
        MapFileError: If the file is not a valid map document
        OperationAborted: If the monitor was aborted
    """
    path = Path(path)
    if monitor is not None:
        monitor.set_total_tasks(2)
        monitor.set_message(f"Reading {path.name}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MapFileError(f"{path.name} is not a valid map file: {e}") from e
    _report(monitor, 1, 1)

    if not isinstance(data, dict) or "objects" not in data:
        raise MapFileError(f"{path.name} does not contain map objects")

    version = data.get("version")
    if version != config.MAP_FILE_VERSION:
        raise MapFileError(f"Unsupported map file version: {version}")

    entries = data["objects"]
    if not isinstance(entries, list):
        raise MapFileError(f"{path.name}: 'objects' must be a list")

    if monitor is not None:
        monitor.next_task("Building objects")

    geo_set = GeoSet()
    total = len(entries)
    for i, entry in enumerate(entries):
        try:
            geo_set.objects.append(GeoObject.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise MapFileError(f"{path.name}: invalid object #{i}: {e}") from e
        _report(monitor, i + 1, total)

    geo_set.mark_saved()
    if monitor is not None:
        monitor.complete()
    logger.info("Loaded %d object(s) from %s", total, path)
    return geo_set
