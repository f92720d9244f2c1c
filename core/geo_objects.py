"""Map document data structures: selectable rectangular map objects."""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import numpy as np


@dataclass
class GeoObject:
    """Single axis-aligned map object in world coordinates.

    World coordinates have the y axis pointing up; (x, y) is the
    lower-left corner.
    """

    object_id: int
    x: float
    y: float
    width: float
    height: float
    name: str = ""
    color: Tuple[int, int, int] = (70, 110, 180)
    selected: bool = False
    visible: bool = True
    selectable: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.object_id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "color": list(self.color),
            "selected": self.selected,
            "visible": self.visible,
            "selectable": self.selectable,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GeoObject":
        """Create from dictionary.

        Raises:
            ValueError: If the geometry is not finite, the size is
                negative, or color is not three 0-255 integers
        """
        x, y = float(d["x"]), float(d["y"])
        width, height = float(d["width"]), float(d["height"])
        if not all(math.isfinite(v) for v in (x, y, width, height)):
            raise ValueError("geometry must be finite")
        if width < 0 or height < 0:
            raise ValueError("width and height must not be negative")

        color = d.get("color", (70, 110, 180))
        if (not isinstance(color, (list, tuple)) or len(color) != 3 or
                not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255
                        for c in color)):
            raise ValueError(f"color must be three integers in 0-255, got {color!r}")

        return cls(
            object_id=int(d["id"]),
            x=x,
            y=y,
            width=width,
            height=height,
            name=d.get("name", ""),
            color=tuple(color),
            selected=bool(d.get("selected", False)),
            visible=bool(d.get("visible", True)),
            selectable=bool(d.get("selectable", True)),
        )

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """Return (xmin, ymin, xmax, ymax)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def contains(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        """Check whether a point lies on this object."""
        xmin, ymin, xmax, ymax = self.bounds
        return (xmin - tolerance <= x <= xmax + tolerance and
                ymin - tolerance <= y <= ymax + tolerance)

    def intersects(self, x: float, y: float, width: float, height: float) -> bool:
        """Check whether this object intersects a rectangle."""
        xmin, ymin, xmax, ymax = self.bounds
        return not (xmax < x or xmin > x + width or ymax < y or ymin > y + height)


@dataclass
class GeoSet:
    """Ordered collection of map objects with a selection.

    Later objects are drawn on top of earlier ones, so hit tests
    prefer the object with the highest index.
    """

    objects: List[GeoObject] = field(default_factory=list)
    modified: bool = False

    def add(self, obj: GeoObject) -> None:
        """Append an object on top of all others."""
        self.objects.append(obj)
        self.modified = True

    def next_id(self) -> int:
        """Return an unused object id."""
        if not self.objects:
            return 1
        return max(obj.object_id for obj in self.objects) + 1

    def __len__(self) -> int:
        return len(self.objects)

    def _bounds_array(self) -> np.ndarray:
        """Object bounds as an (n, 4) array of xmin, ymin, xmax, ymax."""
        if not self.objects:
            return np.empty((0, 4), dtype=np.float64)
        return np.array([obj.bounds for obj in self.objects], dtype=np.float64)

    def _pickable_mask(self) -> np.ndarray:
        return np.array(
            [obj.visible and obj.selectable for obj in self.objects], dtype=bool
        )

    def get_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """Bounding box (x, y, width, height) of all visible objects."""
        visible = [obj for obj in self.objects if obj.visible]
        if not visible:
            return None
        b = np.array([obj.bounds for obj in visible], dtype=np.float64)
        xmin, ymin = b[:, 0].min(), b[:, 1].min()
        xmax, ymax = b[:, 2].max(), b[:, 3].max()
        return (float(xmin), float(ymin), float(xmax - xmin), float(ymax - ymin))

    def object_at(self, x: float, y: float, tolerance: float = 0.0) -> Optional[GeoObject]:
        """Return the topmost selectable object at a position, or None."""
        if not self.objects:
            return None
        b = self._bounds_array()
        hits = (
            (b[:, 0] - tolerance <= x) & (x <= b[:, 2] + tolerance) &
            (b[:, 1] - tolerance <= y) & (y <= b[:, 3] + tolerance) &
            self._pickable_mask()
        )
        indices = np.flatnonzero(hits)
        if indices.size == 0:
            return None
        return self.objects[int(indices[-1])]

    def select_by_point(
        self, x: float, y: float, extend: bool = False, tolerance: float = 0.0
    ) -> bool:
        """Select the object at a position.

        Args:
            x, y: Position in world coordinates
            extend: Toggle the hit object instead of replacing the selection
            tolerance: Search distance in world units

        Returns:
            True if the selection changed
        """
        hit = self.object_at(x, y, tolerance)
        if extend:
            if hit is None:
                return False
            hit.selected = not hit.selected
            return True

        before = self._selection_state()
        for obj in self.objects:
            obj.selected = False
        if hit is not None:
            hit.selected = True
        return before != self._selection_state()

    def select_by_rectangle(
        self, x: float, y: float, width: float, height: float, extend: bool = False
    ) -> bool:
        """Select all objects intersecting a rectangle.

        Returns:
            True if the selection changed
        """
        before = self._selection_state()
        if self.objects:
            b = self._bounds_array()
            hits = ~(
                (b[:, 2] < x) | (b[:, 0] > x + width) |
                (b[:, 3] < y) | (b[:, 1] > y + height)
            ) & self._pickable_mask()
            for obj, hit in zip(self.objects, hits):
                if extend:
                    if hit:
                        obj.selected = not obj.selected
                else:
                    obj.selected = bool(hit)
        return before != self._selection_state()

    def deselect_all(self) -> bool:
        """Clear the selection. Returns True if anything was selected."""
        changed = self.has_selection()
        for obj in self.objects:
            obj.selected = False
        return changed

    def get_selected(self) -> List[GeoObject]:
        return [obj for obj in self.objects if obj.selected]

    def has_selection(self) -> bool:
        return any(obj.selected for obj in self.objects)

    def remove_selected(self) -> bool:
        """Remove all selected objects.

        Returns:
            True if at least one object was removed
        """
        remaining = [obj for obj in self.objects if not obj.selected]
        removed = len(remaining) != len(self.objects)
        if removed:
            self.objects = remaining
            self.modified = True
        return removed

    def _selection_state(self) -> Tuple[bool, ...]:
        return tuple(obj.selected for obj in self.objects)

    def mark_saved(self) -> None:
        """Mark the map as saved (not modified)."""
        self.modified = False

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization and undo snapshots."""
        return {"objects": [obj.to_dict() for obj in self.objects]}

    @classmethod
    def from_dict(cls, d: dict) -> "GeoSet":
        """Create from dictionary."""
        geo_set = cls(objects=[GeoObject.from_dict(o) for o in d.get("objects", [])])
        geo_set.modified = False
        return geo_set
