"""Undo/redo history of map document snapshots."""

import copy
import logging
from typing import Any, Callable, List, Optional

import config

logger = logging.getLogger(__name__)


class UndoManager:
    """Stores named snapshots of the map document.

    The current state is always the last stored snapshot. Call reset()
    with the initial state, then add() after every change.
    """

    def __init__(self, max_history: int = config.MAX_UNDO_HISTORY):
        self.max_history = max_history
        self.history: List[dict] = []
        self.current_index = -1
        self._listeners: List[Callable[[bool, bool], None]] = []

    def reset(self, state: Any) -> None:
        """Replace all snapshots by a single initial one."""
        self.history = [{"data": copy.deepcopy(state), "name": ""}]
        self.current_index = 0
        self._notify_listeners()

    def add(self, name: str, state: Any) -> None:
        """Store the state after an undoable action.

        Args:
            name: Name of the action, e.g. "Delete"
            state: Snapshot of the document after the action
        """
        # Drop redo branch
        if self.current_index < len(self.history) - 1:
            self.history = self.history[:self.current_index + 1]

        self.history.append({"data": copy.deepcopy(state), "name": name})
        self.current_index += 1

        if len(self.history) > self.max_history:
            self.history.pop(0)
            self.current_index -= 1

        logger.debug("Undo state added: %s (%d/%d)",
                     name, self.current_index, len(self.history))
        self._notify_listeners()

    def undo(self) -> Optional[Any]:
        """Step back one action.

        Returns:
            Copy of the previous state, or None if there is nothing to undo
        """
        if not self.can_undo():
            return None
        self.current_index -= 1
        self._notify_listeners()
        return copy.deepcopy(self.history[self.current_index]["data"])

    def redo(self) -> Optional[Any]:
        """Step forward one action.

        Returns:
            Copy of the next state, or None if there is nothing to redo
        """
        if not self.can_redo():
            return None
        self.current_index += 1
        self._notify_listeners()
        return copy.deepcopy(self.history[self.current_index]["data"])

    def can_undo(self) -> bool:
        return self.current_index > 0

    def can_redo(self) -> bool:
        return self.current_index < len(self.history) - 1

    def undo_name(self) -> str:
        """Name of the action that undo() would revert."""
        if self.can_undo():
            return self.history[self.current_index]["name"]
        return ""

    def redo_name(self) -> str:
        """Name of the action that redo() would repeat."""
        if self.can_redo():
            return self.history[self.current_index + 1]["name"]
        return ""

    def add_listener(self, callback: Callable[[bool, bool], None]) -> None:
        """Register a callback receiving (can_undo, can_redo)."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[bool, bool], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        for callback in self._listeners:
            callback(self.can_undo(), self.can_redo())
