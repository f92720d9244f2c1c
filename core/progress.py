"""Progress reporting and cooperative cancellation for background work.

A worker thread reports percentages through a ProgressMonitor. The GUI
thread reads them from the monitor's mailbox, which only keeps the most
recent value, so a slow GUI never builds up a backlog of stale updates.
"""

import threading
from typing import Optional, Tuple


class OperationAborted(Exception):
    """Raised by a long-running operation after the user cancelled it."""


class ProgressMailbox:
    """Single-slot, thread-safe holder of the latest progress value."""

    def __init__(self):
        self._lock = threading.Lock()
        self._value: Optional[Tuple[int, str]] = None

    def put(self, percentage: int, message: str = "") -> None:
        """Store a value, replacing any value not yet taken."""
        with self._lock:
            self._value = (percentage, message)

    def take(self) -> Optional[Tuple[int, str]]:
        """Return and clear the latest (percentage, message), or None."""
        with self._lock:
            value = self._value
            self._value = None
            return value


class ProgressMonitor:
    """Progress sink handed to long-running operations.

    Operations call progress() regularly and stop when it returns False.
    Work split into several tasks calls set_total_tasks() once and
    next_task() before each task after the first; percentages passed to
    progress() are then relative to the current task.
    """

    def __init__(self, mailbox: Optional[ProgressMailbox] = None):
        self.mailbox = mailbox if mailbox is not None else ProgressMailbox()
        self._lock = threading.Lock()
        self._aborted = False
        self._total_tasks = 1
        self._current_task = 1
        self._message = ""
        self._last_percentage = 0

    def start(self) -> None:
        with self._lock:
            self._aborted = False
            self._current_task = 1
            self._last_percentage = 0

    def abort(self) -> None:
        """Request cancellation. The operation must poll for it."""
        with self._lock:
            self._aborted = True

    def is_aborted(self) -> bool:
        with self._lock:
            return self._aborted

    def check_aborted(self) -> None:
        """Raise OperationAborted if cancellation was requested."""
        if self.is_aborted():
            raise OperationAborted()

    def set_total_tasks(self, count: int) -> None:
        with self._lock:
            self._total_tasks = max(1, int(count))

    def total_tasks(self) -> int:
        with self._lock:
            return self._total_tasks

    def current_task(self) -> int:
        with self._lock:
            return self._current_task

    def next_task(self, message: Optional[str] = None) -> None:
        with self._lock:
            self._current_task = min(self._current_task + 1, self._total_tasks)
        if message is not None:
            self.set_message(message)

    def set_message(self, message: str) -> None:
        with self._lock:
            self._message = message
            percentage = self._last_percentage
        self.mailbox.put(percentage, message)

    @property
    def message(self) -> str:
        with self._lock:
            return self._message

    def progress(self, percentage: int) -> bool:
        """Report progress of the current task.

        Args:
            percentage: 0 to 100, relative to the current task

        Returns:
            False if the operation has been aborted and should stop
        """
        percentage = max(0, min(100, int(percentage)))
        with self._lock:
            total = self._total_tasks
            overall = percentage // total + (self._current_task - 1) * 100 // total
            self._last_percentage = overall
            message = self._message
            aborted = self._aborted
        if not aborted:
            self.mailbox.put(overall, message)
        return not aborted

    def complete(self) -> None:
        """Report that the whole operation finished."""
        with self._lock:
            self._current_task = self._total_tasks
            self._last_percentage = 100
            message = self._message
        self.mailbox.put(100, message)
