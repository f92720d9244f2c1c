"""Run long operations in a worker thread with a delayed progress dialog."""

import logging
from typing import Any, Callable, Optional

from PySide6.QtWidgets import QProgressDialog, QWidget
from PySide6.QtCore import Qt, QObject, QThread, QTimer, Signal

import config
from core.progress import OperationAborted, ProgressMailbox, ProgressMonitor

logger = logging.getLogger(__name__)


class ProgressWorker(QThread):
    """Calls fn(monitor) off the GUI thread.

    Exactly one of result_ready, error or aborted is emitted when the
    operation ends.
    """

    result_ready = Signal(object)
    error = Signal(str)
    aborted = Signal()

    def __init__(self, fn: Callable[[ProgressMonitor], Any], parent=None):
        super().__init__(parent)
        self.fn = fn
        self.monitor = ProgressMonitor(ProgressMailbox())

    def run(self) -> None:
        try:
            result = self.fn(self.monitor)
        except OperationAborted:
            logger.info("Operation cancelled")
            self.aborted.emit()
        except Exception as e:
            logger.exception("Operation failed")
            self.error.emit(str(e))
        else:
            self.result_ready.emit(result)


class ProgressRunner(QObject):
    """Connects a ProgressWorker to a QProgressDialog.

    The dialog only appears when the operation runs longer than
    PROGRESS_DIALOG_DELAY_MS. Progress is polled from the worker's
    mailbox on a timer, so the GUI only ever shows the latest value.
    Cancelling the dialog aborts the monitor; the operation stops at its
    next progress report.
    """

    def __init__(
        self,
        parent: QWidget,
        title: str,
        fn: Callable[[ProgressMonitor], Any],
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(parent)
        self.on_result = on_result
        self.on_error = on_error

        self.dialog = QProgressDialog(title, "Cancel", 0, 100, parent)
        self.dialog.setWindowTitle(title)
        self.dialog.setWindowModality(Qt.WindowModal)
        self.dialog.setMinimumDuration(config.PROGRESS_DIALOG_DELAY_MS)
        self.dialog.setAutoClose(False)
        self.dialog.setAutoReset(False)
        self.dialog.setValue(0)
        self.dialog.canceled.connect(self.cancel)

        self.worker = ProgressWorker(fn, self)
        self.worker.result_ready.connect(self._on_result)
        self.worker.error.connect(self._on_error)
        self.worker.finished.connect(self._on_finished)

        self.timer = QTimer(self)
        self.timer.setInterval(config.PROGRESS_POLL_MS)
        self.timer.timeout.connect(self._poll)

    @property
    def monitor(self) -> ProgressMonitor:
        return self.worker.monitor

    def start(self):
        # reset before the thread runs so an early cancel is not lost
        self.monitor.start()
        self.timer.start()
        self.worker.start()

    def cancel(self):
        self.monitor.abort()

    def is_running(self) -> bool:
        return self.worker.isRunning()

    def wait(self, msecs: int = -1) -> bool:
        """Block until the worker thread ended."""
        if msecs < 0:
            return self.worker.wait()
        return self.worker.wait(msecs)

    def _poll(self):
        value = self.monitor.mailbox.take()
        if value is None:
            return
        percentage, message = value
        if message:
            self.dialog.setLabelText(message)
        # setValue also shows the dialog once the minimum duration passed
        self.dialog.setValue(percentage)

    def _on_result(self, result):
        if self.on_result is not None:
            self.on_result(result)

    def _on_error(self, message: str):
        if self.on_error is not None:
            self.on_error(message)

    def _on_finished(self):
        self.timer.stop()
        self.dialog.canceled.disconnect(self.cancel)
        self.dialog.close()
        self.dialog.deleteLater()
        self.deleteLater()


def run_with_progress(
    parent: QWidget,
    title: str,
    fn: Callable[[ProgressMonitor], Any],
    on_result: Optional[Callable[[Any], None]] = None,
    on_error: Optional[Callable[[str], None]] = None,
) -> ProgressRunner:
    """Start fn(monitor) in a worker thread.

    Args:
        parent: Window owning the progress dialog
        title: Dialog title and initial label
        fn: Operation to run; receives a ProgressMonitor
        on_result: Called on the GUI thread with fn's return value
        on_error: Called on the GUI thread with the error message

    Returns:
        The started runner
    """
    runner = ProgressRunner(parent, title, fn, on_result, on_error)
    runner.start()
    return runner
