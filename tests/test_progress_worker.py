"""
Tests for running operations in a worker thread with a progress dialog.

Covers:
- Results and errors delivered on the GUI thread
- Progress values reaching the dialog through the mailbox
- Cancelling from the dialog aborting the operation
"""
import threading
import time

import pytest
from PySide6.QtWidgets import QWidget

from ui.progress_worker import ProgressRunner, run_with_progress


@pytest.fixture
def parent(qtbot):
    widget = QWidget()
    qtbot.addWidget(widget)
    return widget


def run_until_aborted(monitor):
    while monitor.progress(50):
        time.sleep(0.01)
    monitor.check_aborted()


class TestProgressRunner:

    def test_result_delivered(self, parent, qtbot):
        results = []
        run_with_progress(parent, "Working", lambda monitor: 42, on_result=results.append)
        qtbot.waitUntil(lambda: results == [42], timeout=5000)

    def test_error_delivered(self, parent, qtbot):
        errors = []

        def fail(monitor):
            raise ValueError("boom")

        run_with_progress(parent, "Working", fail, on_error=errors.append)
        qtbot.waitUntil(lambda: errors == ["boom"], timeout=5000)

    def test_progress_reaches_dialog(self, parent, qtbot):
        release = threading.Event()
        results = []

        def work(monitor):
            monitor.set_message("Halfway")
            monitor.progress(40)
            release.wait(5)
            return "done"

        runner = run_with_progress(parent, "Working", work, on_result=results.append)
        try:
            qtbot.waitUntil(lambda: runner.dialog.value() == 40, timeout=5000)
            assert runner.dialog.labelText() == "Halfway"
        finally:
            release.set()
        qtbot.waitUntil(lambda: results == ["done"], timeout=5000)

    def test_dialog_cancel_aborts_operation(self, parent, qtbot):
        results = []
        errors = []
        runner = ProgressRunner(parent, "Working", run_until_aborted,
                                on_result=results.append, on_error=errors.append)
        with qtbot.waitSignal(runner.worker.aborted, timeout=5000):
            runner.start()
            runner.dialog.canceled.emit()
        assert results == []
        assert errors == []

    def test_cancel_right_after_start_is_kept(self, parent):
        runner = run_with_progress(parent, "Working", run_until_aborted)
        runner.cancel()
        assert runner.wait(5000)
        assert runner.monitor.is_aborted()
        assert not runner.is_running()
