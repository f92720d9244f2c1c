"""Application-wide key event filter feeding a ToolDispatcher."""

from PySide6.QtCore import QObject, QEvent
from PySide6.QtGui import QWindow
from PySide6.QtWidgets import QApplication

from tools.base_tool import KeyStroke
from tools.dispatcher import KEY_SPACE, ToolDispatcher


class KeyDispatchFilter(QObject):
    """First stage of key handling.

    Installed on the QApplication, it offers every key press and release
    to the dispatcher before any widget sees it. Events the dispatcher
    does not consume continue to the focused widget as usual.
    """

    def __init__(self, dispatcher: ToolDispatcher, parent=None):
        super().__init__(parent)
        self.dispatcher = dispatcher

    def eventFilter(self, obj, event):
        if event.type() not in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease):
            return False

        # Qt delivers key events to the window first and then forwards
        # them to the focus widget; only look at them once
        if not isinstance(obj, QWindow):
            return False

        key = int(event.key())
        if event.isAutoRepeat():
            return key == KEY_SPACE and self.dispatcher.state.mouse_over

        stroke = KeyStroke(
            key=key,
            released=event.type() == QEvent.Type.KeyRelease,
            event=event,
        )
        return self.dispatcher.dispatch_key(stroke)


def install_key_dispatch(
    app: QApplication, dispatcher: ToolDispatcher, owner: QObject = None
) -> KeyDispatchFilter:
    """Install a KeyDispatchFilter for dispatcher on app.

    Qt removes the filter from the application when its owner (app by
    default) is destroyed.
    """
    key_filter = KeyDispatchFilter(dispatcher, owner if owner is not None else app)
    app.installEventFilter(key_filter)
    return key_filter
