"""Helpers for asking Qt where the keyboard focus is."""

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication, QWidget, QLineEdit, QTextEdit, QPlainTextEdit,
    QAbstractSpinBox, QComboBox
)

# Keys an editable text control needs for itself
EDITING_KEYS = (int(Qt.Key.Key_Delete), int(Qt.Key.Key_Backspace))


def parent_window_has_focus(widget: QWidget) -> bool:
    """Check whether the top-level window containing widget is active."""
    active = QApplication.activeWindow()
    if active is None:
        return False
    return widget.window() is active


def widget_listens_for_key(widget: QWidget, key: int) -> bool:
    """Check whether widget uses key for editing.

    Args:
        widget: The widget to examine
        key: Qt key code

    Returns:
        True for editable text controls and delete/backspace
    """
    if key not in EDITING_KEYS:
        return False
    if isinstance(widget, (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox)):
        return not widget.isReadOnly()
    if isinstance(widget, QComboBox):
        return widget.isEditable()
    return False


def focus_owner_listens_for_key(key: int) -> bool:
    """Check whether the widget with the keyboard focus uses key."""
    focus_widget = QApplication.focusWidget()
    if focus_widget is None:
        return False
    return widget_listens_for_key(focus_widget, key)
