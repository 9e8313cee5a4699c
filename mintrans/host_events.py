"""Maps Qt input in the host application onto selection tracker events."""

import logging

from PyQt6 import sip
from PyQt6.QtCore import QEvent, QObject, QPoint, Qt, QTimer
from PyQt6.QtGui import QWindow
from PyQt6.QtWidgets import QApplication, QLabel, QLineEdit, QPlainTextEdit, QTextEdit

from .logging_config import preview
from .overlay_ui import to_viewport
from .selection_tracker import PointerMoved, PointerPressed, PointerReleased, SelectionChanged

logger = logging.getLogger(__name__)

# QTextCursor.selectedText() uses these in place of newlines
_PARAGRAPH_SEPARATOR = "\u2029"
_LINE_SEPARATOR = "\u2028"


def is_masked(widget) -> bool:
    """Line edits that hide their text (password, no-echo) never expose a selection"""
    return isinstance(widget, QLineEdit) and widget.echoMode() != QLineEdit.EchoMode.Normal


def selected_text(widget) -> str:
    """Current selection of a text widget, '' for anything else"""
    if isinstance(widget, (QTextEdit, QPlainTextEdit)):
        text = widget.textCursor().selectedText()
        return text.replace(_PARAGRAPH_SEPARATOR, "\n").replace(_LINE_SEPARATOR, "\n")
    if is_masked(widget):
        return ""
    if isinstance(widget, (QLineEdit, QLabel)):
        return widget.selectedText()
    return ""


class HostEventFilter(QObject):
    """Application-wide event filter feeding a TranslatorSession.

    Mouse events are taken at the QWindow level so each physical event is seen
    once, before any widget handles it.
    """

    def __init__(self, session, view, parent=None):
        super().__init__(parent)
        self.session = session
        self.view = view
        self._watched = None

    def install(self, app: QApplication):
        app.installEventFilter(self)
        app.focusChanged.connect(self._on_focus_changed)

    def uninstall(self, app: QApplication):
        app.removeEventFilter(self)
        try:
            app.focusChanged.disconnect(self._on_focus_changed)
        except TypeError:
            pass
        self._unwatch()

    def eventFilter(self, obj, event):
        if not isinstance(obj, QWindow):
            return False

        etype = event.type()
        if etype == QEvent.Type.MouseMove:
            self.session.handle(PointerMoved(to_viewport(event.globalPosition().toPoint())))
        elif etype == QEvent.Type.MouseButtonPress and event.button() == Qt.MouseButton.LeftButton:
            global_pos = event.globalPosition().toPoint()
            widget = QApplication.widgetAt(global_pos)
            self.session.handle(PointerPressed(to_viewport(global_pos), self.view.contains(widget)))
        elif etype == QEvent.Type.MouseButtonRelease and event.button() == Qt.MouseButton.LeftButton:
            global_pos = event.globalPosition().toPoint()
            # The target widget updates its selection after this filter returns
            QTimer.singleShot(0, lambda: self._on_release(global_pos))
        return False

    def _on_release(self, global_pos: QPoint):
        widget = QApplication.widgetAt(global_pos)
        inside_ui = self.view.contains(widget)

        text = selected_text(QApplication.focusWidget())
        if not text and widget is not None:
            text = selected_text(widget)
        if text:
            logger.debug("Pointer up with selection: %s", preview(text))

        self.session.handle(PointerReleased(text, to_viewport(global_pos), inside_ui))
        self.session.click(inside_ui)

    def _on_focus_changed(self, old, new):
        self._unwatch()
        if isinstance(new, (QTextEdit, QPlainTextEdit, QLineEdit)) and not is_masked(new):
            new.selectionChanged.connect(self._on_selection_changed)
            self._watched = new

    def _unwatch(self):
        if self._watched is not None and not sip.isdeleted(self._watched):
            try:
                self._watched.selectionChanged.disconnect(self._on_selection_changed)
            except TypeError:
                pass
        self._watched = None

    def _on_selection_changed(self):
        widget = self._watched
        if widget is None or sip.isdeleted(widget):
            return
        self.session.handle(SelectionChanged(selected_text(widget), self.view.contains(widget)))
