# tests/test_qt_widgets.py
"""
Tests for the Qt widget layer - panel containment and selection reading.
Runs on the offscreen platform; no display is needed.
"""

import pytest
from PyQt6.QtWidgets import QLineEdit, QTextEdit

from mintrans.host_events import HostEventFilter, selected_text
from mintrans.models import Point
from mintrans.overlay_ui import OverlayView
from mintrans.selection_tracker import SelectionChanged


class RecordingSession:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


@pytest.fixture
def overlay(qapp):
    view = OverlayView()
    yield view
    view.close_all()


def line_edit(text, echo_mode=QLineEdit.EchoMode.Normal):
    edit = QLineEdit()
    edit.setEchoMode(echo_mode)
    edit.setText(text)
    edit.selectAll()
    return edit


# =============================================================================
# Tests: Containment
# =============================================================================

class TestContains:
    """Tests for OverlayView.contains"""

    def test_panel_children_are_inside(self, overlay):
        """The result text and the copy button belong to the panel"""
        overlay.render_panel("<p>Bonjour</p>", False, 300, "Copy")
        assert overlay.contains(overlay.panel)
        assert overlay.contains(overlay.panel.content.viewport())
        assert overlay.contains(overlay.panel.copy_btn)

    def test_icon_is_inside(self, overlay):
        overlay.show_affordance(Point(10, 10))
        assert overlay.contains(overlay.icon)

    def test_unrelated_widgets_are_outside(self, overlay):
        """Host widgets and no widget at all are outside the UI"""
        overlay.render_panel("<p>Bonjour</p>", False, 300, "Copy")
        host = QTextEdit()
        try:
            assert not overlay.contains(host)
            assert not overlay.contains(host.viewport())
            assert not overlay.contains(None)
        finally:
            host.deleteLater()

    def test_closed_panel_no_longer_contains(self, overlay):
        """After close_all the old panel widgets count as outside"""
        overlay.render_panel("<p>Bonjour</p>", False, 300, "Copy")
        copy_btn = overlay.panel.copy_btn
        overlay.close_all()
        assert not overlay.contains(copy_btn)


# =============================================================================
# Tests: Selection reading
# =============================================================================

class TestSelectedText:
    """Tests for selected_text and the focus watcher"""

    def test_normal_line_edit(self, qapp):
        assert selected_text(line_edit("Hello world")) == "Hello world"

    @pytest.mark.parametrize("mode", [
        QLineEdit.EchoMode.Password,
        QLineEdit.EchoMode.PasswordEchoOnEdit,
        QLineEdit.EchoMode.NoEcho,
    ])
    def test_masked_line_edit_yields_nothing(self, qapp, mode):
        """Selections in password fields are never read"""
        assert selected_text(line_edit("sk-secret-key", mode)) == ""

    def test_text_edit_paragraphs(self, qapp):
        """Paragraph separators come back as newlines"""
        edit = QTextEdit()
        edit.setPlainText("first\nsecond")
        edit.selectAll()
        assert selected_text(edit) == "first\nsecond"

    def test_other_widgets(self, qapp):
        assert selected_text(None) == ""

    def test_focus_on_password_field_not_watched(self, overlay):
        """Focusing a password field does not subscribe to its selection"""
        session = RecordingSession()
        host_filter = HostEventFilter(session, overlay)

        host_filter._on_focus_changed(None, line_edit("sk-secret-key", QLineEdit.EchoMode.Password))

        assert host_filter._watched is None
        assert session.events == []

    def test_focus_on_text_field_watched(self, overlay):
        """A plain field is watched and its selection reported as outside the UI"""
        session = RecordingSession()
        host_filter = HostEventFilter(session, overlay)
        edit = line_edit("Hello world")

        host_filter._on_focus_changed(None, edit)
        assert host_filter._watched is edit

        host_filter._on_selection_changed()
        assert session.events[-1] == SelectionChanged("Hello world", False)
        host_filter._unwatch()
