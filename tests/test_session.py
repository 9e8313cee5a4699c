# tests/test_session.py
"""
Tests for mintrans.session - host events driving the tracker and presenter.
"""

import pytest

from conftest import DeferredDispatcher, FakeClient
from mintrans.models import Point, UIPhase
from mintrans.presenter import PanelPresenter
from mintrans.selection_tracker import PointerMoved, PointerPressed, PointerReleased, SelectionChanged
from mintrans.session import TranslatorSession


@pytest.fixture
def dispatcher():
    return DeferredDispatcher()


@pytest.fixture
def presenter(view, scheduler, dispatcher, store):
    return PanelPresenter(view, FakeClient(), scheduler, dispatcher, store)


@pytest.fixture
def session(presenter, scheduler, store):
    return TranslatorSession(presenter, scheduler, store)


def select(session, text="Hello world", point=Point(100, 200)):
    session.handle(PointerPressed(point))
    session.handle(PointerReleased(text, point))


class TestAffordanceTiming:
    """Selections show the affordance once after the delay"""

    def test_shown_exactly_once(self, session, scheduler, view):
        """press, select, release, wait: one icon"""
        select(session)
        scheduler.advance(0.49)
        assert view.icons_shown == 0

        scheduler.advance(0.01)
        assert view.icons_shown == 1
        scheduler.advance(5)
        assert view.icons_shown == 1

    def test_press_before_delay_prevents_icon(self, session, scheduler, view):
        """A pointer-down during the delay cancels that selection"""
        select(session)
        scheduler.advance(0.3)
        session.handle(PointerPressed(Point(5, 5)))
        scheduler.advance(2)
        assert view.icons_shown == 0

    def test_newer_selection_restarts_delay(self, session, scheduler, view, presenter):
        """Only the latest selection produces an icon"""
        select(session, "first")
        scheduler.advance(0.3)
        select(session, "second")
        scheduler.advance(0.3)
        assert view.icons_shown == 0
        scheduler.advance(0.2)
        assert view.icons_shown == 1
        assert presenter.state.snapshot.text == "second"

    def test_delay_from_settings(self, store, scheduler, view, presenter):
        """The delay follows delaySeconds"""
        store.set("delaySeconds", 1.5)
        session = TranslatorSession(presenter, scheduler, store)
        select(session)
        scheduler.advance(1.0)
        assert view.icons_shown == 0
        scheduler.advance(0.5)
        assert view.icons_shown == 1

    def test_reload_config(self, session, store):
        """reload_config picks up a changed delay"""
        store.set("delaySeconds", "2")
        session.reload_config()
        assert session.delay_seconds == 2.0


class TestFullFlow:
    """Selection through activation to the result panel"""

    def result_shown(self, session, scheduler, dispatcher):
        select(session)
        scheduler.advance(0.5)
        session.handle(PointerMoved(Point(112, 212)))
        assert session.activate()
        dispatcher.complete()

    def test_activation_anchors_at_pointer(self, session, scheduler, dispatcher, view, presenter):
        """The panel opens next to where the pointer hovered the icon"""
        self.result_shown(session, scheduler, dispatcher)
        assert presenter.state.phase == UIPhase.RESULT
        assert (view.layout.x, view.layout.y) == (127, 227)

    def test_selection_inside_panel_keeps_result(self, session, scheduler, dispatcher, presenter):
        """Selecting text in the result panel never closes it"""
        self.result_shown(session, scheduler, dispatcher)
        session.handle(PointerPressed(Point(130, 240), inside_ui=True))
        session.handle(SelectionChanged("Bonjour", inside_ui=True))
        session.handle(SelectionChanged("", inside_ui=True))
        session.handle(PointerReleased("Bonjour", Point(150, 240), inside_ui=True))
        session.click(inside_ui=True)
        assert presenter.state.phase == UIPhase.RESULT

    def test_press_outside_closes_result(self, session, scheduler, dispatcher, presenter, view):
        """A pointer-down elsewhere removes the panel and icon"""
        self.result_shown(session, scheduler, dispatcher)
        session.handle(PointerPressed(Point(900, 700)))
        assert presenter.state.phase == UIPhase.IDLE
        assert not view.panel_visible

    def test_in_flight_ignores_new_selection(self, session, scheduler, dispatcher, view, presenter):
        """While translating, new selections do not arm anything"""
        select(session)
        scheduler.advance(0.5)
        session.activate()

        select(session, "another")
        scheduler.advance(1)
        assert presenter.state.phase == UIPhase.LOADING
        assert view.icons_shown == 1

    def test_outside_click_during_loading(self, session, scheduler, dispatcher, presenter):
        """An outside click closes the loading panel; the late result is dropped"""
        select(session)
        scheduler.advance(0.5)
        session.activate()
        scheduler.advance(0.1)

        assert session.click(inside_ui=False)
        dispatcher.complete()
        assert presenter.state.phase == UIPhase.IDLE
        assert not presenter.in_flight

    def test_close(self, session, scheduler, presenter, view):
        """close() cancels a pending selection and removes the UI"""
        select(session)
        session.close()
        scheduler.advance(1)
        assert view.icons_shown == 0
        assert presenter.state.phase == UIPhase.IDLE
