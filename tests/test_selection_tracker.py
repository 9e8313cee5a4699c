# tests/test_selection_tracker.py
"""
Tests for mintrans.selection_tracker - the pure selection state machine.
"""

import pytest

from mintrans.models import Point
from mintrans.selection_tracker import (
    CancelTimer,
    PointerMoved,
    PointerPressed,
    PointerReleased,
    SelectionChanged,
    ShowAffordance,
    StartTimer,
    TeardownUI,
    TimerElapsed,
    TrackerPhase,
    TrackerState,
    transition,
)


def released(text="Hello world", point=Point(100, 200), state=None, **kwargs):
    return transition(state or TrackerState(), PointerReleased(text, point), **kwargs)


# =============================================================================
# Tests: Selection commit
# =============================================================================

class TestCommit:
    """Pointer-up with a selection arms the timer; expiry shows the affordance"""

    def test_release_with_text_starts_timer(self):
        """A non-empty selection goes pending with one timer"""
        state, effects = released(delay_seconds=0.8)

        assert state.phase == TrackerPhase.PENDING
        assert state.snapshot.text == "Hello world"
        assert state.snapshot.anchor == Point(100, 200)
        assert effects == [CancelTimer(), StartTimer(0.8, state.timer_token, state.snapshot)]

    def test_selection_text_is_trimmed(self):
        """Snapshots hold trimmed text"""
        state, _ = released("  padded \n")
        assert state.snapshot.text == "padded"

    def test_timer_commits_and_shows_affordance(self):
        """The matching timer shows the affordance after a teardown"""
        state, _ = released()
        state, effects = transition(state, TimerElapsed(state.timer_token))

        assert state.phase == TrackerPhase.COMMITTED
        assert effects == [TeardownUI(), ShowAffordance(state.snapshot)]

    def test_stale_timer_ignored(self):
        """A timer from an earlier selection does nothing"""
        state, _ = released("first")
        old_token = state.timer_token
        state, _ = released("second", state=state)

        new_state, effects = transition(state, TimerElapsed(old_token))
        assert effects == []
        assert new_state.phase == TrackerPhase.PENDING
        assert new_state.snapshot.text == "second"

    def test_timer_ignored_when_committed(self):
        """A second expiry for the same token has no effect"""
        state, _ = released()
        token = state.timer_token
        state, _ = transition(state, TimerElapsed(token))
        _, effects = transition(state, TimerElapsed(token))
        assert effects == []

    def test_anchor_falls_back_to_last_pointer(self):
        """Release without a position uses the last pointer move"""
        state, _ = transition(TrackerState(), PointerMoved(Point(7, 9)))
        state, _ = transition(state, PointerReleased("text"))
        assert state.snapshot.anchor == Point(7, 9)


# =============================================================================
# Tests: Cancellation and teardown
# =============================================================================

class TestCancellation:
    """Pointer-down and cleared selections cancel and tear down"""

    def test_press_before_delay_cancels(self):
        """Pointer-down invalidates the pending timer"""
        state, _ = released()
        token = state.timer_token
        state, effects = transition(state, PointerPressed(Point(5, 5)))

        assert effects == [CancelTimer(), TeardownUI()]
        assert state.phase == TrackerPhase.IDLE
        assert state.snapshot is None

        _, effects = transition(state, TimerElapsed(token))
        assert effects == []

    def test_release_without_text_tears_down(self):
        """Pointer-up with an empty selection clears everything"""
        _, effects = released("   ")
        assert effects == [CancelTimer(), TeardownUI()]

    def test_cleared_selection_tears_down(self):
        """A selection change to empty outside a gesture clears the UI"""
        state, _ = released()
        state, effects = transition(state, SelectionChanged(""))
        assert effects == [CancelTimer(), TeardownUI()]
        assert state.phase == TrackerPhase.IDLE

    def test_selection_change_during_drag_ignored(self):
        """Selection churn between press and release is not a teardown"""
        state, _ = transition(TrackerState(), PointerPressed(Point(0, 0)))
        assert state.gesture_active
        _, effects = transition(state, SelectionChanged(""))
        assert effects == []

    def test_non_empty_selection_change_ignored(self):
        """Only pointer-up commits a selection"""
        _, effects = transition(TrackerState(), SelectionChanged("partial"))
        assert effects == []


# =============================================================================
# Tests: Own UI and in-flight guards
# =============================================================================

class TestGuards:
    """Events on the translator's own surfaces and during a request"""

    def test_press_inside_ui_ignored(self):
        """Pressing the icon or panel keeps everything"""
        state, _ = released()
        new_state, effects = transition(state, PointerPressed(Point(1, 1), inside_ui=True))
        assert effects == []
        assert new_state == state

    def test_selection_change_inside_panel_ignored(self):
        """Selecting or deselecting text inside the result panel never tears down"""
        state, _ = released()
        state, _ = transition(state, TimerElapsed(state.timer_token))
        for text in ("", "part of the result"):
            new_state, effects = transition(state, SelectionChanged(text, inside_ui=True))
            assert effects == []
            assert new_state == state

    def test_release_inside_ui_ignored(self):
        """Releasing on the panel does not start a new selection"""
        _, effects = transition(TrackerState(), PointerReleased("copied text", Point(1, 1), inside_ui=True))
        assert effects == []

    def test_in_flight_blocks_everything(self):
        """While translating, presses, releases and timers do nothing"""
        state, _ = released()
        token = state.timer_token

        for event in (PointerPressed(Point(3, 3)), PointerReleased("other", Point(4, 4)),
                      SelectionChanged(""), TimerElapsed(token)):
            _, effects = transition(state, event, in_flight=True)
            assert effects == []

    def test_unknown_event(self):
        """Unknown events are a programming error"""
        with pytest.raises(TypeError):
            transition(TrackerState(), object())
