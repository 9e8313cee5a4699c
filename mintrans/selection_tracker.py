"""Selection tracker: decides when the affordance is armed, shown or torn down.

``transition`` is a pure function of (state, event). It never touches widgets or
timers itself; it returns effects which ``TranslatorSession`` applies. Events whose
target lies inside the translator's own surfaces arrive with ``inside_ui=True``
and never lead to teardown.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union

from .logging_config import preview
from .models import Point, SelectionSnapshot

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.5


class TrackerPhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"


@dataclass(frozen=True)
class TrackerState:
    phase: TrackerPhase = TrackerPhase.IDLE
    snapshot: Optional[SelectionSnapshot] = None
    # Incremented whenever a timer starts or is invalidated; stale timers are ignored
    timer_token: int = 0
    pointer: Point = Point(0, 0)
    # True between a pointer press outside the UI and the matching release
    gesture_active: bool = False


# Events

@dataclass(frozen=True)
class PointerMoved:
    point: Point


@dataclass(frozen=True)
class PointerPressed:
    point: Optional[Point] = None
    inside_ui: bool = False


@dataclass(frozen=True)
class PointerReleased:
    selected_text: str = ""
    point: Optional[Point] = None
    inside_ui: bool = False


@dataclass(frozen=True)
class SelectionChanged:
    selected_text: str = ""
    inside_ui: bool = False


@dataclass(frozen=True)
class TimerElapsed:
    token: int


TrackerEvent = Union[PointerMoved, PointerPressed, PointerReleased, SelectionChanged, TimerElapsed]


# Effects

@dataclass(frozen=True)
class CancelTimer:
    pass


@dataclass(frozen=True)
class StartTimer:
    delay_seconds: float
    token: int
    snapshot: SelectionSnapshot


@dataclass(frozen=True)
class TeardownUI:
    pass


@dataclass(frozen=True)
class ShowAffordance:
    snapshot: SelectionSnapshot


Effect = Union[CancelTimer, StartTimer, TeardownUI, ShowAffordance]


def _cleared(state: TrackerState, **changes) -> TrackerState:
    return replace(state, phase=TrackerPhase.IDLE, snapshot=None,
                   timer_token=state.timer_token + 1, **changes)


def transition(state: TrackerState, event: TrackerEvent, *,
               delay_seconds: float = DEFAULT_DELAY_SECONDS,
               in_flight: bool = False) -> Tuple[TrackerState, List[Effect]]:
    """Apply one host event and return the new state plus effects to run"""
    if isinstance(event, PointerMoved):
        return replace(state, pointer=event.point), []

    if isinstance(event, PointerPressed):
        if event.inside_ui or in_flight:
            return state, []
        pointer = event.point or state.pointer
        logger.debug("Pointer down: clearing selection UI")
        return (_cleared(state, pointer=pointer, gesture_active=True),
                [CancelTimer(), TeardownUI()])

    if isinstance(event, SelectionChanged):
        if event.inside_ui or in_flight:
            return state, []
        if event.selected_text.strip() or state.gesture_active:
            return state, []
        logger.debug("Selection cleared")
        return _cleared(state), [CancelTimer(), TeardownUI()]

    if isinstance(event, PointerReleased):
        if event.inside_ui:
            return state, []
        pointer = event.point or state.pointer
        state = replace(state, gesture_active=False, pointer=pointer)
        if in_flight:
            return state, []

        text = event.selected_text.strip()
        if not text:
            return _cleared(state), [CancelTimer(), TeardownUI()]

        snapshot = SelectionSnapshot(text, pointer)
        token = state.timer_token + 1
        logger.debug("Selection detected: %s", preview(text))
        return (replace(state, phase=TrackerPhase.PENDING, snapshot=snapshot, timer_token=token),
                [CancelTimer(), StartTimer(delay_seconds, token, snapshot)])

    if isinstance(event, TimerElapsed):
        if in_flight or state.phase != TrackerPhase.PENDING or event.token != state.timer_token:
            return state, []
        return (replace(state, phase=TrackerPhase.COMMITTED),
                [TeardownUI(), ShowAffordance(state.snapshot)])

    raise TypeError(f"Unknown tracker event: {event!r}")
