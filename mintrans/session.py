"""Glue between host events, the selection tracker and the panel presenter."""

import logging
from dataclasses import replace
from typing import Any, Optional

from .config import AppConfig
from .presenter import PanelPresenter, Scheduler
from .selection_tracker import (
    CancelTimer, ShowAffordance, StartTimer, TeardownUI, TimerElapsed,
    TrackerPhase, TrackerState, transition,
)

logger = logging.getLogger(__name__)


class TranslatorSession:
    """Feeds host events through ``transition`` and runs the resulting effects.

    Holds the one selection timer. The delay is read from settings at creation
    and again on ``reload_config``.
    """

    def __init__(self, presenter: PanelPresenter, scheduler: Scheduler, store):
        self.presenter = presenter
        self.scheduler = scheduler
        self.store = store
        self.state = TrackerState()
        self._timer: Optional[Any] = None
        self.delay_seconds = 0.5
        self.reload_config()

    def reload_config(self):
        self.delay_seconds = AppConfig.from_store(self.store).delay_seconds
        logger.debug("Selection delay set to %.1fs", self.delay_seconds)

    def handle(self, event) -> None:
        self.state, effects = transition(
            self.state, event,
            delay_seconds=self.delay_seconds,
            in_flight=self.presenter.in_flight,
        )
        for effect in effects:
            self._apply(effect)

    def _apply(self, effect):
        if isinstance(effect, CancelTimer):
            self._cancel_timer()
        elif isinstance(effect, StartTimer):
            self.presenter.arm(effect.snapshot)
            token = effect.token
            self._timer = self.scheduler.start(effect.delay_seconds,
                                               lambda: self._on_timer(token))
        elif isinstance(effect, TeardownUI):
            self.presenter.teardown()
        elif isinstance(effect, ShowAffordance):
            self.presenter.show_affordance(effect.snapshot)

    def _on_timer(self, token: int):
        self._timer = None
        self.handle(TimerElapsed(token))

    def _cancel_timer(self):
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
            self._timer = None

    def click(self, inside_ui: bool) -> bool:
        """A completed click; closes the UI when it landed outside it"""
        if self.presenter.handle_click(inside_ui):
            self._reset_tracker()
            return True
        return False

    def activate(self) -> bool:
        """Hover or click on the affordance"""
        return self.presenter.activate(self.state.pointer)

    def close(self) -> None:
        """Programmatic close of every translator surface"""
        self._cancel_timer()
        self.presenter.teardown()
        self._reset_tracker()

    def _reset_tracker(self):
        self.state = replace(self.state, phase=TrackerPhase.IDLE, snapshot=None,
                             timer_token=self.state.timer_token + 1)
