"""Panel presenter: owns the affordance icon, the result panel and the UI state.

The presenter is toolkit-agnostic. Widgets live behind ``PanelView``, timers
behind ``Scheduler`` and background work behind a dispatcher callable
``dispatch(job, on_done)``; the Qt versions are in overlay_ui and
translation_workers.
"""

import html
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from .config import AppConfig
from .layout import compute_panel_layout, provisional_width
from .models import PanelLayout, Point, SelectionSnapshot, Size, TranslationResult, UIPhase, UIState
from .ui_texts import error_message, loading_message, text

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], TranslationResult], Callable[[TranslationResult], None]], None]


class PanelView(ABC):
    """Visual surfaces the presenter drives"""

    @abstractmethod
    def viewport_size(self) -> Size:
        """Current viewport in pixels."""

    @abstractmethod
    def show_affordance(self, position: Point) -> None:
        """Create and show the icon with its top-left at position."""

    @abstractmethod
    def set_affordance_visible(self, visible: bool) -> None:
        """Hide or re-show an existing icon without destroying it."""

    @abstractmethod
    def render_panel(self, content_html: str, loading: bool, width: float,
                     copy_label: str) -> Size:
        """Render content invisibly at width and return the measured size."""

    @abstractmethod
    def place_panel(self, layout: PanelLayout) -> None:
        """Apply the computed geometry and make the panel visible."""

    @abstractmethod
    def set_copy_label(self, label: str) -> None:
        """Relabel the copy button."""

    @abstractmethod
    def copy_to_clipboard(self, plain_text: str) -> bool:
        """Put text on the clipboard; False when that failed."""

    @abstractmethod
    def close_all(self) -> None:
        """Remove icon and panel together."""


class Scheduler(ABC):
    @abstractmethod
    def start(self, delay_seconds: float, callback: Callable[[], None]) -> Any:
        """Run callback once after the delay; returns a cancellation handle."""

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback; unknown or fired handles are ignored."""


def format_translation_html(translation: str) -> str:
    """Keep markup the model produced, otherwise wrap paragraphs"""
    if "<p>" in translation or "<h" in translation:
        return translation
    paragraphs = [p.strip() for p in translation.split("\n\n")]
    return "".join(
        "<p>" + html.escape(p).replace("\n", "<br>") + "</p>"
        for p in paragraphs if p
    )


class PanelPresenter:
    """Drives the affordance and result panel through the UIState machine.

    Exactly one ``UIState`` is live. Entering a state with visuals tears the
    previous visuals down first. ``in_flight`` is the single-translation flag:
    it is set on activation and cleared only when the dispatched job reports back,
    even if the UI was torn down in between.
    """

    AFFORDANCE_OFFSET = 10
    OUTSIDE_CLICK_ARM_SECONDS = 0.1
    COPY_FEEDBACK_SECONDS = 1.5

    def __init__(self, view: PanelView, client, scheduler: Scheduler,
                 dispatcher: Dispatcher, store):
        self.view = view
        self.client = client
        self.scheduler = scheduler
        self.dispatcher = dispatcher
        self.store = store

        self._state = UIState.idle()
        self._in_flight = False
        self._request_id = 0
        self._timers: Dict[str, Any] = {}
        self._outside_click_armed = False
        self._panel_anchor: Optional[Point] = None
        self._plain_text = ""
        self.layout: Optional[PanelLayout] = None

    @property
    def state(self) -> UIState:
        return self._state

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _set_state(self, state: UIState):
        if state.phase != self._state.phase:
            logger.debug("UI state %s -> %s", self._state.phase.value, state.phase.value)
        self._state = state

    # Lifecycle

    def arm(self, snapshot: SelectionSnapshot) -> None:
        """A new selection is waiting for its delay; drop any older UI"""
        if self._in_flight:
            return
        if self._state.phase != UIPhase.IDLE:
            self.teardown()
        self._set_state(UIState(UIPhase.AFFORDANCE_ARMED, snapshot))

    def show_affordance(self, snapshot: Optional[SelectionSnapshot] = None) -> bool:
        if self._in_flight or self._state.has_visuals:
            return False
        snapshot = snapshot or self._state.snapshot
        if snapshot is None:
            return False

        self.view.show_affordance(snapshot.anchor.offset(self.AFFORDANCE_OFFSET, self.AFFORDANCE_OFFSET))
        self._set_state(UIState(UIPhase.AFFORDANCE_SHOWN, snapshot))
        self._arm_outside_click()
        return True

    def activate(self, pointer: Optional[Point] = None) -> bool:
        """Start translating the shown selection; ignored while one is in flight"""
        if self._in_flight or self._state.phase != UIPhase.AFFORDANCE_SHOWN:
            return False

        snapshot = self._state.snapshot
        config = AppConfig.from_store(self.store)
        self._in_flight = True
        self._request_id += 1
        request_id = self._request_id
        self._panel_anchor = pointer or snapshot.anchor

        self._set_state(UIState(UIPhase.LOADING, snapshot))
        self._render(html.escape(loading_message(config.interface_language, config.target_language)),
                     loading=True, config=config)

        logger.info("Translating selection (%d chars)", len(snapshot.text))
        client = self.client
        language = config.target_language

        def job():
            return client.translate(snapshot.text, language, True, config=config)

        def done(result, request_id=request_id):
            self.present(result, request_id)

        self.dispatcher(job, done)
        return True

    def present(self, result: TranslationResult, request_id: Optional[int] = None) -> bool:
        if request_id is None or request_id == self._request_id:
            self._in_flight = False
        if request_id is not None and request_id != self._request_id:
            return False
        if self._state.phase != UIPhase.LOADING:
            logger.debug("Discarding translation result; panel was closed")
            return False

        config = AppConfig.from_store(self.store)
        if result.ok:
            self._plain_text = result.translated_text
            content = format_translation_html(result.translated_text)
        else:
            self._plain_text = error_message(config.interface_language, result)
            content = "<p>" + html.escape(self._plain_text) + "</p>"
            logger.warning("Translation failed: %s", result.error_kind.value)

        self._set_state(UIState(UIPhase.RESULT, self._state.snapshot, content))
        self.view.set_affordance_visible(False)
        self._render(content, loading=False, config=config)
        return True

    def teardown(self) -> None:
        """Remove icon and panel and cancel every presentation timer"""
        for name in list(self._timers):
            self._cancel_timer(name)
        self._outside_click_armed = False
        self._plain_text = ""
        self._panel_anchor = None
        self.layout = None
        self.view.close_all()
        self._set_state(UIState.idle())

    # Interaction

    def handle_click(self, inside_ui: bool) -> bool:
        """Outside clicks close everything once the arming delay has passed"""
        if inside_ui or not self._state.has_visuals or not self._outside_click_armed:
            return False
        logger.debug("Outside click; closing translator UI")
        self.teardown()
        return True

    def copy_result(self) -> bool:
        if self._state.phase != UIPhase.RESULT or not self._plain_text:
            return False
        if not self.view.copy_to_clipboard(self._plain_text):
            logger.warning("Copy to clipboard failed")
            return False

        config = AppConfig.from_store(self.store)
        self.view.set_copy_label(text(config.interface_language, "copied"))
        self._start_timer("copy_feedback", self.COPY_FEEDBACK_SECONDS,
                          lambda: self.view.set_copy_label(text(config.interface_language, "copyButton")))
        return True

    # Internals

    def _render(self, content_html: str, loading: bool, config: AppConfig):
        viewport = self.view.viewport_size()
        width = provisional_width(viewport, config.max_width)
        measured = self.view.render_panel(content_html, loading, width,
                                          text(config.interface_language, "copyButton"))
        anchor = self._panel_anchor or self._state.snapshot.anchor
        self.layout = compute_panel_layout(anchor, measured, viewport, config.max_width)
        self.view.place_panel(self.layout)
        self._arm_outside_click()

    def _arm_outside_click(self):
        self._outside_click_armed = False

        def arm():
            self._outside_click_armed = True

        self._start_timer("outside_click", self.OUTSIDE_CLICK_ARM_SECONDS, arm)

    def _start_timer(self, name: str, delay: float, callback: Callable[[], None]):
        self._cancel_timer(name)

        def fire():
            self._timers.pop(name, None)
            callback()

        self._timers[name] = self.scheduler.start(delay, fire)

    def _cancel_timer(self, name: str):
        handle = self._timers.pop(name, None)
        if handle is not None:
            self.scheduler.cancel(handle)
