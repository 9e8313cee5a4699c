import os
import sys
from pathlib import Path

import pytest

# Ensure the project root is importable when running `pytest` via its entrypoint
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from mintrans.config import DEFAULTS  # noqa: E402
from mintrans.models import Size, TranslationResult  # noqa: E402
from mintrans.presenter import PanelView, Scheduler  # noqa: E402


class MemoryConfigStore:
    """Dict-backed stand-in for ConfigStore"""

    def __init__(self, values=None):
        self.values = dict(values or {})
        self.synced = 0

    def get(self, key, default=None):
        if default is None:
            default = DEFAULTS.get(key)
        return self.values.get(key, default)

    def set(self, key, value):
        self.values[key] = value

    def sync(self):
        self.synced += 1

    def clear(self):
        self.values.clear()


class FakeScheduler(Scheduler):
    """Scheduler driven by a manual clock"""

    def __init__(self):
        self.now = 0.0
        self._pending = {}
        self._next_handle = 0

    def start(self, delay_seconds, callback):
        self._next_handle += 1
        self._pending[self._next_handle] = (self.now + delay_seconds, callback)
        return self._next_handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending(self):
        return len(self._pending)

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [(when, handle) for handle, (when, _) in self._pending.items() if when <= target + 1e-9]
            if not due:
                break
            when, handle = min(due)
            _, callback = self._pending.pop(handle)
            self.now = max(self.now, when)
            callback()
        self.now = target


class FakeView(PanelView):
    """Records what the presenter asked the widgets to do"""

    def __init__(self, viewport=Size(1280, 800), panel_size=None):
        self.viewport = viewport
        self.panel_size = panel_size
        self.icon_position = None
        self.icon_visible = False
        self.icons_shown = 0
        self.renders = []
        self.layout = None
        self.panel_visible = False
        self.copy_label = None
        self.clipboard = []
        self.closed = 0

    def viewport_size(self):
        return self.viewport

    def show_affordance(self, position):
        self.icon_position = position
        self.icon_visible = True
        self.icons_shown += 1

    def set_affordance_visible(self, visible):
        self.icon_visible = visible

    def render_panel(self, content_html, loading, width, copy_label):
        self.renders.append((content_html, loading, width))
        self.copy_label = copy_label
        return self.panel_size or Size(width, 100)

    def place_panel(self, layout):
        self.layout = layout
        self.panel_visible = True

    def set_copy_label(self, label):
        self.copy_label = label

    def copy_to_clipboard(self, plain_text):
        self.clipboard.append(plain_text)
        return True

    def close_all(self):
        self.icon_position = None
        self.icon_visible = False
        self.panel_visible = False
        self.layout = None
        self.closed += 1

    @property
    def last_render(self):
        return self.renders[-1] if self.renders else None


class SyncDispatcher:
    """Runs the job inline"""

    def __call__(self, job, on_done):
        on_done(job())


class DeferredDispatcher:
    """Holds jobs until the test completes them"""

    def __init__(self):
        self.jobs = []

    def __call__(self, job, on_done):
        self.jobs.append((job, on_done))

    def complete(self, index=0, result=None):
        job, on_done = self.jobs.pop(index)
        on_done(result if result is not None else job())


class FakeClient:
    def __init__(self, result=None):
        self.result = result or TranslationResult.success("translated")
        self.calls = []
        self.configs = []

    def translate(self, text, target_language=None, preserve_format=True, config=None):
        self.calls.append((text, target_language, preserve_format))
        self.configs.append(config)
        return self.result


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stand-in for requests.Session; raises `error` when set"""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def store():
    return MemoryConfigStore({"apiKey": "sk-test", "selectedAI": "openai", "interfaceLanguage": "en"})


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture(scope="session")
def qapp():
    """One QApplication on the offscreen platform for widget tests"""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
