import logging
from typing import Any, Callable, Dict

from PyQt6 import sip
from PyQt6.QtCore import QObject, QThread, QTimer, pyqtSignal, pyqtSlot

from .models import ErrorKind, TranslationResult

logger = logging.getLogger(__name__)


class TranslationWorker(QThread):
    """Worker thread running one translation job"""

    result_ready = pyqtSignal(object)  # TranslationResult

    def __init__(self, job: Callable[[], TranslationResult], parent=None):
        super().__init__(parent)
        self.job = job

    def run(self):
        try:
            result = self.job()
        except Exception as e:
            # The client reports expected failures itself; this is a bug in the job
            logger.exception("Translation worker error")
            result = TranslationResult.failure(ErrorKind.PROVIDER_ERROR, str(e) or type(e).__name__)
        self.result_ready.emit(result)


class QtDispatcher(QObject):
    """Runs jobs on worker threads and hands results back on the GUI thread"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._callbacks: Dict[TranslationWorker, Callable[[TranslationResult], None]] = {}

    def __call__(self, job, on_done):
        worker = TranslationWorker(job, self)
        self._callbacks[worker] = on_done
        worker.result_ready.connect(self._on_result)
        worker.finished.connect(worker.deleteLater)
        worker.start()

    @pyqtSlot(object)
    def _on_result(self, result):
        worker = self.sender()
        on_done = self._callbacks.pop(worker, None)
        if on_done is not None:
            on_done(result)

    def shutdown(self, timeout_ms: int = 2000):
        """Wait for running workers before the application exits"""
        for worker in list(self._callbacks):
            if not sip.isdeleted(worker) and worker.isRunning():
                worker.wait(timeout_ms)
        self._callbacks.clear()


class QtScheduler(QObject):
    """Scheduler backed by one single-shot QTimer per callback"""

    def start(self, delay_seconds: float, callback: Callable[[], None]) -> Any:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(int(delay_seconds * 1000))
        timer.timeout.connect(lambda: self._fire(timer, callback))
        timer.start()
        return timer

    def cancel(self, handle: Any) -> None:
        if handle is None or sip.isdeleted(handle):
            return
        handle.stop()
        handle.deleteLater()

    def _fire(self, timer: QTimer, callback: Callable[[], None]):
        timer.deleteLater()
        callback()
