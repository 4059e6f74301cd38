from __future__ import annotations
from typing import Optional

from app_config import TICK_INTERVAL_MS
from vizr.qt import QtCore
from vizr.core.logging import get_logger


class FrameClock(QtCore.QObject):
    """
    Host refresh driver: emits `ticked(timestamp_ms)` on a precise QTimer,
    timestamps taken from a monotonic QElapsedTimer. stop() cancels any
    pending tick; nothing fires after it returns.
    """
    ticked = QtCore.Signal(float)  # monotonic ms

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent)
        self._log = get_logger(__name__)
        self._elapsed = QtCore.QElapsedTimer()
        self._timer = QtCore.QTimer(self)
        self._timer.setTimerType(QtCore.Qt.TimerType.PreciseTimer)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._on_timeout)
        self._stopped = False

    def start(self) -> None:
        if self._stopped:
            raise RuntimeError("FrameClock was stopped; create a new clock")
        if self._timer.isActive():
            return
        self._elapsed.start()
        self._timer.start()
        self._log.debug("FrameClock started (%d ms interval)", self._timer.interval())

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._timer.stop()
        self._log.debug("FrameClock stopped")

    def is_active(self) -> bool:
        return self._timer.isActive()

    def now_ms(self) -> float:
        if not self._elapsed.isValid():
            return 0.0
        return self._elapsed.nsecsElapsed() / 1_000_000.0

    @QtCore.Slot()
    def _on_timeout(self) -> None:
        if self._stopped:
            return
        self.ticked.emit(self.now_ms())
