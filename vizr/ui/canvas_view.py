from __future__ import annotations
from typing import Any, Optional

from app_config import MIN_SURFACE_SIZE, TICK_INTERVAL_MS
from vizr.qt import QtCore, QtGui, QtWidgets
from vizr.core.frame_clock import FrameClock
from vizr.core.logging import get_logger
from vizr.core.normalize import NormalizeResult
from vizr.core.playback import FrameScheduler, SchedulerState
from vizr.core.scene import Scene
from vizr.render.demo import DemoAnimation
from vizr.render.shapes import ShapeRenderer
from vizr.render.surface import QPainterSurface
from vizr.ui.theme import palette_for


class CanvasView(QtWidgets.QWidget):
    """
    The drawing surface. Owns a FrameScheduler (playback state + cached scene)
    and the FrameClock that drives it; each clock tick advances the scheduler
    and schedules a repaint, and paintEvent draws the current frame.
    """
    tickAdvanced = QtCore.Signal(float)          # elapsed ms after the tick
    sceneChanged = QtCore.Signal(object, str)    # (Scene | None, trace), once applied
    playStateChanged = QtCore.Signal(bool)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, dark: bool = False,
                 interval_ms: int = TICK_INTERVAL_MS, autostart: bool = True) -> None:
        super().__init__(parent)
        self._log = get_logger(__name__)
        self.setMinimumSize(MIN_SURFACE_SIZE, MIN_SURFACE_SIZE)
        self.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Expanding)
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_OpaquePaintEvent, True)

        self._dark = dark
        self.scheduler = FrameScheduler(ShapeRenderer(dark=dark), DemoAnimation(dark=dark))
        self.clock = FrameClock(interval_ms, self)
        self.clock.ticked.connect(self._on_tick)
        self._seen_scene: Optional[Scene] = None
        self._seen_trace = ""

        self.scheduler.attach(cancel=self.clock.stop)
        if autostart:
            self.clock.start()

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────
    def set_visualization(self, payload: Any) -> NormalizeResult:
        """Normalize and queue a new payload; takes effect at the next tick."""
        result = self.scheduler.load_payload(payload)
        self._log.debug("set_visualization: %s", result.trace)
        return result

    def load_scene(self, scene: Optional[Scene], trace: str = "") -> None:
        self.scheduler.load(scene, trace)

    def toggle_play(self) -> bool:
        playing = self.scheduler.toggle()
        self.playStateChanged.emit(playing)
        return playing

    def restart(self) -> None:
        self.scheduler.restart()

    def seek(self, elapsed_ms: float) -> None:
        self.scheduler.seek(elapsed_ms)

    def set_dark(self, dark: bool) -> None:
        self._dark = bool(dark)
        self.scheduler.renderer.dark = self._dark
        self.scheduler.demo.dark = self._dark
        self.update()

    @property
    def is_playing(self) -> bool:
        return self.scheduler.state is SchedulerState.RUNNING

    def surface_size(self) -> QtCore.QSize:
        """Widget size clamped to the minimum usable size."""
        return QtCore.QSize(max(MIN_SURFACE_SIZE, self.width()), max(MIN_SURFACE_SIZE, self.height()))

    def advance(self, timestamp_ms: float) -> float:
        """One scheduler tick at `timestamp_ms` followed by a repaint request."""
        elapsed = self.scheduler.tick(timestamp_ms)
        if self.scheduler.scene is not self._seen_scene or self.scheduler.trace != self._seen_trace:
            self._seen_scene = self.scheduler.scene
            self._seen_trace = self.scheduler.trace
            self.sceneChanged.emit(self._seen_scene, self._seen_trace)
        self.tickAdvanced.emit(elapsed)
        self.update()
        return elapsed

    def detach(self) -> None:
        """Stop the clock and release the scheduler; the canvas stays blank-safe."""
        self.scheduler.detach()

    # ──────────────────────────────────────────────────────────────────────────
    # Qt events
    # ──────────────────────────────────────────────────────────────────────────
    @QtCore.Slot(float)
    def _on_tick(self, timestamp_ms: float) -> None:
        if self.scheduler.state is SchedulerState.IDLE:
            return
        self.advance(timestamp_ms)

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        size = self.surface_size()
        p = QtGui.QPainter(self)
        try:
            p.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
            p.setRenderHint(QtGui.QPainter.RenderHint.TextAntialiasing, True)
            surface = QPainterSurface(p, background=QtGui.QColor(palette_for(self._dark).background))
            self.scheduler.draw(surface, size.width(), size.height())
        finally:
            p.end()

    def closeEvent(self, e: QtGui.QCloseEvent) -> None:
        self.detach()
        super().closeEvent(e)
