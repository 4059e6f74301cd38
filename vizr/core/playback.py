"""
Playback state and the per-surface frame scheduler.

The scheduler is host-agnostic: something outside (FrameClock under Qt, a
plain loop in tests) calls tick(timestamp_ms) once per display refresh and
then draw(surface, w, h). External mutations (load, play/pause, restart,
seek) are recorded and only take effect at the next tick boundary.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional

from app_config import MAX_FRAME_DELTA_MS
from vizr.core.logging import get_logger
from vizr.core.normalize import NormalizeResult, normalize_visualization
from vizr.core.scene import Scene
from vizr.render.demo import DemoAnimation
from vizr.render.shapes import ShapeRenderer
from vizr.render.surface import DrawingSurface


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class PlaybackState:
    elapsed_ms: float = 0.0
    is_playing: bool = True
    last_tick_ms: Optional[float] = None
    using_demo: bool = True


_UNSET = object()


class FrameScheduler:
    """
    Owns one surface's Playback State and cached Scene.
    Idle until attach(); Running/Paused while attached; Idle for good after detach().
    """

    def __init__(
        self,
        renderer: Optional[ShapeRenderer] = None,
        demo: Optional[DemoAnimation] = None,
        max_delta_ms: float = MAX_FRAME_DELTA_MS,
    ) -> None:
        self._log = get_logger(__name__)
        self.renderer = renderer or ShapeRenderer()
        self.demo = demo or DemoAnimation()
        self.max_delta_ms = max(0.0, float(max_delta_ms))

        self.playback = PlaybackState()
        self.scene: Optional[Scene] = None
        self.trace: str = ""

        self._attached = False
        self._detached = False
        self._cancel: Optional[Callable[[], None]] = None

        # Pending mutations, applied at the next tick boundary
        self._pending_scene = _UNSET
        self._pending_trace = ""
        self._pending_seek: Optional[float] = None

    # ──────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────────────────────────────────
    @property
    def state(self) -> SchedulerState:
        if not self._attached:
            return SchedulerState.IDLE
        return SchedulerState.RUNNING if self.playback.is_playing else SchedulerState.PAUSED

    def attach(self, cancel: Optional[Callable[[], None]] = None, playing: bool = True) -> None:
        """Bind to a surface. `cancel` stops the host's pending frame callbacks."""
        if self._detached:
            raise RuntimeError("FrameScheduler was detached; create a new one for a new surface")
        if self._attached:
            self._log.debug("attach() ignored: already attached")
            return
        self._attached = True
        self._cancel = cancel
        self.playback.is_playing = bool(playing)
        self.playback.last_tick_ms = None
        self._log.info("Scheduler attached (%s)", self.state.value)

    def detach(self) -> None:
        if not self._attached:
            return
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            try:
                cancel()
            except Exception:
                self._log.exception("Cancelling frame callbacks failed")
        self._attached = False
        self._detached = True
        self.playback.last_tick_ms = None
        self._pending_scene = _UNSET
        self._pending_seek = None
        self._log.info("Scheduler detached")

    # ──────────────────────────────────────────────────────────────────────────
    # External mutation points
    # ──────────────────────────────────────────────────────────────────────────
    def play(self) -> None:
        if not self._attached:
            self._log.debug("play() ignored: scheduler idle")
            return
        self.playback.is_playing = True

    def pause(self) -> None:
        if not self._attached:
            self._log.debug("pause() ignored: scheduler idle")
            return
        self.playback.is_playing = False

    def toggle(self) -> bool:
        """Flip play/pause; elapsed time is left untouched. Returns is_playing."""
        if self.playback.is_playing:
            self.pause()
        else:
            self.play()
        return self.playback.is_playing

    def load(self, scene: Optional[Scene], trace: str = "") -> None:
        """Queue a new Scene (None = demo); it replaces the current one at the next tick."""
        self._pending_scene = scene
        self._pending_trace = trace

    def load_payload(self, payload) -> NormalizeResult:
        result = normalize_visualization(payload)
        self.load(result.scene, result.trace)
        return result

    def restart(self) -> None:
        self.seek(0.0)

    def seek(self, elapsed_ms: float) -> None:
        self._pending_seek = max(0.0, float(elapsed_ms))

    # ──────────────────────────────────────────────────────────────────────────
    # Per-frame
    # ──────────────────────────────────────────────────────────────────────────
    @property
    def elapsed_ms(self) -> float:
        return self.playback.elapsed_ms

    @property
    def using_demo(self) -> bool:
        return self.playback.using_demo

    def _apply_pending(self) -> None:
        pb = self.playback
        if self._pending_scene is not _UNSET:
            scene = self._pending_scene
            self._pending_scene = _UNSET
            self.scene = scene
            self.trace = self._pending_trace
            pb.elapsed_ms = 0.0
            pb.last_tick_ms = None
            pb.using_demo = scene is None
            self.renderer.forget_failures()
            if scene is None:
                self._log.info("Using demo - no valid visualization found")
            else:
                self._log.info("Loaded visualization with %d layers (%d ms loop)", len(scene.layers), scene.duration)
        if self._pending_seek is not None:
            pb.elapsed_ms = self._pending_seek
            self._pending_seek = None

    def tick(self, timestamp_ms: float) -> float:
        """Advance the clock to `timestamp_ms`; returns the effective elapsed time."""
        if not self._attached:
            return self.playback.elapsed_ms
        self._apply_pending()

        pb = self.playback
        ts = float(timestamp_ms)
        if pb.last_tick_ms is None:
            delta = 0.0
        else:
            delta = min(max(0.0, ts - pb.last_tick_ms), self.max_delta_ms)
        pb.last_tick_ms = ts

        if pb.is_playing:
            pb.elapsed_ms += delta

        scene = self.scene
        if scene is not None and pb.elapsed_ms > scene.duration:
            pb.elapsed_ms = pb.elapsed_ms % scene.duration
        return pb.elapsed_ms

    def draw(self, surface: DrawingSurface, width: float, height: float) -> None:
        """Paint the current frame. Never raises."""
        t = self.playback.elapsed_ms
        try:
            surface.clear(width, height)
            if self.playback.using_demo or self.scene is None:
                self.demo.draw(surface, width, height, t, self.trace)
                return
            for index, layer in enumerate(self.scene.layers):
                try:
                    self.renderer.draw_layer(surface, layer, t, index)
                except Exception:
                    self._log.warning("Error drawing layer %d", index, exc_info=True)
        except Exception:
            self._log.exception("Frame draw failed; falling back to demo")
            try:
                self.demo.draw(surface, width, height, t, self.trace)
            except Exception:
                self._log.exception("Demo fallback draw failed")
