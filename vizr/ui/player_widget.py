from __future__ import annotations
from typing import Any, Optional
import json

import qtawesome as qta

from vizr.qt import QtCore, QtWidgets
from vizr.core.logging import get_logger
from vizr.core.normalize import NormalizeResult
from vizr.core.scene import Scene
from vizr.ui.canvas_view import CanvasView
from vizr.ui.marker_slider import MarkerSlider
from vizr.ui.theme import palette_for
from app_config import SAMPLE_VISUALIZATION


def format_ms(ms: float) -> str:
    """"MM:SS.mmm" for the transport label."""
    total = max(0, int(ms))
    m, rest = divmod(total, 60_000)
    s, msec = divmod(rest, 1000)
    return f"{m:02d}:{s:02d}.{msec:03d}"


class PlayerWidget(QtWidgets.QWidget):
    """
    Visualization player:
      - CanvasView (scheduler + clock)
      - Transport controls (play/pause, restart, theme, sample, debug)
      - MarkerSlider scene timeline
      - Status line and normalization trace strip
    Higher-level containers feed payloads in through set_visualization().
    """
    visualizationApplied = QtCore.Signal(object, str)   # (Scene | None, trace)
    playStateChanged = QtCore.Signal(bool)
    darkModeToggled = QtCore.Signal(bool)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, dark: bool = False,
                 autostart: bool = True) -> None:
        super().__init__(parent)
        self._log = get_logger(__name__)
        self._dark = dark
        self._last_payload: Any = None
        self._scene: Optional[Scene] = None
        self._trace = ""
        self._is_scrubbing = False

        self.canvas = CanvasView(self, dark=dark, autostart=autostart)

        # Transport
        self.play_btn = QtWidgets.QToolButton()
        self.play_btn.setToolTip("Play / pause")
        self.restart_btn = QtWidgets.QToolButton()
        self.restart_btn.setIcon(qta.icon("fa5s.undo"))
        self.restart_btn.setToolTip("Restart from 0")
        self.theme_btn = QtWidgets.QToolButton()
        self.theme_btn.setToolTip("Toggle dark mode")
        self.sample_btn = QtWidgets.QToolButton()
        self.sample_btn.setIcon(qta.icon("fa5s.vial"))
        self.sample_btn.setToolTip("Load the built-in sample visualization")
        self.debug_btn = QtWidgets.QToolButton()
        self.debug_btn.setIcon(qta.icon("fa5s.bug"))
        self.debug_btn.setToolTip("Log raw and normalized visualization data")

        self.time_label = QtWidgets.QLabel("00:00.000")
        self.status_label = QtWidgets.QLabel()
        self.debug_label = QtWidgets.QLabel()
        self.debug_label.setWordWrap(True)
        self.debug_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)
        self.debug_label.setVisible(False)

        # Timeline
        self.timeline = MarkerSlider(QtCore.Qt.Orientation.Horizontal)
        self.timeline.setEnabled(False)
        self.timeline.valueChanged.connect(self._on_slider_changed)
        self.timeline.markerClicked.connect(self._on_slider_changed)
        self.timeline.sliderPressed.connect(self._on_slider_pressed)
        self.timeline.sliderReleased.connect(self._on_slider_released)

        # Layout
        transport = QtWidgets.QHBoxLayout()
        transport.setContentsMargins(6, 6, 6, 0)
        transport.setSpacing(8)
        transport.addWidget(self.play_btn)
        transport.addWidget(self.restart_btn)
        transport.addWidget(self.theme_btn)
        transport.addWidget(self.sample_btn)
        transport.addWidget(self.debug_btn)
        transport.addSpacing(12)
        transport.addWidget(self.time_label)
        transport.addStretch()
        transport.addWidget(self.status_label)

        timeline_box = QtWidgets.QVBoxLayout()
        timeline_box.setContentsMargins(6, 0, 6, 6)
        timeline_box.addWidget(self.timeline)

        root = QtWidgets.QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)
        root.addWidget(self.canvas, 1)
        root.addLayout(transport)
        root.addLayout(timeline_box)
        root.addWidget(self.debug_label)

        # Wire controls
        self.play_btn.clicked.connect(self.toggle_play)
        self.restart_btn.clicked.connect(self.canvas.restart)
        self.theme_btn.clicked.connect(lambda: self.set_dark(not self._dark, emit=True))
        self.sample_btn.clicked.connect(self.load_sample)
        self.debug_btn.clicked.connect(self.log_debug)
        # Canvas signals → UI
        self.canvas.tickAdvanced.connect(self._on_tick)
        self.canvas.sceneChanged.connect(self._on_scene_changed)

        self.set_dark(dark)
        self._refresh_play_icon()
        self._update_status()

    # ──────────────────────────────────────────────────────────────────────────
    # Public API for composition
    # ──────────────────────────────────────────────────────────────────────────
    def set_visualization(self, payload: Any) -> NormalizeResult:
        """Replace the current scene with whatever `payload` normalizes to."""
        self._last_payload = payload
        result = self.canvas.set_visualization(payload)
        if result.ok:
            self._log.info("Visualization accepted: %s", result.trace)
        else:
            self._log.warning("Visualization rejected, showing demo: %s", result.trace)
        return result

    def load_sample(self) -> None:
        self._log.info("Loading sample visualization")
        self.set_visualization(SAMPLE_VISUALIZATION)
        if not self.canvas.is_playing:
            self.toggle_play()

    def toggle_play(self) -> None:
        playing = self.canvas.toggle_play()
        self._log.info("%s pressed", "play" if playing else "pause")
        self._refresh_play_icon()
        self._update_status()
        self.playStateChanged.emit(playing)

    def set_dark(self, dark: bool, emit: bool = False) -> None:
        self._dark = bool(dark)
        self.canvas.set_dark(self._dark)
        self.theme_btn.setIcon(qta.icon("fa5s.sun" if self._dark else "fa5s.moon"))
        pal = palette_for(self._dark)
        self.status_label.setStyleSheet(f"color: {pal.text_dim}; font-size: 12px;")
        self.time_label.setStyleSheet(f"color: {pal.text_dim}; font-family: monospace;")
        self.debug_label.setStyleSheet(
            f"background-color: {pal.debug_bg}; color: {pal.debug_text}; "
            f"font-family: monospace; font-size: 11px; padding: 8px 16px; "
            f"border-top: 1px solid {pal.border};"
        )
        if emit:
            self.darkModeToggled.emit(self._dark)

    @property
    def dark(self) -> bool:
        return self._dark

    @property
    def scene(self) -> Optional[Scene]:
        return self._scene

    @property
    def trace(self) -> str:
        return self._trace

    @property
    def last_payload(self) -> Any:
        return self._last_payload

    def log_debug(self) -> None:
        self._log.info("Visualization debug dump")
        self._log.info("Raw payload: %r", self._last_payload)
        self._log.info("Type: %s", type(self._last_payload).__name__)
        scene_json = json.dumps(self._scene.to_dict(), indent=2) if self._scene else "None"
        self._log.info("Normalized: %s", scene_json)
        self._log.info("Trace: %s", self._trace or "(none)")

    def status_text(self) -> str:
        mode = "Demo" if self.canvas.scheduler.using_demo else "Visualization"
        playing = "Yes" if self.canvas.is_playing else "No"
        return f"Status: {mode} | Playing: {playing}"

    def shutdown(self) -> None:
        self.canvas.detach()

    # ──────────────────────────────────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────────────────────────────────
    def _refresh_play_icon(self) -> None:
        self.play_btn.setIcon(qta.icon("fa5s.pause" if self.canvas.is_playing else "fa5s.play"))

    def _update_status(self) -> None:
        self.status_label.setText(self.status_text())

    @QtCore.Slot(float)
    def _on_tick(self, elapsed_ms: float) -> None:
        self.time_label.setText(format_ms(elapsed_ms))
        if self._scene is not None and not self._is_scrubbing:
            self.timeline.set_position(elapsed_ms)

    @QtCore.Slot(object, str)
    def _on_scene_changed(self, scene: Optional[Scene], trace: str) -> None:
        self._scene = scene
        self._trace = trace
        if scene is not None:
            self.timeline.set_timeline(scene.duration, scene.keyframe_times)
            self.timeline.setEnabled(True)
        else:
            self.timeline.set_timeline(0, ())
            self.timeline.setEnabled(False)
        self.debug_label.setText(f"Debug: {trace}" if trace else "")
        self.debug_label.setVisible(bool(trace))
        self._update_status()
        self.visualizationApplied.emit(scene, trace)

    def _on_slider_changed(self, value: int) -> None:
        if self._scene is None:
            return
        self.canvas.seek(value)

    def _on_slider_pressed(self) -> None:
        self._is_scrubbing = True

    def _on_slider_released(self) -> None:
        self._is_scrubbing = False
        self.canvas.seek(self.timeline.value())
