"""Widget-level behaviour; clocks are not started, ticks are driven by hand."""
from __future__ import annotations

import json
import time

import pytest

from app_config import MIN_SURFACE_SIZE, SAMPLE_VISUALIZATION
from vizr.qt import QtCore, QtWidgets
from vizr.core.config import Settings
from vizr.core.frame_clock import FrameClock
from vizr.core.normalize import normalize
from vizr.core.playback import SchedulerState
from vizr.ui.canvas_view import CanvasView
from vizr.ui.inspector_tabs import InspectorTabs, describe_layer
from vizr.ui.marker_slider import MarkerSlider
from vizr.ui.player_widget import PlayerWidget, format_ms


@pytest.fixture
def settings(qapp, tmp_path) -> Settings:
    return Settings(QtCore.QSettings(str(tmp_path / "vizr.ini"), QtCore.QSettings.Format.IniFormat))


# ---------------------------------------------------------------------------
# FrameClock
# ---------------------------------------------------------------------------


def test_frame_clock_ticks_until_stopped(qapp) -> None:
    clock = FrameClock(5)
    stamps = []
    clock.ticked.connect(stamps.append)
    clock.start()
    assert clock.is_active()
    deadline = time.monotonic() + 2.0
    while len(stamps) < 2 and time.monotonic() < deadline:
        qapp.processEvents()
        time.sleep(0.002)
    clock.stop()
    assert len(stamps) >= 2
    assert stamps[1] >= stamps[0] >= 0.0
    assert not clock.is_active()

    seen = len(stamps)
    for _ in range(5):
        qapp.processEvents()
        time.sleep(0.01)
    assert len(stamps) == seen
    with pytest.raises(RuntimeError):
        clock.start()


# ---------------------------------------------------------------------------
# CanvasView
# ---------------------------------------------------------------------------


def test_canvas_applies_payload_on_next_tick(qapp, canonical_payload) -> None:
    canvas = CanvasView(autostart=False)
    changes = []
    canvas.sceneChanged.connect(lambda scene, trace: changes.append((scene, trace)))

    result = canvas.set_visualization({"visualization": canonical_payload})
    assert result.ok
    assert canvas.scheduler.scene is None

    canvas.advance(0)
    assert canvas.scheduler.scene == normalize(canonical_payload)
    assert len(changes) == 1
    assert "unwrapped .visualization" in changes[0][1]

    canvas.advance(16)
    assert len(changes) == 1
    canvas.detach()


def test_canvas_play_pause_and_detach(qapp) -> None:
    canvas = CanvasView(autostart=False)
    states = []
    canvas.playStateChanged.connect(states.append)
    assert canvas.is_playing
    canvas.advance(0)
    canvas.advance(100)
    assert canvas.toggle_play() is False
    assert canvas.advance(200) == pytest.approx(100)
    assert states == [False]

    canvas.detach()
    assert canvas.scheduler.state is SchedulerState.IDLE
    assert not canvas.clock.is_active()
    canvas._on_tick(500)
    assert canvas.scheduler.elapsed_ms == pytest.approx(100)


def test_canvas_surface_is_never_smaller_than_minimum(qapp) -> None:
    canvas = CanvasView(autostart=False)
    canvas.resize(10, 10)
    size = canvas.surface_size()
    assert size.width() >= MIN_SURFACE_SIZE
    assert size.height() >= MIN_SURFACE_SIZE
    canvas.detach()


def test_canvas_paints_after_detach(qapp) -> None:
    canvas = CanvasView(autostart=False)
    canvas.resize(200, 150)
    canvas.detach()
    # grab() renders through paintEvent
    assert not canvas.grab().isNull()


# ---------------------------------------------------------------------------
# PlayerWidget
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("ms, text", [(0, "00:00.000"), (65_432, "01:05.432"), (-5, "00:00.000")])
def test_format_ms(ms, text) -> None:
    assert format_ms(ms) == text


def test_player_status_and_timeline(qapp) -> None:
    player = PlayerWidget(autostart=False)
    assert player.status_text() == "Status: Demo | Playing: Yes"
    assert not player.timeline.isEnabled()

    player.set_visualization(SAMPLE_VISUALIZATION)
    player.canvas.advance(0)
    assert player.scene is not None
    assert player.status_text() == "Status: Visualization | Playing: Yes"
    assert player.timeline.isEnabled()
    assert player.timeline.maximum() == 4000
    assert player.timeline.markers() == [0, 2000]

    player.canvas.advance(200)
    assert player.time_label.text() == "00:00.200"
    assert player.timeline.value() == 200

    player.toggle_play()
    assert player.status_text() == "Status: Visualization | Playing: No"
    player.shutdown()


def test_player_rejected_payload_shows_trace(qapp) -> None:
    player = PlayerWidget(autostart=False)
    visualizations = []
    player.visualizationApplied.connect(lambda scene, trace: visualizations.append(scene))

    result = player.set_visualization("just some prose")
    assert not result.ok
    player.canvas.advance(0)
    assert visualizations == [None]
    assert player.debug_label.text().startswith("Debug: input: str")
    assert not player.debug_label.isHidden()
    assert player.status_text().startswith("Status: Demo")
    player.shutdown()


def test_player_sample_resumes_playback(qapp) -> None:
    player = PlayerWidget(autostart=False)
    player.toggle_play()
    assert not player.canvas.is_playing
    player.load_sample()
    assert player.canvas.is_playing
    assert player.last_payload is SAMPLE_VISUALIZATION
    player.shutdown()


def test_player_dark_toggle(qapp) -> None:
    player = PlayerWidget(autostart=False)
    toggled = []
    player.darkModeToggled.connect(toggled.append)
    player.set_dark(True)
    assert toggled == []
    player.set_dark(False, emit=True)
    player.theme_btn.click()
    assert toggled == [False, True]
    assert player.dark
    assert player.canvas.scheduler.renderer.dark
    assert player.canvas.scheduler.demo.dark
    player.shutdown()


def test_player_seek_from_timeline(qapp) -> None:
    player = PlayerWidget(autostart=False)
    player.set_visualization(SAMPLE_VISUALIZATION)
    player.canvas.advance(0)
    player.timeline.setValue(1500)
    assert player.canvas.advance(0) == pytest.approx(1500)
    player.shutdown()


# ---------------------------------------------------------------------------
# MarkerSlider
# ---------------------------------------------------------------------------


def test_marker_slider(qapp) -> None:
    slider = MarkerSlider()
    emitted = []
    slider.valueChanged.connect(emitted.append)
    slider.set_timeline(4000, [2000, 0, 2000, -5])
    assert slider.maximum() == 4000
    assert slider.markers() == [0, 2000]
    assert slider.nearest_marker(1900) == 2000
    slider.set_position(5000)
    assert slider.value() == 4000
    assert emitted == []


def test_marker_slider_without_markers(qapp) -> None:
    slider = MarkerSlider()
    assert slider.nearest_marker(10) is None


# ---------------------------------------------------------------------------
# InspectorTabs
# ---------------------------------------------------------------------------


def test_describe_layer() -> None:
    scene = normalize({"layers": [{"type": "label", "props": {"text": "hi", "glow": 1},
                                   "animations": [{"property": "x", "to": 5}]}]})
    text = describe_layer(0, scene.layers[0])
    assert text.startswith("#0  label  (text)")
    assert "animates x" in text
    assert "ignored: glow" in text


def test_inspector_shows_scene_and_payload(qapp, canonical_payload) -> None:
    tabs = InspectorTabs()
    tabs.show_scene(normalize(canonical_payload), "input: dict -> layers (3)")
    assert tabs.layer_list.count() == 3
    assert "3 layers" in tabs.summary_label.text()
    assert json.loads(tabs.scene_edit.toPlainText())["duration"] == 4000

    tabs.show_payload(canonical_payload)
    assert json.loads(tabs.raw_edit.toPlainText()) == canonical_payload

    tabs.show_scene(None, "input: NoneType -> empty")
    assert tabs.layer_list.count() == 0
    assert tabs.summary_label.text() == "No scene (demo)"
    assert tabs.trace_edit.text() == "input: NoneType -> empty"


# ---------------------------------------------------------------------------
# MainWindow
# ---------------------------------------------------------------------------


def test_main_window_deliver_and_open(qapp, settings, tmp_path, canonical_payload, monkeypatch) -> None:
    from vizr.ui.main_window import MainWindow

    warnings = []
    monkeypatch.setattr(QtWidgets.QMessageBox, "warning", lambda *a, **k: warnings.append(a))

    win = MainWindow(settings=settings, dark=False, autostart=False)
    win.deliver(canonical_payload)
    win.player.canvas.advance(0)
    assert win.inspector.layer_list.count() == 3

    reply = tmp_path / "reply.md"
    reply.write_text("Sure!\n```json\n" + json.dumps(SAMPLE_VISUALIZATION) + "\n```\n", encoding="utf-8")
    assert win.open_path(str(reply))
    win.player.canvas.advance(16)
    assert win.player.scene.id == "vis_sample"

    assert not win.open_path(str(tmp_path / "missing.json"))
    assert len(warnings) == 1
    win.player.shutdown()


def test_main_window_persists_dark_mode(qapp, settings) -> None:
    from vizr.ui.main_window import MainWindow

    win = MainWindow(settings=settings, autostart=False)
    assert not win.player.dark
    win.dark_act.setChecked(True)
    assert win.player.dark
    assert settings.get_bool("ui/dark_mode")

    win.show()
    win.close()
    assert win.player.canvas.scheduler.state is SchedulerState.IDLE

    again = MainWindow(settings=settings, autostart=False)
    assert again.player.dark
    again.player.shutdown()


def test_dev_mode_opens_startup_payload(qapp, settings, tmp_path, monkeypatch) -> None:
    import app_config
    from vizr.ui.main_window import MainWindow

    startup = tmp_path / "startup.json"
    startup.write_text(json.dumps(SAMPLE_VISUALIZATION), encoding="utf-8")
    monkeypatch.setattr(app_config, "DEV_STARTUP_VIZ", str(startup))

    win = MainWindow(settings=settings, autostart=False)
    monkeypatch.setattr(app_config, "DEV_MODE", False)
    win.dev_seed_from_config()
    win.player.canvas.advance(0)
    assert win.player.scene is None

    monkeypatch.setattr(app_config, "DEV_MODE", True)
    win.dev_seed_from_config()
    win.player.canvas.advance(16)
    assert win.player.scene.id == "vis_sample"
    win.player.shutdown()


def test_dev_mode_ignores_relative_startup_path(qapp, settings, monkeypatch) -> None:
    import app_config
    from vizr.ui.main_window import MainWindow

    monkeypatch.setattr(app_config, "DEV_MODE", True)
    monkeypatch.setattr(app_config, "DEV_STARTUP_VIZ", "startup.json")
    win = MainWindow(settings=settings, autostart=False)
    win.dev_seed_from_config()
    win.player.canvas.advance(0)
    assert win.player.scene is None
    win.player.shutdown()
