"""Offscreen single-frame rendering (CLI snapshots, pixel tests)."""
from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from vizr.qt import QtGui
from vizr.core.playback import FrameScheduler
from vizr.core.scene import Scene
from vizr.render.demo import DemoAnimation
from vizr.render.shapes import ShapeRenderer
from vizr.render.surface import QPainterSurface
from vizr.ui.theme import palette_for


def render_image(
    content: Any,
    elapsed_ms: float = 0.0,
    size: Tuple[int, int] = (400, 300),
    dark: bool = False,
) -> QtGui.QImage:
    """
    Render `content` (a Scene, or any raw payload which is normalized first)
    at a given elapsed time, through the same scheduler path as the live
    canvas. Text drawing needs a QGuiApplication to exist.
    """
    scheduler = FrameScheduler(ShapeRenderer(dark=dark), DemoAnimation(dark=dark))
    scheduler.attach()
    if isinstance(content, Scene):
        scheduler.load(content)
    else:
        scheduler.load_payload(content)
    scheduler.seek(elapsed_ms)
    scheduler.tick(0.0)

    width, height = max(1, int(size[0])), max(1, int(size[1]))
    image = QtGui.QImage(width, height, QtGui.QImage.Format.Format_RGB32)
    painter = QtGui.QPainter(image)
    try:
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        surface = QPainterSurface(painter, background=QtGui.QColor(palette_for(dark).background))
        scheduler.draw(surface, width, height)
    finally:
        painter.end()
        scheduler.detach()
    return image


def image_to_rgb(image: QtGui.QImage) -> np.ndarray:
    """QImage -> (h, w, 3) uint8 RGB array (copied)."""
    rgb = image.convertToFormat(QtGui.QImage.Format.Format_RGB888)
    w, h = rgb.width(), rgb.height()
    stride = rgb.bytesPerLine()
    flat = np.frombuffer(rgb.constBits(), dtype=np.uint8, count=h * stride)
    return flat.reshape(h, stride)[:, : 3 * w].reshape(h, w, 3).copy()


def render_frame(
    content: Any,
    elapsed_ms: float = 0.0,
    size: Tuple[int, int] = (400, 300),
    dark: bool = False,
) -> np.ndarray:
    return image_to_rgb(render_image(content, elapsed_ms, size, dark))


def save_snapshot(path: str, content: Any, elapsed_ms: float = 0.0,
                  size: Tuple[int, int] = (400, 300), dark: bool = False) -> bool:
    return render_image(content, elapsed_ms, size, dark).save(str(path))
