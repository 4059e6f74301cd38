"""
2D drawing surface consumed by the shape renderer and demo.

The protocol mirrors a canvas-style immediate-mode API (state stack,
translate, global alpha, rect/arc/path/text). QPainterSurface adapts it to
a QPainter so the same drawing code runs on widgets and offscreen images.
"""
from __future__ import annotations

import math
import re
from typing import List, Optional, Protocol

from vizr.qt import QtCore, QtGui
from vizr.core.values import clamp


class DrawingSurface(Protocol):
    def clear(self, width: float, height: float) -> None: ...
    def save(self) -> None: ...
    def restore(self) -> None: ...
    def translate(self, dx: float, dy: float) -> None: ...
    def set_alpha(self, alpha: float) -> None: ...
    def set_fill(self, color: str) -> None: ...
    def set_stroke(self, color: str, width: float) -> None: ...
    def fill_rect(self, x: float, y: float, w: float, h: float) -> None: ...
    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None: ...
    def begin_path(self) -> None: ...
    def arc(self, cx: float, cy: float, r: float, start: float, end: float) -> None: ...
    def move_to(self, x: float, y: float) -> None: ...
    def line_to(self, x: float, y: float) -> None: ...
    def fill(self) -> None: ...
    def stroke(self) -> None: ...
    def set_font(self, size: float, family: str) -> None: ...
    def set_text_align(self, align: str) -> None: ...
    def set_text_baseline(self, baseline: str) -> None: ...
    def fill_text(self, text: str, x: float, y: float) -> None: ...


_RGB_FUNC = re.compile(
    r"^rgba?\(\s*([\d.]+%?)\s*[, ]\s*([\d.]+%?)\s*[, ]\s*([\d.]+%?)\s*(?:[,/]\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def _channel(token: str, scale: float) -> float:
    if token.endswith("%"):
        return clamp(float(token[:-1]) / 100.0, 0.0, 1.0)
    return clamp(float(token) / scale, 0.0, 1.0)


def parse_color(value: str) -> Optional[QtGui.QColor]:
    """CSS-ish colour string -> QColor; None when unparseable."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    m = _RGB_FUNC.match(text)
    if m:
        r, g, b, a = m.groups()
        c = QtGui.QColor()
        c.setRgbF(_channel(r, 255.0), _channel(g, 255.0), _channel(b, 255.0), _channel(a, 1.0) if a else 1.0)
        return c
    c = QtGui.QColor(text)
    return c if c.isValid() else None


class _State:
    __slots__ = ("fill", "stroke", "line_width", "font_size", "font_family", "align", "baseline")

    def __init__(self) -> None:
        self.fill = QtGui.QColor("#000000")
        self.stroke = QtGui.QColor("#000000")
        self.line_width = 1.0
        self.font_size = 10.0
        self.font_family = "sans-serif"
        self.align = "start"
        self.baseline = "alphabetic"

    def copy(self) -> "_State":
        s = _State()
        for name in self.__slots__:
            setattr(s, name, getattr(self, name))
        return s


class QPainterSurface:
    """DrawingSurface over an active QPainter. Invalid colours keep the previous style."""

    def __init__(self, painter: QtGui.QPainter, background: Optional[QtGui.QColor] = None) -> None:
        self._p = painter
        self._background = background
        self._state = _State()
        self._stack: List[_State] = []
        self._path = QtGui.QPainterPath()

    # State stack
    def clear(self, width: float, height: float) -> None:
        rect = QtCore.QRectF(0, 0, float(width), float(height))
        if self._background is not None:
            self._p.fillRect(rect, self._background)
        else:
            mode = self._p.compositionMode()
            self._p.setCompositionMode(QtGui.QPainter.CompositionMode.CompositionMode_Clear)
            self._p.fillRect(rect, QtCore.Qt.GlobalColor.transparent)
            self._p.setCompositionMode(mode)

    def save(self) -> None:
        self._p.save()
        self._stack.append(self._state.copy())

    def restore(self) -> None:
        self._p.restore()
        if self._stack:
            self._state = self._stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._p.translate(float(dx), float(dy))

    def set_alpha(self, alpha: float) -> None:
        self._p.setOpacity(clamp(float(alpha), 0.0, 1.0))

    # Styles
    def set_fill(self, color: str) -> None:
        c = parse_color(color)
        if c is not None:
            self._state.fill = c

    def set_stroke(self, color: str, width: float) -> None:
        c = parse_color(color)
        if c is not None:
            self._state.stroke = c
        self._state.line_width = max(0.0, float(width))

    def _pen(self) -> QtGui.QPen:
        pen = QtGui.QPen(self._state.stroke)
        pen.setWidthF(self._state.line_width)
        return pen

    # Rectangles
    def fill_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._p.fillRect(QtCore.QRectF(x, y, w, h), self._state.fill)

    def stroke_rect(self, x: float, y: float, w: float, h: float) -> None:
        self._p.setPen(self._pen())
        self._p.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        self._p.drawRect(QtCore.QRectF(x, y, w, h))

    # Paths
    def begin_path(self) -> None:
        self._path = QtGui.QPainterPath()

    def arc(self, cx: float, cy: float, r: float, start: float, end: float) -> None:
        r = abs(float(r))
        rect = QtCore.QRectF(cx - r, cy - r, 2 * r, 2 * r)
        # Canvas angles are radians clockwise (y down); Qt wants degrees counter-clockwise.
        start_deg = -math.degrees(start)
        sweep_deg = -math.degrees(end - start)
        if abs(sweep_deg) >= 360.0:
            self._path.addEllipse(rect)
            return
        self._path.arcMoveTo(rect, start_deg)
        self._path.arcTo(rect, start_deg, sweep_deg)

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(float(x), float(y))

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(float(x), float(y))

    def fill(self) -> None:
        self._p.fillPath(self._path, QtGui.QBrush(self._state.fill))

    def stroke(self) -> None:
        self._p.strokePath(self._path, self._pen())

    # Text
    def set_font(self, size: float, family: str) -> None:
        self._state.font_size = max(1.0, float(size))
        self._state.font_family = family or "sans-serif"

    def set_text_align(self, align: str) -> None:
        self._state.align = align

    def set_text_baseline(self, baseline: str) -> None:
        self._state.baseline = baseline

    def fill_text(self, text: str, x: float, y: float) -> None:
        font = QtGui.QFont(self._state.font_family)
        font.setPixelSize(max(1, int(round(self._state.font_size))))
        metrics = QtGui.QFontMetricsF(font)
        width = metrics.horizontalAdvance(text)

        align = self._state.align
        if align == "center":
            x -= width / 2
        elif align in ("right", "end"):
            x -= width

        baseline = self._state.baseline
        if baseline == "middle":
            y += (metrics.ascent() - metrics.descent()) / 2
        elif baseline in ("top", "hanging"):
            y += metrics.ascent()
        elif baseline in ("bottom", "ideographic"):
            y -= metrics.descent()

        self._p.setFont(font)
        self._p.setPen(QtGui.QPen(self._state.fill))
        self._p.drawText(QtCore.QPointF(x, y), text)
