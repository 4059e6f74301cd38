from __future__ import annotations
from typing import Iterable, List, Optional
from vizr.qt import QtCore, QtGui, QtWidgets
from vizr.ui.theme import Theme

class MarkerSlider(QtWidgets.QSlider):
    """
    Scene timeline in milliseconds (0..duration) with a tick at every
    animation start/end. Clicking near a tick snaps to it.
    """
    markerClicked = QtCore.Signal(int)  # ms

    def __init__(self, orientation: QtCore.Qt.Orientation = QtCore.Qt.Orientation.Horizontal,
                 parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(orientation, parent)
        self._markers: List[int] = []
        self.setMouseTracking(True)
        self.setMinimum(0)
        self.setMaximum(0)  # set per scene

    def set_timeline(self, duration_ms: int, markers: Iterable[int] = ()) -> None:
        duration_ms = max(0, int(duration_ms))
        self.blockSignals(True)
        self.setMaximum(duration_ms)
        self.setValue(min(self.value(), duration_ms))
        self.blockSignals(False)
        self.set_markers(markers)

    def set_markers(self, times_ms: Iterable[int]) -> None:
        self._markers = sorted(set(int(t) for t in times_ms if t >= 0))
        self.update()

    def markers(self) -> List[int]:
        return list(self._markers)

    def set_position(self, ms: float) -> None:
        """Move the handle without emitting valueChanged (playback-driven)."""
        v = int(max(self.minimum(), min(self.maximum(), ms)))
        if self.value() != v:
            self.blockSignals(True)
            self.setValue(v)
            self.blockSignals(False)

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        super().paintEvent(e)
        if not self._markers or self.maximum() <= self.minimum():
            return
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.Antialiasing, True)

        groove_rect = self._groove_rect()
        p.setPen(QtGui.QPen(Theme.marker, 2))
        span = max(1, self.maximum() - self.minimum())
        for t in self._markers:
            ratio = (t - self.minimum()) / span
            x = int(groove_rect.left() + ratio * groove_rect.width())
            y1 = groove_rect.center().y() - 6
            y2 = groove_rect.center().y() + 6
            p.drawLine(x, y1, x, y2)
        p.end()

    def mousePressEvent(self, e: QtGui.QMouseEvent) -> None:
        if e.button() == QtCore.Qt.MouseButton.LeftButton and self.maximum() > self.minimum():
            val = self._pixel_pos_to_value(e.position().x())
            hit = self.nearest_marker(val)
            if hit is not None and abs(hit - val) <= max(1, int(0.01 * (self.maximum() - self.minimum()))):
                self.setValue(hit)
                self.markerClicked.emit(hit)
            else:
                self.setValue(val)
        super().mousePressEvent(e)

    def _groove_rect(self) -> QtCore.QRect:
        opt = QtWidgets.QStyleOptionSlider()
        self.initStyleOption(opt)
        return self.style().subControlRect(
            QtWidgets.QStyle.ComplexControl.CC_Slider, opt,
            QtWidgets.QStyle.SubControl.SC_SliderGroove, self,
        )

    def _pixel_pos_to_value(self, px: float) -> int:
        groove = self._groove_rect()
        if groove.width() <= 0:
            return self.value()
        ratio = (px - groove.left()) / groove.width()
        ratio = max(0.0, min(1.0, ratio))
        return int(self.minimum() + ratio * (self.maximum() - self.minimum()))

    def nearest_marker(self, value: int) -> Optional[int]:
        if not self._markers:
            return None
        return min(self._markers, key=lambda m: abs(m - value))
