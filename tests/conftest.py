"""
Shared fixtures: sample payloads, a call-recording drawing surface, and a
Qt application running on the offscreen platform.
"""
from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Any, List, Tuple

import pytest


class RecordingSurface:
    """DrawingSurface that records every call as (name, args)."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.depth = 0
        self.max_depth = 0
        self.fail_on = fail_on

    def _rec(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail_on == name:
            raise RuntimeError(f"surface refused {name}")

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def args_of(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for n, args in self.calls if n == name]

    def clear(self, width, height): self._rec("clear", width, height)

    def save(self):
        self.depth += 1
        self.max_depth = max(self.max_depth, self.depth)
        self._rec("save")

    def restore(self):
        self.depth -= 1
        self._rec("restore")

    def translate(self, dx, dy): self._rec("translate", dx, dy)
    def set_alpha(self, alpha): self._rec("set_alpha", alpha)
    def set_fill(self, color): self._rec("set_fill", color)
    def set_stroke(self, color, width): self._rec("set_stroke", color, width)
    def fill_rect(self, x, y, w, h): self._rec("fill_rect", x, y, w, h)
    def stroke_rect(self, x, y, w, h): self._rec("stroke_rect", x, y, w, h)
    def begin_path(self): self._rec("begin_path")
    def arc(self, cx, cy, r, start, end): self._rec("arc", cx, cy, r, start, end)
    def move_to(self, x, y): self._rec("move_to", x, y)
    def line_to(self, x, y): self._rec("line_to", x, y)
    def fill(self): self._rec("fill")
    def stroke(self): self._rec("stroke")
    def set_font(self, size, family): self._rec("set_font", size, family)
    def set_text_align(self, align): self._rec("set_text_align", align)
    def set_text_baseline(self, baseline): self._rec("set_text_baseline", baseline)
    def fill_text(self, text, x, y): self._rec("fill_text", text, x, y)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def canonical_payload() -> dict:
    return {
        "duration": 4000,
        "layers": [
            {
                "type": "rect",
                "props": {"x": 100, "y": 100, "width": 100, "height": 50, "fill": "#3b82f6"},
                "animations": [{"property": "x", "start": 0, "end": 2000, "from": 100, "to": 300}],
            },
            {"type": "circle", "props": {"x": 200, "y": 200, "radius": 30, "fill": "#ef4444"}},
            {"type": "text", "props": {"x": 200, "y": 250, "content": "Hello", "fontSize": 18}},
        ],
    }


@pytest.fixture(scope="session")
def qapp():
    from vizr.qt import QtWidgets
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def make_surface():
    return RecordingSurface
