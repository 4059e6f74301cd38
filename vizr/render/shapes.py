"""
Shape renderer: one canonical layer + its resolved props -> surface calls.

Dispatch is a table keyed by LayerKind; UNKNOWN gets a placeholder marker so
a layer is never silently dropped. Every layer is drawn inside its own
save()/restore() pair, translated by (x, y) and faded by `opacity`.
"""
from __future__ import annotations

import math
from typing import Callable, Dict, Set

from vizr.core.interpolate import resolve_props
from vizr.core.logging import get_logger
from vizr.core.scene import Layer, LayerKind, Props
from vizr.core.values import clamp, first_number, first_text, number_or
from vizr.render.surface import DrawingSurface
from vizr.ui.theme import Palette, palette_for

RECT_SIZE = 50.0
CIRCLE_RADIUS = 20.0
LINE_END = 100.0
FONT_SIZE = 16.0
FONT_FAMILY = "Arial"
PLACEHOLDER_SIZE = 20.0


class ShapeRenderer:
    def __init__(self, dark: bool = False) -> None:
        self._log = get_logger(__name__)
        self.dark = dark
        self._failed: Set[int] = set()
        self._draw: Dict[LayerKind, Callable[[DrawingSurface, Props, Palette], None]] = {
            LayerKind.RECT: self._draw_rect,
            LayerKind.CIRCLE: self._draw_circle,
            LayerKind.LINE: self._draw_line,
            LayerKind.TEXT: self._draw_text,
            LayerKind.UNKNOWN: self._draw_placeholder,
        }

    @property
    def palette(self) -> Palette:
        return palette_for(self.dark)

    def forget_failures(self) -> None:
        self._failed.clear()

    def draw_layer(self, surface: DrawingSurface, layer: Layer, t: float, index: int = -1) -> bool:
        """Draw one layer at elapsed time t. Returns False (after logging) on failure."""
        try:
            props = resolve_props(layer, t)
            self.draw_props(surface, layer.kind, props)
            return True
        except Exception:
            if index not in self._failed:
                self._failed.add(index)
                self._log.warning("Error drawing shape %d (%s)", index, layer.raw_type or layer.kind.value, exc_info=True)
            return False

    def draw_props(self, surface: DrawingSurface, kind: LayerKind, props: Props) -> None:
        surface.save()
        try:
            surface.translate(number_or(props.get("x"), 0.0), number_or(props.get("y"), 0.0))
            surface.set_alpha(clamp(number_or(props.get("opacity"), 1.0), 0.0, 1.0))
            self._draw.get(kind, self._draw_placeholder)(surface, props, self.palette)
        finally:
            surface.restore()

    # ──────────────────────────────────────────────────────────────────────────
    # Per-kind drawing
    # ──────────────────────────────────────────────────────────────────────────
    @staticmethod
    def _stroke_color(props: Props) -> str:
        stroke = props.get("stroke")
        return stroke if isinstance(stroke, str) and stroke else ""

    @staticmethod
    def _fill_color(props: Props, default: str) -> str:
        fill = props.get("fill")
        return fill if isinstance(fill, str) and fill else default

    def _draw_rect(self, surface: DrawingSurface, props: Props, pal: Palette) -> None:
        w = number_or(props.get("width"), RECT_SIZE)
        h = number_or(props.get("height"), RECT_SIZE)
        surface.set_fill(self._fill_color(props, pal.shape_fill))
        surface.fill_rect(0, 0, w, h)
        stroke = self._stroke_color(props)
        if stroke:
            surface.set_stroke(stroke, number_or(props.get("strokeWidth"), 1.0))
            surface.stroke_rect(0, 0, w, h)

    def _draw_circle(self, surface: DrawingSurface, props: Props, pal: Palette) -> None:
        r = first_number(props.get("r"), props.get("radius"), default=CIRCLE_RADIUS)
        surface.begin_path()
        surface.arc(0, 0, abs(r), 0, math.pi * 2)
        surface.set_fill(self._fill_color(props, pal.shape_fill))
        surface.fill()
        stroke = self._stroke_color(props)
        if stroke:
            surface.set_stroke(stroke, number_or(props.get("strokeWidth"), 1.0))
            surface.stroke()

    def _draw_line(self, surface: DrawingSurface, props: Props, pal: Palette) -> None:
        x1 = number_or(props.get("x1"), 0.0)
        y1 = number_or(props.get("y1"), 0.0)
        x2 = first_number(props.get("x2"), props.get("x"), default=LINE_END)
        y2 = first_number(props.get("y2"), props.get("y"), default=LINE_END)
        surface.begin_path()
        surface.move_to(x1, y1)
        surface.line_to(x2, y2)
        surface.set_stroke(self._stroke_color(props) or pal.shape_stroke, number_or(props.get("strokeWidth"), 2.0))
        surface.stroke()

    def _draw_text(self, surface: DrawingSurface, props: Props, pal: Palette) -> None:
        text = first_text(props.get("content"), props.get("text"), props.get("label"), default="Text")
        size = first_number(props.get("fontSize"), props.get("font-size"), default=FONT_SIZE)
        family = props.get("fontFamily")
        align = props.get("textAlign")
        baseline = props.get("textBaseline")
        surface.set_fill(self._fill_color(props, pal.shape_fill))
        surface.set_font(size, family if isinstance(family, str) and family else FONT_FAMILY)
        surface.set_text_align(align if isinstance(align, str) and align else "center")
        surface.set_text_baseline(baseline if isinstance(baseline, str) and baseline else "middle")
        surface.fill_text(text, 0, 0)

    def _draw_placeholder(self, surface: DrawingSurface, props: Props, pal: Palette) -> None:
        half = PLACEHOLDER_SIZE / 2
        surface.set_fill(pal.placeholder)
        surface.fill_rect(-half, -half, PLACEHOLDER_SIZE, PLACEHOLDER_SIZE)
