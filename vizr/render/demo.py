from __future__ import annotations

import math

from app_config import DEMO_PERIOD_MS
from vizr.render.surface import DrawingSurface
from vizr.ui.theme import palette_for

DEMO_MARGIN = 50.0
DEMO_RADIUS = 20.0
FALLBACK_SIZE = (400.0, 300.0)


class DemoAnimation:
    """A disc sliding left to right, looping every DEMO_PERIOD_MS; shown when there is no scene."""

    def __init__(self, dark: bool = False, period_ms: float = DEMO_PERIOD_MS) -> None:
        self.dark = dark
        self.period_ms = float(period_ms) if period_ms > 0 else float(DEMO_PERIOD_MS)

    def disc_position(self, width: float, height: float, t: float) -> tuple[float, float]:
        progress = (max(0.0, t) % self.period_ms) / self.period_ms
        x = progress * max(0.0, width - DEMO_MARGIN * 2) + DEMO_MARGIN
        return x, height / 2

    def draw(self, surface: DrawingSurface, width: float, height: float, t: float, trace: str = "") -> None:
        if width <= 0 or height <= 0:
            width, height = FALLBACK_SIZE
        pal = palette_for(self.dark)
        x, y = self.disc_position(width, height, t)

        surface.save()
        try:
            surface.begin_path()
            surface.arc(x, y, DEMO_RADIUS, 0, math.pi * 2)
            surface.set_fill(pal.demo_disc)
            surface.fill()

            surface.set_fill(pal.demo_text)
            surface.set_font(16, "Arial")
            surface.set_text_align("center")
            surface.set_text_baseline("top")
            surface.fill_text("Demo Animation", width / 2, height - 60)

            if trace:
                surface.set_font(12, "monospace")
                surface.fill_text(f"Debug: {trace}", width / 2, height - 40)
        finally:
            surface.restore()
