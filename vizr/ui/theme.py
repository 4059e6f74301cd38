# vizr/ui/theme.py
from __future__ import annotations
from dataclasses import dataclass
from vizr.qt import QtGui, QtWidgets


@dataclass(frozen=True)
class Palette:
    """Default colours for canvas content; explicit layer colours always win."""
    background: str
    shape_fill: str
    shape_stroke: str
    placeholder: str
    demo_disc: str
    demo_text: str
    # chrome
    panel: str
    border: str
    text_dim: str
    debug_bg: str
    debug_text: str


LIGHT = Palette(
    background="#ffffff",
    shape_fill="#333",
    shape_stroke="#777",
    placeholder="#ccc",
    demo_disc="#22c55e",
    demo_text="#333",
    panel="#f9fafb",
    border="#e5e7eb",
    text_dim="#6b7280",
    debug_bg="#fef3c7",
    debug_text="#92400e",
)

DARK = Palette(
    background="#111827",
    shape_fill="#e0e0e0",
    shape_stroke="#888",
    placeholder="#666",
    demo_disc="#4ade80",
    demo_text="#e0e0e0",
    panel="#1f2937",
    border="#374151",
    text_dim="#9ca3af",
    debug_bg="#451a03",
    debug_text="#fbbf24",
)


def palette_for(dark: bool) -> Palette:
    return DARK if dark else LIGHT


class Theme:
    accent      = QtGui.QColor("#3b82f6")
    marker      = QtGui.QColor("#4CAF50")


def apply_fusion_theme(app: QtWidgets.QApplication, dark: bool = False) -> None:
    app.setStyle("Fusion")
    pal_colors = palette_for(dark)
    pal = QtGui.QPalette()
    window = QtGui.QColor(pal_colors.panel)
    base = QtGui.QColor(pal_colors.background)
    text = QtGui.QColor(pal_colors.demo_text)
    pal.setColor(QtGui.QPalette.Window, window)
    pal.setColor(QtGui.QPalette.Base, base)
    pal.setColor(QtGui.QPalette.AlternateBase, window)
    pal.setColor(QtGui.QPalette.Text, text)
    pal.setColor(QtGui.QPalette.WindowText, text)
    pal.setColor(QtGui.QPalette.ButtonText, text)
    pal.setColor(QtGui.QPalette.Button, window)
    pal.setColor(QtGui.QPalette.ToolTipBase, window)
    pal.setColor(QtGui.QPalette.ToolTipText, text)
    pal.setColor(QtGui.QPalette.Highlight, Theme.accent)
    pal.setColor(QtGui.QPalette.HighlightedText, QtGui.QColor("#ffffff"))
    app.setPalette(pal)
