from __future__ import annotations
import json
from typing import Any, Optional
from vizr.qt import QtCore, QtGui, QtWidgets
from vizr.core.scene import Layer, Scene


def describe_layer(index: int, layer: Layer) -> str:
    name = layer.raw_type or layer.kind.value
    parts = [f"#{index}  {name}"]
    if name != layer.kind.value:
        parts.append(f"({layer.kind.value})")
    if layer.animations:
        animated = ", ".join(sorted({a.property for a in layer.animations}))
        parts.append(f"•  animates {animated}")
    extra = layer.props.extra
    if extra:
        parts.append(f"•  ignored: {', '.join(sorted(extra))}")
    return "  ".join(parts)


class InspectorTabs(QtWidgets.QTabWidget):
    """Layers of the active scene, and the diagnostics behind it."""

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumWidth(300)
        self.setTabPosition(QtWidgets.QTabWidget.TabPosition.North)

        self.layer_list = QtWidgets.QListWidget()
        self.summary_label = QtWidgets.QLabel("No scene (demo)")
        self.summary_label.setContentsMargins(6, 6, 6, 6)
        layers_page = QtWidgets.QWidget()
        l = QtWidgets.QVBoxLayout(layers_page)
        l.setContentsMargins(0, 0, 0, 0)
        l.addWidget(self.summary_label)
        l.addWidget(self.layer_list, 1)

        mono = QtGui.QFontDatabase.systemFont(QtGui.QFontDatabase.SystemFont.FixedFont)
        self.trace_edit = QtWidgets.QLineEdit()
        self.trace_edit.setReadOnly(True)
        self.raw_edit = QtWidgets.QPlainTextEdit()
        self.raw_edit.setReadOnly(True)
        self.raw_edit.setFont(mono)
        self.scene_edit = QtWidgets.QPlainTextEdit()
        self.scene_edit.setReadOnly(True)
        self.scene_edit.setFont(mono)
        debug_page = QtWidgets.QWidget()
        form = QtWidgets.QFormLayout(debug_page)
        form.addRow("Trace", self.trace_edit)
        form.addRow("Raw payload", self.raw_edit)
        form.addRow("Canonical scene", self.scene_edit)

        self.addTab(layers_page, "Layers")
        self.addTab(debug_page, "Debug")

    @QtCore.Slot(object, str)
    def show_scene(self, scene: Optional[Scene], trace: str = "") -> None:
        self.layer_list.clear()
        self.trace_edit.setText(trace)
        if scene is None:
            self.summary_label.setText("No scene (demo)")
            self.scene_edit.setPlainText("None")
            return
        label = f"{len(scene.layers)} layers  •  {scene.duration} ms loop"
        if scene.id:
            label = f"{scene.id}  •  {label}"
        self.summary_label.setText(label)
        for i, layer in enumerate(scene.layers):
            it = QtWidgets.QListWidgetItem(describe_layer(i, layer))
            it.setData(QtCore.Qt.ItemDataRole.UserRole, i)
            self.layer_list.addItem(it)
        self.scene_edit.setPlainText(json.dumps(scene.to_dict(), indent=2))

    def show_payload(self, payload: Any) -> None:
        if isinstance(payload, str):
            text = payload
        else:
            try:
                text = json.dumps(payload, indent=2, default=repr)
            except (TypeError, ValueError):
                text = repr(payload)
        self.raw_edit.setPlainText(text)
