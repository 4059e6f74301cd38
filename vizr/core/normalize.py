"""
Scene normalizer: any recognised payload shape -> canonical Scene, else None.

Precedence (first match wins):
    None                          -> no scene
    {"visualization": X}          -> normalize(X)
    {"answer": {"visualization"}} -> normalize(X)
    [ ... ]                       -> every element is a layer
    {"type": ..., no layers}      -> single-layer scene
    {"layers": [ ... ]}           -> canonical
    anything else                 -> no scene

Strings are run through the extractor first. Nothing here raises: the
producer is untrusted, so every failure collapses to "no scene".
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from app_config import MAX_NORMALIZE_DEPTH
from vizr.core.extract import extract_json_traced
from vizr.core.logging import get_logger
from vizr.core.scene import Animation, Layer, LayerKind, Props, Scene, coerce_duration
from vizr.core.values import is_scalar

_log = get_logger(__name__)

# Layer keys that are structure, not drawing props, in the flat layer form.
_STRUCTURAL_KEYS = frozenset({"type", "props", "animations"})
# Scene-level keys of a single-layer payload; never layer props.
_SCENE_KEYS = frozenset({"duration", "id"})


class PayloadShape(enum.Enum):
    NONE = "none"
    TEXT = "text"
    WRAPPED = "wrapped"
    ANSWER_WRAPPED = "answer-wrapped"
    LAYER_LIST = "layer-list"
    SINGLE_LAYER = "single-layer"
    CANONICAL = "canonical"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class NormalizeResult:
    scene: Optional[Scene]
    trace: str

    @property
    def ok(self) -> bool:
        return self.scene is not None


def classify(value: Any) -> PayloadShape:
    if value is None:
        return PayloadShape.NONE
    if isinstance(value, str):
        return PayloadShape.TEXT
    if isinstance(value, Mapping):
        if value.get("visualization") is not None:
            return PayloadShape.WRAPPED
        answer = value.get("answer")
        if isinstance(answer, Mapping) and answer.get("visualization") is not None:
            return PayloadShape.ANSWER_WRAPPED
    if isinstance(value, (list, tuple)):
        return PayloadShape.LAYER_LIST
    if isinstance(value, Mapping):
        has_layers = isinstance(value.get("layers"), list)
        if value.get("type") is not None and "layers" not in value:
            return PayloadShape.SINGLE_LAYER
        if has_layers:
            return PayloadShape.CANONICAL
    return PayloadShape.UNRECOGNIZED


def _clean_props(raw: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(k): v for k, v in raw.items() if is_scalar(v)}


def build_layer(raw: Mapping[str, Any]) -> Layer:
    raw_type = raw.get("type")
    props_raw = raw.get("props")
    if isinstance(props_raw, Mapping):
        props = _clean_props(props_raw)
    else:
        # Flat form: the layer's own fields double as its props.
        props = _clean_props({k: v for k, v in raw.items() if k not in _STRUCTURAL_KEYS})

    animations: List[Animation] = []
    anim_raw = raw.get("animations")
    if isinstance(anim_raw, (list, tuple)):
        for entry in anim_raw:
            anim = Animation.from_raw(entry)
            if anim is not None:
                animations.append(anim)

    return Layer(
        kind=LayerKind.from_raw(raw_type),
        props=Props(props),
        animations=tuple(animations),
        raw_type=raw_type if isinstance(raw_type, str) else "",
    )


def _scene_id(value: Mapping[str, Any]) -> str:
    sid = value.get("id")
    return sid if isinstance(sid, str) else ""


def _normalize(value: Any, trace: List[str], depth: int) -> Optional[Scene]:
    if depth > MAX_NORMALIZE_DEPTH:
        trace.append("nesting too deep")
        return None

    shape = classify(value)

    if shape is PayloadShape.NONE:
        trace.append("empty")
        return None

    if shape is PayloadShape.TEXT:
        extracted, how = extract_json_traced(value)
        trace.append(how)
        if extracted is None or isinstance(extracted, str):
            return None
        return _normalize(extracted, trace, depth + 1)

    if shape is PayloadShape.WRAPPED:
        trace.append("unwrapped .visualization")
        return _normalize(value["visualization"], trace, depth + 1)

    if shape is PayloadShape.ANSWER_WRAPPED:
        trace.append("unwrapped .answer.visualization")
        return _normalize(value["answer"]["visualization"], trace, depth + 1)

    if shape is PayloadShape.LAYER_LIST:
        layers = tuple(
            build_layer(item if isinstance(item, Mapping) else {"type": "rect", "props": item})
            for item in value
        )
        trace.append(f"layer array ({len(layers)})")
        return Scene(layers=layers, duration=coerce_duration(None))

    if shape is PayloadShape.SINGLE_LAYER:
        trace.append("single layer")
        return Scene(
            layers=(build_layer({k: v for k, v in value.items() if k not in _SCENE_KEYS}),),
            duration=coerce_duration(value.get("duration")),
            id=_scene_id(value),
        )

    if shape is PayloadShape.CANONICAL:
        entries = value["layers"]
        layers = tuple(build_layer(e) for e in entries if isinstance(e, Mapping))
        dropped = len(entries) - len(layers)
        trace.append(f"layers ({len(layers)}, dropped {dropped})" if dropped else f"layers ({len(layers)})")
        return Scene(layers=layers, duration=coerce_duration(value.get("duration")), id=_scene_id(value))

    trace.append("unrecognized shape")
    return None


def normalize_visualization(payload: Any) -> NormalizeResult:
    """Normalize a payload and report which branches produced the result."""
    trace: List[str] = [f"input: {type(payload).__name__}"]
    try:
        scene = _normalize(payload, trace, 0)
    except Exception as ex:
        _log.exception("Normalization error")
        return NormalizeResult(None, f"Error: {ex}")
    text = " -> ".join(trace)
    _log.debug("normalize: %s", text)
    return NormalizeResult(scene, text)


def normalize(payload: Any) -> Optional[Scene]:
    return normalize_visualization(payload).scene
