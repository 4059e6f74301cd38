"""
Canonical scene model.

A Scene is built once by the normalizer and never mutated afterwards:
dataclasses are frozen, sequences are tuples, and layer props sit behind a
read-only mapping. Renderers only ever see these types, never raw payloads.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from app_config import DEFAULT_ANIMATION_SPAN_MS, DEFAULT_DURATION_MS
from vizr.core.values import Scalar, as_number, number_or


class LayerKind(enum.Enum):
    RECT = "rect"
    CIRCLE = "circle"
    LINE = "line"
    TEXT = "text"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: Any) -> "LayerKind":
        if not isinstance(raw, str):
            return cls.UNKNOWN
        token = raw.strip().lower()
        if token == "label":
            return cls.TEXT
        if token == cls.UNKNOWN.value:
            return cls.UNKNOWN
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


# Property names the shape renderer understands. Anything else is kept in the
# mapping (animations may still target it) but reported as `extra`.
KNOWN_PROPS = frozenset({
    "x", "y", "width", "height", "r", "radius",
    "x1", "y1", "x2", "y2",
    "opacity", "fill", "stroke", "strokeWidth",
    "content", "text", "label",
    "fontSize", "font-size", "fontFamily", "textAlign", "textBaseline",
})


class Props(Mapping[str, Scalar]):
    """Read-only property bag of a layer (name -> number | string | bool)."""

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Mapping[str, Scalar]] = None) -> None:
        self._data = MappingProxyType(dict(data or {}))

    def __getitem__(self, key: str) -> Scalar:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._data.items(), key=lambda kv: kv[0])))

    def __repr__(self) -> str:
        return f"Props({dict(self._data)!r})"

    @property
    def extra(self) -> Dict[str, Scalar]:
        return {k: v for k, v in self._data.items() if k not in KNOWN_PROPS}

    def number(self, name: str) -> Optional[float]:
        return as_number(self._data.get(name))

    def merged(self, overrides: Mapping[str, Scalar]) -> "Props":
        if not overrides:
            return self
        data = dict(self._data)
        data.update(overrides)
        return Props(data)


@dataclass(frozen=True)
class Animation:
    """Linear transition of one property between `start` and `end` (ms)."""
    property: str
    start: float = 0.0
    end: float = float(DEFAULT_ANIMATION_SPAN_MS)
    from_value: float = 0.0
    to_value: float = 0.0

    @property
    def inert(self) -> bool:
        return self.end <= self.start

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Animation"]:
        """None when the entry has no usable target property."""
        if not isinstance(raw, Mapping):
            return None
        prop = raw.get("property")
        if not isinstance(prop, str) or not prop:
            return None
        start = number_or(raw.get("start"), 0.0)
        end = number_or(raw.get("end"), start + DEFAULT_ANIMATION_SPAN_MS)
        from_value = number_or(raw.get("from"), 0.0)
        to_value = number_or(raw.get("to"), from_value)
        return cls(prop, start, end, from_value, to_value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "property": self.property,
            "start": self.start,
            "end": self.end,
            "from": self.from_value,
            "to": self.to_value,
        }


@dataclass(frozen=True)
class Layer:
    kind: LayerKind
    props: Props = field(default_factory=Props)
    animations: Tuple[Animation, ...] = ()
    raw_type: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.raw_type or self.kind.value,
            "props": dict(self.props),
            "animations": [a.to_dict() for a in self.animations],
        }


def coerce_duration(value: Any) -> int:
    """Positive integer milliseconds, DEFAULT_DURATION_MS when absent/invalid."""
    num = as_number(value)
    if num is None:
        return DEFAULT_DURATION_MS
    ms = int(num)
    return ms if ms > 0 else DEFAULT_DURATION_MS


@dataclass(frozen=True)
class Scene:
    layers: Tuple[Layer, ...] = ()
    duration: int = DEFAULT_DURATION_MS
    id: str = ""

    def __post_init__(self) -> None:
        if self.duration <= 0:
            raise ValueError(f"scene duration must be positive, got {self.duration}")

    @property
    def keyframe_times(self) -> Tuple[int, ...]:
        """Sorted animation start/end instants within the loop, for timeline markers."""
        marks = set()
        for layer in self.layers:
            for anim in layer.animations:
                if anim.inert:
                    continue
                for t in (anim.start, anim.end):
                    if 0 <= t <= self.duration:
                        marks.add(int(t))
        return tuple(sorted(marks))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"duration": self.duration, "layers": [l.to_dict() for l in self.layers]}
        if self.id:
            out["id"] = self.id
        return out
