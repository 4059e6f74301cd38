from __future__ import annotations

from typing import Dict, Iterable, Optional

from vizr.core.scene import Animation, Layer, Props
from vizr.core.values import clamp


def animation_value(anim: Animation, t: float) -> Optional[float]:
    """
    Value of one animation at elapsed time t (ms), or None when it does not
    apply (before its start, or inert because end <= start).
    """
    if anim.inert or t < anim.start:
        return None
    if t > anim.end:
        return anim.to_value
    p = clamp((t - anim.start) / (anim.end - anim.start), 0.0, 1.0)
    return anim.from_value + (anim.to_value - anim.from_value) * p


def animated_overrides(animations: Iterable[Animation], t: float) -> Dict[str, float]:
    # Declaration order; when several apply to one property the last one wins.
    out: Dict[str, float] = {}
    for anim in animations:
        value = animation_value(anim, t)
        if value is not None:
            out[anim.property] = value
    return out


def resolve_props(layer: Layer, t: float) -> Props:
    """Static props of the layer with every active animation applied at time t."""
    return layer.props.merged(animated_overrides(layer.animations, t))
