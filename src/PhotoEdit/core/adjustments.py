"""Fixed adjustment schema, clamping rules and slider display helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping

from ..errors import UnknownParameterError


# The order matches the adjustment strip of the editor so the same tuple can be reused when
# building controls or iterating over stored values.
ADJUSTMENT_KEYS = (
    "exposure",
    "brilliance",
    "brightness",
    "contrast",
    "highlights",
    "shadows",
    "blackPoint",
    "saturation",
    "vibrance",
    "warmth",
    "tint",
)

ADJUSTMENT_RANGES: Mapping[str, tuple[float, float]] = {
    "exposure": (-2.0, 2.0),
    "brilliance": (-1.0, 1.0),
    "brightness": (-1.0, 1.0),
    "contrast": (0.5, 2.0),
    "highlights": (-1.0, 1.0),
    "shadows": (-1.0, 1.0),
    "blackPoint": (0.0, 1.0),
    "saturation": (0.0, 2.0),
    "vibrance": (-1.0, 1.0),
    "warmth": (3000.0, 8000.0),
    "tint": (-100.0, 100.0),
}
"""Inclusive ranges for each adjustment slider."""

ADJUSTMENT_DEFAULTS: Mapping[str, float] = {
    "exposure": 0.0,
    "brilliance": 0.0,
    "brightness": 0.0,
    "contrast": 1.0,
    "highlights": 0.0,
    "shadows": 0.0,
    "blackPoint": 0.0,
    "saturation": 1.0,
    "vibrance": 0.0,
    "warmth": 6500.0,
    "tint": 0.0,
}
"""Identity point of every adjustment; the all-default bundle leaves pixels untouched."""

ADJUSTMENT_LABELS: Mapping[str, str] = {
    "Exposure": "exposure",
    "Brilliance": "brilliance",
    "Brightness": "brightness",
    "Contrast": "contrast",
    "Highlights": "highlights",
    "Shadows": "shadows",
    "Black Point": "blackPoint",
    "Saturation": "saturation",
    "Vibrance": "vibrance",
    "Warmth": "warmth",
    "Tint": "tint",
}
"""Display label shown under each slider icon mapped to its parameter name."""


def _clamp(value: float, minimum: float, maximum: float) -> float:
    """Return *value* constrained to ``[minimum, maximum]``."""

    value = float(value)
    if math.isnan(value):
        raise ValueError("Adjustment values must be numbers, got NaN")
    return max(minimum, min(maximum, value))


def ensure_known(name: str) -> str:
    """Return *name* unchanged or raise :class:`UnknownParameterError`."""

    if name not in ADJUSTMENT_RANGES:
        raise UnknownParameterError(name)
    return name


def clamp_value(name: str, value: float) -> float:
    """Clamp *value* into the declared range of the adjustment *name*."""

    minimum, maximum = ADJUSTMENT_RANGES[ensure_known(name)]
    return _clamp(value, minimum, maximum)


def parameter_for_label(label: str) -> str:
    """Return the parameter name behind the slider *label*."""

    try:
        return ADJUSTMENT_LABELS[label]
    except KeyError:
        raise UnknownParameterError(label) from None


@dataclass(frozen=True)
class AdjustmentParameters:
    """Immutable bundle holding one clamped value for each adjustment.

    Instances are value objects: :meth:`with_value` returns a new bundle so a
    snapshot handed to a render worker can never change underneath it.
    """

    values: Mapping[str, float] = field(default_factory=lambda: dict(ADJUSTMENT_DEFAULTS))

    def __post_init__(self) -> None:
        resolved = dict(ADJUSTMENT_DEFAULTS)
        for name, value in self.values.items():
            resolved[name] = clamp_value(name, value)
        object.__setattr__(self, "values", resolved)

    @classmethod
    def defaults(cls) -> "AdjustmentParameters":
        return cls()

    def value(self, name: str) -> float:
        return self.values[ensure_known(name)]

    def __getitem__(self, name: str) -> float:
        return self.value(name)

    def with_value(self, name: str, value: float) -> "AdjustmentParameters":
        """Return a copy where *name* holds *value* clamped to its range."""

        updated = dict(self.values)
        updated[name] = clamp_value(name, value)
        return AdjustmentParameters(updated)

    def is_default(self) -> bool:
        return all(self.values[key] == ADJUSTMENT_DEFAULTS[key] for key in ADJUSTMENT_KEYS)

    def as_dict(self) -> dict[str, float]:
        return {key: self.values[key] for key in ADJUSTMENT_KEYS}


def scale_value(value: float, minimum: float, maximum: float) -> float:
    """Map *value* from ``[minimum, maximum]`` onto the ``[0, 100]`` display scale."""

    return (float(value) - minimum) / (maximum - minimum) * 100.0


def reverse_scale_value(value: float, minimum: float, maximum: float) -> float:
    """Inverse of :func:`scale_value`."""

    return float(value) / 100.0 * (maximum - minimum) + minimum


def display_percent(name: str, value: float) -> int:
    """Return the integer percentage shown next to the slider for *name*."""

    minimum, maximum = ADJUSTMENT_RANGES[ensure_known(name)]
    # ``int`` truncates toward zero, matching the label next to each slider.
    return int(scale_value(value, minimum, maximum))


__all__ = [
    "ADJUSTMENT_DEFAULTS",
    "ADJUSTMENT_KEYS",
    "ADJUSTMENT_LABELS",
    "ADJUSTMENT_RANGES",
    "AdjustmentParameters",
    "clamp_value",
    "display_percent",
    "ensure_known",
    "parameter_for_label",
    "reverse_scale_value",
    "scale_value",
]
