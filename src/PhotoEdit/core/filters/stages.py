"""Raster-to-raster operations used by the pipeline and the preset recipes.

Each operation is pure: it reads the input raster and returns either a new
raster or, when its arguments sit at the identity point, the input itself.
An operation that fails or yields non-finite samples degrades to returning its
input unchanged so a single bad stage never aborts a render.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Mapping, Optional

import numpy as np

from ... import config
from ..raster import Raster
from . import algorithms

_LOGGER = logging.getLogger(__name__)

_EPSILON = 1e-6

Operation = Callable[..., Raster]


def _pass_through_on_failure(name: str) -> Callable[[Callable[..., Optional[np.ndarray]]], Operation]:
    """Wrap a pixel function so failures hand the input raster back untouched."""

    def decorator(func: Callable[..., Optional[np.ndarray]]) -> Operation:
        @wraps(func)
        def wrapper(raster: Raster, *args, **kwargs) -> Raster:
            try:
                pixels = func(raster.pixels, *args, **kwargs)
            except Exception:
                _LOGGER.warning("%s stage failed; passing input through", name, exc_info=True)
                return raster

            if pixels is None:
                return raster
            if pixels.shape != raster.pixels.shape or not np.isfinite(pixels).all():
                _LOGGER.warning("%s stage produced unusable output; passing input through", name)
                return raster
            return raster.with_pixels(pixels)

        return wrapper

    return decorator


@_pass_through_on_failure("exposure")
def exposure(pixels: np.ndarray, ev: float = 0.0) -> Optional[np.ndarray]:
    if abs(ev) <= _EPSILON:
        return None
    return algorithms.apply_exposure(pixels, ev)


@_pass_through_on_failure("color_controls")
def color_controls(
    pixels: np.ndarray,
    brightness: float = 0.0,
    contrast: float = 1.0,
    saturation: float = 1.0,
) -> Optional[np.ndarray]:
    if (
        abs(brightness) <= _EPSILON
        and abs(contrast - 1.0) <= _EPSILON
        and abs(saturation - 1.0) <= _EPSILON
    ):
        return None
    return algorithms.apply_color_controls(pixels, brightness, contrast, saturation)


@_pass_through_on_failure("highlight_shadow")
def highlight_shadow(
    pixels: np.ndarray,
    highlights: float = 0.0,
    shadows: float = 0.0,
) -> Optional[np.ndarray]:
    if abs(highlights) <= _EPSILON and abs(shadows) <= _EPSILON:
        return None
    return algorithms.apply_highlight_shadow(pixels, highlights, shadows)


@_pass_through_on_failure("vibrance")
def vibrance(pixels: np.ndarray, amount: float = 0.0) -> Optional[np.ndarray]:
    if abs(amount) <= _EPSILON:
        return None
    return algorithms.apply_vibrance(pixels, amount)


@_pass_through_on_failure("white_balance")
def white_balance(
    pixels: np.ndarray,
    neutral: float = config.BASELINE_NEUTRAL_KELVIN,
    target: float = config.BASELINE_NEUTRAL_KELVIN,
) -> Optional[np.ndarray]:
    if abs(neutral - target) <= _EPSILON:
        return None
    return algorithms.apply_white_balance(pixels, neutral, target)


def black_point(
    raster: Raster,
    black_point: float = 0.0,
    brightness: float = 0.0,
    contrast: float = 1.0,
) -> Raster:
    """Simulate a black-point lift by re-running the colour controls.

    Brightness drops by ``black_point * 0.1`` and contrast rises by
    ``black_point * 0.7``.  The current brightness and contrast are applied a
    second time even when ``black_point`` is zero.
    """

    return color_controls(
        raster,
        brightness=brightness - black_point * config.BLACK_POINT_BRIGHTNESS_FACTOR,
        contrast=contrast + black_point * config.BLACK_POINT_CONTRAST_FACTOR,
        saturation=1.0,
    )


@dataclass(frozen=True)
class TransformStage:
    """One named step of the pipeline reading a subset of the adjustments."""

    name: str
    keys: tuple[str, ...]
    apply: Callable[[Raster, Mapping[str, float]], Raster]

    def __call__(self, raster: Raster, values: Mapping[str, float]) -> Raster:
        subset = {key: float(values[key]) for key in self.keys}
        return self.apply(raster, subset)


__all__ = [
    "Operation",
    "TransformStage",
    "black_point",
    "color_controls",
    "exposure",
    "highlight_shadow",
    "vibrance",
    "white_balance",
]
