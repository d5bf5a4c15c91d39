"""Pure pixel math behind the adjustment stages.

Every helper takes ``float32`` sRGB samples of shape ``(h, w, 3)`` and returns a
new array; the inputs are never written to.  Per-pixel kernels that need
branching are compiled with Numba, the rest are plain NumPy expressions.
"""

from __future__ import annotations

import math

import numpy as np
from numba import jit

_LUMA_R = 0.2126
_LUMA_G = 0.7152
_LUMA_B = 0.0722

_HIGHLIGHT_THRESHOLD = 0.65
_SHADOW_THRESHOLD = 0.35
_TONE_SHIFT_STRENGTH = 0.25


def luma(rgb: np.ndarray) -> np.ndarray:
    """Return the Rec. 709 luma plane of *rgb*."""

    return (
        rgb[:, :, 0] * np.float32(_LUMA_R)
        + rgb[:, :, 1] * np.float32(_LUMA_G)
        + rgb[:, :, 2] * np.float32(_LUMA_B)
    ).astype(np.float32, copy=False)


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """Decode sRGB samples into linear light."""

    array = np.asarray(values, dtype=np.float32)
    return np.where(
        array <= 0.04045,
        array / np.float32(12.92),
        np.power((np.maximum(array, 0.0) + 0.055) / 1.055, 2.4),
    ).astype(np.float32, copy=False)


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """Encode linear light back into sRGB samples."""

    array = np.asarray(values, dtype=np.float32)
    return np.where(
        array <= 0.0031308,
        array * np.float32(12.92),
        1.055 * np.power(np.maximum(array, 0.0), 1.0 / 2.4) - 0.055,
    ).astype(np.float32, copy=False)


def apply_exposure(rgb: np.ndarray, ev: float) -> np.ndarray:
    """Scale linear light by ``2 ** ev`` and re-encode."""

    gain = np.float32(math.pow(2.0, float(ev)))
    linear = srgb_to_linear(rgb) * gain
    np.clip(linear, 0.0, 1.0, out=linear)
    return linear_to_srgb(linear)


def apply_color_controls(
    rgb: np.ndarray,
    brightness: float,
    contrast: float,
    saturation: float,
) -> np.ndarray:
    """Apply saturation, brightness and contrast in that order."""

    out = np.array(rgb, dtype=np.float32, copy=True)
    if saturation != 1.0:
        gray = luma(out)[:, :, None]
        out = gray + (out - gray) * np.float32(saturation)
    if brightness != 0.0:
        out += np.float32(brightness)
    if contrast != 1.0:
        out = (out - np.float32(0.5)) * np.float32(contrast) + np.float32(0.5)
    np.clip(out, 0.0, 1.0, out=out)
    return out.astype(np.float32, copy=False)


@jit(nopython=True, inline="always")
def _clamp01(value: float) -> float:
    if value < 0.0:
        return 0.0
    if value > 1.0:
        return 1.0
    return value


@jit(nopython=True, cache=True)
def _highlight_shadow_kernel(
    rgb: np.ndarray,
    out: np.ndarray,
    highlights: float,
    shadows: float,
) -> None:
    height, width, _ = rgb.shape
    for y in range(height):
        for x in range(width):
            r = rgb[y, x, 0]
            g = rgb[y, x, 1]
            b = rgb[y, x, 2]
            value = _LUMA_R * r + _LUMA_G * g + _LUMA_B * b

            delta = 0.0
            if value > _HIGHLIGHT_THRESHOLD:
                ratio = (value - _HIGHLIGHT_THRESHOLD) / (1.0 - _HIGHLIGHT_THRESHOLD)
                delta = highlights * ratio * _TONE_SHIFT_STRENGTH
            elif value < _SHADOW_THRESHOLD:
                ratio = (_SHADOW_THRESHOLD - value) / _SHADOW_THRESHOLD
                delta = shadows * ratio * _TONE_SHIFT_STRENGTH

            # The offset is added to every channel so only tone moves, not hue.
            out[y, x, 0] = _clamp01(r + delta)
            out[y, x, 1] = _clamp01(g + delta)
            out[y, x, 2] = _clamp01(b + delta)


def apply_highlight_shadow(rgb: np.ndarray, highlights: float, shadows: float) -> np.ndarray:
    """Shift the tone of highlight and shadow regions."""

    source = np.ascontiguousarray(rgb, dtype=np.float32)
    out = np.empty_like(source)
    _highlight_shadow_kernel(source, out, float(highlights), float(shadows))
    return out


@jit(nopython=True, cache=True)
def _vibrance_kernel(rgb: np.ndarray, out: np.ndarray, amount: float) -> None:
    height, width, _ = rgb.shape
    for y in range(height):
        for x in range(width):
            r = rgb[y, x, 0]
            g = rgb[y, x, 1]
            b = rgb[y, x, 2]
            high = max(r, max(g, b))
            low = min(r, min(g, b))
            muted = 1.0 - (high - low)
            # Muted pixels receive the full boost while saturated ones barely move.
            boost = 1.0 + amount * muted * muted
            gray = _LUMA_R * r + _LUMA_G * g + _LUMA_B * b
            out[y, x, 0] = _clamp01(gray + (r - gray) * boost)
            out[y, x, 1] = _clamp01(gray + (g - gray) * boost)
            out[y, x, 2] = _clamp01(gray + (b - gray) * boost)


def apply_vibrance(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Boost saturation with a weight that favours muted colours."""

    source = np.ascontiguousarray(rgb, dtype=np.float32)
    out = np.empty_like(source)
    _vibrance_kernel(source, out, float(amount))
    return out


def kelvin_to_rgb(kelvin: float) -> tuple[float, float, float]:
    """Return the sRGB white point of a black body at *kelvin*, in ``[0, 1]``.

    Uses the Tanner Helland curve fit, valid between 1000K and 40000K.
    """

    temp = max(1000.0, min(40000.0, float(kelvin))) / 100.0

    if temp <= 66.0:
        red = 255.0
        green = 99.4708025861 * math.log(temp) - 161.1195681661
    else:
        red = 329.698727446 * math.pow(temp - 60.0, -0.1332047592)
        green = 288.1221695283 * math.pow(temp - 60.0, -0.0755148492)

    if temp >= 66.0:
        blue = 255.0
    elif temp <= 19.0:
        blue = 0.0
    else:
        blue = 138.5177312231 * math.log(temp - 10.0) - 305.0447927307

    return (
        max(0.0, min(255.0, red)) / 255.0,
        max(0.0, min(255.0, green)) / 255.0,
        max(0.0, min(255.0, blue)) / 255.0,
    )


def white_balance_gains(neutral: float, target: float) -> tuple[float, float, float]:
    """Return linear-light channel gains remapping *neutral* onto *target*.

    The gains are normalised so a white pixel keeps its luminance; only the
    colour cast changes.
    """

    source_white = srgb_to_linear(np.asarray(kelvin_to_rgb(neutral), dtype=np.float32))
    target_white = srgb_to_linear(np.asarray(kelvin_to_rgb(target), dtype=np.float32))
    gains = target_white / np.maximum(source_white, np.float32(1e-4))
    weight = _LUMA_R * float(gains[0]) + _LUMA_G * float(gains[1]) + _LUMA_B * float(gains[2])
    if weight <= 1e-6:
        return (1.0, 1.0, 1.0)
    return (
        float(gains[0]) / weight,
        float(gains[1]) / weight,
        float(gains[2]) / weight,
    )


def apply_white_balance(rgb: np.ndarray, neutral: float, target: float) -> np.ndarray:
    """Remap the assumed *neutral* temperature of *rgb* toward *target*."""

    gains = np.asarray(white_balance_gains(neutral, target), dtype=np.float32)
    linear = srgb_to_linear(rgb) * gains
    np.clip(linear, 0.0, 1.0, out=linear)
    return linear_to_srgb(linear)


__all__ = [
    "apply_color_controls",
    "apply_exposure",
    "apply_highlight_shadow",
    "apply_vibrance",
    "apply_white_balance",
    "kelvin_to_rgb",
    "linear_to_srgb",
    "luma",
    "srgb_to_linear",
    "white_balance_gains",
]
