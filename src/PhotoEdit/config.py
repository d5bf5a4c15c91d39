"""Static configuration for PhotoEdit."""

from __future__ import annotations

import os

APP_NAME = "PhotoEdit"

LOG_LEVEL = os.environ.get("PHOTOEDIT_LOG_LEVEL", "INFO").upper()
"""Level applied to the package logger, overridable through the environment."""

BASELINE_NEUTRAL_KELVIN = 6500.0
"""Target neutral temperature the white-balance stage remaps toward."""

TINT_KELVIN_PER_UNIT = 3.0
"""Kelvin offset added to the target neutral for each unit of tint."""

BLACK_POINT_BRIGHTNESS_FACTOR = 0.1
BLACK_POINT_CONTRAST_FACTOR = 0.7

PRESET_THUMBNAIL_EDGE = 70
"""Longest edge, in pixels, of the preset strip thumbnails."""

RENDER_MAX_THREADS = max(1, min(4, os.cpu_count() or 1))
"""Upper bound for the render pool owned by a session."""
