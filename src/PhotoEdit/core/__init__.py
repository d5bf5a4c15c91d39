"""Core editing model: rasters, adjustments, stages, presets and the session."""
