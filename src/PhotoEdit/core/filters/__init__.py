"""Adjustment stages and the pipeline that chains them.

- algorithms: pure pixel math (NumPy and Numba kernels)
- stages: raster operations with pass-through fallback
- pipeline: the fixed stage order driven by :class:`AdjustmentParameters`
"""

from __future__ import annotations

from .pipeline import STAGE_ORDER, AdjustmentPipeline
from .stages import TransformStage

__all__ = ["AdjustmentPipeline", "STAGE_ORDER", "TransformStage"]
