"""Fixed, ordered composition of the adjustment stages."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ... import config
from ..adjustments import AdjustmentParameters
from ..raster import Raster
from . import stages
from .stages import TransformStage

_LOGGER = logging.getLogger(__name__)


def _white_balance(raster: Raster, values: Mapping[str, float]) -> Raster:
    target = config.BASELINE_NEUTRAL_KELVIN + values["tint"] * config.TINT_KELVIN_PER_UNIT
    return stages.white_balance(raster, neutral=values["warmth"], target=target)


# Colour operations do not commute, so this order is part of the rendering contract.
# ``brilliance`` is validated and stored but intentionally feeds no stage.
DEFAULT_STAGES: tuple[TransformStage, ...] = (
    TransformStage(
        "exposure",
        ("exposure",),
        lambda raster, values: stages.exposure(raster, ev=values["exposure"]),
    ),
    TransformStage(
        "color_controls",
        ("brightness", "contrast", "saturation"),
        lambda raster, values: stages.color_controls(raster, **values),
    ),
    TransformStage(
        "highlight_shadow",
        ("highlights", "shadows"),
        lambda raster, values: stages.highlight_shadow(raster, **values),
    ),
    TransformStage(
        "vibrance",
        ("vibrance",),
        lambda raster, values: stages.vibrance(raster, amount=values["vibrance"]),
    ),
    TransformStage(
        "black_point",
        ("blackPoint", "brightness", "contrast"),
        lambda raster, values: stages.black_point(
            raster,
            black_point=values["blackPoint"],
            brightness=values["brightness"],
            contrast=values["contrast"],
        ),
    ),
    TransformStage("white_balance", ("warmth", "tint"), _white_balance),
)

STAGE_ORDER = tuple(stage.name for stage in DEFAULT_STAGES)


class AdjustmentPipeline:
    """Render a source raster under a full set of adjustments.

    Every call starts from the untouched source, so the output depends only on
    the parameter values and never on the order in which sliders were moved.
    """

    def __init__(self, stage_list: Sequence[TransformStage] = DEFAULT_STAGES) -> None:
        self._stages = tuple(stage_list)

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(stage.name for stage in self._stages)

    def render(self, source: Raster, params: AdjustmentParameters) -> Raster:
        values = params.as_dict()
        result = source
        for stage in self._stages:
            result = stage(result, values)
        _LOGGER.debug(
            "Rendered %dx%d raster through %d stages",
            source.width,
            source.height,
            len(self._stages),
        )
        return result


__all__ = ["AdjustmentPipeline", "DEFAULT_STAGES", "STAGE_ORDER"]
