"""Named fixed-recipe looks applied straight to the source raster."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .. import config
from .filters import stages
from .raster import Raster

_LOGGER = logging.getLogger(__name__)

ORIGINAL = "Original"


@dataclass(frozen=True)
class PresetStep:
    """A single operation of a recipe with its fixed arguments."""

    operation: stages.Operation
    arguments: Mapping[str, float] = field(default_factory=dict)

    def __call__(self, raster: Raster) -> Raster:
        return self.operation(raster, **self.arguments)


@dataclass(frozen=True)
class PresetRecipe:
    """A non-editable look; an empty step list is the identity."""

    name: str
    steps: tuple[PresetStep, ...] = ()

    @property
    def is_identity(self) -> bool:
        return not self.steps

    def apply(self, source: Raster) -> Raster:
        result = source
        for step in self.steps:
            result = step(result)
        return result


PRESETS: Mapping[str, PresetRecipe] = {
    ORIGINAL: PresetRecipe(ORIGINAL),
    "Vivid": PresetRecipe(
        "Vivid",
        (
            PresetStep(
                stages.color_controls,
                {"saturation": 1.3, "contrast": 1.2, "brightness": 0.10},
            ),
            PresetStep(stages.vibrance, {"amount": 0.25}),
        ),
    ),
    "Vivid Warm": PresetRecipe(
        "Vivid Warm",
        (
            PresetStep(
                stages.color_controls,
                {"saturation": 1.5, "contrast": 1.2, "brightness": 0.05},
            ),
            # Treating the source as lit at 7000K pulls it toward a warm cast.
            PresetStep(
                stages.white_balance,
                {"neutral": 7000.0, "target": config.BASELINE_NEUTRAL_KELVIN},
            ),
        ),
    ),
}

PRESET_NAMES = tuple(PRESETS)
"""Preset names in the order the preset strip shows them."""


class PresetEngine:
    """Apply preset recipes independently of the adjustment sliders."""

    def __init__(self, presets: Mapping[str, PresetRecipe] = PRESETS) -> None:
        self._presets = dict(presets)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._presets)

    def recipe(self, name: str) -> PresetRecipe:
        recipe = self._presets.get(name)
        if recipe is None:
            _LOGGER.debug("Unknown preset %r treated as %s", name, ORIGINAL)
            return self._presets.get(ORIGINAL, PresetRecipe(ORIGINAL))
        return recipe

    def is_identity(self, name: str) -> bool:
        return self.recipe(name).is_identity

    def apply_preset(self, name: str, source: Raster) -> Raster:
        """Return *source* transformed by the preset *name*.

        Unknown names behave like ``"Original"`` and return *source* itself.
        """

        return self.recipe(name).apply(source)

    def render_previews(
        self,
        source: Raster,
        max_edge: int = config.PRESET_THUMBNAIL_EDGE,
    ) -> dict[str, Raster]:
        """Return one thumbnail per preset, rendered from a shared downscale."""

        base = source.thumbnail(max_edge)
        return {name: recipe.apply(base) for name, recipe in self._presets.items()}


__all__ = [
    "ORIGINAL",
    "PRESETS",
    "PRESET_NAMES",
    "PresetEngine",
    "PresetRecipe",
    "PresetStep",
]
