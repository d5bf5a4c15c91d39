import numpy as np
import pytest

from PhotoEdit.core.presets import ORIGINAL, PRESET_NAMES, PresetEngine
from PhotoEdit.core.raster import Raster


@pytest.fixture
def engine() -> PresetEngine:
    return PresetEngine()


def test_preset_names_in_display_order(engine):
    assert PRESET_NAMES == ("Original", "Vivid", "Vivid Warm")
    assert engine.names == PRESET_NAMES


def test_original_and_unknown_names_return_source(engine, colour_raster):
    assert engine.apply_preset(ORIGINAL, colour_raster) is colour_raster
    assert engine.apply_preset("Noir", colour_raster) is colour_raster
    assert engine.is_identity("Noir")
    assert not engine.is_identity("Vivid")


def test_vivid_increases_saturation(engine, colour_raster):
    result = engine.apply_preset("Vivid", colour_raster)

    def spread(raster: Raster) -> float:
        return float(np.mean(raster.pixels.max(axis=2) - raster.pixels.min(axis=2)))

    assert spread(result) > spread(colour_raster)


def test_vivid_warm_on_neutral_gray_adds_contrast_and_warm_cast(engine, uniform):
    two_tone = uniform(64, size=(4, 8))
    two_tone[:, 4:] = 192
    source = Raster.from_array(two_tone)

    result = engine.apply_preset("Vivid Warm", source)
    dark = result.pixels[0, 0]
    light = result.pixels[0, 7]

    assert light.mean() - dark.mean() > source.pixels[0, 7, 0] - source.pixels[0, 0, 0]
    # The gray input has no chroma, the output leans red/yellow.
    assert light[0] > light[2] + 0.02
    assert dark[0] > dark[2]
    assert light[1] > light[2]


def test_presets_are_deterministic(engine, colour_raster):
    first = engine.apply_preset("Vivid Warm", colour_raster)
    second = engine.apply_preset("Vivid Warm", colour_raster)
    assert np.array_equal(first.pixels, second.pixels)


def test_render_previews_share_one_thumbnail(engine, uniform):
    source = Raster.from_array(uniform(100, size=(140, 280)))
    previews = engine.render_previews(source, max_edge=70)

    assert tuple(previews) == PRESET_NAMES
    for preview in previews.values():
        assert (preview.width, preview.height) == (70, 35)
    assert previews[ORIGINAL].equals(source.thumbnail(70))
