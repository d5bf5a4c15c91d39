import math

import pytest

from PhotoEdit.core.adjustments import (
    ADJUSTMENT_DEFAULTS,
    ADJUSTMENT_KEYS,
    ADJUSTMENT_LABELS,
    ADJUSTMENT_RANGES,
    AdjustmentParameters,
    clamp_value,
    display_percent,
    parameter_for_label,
    reverse_scale_value,
    scale_value,
)
from PhotoEdit.errors import PhotoEditError, UnknownParameterError


def test_schema_tables_cover_every_key():
    assert len(ADJUSTMENT_KEYS) == 11
    assert set(ADJUSTMENT_RANGES) == set(ADJUSTMENT_KEYS)
    assert set(ADJUSTMENT_DEFAULTS) == set(ADJUSTMENT_KEYS)
    assert set(ADJUSTMENT_LABELS.values()) == set(ADJUSTMENT_KEYS)
    for key in ADJUSTMENT_KEYS:
        minimum, maximum = ADJUSTMENT_RANGES[key]
        assert minimum <= ADJUSTMENT_DEFAULTS[key] <= maximum


@pytest.mark.parametrize("name", ADJUSTMENT_KEYS)
def test_values_outside_range_are_clamped(name):
    minimum, maximum = ADJUSTMENT_RANGES[name]
    assert clamp_value(name, maximum + 1000.0) == maximum
    assert clamp_value(name, minimum - 1000.0) == minimum


def test_nan_is_rejected():
    with pytest.raises(ValueError):
        clamp_value("exposure", math.nan)


def test_unknown_names_raise_keyerror_compatible_error():
    with pytest.raises(UnknownParameterError) as excinfo:
        clamp_value("sharpness", 1.0)
    assert isinstance(excinfo.value, KeyError)
    assert isinstance(excinfo.value, PhotoEditError)
    assert "sharpness" in str(excinfo.value)


def test_parameters_default_and_with_value():
    params = AdjustmentParameters.defaults()
    assert params.is_default()
    assert params.as_dict() == dict(ADJUSTMENT_DEFAULTS)

    updated = params.with_value("contrast", 5.0)
    assert updated["contrast"] == 2.0
    assert not updated.is_default()
    # The original bundle is untouched.
    assert params.value("contrast") == 1.0


def test_parameters_clamp_on_construction():
    params = AdjustmentParameters({"warmth": 100.0, "tint": 250.0})
    assert params.value("warmth") == 3000.0
    assert params.value("tint") == 100.0
    assert params.value("exposure") == 0.0


def test_parameters_reject_unknown_names():
    with pytest.raises(UnknownParameterError):
        AdjustmentParameters({"clarity": 0.5})
    with pytest.raises(UnknownParameterError):
        AdjustmentParameters().value("clarity")


def test_display_scaling():
    assert scale_value(0.0, -2.0, 2.0) == pytest.approx(50.0)
    assert reverse_scale_value(50.0, -2.0, 2.0) == pytest.approx(0.0)
    assert reverse_scale_value(100.0, 0.5, 2.0) == pytest.approx(2.0)

    assert display_percent("exposure", 0.0) == 50
    assert display_percent("saturation", 2.0) == 100
    assert display_percent("tint", -100.0) == 0
    # Truncated, not rounded.
    assert display_percent("contrast", 1.0) == 33


def test_labels_map_to_parameter_names():
    assert parameter_for_label("Black Point") == "blackPoint"
    assert parameter_for_label("Warmth") == "warmth"
    with pytest.raises(UnknownParameterError):
        parameter_for_label("Grain")
