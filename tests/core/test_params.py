"""Tests for distortion parameters."""

import dataclasses
import math

import pytest

from tapeglitch.core.errors import InvalidParameter
from tapeglitch.core.params import DistortionParameters


class TestDefaults:
    def test_defaults_validate(self):
        params = DistortionParameters()
        assert params.validate() is params

    def test_classic_values(self):
        p = DistortionParameters()
        assert p.blur_magnitude == 7.0
        assert p.block_height == 10
        assert p.block_offset_strength == 30.0
        assert p.stride_magnitude == 0.1
        assert p.scan_lag_strength == 0.005
        assert (p.initial_lag_r, p.initial_lag_g, p.initial_lag_b) == (-7.0, 0.0, 3.0)
        assert p.nondestructive_offset_stddev == 10.0
        assert p.brighten_amount == 37
        assert p.aberration_mean == 10
        assert p.aberration_stddev == 10.0

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DistortionParameters().brighten_amount = 10

    def test_replace(self):
        p = DistortionParameters().replace(brighten_amount=0)
        assert p.brighten_amount == 0
        assert p.blur_magnitude == 7.0


class TestValidate:
    @pytest.mark.parametrize("add", [0, 128, 255])
    def test_brighten_bounds_accepted(self, add):
        DistortionParameters(brighten_amount=add).validate()

    @pytest.mark.parametrize("add", [-1, 256, 1000])
    def test_brighten_out_of_range(self, add):
        with pytest.raises(InvalidParameter):
            DistortionParameters(brighten_amount=add).validate()

    def test_brighten_must_be_int(self):
        with pytest.raises(InvalidParameter):
            DistortionParameters(brighten_amount=12.5).validate()

    def test_block_height_positive(self):
        with pytest.raises(InvalidParameter):
            DistortionParameters(block_height=0).validate()

    @pytest.mark.parametrize(
        "field",
        ["blur_magnitude", "block_offset_strength", "stride_magnitude",
         "scan_lag_strength", "nondestructive_offset_stddev", "aberration_stddev"],
    )
    def test_negative_stddev_rejected(self, field):
        with pytest.raises(InvalidParameter):
            DistortionParameters(**{field: -0.5}).validate()

    @pytest.mark.parametrize("value", [math.nan, math.inf])
    def test_non_finite_rejected(self, value):
        with pytest.raises(InvalidParameter):
            DistortionParameters(blur_magnitude=value).validate()
        with pytest.raises(InvalidParameter):
            DistortionParameters(initial_lag_b=value).validate()

    def test_negative_lag_and_mean_allowed(self):
        DistortionParameters(initial_lag_r=-50.0, aberration_mean=-12).validate()

    def test_string_rejected(self):
        with pytest.raises(InvalidParameter):
            DistortionParameters(stride_magnitude="0.1").validate()

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            DistortionParameters(brighten_amount=300).validate()


class TestDictRoundTrip:
    def test_to_dict_has_every_field(self):
        d = DistortionParameters().to_dict()
        assert set(d) == set(DistortionParameters.field_names())
        assert DistortionParameters.from_dict(d) == DistortionParameters()

    def test_partial_dict_keeps_defaults(self):
        p = DistortionParameters.from_dict({"aberration_stddev": 2})
        assert p.aberration_stddev == 2.0
        assert isinstance(p.aberration_stddev, float)
        assert p.block_height == 10

    def test_whole_floats_become_ints(self):
        p = DistortionParameters.from_dict({"brighten_amount": 40.0, "block_height": 5.0})
        assert p.brighten_amount == 40
        assert isinstance(p.brighten_amount, int)
        assert p.block_height == 5

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidParameter, match="mystery"):
            DistortionParameters.from_dict({"mystery": 1})

    def test_invalid_value_rejected(self):
        with pytest.raises(InvalidParameter):
            DistortionParameters.from_dict({"brighten_amount": 512})
