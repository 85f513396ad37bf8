"""Tests for parameter parsing, validation and plate fitting."""
import pytest

from bracket_forge.params import (
    DEFAULT_PARAMS,
    BracketParams,
    ParameterError,
    clamp_hole_diameter,
    fit_to_plate,
    max_inner_width,
    normalize_form,
    parse_params,
    total_width,
)


class TestParseParams:

    def test_empty_mapping_gives_defaults(self):
        p = parse_params({})
        assert p == DEFAULT_PARAMS
        assert p.width == 200
        assert p.depth == 25
        assert p.height == 16
        assert p.ribbing_count == 3
        assert p.hole_count == 1
        assert p.has_bottom is False
        assert p.key_hole is False

    def test_form_strings(self):
        p = parse_params({
            "width": "150",
            "depth": "30,5",
            "bracketThickness": "2.5",
            "ribbingCount": "2",
            "hasBottom": "on",
            "keyHole": "on",
        })
        assert p.width == 150.0
        assert p.depth == 30.5
        assert p.bracket_thickness == 2.5
        assert p.ribbing_count == 2
        assert isinstance(p.ribbing_count, int)
        assert p.has_bottom is True
        assert p.key_hole is True

    def test_snake_case_keys_accepted(self):
        p = parse_params({"ear_width": 14, "hole_count": 2, "depth": 40})
        assert p.ear_width == 14
        assert p.hole_count == 2

    def test_unknown_keys_ignored(self):
        p = parse_params({"color": "#ff0000", "plateWidth": "256"})
        assert p == DEFAULT_PARAMS

    def test_boolean_strings(self):
        assert parse_params({"hasBottom": "false"}).has_bottom is False
        assert parse_params({"hasBottom": "true"}).has_bottom is True
        assert parse_params({"hasBottom": 1}).has_bottom is True

    def test_params_are_frozen(self):
        p = parse_params({})
        with pytest.raises(Exception):
            p.width = 10

    def test_already_parsed_passthrough(self):
        p = BracketParams(width=90)
        assert parse_params(p) is p

    def test_normalize_form_keeps_garbage_for_schema(self):
        out = normalize_form({"width": "wide"})
        assert out == {"width": "wide"}


class TestPreconditions:

    @pytest.mark.parametrize("key", ["width", "depth", "height", "bracketThickness", "earWidth"])
    def test_non_positive_dimension_rejected(self, key):
        with pytest.raises(ParameterError):
            parse_params({key: 0})
        with pytest.raises(ParameterError):
            parse_params({key: -5})

    @pytest.mark.parametrize("form", [
        {"width": "inf"},
        {"depth": "1e400"},
        {"height": float("inf")},
        {"earWidth": "nan"},
    ])
    def test_non_finite_rejected(self, form):
        with pytest.raises(ParameterError) as exc:
            parse_params(form)
        assert next(iter(form)) in str(exc.value)

    def test_non_numeric_rejected(self):
        with pytest.raises(ParameterError) as exc:
            parse_params({"width": "wide"})
        assert "width" in str(exc.value)
        assert exc.value.errors

    def test_hole_count_zero_rejected(self):
        with pytest.raises(ParameterError):
            parse_params({"holeCount": 0})

    def test_fractional_rib_count_rejected(self):
        with pytest.raises(ParameterError):
            parse_params({"ribbingCount": "2.5"})

    def test_negative_rib_count_rejected(self):
        with pytest.raises(ParameterError):
            parse_params({"ribbingCount": -1})

    def test_zero_ribs_allowed(self):
        assert parse_params({"ribbingCount": 0}).ribbing_count == 0

    def test_ribs_must_fit_depth(self):
        # 5 ribs of 4mm need more than 28mm
        with pytest.raises(ParameterError):
            parse_params({"ribbingCount": 5, "ribbingThickness": 4, "depth": 28})
        assert parse_params({"ribbingCount": 5, "ribbingThickness": 4, "depth": 29}).depth == 29

    def test_multiple_holes_need_padding(self):
        with pytest.raises(ParameterError):
            parse_params({"holeCount": 3, "depth": 19})
        assert parse_params({"holeCount": 3, "depth": 20}).hole_count == 3

    def test_parameter_error_is_value_error(self):
        assert issubclass(ParameterError, ValueError)


class TestHoleClamp:

    def test_requested_kept_when_small(self):
        assert clamp_hole_diameter(2, 10, 25) == 2

    def test_ear_limits_diameter(self):
        assert clamp_hole_diameter(50, 10, 25) == 4

    def test_depth_limits_diameter(self):
        assert clamp_hole_diameter(50, 100, 12) == 5

    def test_effective_diameter_property(self):
        p = BracketParams(hole_diameter=50, ear_width=10)
        assert p.hole_diameter == 50
        assert p.effective_hole_diameter == 4


class TestPlate:

    def test_total_width(self, default_params):
        assert total_width(default_params) == 200 + 2 * 3 + 2 * 10

    def test_max_inner_width(self):
        assert max_inner_width(10, 3, 256) == 230

    def test_fits_without_change(self, default_params):
        fitted, report = fit_to_plate(default_params, 256, 256)
        assert fitted == default_params
        assert report.clamped is False
        assert report.over_limit is False
        assert report.total_width == 226

    def test_width_clamped_to_plate(self):
        p = BracketParams(width=300)
        fitted, report = fit_to_plate(p, 256, 256)
        assert fitted.width == 230
        assert report.clamped is True
        assert report.total_width == 256
        assert report.over_limit is False
        # the input params are left untouched
        assert p.width == 300

    def test_ears_wider_than_plate(self):
        p = BracketParams(width=50, ear_width=100, ribbing_count=0)
        fitted, report = fit_to_plate(p, 180, 180)
        assert fitted.width == 50
        assert report.clamped is False
        assert report.over_limit is True

    def test_as_form_uses_form_keys(self, default_params):
        form = default_params.as_form()
        assert form["bracketThickness"] == 3
        assert form["keyHole"] is False
        assert parse_params(form) == default_params
