"""Tests for editor-boundary validation and non-blocking warnings."""

from __future__ import annotations

import math

import pytest

from gyrokite.aerodynamics import compute_state
from gyrokite.models import DesignConfiguration
from gyrokite.validation import (
    EDITOR_RANGES,
    DesignValidationError,
    compute_warnings,
    validate_design,
)


def _warning_ids(design: DesignConfiguration) -> set[str]:
    """Helper: return the set of warning IDs for a design."""
    return {w.id for w in compute_warnings(design, compute_state(design))}


# ---------------------------------------------------------------------------
# validate_design
# ---------------------------------------------------------------------------


class TestValidateDesign:
    def test_default_design_is_valid(self, default_design: DesignConfiguration) -> None:
        validate_design(default_design)

    def test_out_of_editor_range_is_not_rejected(self) -> None:
        validate_design(DesignConfiguration(line_angle=90, wind_speed=45, rotor_tilt=-40))

    @pytest.mark.parametrize(
        "field, value",
        [
            ("blade_length", 0.0),
            ("blade_length", -1.0),
            ("blade_chord", 0.0),
            ("rotor_mass", -0.5),
            ("wind_speed", -1.0),
            ("line_tension", -10.0),
        ],
    )
    def test_rejects_meaningless_values(self, field: str, value: float) -> None:
        with pytest.raises(DesignValidationError) as exc_info:
            validate_design(DesignConfiguration(**{field: value}))
        assert exc_info.value.field == field

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite(self, value: float) -> None:
        with pytest.raises(DesignValidationError, match="finite"):
            validate_design(DesignConfiguration(wind_speed=value))

    def test_zero_mass_is_allowed(self) -> None:
        validate_design(DesignConfiguration(rotor_mass=0.0))

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_design(DesignConfiguration(blade_chord=-0.1))


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class TestW01DeadZone:
    def test_triggers_on_vertical_line(self, vertical_line_design: DesignConfiguration) -> None:
        assert "W01" in _warning_ids(vertical_line_design)

    def test_does_not_trigger_on_default(self, default_design: DesignConfiguration) -> None:
        assert "W01" not in _warning_ids(default_design)


class TestW02SpinUp:
    def test_triggers_below_threshold(self, heavy_rotor_design: DesignConfiguration) -> None:
        assert "W02" in _warning_ids(heavy_rotor_design)

    def test_does_not_trigger_in_calm(self, calm_design: DesignConfiguration) -> None:
        assert "W02" not in _warning_ids(calm_design)

    def test_does_not_trigger_above_threshold(self, default_design: DesignConfiguration) -> None:
        assert "W02" not in _warning_ids(default_design)


class TestW03Stability:
    def test_triggers_on_large_tilt(self) -> None:
        # TSR 8.5 at alpha 15°: 100 - 25.5 - 2 * tilt
        design = DesignConfiguration(line_angle=85, rotor_tilt=10)
        assert "W03" not in _warning_ids(design)
        design = DesignConfiguration(line_angle=95, rotor_tilt=20)
        assert "W03" in _warning_ids(design)

    def test_does_not_trigger_on_default(self, default_design: DesignConfiguration) -> None:
        assert "W03" not in _warning_ids(default_design)


class TestW04Stall:
    def test_triggers_on_high_pitch(self) -> None:
        assert "W04" in _warning_ids(DesignConfiguration(blade_pitch=15))

    def test_does_not_trigger_on_default(self, default_design: DesignConfiguration) -> None:
        assert "W04" not in _warning_ids(default_design)


class TestW05ReverseFlow:
    def test_triggers_on_shallow_disc(self) -> None:
        # alpha = 2°: TSR 1.13, 0.75 * 11.3 = 8.5 m/s < 10 * cos(2°)
        design = DesignConfiguration(line_angle=88, wind_speed=10)
        assert "W05" in _warning_ids(design)

    def test_does_not_trigger_on_default(self, default_design: DesignConfiguration) -> None:
        assert "W05" not in _warning_ids(default_design)


class TestW06ThrustClamp:
    def test_triggers_on_reference_design(self, reference_design: DesignConfiguration) -> None:
        assert "W06" in _warning_ids(reference_design)

    def test_does_not_trigger_when_stationary(self, vertical_line_design: DesignConfiguration) -> None:
        assert "W06" not in _warning_ids(vertical_line_design)


class TestW07AnchorBelowHorizontal:
    def test_triggers_when_rotor_outweighs_kite(self) -> None:
        design = DesignConfiguration(line_tension=5, line_angle=10, rotor_mass=5, wind_speed=0)
        assert "W07" in _warning_ids(design)

    def test_does_not_trigger_on_default(self, default_design: DesignConfiguration) -> None:
        assert "W07" not in _warning_ids(default_design)


class TestR01EditorRange:
    def test_one_warning_per_field(self) -> None:
        design = DesignConfiguration(blade_length=3.5, wind_speed=40)
        warnings = [
            w for w in compute_warnings(design, compute_state(design)) if w.id == "R01"
        ]
        assert sorted(f for w in warnings for f in w.fields) == ["blade_length", "wind_speed"]

    def test_boundaries_do_not_trigger(self) -> None:
        design = DesignConfiguration(
            **{field: lo for field, (lo, _hi, _unit) in EDITOR_RANGES.items()}
        )
        assert "R01" not in _warning_ids(design)

    def test_default_is_in_range(self, default_design: DesignConfiguration) -> None:
        assert "R01" not in _warning_ids(default_design)


def test_warnings_serialize_camel_case(vertical_line_design: DesignConfiguration) -> None:
    warnings = compute_warnings(vertical_line_design, compute_state(vertical_line_design))
    dumped = warnings[0].model_dump(by_alias=True)
    assert dumped["level"] == "warn"
    assert set(dumped) == {"id", "level", "message", "fields"}
