"""Design-editor boundary checks.

Two layers, both outside the aerodynamic core:
  - validate_design() rejects physically meaningless inputs by raising
    DesignValidationError (zero or negative radius/chord, negative wind,
    mass or line tension, non-finite numbers).
  - compute_warnings() returns non-blocking warnings about the operating
    point:
      W01 dead zone          W05 retreating-blade reverse flow
      W02 spin-up damping    W06 thrust coefficient clamp active
      W03 low stability      W07 anchor load below horizontal
      W04 blade stall        R01 parameter outside editor range

All warnings are level="warn" and never block a simulation.
"""

from __future__ import annotations

import math

from gyrokite.aerodynamics import (
    DEAD_ZONE_ALPHA_DEG,
    SOFT_STALL_RAD,
    effective_alpha,
    max_rotor_thrust,
    min_wind_to_spin,
)
from gyrokite.models import DesignConfiguration, SimulationState, ValidationWarning

# Slider bounds of the parameter editor: field -> (min, max, unit)
EDITOR_RANGES: dict[str, tuple[float, float, str]] = {
    "blade_length": (0.2, 3.0, "m"),
    "blade_chord": (0.05, 0.4, "m"),
    "blade_pitch": (-5.0, 15.0, "deg"),
    "rotor_mass": (0.1, 5.0, "kg"),
    "line_tension": (0.0, 2000.0, "N"),
    "line_angle": (5.0, 85.0, "deg"),
    "wind_speed": (0.0, 30.0, "m/s"),
    "rotor_tilt": (-20.0, 20.0, "deg"),
}

LOW_STABILITY_SCORE = 40.0


class DesignValidationError(ValueError):
    """A design the model cannot meaningfully evaluate."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


# ---------------------------------------------------------------------------
# Hard validation
# ---------------------------------------------------------------------------


def validate_design(design: DesignConfiguration) -> None:
    """Raise DesignValidationError if *design* is physically meaningless.

    Out-of-typical-range values are NOT rejected here; they surface as R01
    warnings instead.
    """
    for field in EDITOR_RANGES:
        value = getattr(design, field)
        if not math.isfinite(value):
            raise DesignValidationError(field, "must be a finite number")

    if design.blade_length <= 0:
        raise DesignValidationError("blade_length", "rotor radius must be greater than zero")
    if design.blade_chord <= 0:
        raise DesignValidationError("blade_chord", "blade chord must be greater than zero")
    if design.rotor_mass < 0:
        raise DesignValidationError("rotor_mass", "rotor mass cannot be negative")
    if design.wind_speed < 0:
        raise DesignValidationError("wind_speed", "wind speed cannot be negative")
    if design.line_tension < 0:
        raise DesignValidationError("line_tension", "line tension cannot be negative")


# ---------------------------------------------------------------------------
# Non-blocking warnings
# ---------------------------------------------------------------------------


def _check_w01(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W01: disc edge-on to the wind — no driving inflow, no autorotation."""
    alpha = effective_alpha(design.line_angle, design.rotor_tilt)
    if alpha <= DEAD_ZONE_ALPHA_DEG:
        out.append(
            ValidationWarning(
                id="W01",
                message=(
                    f"Rotor disc is edge-on to the wind ({alpha:.1f}°) — "
                    "it will not autorotate"
                ),
                fields=["line_angle", "rotor_tilt"],
            )
        )


def _check_w02(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W02: wind below the mass-dependent spin-up threshold."""
    min_wind = min_wind_to_spin(design.rotor_mass)
    if 0 < design.wind_speed < min_wind:
        out.append(
            ValidationWarning(
                id="W02",
                message=(
                    f"Wind {design.wind_speed:.1f} m/s is below the "
                    f"{min_wind:.1f} m/s spin-up threshold for a "
                    f"{design.rotor_mass:.1f} kg rotor — rotation is damped"
                ),
                fields=["wind_speed", "rotor_mass"],
            )
        )


def _check_w03(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W03: stability score below 40 — teeter/flutter or misalignment risk."""
    if state.stability_score < LOW_STABILITY_SCORE:
        out.append(
            ValidationWarning(
                id="W03",
                message=f"Low stability score ({state.stability_score:.0f}/100)",
                fields=["rotor_tilt", "line_angle"],
            )
        )


def _check_w04(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W04: advancing or retreating blade past the soft-stall angle."""
    blade = state.blade_aerodynamics
    worst = max(blade.advancing_aoa, blade.retreating_aoa)
    if state.rpm > 0 and worst > math.degrees(SOFT_STALL_RAD):
        out.append(
            ValidationWarning(
                id="W04",
                message=f"Blade stall — local angle of attack reaches {worst:.1f}°",
                fields=["blade_pitch"],
            )
        )


def _check_w05(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W05: retreating blade sees reverse flow at 75% span."""
    if state.blade_aerodynamics.retreating_velocity < 0:
        out.append(
            ValidationWarning(
                id="W05",
                message="Reverse flow on the retreating blade — advance ratio too high",
                fields=["line_angle", "rotor_tilt"],
            )
        )


def _check_w06(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W06: blade-element thrust capped by the maximum thrust coefficient."""
    if state.rpm <= 0:
        return
    cap = round(max_rotor_thrust(design.blade_length, design.wind_speed), 2)
    if cap > 0 and state.total_rotor_thrust >= cap:
        out.append(
            ValidationWarning(
                id="W06",
                message=(
                    f"Rotor thrust limited to {cap:.1f} N by the maximum "
                    "thrust coefficient — outside the calibrated regime"
                ),
                fields=["blade_pitch", "blade_chord"],
            )
        )


def _check_w07(design: DesignConfiguration, state: SimulationState, out: list[ValidationWarning]) -> None:
    """W07: resultant anchor load points below the horizontal."""
    if state.anchor_analysis.anchor_angle < 0:
        out.append(
            ValidationWarning(
                id="W07",
                message="Net load pulls the hub below the anchor — line will touch the ground",
                fields=["line_tension", "rotor_mass"],
            )
        )


def _check_r01(design: DesignConfiguration, out: list[ValidationWarning]) -> None:
    """R01: one warning per field outside its editor range."""
    for field, (lo, hi, unit) in EDITOR_RANGES.items():
        value = getattr(design, field)
        if value < lo or value > hi:
            out.append(
                ValidationWarning(
                    id="R01",
                    message=f"{field} = {value:g} {unit} is outside the editor range {lo:g}–{hi:g} {unit}",
                    fields=[field],
                )
            )


def compute_warnings(
    design: DesignConfiguration,
    state: SimulationState,
) -> list[ValidationWarning]:
    """Run all warning checks against a design and its computed state."""
    warnings: list[ValidationWarning] = []

    _check_w01(design, state, warnings)
    _check_w02(design, state, warnings)
    _check_w03(design, state, warnings)
    _check_w04(design, state, warnings)
    _check_w05(design, state, warnings)
    _check_w06(design, state, warnings)
    _check_w07(design, state, warnings)
    _check_r01(design, warnings)

    return warnings
