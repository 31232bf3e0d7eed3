"""Aerodynamic force model for a line-mounted, teetering two-blade autogyro rotor.

Pure math module — no I/O, no logging, no module state. Every call to
compute_state() builds a new SimulationState from a DesignConfiguration, so
the function is safe to call many times per second and from any thread.
It never raises for finite input: squares are written as products so an
overflow becomes inf, and display rounding passes inf/nan through.

Pipeline (executed in order):
  1. Geometry:  alpha_eff = clamp((90 - line_angle) + rotor_tilt, -90, 90)
  2. Rotation:  piecewise tip-speed-ratio curve over alpha_eff, damped by a
                mass-dependent spin-up wind threshold.
                tip_speed = V * TSR,  rpm = tip_speed / R * 60 / (2*pi)
  3. Forces:    rpm > 10  -> blade-element estimate at the 75% span station
                rpm <= 10 -> porous flat plate (bluff body)
  4. Frames:    generated_thrust = T_rotor * cos(rotor_tilt)
  5. Anchor:    kite-side force + rotor-side force summed at the hub.

Calibration notes:
  The TSR curve and the two-stage stall model are hand-tuned heuristics that
  resemble published autogyro trends; the breakpoints below are part of the
  calibration and must not be re-derived.
  Blade-element lift/drag use the planform area 2 * L * c and a dynamic
  pressure built from the span-averaged tangential speed (tip_speed² / 3)
  plus the disc inflow.

Coordinate conventions:
  - World frame is the vertical plane through the wind: +x downwind, +y up.
  - Rotor spin axis is aligned with the kite line, offset by rotor_tilt.
  - alpha_eff = 0 means the disc is edge-on to the wind, 90 means face-on.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from gyrokite.models import (
    AnchorAnalysis,
    BladeAerodynamics,
    DesignConfiguration,
    SimulationState,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

AIR_DENSITY = 1.225              # kg/m³, sea level ISA
GRAVITY = 9.81                   # m/s²
BLADE_COUNT = 2
KINEMATIC_VISCOSITY = 1.48e-5    # m²/s, air at 15 °C

# Tip-speed-ratio curve
DEAD_ZONE_ALPHA_DEG = 1.5
PEAK_ALPHA_DEG = 15.0
PEAK_TSR = 8.5
WINDMILL_TSR = 4.0

# Spin-up threshold: min_wind = SPIN_UP_MASS_FACTOR * mass + SPIN_UP_BASE_WIND
SPIN_UP_MASS_FACTOR = 0.5        # (m/s) per kg
SPIN_UP_BASE_WIND = 2.0          # m/s

# Regime switch
SPINNING_RPM = 10.0

# Blade section (simplified two-stage stall)
SPAN_STATION = 0.75
LIFT_SLOPE_PER_RAD = 5.5
SOFT_STALL_RAD = 0.22
SOFT_STALL_CL = 1.0
DEEP_STALL_RAD = 0.35
DEEP_STALL_CL = 0.8
CD_PROFILE = 0.012
CD_INDUCED_FACTOR = 0.05

# Disc-level limits and heuristics
MAX_THRUST_COEFFICIENT = 1.3
PLATE_DRAG_COEFFICIENT = 1.2
PARASITIC_DRAG_FRACTION = 0.5
POWER_EFFICIENCY = 0.3


class _RotorForces(NamedTuple):
    total_thrust: float
    lift: float
    drag: float
    blade: BladeAerodynamics


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_state(design: DesignConfiguration) -> SimulationState:
    """Compute the steady-state rotor outputs for one design/wind condition.

    Parameters:
        design -- rotor geometry, mass, kite-line state and wind speed.
                  Out-of-range angles are clamped, never rejected.

    Returns:
        SimulationState with display-rounded values (rpm and stability as
        whole numbers, forces to 0.01 N, angles to 0.1°).
    """
    alpha_deg = effective_alpha(design.line_angle, design.rotor_tilt)
    alpha_rad = math.radians(alpha_deg)

    tsr = tip_speed_ratio(alpha_deg, design.wind_speed, design.rotor_mass)
    tip_speed = design.wind_speed * tsr
    rpm = _rpm(tip_speed, design.blade_length)

    gravity = design.rotor_mass * GRAVITY
    blade_area = BLADE_COUNT * design.blade_length * design.blade_chord

    if rpm > SPINNING_RPM:
        forces = _spinning_forces(design, alpha_rad, tip_speed, blade_area)
    else:
        forces = _stationary_forces(design.wind_speed, alpha_rad, blade_area)

    # Project rotor-axis thrust onto the kite line.
    tilt_rad = math.radians(design.rotor_tilt)
    generated_thrust = forces.total_thrust * math.cos(tilt_rad)

    stability = _clamp(100.0 - 3.0 * tsr - 2.0 * abs(design.rotor_tilt), 0.0, 100.0)
    power = generated_thrust * design.wind_speed * POWER_EFFICIENCY

    anchor = resolve_anchor(
        kite_line_force(design.line_tension, design.line_angle),
        (forces.drag, forces.lift - gravity),
    )

    return SimulationState(
        rpm=_round_half_up(rpm),
        generated_thrust=_round_half_up(generated_thrust, 2),
        total_rotor_thrust=_round_half_up(forces.total_thrust, 2),
        lift=_round_half_up(forces.lift, 2),
        drag=_round_half_up(forces.drag, 2),
        gravity=_round_half_up(gravity, 2),
        tip_speed=_round_half_up(tip_speed, 2),
        tip_speed_ratio=_round_half_up(tsr, 2),
        stability_score=_round_half_up(stability),
        power_output=_round_half_up(power, 2),
        angle_of_attack=_round_half_up(alpha_deg, 1),
        anchor_analysis=anchor,
        blade_aerodynamics=forces.blade,
    )


def effective_alpha(line_angle: float, rotor_tilt: float = 0.0) -> float:
    """Disc angle of attack against horizontal wind, in degrees.

    alpha = (90 - line_angle) + rotor_tilt, clamped to [-90, 90].
    A vertical line (90°) is edge-on (0°); a horizontal line is face-on (90°).
    """
    return _clamp((90.0 - line_angle) + rotor_tilt, -90.0, 90.0)


def tip_speed_ratio(alpha_deg: float, wind_speed: float, rotor_mass: float) -> float:
    """Autorotation tip-speed ratio for a disc angle and wind speed.

    alpha <= 1.5°          : 0 (no driving inflow)
    1.5° < alpha < 15°     : linear ramp 0 -> 8.5
    alpha >= 15°           : linear decay 8.5 -> 4.0 at 90° (windmill state)

    Below min_wind = 0.5 * mass + 2 the ratio is scaled by wind / min_wind
    so heavy rotors resist spin-up in light air.
    """
    if alpha_deg <= DEAD_ZONE_ALPHA_DEG:
        return 0.0

    if alpha_deg < PEAK_ALPHA_DEG:
        ratio = (alpha_deg / PEAK_ALPHA_DEG) * PEAK_TSR
    else:
        t = (alpha_deg - PEAK_ALPHA_DEG) / (90.0 - PEAK_ALPHA_DEG)
        ratio = PEAK_TSR * (1.0 - t) + WINDMILL_TSR * t

    min_wind = min_wind_to_spin(rotor_mass)
    if wind_speed < min_wind:
        damping = max(0.0, wind_speed / min_wind) if min_wind > 0.0 else 0.0
        ratio *= damping
    return ratio


def min_wind_to_spin(rotor_mass: float) -> float:
    """Wind speed (m/s) below which inertia/friction damping applies."""
    return SPIN_UP_MASS_FACTOR * rotor_mass + SPIN_UP_BASE_WIND


def lift_coefficient(alpha_local_rad: float) -> float:
    """Section lift coefficient with a two-stage stall.

    Linear (5.5 / rad) up to 0.22 rad, soft-stall plateau of 1.0 up to
    0.35 rad, deep-stall value of 0.8 beyond.
    """
    if alpha_local_rad > DEEP_STALL_RAD:
        return DEEP_STALL_CL
    if alpha_local_rad > SOFT_STALL_RAD:
        return SOFT_STALL_CL
    return LIFT_SLOPE_PER_RAD * alpha_local_rad


def drag_coefficient(cl: float) -> float:
    """Profile plus induced drag: cd = 0.012 + 0.05 * cl²."""
    return CD_PROFILE + CD_INDUCED_FACTOR * cl * cl


def max_rotor_thrust(rotor_radius: float, wind_speed: float) -> float:
    """Upper thrust bound: Ct_max * disc area * free-stream dynamic pressure."""
    disk_area = math.pi * rotor_radius * rotor_radius
    return MAX_THRUST_COEFFICIENT * disk_area * 0.5 * AIR_DENSITY * wind_speed * wind_speed


def kite_line_force(line_tension: float, line_angle: float) -> tuple[float, float]:
    """Pull of the upper (kite-side) line on the hub as (x, y) in N."""
    angle_rad = math.radians(line_angle)
    return (line_tension * math.cos(angle_rad), line_tension * math.sin(angle_rad))


def resolve_anchor(
    kite_force: tuple[float, float],
    rotor_force: tuple[float, float],
) -> AnchorAnalysis:
    """Resultant load the ground anchor must resist.

    The line is treated as two rigid segments meeting at the hub; the lower
    segment carries the vector sum of the kite pull and the net rotor force
    (drag, lift - weight). Static snapshot, no catenary.
    """
    fx = kite_force[0] + rotor_force[0]
    fy = kite_force[1] + rotor_force[1]
    return AnchorAnalysis(
        anchor_tension=_round_half_up(math.hypot(fx, fy), 2),
        anchor_angle=_round_half_up(math.degrees(math.atan2(fy, fx)), 1),
        lower_line_tension_x=_round_half_up(fx, 2),
        lower_line_tension_y=_round_half_up(fy, 2),
    )


# ---------------------------------------------------------------------------
# Helper functions (module-private, prefixed with _)
# ---------------------------------------------------------------------------


def _rpm(tip_speed: float, rotor_radius: float) -> float:
    """Rotor speed in rev/min. Zero radius yields 0 instead of dividing."""
    if rotor_radius <= 0.0:
        return 0.0
    rads_per_second = tip_speed / rotor_radius
    return rads_per_second * 60.0 / (2.0 * math.pi)


def _spinning_forces(
    design: DesignConfiguration,
    alpha_rad: float,
    tip_speed: float,
    blade_area: float,
) -> _RotorForces:
    """Blade-element forces at the 75% station for a spinning rotor.

    q      = 0.5 * rho * (tip_speed² / 3 + v_inflow²)
    phi    = atan2(v_inflow, 0.75 * tip_speed)
    T_axis = L * cos(phi) + D * sin(phi), capped by max_rotor_thrust()
    """
    wind = design.wind_speed
    v_inflow = wind * math.sin(alpha_rad)
    v_tangential = SPAN_STATION * tip_speed

    # Span-averaged square of a linear hub-to-tip velocity distribution.
    mean_sq_tangential = tip_speed * tip_speed / 3.0
    dynamic_pressure = 0.5 * AIR_DENSITY * (mean_sq_tangential + v_inflow * v_inflow)

    phi = math.atan2(v_inflow, v_tangential)
    pitch_rad = math.radians(design.blade_pitch)
    cl = lift_coefficient(phi + pitch_rad)
    cd = drag_coefficient(cl)

    lift_force = dynamic_pressure * blade_area * cl
    drag_force = dynamic_pressure * blade_area * cd

    thrust = lift_force * math.cos(phi) + drag_force * math.sin(phi)
    thrust = min(thrust, max_rotor_thrust(design.blade_length, wind))

    lift = thrust * math.cos(alpha_rad)
    drag = thrust * math.sin(alpha_rad) + PARASITIC_DRAG_FRACTION * drag_force

    blade = _blade_diagnostics(design, alpha_rad, tip_speed, v_inflow, pitch_rad)
    return _RotorForces(total_thrust=thrust, lift=lift, drag=drag, blade=blade)


def _stationary_forces(
    wind_speed: float,
    alpha_rad: float,
    blade_area: float,
) -> _RotorForces:
    """Porous flat-plate drag for a rotor that is not turning."""
    plate_drag = (
        0.5 * AIR_DENSITY * wind_speed * wind_speed * blade_area
        * PLATE_DRAG_COEFFICIENT * math.sin(alpha_rad)
    )
    return _RotorForces(
        total_thrust=plate_drag,
        lift=0.0,
        drag=plate_drag,
        blade=BladeAerodynamics(),
    )


def _blade_diagnostics(
    design: DesignConfiguration,
    alpha_rad: float,
    tip_speed: float,
    v_inflow: float,
    pitch_rad: float,
) -> BladeAerodynamics:
    """Advancing/retreating blade conditions at 75% span.

    The in-plane wind component adds to the advancing blade and subtracts
    from the retreating one; each blade gets its own inflow angle.
    """
    v_tangential = SPAN_STATION * tip_speed
    v_parallel = design.wind_speed * math.cos(alpha_rad)

    v_advancing = v_tangential + v_parallel
    v_retreating = v_tangential - v_parallel

    advancing_aoa = math.atan2(v_inflow, v_advancing) + pitch_rad
    retreating_aoa = math.atan2(v_inflow, v_retreating) + pitch_rad

    return BladeAerodynamics(
        advancing_velocity=_round_half_up(v_advancing, 2),
        retreating_velocity=_round_half_up(v_retreating, 2),
        inflow_velocity=_round_half_up(v_inflow, 2),
        advancing_aoa=_round_half_up(math.degrees(advancing_aoa), 1),
        retreating_aoa=_round_half_up(math.degrees(retreating_aoa), 1),
        advance_ratio=_round_half_up(v_parallel / tip_speed, 3),
        reynolds_number=_round_half_up(v_tangential * design.blade_chord / KINEMATIC_VISCOSITY),
    )


def _clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return max(lo, min(hi, value))


def _round_half_up(value: float, digits: int = 0) -> float:
    """Display rounding with halves rounded up (2.5 -> 3, -2.5 -> -2).

    Non-finite values and values too large to scale pass through unchanged.
    """
    if not math.isfinite(value):
        return value
    scale = 10.0**digits
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / scale
