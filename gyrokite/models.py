"""Pydantic models — shared contract between all gyrokite modules.

API Naming Contract:
  - Python code uses snake_case field names.
  - The browser client speaks camelCase (bladeLength, generatedThrust, ...).
  - Every model inherits CamelModel, so model_dump(by_alias=True) produces
    camelCase keys and incoming payloads are accepted in either form
    (populate_by_name=True).
  - Overflowed outputs (inf/nan) serialize to JSON as null.

DesignConfiguration and SimulationState are frozen values: the aerodynamic
model builds a fresh SimulationState on every call and neither object holds
a reference to the other afterwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Literal Types
# ---------------------------------------------------------------------------

SweepParameter = Literal[
    "blade_length",
    "blade_chord",
    "blade_pitch",
    "rotor_mass",
    "line_tension",
    "line_angle",
    "wind_speed",
    "rotor_tilt",
]


# ---------------------------------------------------------------------------
# Base model for camelCase serialization
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """Base for models serialized to the client with camelCase keys."""

    model_config = ConfigDict(
        populate_by_name=True, alias_generator=to_camel, ser_json_inf_nan="null"
    )


class FrozenCamelModel(CamelModel):
    """Immutable camelCase value object."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        ser_json_inf_nan="null",
        frozen=True,
    )


# ---------------------------------------------------------------------------
# DesignConfiguration — rotor + environment inputs
# ---------------------------------------------------------------------------

class DesignConfiguration(FrozenCamelModel):
    """Rotor design and wind condition fed to the aerodynamic model.

    No range constraints live here: the model is total over finite numbers
    and editor bounds are enforced by gyrokite.validation at the boundary.
    Defaults reproduce the stock two-blade rotor on a 60° kite line.
    """

    # ── Meta (client bookkeeping, ignored by the physics) ──────────
    version: str = "0.1.0"
    id: str = ""
    name: str = "Untitled Rotor"

    # ── Rotor ─────────────────────────────────────────────────────────
    blade_length: float = 1.2    # m, rotor radius
    blade_chord: float = 0.15    # m
    blade_pitch: float = 4.0     # deg, relative to the rotation plane
    rotor_mass: float = 1.5      # kg

    # ── Kite line ─────────────────────────────────────────────────────
    line_tension: float = 200.0  # N, upper-line tension before rotor effects
    line_angle: float = 60.0     # deg elevation from the ground plane

    # ── Environment ──────────────────────────────────────────────────
    wind_speed: float = 10.0     # m/s, horizontal free stream

    # ── Spherical bearing ────────────────────────────────────────────
    # Positive tips the disc back (raises angle of attack).
    rotor_tilt: float = 0.0      # deg


# ---------------------------------------------------------------------------
# SimulationState — model output
# ---------------------------------------------------------------------------

class AnchorAnalysis(FrozenCamelModel):
    """Static force balance at the rotor hub resolved onto the ground anchor."""

    anchor_tension: float        # N, magnitude of the lower-line load
    anchor_angle: float          # deg above the downwind horizontal
    lower_line_tension_x: float  # N, downwind component
    lower_line_tension_y: float  # N, vertical component


class BladeAerodynamics(FrozenCamelModel):
    """Blade-element diagnostics at the 75% span station.

    All zero when the rotor is in the stationary (bluff-body) regime.
    """

    advancing_velocity: float = 0.0   # m/s
    retreating_velocity: float = 0.0  # m/s, negative = reverse flow
    inflow_velocity: float = 0.0      # m/s through the disc
    advancing_aoa: float = 0.0        # deg
    retreating_aoa: float = 0.0       # deg
    advance_ratio: float = 0.0        # mu
    reynolds_number: float = 0.0


class SimulationState(FrozenCamelModel):
    """Steady-state rotor outputs for one DesignConfiguration."""

    rpm: float
    generated_thrust: float      # N, along the kite line
    total_rotor_thrust: float    # N, along the rotor spin axis
    lift: float                  # N, world vertical
    drag: float                  # N, world horizontal (downwind positive)
    gravity: float               # N, rotor weight
    tip_speed: float             # m/s
    tip_speed_ratio: float
    stability_score: float       # 0-100
    power_output: float          # W
    angle_of_attack: float       # deg, effective disc angle vs wind
    anchor_analysis: AnchorAnalysis
    blade_aerodynamics: BladeAerodynamics = Field(default_factory=BladeAerodynamics)


# ---------------------------------------------------------------------------
# Validation Warning
# ---------------------------------------------------------------------------

class ValidationWarning(CamelModel):
    """Non-blocking design warning."""

    id: str  # W01-W07, R01
    level: Literal["warn"] = "warn"
    message: str
    fields: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# REST Request/Response Types
# ---------------------------------------------------------------------------

class SimulationResult(CamelModel):
    """Response from POST /api/simulate."""

    state: SimulationState
    warnings: list[ValidationWarning] = Field(default_factory=list)


class SweepPoint(FrozenCamelModel):
    """One sample of a response curve."""

    value: float
    generated_thrust: float
    rpm: float
    lift: float
    drag: float


class SweepRequest(CamelModel):
    """Request body for POST /api/sweep."""

    design: DesignConfiguration = Field(default_factory=DesignConfiguration)
    parameter: SweepParameter = "wind_speed"
    start: float = 2.0
    stop: float = 25.0
    step: float = 2.0


class SweepResponse(CamelModel):
    """Response from POST /api/sweep."""

    parameter: SweepParameter
    points: list[SweepPoint] = Field(default_factory=list)


class AssistantContextRequest(CamelModel):
    """Request body for POST /api/assistant/context."""

    design: DesignConfiguration = Field(default_factory=DesignConfiguration)
    question: str = Field(default="", max_length=4000)


class AssistantContextResponse(CamelModel):
    """Grounding text for an external design-assistant chat."""

    system_instruction: str
    prompt: str


class StateMessage(CamelModel):
    """Reply pushed over /ws/simulate for each evaluated design."""

    type: Literal["state"] = "state"
    state: SimulationState
    warnings: list[ValidationWarning] = Field(default_factory=list)
