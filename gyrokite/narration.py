"""Grounding text for the design-assistant chat.

The assistant is an external language-model service. This module only turns
the current design and its computed state into read-only descriptive context
around the user's question; nothing here feeds back into the model.
"""

from __future__ import annotations

from gyrokite.models import DesignConfiguration, SimulationState

SYSTEM_INSTRUCTION = """\
You are a senior aerospace engineer specializing in rotary-wing aerodynamics, \
specifically autogyros and gyro-kites.
The user is designing a 2-bladed, teetering autogyro rotor that mounts coaxially \
on a tensioned kite line. Help them optimize the design for stability and for \
thrust generation (adding tension to the line).

Key physics concepts to apply:
1. Autorotation: how the wind passing through the rotor disc drives rotation.
2. Teetering hinge: how it equalizes lift between the advancing and retreating \
blade to prevent roll moments on the line.
3. Coaxial mounting: friction, bearings, and how the rotor must spin freely \
around the static line.
4. Safety: blade strikes, material stress, and line abrasion.

Each prompt includes the current design parameters and simulation results.
Keep answers concise, technical but accessible, and practical.
"""


def describe_design(design: DesignConfiguration) -> str:
    """Bullet list of the design parameters, one per line."""
    return "\n".join(
        [
            "Current Design Configuration:",
            f"- Blade Length: {design.blade_length:g} m",
            f"- Blade Chord: {design.blade_chord:g} m",
            f"- Pitch: {design.blade_pitch:g} deg",
            f"- Rotor Mass: {design.rotor_mass:g} kg",
            f"- Rotor Tilt: {design.rotor_tilt:g} deg",
            f"- Line Angle: {design.line_angle:g} deg",
            f"- Line Tension: {design.line_tension:g} N",
            f"- Wind Speed: {design.wind_speed:g} m/s",
        ]
    )


def describe_state(state: SimulationState) -> str:
    """Bullet list of the headline simulation results."""
    anchor = state.anchor_analysis
    blade = state.blade_aerodynamics
    return "\n".join(
        [
            "Simulation Results:",
            f"- RPM: {state.rpm:.0f}",
            f"- Generated Tension (Thrust): {state.generated_thrust:g} N",
            f"- Lift / Drag: {state.lift:g} N / {state.drag:g} N",
            f"- Disc Angle of Attack: {state.angle_of_attack:g} deg",
            f"- Tip Speed Ratio: {state.tip_speed_ratio:g}",
            f"- Stability Score: {state.stability_score:.0f}/100",
            f"- Anchor Tension: {anchor.anchor_tension:g} N at {anchor.anchor_angle:g} deg",
            f"- Advance Ratio: {blade.advance_ratio:g}",
        ]
    )


def build_prompt(
    question: str,
    design: DesignConfiguration,
    state: SimulationState,
) -> str:
    """Combine design, results and the user's question into one prompt."""
    return (
        f"{describe_design(design)}\n\n"
        f"{describe_state(state)}\n\n"
        f"User Question: {question.strip()}"
    )
