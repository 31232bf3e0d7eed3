"""gyrokite — design backend for a line-mounted autogyro rotor.

Usage::

    from gyrokite import DesignConfiguration, compute_state
    state = compute_state(DesignConfiguration(wind_speed=12, line_angle=70))
"""

from __future__ import annotations

from gyrokite.aerodynamics import compute_state
from gyrokite.models import DesignConfiguration, SimulationState

__all__ = [
    "DesignConfiguration",
    "SimulationState",
    "compute_state",
]
