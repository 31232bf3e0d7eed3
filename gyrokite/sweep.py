"""Response curves — repeated model evaluation over one parameter.

Used by the analysis view to chart thrust and RPM against wind speed (or any
other numeric design field). Each sample is an independent call to
compute_state() on a perturbed copy of the design; samples are ordered by the
input value, never by evaluation order.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from gyrokite.aerodynamics import compute_state
from gyrokite.models import DesignConfiguration, SweepParameter, SweepPoint

# Upper bound on samples per sweep request.
MAX_SWEEP_POINTS = 500


def sweep_values(start: float, stop: float, step: float) -> list[float]:
    """Inclusive grid from *start* to *stop* in increments of *step*.

    Raises ValueError for a non-positive step, an inverted range, or a grid
    larger than MAX_SWEEP_POINTS.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    if stop < start:
        raise ValueError("stop must not be less than start")

    count = int(np.floor((stop - start) / step + 1e-9)) + 1
    if count > MAX_SWEEP_POINTS:
        raise ValueError(f"sweep would produce {count} points (max {MAX_SWEEP_POINTS})")

    grid = start + step * np.arange(count, dtype=float)
    return [round(float(v), 6) for v in grid]


def sweep_parameter(
    design: DesignConfiguration,
    parameter: SweepParameter,
    values: Iterable[float],
) -> list[SweepPoint]:
    """Evaluate the model at each value of *parameter*, sorted by value."""
    points = []
    for value in sorted(values):
        state = compute_state(design.model_copy(update={parameter: float(value)}))
        points.append(
            SweepPoint(
                value=float(value),
                generated_thrust=state.generated_thrust,
                rpm=state.rpm,
                lift=state.lift,
                drag=state.drag,
            )
        )
    return points


def sweep_wind_speed(
    design: DesignConfiguration,
    start: float = 2.0,
    stop: float = 25.0,
    step: float = 2.0,
) -> list[SweepPoint]:
    """Thrust/RPM versus wind speed — the analysis view's default curve."""
    return sweep_parameter(design, "wind_speed", sweep_values(start, stop, step))
