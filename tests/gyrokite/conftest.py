"""Shared fixtures for gyrokite tests."""

from __future__ import annotations

import pytest

from gyrokite.models import DesignConfiguration


# ---------------------------------------------------------------------------
# Design Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def default_design() -> DesignConfiguration:
    """Stock rotor: 1.2 m blades, 4° pitch, 60° line, 10 m/s wind."""
    return DesignConfiguration()


@pytest.fixture
def reference_design() -> DesignConfiguration:
    """The frozen regression scenario, spelled out field by field."""
    return DesignConfiguration(
        id="reference-001",
        name="Reference Rotor",
        blade_length=1.2,
        blade_chord=0.15,
        blade_pitch=4.0,
        rotor_mass=1.5,
        line_tension=200,
        line_angle=60,
        wind_speed=10,
        rotor_tilt=0,
    )


@pytest.fixture
def vertical_line_design() -> DesignConfiguration:
    """Line straight up — disc edge-on to the wind."""
    return DesignConfiguration(line_angle=90, rotor_tilt=0)


@pytest.fixture
def calm_design() -> DesignConfiguration:
    """No wind at all."""
    return DesignConfiguration(wind_speed=0)


@pytest.fixture
def heavy_rotor_design() -> DesignConfiguration:
    """5 kg rotor in a 3 m/s breeze — below its 4.5 m/s spin-up threshold."""
    return DesignConfiguration(rotor_mass=5.0, wind_speed=3.0)

