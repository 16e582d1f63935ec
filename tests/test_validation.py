import math
import pytest

from apophis_sim.objects.body import CelestialBodyProperties
from apophis_sim.physics.orbit import OrbitalElements


def elements(**overrides):
    values = dict(a_au=1.0, e=0.1, inc_deg=5.0, raan_deg=10.0, argp_deg=20.0, M0_deg=30.0)
    values.update(overrides)
    return OrbitalElements(**values)


def test_orbital_elements_validates_semi_major_axis():
    with pytest.raises(ValueError, match="Semi-major axis must be positive"):
        elements(a_au=0.0)

    with pytest.raises(ValueError, match="Semi-major axis must be positive"):
        elements(a_au=-1.0)

    with pytest.raises(ValueError, match="Semi-major axis must be positive"):
        elements(a_au=math.nan)


def test_orbital_elements_validates_eccentricity():
    with pytest.raises(ValueError, match="0 <= e < 1"):
        elements(e=-0.1)

    with pytest.raises(ValueError, match="0 <= e < 1"):
        elements(e=1.0)

    with pytest.raises(ValueError, match="0 <= e < 1"):
        elements(e=1.5)


def test_orbital_elements_validates_angles():
    with pytest.raises(ValueError, match="Inclination must be finite"):
        elements(inc_deg=math.inf)

    with pytest.raises(ValueError, match="Longitude of ascending node must be finite"):
        elements(raan_deg=math.nan)

    with pytest.raises(ValueError, match="Argument of periapsis must be finite"):
        elements(argp_deg=-math.inf)

    with pytest.raises(ValueError, match="Mean anomaly must be finite"):
        elements(M0_deg=math.nan)


def test_orbital_elements_validates_epoch():
    with pytest.raises(ValueError, match="Epoch must be finite"):
        elements(epoch_jd=math.inf)


def test_orbital_elements_accepts_valid_values():
    el = elements(e=0.0, inc_deg=180.0, raan_deg=-90.0, argp_deg=720.0, epoch_jd=2451545.0)
    assert el.a_au == 1.0
    assert el.epoch_jd == 2451545.0
    assert el.periapsis_au == el.apoapsis_au == 1.0


def test_body_validates_name():
    with pytest.raises(ValueError, match="Body name cannot be empty"):
        CelestialBodyProperties(name="", mass_kg=1.0)

    with pytest.raises(ValueError, match="Body name cannot be empty"):
        CelestialBodyProperties(name="   ", mass_kg=1.0)


def test_body_validates_mass():
    with pytest.raises(ValueError, match="Mass must be positive"):
        CelestialBodyProperties(name="Rock", mass_kg=0.0)

    with pytest.raises(ValueError, match="Mass must be positive"):
        CelestialBodyProperties(name="Rock", mass_kg=-5.0)


def test_body_validates_radius():
    with pytest.raises(ValueError, match="Radius must be non-negative"):
        CelestialBodyProperties(name="Rock", mass_kg=1.0, radius_km=-1.0)


def test_body_validates_parent():
    with pytest.raises(ValueError, match="center body cannot have a parent"):
        CelestialBodyProperties(name="Sun", mass_kg=1.0, is_center=True, parent="Galaxy")

    with pytest.raises(ValueError, match="cannot be its own parent"):
        CelestialBodyProperties(name="Moon", mass_kg=1.0, parent="Moon")


def test_body_satellite_flag():
    moon = CelestialBodyProperties(name="Moon", mass_kg=7.3e22, parent="Earth")
    earth = CelestialBodyProperties(name="Earth", mass_kg=6.0e24)
    assert moon.is_satellite
    assert not earth.is_satellite
