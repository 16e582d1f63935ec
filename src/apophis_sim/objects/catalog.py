"""
Reference bodies for the inner solar system plus 99942 Apophis.

Every body carries the epoch its elements refer to, so the geometry at a
given calendar instant does not depend on when a simulation starts.
Planets use the JPL approximate mean elements at J2000.0, converted from
mean longitude L and longitude of perihelion to M = L - varpi and
argp = varpi - raan. The Moon uses geocentric ecliptic mean elements at
J2000.0. Apophis uses NASA JPL Horizons solution JPL#220 at
2021-Jan-01.0 TDB.
"""

from __future__ import annotations

from typing import List

from apophis_sim.core.constants import EARTH_MASS_KG, J2000_JD, MOON_MASS_KG, SUN_MASS_KG
from apophis_sim.objects.body import CelestialBodyProperties
from apophis_sim.physics.orbit import OrbitalElements

APOPHIS_EPOCH_JD: float = 2459215.5

SUN = CelestialBodyProperties(
    name="Sun",
    mass_kg=SUN_MASS_KG,
    radius_km=696000.0,
    is_center=True,
)

MERCURY = CelestialBodyProperties(
    name="Mercury",
    mass_kg=3.3011e23,
    radius_km=2440.0,
    elements=OrbitalElements(a_au=0.38709893, e=0.20563069, inc_deg=7.00487,
                             raan_deg=48.33167, argp_deg=29.12478, M0_deg=174.79439,
                             epoch_jd=J2000_JD),
)

VENUS = CelestialBodyProperties(
    name="Venus",
    mass_kg=4.867e24,
    radius_km=6052.0,
    elements=OrbitalElements(a_au=0.72333199, e=0.00677323, inc_deg=3.39471,
                             raan_deg=76.68069, argp_deg=54.85229, M0_deg=50.44675,
                             epoch_jd=J2000_JD),
)

EARTH = CelestialBodyProperties(
    name="Earth",
    mass_kg=EARTH_MASS_KG,
    radius_km=6371.0,
    elements=OrbitalElements(a_au=1.00000011, e=0.01671022, inc_deg=0.00005,
                             raan_deg=-11.26064, argp_deg=114.20783, M0_deg=357.51716,
                             epoch_jd=J2000_JD),
)

# Geocentric, relative to the ecliptic (JPL DE405/LE405)
MOON = CelestialBodyProperties(
    name="Moon",
    mass_kg=MOON_MASS_KG,
    radius_km=1737.0,
    elements=OrbitalElements(a_au=0.00257, e=0.0554, inc_deg=5.16,
                             raan_deg=125.08, argp_deg=318.15, M0_deg=135.27,
                             epoch_jd=J2000_JD),
    parent="Earth",
)

MARS = CelestialBodyProperties(
    name="Mars",
    mass_kg=6.417e23,
    radius_km=3390.0,
    elements=OrbitalElements(a_au=1.52366231, e=0.09341233, inc_deg=1.85061,
                             raan_deg=49.57854, argp_deg=286.46230, M0_deg=19.41248,
                             epoch_jd=J2000_JD),
)

JUPITER = CelestialBodyProperties(
    name="Jupiter",
    mass_kg=1.8982e27,
    radius_km=69911.0,
    elements=OrbitalElements(a_au=5.20336301, e=0.04839266, inc_deg=1.30530,
                             raan_deg=100.55615, argp_deg=274.19770, M0_deg=19.65053,
                             epoch_jd=J2000_JD),
)

APOPHIS = CelestialBodyProperties(
    name="99942 Apophis",
    mass_kg=6.1e10,
    radius_km=0.185,
    elements=OrbitalElements(
        a_au=0.9225071817289903,
        e=0.1915216893501022,
        inc_deg=3.336751320066756,
        raan_deg=204.0389272089208,
        argp_deg=126.6520518368553,
        M0_deg=127.3225632013606,
        epoch_jd=APOPHIS_EPOCH_JD,
    ),
)


def inner_solar_system() -> List[CelestialBodyProperties]:
    """
    Sun, inner planets, the Moon, Jupiter and Apophis, in an order that
    registers every parent before its satellites.
    """
    return [SUN, MERCURY, VENUS, EARTH, MOON, MARS, JUPITER, APOPHIS]
