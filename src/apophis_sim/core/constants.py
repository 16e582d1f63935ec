from __future__ import annotations

# Newtonian gravitational constant in m^3 kg^-1 s^-2 (CODATA 2018)
G: float = 6.6743e-11

# Astronomical unit in meters (IAU 2012 exact value)
AU_M: float = 1.495978707e11

SECONDS_PER_DAY: float = 86400.0

# Julian dates of reference instants
J2000_JD: float = 2451545.0
UNIX_EPOCH_JD: float = 2440587.5

# Reference masses in kg
SUN_MASS_KG: float = 1.989e30
EARTH_MASS_KG: float = 5.972e24
MOON_MASS_KG: float = 7.342e22

# Below this separation (m) two point masses exert no force on each other
MIN_SEPARATION_M: float = 1e-10


def au_to_m(au: float) -> float:
    return au * AU_M


def m_to_au(meters: float) -> float:
    return meters / AU_M
