# src/apophis_sim/physics/orbit.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from apophis_sim.core.constants import G, au_to_m, m_to_au
from apophis_sim.core.frames import Vector3, cross, dot, norm, perifocal_to_ecliptic, scale, sub
from apophis_sim.core.state import StateVector
from apophis_sim.physics.gravity import solve_keplers_equation, wrap_to_2pi

# Below these magnitudes an orbit is treated as circular / equatorial
_ECC_EPS = 1e-10
_NODE_EPS = 1e-10


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical Keplerian elements for a bound (elliptic) orbit.

    Units:
        a_au: semi-major axis in astronomical units
        e: eccentricity (0<=e<1)
        inc_deg: inclination in degrees
        raan_deg: longitude of ascending node in degrees
        argp_deg: argument of periapsis in degrees
        M0_deg: mean anomaly at epoch in degrees
        epoch_jd: Julian date the elements refer to. None means "the
            simulation's reference epoch".
    """
    a_au: float
    e: float
    inc_deg: float
    raan_deg: float
    argp_deg: float
    M0_deg: float
    epoch_jd: Optional[float] = None

    def __post_init__(self):
        if not (self.a_au > 0):
            raise ValueError("Semi-major axis must be positive.")
        if not (0.0 <= self.e < 1.0):
            raise ValueError("Only bound elliptic orbits are supported (0 <= e < 1).")
        if not math.isfinite(self.inc_deg):
            raise ValueError(f"Inclination must be finite. Got: {self.inc_deg}")
        if not math.isfinite(self.raan_deg):
            raise ValueError(f"Longitude of ascending node must be finite. Got: {self.raan_deg}")
        if not math.isfinite(self.argp_deg):
            raise ValueError(f"Argument of periapsis must be finite. Got: {self.argp_deg}")
        if not math.isfinite(self.M0_deg):
            raise ValueError(f"Mean anomaly must be finite. Got: {self.M0_deg}")
        if self.epoch_jd is not None and not math.isfinite(self.epoch_jd):
            raise ValueError(f"Epoch must be finite. Got: {self.epoch_jd}")

    @property
    def a_m(self) -> float:
        return au_to_m(self.a_au)

    @property
    def periapsis_au(self) -> float:
        return self.a_au * (1.0 - self.e)

    @property
    def apoapsis_au(self) -> float:
        return self.a_au * (1.0 + self.e)


def mean_motion_rad_s(a_m: float, mu_m3_s2: float) -> float:
    """n = sqrt(mu / a^3)."""
    return math.sqrt(mu_m3_s2 / (a_m ** 3))


def orbital_period_s(elements: OrbitalElements, central_mass_kg: float) -> float:
    return 2.0 * math.pi / mean_motion_rad_s(elements.a_m, G * central_mass_kg)


def elements_to_state(
    elements: OrbitalElements,
    central_mass_kg: float,
    t_since_epoch_s: float = 0.0,
    parent_state: Optional[StateVector] = None,
) -> StateVector:
    """
    Convert orbital elements at epoch + t to a Cartesian state (m, m/s).
    Two-body Keplerian propagation using mean anomaly.

    If parent_state is given the result is offset by it, i.e. expressed in
    the same global frame as the parent rather than relative to it.

    a_au <= 0 or central_mass_kg <= 0 are preconditions, not checked here.
    """
    e = elements.e
    inc = math.radians(elements.inc_deg)
    raan = math.radians(elements.raan_deg)
    argp = math.radians(elements.argp_deg)
    M0 = math.radians(elements.M0_deg)

    a = elements.a_m
    mu = G * central_mass_kg
    n = mean_motion_rad_s(a, mu)
    M = M0 + n * t_since_epoch_s

    E = solve_keplers_equation(M, e)

    # True anomaly ν from eccentric anomaly E (half-angle form)
    nu = 2.0 * math.atan2(math.sqrt(1.0 + e) * math.sin(E / 2.0),
                          math.sqrt(1.0 - e) * math.cos(E / 2.0))

    r = a * (1.0 - e * math.cos(E))

    # Position in PQW
    r_pqw: Vector3 = (r * math.cos(nu), r * math.sin(nu), 0.0)

    # Velocity in PQW
    h = math.sqrt(mu * a * (1.0 - e * e))  # specific angular momentum
    v_pqw: Vector3 = (
        -(mu / h) * math.sin(nu),
        (mu / h) * (e + math.cos(nu)),
        0.0,
    )

    r_ecl, v_ecl = perifocal_to_ecliptic(r_pqw, v_pqw, raan, inc, argp)
    state = StateVector(r_ecl, v_ecl)

    if parent_state is not None:
        return state.offset_by(parent_state)
    return state


def _angle_between(a: Vector3, b: Vector3) -> float:
    cos_angle = dot(a, b) / (norm(a) * norm(b))
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def state_to_elements(
    state: StateVector,
    central_mass_kg: float,
    epoch_jd: Optional[float] = None,
    parent_state: Optional[StateVector] = None,
) -> OrbitalElements:
    """
    Convert a Cartesian state to Keplerian elements whose mean anomaly is
    the one at the instant of the state.

    Singular geometries are resolved by fixing the undefined angle to zero:
      - circular (e ~ 0): argp = 0, phase measured from the node
      - equatorial (i ~ 0 or 180°): raan = 0, argp measured from +X
      - circular equatorial: both zero, phase is the true longitude
    """
    if parent_state is not None:
        state = state.relative_to(parent_state)

    mu = G * central_mass_kg
    r_vec = state.position
    v_vec = state.velocity
    r = norm(r_vec)
    v = norm(v_vec)

    h_vec = cross(r_vec, v_vec)
    h = norm(h_vec)
    if r == 0.0 or h == 0.0:
        raise ValueError("Degenerate state: zero radius or rectilinear motion.")

    energy = v * v / 2.0 - mu / r
    if energy >= 0.0:
        raise ValueError("State is not on a bound orbit (specific energy >= 0).")
    a = -mu / (2.0 * energy)

    e_vec = scale(sub(scale(r_vec, v * v - mu / r), scale(v_vec, dot(r_vec, v_vec))), 1.0 / mu)
    e = norm(e_vec)

    inc = math.acos(max(-1.0, min(1.0, h_vec[2] / h)))

    # Ascending node vector z_hat x h
    n_vec: Vector3 = (-h_vec[1], h_vec[0], 0.0)
    n = norm(n_vec)
    equatorial = n < _NODE_EPS * h
    circular = e < _ECC_EPS

    if equatorial:
        raan = 0.0
    else:
        raan = wrap_to_2pi(math.atan2(n_vec[1], n_vec[0]))

    if circular:
        argp = 0.0
    elif equatorial:
        argp = math.atan2(e_vec[1], e_vec[0])
        if h_vec[2] < 0.0:
            argp = -argp
        argp = wrap_to_2pi(argp)
    else:
        argp = _angle_between(n_vec, e_vec)
        if e_vec[2] < 0.0:
            argp = 2.0 * math.pi - argp

    if not circular:
        nu = _angle_between(e_vec, r_vec)
        if dot(r_vec, v_vec) < 0.0:
            nu = 2.0 * math.pi - nu
    elif not equatorial:
        # Argument of latitude
        nu = _angle_between(n_vec, r_vec)
        if r_vec[2] < 0.0:
            nu = 2.0 * math.pi - nu
    else:
        # True longitude
        nu = math.atan2(r_vec[1], r_vec[0])
        if h_vec[2] < 0.0:
            nu = -nu
        nu = wrap_to_2pi(nu)

    E = 2.0 * math.atan2(math.sqrt(1.0 - e) * math.sin(nu / 2.0),
                         math.sqrt(1.0 + e) * math.cos(nu / 2.0))
    M = wrap_to_2pi(E - e * math.sin(E))

    return OrbitalElements(
        a_au=m_to_au(a),
        e=e,
        inc_deg=math.degrees(inc),
        raan_deg=math.degrees(raan),
        argp_deg=math.degrees(argp),
        M0_deg=math.degrees(M),
        epoch_jd=epoch_jd,
    )


def orbit_polyline(
    elements: OrbitalElements,
    central_mass_kg: float,
    samples: int = 360,
    parent_state: Optional[StateVector] = None,
) -> List[Vector3]:
    """
    Sample one full revolution uniformly in mean anomaly, for drawing the
    orbit as a closed line. The first point is repeated at the end.
    """
    if samples < 3:
        raise ValueError("samples must be >= 3.")

    period = orbital_period_s(elements, central_mass_kg)
    points: List[Vector3] = []
    for k in range(samples):
        t = period * k / samples
        points.append(elements_to_state(elements, central_mass_kg, t, parent_state).position)
    points.append(points[0])
    return points
