from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]

ZERO: Vector3 = (0.0, 0.0, 0.0)


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(v: Vector3, scalar: float) -> Vector3:
    return (v[0] * scalar, v[1] * scalar, v[2] * scalar)


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def perifocal_to_ecliptic(r_pqw: Vector3, v_pqw: Vector3, raan_rad: float, inc_rad: float, argp_rad: float) -> Tuple[Vector3, Vector3]:
    """
    Convert position and velocity from the perifocal (PQW) frame to the
    reference (ecliptic) frame.

    Args:
        r_pqw: Position vector in PQW frame (m)
        v_pqw: Velocity vector in PQW frame (m/s)
        raan_rad: Longitude of ascending node (radians)
        inc_rad: Inclination (radians)
        argp_rad: Argument of periapsis (radians)

    Returns:
        (r_ecl, v_ecl): Position and velocity in the ecliptic frame
    """
    # 3-1-3 sequence R3(raan) * R1(inc) * R3(argp); argp is applied first
    r_temp = rot3(argp_rad, r_pqw)
    v_temp = rot3(argp_rad, v_pqw)

    r_temp = rot1(inc_rad, r_temp)
    v_temp = rot1(inc_rad, v_temp)

    r_ecl = rot3(raan_rad, r_temp)
    v_ecl = rot3(raan_rad, v_temp)

    return r_ecl, v_ecl
