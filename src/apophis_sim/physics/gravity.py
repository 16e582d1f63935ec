# Two-body / N-body point-mass gravity

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from apophis_sim.core.constants import G, MIN_SEPARATION_M
from apophis_sim.core.frames import Vector3, ZERO

logger = logging.getLogger(__name__)


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π)."""
    two_pi = 2.0 * math.pi
    return angle_rad % two_pi


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-10, max_iter: int = 100) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson.

    Args:
        M_rad: Mean anomaly (rad), any real value
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance on the Newton update
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad) for M wrapped into [0, 2π)

    Hitting the iteration cap is not an error: the last iterate is returned
    as-is. Eccentricities below ~0.95 converge in well under 10 iterations.
    """
    if not (0.0 <= e < 1.0):
        raise ValueError("Elliptic Kepler solver requires 0 <= e < 1.")

    M = wrap_to_2pi(M_rad)

    E = M + e * math.sin(M)

    for _ in range(max_iter):
        dE = (E - e * math.sin(E) - M) / (1.0 - e * math.cos(E))
        E -= dE
        if abs(dE) < tol:
            return E

    logger.debug("Kepler solver hit %d iterations (M=%.6g, e=%.6g); returning best estimate", max_iter, M, e)
    return E


def gravitational_acceleration(pos_a: Vector3, pos_b: Vector3, mass_b_kg: float) -> Vector3:
    """
    Acceleration on a point at pos_a due to a point mass at pos_b:
        a = G m_b (B - A) / |B - A|^3

    Coincident points (self-interaction) yield the zero vector.
    """
    dx = pos_b[0] - pos_a[0]
    dy = pos_b[1] - pos_a[1]
    dz = pos_b[2] - pos_a[2]

    dist_sq = dx*dx + dy*dy + dz*dz
    dist = math.sqrt(dist_sq)

    if dist < MIN_SEPARATION_M:
        # Avoid singularity
        return ZERO

    factor = G * mass_b_kg / (dist_sq * dist)
    return (factor * dx, factor * dy, factor * dz)


@dataclass(frozen=True)
class GravitySources:
    """
    Which bodies pull on which.

    perturbations off: every non-center body feels the center only (two-body
    mechanics per body). perturbations on: every non-center body feels every
    other body. The center itself is not accelerated unless integrate_center
    is set (and perturbations are on).
    """
    masses: Tuple[float, ...]
    center_index: Optional[int] = None
    perturbations: bool = True
    integrate_center: bool = False

    def acceleration_on(self, i: int, positions: Sequence[Vector3]) -> Vector3:
        is_center = i == self.center_index

        if is_center and not (self.integrate_center and self.perturbations):
            return ZERO

        if not self.perturbations:
            if self.center_index is None:
                return ZERO
            return gravitational_acceleration(positions[i], positions[self.center_index], self.masses[self.center_index])

        ax = ay = az = 0.0
        pos = positions[i]
        for j, mass in enumerate(self.masses):
            if j == i:
                continue
            acc = gravitational_acceleration(pos, positions[j], mass)
            ax += acc[0]
            ay += acc[1]
            az += acc[2]
        return (ax, ay, az)

    def accelerations(self, positions: Sequence[Vector3]) -> List[Vector3]:
        """
        Accelerations for every body, all taken from the same positions
        snapshot.
        """
        if len(positions) != len(self.masses):
            raise ValueError(f"Expected {len(self.masses)} positions, got {len(positions)}.")
        return [self.acceleration_on(i, positions) for i in range(len(positions))]
