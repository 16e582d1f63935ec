"""
Conserved-quantity diagnostics for judging integrator quality.
"""

from __future__ import annotations

import math
from typing import Sequence

from apophis_sim.core.constants import G
from apophis_sim.core.frames import Vector3, dot, norm, sub
from apophis_sim.core.state import StateVector


def kinetic_energy(states: Sequence[StateVector], masses: Sequence[float]) -> float:
    return sum(0.5 * m * dot(s.velocity, s.velocity) for s, m in zip(states, masses))


def potential_energy(states: Sequence[StateVector], masses: Sequence[float]) -> float:
    """Pairwise Newtonian potential, each pair counted once."""
    total = 0.0
    n = len(states)
    for i in range(n):
        for j in range(i + 1, n):
            r = norm(sub(states[i].position, states[j].position))
            if r > 0.0:
                total -= G * masses[i] * masses[j] / r
    return total


def total_energy(states: Sequence[StateVector], masses: Sequence[float]) -> float:
    return kinetic_energy(states, masses) + potential_energy(states, masses)


def total_momentum(states: Sequence[StateVector], masses: Sequence[float]) -> Vector3:
    px = py = pz = 0.0
    for s, m in zip(states, masses):
        px += m * s.velocity[0]
        py += m * s.velocity[1]
        pz += m * s.velocity[2]
    return (px, py, pz)


def relative_drift(initial: float, current: float) -> float:
    """|current - initial| / |initial|; inf if the reference is zero."""
    if initial == 0.0:
        return 0.0 if current == 0.0 else math.inf
    return abs(current - initial) / abs(initial)
