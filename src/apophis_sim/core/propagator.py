"""
Fixed-step N-body integrators.

Every integrator advances all bodies jointly: accelerations are always
evaluated from a complete positions snapshot, never from a mix of old and
already-updated neighbours. dt is signed; negative dt runs time backward.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Protocol, Sequence

from apophis_sim.core.frames import Vector3, add, scale
from apophis_sim.core.state import StateVector
from apophis_sim.physics.gravity import GravitySources


class IntegrationMethod(Enum):
    EULER = "euler"
    VERLET = "verlet"
    RK4 = "rk4"


def _axpy(x: Sequence[Vector3], a: float, y: Sequence[Vector3]) -> List[Vector3]:
    """x + a*y, element-wise over lists of vectors."""
    return [add(xi, scale(yi, a)) for xi, yi in zip(x, y)]


class Integrator(Protocol):
    """
    Strategy interface: advance(states, sources, dt) -> new states.
    """
    method: IntegrationMethod

    def advance(self, states: Sequence[StateVector], sources: GravitySources, dt: float) -> List[StateVector]:
        ...


class EulerIntegrator:
    """
    Explicit (forward) Euler. Positions advance with the pre-update
    velocity. First order and not energy conserving; kept as a
    speed/accuracy baseline.
    """
    method = IntegrationMethod.EULER

    def advance(self, states: Sequence[StateVector], sources: GravitySources, dt: float) -> List[StateVector]:
        positions = [s.position for s in states]
        velocities = [s.velocity for s in states]
        acc = sources.accelerations(positions)

        new_positions = _axpy(positions, dt, velocities)
        new_velocities = _axpy(velocities, dt, acc)
        return [StateVector(r, v) for r, v in zip(new_positions, new_velocities)]


class VerletIntegrator:
    """
    Velocity Verlet: x += v dt + a0 dt^2/2, then a1 at the new positions,
    then v += (a0 + a1) dt/2. Symplectic and time reversible:
    energy error stays bounded instead of drifting.
    """
    method = IntegrationMethod.VERLET

    def advance(self, states: Sequence[StateVector], sources: GravitySources, dt: float) -> List[StateVector]:
        positions = [s.position for s in states]
        velocities = [s.velocity for s in states]

        a0 = sources.accelerations(positions)

        # x += v dt + 1/2 a0 dt^2
        new_positions = [
            add(add(r, scale(v, dt)), scale(a, 0.5 * dt * dt))
            for r, v, a in zip(positions, velocities, a0)
        ]

        a1 = sources.accelerations(new_positions)

        # v += 1/2 (a0 + a1) dt
        new_velocities = [
            add(v, scale(add(a_old, a_new), 0.5 * dt))
            for v, a_old, a_new in zip(velocities, a0, a1)
        ]
        return [StateVector(r, v) for r, v in zip(new_positions, new_velocities)]


class RK4Integrator:
    """
    Classic 4th-order Runge-Kutta on the coupled (position, velocity)
    system of all bodies. Each stage derivative is computed from the whole
    system's intermediate state.
    """
    method = IntegrationMethod.RK4

    def advance(self, states: Sequence[StateVector], sources: GravitySources, dt: float) -> List[StateVector]:
        r0 = [s.position for s in states]
        v0 = [s.velocity for s in states]

        # k1
        k1_r = v0
        k1_v = sources.accelerations(r0)

        # k2
        r2 = _axpy(r0, dt / 2.0, k1_r)
        v2 = _axpy(v0, dt / 2.0, k1_v)
        k2_r = v2
        k2_v = sources.accelerations(r2)

        # k3
        r3 = _axpy(r0, dt / 2.0, k2_r)
        v3 = _axpy(v0, dt / 2.0, k2_v)
        k3_r = v3
        k3_v = sources.accelerations(r3)

        # k4
        r4 = _axpy(r0, dt, k3_r)
        v4 = _axpy(v0, dt, k3_v)
        k4_r = v4
        k4_v = sources.accelerations(r4)

        # Combine
        new_states: List[StateVector] = []
        for i in range(len(states)):
            dr = add(add(k1_r[i], scale(k2_r[i], 2.0)), add(scale(k3_r[i], 2.0), k4_r[i]))
            dv = add(add(k1_v[i], scale(k2_v[i], 2.0)), add(scale(k3_v[i], 2.0), k4_v[i]))
            new_states.append(StateVector(
                add(r0[i], scale(dr, dt / 6.0)),
                add(v0[i], scale(dv, dt / 6.0)),
            ))
        return new_states


_INTEGRATORS: Dict[IntegrationMethod, Integrator] = {
    IntegrationMethod.EULER: EulerIntegrator(),
    IntegrationMethod.VERLET: VerletIntegrator(),
    IntegrationMethod.RK4: RK4Integrator(),
}


def get_integrator(method: IntegrationMethod) -> Integrator:
    """Integrators are stateless, so one shared instance per method."""
    return _INTEGRATORS[IntegrationMethod(method)]
