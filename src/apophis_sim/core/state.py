from __future__ import annotations

from dataclasses import dataclass

from apophis_sim.core.frames import Vector3, ZERO, add, norm, sub


@dataclass(frozen=True)
class StateVector:
    """
    Instantaneous position (m) and velocity (m/s) of a body in the common
    inertial frame centered on the dominant mass.

    Frozen: a state handed out by the simulator can never be written back
    into it.
    """
    position: Vector3
    velocity: Vector3

    @classmethod
    def zero(cls) -> "StateVector":
        return cls(ZERO, ZERO)

    def offset_by(self, other: "StateVector") -> "StateVector":
        """Component-wise sum with another state (e.g. a parent's)."""
        return StateVector(add(self.position, other.position), add(self.velocity, other.velocity))

    def relative_to(self, other: "StateVector") -> "StateVector":
        return StateVector(sub(self.position, other.position), sub(self.velocity, other.velocity))

    def distance_to(self, other: "StateVector") -> float:
        return norm(sub(self.position, other.position))

    @property
    def speed(self) -> float:
        return norm(self.velocity)
