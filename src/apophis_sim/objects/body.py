from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from apophis_sim.physics.orbit import OrbitalElements


@dataclass(frozen=True)
class CelestialBodyProperties:
    """
    Identity and physical description of a body.

    name: unique key within a simulation
    mass_kg: mass (kg)
    radius_km: display radius, not used by the physics
    is_center: marks the (single) fixed gravitational center
    elements: orbit the initial state is derived from. For a satellite the
        elements are relative to the parent; otherwise to the center.
    parent: name of the gravitational parent for satellites (Moon -> Earth).
        Satellites ride analytic Keplerian rails around their parent.
    """
    name: str
    mass_kg: float
    radius_km: float = 0.0
    is_center: bool = False
    elements: Optional[OrbitalElements] = None
    parent: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Body name cannot be empty.")
        if not (self.mass_kg > 0):
            raise ValueError(f"Mass must be positive. Got: {self.mass_kg}")
        if not (self.radius_km >= 0):
            raise ValueError(f"Radius must be non-negative. Got: {self.radius_km}")
        if self.is_center and self.parent is not None:
            raise ValueError("The center body cannot have a parent.")
        if self.parent is not None and self.parent == self.name:
            raise ValueError(f"Body '{self.name}' cannot be its own parent.")

    @property
    def is_satellite(self) -> bool:
        return self.parent is not None
