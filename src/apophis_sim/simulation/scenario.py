from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from apophis_sim.objects.body import CelestialBodyProperties


@dataclass
class BodyRegistry:
    """
    Dense arena of body records plus a name -> index table.
    Keep this pure: just data + lookup, no stepping logic.

    Indices are stable for the lifetime of the registry and follow
    registration order, so per-body state lists can be indexed in parallel.
    Parent links are stored as indices and filled in as soon as the parent
    is registered, even if that happens after the satellite.
    """
    bodies: List[CelestialBodyProperties] = field(default_factory=list, init=False)
    _index: Dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _parents: List[Optional[int]] = field(default_factory=list, init=False, repr=False)
    _center: Optional[int] = field(default=None, init=False, repr=False)

    def add(self, body: CelestialBodyProperties) -> int:
        if body.name in self._index:
            raise ValueError(f"Duplicate body name: {body.name}")
        if body.is_center and self._center is not None:
            raise ValueError(
                f"Only one center body is allowed; '{self.bodies[self._center].name}' is already the center."
            )

        idx = len(self.bodies)
        self.bodies.append(body)
        self._index[body.name] = idx
        self._parents.append(self._index.get(body.parent) if body.parent is not None else None)
        if body.is_center:
            self._center = idx

        # Link satellites registered before their parent
        for i, other in enumerate(self.bodies[:-1]):
            if other.parent == body.name:
                self._parents[i] = idx

        return idx

    def index_of(self, name: str) -> Optional[int]:
        return self._index.get(name)

    def get(self, name: str) -> Optional[CelestialBodyProperties]:
        idx = self._index.get(name)
        return self.bodies[idx] if idx is not None else None

    def parent_index(self, idx: int) -> Optional[int]:
        return self._parents[idx]

    @property
    def center_index(self) -> Optional[int]:
        return self._center

    @property
    def center(self) -> Optional[CelestialBodyProperties]:
        return self.bodies[self._center] if self._center is not None else None

    def satellite_indices(self) -> List[int]:
        """Indices of bodies declaring a parent, resolved or not."""
        return [i for i, body in enumerate(self.bodies) if body.is_satellite]

    def satellites_parent_first(self) -> List[int]:
        """
        Satellite indices ordered by nesting depth, so a satellite's parent
        (when itself a satellite) always comes before it. Ties keep
        registration order.
        """
        def depth(idx: int) -> int:
            d = 0
            seen = {idx}
            parent = self._parents[idx]
            while parent is not None and parent not in seen:
                seen.add(parent)
                d += 1
                parent = self._parents[parent]
            return d

        return sorted(self.satellite_indices(), key=depth)

    def masses(self) -> Tuple[float, ...]:
        return tuple(body.mass_kg for body in self.bodies)

    def names(self) -> List[str]:
        return [body.name for body in self.bodies]

    def __len__(self) -> int:
        return len(self.bodies)

    def __iter__(self) -> Iterator[CelestialBodyProperties]:
        return iter(self.bodies)

    def __contains__(self, name: object) -> bool:
        return name in self._index
