from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Set

from apophis_sim.core.constants import SECONDS_PER_DAY
from apophis_sim.core.epoch import now_julian
from apophis_sim.core.frames import Vector3
from apophis_sim.core.propagator import get_integrator
from apophis_sim.core.state import StateVector
from apophis_sim.objects.body import CelestialBodyProperties
from apophis_sim.physics.diagnostics import total_energy
from apophis_sim.physics.gravity import GravitySources
from apophis_sim.physics.orbit import OrbitalElements, elements_to_state, orbit_polyline
from apophis_sim.simulation.config import SimulationConfig
from apophis_sim.simulation.hybrid import apply_satellite_overrides
from apophis_sim.simulation.scenario import BodyRegistry

logger = logging.getLogger(__name__)


class NBodySimulator:
    """
    Owns the body registry, the current states and the clock, and runs one
    tick at a time:

        integrate all bodies jointly -> put satellites back on their
        Keplerian rails -> advance the clock

    Time is tracked as the epoch of the last reset (Julian date) plus
    seconds elapsed since then. Orbital elements without their own epoch
    are referenced to the simulator's construction epoch.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, epoch_jd: Optional[float] = None):
        self._config = config if config is not None else SimulationConfig()
        self._integrator = get_integrator(self._config.integration_method)
        self.registry = BodyRegistry()

        self._states: List[StateVector] = []
        self._supplied: List[Optional[StateVector]] = []
        self._sources: Optional[GravitySources] = None
        self._override_warned: Set[str] = set()

        self._reference_epoch_jd = now_julian() if epoch_jd is None else float(epoch_jd)
        self._epoch_jd = self._reference_epoch_jd
        self._elapsed_s = 0.0

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_body(self, body: CelestialBodyProperties, initial_state: Optional[StateVector] = None) -> None:
        """
        Register a body. Its state is, in order of preference: the supplied
        initial_state; the origin at rest for the center; the state derived
        from its elements (relative to its parent for satellites, to the
        center otherwise).
        """
        if body.name in self.registry:
            raise ValueError(f"Duplicate body name: {body.name}")

        state = initial_state if initial_state is not None else self._derive_state(body, self._elapsed_s)
        if state is None:
            raise ValueError(
                f"Body '{body.name}' has no derivable state: supply an initial state, "
                "or orbital elements plus a registered center (or parent)."
            )

        self.registry.add(body)
        self._states.append(state)
        self._supplied.append(initial_state)
        self._sources = None

        logger.info("Added body '%s' (%s)", body.name, self._describe(body))
        self._rederive_satellites_of(body.name)

    def _rederive_satellites_of(self, name: str, seen: Optional[Set[str]] = None) -> None:
        """
        Move satellites registered before their parent `name` (and their own
        satellites) onto orbits around it. Supplied states are left alone.
        """
        seen = set() if seen is None else seen
        seen.add(name)
        for idx, sat in enumerate(self.registry):
            if sat.parent != name or sat.name in seen or sat.elements is None or self._supplied[idx] is not None:
                continue
            state = self._derive_state(sat, self._elapsed_s)
            if state is None:
                continue
            self._states[idx] = state
            logger.info("Re-derived '%s' around late-registered parent '%s'", sat.name, name)
            self._rederive_satellites_of(sat.name, seen)

    def _describe(self, body: CelestialBodyProperties) -> str:
        if body.is_center:
            return "center"
        if body.is_satellite:
            return f"satellite of {body.parent}"
        return "n-body" if body.elements is not None else "state supplied"

    def _seconds_since(self, elements: OrbitalElements, elapsed_s: float) -> float:
        ref_jd = elements.epoch_jd if elements.epoch_jd is not None else self._reference_epoch_jd
        return (self._epoch_jd - ref_jd) * SECONDS_PER_DAY + elapsed_s

    def _state_of(self, name: Optional[str]) -> Optional[StateVector]:
        if name is None:
            return None
        idx = self.registry.index_of(name)
        if idx is None or idx >= len(self._states):
            return None
        return self._states[idx]

    def _derive_state(self, body: CelestialBodyProperties, elapsed_s: float) -> Optional[StateVector]:
        if body.is_center:
            return StateVector.zero()
        if body.elements is None:
            return None

        t = self._seconds_since(body.elements, elapsed_s)

        if body.parent is not None:
            parent = self.registry.get(body.parent)
            parent_state = self._state_of(body.parent)
            if parent is not None and parent_state is not None:
                return elements_to_state(body.elements, parent.mass_kg, t, parent_state)
            logger.warning(
                "Parent '%s' of '%s' has no state yet; deriving its state around the center instead",
                body.parent, body.name,
            )

        center = self.registry.center
        if center is None:
            return None
        return elements_to_state(body.elements, center.mass_kg, t, self._state_of(center.name))

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _gravity_sources(self) -> GravitySources:
        if self._sources is None:
            self._sources = GravitySources(
                masses=self.registry.masses(),
                center_index=self.registry.center_index,
                perturbations=self._config.enable_perturbations,
                integrate_center=self._config.integrate_center,
            )
        return self._sources

    def step(self) -> None:
        """
        Advance every body by one signed step of config.dt_s.
        """
        dt = self._config.dt_s
        elapsed_next = self._elapsed_s + dt

        if self._states:
            provisional = self._integrator.advance(self._states, self._gravity_sources(), dt)
            self._states = apply_satellite_overrides(
                provisional,
                self.registry,
                lambda elements: self._seconds_since(elements, elapsed_next),
                warned=self._override_warned,
            )

        self._elapsed_s = elapsed_next
        logger.debug("Stepped %s dt=%.1fs -> JD %.6f", self._config.integration_method.value, dt, self.current_epoch_jd)

    def step_many(self, n_steps: int) -> None:
        for _ in range(n_steps):
            self.step()

    def update_config(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> SimulationConfig:
        """Merge the given fields into the current config."""
        new_config = self._config.merged(changes, **kwargs)
        if new_config.integration_method != self._config.integration_method:
            self._integrator = get_integrator(new_config.integration_method)
        self._config = new_config
        self._sources = None
        logger.info("Config updated: %s", new_config)
        return new_config

    def reset(self, epoch_jd: Optional[float] = None) -> None:
        """
        Recompute every state at the target epoch (default: the reference
        epoch), discarding accumulated integration drift. Bodies without
        elements get their supplied initial state back.
        """
        self._epoch_jd = self._reference_epoch_jd if epoch_jd is None else float(epoch_jd)
        self._elapsed_s = 0.0

        self._states = list(self._states)

        # Center, then primaries, then satellites: each hangs off a new state
        center_idx = self.registry.center_index
        order = [] if center_idx is None else [center_idx]
        order += [i for i, b in enumerate(self.registry) if not b.is_satellite and i != center_idx]
        order += self.registry.satellites_parent_first()

        for idx in order:
            body = self.registry.bodies[idx]
            supplied = self._supplied[idx]
            state = None
            if body.elements is not None and not body.is_center:
                state = self._derive_state(body, 0.0)
            if state is None:
                state = supplied
            if state is None and body.is_center:
                state = StateVector.zero()
            if state is not None:
                self._states[idx] = state

        self._override_warned.clear()
        logger.info("Reset %d bodies to JD %.6f", len(self._states), self._epoch_jd)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def elapsed_s(self) -> float:
        """Seconds simulated since the last reset."""
        return self._elapsed_s

    @property
    def reference_epoch_jd(self) -> float:
        return self._reference_epoch_jd

    @property
    def current_epoch_jd(self) -> float:
        return self._epoch_jd + self._elapsed_s / SECONDS_PER_DAY

    def get_current_epoch(self) -> float:
        """Current simulation time as a Julian date."""
        return self.current_epoch_jd

    def body_names(self) -> List[str]:
        return self.registry.names()

    def get_state(self, name: str) -> Optional[StateVector]:
        return self._state_of(name)

    def get_all_states(self) -> Dict[str, StateVector]:
        """Snapshot of every state keyed by name, in registration order."""
        return dict(zip(self.registry.names(), self._states))

    def distance_between(self, name_a: str, name_b: str) -> Optional[float]:
        a = self._state_of(name_a)
        b = self._state_of(name_b)
        if a is None or b is None:
            return None
        return a.distance_to(b)

    def total_energy(self) -> float:
        return total_energy(self._states, self.registry.masses())

    def orbit_path(self, name: str, samples: int = 360) -> Optional[List[Vector3]]:
        """
        One revolution of the body's osculating-at-epoch orbit as a
        polyline, drawn around where its parent (or the center) is now.
        """
        body = self.registry.get(name)
        if body is None or body.elements is None:
            return None

        central = self.registry.get(body.parent) if body.parent is not None else None
        if central is None:
            central = self.registry.center
        if central is None:
            return None

        return orbit_polyline(body.elements, central.mass_kg, samples, self._state_of(central.name))
