from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Tuple

from apophis_sim.core.frames import Vector3
from apophis_sim.simulation.simulator import NBodySimulator


class System(Protocol):
    """
    Plugin interface for simulation systems.
    Each system runs per tick and can write to the log.
    """
    name: str

    def on_step(self, t_s: float, simulator: NBodySimulator, log: "SimulationLog") -> None:
        ...


@dataclass
class SimulationLog:
    """
    Stores outputs from a simulation run.
    The simulator never keeps history; trails live here.
    """
    # Positions: body name -> list of (t, r) with r in meters
    body_positions_m: Dict[str, List[Tuple[float, Vector3]]] = field(default_factory=dict)

    # Distances: (body_a, body_b) -> list of (t, meters)
    distances_m: Dict[Tuple[str, str], List[Tuple[float, float]]] = field(default_factory=dict)

    # Total mechanical energy: list of (t, joules)
    energy_j: List[Tuple[float, float]] = field(default_factory=list)

    # Free-form events
    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_position(self, name: str, t_s: float, r: Vector3) -> None:
        self.body_positions_m.setdefault(name, []).append((t_s, r))

    def record_distance(self, name_a: str, name_b: str, t_s: float, distance_m: float) -> None:
        self.distances_m.setdefault((name_a, name_b), []).append((t_s, distance_m))

    def record_energy(self, t_s: float, energy_j: float) -> None:
        self.energy_j.append((t_s, energy_j))

    def record_event(self, kind: str, t_s: float, **data: Any) -> None:
        self.events.append({"kind": kind, "t_s": t_s, **data})


@dataclass
class Engine:
    """
    Fixed-step run loop around an NBodySimulator.
    Deterministic replay: given same bodies + config + epoch => same output.
    """
    systems: List[System] = field(default_factory=list)

    def run(self, simulator: NBodySimulator, n_steps: int) -> SimulationLog:
        if n_steps < 0:
            raise ValueError("n_steps must be >= 0.")

        log = SimulationLog()

        # Systems see the initial state, then the state after every step
        for sys in self.systems:
            sys.on_step(simulator.elapsed_s, simulator, log)

        for _ in range(n_steps):
            simulator.step()
            for sys in self.systems:
                sys.on_step(simulator.elapsed_s, simulator, log)

        return log
