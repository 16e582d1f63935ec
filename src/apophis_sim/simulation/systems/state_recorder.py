from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from apophis_sim.simulation.engine import SimulationLog
from apophis_sim.simulation.simulator import NBodySimulator


@dataclass
class StateRecorderSystem:
    """
    Records body positions (trails). `bodies` limits recording to the named
    bodies; `every` records one tick in N.
    """
    name: str = "state_recorder"
    bodies: Optional[List[str]] = None
    every: int = 1
    _ticks: int = field(default=0, init=False, repr=False)

    def __post_init__(self):
        if self.every < 1:
            raise ValueError("every must be >= 1.")

    def on_step(self, t_s: float, simulator: NBodySimulator, log: SimulationLog) -> None:
        tick = self._ticks
        self._ticks += 1
        if tick % self.every:
            return

        states = simulator.get_all_states()
        names = self.bodies if self.bodies is not None else list(states)
        for name in names:
            state = states.get(name)
            if state is not None:
                log.record_position(name, t_s, state.position)
