from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from apophis_sim.core.constants import SECONDS_PER_DAY
from apophis_sim.physics.diagnostics import relative_drift
from apophis_sim.simulation.engine import SimulationLog
from apophis_sim.simulation.simulator import NBodySimulator

logger = logging.getLogger(__name__)


@dataclass
class EnergyMonitorSystem:
    """
    Records total mechanical energy every tick and warns once when the
    relative drift from the first sample exceeds `warn_drift`.

    Satellite overrides and a non-integrated center both inject or remove
    energy by construction, so drift is only a clean integrator metric for
    pure N-body setups.
    """
    name: str = "energy_monitor"
    warn_drift: float = 1e-3
    _initial: Optional[float] = field(default=None, init=False, repr=False)
    _warned: bool = field(default=False, init=False, repr=False)

    def on_step(self, t_s: float, simulator: NBodySimulator, log: SimulationLog) -> None:
        energy = simulator.total_energy()
        log.record_energy(t_s, energy)

        if self._initial is None:
            self._initial = energy
            return

        drift = relative_drift(self._initial, energy)
        if drift > self.warn_drift and not self._warned:
            self._warned = True
            log.record_event("energy_drift", t_s, drift=drift)
            logger.warning(
                "Energy drift %.3e exceeds %.1e after %.1f days (%s)",
                drift, self.warn_drift, t_s / SECONDS_PER_DAY, simulator.config.integration_method.value,
            )
