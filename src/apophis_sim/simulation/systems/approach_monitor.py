from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from apophis_sim.core.constants import m_to_au
from apophis_sim.core.epoch import julian_to_datetime
from apophis_sim.simulation.engine import SimulationLog
from apophis_sim.simulation.simulator import NBodySimulator

logger = logging.getLogger(__name__)


@dataclass
class CloseApproachSystem:
    """
    Tracks the distance between two bodies each tick and emits a
    "closest_approach" event whenever the distance stops shrinking
    (the sample before that is a local minimum).
    """
    body_a: str
    body_b: str
    name: str = "close_approach"
    _prev: Optional[float] = field(default=None, init=False, repr=False)
    _prev_t: float = field(default=0.0, init=False, repr=False)
    _prev_jd: float = field(default=0.0, init=False, repr=False)
    _closing: bool = field(default=False, init=False, repr=False)

    def on_step(self, t_s: float, simulator: NBodySimulator, log: SimulationLog) -> None:
        d = simulator.distance_between(self.body_a, self.body_b)
        if d is None:
            return

        log.record_distance(self.body_a, self.body_b, t_s, d)

        if self._prev is not None:
            if d < self._prev:
                self._closing = True
            elif self._closing:
                self._closing = False
                log.record_event(
                    "closest_approach",
                    self._prev_t,
                    bodies=[self.body_a, self.body_b],
                    distance_m=self._prev,
                    epoch_jd=self._prev_jd,
                )
                logger.info(
                    "Closest approach %s-%s: %.6f AU on %s",
                    self.body_a, self.body_b, m_to_au(self._prev),
                    julian_to_datetime(self._prev_jd).strftime("%Y-%m-%d %H:%M"),
                )

        self._prev = d
        self._prev_t = t_s
        self._prev_jd = simulator.current_epoch_jd
