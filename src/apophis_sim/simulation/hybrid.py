"""
Second phase of a hybrid step: satellites back onto Keplerian rails.

Integrating a moon directly at planetary step sizes is badly under-resolved
(its parent's pull changes on a much shorter timescale than the step), so
after the integrator has produced provisional states for everything, each
satellite is overwritten with an analytic two-body state around its
parent's freshly updated state.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Set

from apophis_sim.core.state import StateVector
from apophis_sim.physics.orbit import OrbitalElements, elements_to_state
from apophis_sim.simulation.scenario import BodyRegistry

logger = logging.getLogger(__name__)


def apply_satellite_overrides(
    states: Sequence[StateVector],
    registry: BodyRegistry,
    seconds_since_epoch: Callable[[OrbitalElements], float],
    warned: Optional[Set[str]] = None,
) -> List[StateVector]:
    """
    Return a new state list in which every satellite's entry is replaced by
    its analytic state relative to its parent.

    Satellites are handled parent first, so a satellite of a satellite is
    placed around its parent's overridden state whatever the registration
    order.
    A satellite whose parent is not registered keeps its provisional state;
    the tick is not failed. `warned` collects names already reported so the
    warning is emitted once per body.
    """
    out = list(states)

    for idx in registry.satellites_parent_first():
        body = registry.bodies[idx]
        parent_idx = registry.parent_index(idx)

        if body.elements is None or parent_idx is None:
            if warned is None or body.name not in warned:
                reason = "no orbital elements" if body.elements is None else f"parent '{body.parent}' not registered"
                logger.warning("Skipping satellite override for '%s': %s", body.name, reason)
                if warned is not None:
                    warned.add(body.name)
            continue

        parent = registry.bodies[parent_idx]
        out[idx] = elements_to_state(
            body.elements,
            parent.mass_kg,
            seconds_since_epoch(body.elements),
            parent_state=out[parent_idx],
        )

    return out
