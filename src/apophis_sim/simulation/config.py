from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from apophis_sim.core.propagator import IntegrationMethod


@dataclass(frozen=True)
class SimulationConfig:
    """
    Per-step settings. Never mutated: update by building a merged copy.

    time_step_s: base step in seconds (> 0)
    time_scale: multiplier on the step; negative runs the simulation backward
    integration_method: euler | verlet | rk4
    enable_perturbations: full N-body coupling when True, center-only
        two-body forces when False
    integrate_center: let the center body be accelerated by the others
        (only meaningful with perturbations on)
    """
    time_step_s: float = 3600.0
    time_scale: float = 1.0
    integration_method: IntegrationMethod = IntegrationMethod.RK4
    enable_perturbations: bool = True
    integrate_center: bool = False

    def __post_init__(self):
        if not math.isfinite(self.time_step_s) or self.time_step_s <= 0:
            raise ValueError(f"time_step_s must be positive and finite. Got: {self.time_step_s}")
        if not math.isfinite(self.time_scale) or self.time_scale == 0:
            raise ValueError(f"time_scale must be non-zero and finite. Got: {self.time_scale}")
        if not isinstance(self.integration_method, IntegrationMethod):
            try:
                method = IntegrationMethod(str(self.integration_method).lower())
            except ValueError:
                choices = ", ".join(m.value for m in IntegrationMethod)
                raise ValueError(
                    f"Unknown integration method {self.integration_method!r}; expected one of: {choices}"
                ) from None
            object.__setattr__(self, "integration_method", method)

    @property
    def dt_s(self) -> float:
        """Signed step actually taken per tick."""
        return self.time_step_s * self.time_scale

    def merged(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "SimulationConfig":
        updates = dict(changes or {})
        updates.update(kwargs)
        known = {f.name for f in fields(self)}
        unknown = sorted(set(updates) - known)
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")
        return replace(self, **updates)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimulationConfig":
        return cls().merged(data)
