from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from apophis_sim.core.constants import m_to_au
from apophis_sim.simulation.engine import SimulationLog


def export_log_to_json(log: SimulationLog, out_path: str = "out/simlog.json") -> str:
    """
    Export playback data with positions and distances in AU:
      {
        "units": {"time": "s", "length": "AU", "energy": "J"},
        "body_positions_au": {
          "Earth": [{"t":0.0,"r":[x,y,z]}, ...],
          ...
        },
        "distances_au": {"99942 Apophis|Earth": [{"t":0.0,"d":0.8}, ...]},
        "energy_j": [{"t":0.0,"e":-2.6e33}, ...],
        "events": [...]
      }
    """
    data: Dict[str, Any] = {
        "units": {"time": "s", "length": "AU", "energy": "J"},
        "body_positions_au": {},
        "distances_au": {},
        "energy_j": [{"t": t, "e": e} for (t, e) in log.energy_j],
        "events": [],
    }

    for name, samples in log.body_positions_m.items():
        data["body_positions_au"][name] = [
            {"t": t, "r": [m_to_au(r[0]), m_to_au(r[1]), m_to_au(r[2])]} for (t, r) in samples
        ]

    for (name_a, name_b), samples in log.distances_m.items():
        data["distances_au"][f"{name_a}|{name_b}"] = [{"t": t, "d": m_to_au(d)} for (t, d) in samples]

    for event in log.events:
        event = dict(event)
        if "distance_m" in event:
            event["distance_au"] = m_to_au(event.pop("distance_m"))
        data["events"].append(event)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f)

    return out_path
