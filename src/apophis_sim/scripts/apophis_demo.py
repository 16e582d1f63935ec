import logging
from datetime import datetime, timezone

from apophis_sim.core.constants import SECONDS_PER_DAY, m_to_au
from apophis_sim.core.epoch import datetime_to_julian
from apophis_sim.objects.catalog import APOPHIS, EARTH, inner_solar_system
from apophis_sim.simulation.config import SimulationConfig
from apophis_sim.simulation.engine import Engine
from apophis_sim.simulation.simulator import NBodySimulator
from apophis_sim.simulation.systems.approach_monitor import CloseApproachSystem
from apophis_sim.simulation.systems.energy_monitor import EnergyMonitorSystem
from apophis_sim.simulation.systems.state_recorder import StateRecorderSystem
from apophis_sim.visualization.export_log import export_log_to_json
from apophis_sim.visualization.plotly_viewer import render_distance_plot, render_static_scene

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")

DAYS = 365
STEP_S = 3600.0

start_jd = datetime_to_julian(datetime(2029, 1, 1, tzinfo=timezone.utc))
config = SimulationConfig(time_step_s=STEP_S, time_scale=1.0, integration_method="rk4", enable_perturbations=True)
sim = NBodySimulator(config, epoch_jd=start_jd)

for body in inner_solar_system():
    sim.add_body(body)

engine = Engine(systems=[
    StateRecorderSystem(every=24),
    CloseApproachSystem(APOPHIS.name, EARTH.name),
    EnergyMonitorSystem(),
])
log = engine.run(sim, n_steps=int(DAYS * SECONDS_PER_DAY / STEP_S))

orbit_paths = {}
for name in sim.body_names():
    path = sim.orbit_path(name)
    if path is not None:
        orbit_paths[name] = path

scene_path = render_static_scene(log, out_html="out/apophis_scene.html", orbit_paths=orbit_paths)
distance_path = render_distance_plot(log, APOPHIS.name, EARTH.name, out_html="out/apophis_earth_distance.html")
json_path = export_log_to_json(log, out_path="out/apophis_log.json")

approaches = [e for e in log.events if e["kind"] == "closest_approach"]
print(f"Simulated {DAYS} days, {len(approaches)} local Earth approaches")
for event in approaches:
    print(f"  day {event['t_s'] / SECONDS_PER_DAY:7.1f}: {m_to_au(event['distance_m']):.5f} AU")

print("Wrote:")
print(" -", scene_path)
print(" -", distance_path)
print(" -", json_path)
