"""
Tests for simulation systems (state recorder, close approach, energy).
"""
import logging

import pytest

from apophis_sim.core.constants import AU_M
from apophis_sim.core.state import StateVector
from apophis_sim.objects.catalog import EARTH, MOON, SUN
from apophis_sim.simulation.config import SimulationConfig
from apophis_sim.simulation.engine import Engine, SimulationLog
from apophis_sim.simulation.simulator import NBodySimulator
from apophis_sim.simulation.systems.approach_monitor import CloseApproachSystem
from apophis_sim.simulation.systems.energy_monitor import EnergyMonitorSystem
from apophis_sim.simulation.systems.state_recorder import StateRecorderSystem


def make_sim(**config):
    sim = NBodySimulator(SimulationConfig(**config), epoch_jd=2460000.5)
    for body in (SUN, EARTH, MOON):
        sim.add_body(body)
    return sim


class ScriptedDistances:
    """Minimal simulator stand-in feeding a fixed distance series."""

    def __init__(self, distances):
        self.distances = list(distances)
        self.tick = 0
        self.current_epoch_jd = 2460000.5

    def distance_between(self, a, b):
        return self.distances[self.tick]

    def advance(self):
        self.tick += 1
        self.current_epoch_jd += 1.0


class TestStateRecorderSystem:
    def test_system_creation(self):
        system = StateRecorderSystem()
        assert system.name == "state_recorder"
        assert system.every == 1

    def test_records_all_bodies(self):
        sim = make_sim()
        log = SimulationLog()
        system = StateRecorderSystem()

        system.on_step(0.0, sim, log)
        sim.step()
        system.on_step(sim.elapsed_s, sim, log)

        assert set(log.body_positions_m) == {"Sun", "Earth", "Moon"}
        (t0, r0), (t1, r1) = log.body_positions_m["Earth"]
        assert t0 == 0.0
        assert t1 == 3600.0
        assert r0 != r1

    def test_records_selected_bodies(self):
        sim = make_sim()
        log = SimulationLog()
        StateRecorderSystem(bodies=["Moon", "Pluto"]).on_step(0.0, sim, log)
        assert list(log.body_positions_m) == ["Moon"]

    def test_every_thins_samples(self):
        log = Engine(systems=[StateRecorderSystem(every=4)]).run(make_sim(), n_steps=10)
        times = [t for t, _ in log.body_positions_m["Earth"]]
        assert times == [0.0, 4 * 3600.0, 8 * 3600.0]

    def test_every_validated(self):
        with pytest.raises(ValueError, match="every must be >= 1"):
            StateRecorderSystem(every=0)


class TestCloseApproachSystem:
    def run_series(self, distances):
        sim = ScriptedDistances(distances)
        log = SimulationLog()
        system = CloseApproachSystem("A", "B")
        for i in range(len(distances)):
            system.on_step(float(i), sim, log)
            if i < len(distances) - 1:
                sim.advance()
        return log

    def test_records_distances(self):
        log = self.run_series([5.0 * AU_M, 4.0 * AU_M])
        assert log.distances_m[("A", "B")] == [(0.0, 5.0 * AU_M), (1.0, 4.0 * AU_M)]

    def test_detects_local_minimum(self):
        log = self.run_series([5.0, 4.0, 3.0, 3.5, 4.0, 2.0, 1.0, 1.5])
        events = [e for e in log.events if e["kind"] == "closest_approach"]

        assert [e["t_s"] for e in events] == [2.0, 6.0]
        assert [e["distance_m"] for e in events] == [3.0, 1.0]
        assert events[0]["bodies"] == ["A", "B"]
        assert events[0]["epoch_jd"] == 2460002.5

    def test_no_event_while_receding(self):
        log = self.run_series([1.0, 2.0, 3.0])
        assert log.events == []

    def test_no_event_at_end_of_series(self):
        # Still closing when the run stops
        log = self.run_series([3.0, 2.0, 1.0])
        assert log.events == []

    def test_missing_body_ignored(self):
        sim = make_sim()
        log = SimulationLog()
        CloseApproachSystem("Earth", "Pluto").on_step(0.0, sim, log)
        assert log.distances_m == {}

    def test_against_simulator(self):
        sim = make_sim(time_step_s=6 * 3600.0)
        log = Engine(systems=[CloseApproachSystem("Moon", "Earth")]).run(sim, n_steps=4 * 60)
        samples = log.distances_m[("Moon", "Earth")]
        assert len(samples) == 241
        # Two months of lunar orbit: at least one perigee
        assert any(e["kind"] == "closest_approach" for e in log.events)


class TestEnergyMonitorSystem:
    def test_records_energy(self):
        sim = make_sim()
        log = Engine(systems=[EnergyMonitorSystem()]).run(sim, n_steps=3)
        assert len(log.energy_j) == 4
        assert all(e < 0.0 for _, e in log.energy_j)

    def test_drift_warning_emitted_once(self, caplog):
        sim = NBodySimulator(SimulationConfig(time_step_s=86400.0, integration_method="euler"), epoch_jd=2460000.5)
        sim.add_body(SUN)
        sim.add_body(EARTH, initial_state=StateVector((AU_M, 0.0, 0.0), (0.0, 29780.0, 0.0)))

        with caplog.at_level(logging.WARNING, logger="apophis_sim"):
            log = Engine(systems=[EnergyMonitorSystem(warn_drift=1e-3)]).run(sim, n_steps=100)

        drift_events = [e for e in log.events if e["kind"] == "energy_drift"]
        assert len(drift_events) == 1
        assert drift_events[0]["drift"] > 1e-3
        assert sum("Energy drift" in r.getMessage() for r in caplog.records) == 1
