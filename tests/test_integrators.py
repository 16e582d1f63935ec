"""
Tests for the fixed-step N-body integrators.
"""
import pytest

from apophis_sim.core.constants import AU_M, SUN_MASS_KG, EARTH_MASS_KG
from apophis_sim.core.frames import norm, sub
from apophis_sim.core.propagator import (
    EulerIntegrator,
    IntegrationMethod,
    RK4Integrator,
    VerletIntegrator,
    get_integrator,
)
from apophis_sim.core.state import StateVector
from apophis_sim.objects.catalog import EARTH, JUPITER
from apophis_sim.physics.diagnostics import relative_drift, total_energy, total_momentum
from apophis_sim.physics.gravity import GravitySources
from apophis_sim.physics.orbit import elements_to_state

DT = 3600.0


def sun_earth():
    states = [StateVector.zero(), elements_to_state(EARTH.elements, SUN_MASS_KG, 0.0)]
    sources = GravitySources(masses=(SUN_MASS_KG, EARTH_MASS_KG), center_index=0, perturbations=False)
    return states, sources


def sun_earth_jupiter():
    states = [
        StateVector.zero(),
        elements_to_state(EARTH.elements, SUN_MASS_KG, 0.0),
        elements_to_state(JUPITER.elements, SUN_MASS_KG, 0.0),
    ]
    sources = GravitySources(
        masses=(SUN_MASS_KG, EARTH_MASS_KG, JUPITER.mass_kg),
        center_index=0,
        perturbations=True,
        integrate_center=True,
    )
    return states, sources


def run(integrator, states, sources, dt, n):
    for _ in range(n):
        states = integrator.advance(states, sources, dt)
    return states


def energy_drift(integrator, n_steps):
    states, sources = sun_earth()
    e0 = total_energy(states, sources.masses)
    states = run(integrator, states, sources, DT, n_steps)
    return relative_drift(e0, total_energy(states, sources.masses))


class TestEnergyBehaviour:
    def test_verlet_energy_error_stays_bounded(self):
        drift = energy_drift(VerletIntegrator(), 10_000)
        assert drift < 1e-4

    def test_euler_drifts_more_than_verlet(self):
        verlet = energy_drift(VerletIntegrator(), 10_000)
        euler = energy_drift(EulerIntegrator(), 10_000)
        assert euler > 1e-3
        assert euler > 10.0 * verlet

    def test_rk4_energy_error_small(self):
        drift = energy_drift(RK4Integrator(), 2_000)
        assert drift < 1e-8


class TestTimeReversal:
    def test_rk4_returns_to_start(self):
        start, sources = sun_earth_jupiter()
        integrator = RK4Integrator()

        forward = run(integrator, start, sources, DT, 500)
        back = run(integrator, forward, sources, -DT, 500)

        for s0, s1 in zip(start, back):
            assert norm(sub(s0.position, s1.position)) < 10.0
            assert norm(sub(s0.velocity, s1.velocity)) < 1e-5

    def test_verlet_returns_to_start(self):
        start, sources = sun_earth_jupiter()
        integrator = VerletIntegrator()

        back = run(integrator, run(integrator, start, sources, DT, 300), sources, -DT, 300)

        for s0, s1 in zip(start, back):
            assert norm(sub(s0.position, s1.position)) < 10.0

    def test_euler_returns_approximately(self):
        start, sources = sun_earth()
        integrator = EulerIntegrator()

        back = run(integrator, run(integrator, start, sources, DT, 200), sources, -DT, 200)

        err = norm(sub(start[1].position, back[1].position))
        assert err / AU_M < 1e-3
        # First order: not exactly reversible
        assert err > 1.0


class TestJointEvaluation:
    def two_equal_masses(self):
        m = 1.0e24
        states = [
            StateVector((-1.0e9, 0.0, 0.0), (0.0, -50.0, 0.0)),
            StateVector((1.0e9, 0.0, 0.0), (0.0, 50.0, 0.0)),
        ]
        sources = GravitySources(masses=(m, m), center_index=None, perturbations=True)
        return states, sources

    @pytest.mark.parametrize("integrator", [EulerIntegrator(), VerletIntegrator(), RK4Integrator()])
    def test_symmetric_pair_stays_symmetric(self, integrator):
        # A sequential update would let body 1 see body 0's new position
        states, sources = self.two_equal_masses()
        for _ in range(20):
            states = integrator.advance(states, sources, 600.0)

        a, b = states
        for k in range(3):
            assert a.position[k] == pytest.approx(-b.position[k], abs=1e-3)
            assert a.velocity[k] == pytest.approx(-b.velocity[k], abs=1e-9)

        p = total_momentum(states, sources.masses)
        assert norm(p) < 1e-3 * 1.0e24

    def test_euler_moves_with_pre_update_velocity(self):
        states, sources = self.two_equal_masses()
        out = EulerIntegrator().advance(states, sources, 10.0)

        assert out[0].position == (-1.0e9, -500.0, 0.0)
        assert out[1].position == (1.0e9, 500.0, 0.0)
        # Velocities pick up the pull toward each other
        assert out[0].velocity[0] > 0.0
        assert out[1].velocity[0] < 0.0

    def test_input_states_not_mutated(self):
        states, sources = sun_earth()
        snapshot = list(states)
        RK4Integrator().advance(states, sources, DT)
        assert states == snapshot

    def test_fixed_center_stays_put(self):
        states, sources = sun_earth()
        out = run(VerletIntegrator(), states, sources, DT, 10)
        assert out[0] == StateVector.zero()


class TestGetIntegrator:
    def test_by_enum(self):
        assert isinstance(get_integrator(IntegrationMethod.EULER), EulerIntegrator)
        assert isinstance(get_integrator(IntegrationMethod.VERLET), VerletIntegrator)
        assert isinstance(get_integrator(IntegrationMethod.RK4), RK4Integrator)

    def test_by_value(self):
        assert get_integrator("rk4").method is IntegrationMethod.RK4

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            get_integrator("leapfrog")
