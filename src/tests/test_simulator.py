"""
===============================================================================
GRAVMATH - Simulator Test Suite
===============================================================================
Tests for the fixed-step three-body integrator: force asymmetry, running
minima, energy drift on a circular orbit, and body ownership.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from gravmath.core.constants import JUPITER_MASS, JUPITER_RADIUS
from gravmath.core.vector import Vector3
from gravmath.dynamics.body import Body
from gravmath.simulation.simulator import Simulator

ORBIT_RADIUS = 1.0e8
COMET_DISTANCE = 1.0e13


# =============================================================================
# Fixtures
# =============================================================================

def make_bodies(satellite_mass=1000.0):
    """Jupiter at the origin, a satellite on a circular orbit, a distant comet."""
    jupiter = Body(JUPITER_MASS, JUPITER_RADIUS, name="jupiter")
    sat = Body(satellite_mass, 3.0, name="satellite")
    comet = Body(1.0e10, 1.0e5, name="comet")

    v_circ = math.sqrt(jupiter.mu / ORBIT_RADIUS)
    sat.place(Vector3(ORBIT_RADIUS, 0.0, 0.0), Vector3(0.0, v_circ, 0.0))
    comet.place(Vector3(COMET_DISTANCE, 0.0, 0.0), Vector3(0.0, 100.0, 0.0))
    return jupiter, sat, comet


@pytest.fixture
def simulator():
    return Simulator(*make_bodies(), dt=0.05)


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:

    @pytest.mark.parametrize("dt", [0.0, -0.05, math.inf, math.nan])
    def test_rejects_bad_timestep(self, dt):
        with pytest.raises(ValueError):
            Simulator(*make_bodies(), dt=dt)

    def test_takes_ownership_and_sets_timestep(self, simulator):
        for body in (simulator.primary, simulator.secondary_a, simulator.secondary_b):
            assert body.is_owned
        assert simulator.secondary_a.timestep_over_mass == 0.05 / 1000.0
        with pytest.raises(RuntimeError):
            simulator.secondary_a.place(Vector3.ZERO, Vector3.ZERO)

    def test_minima_start_unbounded(self, simulator):
        assert simulator.get_min_altitude() == math.inf
        assert simulator.get_min_distance() == math.inf
        assert simulator.get_energy_drift() == 0.0
        assert simulator.steps_taken == 0

    def test_start_energy_is_doubled_specific_energy(self, simulator):
        mu = simulator.primary.mu
        assert_allclose(simulator.start_specific_energy, -mu / ORBIT_RADIUS, rtol=1e-12)


# =============================================================================
# Stepping
# =============================================================================

class TestStep:

    def test_first_step_records_initial_distances(self, simulator):
        simulator.step()
        assert simulator.get_min_altitude() == ORBIT_RADIUS
        assert simulator.get_min_distance() == COMET_DISTANCE - ORBIT_RADIUS
        assert simulator.steps_taken == 1
        assert_allclose(simulator.elapsed_time, 0.05)

    def test_minima_never_increase(self, simulator):
        altitudes = []
        distances = []
        for _ in range(500):
            simulator.step()
            altitudes.append(simulator.get_min_altitude())
            distances.append(simulator.get_min_distance())
        assert np.all(np.diff(altitudes) <= 0.0)
        assert np.all(np.diff(distances) <= 0.0)

    def test_primary_is_fixed(self, simulator):
        for _ in range(100):
            simulator.step()
        assert simulator.primary.position == Vector3.ZERO
        assert simulator.primary.velocity == Vector3.ZERO

    def test_forces_reset_after_step(self, simulator):
        simulator.step()
        for body in (simulator.primary, simulator.secondary_a, simulator.secondary_b):
            assert body.accumulated_force == Vector3.ZERO

    def test_satellite_moves_along_velocity(self, simulator):
        simulator.step()
        sat = simulator.secondary_a
        assert sat.position.y > 0.0
        assert sat.velocity.x < 0.0

    def test_semi_implicit_update(self):
        """Velocity is updated first, then position with the new velocity."""
        jupiter, sat, comet = make_bodies()
        sim = Simulator(jupiter, sat, comet, dt=0.05)
        v0 = sat.velocity
        p0 = sat.position

        sim.step()

        dv = sat.velocity - v0
        assert_allclose(dv.x, -jupiter.mu / ORBIT_RADIUS ** 2 * 0.05, rtol=1e-9)
        assert_allclose((sat.position - p0).to_array(), (sat.velocity * 0.05).to_array(),
                        rtol=1e-9, atol=1e-7)

    def test_comet_does_not_feel_satellite(self):
        """The comet trajectory is identical whatever the satellite's mass."""
        sim_light = Simulator(*make_bodies(satellite_mass=1.0), dt=0.05)
        sim_heavy = Simulator(*make_bodies(satellite_mass=1.0e25), dt=0.05)
        for _ in range(200):
            sim_light.step()
            sim_heavy.step()
        assert sim_light.secondary_b.position == sim_heavy.secondary_b.position
        assert sim_light.secondary_b.velocity == sim_heavy.secondary_b.velocity


# =============================================================================
# Energy drift
# =============================================================================

class TestEnergyDrift:

    def test_circular_orbit_drift_is_small(self, simulator):
        e0 = simulator.start_specific_energy
        for _ in range(10000):
            simulator.step()
        assert abs(simulator.get_energy_drift()) < 1e-3 * abs(e0)
        assert_allclose(simulator.elapsed_time, 500.0)

    def test_radius_stays_near_circular(self, simulator):
        for _ in range(2000):
            simulator.step()
        r = simulator.secondary_a.position.distance_to(simulator.primary.position)
        assert_allclose(r, ORBIT_RADIUS, rtol=1e-3)


# =============================================================================
# Coincident bodies
# =============================================================================

class TestCoincidentBodies:

    def test_unplaced_bodies_construct_and_step(self):
        """Bodies left at the origin exert no force on each other."""
        jupiter = Body(JUPITER_MASS, JUPITER_RADIUS, name="jupiter")
        sat = Body(1000.0, 3.0, name="satellite")
        comet = Body(1.0e10, 1.0e5, name="comet")
        sim = Simulator(jupiter, sat, comet, dt=0.05)
        assert sim.start_specific_energy == -math.inf

        sim.step()

        assert sim.get_min_altitude() == 0.0
        assert sim.get_min_distance() == 0.0
        assert sat.position == Vector3.ZERO
        assert sat.velocity == Vector3.ZERO
        assert comet.position == Vector3.ZERO

    def test_satellite_on_comet(self):
        jupiter = Body(JUPITER_MASS, JUPITER_RADIUS, name="jupiter")
        sat = Body(1000.0, 3.0, name="satellite")
        comet = Body(1.0e10, 1.0e5, name="comet")
        sat.place(Vector3(ORBIT_RADIUS, 0.0, 0.0), Vector3.ZERO)
        comet.place(Vector3(ORBIT_RADIUS, 0.0, 0.0), Vector3.ZERO)
        sim = Simulator(jupiter, sat, comet, dt=0.05)

        sim.step()

        assert sim.get_min_distance() == 0.0
        assert sim.get_min_altitude() == ORBIT_RADIUS
        assert sat.position.is_finite()
        assert sat.velocity.is_finite()
        # Only the primary pulls the satellite when it sits on the comet
        assert_allclose(sat.velocity.x, -jupiter.mu / ORBIT_RADIUS ** 2 * 0.05, rtol=1e-12)
        assert_allclose(sat.velocity.x, comet.velocity.x, rtol=1e-12)
