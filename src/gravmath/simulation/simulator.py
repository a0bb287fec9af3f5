"""
===============================================================================
GRAVMATH - Three-Body Simulator
===============================================================================
Fixed-step integrator for a primary, an orbiting satellite and a comet.

Every call to :meth:`Simulator.step` runs one semi-implicit (symplectic)
Euler tick:

    1. FORCE PASS  -- Newtonian attraction is accumulated on the first body
                      of each evaluated pair only:
                          satellite <- primary     (gives the altitude)
                          satellite <- comet       (gives the separation)
                          comet     <- primary
                      The primary never accumulates force.  It is a fixed
                      gravitational anchor, and the comet does not feel the
                      satellite.
    2. DIAGNOSTICS -- Running minima of altitude and separation are updated
                      from the distances of the force pass.
    3. INTEGRATION -- For the satellite and the comet only:
                          v += F * (dt / m)
                          x += v * dt
                      and the accumulated force is reset.

The satellite's doubled specific energy |v|^2 - 2 mu / r relative to the
primary is captured at construction; :meth:`get_energy_drift` reports its
change as an integrator-accuracy diagnostic.

The simulator is single-threaded and owns its bodies: once it is built, no
caller may move them between steps.
===============================================================================
"""

import logging
import math

from gravmath.core.constants import SIMULATION_DT
from gravmath.core.vector import Vector3
from gravmath.dynamics.body import Body
from gravmath.dynamics.orbital_mechanics import doubled_specific_energy

logger = logging.getLogger(__name__)


class Simulator:
    """
    Fixed-step three-body integrator with running diagnostics.

    Parameters
    ----------
    primary : Body
        Central mass.  Never moved.
    secondary_a : Body
        Orbiting satellite.  Attracted by the primary and by secondary_b;
        altitude and energy diagnostics refer to this body.
    secondary_b : Body
        Comet.  Attracted by the primary only.
    dt : float
        Fixed integration step (s).

    Attributes
    ----------
    steps_taken : int
        Number of completed calls to :meth:`step`.
    """

    def __init__(
        self,
        primary: Body,
        secondary_a: Body,
        secondary_b: Body,
        dt: float = SIMULATION_DT,
    ) -> None:
        if not (0.0 < dt < math.inf):
            raise ValueError(f"Integration step must be positive and finite (got dt = {dt}).")

        self._primary = primary
        self._secondary_a = secondary_a
        self._secondary_b = secondary_b
        self._dt = float(dt)

        self._min_distance = math.inf
        self._min_altitude = math.inf
        self.steps_taken = 0

        self._start_specific_energy = self._specific_energy_a()

        for body in (primary, secondary_a, secondary_b):
            body.set_timestep(self._dt)
            body.take_ownership()

        logger.info(
            "Simulator created.  dt=%.3f s  primary=%s  secondary_a=%s  secondary_b=%s",
            self._dt, primary.name, secondary_a.name, secondary_b.name,
        )

    # =========================================================================
    # BODIES
    # =========================================================================

    @property
    def primary(self) -> Body:
        return self._primary

    @property
    def secondary_a(self) -> Body:
        return self._secondary_a

    @property
    def secondary_b(self) -> Body:
        return self._secondary_b

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def elapsed_time(self) -> float:
        """Simulated time since construction (s)."""
        return self.steps_taken * self._dt

    # =========================================================================
    # STEPPING
    # =========================================================================

    def step(self) -> None:
        """Advance the two mobile bodies by one fixed step."""
        sat = self._secondary_a
        comet = self._secondary_b
        primary = self._primary

        altitude = self._accumulate_force(sat, primary)
        if altitude < self._min_altitude:
            self._min_altitude = altitude

        distance = self._accumulate_force(sat, comet)
        if distance < self._min_distance:
            self._min_distance = distance

        self._accumulate_force(comet, primary)

        self._apply_force(sat)
        self._apply_force(comet)

        self.steps_taken += 1

    @staticmethod
    def _accumulate_force(b1: Body, b2: Body) -> float:
        """
        Add the attraction of b2 on b1 into b1's accumulated force.

        Coincident bodies exert no force on each other (the direction is
        undefined); the returned distance is then zero.

        Returns
        -------
        float
            Distance between the two bodies (m).
        """
        p1 = b1.position
        p2 = b2.position
        dx = p2.x - p1.x
        dy = p2.y - p1.y
        dz = p2.z - p1.z
        square_dst = dx * dx + dy * dy + dz * dz
        if square_dst == 0.0:
            return 0.0
        dst = math.sqrt(square_dst)

        f_scalar = b1.mu * b2.mass / (square_dst * dst)
        b1.add_force(f_scalar * dx, f_scalar * dy, f_scalar * dz)
        return dst

    def _apply_force(self, body: Body) -> None:
        dt_mass_ratio = body.timestep_over_mass
        force = body.accumulated_force
        vel = body.velocity
        pos = body.position

        vx = vel.x + force.x * dt_mass_ratio
        vy = vel.y + force.y * dt_mass_ratio
        vz = vel.z + force.z * dt_mass_ratio
        body.velocity = Vector3(vx, vy, vz)
        body.position = Vector3(
            pos.x + vx * self._dt,
            pos.y + vy * self._dt,
            pos.z + vz * self._dt,
        )
        body.reset_force()

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================

    def get_min_altitude(self) -> float:
        """Smallest satellite-to-primary distance seen by any step (m)."""
        return self._min_altitude

    def get_min_distance(self) -> float:
        """Smallest satellite-to-comet distance seen by any step (m)."""
        return self._min_distance

    def get_energy_drift(self) -> float:
        """
        Change of the satellite's doubled specific energy since construction (m^2/s^2).

        NaN when the satellite sat on the primary both at construction and now.
        """
        return self._specific_energy_a() - self._start_specific_energy

    @property
    def start_specific_energy(self) -> float:
        return self._start_specific_energy

    def _specific_energy_a(self) -> float:
        return doubled_specific_energy(
            self._secondary_a.position,
            self._secondary_a.velocity,
            self._primary.position,
            self._primary.mu,
        )

    def __repr__(self) -> str:
        return (
            f"Simulator(t={self.elapsed_time:.2f}s, steps={self.steps_taken}, "
            f"min_altitude={self._min_altitude:.6g}, min_distance={self._min_distance:.6g})"
        )
