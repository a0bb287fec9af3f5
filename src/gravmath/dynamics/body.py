"""
===============================================================================
GRAVMATH - Body Model
===============================================================================
Point-mass body taking part in the three-body simulation.

A Body carries its immutable physical properties (mass, gravitational
parameter, radius) and its mutable translational state.  The host places the
body on its initial orbit exactly once; after a Simulator takes ownership,
only the Simulator's integration step changes position and velocity.

The ``accumulated_force`` vector is per-step scratch space: the force pass
adds pairwise contributions into it and the integration pass consumes and
resets it.
===============================================================================
"""

import math
from typing import Optional, Sequence, Union

from gravmath.core.constants import GRAVITATIONAL_CONSTANT
from gravmath.core.errors import ParameterOutOfRange
from gravmath.core.vector import Vector3

VectorLike = Union[Vector3, Sequence[float]]


def _as_vector(value: VectorLike) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3.from_array(value)


class Body:
    """
    Point mass with position, velocity and an integration scratch force.

    Parameters
    ----------
    mass : float
        Mass (kg).  Must be strictly positive and finite.
    radius : float
        Physical radius (m).  Must be non-negative.  Only the host uses it;
        the physics treats every body as a point.
    name : str, optional
        Label used in logs and telemetry.

    Attributes
    ----------
    mass : float
        Mass (kg).
    mu : float
        Gravitational parameter G * mass (m^3/s^2).
    radius : float
        Radius (m).
    position : Vector3
        Inertial position (m).
    velocity : Vector3
        Inertial velocity (m/s).
    accumulated_force : Vector3
        Force summed during the current force pass.
    """

    def __init__(self, mass: float, radius: float, name: Optional[str] = None) -> None:
        if not (0.0 < mass < math.inf):
            raise ParameterOutOfRange("mass", mass, 0.0, math.inf)
        if not (0.0 <= radius < math.inf):
            raise ParameterOutOfRange("radius", radius, 0.0, math.inf)

        self._mass = float(mass)
        self._radius = float(radius)
        self._mu = GRAVITATIONAL_CONSTANT * self._mass
        self.name = name or "body"

        self.position = Vector3.ZERO
        self.velocity = Vector3.ZERO
        self.accumulated_force = Vector3.ZERO

        self._timestep_over_mass: Optional[float] = None
        self._owned = False

    # =====================================================================
    # IMMUTABLE PROPERTIES
    # =====================================================================

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def radius(self) -> float:
        return self._radius

    # =====================================================================
    # INTEGRATION SUPPORT
    # =====================================================================

    def set_timestep(self, dt: float) -> None:
        """Cache dt / mass for the integration pass."""
        self._timestep_over_mass = dt / self._mass

    @property
    def timestep_over_mass(self) -> float:
        """
        Cached dt / mass.

        Raises
        ------
        RuntimeError
            If :meth:`set_timestep` has not been called yet.
        """
        if self._timestep_over_mass is None:
            raise RuntimeError(
                f"Body '{self.name}' has no integration timestep; "
                "call set_timestep() before applying forces."
            )
        return self._timestep_over_mass

    def add_force(self, fx: float, fy: float, fz: float) -> None:
        self.accumulated_force = Vector3(
            self.accumulated_force.x + fx,
            self.accumulated_force.y + fy,
            self.accumulated_force.z + fz,
        )

    def reset_force(self) -> None:
        self.accumulated_force = Vector3.ZERO

    # =====================================================================
    # PLACEMENT
    # =====================================================================

    def place(self, position: VectorLike, velocity: VectorLike) -> None:
        """
        Put the body on its initial state.

        Must be called before a Simulator takes ownership of the body.

        Raises
        ------
        RuntimeError
            If a Simulator already owns this body.
        """
        if self._owned:
            raise RuntimeError(
                f"Body '{self.name}' is owned by a simulator and cannot be re-placed."
            )
        self.position = _as_vector(position)
        self.velocity = _as_vector(velocity)

    def take_ownership(self) -> None:
        self._owned = True

    @property
    def is_owned(self) -> bool:
        return self._owned

    def __repr__(self) -> str:
        return (
            f"Body(name={self.name!r}, mass={self._mass:.6g}, radius={self._radius:.6g}, "
            f"position=({self.position.x:.6g}, {self.position.y:.6g}, {self.position.z:.6g}))"
        )
