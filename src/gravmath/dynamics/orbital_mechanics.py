"""
===============================================================================
GRAVMATH - Orbital Mechanics Utilities
===============================================================================
Orbit geometry helpers that complement :class:`KeplerianOrbit`:

    1. **Cartesian -> Keplerian** -- Recover classical elements (including
       the mean anomaly) from a position/velocity pair, for elliptic and
       hyperbolic orbits alike.

    2. **Energy** -- Specific mechanical energy, and the doubled form
       |v|^2 - 2 mu / r that the simulator tracks for its drift diagnostic.

    3. **Orbit scalars** -- Vis-viva speed and orbital period.

All vectors are in SI units (m, m/s) and expressed in the inertial frame
centred on the primary.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 9.
    [2] Bate, Mueller & White, "Fundamentals of Astrodynamics", Dover.
===============================================================================
"""

import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from gravmath.core.constants import TWO_PI
from gravmath.core.vector import Vector3
from gravmath.dynamics import kepler

ArrayLike = Union[np.ndarray, Vector3]


def _as_array(vec: ArrayLike) -> np.ndarray:
    if isinstance(vec, Vector3):
        return vec.to_array()
    return np.asarray(vec, dtype=np.float64)


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical orbital elements recovered from a Cartesian state.

    Attributes
    ----------
    a : float
        Semi-major axis (m).  Negative for hyperbolic orbits.
    e : float
        Eccentricity.
    i : float
        Inclination (rad) in [0, pi].
    pa : float
        Argument of perigee (rad) in [0, 2*pi).
    raan : float
        Longitude of the ascending node (rad) in [0, 2*pi).
    true_anomaly : float
        True anomaly (rad) in [0, 2*pi).
    mean_anomaly : float
        Mean anomaly (rad).  In [-pi, pi) for elliptic orbits.
    """
    a: float
    e: float
    i: float
    pa: float
    raan: float
    true_anomaly: float
    mean_anomaly: float

    @property
    def is_hyperbolic(self) -> bool:
        return self.a < 0.0


# =============================================================================
# CARTESIAN -> KEPLERIAN
# =============================================================================

def cartesian_to_keplerian(
    r_vec: ArrayLike, v_vec: ArrayLike, mu: float
) -> OrbitalElements:
    """
    Convert a Cartesian state to classical Keplerian elements.

    The algorithm computes:
        h = r x v                       (angular momentum)
        n = z_hat x h                   (ascending node vector)
        e_vec = (v x h)/mu - r/|r|      (eccentricity vector)
        a = -mu / (2*E)  where E = v^2/2 - mu/r
        i = arccos(h_z / |h|)
        RAAN = arctan2(n_y, n_x)
        pa = signed angle from n to e_vec
        nu = signed angle from e_vec to r
        M from nu through the eccentric anomaly

    Edge cases:
        - Circular orbit (e ~ 0): pa undefined, set to 0; nu measured
          from the ascending node (or from the x-axis if also equatorial).
        - Equatorial orbit (i ~ 0): RAAN undefined, set to 0; pa measured
          from the x-axis.

    Parameters
    ----------
    r_vec : np.ndarray or Vector3
        Position (m).
    v_vec : np.ndarray or Vector3
        Velocity (m/s).
    mu : float
        Gravitational parameter (m^3/s^2).

    Returns
    -------
    OrbitalElements

    Raises
    ------
    ValueError
        If the state is parabolic or rectilinear (no conic to recover).
    """
    r = _as_array(r_vec)
    v = _as_array(v_vec)

    r_mag = np.linalg.norm(r)
    v_mag = np.linalg.norm(v)

    # Angular momentum
    h = np.cross(r, v)
    h_mag = np.linalg.norm(h)
    if h_mag <= 0.0:
        raise ValueError("Rectilinear state (r parallel to v); elements are undefined.")

    # Node vector (z_hat x h)
    z_hat = np.array([0.0, 0.0, 1.0])
    n = np.cross(z_hat, h)
    n_mag = np.linalg.norm(n)

    # Eccentricity vector
    e_vec = (np.cross(v, h) / mu) - (r / r_mag)
    e = float(np.linalg.norm(e_vec))

    # Specific mechanical energy -> semi-major axis
    energy = specific_energy(r_mag, v_mag, mu)
    if energy == 0.0:
        raise ValueError("Parabolic state (zero specific energy); semi-major axis is undefined.")
    a = -mu / (2.0 * energy)

    # Inclination
    inc = float(np.arccos(np.clip(h[2] / h_mag, -1.0, 1.0)))

    # Longitude of the ascending node
    if n_mag > 1e-12 * h_mag:
        raan = float(np.arctan2(n[1], n[0]) % TWO_PI)
    else:
        raan = 0.0

    # Argument of perigee
    if e > 1e-12 and n_mag > 1e-12 * h_mag:
        cos_pa = np.clip(np.dot(n, e_vec) / (n_mag * e), -1.0, 1.0)
        pa = float(np.arccos(cos_pa))
        if e_vec[2] < 0.0:
            pa = TWO_PI - pa
    elif e > 1e-12:
        # Equatorial: measure from the x-axis, in the sense of motion
        pa = float(np.arctan2(e_vec[1], e_vec[0]) % TWO_PI)
        if h[2] < 0.0:
            pa = (TWO_PI - pa) % TWO_PI
    else:
        pa = 0.0

    # True anomaly
    if e > 1e-12:
        cos_nu = np.clip(np.dot(e_vec, r) / (e * r_mag), -1.0, 1.0)
        nu = float(np.arccos(cos_nu))
        if np.dot(r, v) < 0.0:
            nu = TWO_PI - nu
    elif n_mag > 1e-12 * h_mag:
        # Circular: measure from the ascending node
        cos_nu = np.clip(np.dot(n, r) / (n_mag * r_mag), -1.0, 1.0)
        nu = float(np.arccos(cos_nu))
        if r[2] < 0.0:
            nu = TWO_PI - nu
    else:
        # Circular equatorial: measure from the x-axis
        nu = float(np.arctan2(r[1], r[0]) % TWO_PI)
        if h[2] < 0.0:
            nu = (TWO_PI - nu) % TWO_PI

    if e > 1.0:
        H = kepler.true_to_hyperbolic_eccentric(nu, e)
        mean_anomaly = kepler.hyperbolic_eccentric_to_mean(H, e)
    else:
        E = kepler.true_to_elliptic_eccentric(nu, e)
        mean_anomaly = kepler.normalize_angle(kepler.elliptic_eccentric_to_mean(E, e), 0.0)

    return OrbitalElements(
        a=float(a), e=e, i=inc, pa=pa, raan=raan,
        true_anomaly=nu, mean_anomaly=float(mean_anomaly),
    )


# =============================================================================
# ENERGY
# =============================================================================

def specific_energy(r: float, v: float, mu: float) -> float:
    """
    Compute the specific mechanical energy (energy per unit mass).

        E = v^2/2 - mu/r

    E < 0 for bound (elliptic) orbits, E > 0 for hyperbolic ones.

    Parameters
    ----------
    r : float
        Distance from the central body (m).
    v : float
        Orbital speed (m/s).
    mu : float
        Gravitational parameter (m^3/s^2).

    Returns
    -------
    float
        Specific energy (J/kg = m^2/s^2).
    """
    return 0.5 * v * v - mu / r


def doubled_specific_energy(
    position: Vector3, velocity: Vector3, center: Vector3, mu: float
) -> float:
    """
    |v|^2 - 2*mu/r for a body relative to *center*.

    Twice the specific mechanical energy; the simulator's drift diagnostic
    is expressed in this convention.  At r = 0 the potential term is
    unbounded and the result is -inf.
    """
    r = position.distance_to(center)
    if r == 0.0:
        return -math.inf
    return velocity.norm_sq - 2.0 * mu / r


# =============================================================================
# ORBIT SCALARS
# =============================================================================

def vis_viva(r: float, a: float, mu: float) -> float:
    """
    Orbital speed from the vis-viva equation, v = sqrt(mu * (2/r - 1/a)).

    Valid for elliptic (a > 0) and hyperbolic (a < 0) orbits.
    """
    return float(np.sqrt(mu * (2.0 / r - 1.0 / a)))


def orbital_period(a: float, mu: float) -> float:
    """
    Orbital period from Kepler's third law, T = 2*pi * sqrt(a^3 / mu).

    Raises
    ------
    ValueError
        If a <= 0 (open orbit has no finite period).
    """
    if a <= 0:
        raise ValueError(
            f"Orbital period is undefined for a <= 0 (got a = {a:.4e} m). "
            "Open (hyperbolic/parabolic) orbits have infinite period."
        )
    return float(TWO_PI * np.sqrt(a ** 3 / mu))
