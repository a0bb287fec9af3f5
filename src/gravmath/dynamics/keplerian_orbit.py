"""
===============================================================================
GRAVMATH - Keplerian Orbit
===============================================================================
Converter from classical orbital elements to a Cartesian state vector.

An orbit is validated and its true anomaly solved at construction time; the
position/velocity pair is derived on first access and cached permanently.
Construction either succeeds completely or raises one of the named errors in
:mod:`gravmath.core.errors`; there is no partially valid orbit.

Orbital plane basis (perifocal P toward perigee, Q 90 deg ahead in the
direction of motion) from the 3-1-3 rotation (RAAN, i, argument of perigee):

    P = [ cO*cw - sO*sw*ci,   sO*cw + cO*sw*ci,  sw*si ]
    Q = [-cO*sw - sO*cw*ci,  -sO*sw + cO*cw*ci,  cw*si ]

In-plane coordinates:

    elliptic   (parameterized by E):
        x = a (cos E - e)            y = a sqrt(1-e^2) sin E
        xdot = -sin E * k            ydot = sqrt(1-e^2) cos E * k,
        k = sqrt(mu/a) / (1 - e cos E)

    hyperbolic (parameterized by v):
        r = a (1-e^2) / (1 + e cos v),   w = sqrt(mu / (a (1-e^2)))
        x = r cos v      y = r sin v
        xdot = -w sin v  ydot = w (e + cos v)

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 10.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed., Ch. 4.
===============================================================================
"""

import logging
import math
from typing import Optional, Tuple

from gravmath.core.constants import DEG2RAD
from gravmath.core.errors import (
    InvalidOrbitGeometry,
    ParameterOutOfRange,
    TrueAnomalyOutOfHyperbolicRange,
)
from gravmath.core.vector import Vector3
from gravmath.dynamics import kepler

logger = logging.getLogger(__name__)


class KeplerianOrbit:
    """
    Keplerian orbit defined by six elements and a gravitational parameter.

    Parameters
    ----------
    a : float
        Semi-major axis (m).  Positive for elliptic, negative for hyperbolic.
    e : float
        Eccentricity in [0, inf).  e < 1 elliptic, e > 1 hyperbolic.
    i : float
        Inclination (rad).
    pa : float
        Argument of perigee (rad).
    raan : float
        Longitude of the ascending node (rad).
    mean_anomaly : float
        Mean anomaly M0 (rad).
    mu : float
        Gravitational parameter of the central body (m^3/s^2).

    Raises
    ------
    ParameterOutOfRange
        If the eccentricity is negative (or NaN), or the mean anomaly is
        not finite.
    InvalidOrbitGeometry
        If (a, e) does not describe an elliptic or hyperbolic conic.
    TrueAnomalyOutOfHyperbolicRange
        If the solved true anomaly lies beyond the hyperbola's asymptotes.
    KeplerSolverDidNotConverge
        If the hyperbolic Kepler solver exhausts its iteration budget.
    """

    ECCENTRICITY = "eccentricity"
    MEAN_ANOMALY = "mean anomaly"

    def __init__(
        self,
        a: float, e: float, i: float,
        pa: float, raan: float, mean_anomaly: float,
        mu: float,
    ) -> None:
        if not (0.0 <= e <= math.inf):
            raise ParameterOutOfRange(self.ECCENTRICITY, e, 0.0, math.inf)
        if not math.isfinite(mean_anomaly):
            raise ParameterOutOfRange(self.MEAN_ANOMALY, mean_anomaly, -math.inf, math.inf)

        elliptic = a > 0.0 and e < 1.0
        hyperbolic = a < 0.0 and e > 1.0
        if not (elliptic or hyperbolic):
            raise InvalidOrbitGeometry(a, e)

        self._a = float(a)
        self._e = float(e)
        self._i = float(i)
        self._pa = float(pa)
        self._raan = float(raan)
        self._mu = float(mu)

        if hyperbolic:
            H = kepler.mean_to_hyperbolic_eccentric(mean_anomaly, e)
            v = kepler.hyperbolic_eccentric_to_true(H, e)
        else:
            E = kepler.mean_to_elliptic_eccentric(mean_anomaly, e)
            v = kepler.elliptic_eccentric_to_true(E, e)

        if 1.0 + e * math.cos(v) <= 0.0:
            v_max = math.acos(-1.0 / e) if e >= 1.0 else None
            raise TrueAnomalyOutOfHyperbolicRange(v, e, v_max)

        self._v = v
        self._pv: Optional[Tuple[Vector3, Vector3]] = None

        logger.debug(
            "KeplerianOrbit created: a=%.6g m e=%.6g M0=%.6g rad -> v=%.9g rad (%s)",
            a, e, mean_anomaly, v, "hyperbolic" if hyperbolic else "elliptic",
        )

    @classmethod
    def from_degrees(
        cls,
        a: float, e: float, i_deg: float,
        pa_deg: float, raan_deg: float, mean_anomaly_deg: float,
        mu: float,
    ) -> 'KeplerianOrbit':
        """Build an orbit from angles given in degrees."""
        return cls(
            a, e,
            i_deg * DEG2RAD, pa_deg * DEG2RAD, raan_deg * DEG2RAD,
            mean_anomaly_deg * DEG2RAD,
            mu,
        )

    # =====================================================================
    # ELEMENTS
    # =====================================================================

    @property
    def a(self) -> float:
        return self._a

    @property
    def e(self) -> float:
        return self._e

    @property
    def i(self) -> float:
        return self._i

    @property
    def pa(self) -> float:
        return self._pa

    @property
    def raan(self) -> float:
        return self._raan

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def true_anomaly(self) -> float:
        return self._v

    @property
    def is_hyperbolic(self) -> bool:
        return self._a < 0.0

    @property
    def eccentric_anomaly(self) -> float:
        """Elliptic (E) or hyperbolic (H) eccentric anomaly (rad)."""
        if self.is_hyperbolic:
            return kepler.true_to_hyperbolic_eccentric(self._v, self._e)
        return kepler.true_to_elliptic_eccentric(self._v, self._e)

    @property
    def mean_anomaly(self) -> float:
        """Mean anomaly recomputed from the cached true anomaly (rad)."""
        if self.is_hyperbolic:
            return kepler.hyperbolic_eccentric_to_mean(self.eccentric_anomaly, self._e)
        return kepler.elliptic_eccentric_to_mean(self.eccentric_anomaly, self._e)

    # =====================================================================
    # CARTESIAN STATE
    # =====================================================================

    @property
    def pv_coordinates(self) -> Tuple[Vector3, Vector3]:
        """(position, velocity) pair, computed on first access."""
        if self._pv is None:
            self._pv = self._compute_pv()
        return self._pv

    @property
    def position(self) -> Vector3:
        return self.pv_coordinates[0]

    @property
    def velocity(self) -> Vector3:
        return self.pv_coordinates[1]

    def _perifocal_basis(self) -> Tuple[Vector3, Vector3]:
        cos_raan, sin_raan = math.cos(self._raan), math.sin(self._raan)
        cos_pa, sin_pa = math.cos(self._pa), math.sin(self._pa)
        cos_i, sin_i = math.cos(self._i), math.sin(self._i)

        crcp = cos_raan * cos_pa
        crsp = cos_raan * sin_pa
        srcp = sin_raan * cos_pa
        srsp = sin_raan * sin_pa

        p = Vector3(crcp - cos_i * srsp, srcp + cos_i * crsp, sin_i * sin_pa)
        q = Vector3(-crsp - cos_i * srcp, -srsp + cos_i * crcp, sin_i * cos_pa)
        return p, q

    def _compute_pv(self) -> Tuple[Vector3, Vector3]:
        p, q = self._perifocal_basis()
        a, e = self._a, self._e

        if a > 0.0:
            # Elliptic: parameterized by the eccentric anomaly
            u_me2 = (1.0 - e) * (1.0 + e)
            s1_me2 = math.sqrt(u_me2)
            E = self.eccentric_anomaly
            cos_e, sin_e = math.cos(E), math.sin(E)

            x = a * (cos_e - e)
            y = a * sin_e * s1_me2
            factor = math.sqrt(self._mu / a) / (1.0 - e * cos_e)
            x_dot = -sin_e * factor
            y_dot = cos_e * s1_me2 * factor
        else:
            # Hyperbolic: parameterized by the true anomaly
            cos_v, sin_v = math.cos(self._v), math.sin(self._v)
            f = a * (1.0 - e * e)
            pos_factor = f / (1.0 + e * cos_v)
            vel_factor = math.sqrt(self._mu / f)

            x = pos_factor * cos_v
            y = pos_factor * sin_v
            x_dot = -vel_factor * sin_v
            y_dot = vel_factor * (e + cos_v)

        position = Vector3.linear_combination(x, p, y, q)
        velocity = Vector3.linear_combination(x_dot, p, y_dot, q)
        return position, velocity

    def __repr__(self) -> str:
        return (
            f"KeplerianOrbit(a={self._a:.6g}, e={self._e:.6g}, i={self._i:.6g}, "
            f"pa={self._pa:.6g}, raan={self._raan:.6g}, v={self._v:.6g})"
        )
