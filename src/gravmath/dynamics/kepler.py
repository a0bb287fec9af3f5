"""
===============================================================================
GRAVMATH - Kepler Equation Solvers
===============================================================================
Conversions between mean, eccentric and true anomaly for elliptic and
hyperbolic orbits.

Elliptic orbits (0 <= e < 1) solve

    M = E - e*sin(E)

with the procedure of Odell & Gooding: an S12 starter followed by exactly two
iterations, each one a Halley step combined with a Newton-Raphson step.  Near
perigee of almost-parabolic orbits (E ~ 0, e ~ 1) the difference E - e*sin(E)
suffers from cancellation and is evaluated with a series instead.

Hyperbolic orbits (e > 1) solve

    M = e*sinh(H) - H

with Danby's third-order iteration started from Vallado's initial guess.

References
----------
    [1] Odell & Gooding, "Procedures for solving Kepler's Equation",
        Celestial Mechanics 38, 1986, pp. 307-334.
    [2] Danby, "The solution of Kepler's equation, III",
        Celestial Mechanics 40, 1987, pp. 303-312.
    [3] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 4.
===============================================================================
"""

import logging
import math

import numpy as np

from gravmath.core.constants import (
    PI,
    TWO_PI,
    KEPLER_STARTER_A,
    KEPLER_STARTER_B,
    HYPERBOLIC_MAX_ITERATIONS,
    HYPERBOLIC_TOLERANCE,
)
from gravmath.core.errors import KeplerSolverDidNotConverge

logger = logging.getLogger(__name__)


def normalize_angle(angle: float, center: float) -> float:
    """
    Reduce *angle* into the interval [center - pi, center + pi).
    """
    return angle - TWO_PI * math.floor((angle + PI - center) / TWO_PI)


# =============================================================================
# ELLIPTIC ORBITS
# =============================================================================

def e_me_sin_e(E: float, e: float) -> float:
    """
    Accurate computation of E - e*sin(E).

    Used when E is close to 0 and e close to 1, i.e. near the perigee of
    almost parabolic orbits, where the direct difference loses most of its
    significant digits.  The series is summed until the partial sum stops
    changing in floating point.
    """
    x = (1.0 - e) * math.sin(E)
    m_e2 = -E * E
    term = E
    d = 0.0
    x0 = math.nan
    # Stops at the bit-exact fixed point, not at a tolerance
    while x != x0:
        d += 2.0
        term *= m_e2 / (d * (d + 1.0))
        x0 = x
        x = x - term
    return x


def mean_to_elliptic_eccentric(M: float, e: float) -> float:
    """
    Compute the elliptic eccentric anomaly from the mean anomaly.

    Parameters
    ----------
    M : float
        Mean anomaly (rad).  Any value; it is reduced internally and the
        result is expanded back to the same revolution.
    e : float
        Eccentricity, 0 <= e < 1.

    Returns
    -------
    float
        Eccentric anomaly E (rad).
    """
    reduced_m = normalize_angle(M, 0.0)

    # S12 starter
    if abs(reduced_m) < 1.0 / 6.0:
        E = reduced_m + e * (float(np.cbrt(6.0 * reduced_m)) - reduced_m)
    elif reduced_m < 0.0:
        w = PI + reduced_m
        E = reduced_m + e * (KEPLER_STARTER_A * w / (KEPLER_STARTER_B - w) - PI - reduced_m)
    else:
        w = PI - reduced_m
        E = reduced_m + e * (PI - KEPLER_STARTER_A * w / (KEPLER_STARTER_B - w) - reduced_m)

    e1 = 1.0 - e
    no_cancellation_risk = (e1 + E * E / 6.0) >= 0.1

    # Two iterations, each one Halley step and one Newton-Raphson step
    for _ in range(2):
        sin_e = math.sin(E)
        cos_e = math.cos(E)
        fdd = e * sin_e
        fddd = e * cos_e
        if no_cancellation_risk:
            f = (E - fdd) - reduced_m
            fd = 1.0 - fddd
        else:
            f = e_me_sin_e(E, e) - reduced_m
            s = math.sin(0.5 * E)
            fd = e1 + 2.0 * e * s * s
        dee = f * fd / (0.5 * f * fdd - fd * fd)

        # Update written to limit underflow
        w = fd + 0.5 * dee * (fdd + dee * fddd / 3.0)
        fd += dee * (fdd + 0.5 * dee * fddd)
        E -= (f - dee * (fd - w)) / fd

    # Expand back to the revolution of M
    E += M - reduced_m
    return E


def elliptic_eccentric_to_true(E: float, e: float) -> float:
    """True anomaly (rad) from the elliptic eccentric anomaly."""
    beta = e / (1.0 + math.sqrt((1.0 - e) * (1.0 + e)))
    return E + 2.0 * math.atan(beta * math.sin(E) / (1.0 - beta * math.cos(E)))


def true_to_elliptic_eccentric(v: float, e: float) -> float:
    """Elliptic eccentric anomaly (rad) from the true anomaly."""
    beta = e / (1.0 + math.sqrt(1.0 - e * e))
    return v - 2.0 * math.atan(beta * math.sin(v) / (1.0 + beta * math.cos(v)))


def elliptic_eccentric_to_mean(E: float, e: float) -> float:
    """Mean anomaly (rad) from the elliptic eccentric anomaly (Kepler's equation)."""
    return E - e * math.sin(E)


# =============================================================================
# HYPERBOLIC ORBITS
# =============================================================================

def _hyperbolic_starter(M: float, e: float) -> float:
    """Vallado's initial guess, capped at the analytic bound on the root."""
    if e < 1.6:
        if -PI < M < 0.0 or M > PI:
            H = M - e
        else:
            H = M + e
    elif e < 3.6 and abs(M) > PI:
        H = M - math.copysign(e, M)
    else:
        H = M / (e - 1.0)

    # e*sinh(H) - H >= (e - 1)*sinh(H) for H >= 0, so |H_root| <= asinh(|M|/(e-1))
    bound = math.asinh(abs(M) / (e - 1.0))
    if abs(H) > bound:
        H = math.copysign(bound, M)
    return H


def mean_to_hyperbolic_eccentric(
    M: float, e: float, max_iterations: int = HYPERBOLIC_MAX_ITERATIONS
) -> float:
    """
    Compute the hyperbolic eccentric anomaly from the mean anomaly.

    Parameters
    ----------
    M : float
        Mean anomaly (rad).
    e : float
        Eccentricity, e > 1.
    max_iterations : int
        Iteration budget for Danby's method.

    Returns
    -------
    float
        Hyperbolic eccentric anomaly H (rad).

    Raises
    ------
    KeplerSolverDidNotConverge
        If the correction has not dropped below 1e-12 within the budget.
    """
    H = _hyperbolic_starter(M, e)

    iteration = 0
    while iteration < max_iterations:
        iteration += 1
        f3 = e * math.cosh(H)
        f2 = e * math.sinh(H)
        f1 = f3 - 1.0
        f0 = f2 - H - M
        f12 = 2.0 * f1
        d = f0 / f12
        fdf = f1 - d * f2
        ds = f0 / fdf
        shift = f0 / (fdf + ds * ds * f3 / 6.0)

        H -= shift

        if abs(shift) <= HYPERBOLIC_TOLERANCE:
            logger.debug(
                "Hyperbolic Kepler solver converged: M=%.6g e=%.6g H=%.12g (%d iterations)",
                M, e, H, iteration,
            )
            return H

    raise KeplerSolverDidNotConverge(iteration)


def hyperbolic_eccentric_to_true(H: float, e: float) -> float:
    """True anomaly (rad) from the hyperbolic eccentric anomaly."""
    return 2.0 * math.atan(math.sqrt((e + 1.0) / (e - 1.0)) * math.tanh(0.5 * H))


def true_to_hyperbolic_eccentric(v: float, e: float) -> float:
    """Hyperbolic eccentric anomaly (rad) from the true anomaly."""
    sinh_h = math.sqrt(e * e - 1.0) * math.sin(v) / (1.0 + e * math.cos(v))
    return math.asinh(sinh_h)


def hyperbolic_eccentric_to_mean(H: float, e: float) -> float:
    """Mean anomaly (rad) from the hyperbolic eccentric anomaly."""
    return e * math.sinh(H) - H
