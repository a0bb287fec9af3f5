"""
===============================================================================
GRAVMATH - Error Taxonomy
===============================================================================
Exceptions raised while building orbits and bodies.  All of them are raised
synchronously at the point of violation and none is retried internally: an
orbit whose construction raises is never left half-built.
===============================================================================
"""

from typing import Optional


class GravmathError(Exception):
    """Base class for every error raised by this package."""


class InvalidOrbitGeometry(GravmathError, ValueError):
    """Semi-major axis and eccentricity do not describe an elliptic or hyperbolic conic."""

    def __init__(self, a: float, e: float) -> None:
        self.a = a
        self.e = e
        super().__init__(
            "orbit should be either elliptic with a > 0 and e < 1 or hyperbolic "
            f"with a < 0 and e > 1, a = {a}, e = {e}"
        )


class ParameterOutOfRange(GravmathError, ValueError):
    """A range-checked parameter lies outside its declared bounds."""

    def __init__(self, name: str, value: float, lower: float, upper: float) -> None:
        self.name = name
        self.value = value
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"invalid parameter {name}: {value} not in range [{lower}, {upper}]"
        )


class TrueAnomalyOutOfHyperbolicRange(GravmathError, ValueError):
    """The solved true anomaly lies beyond the asymptotes of the hyperbola."""

    def __init__(self, v: float, e: float, v_max: Optional[float] = None) -> None:
        self.v = v
        self.e = e
        self.v_max = v_max
        if v_max is None:
            bounds = "undefined"
        else:
            bounds = f"{-v_max} < v < {v_max}"
        super().__init__(
            f"true anomaly {v} out of hyperbolic range (e = {e}, {bounds})"
        )


class KeplerSolverDidNotConverge(GravmathError, RuntimeError):
    """The hyperbolic Kepler solver exhausted its iteration budget."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        super().__init__(
            "unable to compute hyperbolic eccentric anomaly from the mean anomaly "
            f"after {iterations} iterations"
        )


class ConfigurationError(GravmathError, ValueError):
    """A configuration entry is unknown or cannot be read as a number."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"invalid configuration entry {key}: {message}")
