"""
===============================================================================
GRAVMATH - Three-Dimensional Vector
===============================================================================
Immutable 3D vector value type used for positions, velocities and forces.

The fused constructor ``Vector3.linear_combination(a1, u1, a2, u2)`` builds
``a1*u1 + a2*u2`` with an accurate two-term dot product per component:

    1. Each product a*b is split exactly into a high and a low part
       (Veltkamp/Dekker splitting).
    2. The two high parts are added with an error-free transformation.
    3. The low parts and the rounding error are folded back in at the end.

The result is as accurate as if a*b + c*d were computed in twice the working
precision and rounded once, which matters when the orbital-plane basis
vectors nearly cancel each other.

References
----------
    [1] Ogita, Rump & Oishi, "Accurate Sum and Dot Product",
        SIAM J. Sci. Comput. 26(6), 2005.
    [2] Dekker, "A floating-point technique for extending the available
        precision", Numer. Math. 18, 1971.
===============================================================================
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


# Veltkamp splitter for IEEE-754 binary64 (2^27 + 1)
_SPLITTER = 134217729.0


def _split(a: float) -> Tuple[float, float]:
    """Split *a* into two halves whose products with another split are exact."""
    c = _SPLITTER * a
    high = c - (c - a)
    return high, a - high


def _two_product(a: float, b: float) -> Tuple[float, float]:
    """Return (p, err) with p = fl(a*b) and a*b = p + err exactly."""
    p = a * b
    a_high, a_low = _split(a)
    b_high, b_low = _split(b)
    err = a_low * b_low - (((p - a_high * b_high) - a_low * b_high) - a_high * b_low)
    return p, err


def linear_combination(a1: float, b1: float, a2: float, b2: float) -> float:
    """
    Compute a1*b1 + a2*b2 to nearly twice the working precision.

    Parameters
    ----------
    a1, b1 : float
        First factor pair.
    a2, b2 : float
        Second factor pair.

    Returns
    -------
    float
        The accurately rounded value of a1*b1 + a2*b2.  When any input is
        infinite or NaN the naive expression is returned so IEEE semantics
        are preserved.
    """
    prod1_high, prod1_low = _two_product(a1, b1)
    prod2_high, prod2_low = _two_product(a2, b2)

    # Error-free sum of the high parts
    s12_high = prod1_high + prod2_high
    s12_prime = s12_high - prod2_high
    s12_low = (prod2_high - (s12_high - s12_prime)) + (prod1_high - s12_prime)

    result = s12_high + (prod1_low + prod2_low + s12_low)

    if math.isnan(result):
        # Infinite numbers were split or a coefficient is NaN
        return a1 * b1 + a2 * b2
    return result


@dataclass(frozen=True)
class Vector3:
    """
    Immutable Cartesian vector.

    Attributes
    ----------
    x : float
        Abscissa.
    y : float
        Ordinate.
    z : float
        Height.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    # =====================================================================
    # CONSTRUCTORS
    # =====================================================================

    @classmethod
    def linear_combination(
        cls, a1: float, u1: 'Vector3', a2: float, u2: 'Vector3'
    ) -> 'Vector3':
        """
        Build ``a1 * u1 + a2 * u2`` component by component with
        :func:`linear_combination`.
        """
        return cls(
            linear_combination(a1, u1.x, a2, u2.x),
            linear_combination(a1, u1.y, a2, u2.y),
            linear_combination(a1, u1.z, a2, u2.z),
        )

    @classmethod
    def from_array(cls, values: Sequence[float]) -> 'Vector3':
        """Build a vector from any 3-element sequence or ndarray."""
        arr = np.asarray(values, dtype=np.float64).ravel()
        if arr.shape != (3,):
            raise ValueError(f"Expected 3 components, got shape {arr.shape}.")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def to_array(self) -> np.ndarray:
        """Return the components as a float64 ndarray of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    # =====================================================================
    # ARITHMETIC
    # =====================================================================

    def __add__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> 'Vector3':
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def dot(self, other: 'Vector3') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector3') -> 'Vector3':
        return Vector3(
            linear_combination(self.y, other.z, -self.z, other.y),
            linear_combination(self.z, other.x, -self.x, other.z),
            linear_combination(self.x, other.y, -self.y, other.x),
        )

    @property
    def norm_sq(self) -> float:
        """Squared Euclidean norm."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    @property
    def norm(self) -> float:
        """Euclidean norm."""
        return math.sqrt(self.norm_sq)

    def distance_to(self, other: 'Vector3') -> float:
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)


Vector3.ZERO = Vector3(0.0, 0.0, 0.0)
