"""
===============================================================================
GRAVMATH - Vector Test Suite
===============================================================================
Tests for the accurate two-term linear combination and the immutable
Vector3 type.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from gravmath.core.vector import Vector3, linear_combination


# =============================================================================
# Accurate linear combination
# =============================================================================

class TestLinearCombination:
    """a1*b1 + a2*b2 evaluated to nearly twice the working precision."""

    def test_recovers_cancelled_low_bits(self):
        """
        (1 + 2^-30)(1 - 2^-30) - 1 = -2^-60 exactly.  The naive expression
        rounds the product to 1.0 and returns zero.
        """
        eps = 2.0 ** -30
        naive = (1.0 + eps) * (1.0 - eps) + (-1.0) * 1.0
        assert naive == 0.0

        result = linear_combination(1.0 + eps, 1.0 - eps, -1.0, 1.0)
        assert result == -(2.0 ** -60)

    @pytest.mark.parametrize("a1, b1, a2, b2", [
        (1.0, 2.0, 3.0, 4.0),
        (-0.5, 1e10, 7.25, -3e-3),
        (0.0, 5.0, 0.0, -5.0),
    ])
    def test_agrees_with_naive_for_benign_inputs(self, a1, b1, a2, b2):
        assert_allclose(linear_combination(a1, b1, a2, b2), a1 * b1 + a2 * b2,
                        rtol=1e-15, atol=0.0)

    def test_infinite_input_keeps_ieee_result(self):
        assert linear_combination(math.inf, 1.0, 1.0, 1.0) == math.inf
        assert linear_combination(1.0, 1.0, -math.inf, 2.0) == -math.inf

    def test_nan_input_propagates(self):
        assert math.isnan(linear_combination(math.nan, 1.0, 1.0, 1.0))


# =============================================================================
# Vector3
# =============================================================================

class TestVector3:
    """Arithmetic and numpy interop of the Cartesian vector type."""

    def test_arithmetic(self):
        u = Vector3(1.0, 2.0, 3.0)
        v = Vector3(-4.0, 0.5, 2.0)
        assert u + v == Vector3(-3.0, 2.5, 5.0)
        assert u - v == Vector3(5.0, 1.5, 1.0)
        assert u * 2.0 == Vector3(2.0, 4.0, 6.0)
        assert 2.0 * u == u * 2.0
        assert u * -1.0 == Vector3(-1.0, -2.0, -3.0)
        assert u.dot(v) == -4.0 + 1.0 + 6.0

    def test_cross_product_of_basis_vectors(self):
        x_hat = Vector3(1.0, 0.0, 0.0)
        y_hat = Vector3(0.0, 1.0, 0.0)
        z_hat = Vector3(0.0, 0.0, 1.0)
        assert x_hat.cross(y_hat) == z_hat
        assert y_hat.cross(z_hat) == x_hat
        assert z_hat.cross(x_hat) == y_hat

    def test_cross_matches_numpy(self):
        u = np.array([1.5, -2.0, 0.25])
        v = np.array([3.0, 4.0, -1.0])
        result = Vector3.from_array(u).cross(Vector3.from_array(v))
        assert_allclose(result.to_array(), np.cross(u, v), rtol=1e-15)

    def test_norm_and_distance(self):
        u = Vector3(3.0, 4.0, 12.0)
        assert u.norm_sq == 169.0
        assert u.norm == 13.0
        assert Vector3.ZERO.distance_to(u) == 13.0

    def test_linear_combination_of_vectors(self):
        p = Vector3(1.0, 0.0, 0.0)
        q = Vector3(0.0, 1.0, 0.0)
        assert Vector3.linear_combination(2.0, p, -3.0, q) == Vector3(2.0, -3.0, 0.0)

    def test_array_round_trip(self):
        arr = np.array([1.0, -2.0, 3.5])
        vec = Vector3.from_array(arr)
        assert (vec.x, vec.y, vec.z) == (1.0, -2.0, 3.5)
        assert_allclose(vec.to_array(), arr)

    def test_from_array_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            Vector3.from_array([1.0, 2.0])

    def test_is_immutable(self):
        u = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(AttributeError):
            u.x = 5.0

    def test_is_finite(self):
        assert Vector3(1.0, 2.0, 3.0).is_finite()
        assert not Vector3(1.0, math.nan, 3.0).is_finite()
        assert not Vector3(math.inf, 0.0, 0.0).is_finite()
