"""Tests for the erf / erfc approximation."""

import math

import numpy as np
import pytest

from zignormal.numerics.erf import erf, erf_array, erfc, erfc_array

GRID = np.linspace(-6.0, 6.0, 1201)
POSITIVE_GRID = np.linspace(0.0, 6.0, 601)


class TestErf:
    """Test the scalar error function."""

    def test_erf_at_zero(self):
        assert erf(0.0) == 0.0

    def test_erf_limits(self):
        assert erf(math.inf) == 1.0
        assert erf(-math.inf) == -1.0
        assert erf(40.0) == 1.0

    def test_erf_is_odd(self):
        for x in GRID:
            assert abs(erf(-x) + erf(x)) < 2e-7

    def test_erf_accuracy(self):
        """Maximum absolute error against math.erf stays around 1.2e-7."""
        errors = [abs(erf(x) - math.erf(x)) for x in GRID]
        assert max(errors) < 1.5e-7

    def test_erf_bounded(self):
        for x in GRID:
            assert -1.0 <= erf(x) <= 1.0

    def test_erf_monotone(self):
        values = [erf(x) for x in GRID]
        assert np.all(np.diff(values) >= 0)


class TestErfc:
    """Test the clamped complementary error function."""

    def test_erfc_plus_erf_is_one(self):
        for x in POSITIVE_GRID:
            assert erfc(x) + erf(x) == pytest.approx(1.0, abs=1e-12)

    def test_erfc_accuracy(self):
        errors = [abs(erfc(x) - math.erfc(x)) for x in POSITIVE_GRID]
        assert max(errors) < 1.5e-7

    def test_erfc_clamped_for_negative_arguments(self):
        """1 - erf(x) exceeds 1 for x < 0 and is clamped."""
        for x in GRID[GRID < 0]:
            assert erfc(x) == 1.0

    def test_erfc_range(self):
        for x in GRID:
            assert 0.0 <= erfc(x) <= 1.0


class TestVectorised:
    """Test the numpy versions against the scalar ones."""

    def test_erf_array_matches_scalar(self):
        expected = np.array([erf(x) for x in GRID])
        np.testing.assert_allclose(erf_array(GRID), expected, rtol=0, atol=1e-15)

    def test_erfc_array_matches_scalar(self):
        expected = np.array([erfc(x) for x in GRID])
        np.testing.assert_allclose(erfc_array(GRID), expected, rtol=0, atol=1e-15)

    def test_erf_array_scalar_input(self):
        assert erf_array(0.0) == 0.0
        assert erf_array(np.inf) == 1.0
