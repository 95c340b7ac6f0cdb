"""Tests for solving x1 and calibrating tables."""

import math

import numpy as np
import pytest

from zignormal.errors import ConfigurationError, RootNotFound
from zignormal.numerics.density import STANDARD_NORMAL, GaussianDensity
from zignormal.numerics.erf import erfc
from zignormal.ziggurat.calibration import (
    TAIL_AREAS,
    area_difference,
    base_layer_area,
    calibrate,
    gaussian_tail_area,
    resolve_tail_area,
    solve_x1,
    top_layer_area,
)

pdf = STANDARD_NORMAL.pdf
inv_pdf = STANDARD_NORMAL.inverse_pdf


class TestAreas:
    """Test the area terms that define the calibration objective."""

    def test_base_layer_area_formula(self):
        x1 = 3.5
        assert base_layer_area(x1, pdf) == x1 * pdf(x1) + erfc(x1)

    def test_base_layer_area_gaussian_tail(self):
        x1 = 3.5
        expected = x1 * pdf(x1) + 0.5 * math.erfc(x1 / math.sqrt(2))
        assert base_layer_area(x1, pdf, "gaussian") == pytest.approx(expected, rel=1e-6)

    def test_gaussian_tail_area(self):
        assert gaussian_tail_area(0.0) == 0.5
        assert gaussian_tail_area(2.0) == pytest.approx(0.02275013, abs=1e-7)

    def test_area_difference_at_zero(self):
        """At x1 = 0 the base strip is erfc(0) = 1 and nothing is left on top."""
        assert area_difference(0.0, 256, pdf, inv_pdf) == -1.0

    def test_area_difference_changes_sign(self):
        assert area_difference(3.0, 256, pdf, inv_pdf) < 0
        assert area_difference(5.0, 256, pdf, inv_pdf) > 0
        assert area_difference(100.0, 256, pdf, inv_pdf) > 0

    def test_top_layer_area_is_non_negative(self):
        for x1 in (0.0, 1.0, 3.0, 3.6, 4.0, 10.0):
            assert top_layer_area(256, x1, pdf, inv_pdf) >= 0

    def test_callable_tail_area(self):
        assert base_layer_area(2.0, pdf, lambda x: 0.0) == 2.0 * pdf(2.0)

    def test_unknown_tail_area(self):
        with pytest.raises(ConfigurationError, match="unknown tail area"):
            resolve_tail_area("exponential")

    def test_registry(self):
        assert set(TAIL_AREAS) == {"erfc", "gaussian"}


class TestSolveX1:
    """Test the bisection search for x1."""

    def test_standard_256(self):
        x1 = solve_x1(256, pdf, inv_pdf)
        assert 3.4 < x1 < 3.9
        assert abs(area_difference(x1, 256, pdf, inv_pdf)) < 1e-4

    def test_gaussian_tail_moves_x1_outwards(self):
        x1_erfc = solve_x1(256, pdf, inv_pdf)
        x1_gauss = solve_x1(256, pdf, inv_pdf, tail_area="gaussian")
        assert 3.4 < x1_gauss < 3.9
        assert x1_gauss > x1_erfc

    def test_fewer_layers_need_smaller_x1(self):
        assert solve_x1(64, pdf, inv_pdf) < solve_x1(256, pdf, inv_pdf)

    def test_deterministic(self):
        assert solve_x1(128, pdf, inv_pdf) == solve_x1(128, pdf, inv_pdf)

    @pytest.mark.parametrize("n", [0, -1, 1.5])
    def test_invalid_layer_count(self, n):
        with pytest.raises(ConfigurationError):
            solve_x1(n, pdf, inv_pdf)

    def test_numpy_integer_layer_count(self):
        assert solve_x1(np.int64(64), pdf, inv_pdf) == solve_x1(64, pdf, inv_pdf)

    def test_no_root_in_search_interval(self):
        with pytest.raises(RootNotFound, match="no sign change"):
            solve_x1(256, pdf, inv_pdf, search_interval=(5.0, 10.0))

    def test_iteration_budget_too_small(self):
        with pytest.raises(RootNotFound, match="did not converge"):
            solve_x1(256, pdf, inv_pdf, max_iter=3)


class TestCalibrate:
    """Test end-to-end calibration."""

    @pytest.mark.parametrize("n", [1, 8, 64, 256])
    def test_valid_tables(self, n):
        table = calibrate(n=n)
        assert table.n == n
        assert len(table.boundaries) == n + 1
        table.validate()

    def test_failure_produces_no_table(self):
        with pytest.raises(RootNotFound):
            calibrate(n=256, max_iter=2)

    def test_logs_result(self, caplog):
        with caplog.at_level("INFO", logger="zignormal.ziggurat.calibration"):
            calibrate(n=32)
        assert "Calibrated 32-layer ziggurat" in caplog.text

    def test_numpy_integer_layer_count(self):
        table = calibrate(n=np.int64(32))
        assert table.n == 32
        assert table == calibrate(n=32)

    @pytest.mark.parametrize(
        "density", [GaussianDensity(1.0, 1.0), GaussianDensity(0.0, 2.0)]
    )
    def test_rejects_non_standard_density(self, density):
        with pytest.raises(ConfigurationError, match="only the standard normal"):
            calibrate(n=64, density=density, tail_area="gaussian")

    def test_accepts_standard_density_instance(self):
        assert calibrate(n=16, density=GaussianDensity(0.0, 1.0)) == calibrate(n=16)
