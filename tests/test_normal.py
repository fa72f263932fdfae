"""Tests for the normal-distribution primitives."""

import math
import numpy as np
import pytest
from scipy.stats import norm

from riskpricer.normal import erf, cdf, pdf, cdf_vec, pdf_vec

GRID = np.linspace(-8.0, 8.0, 401)


class TestCDF:
    def test_at_zero(self):
        assert cdf(0.0) == 0.5

    def test_symmetry(self):
        for x in GRID:
            assert abs(cdf(x) + cdf(-x) - 1.0) < 1e-12

    def test_accuracy_vs_scipy(self):
        err = max(abs(cdf(x) - norm.cdf(x)) for x in GRID)
        assert err < 1.5e-7

    def test_known_values(self):
        assert abs(cdf(1.0) - 0.8413) < 1e-4
        assert abs(cdf(-1.0) - 0.1587) < 1e-4
        assert abs(cdf(2.0) - 0.9772) < 1e-4

    def test_monotone(self):
        vals = [cdf(x) for x in np.linspace(-4.0, 4.0, 81)]
        assert np.all(np.diff(vals) >= 0)

    def test_tails(self):
        assert cdf(-40.0) == pytest.approx(0.0, abs=1e-12)
        assert cdf(40.0) == pytest.approx(1.0, abs=1e-12)


class TestErf:
    def test_odd(self):
        for z in (0.1, 0.5, 1.3, 2.7):
            assert erf(-z) == -erf(z)

    def test_zero(self):
        assert erf(0.0) == 0.0

    def test_known_values(self):
        assert abs(erf(0.2475) - 0.27370) < 1e-4
        assert abs(erf(1.0) - 0.842701) < 1e-6
        assert abs(cdf(0.35) - 0.636831) < 1e-6

    def test_close_to_math_erf(self):
        for z in np.linspace(-4, 4, 81):
            assert abs(erf(z) - math.erf(z)) < 1.5e-7


class TestPDF:
    def test_known_values(self):
        assert abs(pdf(0.0) - 0.3989) < 1e-4
        assert abs(pdf(1.0) - 0.2420) < 1e-4
        assert abs(pdf(2.0) - 0.0540) < 1e-4

    def test_even(self):
        for x in GRID:
            assert pdf(x) == pdf(-x)

    def test_matches_scipy(self):
        np.testing.assert_allclose([pdf(x) for x in GRID], norm.pdf(GRID), rtol=1e-12)


class TestVectorised:
    def test_cdf_vec_matches_scalar(self):
        got = cdf_vec(GRID)
        expected = np.array([cdf(x) for x in GRID])
        np.testing.assert_allclose(got, expected, rtol=0, atol=1e-15)

    def test_cdf_vec_zero(self):
        assert cdf_vec(0.0) == 0.5

    def test_pdf_vec_matches_scalar(self):
        np.testing.assert_allclose(pdf_vec(GRID), [pdf(x) for x in GRID], rtol=1e-15)
