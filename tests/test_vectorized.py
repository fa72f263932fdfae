"""Tests for the vectorised Black-Scholes batch path."""

import numpy as np
import pytest
from riskpricer.core import CALL, PUT
from riskpricer.errors import DomainError
from riskpricer.black_scholes import price as bs_scalar, greeks as greeks_scalar
from riskpricer.black_scholes_vec import (
    RECORD_DTYPE, bs_price_vec, bs_greeks_vec, price_records,
)


# ---------------------------------------------------------------------------
# bs_price_vec matches scalar price
# ---------------------------------------------------------------------------
class TestBSPriceVec:
    def test_single_call_matches_scalar(self):
        expected = bs_scalar(100, 100, 0.05, 0.05, 0.2, 1.0, CALL)
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.2, "call")
        assert abs(float(got) - expected) < 1e-12

    def test_single_put_matches_scalar(self):
        expected = bs_scalar(100, 100, 0.05, 0.05, 0.2, 1.0, PUT)
        got = bs_price_vec(100, 100, 1.0, 0.05, 0.2, "put")
        assert abs(float(got) - expected) < 1e-12

    def test_array_of_spots(self):
        spots = np.array([90.0, 100.0, 110.0])
        prices = bs_price_vec(spots, 100, 1.0, 0.05, 0.2, "call")
        assert prices.shape == (3,)
        for i, S in enumerate(spots):
            assert abs(prices[i] - bs_scalar(S, 100, 0.05, 0.05, 0.2, 1.0, CALL)) < 1e-12

    def test_array_of_strikes(self):
        strikes = np.linspace(80, 120, 50)
        prices = bs_price_vec(100, strikes, 1.0, 0.05, 0.2, "call")
        assert prices.shape == (50,)
        # Prices should be monotonically decreasing for calls
        assert np.all(np.diff(prices) < 0)

    def test_mixed_kinds(self):
        kinds = np.array(["call", "put"])
        prices = bs_price_vec(100, 100, 1.0, 0.05, 0.2, kinds)
        assert prices[0] == pytest.approx(bs_scalar(100, 100, 0.05, 0.05, 0.2, 1.0, CALL))
        assert prices[1] == pytest.approx(bs_scalar(100, 100, 0.05, 0.05, 0.2, 1.0, PUT))

    def test_invalid_entry_raises(self):
        with pytest.raises(DomainError):
            bs_price_vec(np.array([100.0, 100.0]), 100, 1.0, 0.05, np.array([0.2, 0.0]), "call")


# ---------------------------------------------------------------------------
# Record batches
# ---------------------------------------------------------------------------
class TestPriceRecords:
    @pytest.fixture
    def records(self):
        rows = [
            (100.0, 100.0, 1.0, 0.05, 0.20, True),
            (100.0, 100.0, 1.0, 0.05, 0.20, False),
            (80.0, 95.0, 0.5, 0.02, 0.35, True),
            (120.0, 90.0, 2.0, 0.01, 0.15, False),
        ]
        return np.array(rows, dtype=RECORD_DTYPE)

    def test_shape_and_dtype(self, records):
        px = price_records(records)
        assert px.shape == (4,)
        assert px.dtype == np.float32

    def test_matches_scalar_to_float32(self, records):
        px = price_records(records)
        expected = [
            bs_scalar(
                float(rec["S"]), float(rec["K"]), float(rec["r"]), float(rec["r"]),
                float(rec["sigma"]), float(rec["T"]), CALL if rec["is_call"] else PUT,
            )
            for rec in records
        ]
        np.testing.assert_allclose(px, expected, rtol=1e-6)

    def test_float64_output(self, records):
        px = price_records(records, dtype=np.float64)
        assert px.dtype == np.float64
        assert px[0] == pytest.approx(10.4506, abs=1e-3)

    def test_empty_batch(self):
        px = price_records(np.empty(0, dtype=RECORD_DTYPE))
        assert px.shape == (0,)


# ---------------------------------------------------------------------------
# bs_greeks_vec matches scalar greeks
# ---------------------------------------------------------------------------
class TestBSGreeksVec:
    @pytest.mark.parametrize("kind", [CALL, PUT])
    def test_scalar_greeks_match(self, kind):
        expected = greeks_scalar(100, 100, 0.05, 0.05, 0.2, 1.0, kind)
        got = bs_greeks_vec(100, 100, 1.0, 0.05, 0.2, kind)
        for key in ("delta", "gamma", "vega", "theta", "rho"):
            assert abs(float(got[key]) - expected[key]) < 1e-10, f"{key} mismatch"

    def test_vectorized_greeks(self):
        spots = np.array([90.0, 100.0, 110.0])
        got = bs_greeks_vec(spots, 100, 1.0, 0.05, 0.2, "call")
        assert got["delta"].shape == (3,)
        # Call delta should increase with spot
        assert np.all(np.diff(got["delta"]) > 0)
