# normal.py
# Standard-normal primitives shared by the scalar and vectorised pricers.
#
# The CDF goes through a five-term rational approximation of erf
# (Abramowitz & Stegun 7.1.26, |error| < 1.5e-7) rather than math.erf so
# that the scalar pricer and the batch path agree to the last bit.

from __future__ import annotations
import math
import numpy as np

__all__ = ["erf", "cdf", "pdf", "erf_vec", "cdf_vec", "pdf_vec"]

_P = 0.3275911
_A1, _A2, _A3, _A4, _A5 = (
    0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429,
)
_SQRT2 = math.sqrt(2.0)
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


# ---------------------------------------------------------------------------
# Scalar
# ---------------------------------------------------------------------------
def erf(z: float) -> float:
    """Error function, odd by construction and exactly 0 at the origin."""
    if z == 0.0:
        return 0.0
    t = 1.0 / (1.0 + _P * abs(z))
    poly = t * (_A1 + t * (_A2 + t * (_A3 + t * (_A4 + t * _A5))))
    y = 1.0 - poly * math.exp(-z * z)
    return y if z > 0 else -y


def cdf(x: float) -> float:
    """Standard-normal CDF, Phi(x)."""
    return 0.5 * (1.0 + erf(x / _SQRT2))


def pdf(x: float) -> float:
    """Standard-normal density, phi(x)."""
    return math.exp(-0.5 * x * x) * _INV_SQRT_2PI


# ---------------------------------------------------------------------------
# Vectorised (same coefficients, same evaluation order)
# ---------------------------------------------------------------------------
def erf_vec(z) -> np.ndarray:
    z = np.asarray(z, dtype=float)
    t = 1.0 / (1.0 + _P * np.abs(z))
    poly = t * (_A1 + t * (_A2 + t * (_A3 + t * (_A4 + t * _A5))))
    y = 1.0 - poly * np.exp(-z * z)
    return np.where(z == 0.0, 0.0, np.where(z > 0, y, -y))


def cdf_vec(x) -> np.ndarray:
    return 0.5 * (1.0 + erf_vec(np.asarray(x, dtype=float) / _SQRT2))


def pdf_vec(x) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    return np.exp(-0.5 * x * x) * _INV_SQRT_2PI
