# black_scholes_vec.py
# Vectorised Black-Scholes pricing and Greeks for batch workloads.
# All public functions accept scalars *or* NumPy arrays and broadcast.
# No cost of carry (b = r) and no barriers: this is a throughput front end
# to black_scholes.price, evaluated with the same normal approximation.

from __future__ import annotations
import logging
import numpy as np

from .errors import DomainError
from .normal import cdf_vec as _N, pdf_vec as _n

logger = logging.getLogger(__name__)

# Flat record layout accepted by price_records.
RECORD_DTYPE = np.dtype([
    ("S", np.float32),
    ("K", np.float32),
    ("T", np.float32),
    ("r", np.float32),
    ("sigma", np.float32),
    ("is_call", np.bool_),
])


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _check_domain(S, K, T, sigma):
    bad = (S <= 0) | (K <= 0) | (T <= 0) | (sigma <= 0)
    if np.any(bad):
        idx = np.flatnonzero(bad)
        raise DomainError(
            f"S, K, sigma and T must be positive; {idx.size} invalid entries "
            f"(first at flat index {int(idx[0])})"
        )


def _d1_d2(S, K, T, r, sigma):
    """Compute d1, d2 arrays.  All inputs broadcast."""
    S, K, T, r, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, sigma))
    _check_domain(S, K, T, sigma)
    sig_sqrt_T = sigma * np.sqrt(T)
    d1 = (np.log(S / K) + (r + 0.5 * sigma * sigma) * T) / sig_sqrt_T
    d2 = d1 - sig_sqrt_T
    return d1, d2


def _is_call(kind) -> np.ndarray:
    """Return boolean mask: True where kind == 'call' (or already boolean)."""
    kind = np.asarray(kind)
    if kind.dtype == np.bool_:
        return kind
    if kind.ndim == 0:
        return np.bool_(str(kind) == "call")
    return np.array([str(k) == "call" for k in kind.flat], dtype=bool).reshape(kind.shape)


# ---------------------------------------------------------------------------
# Vectorised price
# ---------------------------------------------------------------------------
def bs_price_vec(S, K, T, r, sigma, kind) -> np.ndarray:
    """Vectorised Black-Scholes price.

    Parameters accept scalars or arrays; NumPy broadcasting rules apply.
    ``kind`` is ``"call"``/``"put"`` (or an array of them) or a boolean
    ``is_call`` mask.

    Returns
    -------
    np.ndarray
        Option prices (same shape as broadcasted inputs).

    Raises
    ------
    DomainError
        If any S, K, T or sigma is not strictly positive.
    """
    S, K, T, r, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, sigma))
    d1, d2 = _d1_d2(S, K, T, r, sigma)
    disc_r = np.exp(-r * T)

    call_px = S * _N(d1) - K * disc_r * _N(d2)
    put_px  = K * disc_r * _N(-d2) - S * _N(-d1)

    is_call = _is_call(kind)
    return np.where(is_call, call_px, put_px)


def price_records(records: np.ndarray, *, dtype=np.float32) -> np.ndarray:
    """Price a flat array of ``RECORD_DTYPE`` records element-wise.

    Inputs are widened to float64 for the arithmetic and the result is
    narrowed to ``dtype`` (the record width by default).
    """
    records = np.asarray(records)
    logger.debug("pricing %d records", records.size)
    px = bs_price_vec(
        records["S"], records["K"], records["T"], records["r"],
        records["sigma"], records["is_call"],
    )
    return px.astype(dtype, copy=False)


# ---------------------------------------------------------------------------
# Vectorised Greeks
# ---------------------------------------------------------------------------
def bs_greeks_vec(S, K, T, r, sigma, kind) -> dict[str, np.ndarray]:
    """Vectorised Black-Scholes Greeks.

    Returns dict with keys: delta, gamma, vega, theta, rho.
    Vega is dPrice/dSigma (absolute), theta is dPrice/dt (per year).
    """
    S, K, T, r, sigma = (np.asarray(x, dtype=float) for x in (S, K, T, r, sigma))
    d1, d2 = _d1_d2(S, K, T, r, sigma)
    disc_r = np.exp(-r * T)
    sqrt_T = np.sqrt(T)
    n_d1 = _n(d1)
    is_call = _is_call(kind)

    # Common
    gamma = n_d1 / (S * sigma * sqrt_T)
    vega  = S * n_d1 * sqrt_T

    # Call-specific
    delta_c = _N(d1)
    theta_c = -S * n_d1 * sigma / (2 * sqrt_T) - r * K * disc_r * _N(d2)
    rho_c   = K * T * disc_r * _N(d2)

    # Put-specific
    delta_p = _N(d1) - 1.0
    theta_p = -S * n_d1 * sigma / (2 * sqrt_T) + r * K * disc_r * _N(-d2)
    rho_p   = -K * T * disc_r * _N(-d2)

    delta = np.where(is_call, delta_c, delta_p)
    theta = np.where(is_call, theta_c, theta_p)
    rho   = np.where(is_call, rho_c, rho_p)

    return {"delta": delta, "gamma": gamma, "vega": vega, "theta": theta, "rho": rho}
