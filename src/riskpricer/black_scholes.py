"""Generalised Black-Scholes (cost-of-carry) pricing and Greeks.

    d1 = [ln(S/K) + (b + sigma^2/2) T] / (sigma sqrt(T))
    d2 = d1 - sigma sqrt(T)
    call = M [S e^{(b-r)T} N(d1) - K e^{-rT} N(d2)]
    put  = M [K e^{-rT} N(-d2) - S e^{(b-r)T} N(-d1)]

``b = r`` gives plain Black-Scholes, ``b = r - q`` a continuous dividend
yield, ``b = r - r_f`` Garman-Kohlhagen for FX.
"""

from math import log, sqrt, exp
from typing import Literal, Dict

from .core import InstrumentState, CALL, PUT
from .errors import DomainError
from .normal import cdf as _N, pdf as _n


def check_domain(S: float, K: float, sigma: float, T: float) -> None:
    """Raise ``DomainError`` unless S, K, sigma and T are all strictly positive."""
    if T <= 0 or sigma <= 0 or S <= 0 or K <= 0:
        raise DomainError(
            f"S, K, sigma and T must be positive (S={S}, K={K}, sigma={sigma}, T={T})"
        )


def d1_d2(S: float, K: float, r: float, b: float, sigma: float, T: float):
    check_domain(S, K, sigma, T)
    srt = sigma * sqrt(T)
    d1 = (log(S / K) + (b + 0.5 * sigma * sigma) * T) / srt
    d2 = d1 - srt
    return d1, d2


def price(S: float, K: float, r: float, b: float, sigma: float, T: float,
          kind: Literal["call", "put"] = CALL, multiplier: float = 1.0) -> float:
    d1, d2 = d1_d2(S, K, r, b, sigma, T)
    carry_df = exp((b - r) * T)
    disc_r = exp(-r * T)
    if kind == CALL:
        return multiplier * (S * carry_df * _N(d1) - K * disc_r * _N(d2))
    elif kind == PUT:
        return multiplier * (K * disc_r * _N(-d2) - S * carry_df * _N(-d1))
    else:
        raise ValueError("kind must be 'call' or 'put'")


def greeks(S: float, K: float, r: float, b: float, sigma: float, T: float,
           kind: Literal["call", "put"] = CALL) -> Dict[str, float]:
    """Per-unit Greeks (not scaled by the multiplier).

    Vega is dPrice/dSigma in absolute units, theta is per year, and rho
    assumes the carry moves with the rate (the ``b = r`` case).
    """
    d1, d2 = d1_d2(S, K, r, b, sigma, T)
    n_d1 = _n(d1)
    carry_df = exp((b - r) * T)
    disc_r = exp(-r * T)
    sqrt_T = sqrt(T)

    # Common
    gamma = carry_df * n_d1 / (S * sigma * sqrt_T)
    vega  = S * carry_df * n_d1 * sqrt_T
    decay = -S * carry_df * n_d1 * sigma / (2 * sqrt_T)

    if kind == CALL:
        delta = carry_df * _N(d1)
        theta = (decay
                 - (b - r) * S * carry_df * _N(d1)
                 - r * K * disc_r * _N(d2))
        rho   = K * T * disc_r * _N(d2)
    elif kind == PUT:
        delta = carry_df * (_N(d1) - 1.0)
        theta = (decay
                 + (b - r) * S * carry_df * _N(-d1)
                 + r * K * disc_r * _N(-d2))
        rho   = -K * T * disc_r * _N(-d2)
    else:
        raise ValueError("kind must be 'call' or 'put'")

    return {"delta": delta, "gamma": gamma, "vega": vega, "theta": theta, "rho": rho}


def price_state(state: InstrumentState) -> float:
    """Price an ``InstrumentState`` (multiplier included)."""
    return price(state.spot, state.strike, state.rate, state.carry,
                 state.volatility, state.maturity, state.kind, state.multiplier)


def greeks_state(state: InstrumentState) -> Dict[str, float]:
    return greeks(state.spot, state.strike, state.rate, state.carry,
                  state.volatility, state.maturity, state.kind)
