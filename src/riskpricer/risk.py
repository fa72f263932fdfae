"""Bump-and-reprice risk engine.

Market risk is the P&L from moving an instrument's market inputs from the
previous observed snapshot to the current one:

    risk = [price(current) - price(current terms, previous market)] * scale

``market_risk`` is a pure function of the instrument and the previous
snapshot.  ``RiskPosition`` owns the moving one-step window: each ``risk()``
call prices against the stored snapshot and then commits the current one,
so consecutive calls measure consecutive periods.

Also provides numerical Greeks via central finite differences for any
state pricer, and portfolio-level aggregation.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ProcessPoolExecutor
from contextlib import ExitStack
from dataclasses import replace
from typing import Callable, Optional

from .core import InstrumentState, MarketSnapshot
from .instruments import Instrument

logger = logging.getLogger(__name__)

__all__ = [
    "market_risk",
    "RiskPosition",
    "numerical_greeks",
    "portfolio_risk",
]


# ---------------------------------------------------------------------------
# Market risk
# ---------------------------------------------------------------------------

def market_risk(instrument: Instrument, previous: MarketSnapshot) -> float:
    """P&L of ``instrument`` between ``previous`` and its current market.

    Parameters
    ----------
    instrument : Instrument
        Instrument carrying the current market.
    previous : MarketSnapshot
        Market observed at the previous risk query.

    Returns
    -------
    float
        ``(P_current - P_previous) * instrument.risk_scale``.
    """
    current_price = instrument.price()
    previous_price = instrument.with_market(previous).price()
    return (current_price - previous_price) * instrument.risk_scale


class RiskPosition:
    """One instrument plus the market snapshot of its last risk query.

    The previous snapshot starts as the instrument's initial market, so the
    first ``risk()`` is zero.  Calls on one position are serialised by an
    instance lock; positions share no state.
    """

    def __init__(self, instrument: Instrument, previous: Optional[MarketSnapshot] = None):
        self._lock = threading.Lock()
        self.instrument = instrument
        self.previous = instrument.snapshot() if previous is None else previous

    def __repr__(self) -> str:
        return f"RiskPosition({self.instrument!r}, previous={self.previous!r})"

    def price(self) -> float:
        with self._lock:
            return self.instrument.price()

    def update(self, **fields: float) -> None:
        """Apply a market tick, e.g. ``update(spot=101.5, volatility=0.22)``.

        Accepted fields: ``spot``, ``volatility``, ``rate``, ``carry``.
        """
        with self._lock:
            snap = replace(self.instrument.snapshot(), **fields)
            self.instrument = self.instrument.with_market(snap)

    def commit(self, snapshot: Optional[MarketSnapshot] = None) -> None:
        """Make ``snapshot`` (default: the current market) the new baseline."""
        with self._lock:
            self.previous = self.instrument.snapshot() if snapshot is None else snapshot
            logger.debug("committed %s", self.previous)

    def pending(self) -> tuple[Instrument, MarketSnapshot]:
        """Consistent (instrument, previous) pair for out-of-process pricing."""
        with self._lock:
            return self.instrument, self.previous

    def risk(self) -> float:
        """Risk since the last query; advances the baseline to the current market."""
        with self._lock:
            value = market_risk(self.instrument, self.previous)
            self.previous = self.instrument.snapshot()
        logger.debug("risk %.6f for %s", value, type(self.instrument).__name__)
        return value


# ---------------------------------------------------------------------------
# Numerical Greeks
# ---------------------------------------------------------------------------

def numerical_greeks(
    pricer_func: Callable[[InstrumentState], float],
    state: InstrumentState,
    *,
    bump_pct: float = 0.01,
) -> dict[str, float]:
    """Compute Greeks via central finite differences on an arbitrary pricer.

    Parameters
    ----------
    pricer_func : callable
        ``pricer_func(state) -> float``, e.g. ``black_scholes.price_state``
        or ``lambda s: barrier_price(s, config)``.
    state : InstrumentState
        Point at which to differentiate.
    bump_pct : float
        Relative bump size for spot and vol; absolute for rate (default 0.01).

    Returns
    -------
    dict[str, float]
        Keys: ``delta``, ``gamma``, ``vega``, ``theta``, ``rho``.  Rho moves
        the carry together with the rate.
    """
    P0 = pricer_func(state)
    S, sigma, T = state.spot, state.volatility, state.maturity

    # --- Delta & Gamma (spot bump) ---
    eps_S = bump_pct * S
    P_up = pricer_func(replace(state, spot=S + eps_S))
    P_dn = pricer_func(replace(state, spot=S - eps_S))
    delta = (P_up - P_dn) / (2.0 * eps_S)
    gamma = (P_up - 2.0 * P0 + P_dn) / (eps_S ** 2)

    # --- Vega (vol bump) ---
    eps_v = max(bump_pct * sigma, 1e-4)
    P_vup = pricer_func(replace(state, volatility=sigma + eps_v))
    P_vdn = pricer_func(replace(state, volatility=max(sigma - eps_v, 1e-6)))
    vega = (P_vup - P_vdn) / (2.0 * eps_v)

    # --- Theta (time decay, 1-day bump) ---
    dt = 1.0 / 365.0
    if T > dt:
        P_t = pricer_func(replace(state, maturity=T - dt))
        theta_val = (P_t - P0) / dt
    else:
        theta_val = 0.0

    # --- Rho (rate bump) ---
    eps_r = bump_pct
    P_rup = pricer_func(replace(state, rate=state.rate + eps_r, carry=state.carry + eps_r))
    P_rdn = pricer_func(replace(state, rate=state.rate - eps_r, carry=state.carry - eps_r))
    rho = (P_rup - P_rdn) / (2.0 * eps_r)

    return {
        "delta": float(delta),
        "gamma": float(gamma),
        "vega": float(vega),
        "theta": float(theta_val),
        "rho": float(rho),
    }


# ---------------------------------------------------------------------------
# Portfolio risk
# ---------------------------------------------------------------------------

def _risk_job(args: tuple[Instrument, MarketSnapshot]) -> float:
    instrument, previous = args
    return market_risk(instrument, previous)


def portfolio_risk(
    positions: list[RiskPosition],
    *,
    max_workers: Optional[int] = None,
) -> dict:
    """Aggregate risk over a book and commit every position.

    Every position's lock is held from reading its baseline to committing
    the new one, so a concurrent ``update()`` or ``risk()`` on a position
    waits for the portfolio run and then measures from the committed state.

    Parameters
    ----------
    positions : list of RiskPosition
    max_workers : int, optional
        Worker processes for the repricing.  ``None`` or 1 prices serially.

    Returns
    -------
    dict
        ``"total_risk"`` and ``"position_risk"`` (list, same order as input).
    """
    with ExitStack() as stack:
        # Fixed acquisition order; a position listed twice is locked once.
        unique = {id(pos): pos for pos in positions}
        for key in sorted(unique):
            stack.enter_context(unique[key]._lock)

        jobs = [(pos.instrument, pos.previous) for pos in positions]

        if max_workers is None or max_workers <= 1 or len(jobs) <= 1:
            values = [_risk_job(job) for job in jobs]
        else:
            with ProcessPoolExecutor(max_workers=max_workers) as ex:
                values = list(ex.map(_risk_job, jobs))

        for pos, (instrument, _) in zip(positions, jobs):
            pos.previous = instrument.snapshot()

    total = float(sum(values))
    logger.debug("portfolio risk %.6f over %d positions", total, len(positions))
    return {
        "total_risk": total,
        "position_risk": [float(v) for v in values],
    }
