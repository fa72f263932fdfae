"""Instrument variants sharing the ``price`` / ``risk`` capability set.

Every instrument is an immutable value: market ticks produce a new instance
through ``with_market``.  Pricing math stays in free functions
(``black_scholes``, ``barrier``); the classes here only bind contract terms
to those functions and declare how a price difference is scaled into risk.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Protocol, runtime_checkable

from .barrier import BarrierConfig, BarrierType, barrier_price
from .black_scholes import greeks_state, price_state
from .core import InstrumentState, MarketSnapshot

__all__ = [
    "DAY_COUNT",
    "Instrument",
    "SpotPosition",
    "FutureContract",
    "VanillaOption",
    "BarrierOption",
]

# Futures accrue on ACT/360.
DAY_COUNT = 360.0


@runtime_checkable
class Instrument(Protocol):
    """Anything the risk protocol can price and re-price.

    ``price()`` returns the contract value including its multiplier;
    ``risk_scale`` converts a price difference into reporting-currency P&L.
    """

    @property
    def risk_scale(self) -> float:
        ...

    def price(self) -> float:
        ...

    def snapshot(self) -> MarketSnapshot:
        ...

    def with_market(self, snap: MarketSnapshot) -> Instrument:
        ...


@dataclass(frozen=True)
class SpotPosition:
    """Cash position in the underlying, valued at ``S * H``."""

    spot: float
    fx_rate: float = 1.0

    @property
    def risk_scale(self) -> float:
        # price() already converts to the reporting currency
        return 1.0

    def price(self) -> float:
        return self.spot * self.fx_rate

    def snapshot(self) -> MarketSnapshot:
        return MarketSnapshot(spot=self.spot)

    def with_market(self, snap: MarketSnapshot) -> SpotPosition:
        return replace(self, spot=snap.spot)


@dataclass(frozen=True)
class FutureContract:
    """Cost-of-carry future, ``F = S e^{(r - c) days/360} M``.

    ``carry`` is the yield earned by holding the underlying (the foreign
    rate for an FX future).  Risk is scaled by ``notional * fx_rate``.
    """

    spot: float
    rate: float
    carry: float
    multiplier: float
    notional: float
    days_to_maturity: int
    fx_rate: float = 1.0

    @property
    def maturity(self) -> float:
        return self.days_to_maturity / DAY_COUNT

    @property
    def risk_scale(self) -> float:
        return self.notional * self.fx_rate

    def price(self) -> float:
        return self.spot * math.exp((self.rate - self.carry) * self.maturity) * self.multiplier

    def snapshot(self) -> MarketSnapshot:
        return MarketSnapshot(spot=self.spot, rate=self.rate, carry=self.carry)

    def with_market(self, snap: MarketSnapshot) -> FutureContract:
        return replace(self, spot=snap.spot, rate=snap.rate, carry=snap.carry)


@dataclass(frozen=True)
class VanillaOption:
    """European option priced with generalised Black-Scholes."""

    state: InstrumentState

    @property
    def risk_scale(self) -> float:
        return self.state.fx_rate

    def price(self) -> float:
        return price_state(self.state)

    def greeks(self) -> dict[str, float]:
        return greeks_state(self.state)

    def snapshot(self) -> MarketSnapshot:
        return self.state.snapshot()

    def with_market(self, snap: MarketSnapshot) -> VanillaOption:
        return replace(self, state=self.state.with_market(snap))


@dataclass(frozen=True)
class BarrierOption:
    """Vanilla option under a ``BarrierConfig``."""

    state: InstrumentState
    config: BarrierConfig

    @classmethod
    def single(
        cls,
        state: InstrumentState,
        barrier_type: BarrierType,
        level: float,
        *,
        rebate: float = 0.0,
        direction: int = 1,
    ) -> BarrierOption:
        config = BarrierConfig.single(
            barrier_type, level, rebate=rebate, direction=direction
        )
        return cls(state=state, config=config)

    @property
    def risk_scale(self) -> float:
        return self.state.fx_rate

    def price(self) -> float:
        return barrier_price(self.state, self.config)

    def snapshot(self) -> MarketSnapshot:
        return self.state.snapshot()

    def with_market(self, snap: MarketSnapshot) -> BarrierOption:
        return replace(self, state=self.state.with_market(snap))
