from __future__ import annotations
from dataclasses import dataclass, replace


CALL = "call"
PUT  = "put"


# ---------------------------------------------------------------------------
# Market snapshot: the part of an instrument that moves between risk queries
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class MarketSnapshot:
    """Market-dependent inputs used for period-over-period risk.

    Parameters
    ----------
    spot : float
        Underlying price.
    volatility : float
        Annualised volatility (ignored by spot and futures).
    rate : float
        Continuously-compounded domestic rate.
    carry : float | None
        Cost of carry ``b``.  Defaults to ``rate`` (domestic underlying).
    """
    spot: float
    volatility: float = 0.0
    rate: float = 0.0
    carry: float | None = None

    def __post_init__(self):
        if self.carry is None:
            object.__setattr__(self, "carry", self.rate)


# ---------------------------------------------------------------------------
# Full option state: contract terms plus current market
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class InstrumentState:
    """Everything the option pricers need for one contract.

    Parameters
    ----------
    spot : float
        Current underlying price ``S``.
    strike : float
        Strike ``K``.
    rate : float
        Domestic rate ``r``.
    volatility : float
        ``sigma``.
    maturity : float
        Time to maturity in years ``T``.
    kind : str
        ``"call"`` or ``"put"``.
    multiplier : float
        Contract multiplier ``M`` (default 1).
    carry : float | None
        Cost of carry ``b``; ``None`` means ``b = r``.
    fx_rate : float
        Helper exchange rate ``H`` converting to the reporting currency
        (default 1 for domestic instruments).

    Positivity of ``spot``, ``strike``, ``volatility`` and ``maturity`` is
    checked by the pricer, not here: states are replaced on every market
    tick and the check belongs to the computation that needs it.
    """
    spot: float
    strike: float
    rate: float
    volatility: float
    maturity: float
    kind: str = CALL
    multiplier: float = 1.0
    carry: float | None = None
    fx_rate: float = 1.0

    def __post_init__(self):
        if self.kind not in (CALL, PUT):
            raise ValueError(f"kind must be 'call' or 'put', got {self.kind!r}")
        if self.carry is None:
            object.__setattr__(self, "carry", self.rate)

    @property
    def is_call(self) -> bool:
        return self.kind == CALL

    def snapshot(self) -> MarketSnapshot:
        """Return the market-dependent subset (S, sigma, r, b)."""
        return MarketSnapshot(
            spot=self.spot, volatility=self.volatility,
            rate=self.rate, carry=self.carry,
        )

    def with_market(self, snap: MarketSnapshot) -> InstrumentState:
        """Copy of this state with the market fields taken from ``snap``."""
        return replace(
            self, spot=snap.spot, volatility=snap.volatility,
            rate=snap.rate, carry=snap.carry,
        )
