# barrier.py
# Barrier options layered on the vanilla pricer.
#
# A BarrierConfig switches on any non-empty subset of three levels:
#     B     limit barrier   (option only exists once breached)
#     Hin   knock-in        (vanilla payoff activates on breach)
#     Hout  knock-out       (vanilla payoff is replaced by the rebate on breach)
# Each of the seven subsets has one pricing rule.  Rules are looked up in
# _RULES by pattern; the knock-in/knock-out rule re-enters the table with the
# knock-out-only pattern, whose rule never recurses, so depth is at most one.

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .black_scholes import check_domain, price_state as vanilla_price
from .core import InstrumentState
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "UP",
    "DOWN",
    "LIMIT_HAIRCUT",
    "KNOCK_OUT_OFFSET",
    "BarrierType",
    "BarrierPattern",
    "BarrierConfig",
    "breached",
    "classify",
    "rebate_pv",
    "barrier_price",
]

UP = 1
DOWN = -1

# Flat haircut applied to the vanilla value of a breached limit-only barrier.
LIMIT_HAIRCUT = 0.95

# BarrierType.KNOCK_IN_KNOCK_OUT places Hout this factor beyond Hin.
KNOCK_OUT_OFFSET = 1.10


class BarrierType(Enum):
    """Single-level shorthands accepted by ``BarrierConfig.single``."""
    LIMIT = "limit"
    KNOCK_IN = "knock-in"
    KNOCK_OUT = "knock-out"
    KNOCK_IN_KNOCK_OUT = "knock-in-knock-out"


class BarrierPattern(Enum):
    """The seven legal active sets, as (B, Hin, Hout) flags."""
    LIMIT = (True, False, False)
    KNOCK_IN = (False, True, False)
    KNOCK_OUT = (False, False, True)
    LIMIT_KNOCK_IN = (True, True, False)
    LIMIT_KNOCK_OUT = (True, False, True)
    KNOCK_IN_KNOCK_OUT = (False, True, True)
    LIMIT_KNOCK_IN_KNOCK_OUT = (True, True, True)


def breached(price: float, barrier: float, direction: int) -> bool:
    """``price >= barrier`` for an up barrier, ``price <= barrier`` for down."""
    return (direction == UP and price >= barrier) or (
        direction == DOWN and price <= barrier
    )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BarrierConfig:
    """Barrier levels, rebate and direction of one barrier instrument.

    Parameters
    ----------
    limit : float
        Limit barrier ``B`` (0 = inactive).
    knock_in : float
        Knock-in barrier ``Hin`` (0 = inactive).
    knock_out : float
        Knock-out barrier ``Hout`` (0 = inactive).
    rebate : float
        Cash rebate ``R`` paid at maturity when the option is not live.
    direction : int
        ``UP`` (+1) or ``DOWN`` (-1); shared by every active level.

    Raises
    ------
    ConfigurationError
        No level active, a negative level or rebate, or a direction other
        than +1 / -1.
    """
    limit: float = 0.0
    knock_in: float = 0.0
    knock_out: float = 0.0
    rebate: float = 0.0
    direction: int = UP

    def __post_init__(self):
        if self.direction not in (UP, DOWN):
            raise ConfigurationError(
                f"direction must be +1 (up) or -1 (down), got {self.direction!r}"
            )
        if self.rebate < 0:
            raise ConfigurationError(f"rebate must be non-negative, got {self.rebate}")
        for name in ("limit", "knock_in", "knock_out"):
            if getattr(self, name) < 0:
                raise ConfigurationError(
                    f"{name} must be 0 (inactive) or positive, got {getattr(self, name)}"
                )
        # Fails for the all-zero pattern.
        classify(self)

    @property
    def pattern(self) -> BarrierPattern:
        return classify(self)

    @classmethod
    def single(
        cls,
        barrier_type: BarrierType,
        level: float,
        *,
        rebate: float = 0.0,
        direction: int = UP,
    ) -> BarrierConfig:
        """Build a config from one level and a ``BarrierType``.

        ``KNOCK_IN_KNOCK_OUT`` knocks in at ``level`` and out at
        ``level * KNOCK_OUT_OFFSET``.
        """
        if barrier_type is BarrierType.LIMIT:
            return cls(limit=level, rebate=rebate, direction=direction)
        if barrier_type is BarrierType.KNOCK_IN:
            return cls(knock_in=level, rebate=rebate, direction=direction)
        if barrier_type is BarrierType.KNOCK_OUT:
            return cls(knock_out=level, rebate=rebate, direction=direction)
        if barrier_type is BarrierType.KNOCK_IN_KNOCK_OUT:
            return cls(knock_in=level, knock_out=level * KNOCK_OUT_OFFSET,
                       rebate=rebate, direction=direction)
        raise ConfigurationError(f"unknown barrier type {barrier_type!r}")


def classify(config: BarrierConfig) -> BarrierPattern:
    """Map a config to its active-set pattern."""
    flags = (config.limit > 0, config.knock_in > 0, config.knock_out > 0)
    try:
        return BarrierPattern(flags)
    except ValueError:
        raise ConfigurationError(
            "at least one of limit, knock_in, knock_out must be active"
        ) from None


# ---------------------------------------------------------------------------
# Pricing rules
# ---------------------------------------------------------------------------
def rebate_pv(state: InstrumentState, config: BarrierConfig) -> float:
    """Rebate discounted at the domestic rate, ``R e^{-rT}``."""
    return config.rebate * math.exp(-state.rate * state.maturity)


def _live(state: InstrumentState) -> float:
    return max(vanilla_price(state), 0.0)


Rule = Callable[[InstrumentState, BarrierConfig, float], float]


def _limit(state, config, haircut):
    if breached(state.spot, config.limit, config.direction):
        return max(_live(state) * haircut, 0.0)
    return 0.0


def _knock_in(state, config, haircut):
    if breached(state.spot, config.knock_in, config.direction):
        return _live(state)
    return rebate_pv(state, config)


def _knock_out(state, config, haircut):
    if breached(state.spot, config.knock_out, config.direction):
        return rebate_pv(state, config)
    return _live(state)


def _limit_gate(inner: BarrierPattern) -> Rule:
    def rule(state, config, haircut):
        if not breached(state.spot, config.limit, config.direction):
            return 0.0
        return _resolve(inner, state, config, haircut)
    return rule


def _knock_in_knock_out(state, config, haircut):
    if breached(state.spot, config.knock_out, config.direction):
        return rebate_pv(state, config)
    if breached(state.spot, config.knock_in, config.direction):
        # Knocked in: what remains is a plain knock-out on Hout.
        logger.debug("knock-in breached at S=%s, pricing knock-out leg", state.spot)
        return _resolve(BarrierPattern.KNOCK_OUT, state, config, haircut)
    return rebate_pv(state, config)


_RULES: dict[BarrierPattern, Rule] = {
    BarrierPattern.LIMIT: _limit,
    BarrierPattern.KNOCK_IN: _knock_in,
    BarrierPattern.KNOCK_OUT: _knock_out,
    BarrierPattern.LIMIT_KNOCK_IN: _limit_gate(BarrierPattern.KNOCK_IN),
    BarrierPattern.LIMIT_KNOCK_OUT: _limit_gate(BarrierPattern.KNOCK_OUT),
    BarrierPattern.KNOCK_IN_KNOCK_OUT: _knock_in_knock_out,
    BarrierPattern.LIMIT_KNOCK_IN_KNOCK_OUT: _limit_gate(BarrierPattern.KNOCK_IN_KNOCK_OUT),
}


def _resolve(pattern: BarrierPattern, state, config, haircut) -> float:
    return _RULES[pattern](state, config, haircut)


def barrier_price(
    state: InstrumentState,
    config: BarrierConfig,
    *,
    haircut: float = LIMIT_HAIRCUT,
) -> float:
    """Price a barrier option from its state and barrier configuration.

    Parameters
    ----------
    state : InstrumentState
        Contract and current market.  The vanilla leg includes the
        multiplier; the rebate does not.
    config : BarrierConfig
        Active barrier levels, rebate and direction.
    haircut : float
        Factor in [0, 1] applied to the vanilla value of a breached limit
        barrier (default ``LIMIT_HAIRCUT``).

    Returns
    -------
    float
        Non-negative price.

    Raises
    ------
    DomainError
        If S, K, sigma or T is not positive, whichever branch applies.
    ConfigurationError
        If ``haircut`` lies outside [0, 1].
    """
    check_domain(state.spot, state.strike, state.volatility, state.maturity)
    if not 0.0 <= haircut <= 1.0:
        raise ConfigurationError(f"haircut must lie in [0, 1], got {haircut}")
    pattern = classify(config)
    logger.debug("pricing %s barrier at S=%s", pattern.name, state.spot)
    return _resolve(pattern, state, config, haircut)
