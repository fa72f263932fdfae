# riskpricer: option pricing and period-over-period market risk
# Public API

# Data model
from .core import InstrumentState, MarketSnapshot, CALL, PUT
from .errors import PricingError, DomainError, ConfigurationError

# Normal distribution
from .normal import cdf as norm_cdf, pdf as norm_pdf

# Vanilla pricer
from .black_scholes import (
    price as bs_price, greeks as bs_greeks, price_state, greeks_state,
)

# Batch pricer
from .black_scholes_vec import bs_price_vec, bs_greeks_vec, price_records, RECORD_DTYPE

# Barrier resolver
from .barrier import (
    UP, DOWN, BarrierType, BarrierPattern, BarrierConfig,
    breached, barrier_price,
)

# Instruments
from .instruments import (
    Instrument, SpotPosition, FutureContract, VanillaOption, BarrierOption,
)

# Risk engine
from .risk import market_risk, RiskPosition, numerical_greeks, portfolio_risk

__all__ = [
    # Data model
    "InstrumentState", "MarketSnapshot", "CALL", "PUT",
    "PricingError", "DomainError", "ConfigurationError",
    # Normal
    "norm_cdf", "norm_pdf",
    # Vanilla
    "bs_price", "bs_greeks", "price_state", "greeks_state",
    # Batch
    "bs_price_vec", "bs_greeks_vec", "price_records", "RECORD_DTYPE",
    # Barrier
    "UP", "DOWN", "BarrierType", "BarrierPattern", "BarrierConfig",
    "breached", "barrier_price",
    # Instruments
    "Instrument", "SpotPosition", "FutureContract", "VanillaOption",
    "BarrierOption",
    # Risk
    "market_risk", "RiskPosition", "numerical_greeks", "portfolio_risk",
]

__version__ = "0.1.0"
