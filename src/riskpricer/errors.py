"""Exceptions raised by the pricers.

Both are ``ValueError`` subclasses, so callers that already guard pricing
calls with ``except ValueError`` keep working.
"""


class PricingError(ValueError):
    """Base class for pricing failures."""


class DomainError(PricingError):
    """Raised at price time when S, K, sigma or T is not strictly positive."""


class ConfigurationError(PricingError):
    """Raised when a barrier configuration is not one of the legal patterns."""
