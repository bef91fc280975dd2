"""
Custom Exception Classes for the Bonding Curve Pricing Engine

This module defines the exceptions raised by the pricing engine and its MCP service layer.
Only a small set of conditions are treated as hard failures; most problems are reported
without raising so that an editor can surface every issue at once.

Exception Categories:
- Capacity Errors: A price table does not fit the on-chain storage account
- Input Errors: Malformed pricing configurations received at the service edge
- Computation Errors: Prices too large for the fixed-point context
- Configuration Errors: Invalid environment settings

Not Exceptions:
- Structural curve problems (segment count, price bounds, coordinate ranges) are
  collected by the validator and returned as a list of messages.
- Newton-Raphson non-convergence returns the best estimate found.
- Unknown pricing-config variants fall back to their base price.
"""


class PricingError(Exception):
    """Base class for errors raised by the pricing engine."""


class PriceTableCapacityError(PricingError):
    """Raised when a requested price table exceeds the storage account capacity."""

    def __init__(self, max_supply: int, capacity: int):
        self.max_supply = max_supply
        self.capacity = capacity
        super().__init__(
            f"Price table of {max_supply} entries exceeds the capacity of {capacity} entries per account"
        )


class InvalidPricingConfigError(PricingError):
    """Raised when a pricing configuration cannot be parsed or fails schema validation."""


class PriceComputationError(PricingError):
    """Raised when a price falls outside the range of fixed-point arithmetic."""


class ConfigurationError(Exception):
    """Raised when there are configuration-related errors."""
