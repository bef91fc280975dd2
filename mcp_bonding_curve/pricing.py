"""
Edition Pricing Engine

This module computes the mint price of sequentially issued editions as a function of how many
have already been issued (the supply). Every pricing shape is selected by the variant of the
PricingConfig passed in.

Pricing Shapes Supported:
- Linear: price = base_price + supply * increment
- Exponential: price = base_price * (1 + growth_rate) ^ supply
- Logarithmic: price = base_price + scale * ln(supply + 1)
- Bezier: user-designed piecewise cubic curve between min_price and max_price

Key Features:
- Fixed-point Decimal arithmetic (20 significant digits, round toward zero)
- Exact unit-by-unit totals for batch mints (a discrete sum, not an integral)
- Sample points for chart previews
- Explicit fallback to the base price for unrecognized configurations

Price Calculation Process:
1. Validate the supply
2. Dispatch on the configuration variant
3. Evaluate the closed form, or the Bezier curve for curve-based pricing
4. Return the price in minor units as a Decimal; callers round with to_minor_units
"""
from decimal import Decimal, DecimalException
from typing import List

from mcp_bonding_curve.bezier import calculate_bezier_price
from mcp_bonding_curve.config import DEFAULT_SAMPLE_POINTS
from mcp_bonding_curve.errors import PriceComputationError
from mcp_bonding_curve.schemas import (
    BezierPricing,
    ExponentialPricing,
    LinearPricing,
    LogarithmicPricing,
    PricePoint,
    PricingConfig,
)
from mcp_bonding_curve.utils import price_context, to_decimal
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)


def calculate_price(supply: int, config: PricingConfig) -> Decimal:
    """
    Calculates the price of the edition minted when `supply` editions already exist.

    Args:
        supply: The number of editions already issued.
        config: The pricing configuration.

    Returns:
        The price in minor units.

    Raises:
        ValueError: If supply is negative.
        PriceComputationError: If the price does not fit the fixed-point context.
    """
    if supply < 0:
        raise ValueError("Supply must be a non-negative integer")

    try:
        with price_context():
            return _evaluate(supply, config)
    except DecimalException as e:
        logger.error(f"Price at supply {supply} for {type(config).__name__} is out of range: {e!r}")
        raise PriceComputationError(f"Price at supply {supply} is out of range") from e


def _evaluate(supply: int, config: PricingConfig) -> Decimal:
    if isinstance(config, LinearPricing):
        return to_decimal(config.base_price) + supply * to_decimal(config.increment)
    elif isinstance(config, ExponentialPricing):
        return to_decimal(config.base_price) * (1 + to_decimal(config.growth_rate)) ** supply
    elif isinstance(config, LogarithmicPricing):
        return to_decimal(config.base_price) + to_decimal(config.scale) * Decimal(supply + 1).ln()
    elif isinstance(config, BezierPricing):
        return calculate_bezier_price(supply, config.max_supply, config.curve)
    else:
        base_price = getattr(config, "base_price", 0)
        logger.warning(f"Unsupported pricing configuration {type(config).__name__}; "
                       f"falling back to base price {base_price}")
        return to_decimal(base_price)


def calculate_total_cost(start_supply: int, quantity: int, config: PricingConfig) -> Decimal:
    """
    Calculates the total cost of minting `quantity` editions starting at `start_supply`.

    Each edition is priced individually, matching unit-by-unit mint semantics.

    Raises:
        ValueError: If start_supply or quantity is negative.
        PriceComputationError: If a unit price does not fit the fixed-point context.
    """
    if start_supply < 0:
        raise ValueError("Start supply must be a non-negative integer")
    if quantity < 0:
        raise ValueError("Quantity must be a non-negative integer")

    total = Decimal(0)
    for i in range(quantity):
        price = calculate_price(start_supply + i, config)
        with price_context():
            total = total + price
    logger.debug(f"Total cost for {quantity} editions from supply {start_supply}: {total}")
    return total


def generate_sample_points(config: PricingConfig, count: int = DEFAULT_SAMPLE_POINTS) -> List[PricePoint]:
    """
    Generates (supply, price) points for chart previews.

    Supplies are spaced by max(1, max_supply // count) starting at 0, and the final point
    is always max_supply. Not intended for financial enforcement.
    """
    if count <= 0:
        raise ValueError("Point count must be a positive integer")

    step = max(1, config.max_supply // count)
    points = [
        PricePoint(supply=supply, price=calculate_price(supply, config))
        for supply in range(0, config.max_supply + 1, step)
    ]
    if points[-1].supply != config.max_supply:
        points.append(PricePoint(supply=config.max_supply, price=calculate_price(config.max_supply, config)))
    return points
