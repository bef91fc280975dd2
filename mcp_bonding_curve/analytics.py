"""
Revenue and Tokenomics Projections

Higher-level helpers built on the pricing engine: averages, revenue tables, ROI quotes,
price targets and the tokenomics summary shown next to the pricing editor. All amounts are
Decimals in minor units computed with the same fixed-point context as the prices.
"""
from decimal import Decimal
from typing import List, Optional, Union

from mcp_bonding_curve.pricing import calculate_price, calculate_total_cost
from mcp_bonding_curve.schemas import (
    Amount,
    ExponentialPricing,
    LinearPricing,
    LogarithmicPricing,
    Milestone,
    NamedCurveType,
    PricingConfig,
    RevenueRow,
    RoiQuote,
    TokenomicsSummary,
)
from mcp_bonding_curve.utils import price_context, to_decimal
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)

MILESTONE_PERCENTAGES = (25, 50, 75, 100)


def calculate_average_price(max_supply: int, config: PricingConfig) -> Decimal:
    """Average price over editions 0..max_supply - 1."""
    if max_supply <= 0:
        raise ValueError("Max supply must be a positive integer")
    total = calculate_total_cost(0, max_supply, config)
    with price_context():
        return total / max_supply


def find_supply_at_price(target_price: Amount, config: PricingConfig, max_supply: int = 10000) -> Optional[int]:
    """Returns the first supply whose price reaches target_price, or None if none up to max_supply does."""
    target = to_decimal(target_price)
    for supply in range(max_supply + 1):
        if calculate_price(supply, config) >= target:
            return supply
    return None


def calculate_roi(buy_supply: int, sell_supply: int, config: PricingConfig) -> RoiQuote:
    """
    Return on buying at one supply and selling at the price of another.

    Raises:
        ValueError: If the buy price is zero.
    """
    buy_price = calculate_price(buy_supply, config)
    sell_price = calculate_price(sell_supply, config)
    if buy_price == 0:
        raise ValueError("ROI is undefined for a zero buy price")
    with price_context():
        profit = sell_price - buy_price
        roi_percentage = profit / buy_price * 100
    return RoiQuote(buy_price=buy_price, sell_price=sell_price, profit=profit, roi_percentage=roi_percentage)


def calculate_appreciation_rate(start_supply: int, end_supply: int, config: PricingConfig) -> Decimal:
    """
    Percentage price change between two supplies.

    Raises:
        ValueError: If the start price is zero.
    """
    start_price = calculate_price(start_supply, config)
    end_price = calculate_price(end_supply, config)
    if start_price == 0:
        raise ValueError("Appreciation is undefined for a zero start price")
    with price_context():
        return (end_price - start_price) / start_price * 100


def generate_revenue_table(start_supply: int, end_supply: int, config: PricingConfig, step: int = 1) -> List[RevenueRow]:
    """Prices with running revenue for supplies start_supply..end_supply (inclusive) every `step`."""
    if step <= 0:
        raise ValueError("Step must be a positive integer")

    rows = []
    cumulative_revenue = Decimal(0)
    for supply in range(start_supply, end_supply + 1, step):
        price = calculate_price(supply, config)
        with price_context():
            cumulative_revenue = cumulative_revenue + price
        rows.append(RevenueRow(supply=supply, price=price, cumulative_revenue=cumulative_revenue))
    return rows


def estimate_optimal_curve(
    max_supply: int,
    target_floor_price: Amount,
    target_ceiling_price: Amount,
    curve_type: Union[NamedCurveType, str] = NamedCurveType.exponential,
) -> PricingConfig:
    """
    Derives closed-form parameters that start at a floor price and reach a ceiling price.

    Raises:
        ValueError: For a non-positive max_supply, an unknown curve type, or a non-positive
            floor or ceiling price on an exponential curve.
    """
    if max_supply <= 0:
        raise ValueError("Max supply must be a positive integer")
    curve_type = NamedCurveType(curve_type)

    with price_context():
        floor = to_decimal(target_floor_price)
        ceiling = to_decimal(target_ceiling_price)

        if curve_type == NamedCurveType.linear:
            increment = (ceiling - floor) / max_supply
            return LinearPricing(base_price=target_floor_price, increment=increment, max_supply=max_supply)
        elif curve_type == NamedCurveType.exponential:
            if floor <= 0 or ceiling <= 0:
                raise ValueError("Exponential curves need positive floor and ceiling prices")
            growth_rate = float((ceiling / floor) ** (Decimal(1) / max_supply) - 1)
            return ExponentialPricing(base_price=target_floor_price, growth_rate=growth_rate, max_supply=max_supply)
        else:
            scale = (ceiling - floor) / Decimal(max_supply + 1).ln()
            return LogarithmicPricing(base_price=target_floor_price, scale=scale, max_supply=max_supply)


def summarize_tokenomics(config: PricingConfig, current_edition: int, total_supply: Optional[int] = None) -> TokenomicsSummary:
    """
    Computes the revenue and price projections for a collection.

    Editions are numbered from 1. Revenue figures sum the prices of editions
    1..total_supply; current revenue covers editions already minted.
    """
    total_supply = total_supply or config.max_supply
    if total_supply <= 0:
        raise ValueError("Total supply must be a positive integer")
    if not 0 <= current_edition <= total_supply:
        raise ValueError("Current edition must be between 0 and the total supply")

    first_price = calculate_price(1, config)
    last_price = calculate_price(total_supply, config)
    total_revenue = calculate_total_cost(1, total_supply, config)
    current_revenue = calculate_total_cost(1, current_edition, config)
    remaining_revenue = calculate_total_cost(current_edition + 1, total_supply - current_edition, config)

    with price_context():
        average_price = total_revenue / total_supply
        price_appreciation = (last_price - first_price) / first_price * 100 if first_price else None

    milestones = []
    for percent in MILESTONE_PERCENTAGES:
        edition = total_supply * percent // 100
        milestones.append(Milestone(
            percent=percent,
            edition=edition,
            price=calculate_price(edition, config),
            revenue=calculate_total_cost(1, edition, config),
        ))

    return TokenomicsSummary(
        current_price=calculate_price(max(1, current_edition + 1), config),
        first_price=first_price,
        last_price=last_price,
        mid_price=calculate_price(total_supply // 2, config),
        average_price=average_price,
        total_revenue=total_revenue,
        current_revenue=current_revenue,
        remaining_revenue=remaining_revenue,
        price_appreciation=price_appreciation,
        remaining_supply=total_supply - current_edition,
        milestones=tuple(milestones),
    )
