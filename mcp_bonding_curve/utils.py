from decimal import ROUND_DOWN, Context, Decimal, localcontext
from typing import Union

from mcp_bonding_curve.config import DECIMAL_PRECISION, LAMPORTS_PER_SOL


def price_context():
    """Local decimal context for price arithmetic: fixed significant digits, round toward zero."""
    return localcontext(Context(prec=DECIMAL_PRECISION, rounding=ROUND_DOWN))


def to_decimal(value: Union[int, float, Decimal]) -> Decimal:
    """Converts a number to Decimal without inheriting float representation noise."""
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def to_minor_units(price: Union[int, float, Decimal]) -> int:
    """Rounds a price toward zero to a whole number of minor units."""
    return int(to_decimal(price).to_integral_value(rounding=ROUND_DOWN))


def lamports_to_sol(lamports: Union[int, Decimal]) -> Decimal:
    """Convert lamports to SOL."""
    with price_context():
        return Decimal(lamports) / LAMPORTS_PER_SOL


def format_lamports_to_sol(lamports: Union[int, Decimal], decimals: int = 4) -> str:
    """Format a lamport amount as a SOL string with a fixed number of decimal places."""
    sol = lamports_to_sol(lamports)
    return f"{sol.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN):f}"
