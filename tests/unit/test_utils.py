from decimal import Decimal

from mcp_bonding_curve.utils import format_lamports_to_sol, lamports_to_sol, to_minor_units


def test_to_minor_units_rounds_toward_zero():
    assert to_minor_units(Decimal("123.999")) == 123
    assert to_minor_units(Decimal("-1.5")) == -1
    assert to_minor_units(42) == 42


def test_lamports_to_sol():
    assert lamports_to_sol(2_500_000_000) == Decimal("2.5")


def test_format_lamports_to_sol():
    assert format_lamports_to_sol(1_234_567_890) == "1.2345"
    assert format_lamports_to_sol(500_000_000, decimals=2) == "0.50"
