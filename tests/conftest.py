import pytest

from mcp_bonding_curve.curve_builder import default_s_curve
from mcp_bonding_curve.schemas import ControlPoint, CurveData, Segment

MIN_PRICE = 100_000_000  # 0.1 SOL
MAX_PRICE = 1_100_000_000  # 1.1 SOL


def make_segment(*points):
    p0, p1, p2, p3 = (ControlPoint(x=x, y=y) for x, y in points)
    return Segment(p0=p0, p1=p1, p2=p2, p3=p3)


@pytest.fixture
def s_curve():
    return default_s_curve(MIN_PRICE, MAX_PRICE)


@pytest.fixture
def two_segment_curve():
    """Increasing two-segment curve whose x control points are evenly spaced per segment."""
    first = make_segment((0.0, 0.0), (1 / 6, 0.1), (1 / 3, 0.3), (0.5, 0.4))
    second = make_segment((0.5, 0.4), (2 / 3, 0.5), (5 / 6, 0.9), (1.0, 1.0))
    return CurveData(segments=(first, second), min_price=MIN_PRICE, max_price=MAX_PRICE)


@pytest.fixture
def decreasing_curve():
    segment = make_segment((0.0, 1.0), (1 / 3, 0.8), (2 / 3, 0.2), (1.0, 0.0))
    return CurveData(segments=(segment,), min_price=MIN_PRICE, max_price=MAX_PRICE)
