"""
Curve authoring helpers: templates, continuity repair and segment edits.

Every function returns a new CurveData; models are frozen and nothing is edited in place.
"""
from typing import Iterable, Tuple, Union

from mcp_bonding_curve.schemas import Amount, ControlPoint, CurveData, NamedCurveType, Segment
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)

# Hand-tuned visual analogues of the closed-form shapes. They are not fitted to the
# closed-form prices.
NAMED_CURVE_TEMPLATES = {
    NamedCurveType.linear: ((0.0, 0.0), (0.33, 0.33), (0.66, 0.66), (1.0, 1.0)),
    NamedCurveType.exponential: ((0.0, 0.0), (0.1, 0.0), (0.5, 0.7), (1.0, 1.0)),
    NamedCurveType.logarithmic: ((0.0, 0.0), (0.5, 0.3), (0.9, 1.0), (1.0, 1.0)),
}

S_CURVE_TEMPLATE = ((0.0, 0.0), (0.2, 0.0), (0.8, 1.0), (1.0, 1.0))


def _segment(points) -> Segment:
    p0, p1, p2, p3 = (ControlPoint(x=x, y=y) for x, y in points)
    return Segment(p0=p0, p1=p1, p2=p2, p3=p3)


def default_s_curve(min_price: Amount = 0.1, max_price: Amount = 10) -> CurveData:
    """Single-segment S-curve: slow start, fast finish."""
    return CurveData(segments=(_segment(S_CURVE_TEMPLATE),), min_price=min_price, max_price=max_price)


def from_named_curve(curve_type: Union[NamedCurveType, str], min_price: Amount, max_price: Amount) -> CurveData:
    """
    Returns the single-segment Bezier template of a named shape, to be hand-edited.

    Raises:
        ValueError: If curve_type is not linear, exponential or logarithmic.
    """
    curve_type = NamedCurveType(curve_type)
    return CurveData(
        segments=(_segment(NAMED_CURVE_TEMPLATES[curve_type]),),
        min_price=min_price,
        max_price=max_price,
    )


def ensure_continuity(segments: Iterable[Segment]) -> Tuple[Segment, ...]:
    """Makes every segment after the first start exactly where the previous one ends."""
    connected = []
    for segment in segments:
        if connected:
            segment = segment.model_copy(update={"p0": connected[-1].p3})
        connected.append(segment)
    return tuple(connected)


def connect(segments: Iterable[Segment], min_price: Amount, max_price: Amount) -> CurveData:
    """
    Builds a curve from segments, forcing segment[i].p0 = segment[i - 1].p3 for i > 0.

    Only p0 of later segments changes; handles and end points are kept as given, so the
    shape may change. Call after inserting, removing or reordering segments.
    """
    return CurveData(segments=ensure_continuity(segments), min_price=min_price, max_price=max_price)


def reconnect(curve: CurveData) -> CurveData:
    """Repairs continuity of an existing curve."""
    return connect(curve.segments, curve.min_price, curve.max_price)


def clamp_point(x: float, y: float) -> ControlPoint:
    """Clamps editor coordinates into the unit square."""
    return ControlPoint(x=max(0.0, min(1.0, x)), y=max(0.0, min(1.0, y)))


def add_segment(curve: CurveData) -> CurveData:
    """Appends a segment starting at the end of the curve, stepping 0.1 / 0.2 / 0.3 toward (1, 1)."""
    if not curve.segments:
        return curve.model_copy(update={"segments": (_segment(S_CURVE_TEMPLATE),)})

    start = curve.segments[-1].p3
    new_segment = Segment(
        p0=start,
        p1=clamp_point(start.x + 0.1, start.y),
        p2=clamp_point(start.x + 0.2, start.y + 0.2),
        p3=clamp_point(start.x + 0.3, start.y + 0.3),
    )
    return curve.model_copy(update={"segments": curve.segments + (new_segment,)})


def remove_segment(curve: CurveData) -> CurveData:
    """Drops the last segment. A single-segment curve is returned unchanged."""
    if len(curve.segments) <= 1:
        logger.debug("Refusing to remove the only segment of a curve")
        return curve
    return curve.model_copy(update={"segments": curve.segments[:-1]})


def with_price_range(curve: CurveData, min_price: Amount, max_price: Amount) -> CurveData:
    """Returns a copy of the curve with new price bounds."""
    return curve.model_copy(update={"min_price": min_price, "max_price": max_price})
