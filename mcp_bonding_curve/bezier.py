"""
Piecewise Cubic Bezier Price Curves

This module evaluates user-designed price curves. A curve is a sequence of cubic Bezier
segments over the unit square: x is the normalized supply (minted / max supply) and y is
the normalized price, mapped into [min_price, max_price] only at the very end.

Evaluation Process:
1. Clamp the requested x into [0, 1]
2. Select the segment whose x-range contains x (the last segment if none does)
3. Invert the parametric x(t) of that segment with Newton-Raphson to find t
4. Return y(t)

The inversion is best-effort. Segments whose x is not monotonic in t are representable
and may not converge within the iteration cap; the solver then returns the best t it saw
and reports ``converged=False`` through ``solve_bezier_curve``. Evaluation never raises
for a well-typed curve, so a preview render or a mint quote can always proceed.
"""
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from mcp_bonding_curve.config import (
    DEFAULT_CURVE_POINTS,
    NEWTON_DERIVATIVE_EPSILON,
    NEWTON_INITIAL_GUESS,
    NEWTON_MAX_ITERATIONS,
    NEWTON_TOLERANCE,
)
from mcp_bonding_curve.schemas import BezierSolution, CurveData, CurvePoint, Segment
from mcp_bonding_curve.utils import price_context, to_decimal
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def bezier_point(segment: Segment, t: float) -> Tuple[float, float]:
    """Returns the (x, y) point of a cubic Bezier segment at parameter t."""
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    x = a * segment.p0.x + b * segment.p1.x + c * segment.p2.x + d * segment.p3.x
    y = a * segment.p0.y + b * segment.p1.y + c * segment.p2.y + d * segment.p3.y
    return x, y


def bezier_derivative(segment: Segment, t: float) -> Tuple[float, float]:
    """Returns (dx/dt, dy/dt) of a cubic Bezier segment at parameter t."""
    mt = 1.0 - t
    a = 3.0 * mt * mt
    b = 6.0 * mt * t
    c = 3.0 * t * t
    dx = a * (segment.p1.x - segment.p0.x) + b * (segment.p2.x - segment.p1.x) + c * (segment.p3.x - segment.p2.x)
    dy = a * (segment.p1.y - segment.p0.y) + b * (segment.p2.y - segment.p1.y) + c * (segment.p3.y - segment.p2.y)
    return dx, dy


def find_segment_at_x(segments: Sequence[Segment], x: float) -> Optional[Segment]:
    """
    Finds the first segment whose x-range contains x.

    Falls back to the last segment when none matches, which covers rounding at the
    boundaries and gaps in a curve that has not been reconnected. Returns None only
    for an empty sequence.
    """
    for segment in segments:
        min_x = min(segment.p0.x, segment.p3.x)
        max_x = max(segment.p0.x, segment.p3.x)
        if min_x <= x <= max_x:
            return segment
    return segments[-1] if segments else None


def find_t_for_x(
    segment: Segment,
    target_x: float,
    tolerance: float = NEWTON_TOLERANCE,
    max_iterations: int = NEWTON_MAX_ITERATIONS,
    derivative_epsilon: float = NEWTON_DERIVATIVE_EPSILON,
    initial_guess: float = NEWTON_INITIAL_GUESS,
) -> Tuple[float, bool, int]:
    """
    Solves x(t) = target_x on one segment with Newton-Raphson.

    Args:
        segment: The Bezier segment to invert.
        target_x: The normalized x to hit.
        tolerance: Stop once |x(t) - target_x| is below this.
        max_iterations: Iteration cap.
        derivative_epsilon: Stop instead of dividing when |x'(t)| falls below this.
        initial_guess: Starting t.

    Returns:
        A tuple (t, converged, iterations). When the solver does not converge, t is the
        candidate with the smallest error seen.
    """
    # Endpoints are exact
    if target_x == segment.p0.x:
        return 0.0, True, 0
    if target_x == segment.p3.x:
        return 1.0, True, 0

    t = initial_guess
    best_t = t
    best_error = float("inf")

    for iteration in range(max_iterations):
        x, _ = bezier_point(segment, t)
        error = x - target_x
        if abs(error) < best_error:
            best_t, best_error = t, abs(error)
        if abs(error) < tolerance:
            return t, True, iteration

        dx, _ = bezier_derivative(segment, t)
        if abs(dx) < derivative_epsilon:
            logger.debug(f"Flat tangent at t={t:.6f} while solving for x={target_x:.6f}; keeping best t={best_t:.6f}")
            return best_t, False, iteration

        t = _clamp(t - error / dx)

    # Score the final step too
    x, _ = bezier_point(segment, t)
    error = abs(x - target_x)
    if error < best_error:
        best_t, best_error = t, error
    converged = best_error < tolerance
    if not converged:
        logger.debug(f"Newton-Raphson did not converge for x={target_x:.6f} after {max_iterations} iterations "
                     f"(residual {best_error:.2e})")
    return best_t, converged, max_iterations


def solve_bezier_curve(curve: CurveData, normalized_x: float, **solver_options) -> BezierSolution:
    """
    Evaluates a curve at normalized_x and reports how the inversion went.

    ``solver_options`` are passed through to ``find_t_for_x``.
    """
    x = _clamp(float(normalized_x))
    segment = find_segment_at_x(curve.segments, x)
    if segment is None:
        # No segments: identity curve
        return BezierSolution(y=x, t=x, converged=True, iterations=0)

    t, converged, iterations = find_t_for_x(segment, x, **solver_options)
    _, y = bezier_point(segment, t)
    return BezierSolution(y=y, t=t, converged=converged, iterations=iterations)


def evaluate_bezier_curve(curve: CurveData, normalized_x: float) -> float:
    """Returns the normalized price (y) of a curve at a normalized supply position."""
    return solve_bezier_curve(curve, normalized_x).y


def calculate_bezier_price(current_supply: int, max_supply: int, curve: CurveData) -> Decimal:
    """
    Calculates the price at a given supply using a Bezier curve.

    The supply is normalized by max_supply, the curve is evaluated, and the normalized
    result is mapped into [min_price, max_price] with fixed-point decimal arithmetic
    (round toward zero).

    Raises:
        ValueError: If max_supply is not positive.
    """
    if max_supply <= 0:
        raise ValueError("Max supply must be a positive integer")

    normalized_price = evaluate_bezier_curve(curve, current_supply / max_supply)

    with price_context():
        min_price = to_decimal(curve.min_price)
        price_range = to_decimal(curve.max_price) - min_price
        return min_price + to_decimal(normalized_price) * price_range


def generate_bezier_curve_points(curve: CurveData, num_points: int = DEFAULT_CURVE_POINTS) -> List[CurvePoint]:
    """Samples num_points + 1 evenly spaced points along the curve for previews."""
    if num_points <= 0:
        raise ValueError("Number of points must be positive")
    return [
        CurvePoint(x=i / num_points, y=evaluate_bezier_curve(curve, i / num_points))
        for i in range(num_points + 1)
    ]
