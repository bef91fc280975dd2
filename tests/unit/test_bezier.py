import pytest

from conftest import MAX_PRICE, MIN_PRICE, make_segment
from mcp_bonding_curve.bezier import (
    bezier_point,
    calculate_bezier_price,
    evaluate_bezier_curve,
    find_segment_at_x,
    find_t_for_x,
    generate_bezier_curve_points,
    solve_bezier_curve,
)
from mcp_bonding_curve.config import NEWTON_TOLERANCE
from mcp_bonding_curve.curve_builder import default_s_curve, from_named_curve
from mcp_bonding_curve.schemas import CurveData


def test_s_curve_scenario():
    curve = default_s_curve(0.1, 10)
    assert abs(evaluate_bezier_curve(curve, 0) - 0) < NEWTON_TOLERANCE
    assert abs(evaluate_bezier_curve(curve, 1) - 1) < NEWTON_TOLERANCE
    assert 0 < evaluate_bezier_curve(curve, 0.5) < 1


def test_s_curve_is_increasing(s_curve):
    values = [evaluate_bezier_curve(s_curve, i / 20) for i in range(21)]
    assert all(a <= b for a, b in zip(values, values[1:]))


def test_endpoints_match_first_and_last_control_points(two_segment_curve):
    first, last = two_segment_curve.segments[0], two_segment_curve.segments[-1]
    assert abs(evaluate_bezier_curve(two_segment_curve, 0) - first.p0.y) < NEWTON_TOLERANCE
    assert abs(evaluate_bezier_curve(two_segment_curve, 1) - last.p3.y) < NEWTON_TOLERANCE


def test_segment_boundary_uses_shared_endpoint(two_segment_curve):
    assert evaluate_bezier_curve(two_segment_curve, 0.5) == pytest.approx(0.4)


def test_input_is_clamped(s_curve):
    assert evaluate_bezier_curve(s_curve, -0.5) == evaluate_bezier_curve(s_curve, 0)
    assert evaluate_bezier_curve(s_curve, 1.5) == evaluate_bezier_curve(s_curve, 1)


def test_linear_template_tracks_identity():
    curve = from_named_curve("linear", 0, 100)
    for i in range(1, 10):
        x = i / 10
        assert abs(evaluate_bezier_curve(curve, x) - x) < 2 * NEWTON_TOLERANCE


def test_solution_reports_convergence(s_curve):
    solution = solve_bezier_curve(s_curve, 0.3)
    assert solution.converged
    x, y = bezier_point(s_curve.segments[0], solution.t)
    assert abs(x - 0.3) < NEWTON_TOLERANCE
    assert y == solution.y


def test_iteration_cap_returns_best_estimate(s_curve):
    solution = solve_bezier_curve(s_curve, 0.05, max_iterations=1)
    assert not solution.converged
    assert solution.iterations == 1
    assert 0 <= solution.t <= 1


def test_flat_tangent_stops_without_dividing():
    # x(t) has zero slope at t = 0.5
    segment = make_segment((0.0, 0.0), (1.0, 0.2), (0.0, 0.8), (1.0, 1.0))
    curve = CurveData(segments=(segment,), min_price=0, max_price=1)

    solution = solve_bezier_curve(curve, 0.3)
    assert not solution.converged
    assert solution.t == 0.5
    assert solution.y == pytest.approx(0.5)
    assert evaluate_bezier_curve(curve, 0.3) == pytest.approx(0.5)


def test_endpoints_resolve_without_iterating(s_curve):
    segment = s_curve.segments[0]
    assert find_t_for_x(segment, 0.0) == (0.0, True, 0)
    assert find_t_for_x(segment, 1.0) == (1.0, True, 0)


def test_empty_curve_is_identity():
    curve = CurveData(segments=(), min_price=0, max_price=1)
    assert evaluate_bezier_curve(curve, 0.3) == 0.3


def test_segment_lookup_falls_back_to_last_segment():
    first = make_segment((0.0, 0.0), (0.1, 0.1), (0.2, 0.2), (0.3, 0.3))
    second = make_segment((0.4, 0.4), (0.5, 0.5), (0.6, 0.6), (0.7, 0.7))
    assert find_segment_at_x((first, second), 0.2) is first
    assert find_segment_at_x((first, second), 0.35) is second
    assert find_segment_at_x((first, second), 0.9) is second
    assert find_segment_at_x((), 0.5) is None


def test_bezier_price_maps_into_price_range(s_curve):
    assert calculate_bezier_price(0, 100, s_curve) == MIN_PRICE
    assert calculate_bezier_price(100, 100, s_curve) == MAX_PRICE
    # y(0.5) = 0.5 on the symmetric S-curve
    assert calculate_bezier_price(50, 100, s_curve) == MIN_PRICE + (MAX_PRICE - MIN_PRICE) // 2


def test_bezier_price_requires_positive_max_supply(s_curve):
    with pytest.raises(ValueError):
        calculate_bezier_price(1, 0, s_curve)


def test_curve_points_for_preview(s_curve):
    points = generate_bezier_curve_points(s_curve, 10)
    assert len(points) == 11
    assert points[0].x == 0 and points[-1].x == 1
    assert points[-1].y == pytest.approx(1)
