"""
Curve Definition Validation

Checks a Bezier curve definition before an editor accepts or persists it. All problems are
collected and returned together so they can be shown next to the editor at once; nothing
here raises for a bad curve.

Checks:
- At least one segment
- min_price >= 0
- max_price > min_price
- Every control point coordinate in [0, 1] (segment and point index in the message)
- Optionally, non-decreasing control ordinates per segment (``require_monotonic``)

Continuity between segments is not checked here; editors repair it with
``curve_builder.connect``.
"""
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from mcp_bonding_curve.schemas import CurveData, ValidationResult
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)


def validate_bezier_curve(curve: CurveData, require_monotonic: bool = False) -> ValidationResult:
    """
    Validates a curve definition, accumulating every violation.

    Args:
        curve: The curve to check.
        require_monotonic: Also require each segment's control ordinates to be
            non-decreasing in x and y, which guarantees a non-decreasing price.

    Returns:
        ValidationResult with valid=False and one message per violation.
    """
    errors: List[str] = []

    if not curve.segments:
        errors.append("Curve must have at least one segment")

    if curve.min_price < 0:
        errors.append("Minimum price cannot be negative")

    if curve.max_price <= curve.min_price:
        errors.append("Maximum price must be greater than minimum price")

    for idx, segment in enumerate(curve.segments):
        points = (segment.p0, segment.p1, segment.p2, segment.p3)
        for point_idx, point in enumerate(points):
            if not 0 <= point.x <= 1:
                errors.append(f"Segment {idx}, point {point_idx}: x must be in [0, 1]")
            if not 0 <= point.y <= 1:
                errors.append(f"Segment {idx}, point {point_idx}: y must be in [0, 1]")

        if require_monotonic:
            xs = [point.x for point in points]
            ys = [point.y for point in points]
            if any(a > b for a, b in zip(xs, xs[1:])):
                errors.append(f"Segment {idx}: control point x values must be non-decreasing")
            if any(a > b for a, b in zip(ys, ys[1:])):
                errors.append(f"Segment {idx}: control point y values must be non-decreasing")

    if errors:
        logger.debug(f"Curve validation found {len(errors)} problem(s)")
    return ValidationResult(valid=not errors, errors=tuple(errors))


def validate_curve_payload(data: Union[str, bytes, Mapping[str, Any]], require_monotonic: bool = False) -> ValidationResult:
    """
    Validates raw curve data from an editor.

    Structural problems that prevent parsing (missing fields, wrong types) are reported
    as errors in the result instead of being raised.
    """
    try:
        if isinstance(data, (str, bytes)):
            curve = CurveData.model_validate_json(data)
        else:
            curve = CurveData.model_validate(data)
    except ValidationError as e:
        errors = tuple(
            f"{'.'.join(str(part) for part in error['loc']) or 'curve'}: {error['msg']}"
            for error in e.errors()
        )
        return ValidationResult(valid=False, errors=errors)
    return validate_bezier_curve(curve, require_monotonic=require_monotonic)
