"""
Pydantic Data Models for Edition Pricing

This module defines the data model of the pricing engine: the closed-form pricing
configurations, the piecewise cubic Bezier curve definition, and the result records
returned by the evaluators, the validator and the analytics helpers.

Key Components:
- NamedCurveType Enum: Closed-form shapes that have a Bezier template
- ControlPoint, Segment, CurveData: Normalized piecewise Bezier price curve
- LinearPricing, ExponentialPricing, LogarithmicPricing, BezierPricing: The tagged
  union of pricing configurations, discriminated by their ``type`` field
- Result models: ValidationResult, PricePoint, CurvePoint, BezierSolution, RevenueRow,
  RoiQuote, Milestone, TokenomicsSummary

Serialization:
- Python attributes are snake_case; the JSON form uses camelCase field names
  (basePrice, growthRate, minPrice, maxSupply, ...). Both are accepted on input.
- All models are frozen. Editing a curve produces a new value.

Monetary fields are expressed in integer minor units (lamports). Decimal amounts are
accepted so that previews denominated in whole units still parse.
"""
import json
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from mcp_bonding_curve.errors import InvalidPricingConfigError

Amount = Union[int, Decimal]


class NamedCurveType(str, Enum):
    linear = "linear"
    exponential = "exponential"
    logarithmic = "logarithmic"


class PricingModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# --- Bezier Curve Definition ---

class ControlPoint(PricingModel):
    # Range is checked by the validator, not here
    x: float
    y: float


class Segment(PricingModel):
    p0: ControlPoint  # start, on the curve
    p1: ControlPoint  # handle
    p2: ControlPoint  # handle
    p3: ControlPoint  # end, on the curve


class CurveData(PricingModel):
    segments: Tuple[Segment, ...]
    min_price: Amount
    max_price: Amount


# --- Pricing Configurations ---

class LinearPricing(PricingModel):
    type: Literal["linear"] = "linear"
    base_price: Amount
    increment: Amount
    max_supply: int = Field(..., ge=1)


class ExponentialPricing(PricingModel):
    type: Literal["exponential"] = "exponential"
    base_price: Amount
    growth_rate: float = Field(..., gt=-1)
    max_supply: int = Field(..., ge=1)


class LogarithmicPricing(PricingModel):
    type: Literal["logarithmic"] = "logarithmic"
    base_price: Amount
    scale: Amount
    max_supply: int = Field(..., ge=1)


class BezierPricing(PricingModel):
    type: Literal["bezier"] = "bezier"
    curve: CurveData
    max_supply: int = Field(..., ge=1)


PricingConfig = Annotated[
    Union[LinearPricing, ExponentialPricing, LogarithmicPricing, BezierPricing],
    Field(discriminator="type"),
]

_pricing_config_adapter = TypeAdapter(PricingConfig)


def parse_pricing_config(data: Union[str, bytes, dict]) -> PricingConfig:
    """
    Parses a pricing configuration from a JSON string or an already decoded mapping.

    Raises:
        InvalidPricingConfigError: If the JSON is malformed or does not match any variant.
    """
    try:
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        return _pricing_config_adapter.validate_python(data)
    except json.JSONDecodeError as e:
        raise InvalidPricingConfigError(f"Invalid JSON: {e}") from e
    except ValidationError as e:
        raise InvalidPricingConfigError(f"Invalid pricing configuration: {e}") from e


def parse_curve_data(data: Union[str, bytes, dict]) -> CurveData:
    """Parses a curve definition from JSON or a mapping, raising InvalidPricingConfigError on failure."""
    try:
        if isinstance(data, (str, bytes)):
            return CurveData.model_validate_json(data)
        return CurveData.model_validate(data)
    except ValidationError as e:
        raise InvalidPricingConfigError(f"Invalid curve definition: {e}") from e


# --- Results ---

class ValidationResult(PricingModel):
    valid: bool
    errors: Tuple[str, ...] = ()


class PricePoint(PricingModel):
    supply: int
    price: Decimal


class CurvePoint(PricingModel):
    x: float
    y: float


class BezierSolution(PricingModel):
    """Outcome of inverting a curve at one x: the curve value and how the solver got there."""
    y: float
    t: float
    converged: bool
    iterations: int


class RevenueRow(PricingModel):
    supply: int
    price: Decimal
    cumulative_revenue: Decimal


class RoiQuote(PricingModel):
    buy_price: Decimal
    sell_price: Decimal
    profit: Decimal
    roi_percentage: Decimal


class Milestone(PricingModel):
    percent: int
    edition: int
    price: Decimal
    revenue: Decimal


class TokenomicsSummary(PricingModel):
    current_price: Decimal
    first_price: Decimal
    last_price: Decimal
    mid_price: Decimal
    average_price: Decimal
    total_revenue: Decimal
    current_revenue: Decimal
    remaining_revenue: Decimal
    price_appreciation: Optional[Decimal] = None
    remaining_supply: int
    milestones: Tuple[Milestone, ...] = ()


def dump_json(value: Any) -> str:
    """Serializes a model or a list of models with camelCase field names."""
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True)
    return json.dumps(
        [item.model_dump(mode="json", by_alias=True) if isinstance(item, BaseModel) else item for item in value]
    )
