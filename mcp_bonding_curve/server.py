"""
Bonding Curve Pricing Server - MCP Server Implementation

This module exposes the edition pricing engine as MCP tools. Editors use it to preview
prices and validate hand-drawn curves, the mint flow uses it to quote the next edition,
and the deployment flow uses it to produce the integer price table stored on-chain.

Key Features:
- Closed-form (linear, exponential, logarithmic) and Bezier curve pricing
- Exact batch totals and chart sample points
- Curve validation with every problem reported at once
- Bounded price table generation for on-chain enforcement
- Curve templates and tokenomics projections

Conventions:
- Pricing configurations and curves are passed as JSON strings (camelCase field names)
- Results are returned as JSON strings; problems are returned as error strings
- Prices are in lamports; Decimal prices are serialized as strings to keep precision
- Supplies, quantities and collection sizes are capped at MAX_SUPPLY, chart point
  counts at MAX_SAMPLE_POINTS
- A price table that does not fit one account is an explicit error unless the caller
  asks for a split table

License: MIT-0
"""

import json
import time

from pydantic import Field

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.utilities.logging import get_logger

from mcp_bonding_curve import analytics
from mcp_bonding_curve import bezier
from mcp_bonding_curve import curve_builder
from mcp_bonding_curve import price_table
from mcp_bonding_curve import pricing
from mcp_bonding_curve import validator
from mcp_bonding_curve.config import (
    DEFAULT_SAMPLE_POINTS,
    MAX_CONFIG_JSON_SIZE,
    MAX_SAMPLE_POINTS,
    MAX_SUPPLY,
    PRICE_TABLE_CAPACITY,
)
from mcp_bonding_curve.errors import PricingError
from mcp_bonding_curve.schemas import dump_json, parse_curve_data, parse_pricing_config
from mcp_bonding_curve.utils import to_minor_units

logger = get_logger(__name__)

S_CURVE_TEMPLATE_NAME = "s_curve"

# --- Server Setup ---
mcp = FastMCP(name="Bonding Curve Pricing Server")


def check_json_payload(payload: str, name: str) -> None:
    """
    Validate a JSON string argument before parsing.

    Raises:
        ValueError: If the payload is empty or too large
    """
    if not payload or not isinstance(payload, str):
        raise ValueError(f"{name} must be a non-empty JSON string")
    if len(payload) > MAX_CONFIG_JSON_SIZE:
        raise ValueError(f"{name} is too large (max {MAX_CONFIG_JSON_SIZE} characters)")


def check_count(value: int, name: str, limit: int = MAX_SUPPLY) -> None:
    """
    Validate a supply, quantity or point count argument.

    Raises:
        ValueError: If the value is above the limit
    """
    if value > limit:
        raise ValueError(f"{name} is too large (max {limit})")


def log_operation_error(operation: str, error: Exception, duration: float) -> None:
    """Log operation error with structured information."""
    logger.error(f"{operation} failed: {error}, duration: {duration:.3f}s")


# --- MCP Tools ---

@mcp.tool()
async def calculate_price(
    context: Context,
    config_json: str = Field(..., description="The pricing configuration as a JSON string."),
    supply: int = Field(..., description="The number of editions already minted."),
) -> str:
    """Quote the price of the next edition for a given supply."""
    start_time = time.time()
    try:
        check_json_payload(config_json, "Pricing configuration")
        check_count(supply, "Supply")
        config = parse_pricing_config(config_json)
        check_count(config.max_supply, "Max supply")
        price = pricing.calculate_price(supply, config)
        logger.debug(f"Price at supply {supply} for {config.type} curve: {price}")
        return json.dumps({"supply": supply, "price": str(price), "priceLamports": to_minor_units(price)})
    except (PricingError, ValueError) as e:
        log_operation_error("Price calculation", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error calculating price: {e}")
        return "An unexpected error occurred while calculating the price."


@mcp.tool()
async def calculate_total_cost(
    context: Context,
    config_json: str = Field(..., description="The pricing configuration as a JSON string."),
    start_supply: int = Field(..., description="The supply before the first edition of the batch."),
    quantity: int = Field(..., description="The number of editions to mint."),
) -> str:
    """Total cost of minting a batch of editions, priced one by one."""
    start_time = time.time()
    try:
        check_json_payload(config_json, "Pricing configuration")
        check_count(start_supply, "Start supply")
        check_count(quantity, "Quantity")
        config = parse_pricing_config(config_json)
        check_count(config.max_supply, "Max supply")
        total = pricing.calculate_total_cost(start_supply, quantity, config)
        return json.dumps({
            "startSupply": start_supply,
            "quantity": quantity,
            "totalCost": str(total),
            "totalCostLamports": to_minor_units(total),
        })
    except (PricingError, ValueError) as e:
        log_operation_error("Total cost calculation", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error calculating total cost: {e}")
        return "An unexpected error occurred while calculating the total cost."


@mcp.tool()
async def evaluate_bezier_curve(
    context: Context,
    curve_json: str = Field(..., description="The Bezier curve definition as a JSON string."),
    normalized_x: float = Field(..., description="Normalized supply position in [0, 1]."),
) -> str:
    """Evaluate the normalized price of a Bezier curve at a normalized supply."""
    start_time = time.time()
    try:
        check_json_payload(curve_json, "Curve definition")
        curve = parse_curve_data(curve_json)
        solution = bezier.solve_bezier_curve(curve, normalized_x)
        if not solution.converged:
            logger.warning(f"Curve inversion did not converge at x={normalized_x}; returning best estimate")
        return json.dumps({"x": normalized_x, "y": solution.y})
    except (PricingError, ValueError) as e:
        log_operation_error("Curve evaluation", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error evaluating curve: {e}")
        return "An unexpected error occurred while evaluating the curve."


@mcp.tool()
async def generate_sample_points(
    context: Context,
    config_json: str = Field(..., description="The pricing configuration as a JSON string."),
    count: int = Field(DEFAULT_SAMPLE_POINTS, description="Approximate number of chart points."),
) -> str:
    """Generate (supply, price) points for a price chart."""
    start_time = time.time()
    try:
        check_json_payload(config_json, "Pricing configuration")
        check_count(count, "Point count", limit=MAX_SAMPLE_POINTS)
        config = parse_pricing_config(config_json)
        check_count(config.max_supply, "Max supply")
        return dump_json(pricing.generate_sample_points(config, count))
    except (PricingError, ValueError) as e:
        log_operation_error("Sample point generation", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error generating sample points: {e}")
        return "An unexpected error occurred while generating sample points."


@mcp.tool()
async def validate_bezier_curve(
    context: Context,
    curve_json: str = Field(..., description="The Bezier curve definition as a JSON string."),
    require_monotonic: bool = Field(False, description="Also require non-decreasing prices."),
) -> str:
    """Validate a Bezier curve definition and list every problem found."""
    try:
        check_json_payload(curve_json, "Curve definition")
        result = validator.validate_curve_payload(curve_json, require_monotonic=require_monotonic)
        return dump_json(result)
    except ValueError as e:
        logger.error(f"Invalid curve payload: {e}")
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error validating curve: {e}")
        return "An unexpected error occurred while validating the curve."


@mcp.tool()
async def generate_price_table(
    context: Context,
    curve_json: str = Field(..., description="The Bezier curve definition as a JSON string."),
    max_supply: int = Field(..., description="Number of editions in the collection."),
    split: bool = Field(False, description="Split tables larger than one account into chunks."),
) -> str:
    """
    Generate the integer lamport price table enforced on-chain.

    Entry i is the price of edition i + 1. Without ``split``, a collection larger than one
    lookup account is rejected; with ``split`` the table is returned as a list of chunks.
    """
    start_time = time.time()
    try:
        check_json_payload(curve_json, "Curve definition")
        check_count(max_supply, "Max supply")
        curve = parse_curve_data(curve_json)
        result = validator.validate_bezier_curve(curve)
        if not result.valid:
            return f"Error: Invalid curve - {'; '.join(result.errors)}"

        if split:
            chunks = price_table.generate_price_table_chunks(curve, max_supply, chunk_size=PRICE_TABLE_CAPACITY)
            payload = {"maxSupply": max_supply, "chunks": chunks}
        else:
            prices = price_table.generate_price_table(curve, max_supply, capacity=PRICE_TABLE_CAPACITY)
            payload = {"maxSupply": max_supply, "prices": prices}

        logger.info(f"Price table for {max_supply} editions generated in {time.time() - start_time:.3f}s")
        return json.dumps(payload)
    except (PricingError, ValueError) as e:
        log_operation_error("Price table generation", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error generating price table: {e}")
        return "An unexpected error occurred while generating the price table."


@mcp.tool()
async def get_curve_template(
    context: Context,
    curve_type: str = Field(S_CURVE_TEMPLATE_NAME, description="s_curve, linear, exponential or logarithmic."),
    min_price: int = Field(..., description="Minimum price in lamports."),
    max_price: int = Field(..., description="Maximum price in lamports."),
) -> str:
    """Get a starting Bezier curve for the editor."""
    try:
        if curve_type == S_CURVE_TEMPLATE_NAME:
            curve = curve_builder.default_s_curve(min_price, max_price)
        else:
            curve = curve_builder.from_named_curve(curve_type, min_price, max_price)
        return dump_json(curve)
    except ValueError as e:
        logger.error(f"Unknown curve template '{curve_type}': {e}")
        return f"Error: Unknown curve template '{curve_type}'"
    except Exception as e:
        logger.exception(f"Unexpected error building curve template: {e}")
        return "An unexpected error occurred while building the curve template."


@mcp.tool()
async def get_tokenomics(
    context: Context,
    config_json: str = Field(..., description="The pricing configuration as a JSON string."),
    current_edition: int = Field(0, description="Number of editions already minted."),
) -> str:
    """Summarize revenue and price projections for a collection."""
    start_time = time.time()
    try:
        check_json_payload(config_json, "Pricing configuration")
        config = parse_pricing_config(config_json)
        check_count(config.max_supply, "Max supply")
        return dump_json(analytics.summarize_tokenomics(config, current_edition))
    except (PricingError, ValueError) as e:
        log_operation_error("Tokenomics summary", e, time.time() - start_time)
        return f"Error: {e}"
    except Exception as e:
        logger.exception(f"Unexpected error summarizing tokenomics: {e}")
        return "An unexpected error occurred while summarizing tokenomics."


def main() -> None:
    startup_start = time.time()
    logger.info("Starting Bonding Curve Pricing MCP Server...")
    logger.info(f"Server startup completed in {time.time() - startup_start:.3f}s, "
                f"price table capacity {PRICE_TABLE_CAPACITY} entries.")
    try:
        mcp.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.exception(f"Server error: {e}")
    finally:
        logger.info("Server stopped")


# --- Main Execution ---
if __name__ == "__main__":
    main()
