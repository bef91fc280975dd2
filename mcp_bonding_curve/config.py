import os
import logging
from typing import Optional
from dotenv import load_dotenv

# Import custom errors
from mcp_bonding_curve.errors import ConfigurationError

"""
Configuration Management for the Bonding Curve Pricing Engine

This module loads the numerical and service settings of the pricing engine from environment
variables, with defaults matching the behavior of the on-chain enforcement program and the
editor front end.

Configuration Sources (in order of precedence):
1. Environment variables
2. Default values defined in this module
3. Configuration validation and type conversion

Environment Variables:
    PRICE_TABLE_CAPACITY: Maximum entries per on-chain price table account
    NEWTON_MAX_ITERATIONS: Iteration cap for Bezier curve inversion
    NEWTON_TOLERANCE: Convergence tolerance on |Bx(t) - x|
    NEWTON_DERIVATIVE_EPSILON: Smallest |Bx'(t)| that is still divided by
    NEWTON_INITIAL_GUESS: Starting parameter t for the inversion
    DECIMAL_PRECISION: Significant digits for fixed-point price arithmetic
    DEFAULT_SAMPLE_POINTS: Number of chart points for price previews
    DEFAULT_CURVE_POINTS: Number of points for curve editor previews
    PRICE_TABLE_WORKERS: Worker processes for price table generation (0 = sequential)
    MAX_CONFIG_JSON_SIZE: Largest JSON payload accepted by the MCP tools
    MAX_SUPPLY: Largest supply, quantity or collection size accepted by the MCP tools
    MAX_SAMPLE_POINTS: Largest chart point count accepted by the MCP tools
"""

# Set up logger
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()


def _get_env_int(key: str, default: int, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
    """Get environment variable as integer with validation."""
    try:
        value = int(os.getenv(key, str(default)))
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be a valid integer")
    if min_val is not None and value < min_val:
        raise ConfigurationError(f"Environment variable {key} must be >= {min_val}")
    if max_val is not None and value > max_val:
        raise ConfigurationError(f"Environment variable {key} must be <= {max_val}")
    return value


def _get_env_float(key: str, default: float, min_val: Optional[float] = None, max_val: Optional[float] = None) -> float:
    """Get environment variable as float with validation."""
    try:
        value = float(os.getenv(key, str(default)))
    except ValueError:
        raise ConfigurationError(f"Environment variable {key} must be a valid float")
    if min_val is not None and value < min_val:
        raise ConfigurationError(f"Environment variable {key} must be >= {min_val}")
    if max_val is not None and value > max_val:
        raise ConfigurationError(f"Environment variable {key} must be <= {max_val}")
    return value


LAMPORTS_PER_SOL = 10**9

try:
    # --- On-chain Price Table ---
    PRICE_TABLE_CAPACITY = _get_env_int("PRICE_TABLE_CAPACITY", 1000, min_val=1)
    PRICE_TABLE_WORKERS = _get_env_int("PRICE_TABLE_WORKERS", 0, min_val=0, max_val=256)

    # --- Bezier Inversion (Newton-Raphson) ---
    NEWTON_MAX_ITERATIONS = _get_env_int("NEWTON_MAX_ITERATIONS", 20, min_val=1, max_val=1000)
    NEWTON_TOLERANCE = _get_env_float("NEWTON_TOLERANCE", 1e-4, min_val=0.0, max_val=1.0)
    NEWTON_DERIVATIVE_EPSILON = _get_env_float("NEWTON_DERIVATIVE_EPSILON", 1e-4, min_val=0.0, max_val=1.0)
    NEWTON_INITIAL_GUESS = _get_env_float("NEWTON_INITIAL_GUESS", 0.5, min_val=0.0, max_val=1.0)

    # --- Fixed-point Arithmetic ---
    DECIMAL_PRECISION = _get_env_int("DECIMAL_PRECISION", 20, min_val=1, max_val=100)

    # --- Previews ---
    DEFAULT_SAMPLE_POINTS = _get_env_int("DEFAULT_SAMPLE_POINTS", 50, min_val=1)
    DEFAULT_CURVE_POINTS = _get_env_int("DEFAULT_CURVE_POINTS", 100, min_val=1)

    # --- MCP Service ---
    MAX_CONFIG_JSON_SIZE = _get_env_int("MAX_CONFIG_JSON_SIZE", 100000, min_val=1)
    MAX_SUPPLY = _get_env_int("MAX_SUPPLY", 100000, min_val=1)
    MAX_SAMPLE_POINTS = _get_env_int("MAX_SAMPLE_POINTS", 10000, min_val=1)

    logger.info("Configuration loaded successfully")

except ConfigurationError as e:
    logger.error(f"Configuration error: {e}")
    raise
