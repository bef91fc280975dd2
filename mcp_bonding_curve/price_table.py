"""
On-chain Price Table Generation

The on-chain mint program cannot evaluate a parametric curve cheaply at transaction time.
Instead, every edition price is computed off-chain, rounded down to an integer number of
minor units, and stored verbatim in a lookup account. At mint time the program requires the
buyer's payment to equal table[edition_index] exactly.

Table Layout:
- Entry i holds the price of edition i + 1, i.e. calculate_bezier_price(i + 1, max_supply)
- Length is exactly max_supply

Capacity Policy:
- A lookup account holds at most PRICE_TABLE_CAPACITY entries
- generate_price_table rejects larger tables with PriceTableCapacityError
- generate_price_table_chunks splits the full table into bounded chunks instead
- Tables are never silently truncated

Monotonicity is not enforced; a decreasing table is legal at this layer.

Performance:
- Each entry is independent, so large tables can be evaluated in a process pool
  (``workers`` > 1). Output order is always by edition index.
"""
import time
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List, Optional

from mcp_bonding_curve.bezier import calculate_bezier_price
from mcp_bonding_curve.config import PRICE_TABLE_CAPACITY, PRICE_TABLE_WORKERS
from mcp_bonding_curve.errors import PriceTableCapacityError
from mcp_bonding_curve.schemas import CurveData
from mcp_bonding_curve.utils import format_lamports_to_sol, to_minor_units
from mcp.server.fastmcp.utilities.logging import get_logger

logger = get_logger(__name__)


def _edition_price(edition: int, max_supply: int, curve: CurveData) -> int:
    return to_minor_units(calculate_bezier_price(edition, max_supply, curve))


def _compute_prices(curve: CurveData, max_supply: int, workers: Optional[int]) -> List[int]:
    if max_supply < 1:
        raise ValueError("Max supply must be a positive integer")

    if workers is None:
        workers = PRICE_TABLE_WORKERS

    start_time = time.time()
    price_of = partial(_edition_price, max_supply=max_supply, curve=curve)
    editions = range(1, max_supply + 1)

    if workers > 1:
        chunksize = max(1, max_supply // (workers * 4))
        with ProcessPoolExecutor(max_workers=workers) as executor:
            prices = list(executor.map(price_of, editions, chunksize=chunksize))
    else:
        prices = [price_of(edition) for edition in editions]

    duration = time.time() - start_time
    logger.debug(f"Computed {len(prices)} edition prices in {duration:.3f}s (workers={workers})")
    return prices


def generate_price_table(
    curve: CurveData,
    max_supply: int,
    capacity: int = PRICE_TABLE_CAPACITY,
    workers: Optional[int] = None,
) -> List[int]:
    """
    Generates the integer price table for a Bezier-priced collection.

    Args:
        curve: The price curve.
        max_supply: Number of editions; the table has exactly this many entries.
        capacity: Maximum entries a single lookup account can store.
        workers: Worker processes; None uses PRICE_TABLE_WORKERS, 0 or 1 runs sequentially.

    Returns:
        Prices in minor units, entry i for edition i + 1.

    Raises:
        PriceTableCapacityError: If max_supply exceeds capacity.
        ValueError: If max_supply is not positive.
    """
    if max_supply > capacity:
        logger.warning(f"Rejected price table of {max_supply} entries (capacity {capacity})")
        raise PriceTableCapacityError(max_supply, capacity)

    prices = _compute_prices(curve, max_supply, workers)
    logger.info(f"Generated price table with {len(prices)} entries, price range "
                f"{format_lamports_to_sol(prices[0])} - {format_lamports_to_sol(prices[-1])} SOL")
    return prices


def generate_price_table_chunks(
    curve: CurveData,
    max_supply: int,
    chunk_size: int = PRICE_TABLE_CAPACITY,
    workers: Optional[int] = None,
    capacity: int = PRICE_TABLE_CAPACITY,
) -> List[List[int]]:
    """
    Generates the full price table split into chunks of at most chunk_size entries, one
    per lookup account. Concatenating the chunks gives the table for all editions.

    Raises:
        PriceTableCapacityError: If chunk_size exceeds capacity.
        ValueError: If max_supply or chunk_size is not positive.
    """
    if chunk_size < 1:
        raise ValueError("Chunk size must be a positive integer")
    if chunk_size > capacity:
        logger.warning(f"Rejected price table chunks of {chunk_size} entries (capacity {capacity})")
        raise PriceTableCapacityError(chunk_size, capacity)

    prices = _compute_prices(curve, max_supply, workers)
    chunks = [prices[i:i + chunk_size] for i in range(0, len(prices), chunk_size)]
    logger.info(f"Generated price table with {len(prices)} entries in {len(chunks)} chunk(s)")
    return chunks
