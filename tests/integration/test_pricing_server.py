import json
from unittest.mock import MagicMock

import pytest

from mcp_bonding_curve import server
from mcp_bonding_curve.config import MAX_CONFIG_JSON_SIZE, MAX_SAMPLE_POINTS, MAX_SUPPLY
from mcp_bonding_curve.curve_builder import default_s_curve

LINEAR_CONFIG = json.dumps({"type": "linear", "basePrice": 500000000, "increment": 10000000, "maxSupply": 100})


@pytest.fixture
def mock_context():
    return MagicMock()


@pytest.fixture
def curve_json():
    return default_s_curve(100_000_000, 10_000_000_000).model_dump_json(by_alias=True)


@pytest.mark.asyncio
async def test_calculate_price(mock_context):
    result = await server.calculate_price(context=mock_context, config_json=LINEAR_CONFIG, supply=10)
    data = json.loads(result)
    assert data["supply"] == 10
    assert data["priceLamports"] == 600000000


@pytest.mark.asyncio
async def test_calculate_price_rejects_bad_config(mock_context):
    result = await server.calculate_price(context=mock_context, config_json='{"type": "sigmoid"}', supply=1)
    assert result.startswith("Error:")

    result = await server.calculate_price(context=mock_context, config_json="", supply=1)
    assert result.startswith("Error:")


@pytest.mark.asyncio
async def test_oversized_payload_rejected(mock_context):
    payload = " " * (MAX_CONFIG_JSON_SIZE + 1)
    result = await server.calculate_price(context=mock_context, config_json=payload, supply=1)
    assert result.startswith("Error:")
    assert "too large" in result


@pytest.mark.asyncio
async def test_calculate_total_cost(mock_context):
    result = await server.calculate_total_cost(
        context=mock_context, config_json=LINEAR_CONFIG, start_supply=0, quantity=3
    )
    data = json.loads(result)
    assert data["totalCostLamports"] == 500000000 + 510000000 + 520000000


@pytest.mark.asyncio
async def test_evaluate_bezier_curve(mock_context, curve_json):
    result = await server.evaluate_bezier_curve(context=mock_context, curve_json=curve_json, normalized_x=1.0)
    assert json.loads(result)["y"] == pytest.approx(1.0)


@pytest.mark.asyncio
async def test_generate_sample_points(mock_context):
    result = await server.generate_sample_points(context=mock_context, config_json=LINEAR_CONFIG, count=10)
    points = json.loads(result)
    assert points[0]["supply"] == 0
    assert points[-1]["supply"] == 100
    assert len(points) == 11


@pytest.mark.asyncio
async def test_validate_bezier_curve_lists_every_problem(mock_context):
    curve = json.loads(default_s_curve(10, 5).model_dump_json(by_alias=True))
    curve["segments"][0]["p1"]["x"] = 1.5
    result = await server.validate_bezier_curve(
        context=mock_context, curve_json=json.dumps(curve), require_monotonic=False
    )
    data = json.loads(result)
    assert data["valid"] is False
    assert "Maximum price must be greater than minimum price" in data["errors"]
    assert "Segment 0, point 1: x must be in [0, 1]" in data["errors"]


@pytest.mark.asyncio
async def test_generate_price_table(mock_context, curve_json):
    result = await server.generate_price_table(
        context=mock_context, curve_json=curve_json, max_supply=100, split=False
    )
    prices = json.loads(result)["prices"]
    assert len(prices) == 100
    assert prices[-1] == 10_000_000_000


@pytest.mark.asyncio
async def test_generate_price_table_over_capacity(mock_context, curve_json):
    result = await server.generate_price_table(
        context=mock_context, curve_json=curve_json, max_supply=5000, split=False
    )
    assert result.startswith("Error:")
    assert "exceeds the capacity" in result


@pytest.mark.asyncio
async def test_generate_price_table_split(mock_context, curve_json):
    result = await server.generate_price_table(
        context=mock_context, curve_json=curve_json, max_supply=2500, split=True
    )
    chunks = json.loads(result)["chunks"]
    assert [len(chunk) for chunk in chunks] == [1000, 1000, 500]


@pytest.mark.asyncio
async def test_generate_price_table_rejects_invalid_curve(mock_context):
    curve_json = default_s_curve(10, 5).model_dump_json(by_alias=True)
    result = await server.generate_price_table(
        context=mock_context, curve_json=curve_json, max_supply=10, split=False
    )
    assert result.startswith("Error: Invalid curve")


@pytest.mark.asyncio
async def test_get_curve_template(mock_context):
    result = await server.get_curve_template(
        context=mock_context, curve_type="exponential", min_price=1, max_price=2
    )
    curve = json.loads(result)
    assert curve["minPrice"] == 1
    assert curve["segments"][0]["p2"] == {"x": 0.5, "y": 0.7}

    result = await server.get_curve_template(context=mock_context, curve_type="wobbly", min_price=1, max_price=2)
    assert result.startswith("Error:")


@pytest.mark.asyncio
async def test_get_tokenomics(mock_context):
    result = await server.get_tokenomics(context=mock_context, config_json=LINEAR_CONFIG, current_edition=0)
    summary = json.loads(result)
    assert summary["remainingSupply"] == 100
    assert len(summary["milestones"]) == 4


@pytest.mark.asyncio
async def test_numeric_inputs_are_bounded(mock_context, curve_json):
    result = await server.calculate_total_cost(
        context=mock_context, config_json=LINEAR_CONFIG, start_supply=0, quantity=MAX_SUPPLY + 1
    )
    assert result.startswith("Error:")
    assert "too large" in result

    result = await server.generate_price_table(
        context=mock_context, curve_json=curve_json, max_supply=MAX_SUPPLY + 1, split=True
    )
    assert result.startswith("Error:")
    assert "too large" in result

    result = await server.generate_sample_points(
        context=mock_context, config_json=LINEAR_CONFIG, count=MAX_SAMPLE_POINTS + 1
    )
    assert result.startswith("Error:")

    big_config = json.dumps({"type": "linear", "basePrice": 1, "increment": 1, "maxSupply": MAX_SUPPLY + 1})
    result = await server.get_tokenomics(context=mock_context, config_json=big_config, current_edition=0)
    assert result.startswith("Error:")
    assert "Max supply is too large" in result


@pytest.mark.asyncio
async def test_calculate_price_reports_out_of_range_price(mock_context):
    config_json = json.dumps({"type": "exponential", "basePrice": 100, "growthRate": 1e12, "maxSupply": 10})
    result = await server.calculate_price(context=mock_context, config_json=config_json, supply=MAX_SUPPLY)
    assert result == f"Error: Price at supply {MAX_SUPPLY} is out of range"

    config_json = json.dumps({"type": "exponential", "basePrice": 100, "growthRate": -1.0, "maxSupply": 10})
    result = await server.calculate_price(context=mock_context, config_json=config_json, supply=0)
    assert result.startswith("Error:")
