import asyncio

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError


@pytest.fixture(scope="module")
def server(tmp_path_factory):
    patch = pytest.MonkeyPatch()
    patch.setenv("MANABASE_LOG_DIR", str(tmp_path_factory.mktemp("logs")))
    from manabase_mcp.mcp import mcp

    yield mcp
    patch.undo()


def call(server, name, arguments):
    async def run():
        async with Client(server) as client:
            result = await client.call_tool(name, arguments)
            return result.structured_content

    return asyncio.run(run())


def test_to_jsonable_converts_enums_and_sets(server):
    from manabase import CardRecord, Color
    from manabase_mcp.utils import to_jsonable

    record = CardRecord("Azorius Chancery", is_land=True, produces={"W", "U"})
    data = to_jsonable(record)
    assert data["produces"] == ["U", "W"]
    assert to_jsonable({Color.RED: (1, 2)}) == {"R": [1, 2]}


def test_parse_requirements(server):
    from manabase import Color
    from manabase_mcp.utils import parse_requirements

    (requirement,) = parse_requirements([{"color": "u", "sources": 12, "intensity": 2}])
    assert requirement.color is Color.BLUE
    assert requirement.intensity == 2
    assert requirement.critical_turn == 1


def test_parse_cards_requires_a_list(server):
    from manabase_mcp.utils import parse_cards

    with pytest.raises(ValueError):
        parse_cards([])


def test_hypergeometric_tool(server):
    data = call(
        server,
        "hypergeometric_probability",
        {"population": 60, "successes": 24, "sample": 7, "wanted": 1},
    )
    assert data["probability"] == pytest.approx(0.978, abs=0.001)
    assert data["confidence"] == "excellent"


def test_analyze_turn_tool(server):
    data = call(
        server,
        "analyze_turn",
        {"deck_size": 60, "sources": 8, "turn": 2, "symbols_needed": 2},
    )
    assert data["cards_seen"] == 8
    assert data["karsten"]["deficit"] == 12


def test_simulation_tool(server):
    data = call(
        server,
        "simulate_land_drops",
        {"deck_size": 60, "land_count": 24, "target_turn": 3, "iterations": 200, "seed": 1},
    )
    assert data["iterations"] == 200
    assert len(data["distribution"]) == 4


def test_color_requirements_tool(server):
    data = call(
        server,
        "analyze_color_requirements",
        {
            "deck_size": 60,
            "land_count": 24,
            "requirements": [
                {"color": "W", "sources": 16, "critical_turn": 2},
                {"color": "U", "sources": 8, "intensity": 2, "critical_turn": 2},
            ],
        },
    )
    assert data["bottleneck_colors"] == ["U"]
    assert data["optimal_manabase"]["color_sources"] == {"W": 13, "U": 20}


def test_invalid_arguments_surface_as_tool_errors(server):
    with pytest.raises(ToolError):
        call(
            server,
            "hypergeometric_probability",
            {"population": 60, "successes": 61, "sample": 7, "wanted": 1},
        )


def test_zero_iterations_is_not_replaced_by_default(server):
    with pytest.raises(ToolError):
        call(
            server,
            "simulate_land_drops",
            {"deck_size": 60, "land_count": 24, "target_turn": 3, "iterations": 0},
        )


def test_castability_curve_tool(server):
    data = call(
        server,
        "castability_curve",
        {"deck_size": 60, "sources": 24, "max_turn": 3, "on_play": False},
    )
    assert [point["cards_seen"] for point in data["turns"]] == [8, 9, 10]
    assert data["turns"][0]["percentage"] == pytest.approx(
        data["turns"][0]["probability"] * 100, abs=0.05
    )


def test_recommend_land_count_tool(server):
    data = call(
        server,
        "recommend_land_count",
        {
            "cards": [
                {"name": "Mountain", "quantity": 20, "is_land": True, "produces": ["R"]},
                {"name": "Goblin Guide", "quantity": 40, "cmc": 1, "colors": ["R"]},
            ]
        },
    )
    assert data["current"] == 20
    assert data["recommended"] == 18
    assert (data["range_min"], data["range_max"]) == (18, 22)


def test_mulligan_tool_reports_sample_hands(server):
    cards = [
        {"name": "Mountain", "quantity": 24, "is_land": True, "produces": ["R"]},
        {"name": "Goblin Guide", "quantity": 20, "cmc": 1, "colors": ["R"]},
        {"name": "Kari Zev", "quantity": 16, "cmc": 2, "colors": ["R"]},
    ]
    data = call(
        server,
        "analyze_mulligan_strategy",
        {"cards": cards, "archetype": "aggro", "iterations": 50, "seed": 1},
    )
    assert set(data["sample_hands"]) == {"excellent", "good", "marginal", "poor"}


def test_server_cli_defaults_come_from_config(server):
    from manabase import EngineConfig
    from manabase_mcp.server import build_parser

    config = EngineConfig(mcp_transport="http", mcp_host="0.0.0.0", mcp_port=8123)
    args = build_parser(config).parse_args([])
    assert (args.transport, args.host, args.port) == ("http", "0.0.0.0", 8123)

    args = build_parser(config).parse_args(["--stdio", "--port", "9100"])
    assert (args.transport, args.port) == ("stdio", 9100)


def test_server_cli_rejects_both_transports(server):
    from manabase_mcp.server import build_parser

    with pytest.raises(SystemExit):
        build_parser().parse_args(["--stdio", "--http"])
