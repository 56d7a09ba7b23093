from typing import Any, Dict, List, Optional

from fastmcp import Context

from .log_decorator import log_tool_calls
from .mcp import mcp
from .utils import engine, parse_cards, parse_requirements, to_jsonable


@mcp.tool
@log_tool_calls
def analyze_color_requirements(
    deck_size: int,
    land_count: int,
    requirements: List[Dict[str, Any]],
    on_play: bool = True,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Joint consistency for several color requirements.

    Each requirement: {"color": "W"|"U"|"B"|"R"|"G", "sources": int,
    "intensity": int (symbols needed, default 1), "critical_turn": int (default 1)}.

    Overall consistency multiplies per-color probabilities (treats colors
    as independent). Colors below 80% are reported as bottlenecks.

    Example (Azorius, 24 lands):
    analyze_color_requirements(60, 24, [
        {"color": "W", "sources": 14, "intensity": 1, "critical_turn": 1},
        {"color": "U", "sources": 12, "intensity": 2, "critical_turn": 2}])
    """
    analysis = engine.analyze_multivariate(
        deck_size, land_count, parse_requirements(requirements), on_play
    )
    return to_jsonable(analysis)


@mcp.tool
@log_tool_calls
def analyze_deck_colors(
    cards: List[Dict[str, Any]],
    on_play: bool = True,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Multicolor consistency for a deck list. Requirements are derived from
    the deck: sources are lands producing each color, the critical turn is
    the cheapest spell of that color.

    Related Tools:
    - analyze_color_requirements() to state requirements explicitly
    """
    return to_jsonable(engine.analyze_deck_colors(parse_cards(cards), on_play))


@mcp.tool
@log_tool_calls
def recommend_land_count(
    cards: List[Dict[str, Any]],
    deck_format: str = "constructed",
    average_cmc: Optional[float] = None,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Suggested land count from the average converted cost of the spells.

    Formats: constructed (range picked by curve: aggro, midrange or control),
    limited, commander. Pass average_cmc to override the computed average.
    """
    return to_jsonable(
        engine.recommend_land_count(parse_cards(cards), deck_format, average_cmc)
    )
