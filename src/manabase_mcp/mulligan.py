from typing import Any, Dict, List, Optional

from fastmcp import Context

from .log_decorator import log_tool_calls
from .mcp import mcp
from .utils import engine, parse_cards, to_jsonable


@mcp.tool
@log_tool_calls
def analyze_mulligan_strategy(
    cards: List[Dict[str, Any]],
    archetype: str = "midrange",
    iterations: Optional[int] = None,
    key_pieces: Optional[List[str]] = None,
    seed: Optional[int] = None,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Optimal mulligan thresholds for a deck list.

    Simulates hands of every size from 7 down, scores them for the given
    archetype (aggro | midrange | control | combo), and solves for the keep
    threshold at each hand size: keep when the hand scores at least the
    expected value of mulliganing.

    Card objects: {"name", "quantity", "cmc", "colors", "is_land", "produces"}.
    Decks under the configured minimum size are rejected.

    Returns per-size thresholds and expected values, score histograms,
    up to three sample 7-card hands per quality tier,
    deck quality and recommendations.
    """
    analysis = engine.analyze_mulligan_strategy(
        parse_cards(cards),
        iterations=iterations,
        archetype=archetype,
        key_pieces=key_pieces or (),
        seed=seed,
    )
    return to_jsonable(analysis)
