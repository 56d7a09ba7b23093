from typing import Any, Dict

from fastmcp import Context

from manabase.types import GOOD_THRESHOLD, MAX_TABLE_TURN, OPENING_HAND_SIZE

from .log_decorator import log_tool_calls
from .mcp import mcp
from .utils import engine, to_jsonable


@mcp.tool
@log_tool_calls
def hypergeometric_probability(
    population: int,
    successes: int,
    sample: int,
    wanted: int,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Exact probability of drawing at least `wanted` successes when drawing
    `sample` cards from `population` cards of which `successes` are hits.

    Example: 60-card deck, 24 lands, 7-card hand, want 3+ lands:
    hypergeometric_probability(60, 24, 7, 3)

    Related Tools:
    - analyze_turn() for the same question phrased by turn and play/draw
    """
    return to_jsonable(
        engine.at_least_probability(population, successes, sample, wanted)
    )


@mcp.tool
@log_tool_calls
def analyze_turn(
    deck_size: int,
    sources: int,
    turn: int,
    symbols_needed: int,
    on_play: bool = True,
    hand_size: int = OPENING_HAND_SIZE,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Probability of having `symbols_needed` sources of a color by `turn`,
    with Frank Karsten's recommended source count and a rating.

    On the play you see hand_size + turn - 1 cards by a turn; on the draw,
    hand_size + turn.

    Example: can a 60-card deck with 14 blue sources cast Counterspell (UU) on turn 2?
    analyze_turn(60, 14, 2, 2)

    Related Tools:
    - minimum_sources() to find how many sources would reach 90%
    - analyze_color_requirements() for several colors at once
    """
    return to_jsonable(
        engine.analyze_turn(deck_size, sources, turn, symbols_needed, on_play, hand_size)
    )


@mcp.tool
@log_tool_calls
def minimum_sources(
    deck_size: int,
    symbols_needed: int,
    turn: int,
    target_probability: float = GOOD_THRESHOLD,
    on_play: bool = True,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Smallest number of sources giving at least `target_probability` of having
    `symbols_needed` sources by `turn`. Returns -1 when unreachable.
    """
    needed = engine.turn_analyzer.find_minimum_sources(
        deck_size,
        symbols_needed,
        turn,
        target_probability=target_probability,
        on_play=on_play,
    )
    return {
        "deck_size": deck_size,
        "symbols_needed": symbols_needed,
        "turn": turn,
        "target_probability": target_probability,
        "minimum_sources": needed,
    }


@mcp.tool
@log_tool_calls
def castability_curve(
    deck_size: int,
    sources: int,
    max_turn: int = MAX_TABLE_TURN,
    symbols_needed: int = 1,
    on_play: bool = True,
    ctx: Context = None,
) -> Dict[str, Any]:
    """
    Probability of having `symbols_needed` sources on each turn from 1 to
    `max_turn`, for charting how castability grows over the game.

    Example: 60-card deck, 24 lands, chance of a land by each of turns 1-6:
    castability_curve(60, 24, max_turn=6)
    """
    curve = engine.probability_by_turn(
        deck_size, sources, max_turn, symbols_needed, on_play
    )
    return {
        "deck_size": deck_size,
        "sources": sources,
        "symbols_needed": symbols_needed,
        "on_play": on_play,
        "turns": [
            {
                "turn": analysis.turn,
                "cards_seen": analysis.cards_seen,
                "probability": analysis.cast_probability,
                "percentage": round(analysis.cast_probability * 100, 1),
            }
            for analysis in curve
        ],
    }


@mcp.tool
@log_tool_calls
def get_cache_stats(ctx: Context = None) -> Dict[str, Any]:
    """Memo cache sizes, hits, misses and hit rates for this server process."""
    return engine.cache_stats()
