from fastmcp import FastMCP


mcp = FastMCP(
    name="Manabase MCP",
    instructions="""
        This server exposes tools for Magic: The Gathering manabase analysis.
        Uses London Mulligan (2019+ standard) throughout.

        ## Tools
          - hypergeometric_probability(population, successes, sample, wanted): exact P(X >= wanted) with confidence label
          - analyze_turn(deck_size, sources, turn, symbols_needed, on_play?, hand_size?): castability on a turn plus Frank Karsten rating
          - minimum_sources(deck_size, symbols_needed, turn, target_probability?, on_play?): smallest source count reaching the target
          - castability_curve(deck_size, sources, max_turn?, symbols_needed?, on_play?): castability on each turn from 1 to max_turn
          - simulate_land_drops(deck_size, land_count, target_turn, iterations?, mulligan_strategy?, on_play?, max_mulligans?, seed?): Monte Carlo land-drop simulation
          - analyze_mulligan_strategy(cards, archetype?, iterations?, key_pieces?, seed?): optimal keep thresholds per hand size and sample hands by quality tier
          - analyze_color_requirements(deck_size, land_count, requirements, on_play?): joint multicolor consistency
          - analyze_deck_colors(cards, on_play?): multicolor consistency with requirements derived from a deck list
          - recommend_land_count(cards, deck_format?, average_cmc?): land count suggested by the mana curve
          - get_cache_stats(): memo cache sizes and hit rates

        ## Card objects
        {"name": str, "quantity": int, "cmc": int, "colors": ["W"|"U"|"B"|"R"|"G"], "is_land": bool, "produces": [colors]}

        ## Notes
        - Probabilities are fractions in [0, 1]; percentages are also reported where useful.
        - Multicolor consistency multiplies per-color probabilities (independence approximation).
        - Karsten tables cover turns 1-10; later turns use the turn 10 entry.
    """,
)

# Import all tool modules to register them with the MCP server
from . import (  # noqa: E402
    colors,  # noqa: F401
    mulligan,  # noqa: F401
    probability,  # noqa: F401
    simulation,  # noqa: F401
)
