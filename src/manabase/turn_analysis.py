"""
Turn-by-turn castability against Frank Karsten's source-count table.

Cards seen by turn T:
- On the play: hand_size + T - 1
- On the draw: hand_size + T (extra card on turn 1)
"""

import logging
from typing import List, Optional

from .errors import InvalidParameterError
from .hypergeometric import HypergeometricCalculator
from .types import (
    ACCEPTABLE_THRESHOLD,
    EXCELLENT_THRESHOLD,
    GOOD_THRESHOLD,
    KARSTEN_TABLES,
    MAX_TABLE_TURN,
    OPENING_HAND_SIZE,
    POOR_THRESHOLD,
    KarstenRecommendation,
    TurnAnalysis,
)

logger = logging.getLogger("manabase.turn_analysis")


def cards_seen(turn: int, on_play: bool = True, hand_size: int = OPENING_HAND_SIZE) -> int:
    """Number of cards seen by the given turn."""
    return hand_size + turn - 1 if on_play else hand_size + turn


def karsten_sources(symbols_needed: int, turn: int) -> Optional[int]:
    """
    Recommended sources from the published table.

    Turns past the table's end reuse its last column. Returns None when the
    table has no entry (e.g. CCC on turn 2).
    """
    row = KARSTEN_TABLES.get(symbols_needed)
    if row is None:
        return None
    return row.get(min(turn, MAX_TABLE_TURN))


def karsten_rating(probability: float) -> str:
    if probability >= EXCELLENT_THRESHOLD:
        return "excellent"
    if probability >= GOOD_THRESHOLD:
        return "good"
    if probability >= ACCEPTABLE_THRESHOLD:
        return "acceptable"
    if probability >= POOR_THRESHOLD:
        return "poor"
    return "unplayable"


def recommendation_text(
    probability: float, deficit: Optional[int], symbols_needed: int, turn: int
) -> str:
    """Human-readable advice, scaled by how far short the deck is."""
    if deficit is None:
        return (
            f"No published source count for {symbols_needed} symbol"
            f"{'s' if symbols_needed != 1 else ''} by turn {turn}; "
            f"currently {probability * 100:.1f}% castable."
        )
    if deficit <= 0:
        return (
            f"Excellent! You have sufficient sources for {symbols_needed} "
            f"symbol{'s' if symbols_needed != 1 else ''} by turn {turn}."
        )
    if deficit <= 2:
        return (
            f"Consider adding {deficit} more source{'s' if deficit > 1 else ''} "
            f"for better consistency."
        )
    return (
        f"Add {deficit} more sources - currently only "
        f"{probability * 100:.1f}% reliable."
    )


class TurnAnalyzer:
    """Applies the hypergeometric calculator to a single turn and color."""

    def __init__(self, calculator: HypergeometricCalculator = None):
        self.calculator = calculator or HypergeometricCalculator()

    def analyze_turn(
        self,
        deck_size: int,
        sources: int,
        turn: int,
        symbols_needed: int,
        on_play: bool = True,
        hand_size: int = OPENING_HAND_SIZE,
    ) -> TurnAnalysis:
        """
        Probability of having `symbols_needed` sources by `turn`.

        Args:
            deck_size: Total cards in deck
            sources: Sources of the color in the deck
            turn: Turn to cast on (1-based)
            symbols_needed: Colored symbols in the cost
            on_play: True if on play, False if on draw
            hand_size: Opening hand size

        Raises:
            InvalidParameterError: sources > deck_size, symbols_needed >
                deck_size, or non-positive turn/deck
        """
        if deck_size <= 0:
            raise InvalidParameterError(f"deck_size must be > 0, got {deck_size}")
        if sources < 0:
            raise InvalidParameterError(f"sources must be >= 0, got {sources}")
        if sources > deck_size:
            raise InvalidParameterError(
                f"sources ({sources}) cannot exceed deck size ({deck_size})"
            )
        if turn < 1:
            raise InvalidParameterError(f"turn must be >= 1, got {turn}")
        if symbols_needed < 0:
            raise InvalidParameterError(
                f"symbols_needed must be >= 0, got {symbols_needed}"
            )
        if symbols_needed > deck_size:
            raise InvalidParameterError(
                f"symbols_needed ({symbols_needed}) cannot exceed deck size ({deck_size})"
            )
        if hand_size < 0:
            raise InvalidParameterError(f"hand_size must be >= 0, got {hand_size}")

        seen = min(cards_seen(turn, on_play, hand_size), deck_size)
        result = self.calculator.at_least_probability(
            deck_size, sources, seen, symbols_needed
        )
        probability = result.probability

        needed = karsten_sources(symbols_needed, turn)
        deficit = needed - sources if needed is not None else None

        logger.debug(
            "turn=%d symbols=%d sources=%d/%d seen=%d p=%.4f",
            turn,
            symbols_needed,
            sources,
            deck_size,
            seen,
            probability,
        )

        return TurnAnalysis(
            turn=turn,
            cards_seen=seen,
            cast_probability=probability,
            karsten=KarstenRecommendation(
                sources_needed=needed,
                sources_available=sources,
                deficit=deficit,
                rating=karsten_rating(probability),
                recommendation=recommendation_text(
                    probability, deficit, symbols_needed, turn
                ),
            ),
        )

    def find_minimum_sources(
        self,
        deck_size: int,
        symbols_needed: int,
        turn: int,
        target_probability: float = GOOD_THRESHOLD,
        on_play: bool = True,
        hand_size: int = OPENING_HAND_SIZE,
    ) -> int:
        """
        Smallest source count reaching `target_probability` by `turn`.

        Returns:
            Minimum number of sources, or -1 if the target is unreachable
        """
        if symbols_needed > deck_size:
            return -1

        # Probability is monotone in sources, so bisect
        low, high = 0, deck_size
        if (
            self.analyze_turn(
                deck_size, high, turn, symbols_needed, on_play, hand_size
            ).cast_probability
            < target_probability
        ):
            return -1
        while low < high:
            mid = (low + high) // 2
            probability = self.analyze_turn(
                deck_size, mid, turn, symbols_needed, on_play, hand_size
            ).cast_probability
            if probability >= target_probability:
                high = mid
            else:
                low = mid + 1
        return low

    def probability_by_turn(
        self,
        deck_size: int,
        sources: int,
        max_turn: int = MAX_TABLE_TURN,
        symbols_needed: int = 1,
        on_play: bool = True,
        hand_size: int = OPENING_HAND_SIZE,
    ) -> List[TurnAnalysis]:
        """Castability curve: one analysis per turn from 1 to `max_turn`."""
        if max_turn < 1:
            raise InvalidParameterError(f"max_turn must be >= 1, got {max_turn}")
        return [
            self.analyze_turn(deck_size, sources, turn, symbols_needed, on_play, hand_size)
            for turn in range(1, max_turn + 1)
        ]
