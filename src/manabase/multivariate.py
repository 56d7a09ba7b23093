"""
Multicolor consistency analysis.

Runs the turn analyzer once per color requirement and multiplies the
results. Treating colors as independent is an approximation: in a real
deck the colors compete for the same land slots.
"""

import math
from typing import Dict, Iterable, List, Optional

from .errors import InvalidParameterError
from .turn_analysis import TurnAnalyzer, karsten_sources
from .types import (
    ACCEPTABLE_THRESHOLD,
    CardRecord,
    Color,
    ColorAnalysis,
    ColorRequirement,
    LandCountRecommendation,
    MultivariateAnalysis,
    OptimalManabase,
)

# Fallback when the table has no entry for a requirement
DEFAULT_COLOR_SOURCES = 14

# Proportional land split for the manabase suggestion
LAND_SPLIT = {
    "fetchlands": 0.2,
    "duallands": 0.4,
    "basics": 0.3,
    "utility": 0.1,
}
MANABASE_CONFIDENCE = 0.85

# Land-count heuristic: 17 lands plus two per point of average cost above 2
BASE_LAND_COUNT = 17
LAND_COUNT_RANGES = {
    "aggro": (18, 22),
    "midrange": (20, 26),
    "control": (24, 28),
    "limited": (17, 18),
    "commander": (35, 40),
}
AGGRO_MAX_CMC = 2.5
CONTROL_MIN_CMC = 3.5
COMMANDER_MULTIPLIER = 1.5


def derive_color_requirements(cards: Iterable[CardRecord]) -> List[ColorRequirement]:
    """
    Build one requirement per color used by the deck's spells.

    Sources are the land copies producing the color; the critical turn is
    the cheapest spell of that color (at least turn 1). Intensity is 1:
    card records carry color identity, not symbol counts.
    """
    cards = list(cards)
    sources: Dict[Color, int] = {}
    critical: Dict[Color, int] = {}

    for card in cards:
        if card.is_land:
            for color in card.produces:
                sources[color] = sources.get(color, 0) + card.quantity
        else:
            for color in card.colors:
                critical[color] = min(critical.get(color, card.cmc), card.cmc)

    return [
        ColorRequirement(
            color=color,
            sources=sources.get(color, 0),
            intensity=1,
            critical_turn=max(1, turn),
            priority="high" if turn <= 2 else "medium",
        )
        for color, turn in sorted(critical.items(), key=lambda item: item[0].value)
    ]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def recommend_land_count(
    cards: Iterable[CardRecord],
    deck_format: str = "constructed",
    average_cmc: Optional[float] = None,
) -> LandCountRecommendation:
    """
    Suggest a land count from the average converted cost of the spells.

    Args:
        cards: Deck list; lands count toward `current` only
        deck_format: 'constructed', 'limited' or 'commander'
        average_cmc: Overrides the average computed from `cards`

    Raises:
        InvalidParameterError: unknown format or negative average cost
    """
    deck_format = deck_format.lower()
    if deck_format not in ("constructed", "limited", "commander"):
        raise InvalidParameterError(f"Unknown deck format: {deck_format}")

    cards = list(cards)
    if not cards and average_cmc is None:
        return LandCountRecommendation(
            recommended=BASE_LAND_COUNT,
            current=0,
            average_cmc=0.0,
            range_min=BASE_LAND_COUNT,
            range_max=BASE_LAND_COUNT,
            reasoning="Empty deck - default land count",
        )

    current = sum(card.quantity for card in cards if card.is_land)
    if average_cmc is None:
        spells = [card for card in cards if not card.is_land]
        copies = sum(card.quantity for card in spells)
        average_cmc = (
            sum(card.cmc * card.quantity for card in spells) / copies if copies else 0.0
        )
    if average_cmc < 0:
        raise InvalidParameterError(f"average_cmc must be >= 0, got {average_cmc}")

    base = BASE_LAND_COUNT + max(0.0, (average_cmc - 2) * 2)
    reasoning = f"Based on average CMC of {average_cmc:.1f}"

    if deck_format == "commander":
        base = max(LAND_COUNT_RANGES["commander"][0], base * COMMANDER_MULTIPLIER)
        range_min, range_max = LAND_COUNT_RANGES["commander"]
        reasoning = f"Commander deck - {reasoning}"
    elif deck_format == "limited":
        range_min, range_max = LAND_COUNT_RANGES["limited"]
        reasoning = f"Limited deck - {reasoning}"
    elif average_cmc <= AGGRO_MAX_CMC:
        range_min, range_max = LAND_COUNT_RANGES["aggro"]
    elif average_cmc >= CONTROL_MIN_CMC:
        range_min, range_max = LAND_COUNT_RANGES["control"]
    else:
        range_min, range_max = LAND_COUNT_RANGES["midrange"]

    return LandCountRecommendation(
        recommended=_round_half_up(max(range_min, min(range_max, base))),
        current=current,
        average_cmc=average_cmc,
        range_min=range_min,
        range_max=range_max,
        reasoning=reasoning,
    )


class MultivariateAnalyzer:
    """Joint consistency across several color requirements."""

    def __init__(
        self,
        turn_analyzer: TurnAnalyzer = None,
        min_lands: int = 20,
        max_lands: int = 28,
    ):
        self.turn_analyzer = turn_analyzer or TurnAnalyzer()
        self.min_lands = min_lands
        self.max_lands = max_lands

    def analyze(
        self,
        deck_size: int,
        land_count: int,
        requirements: Iterable[ColorRequirement],
        on_play: bool = True,
    ) -> MultivariateAnalysis:
        """
        Analyze several color requirements at once.

        Raises:
            InvalidParameterError: if land_count is outside 0..deck_size, or
                a requirement has more sources than the deck has cards
        """
        if not 0 <= land_count <= deck_size:
            raise InvalidParameterError(
                f"land_count must be between 0 and deck_size ({deck_size})"
            )
        requirements = list(requirements)

        analyses = []
        bottlenecks = []
        recommendations = []
        overall = 1.0

        for requirement in requirements:
            analysis = self.turn_analyzer.analyze_turn(
                deck_size,
                requirement.sources,
                requirement.critical_turn,
                requirement.intensity,
                on_play,
            )
            probability = analysis.cast_probability
            deficit = analysis.karsten.deficit

            analyses.append(
                ColorAnalysis(
                    color=requirement.color,
                    probability=probability,
                    sources=requirement.sources,
                    deficit=deficit,
                    critical_turn=requirement.critical_turn,
                )
            )
            overall *= probability

            if probability < ACCEPTABLE_THRESHOLD:
                bottlenecks.append(requirement.color)
                recommendations.append(
                    self._bottleneck_message(requirement, deficit, probability)
                )

        return MultivariateAnalysis(
            color_analyses=analyses,
            overall_consistency=overall,
            bottleneck_colors=bottlenecks,
            recommendations=recommendations,
            optimal_manabase=self.optimal_manabase(land_count, requirements),
        )

    @staticmethod
    def _bottleneck_message(
        requirement: ColorRequirement, deficit, probability: float
    ) -> str:
        color = requirement.color.value
        if deficit is not None and deficit > 0:
            return f"{color}: Add {deficit} more sources"
        return (
            f"{color}: only {probability * 100:.1f}% to have "
            f"{requirement.intensity} source(s) by turn {requirement.critical_turn}"
        )

    def optimal_manabase(
        self, land_count: int, requirements: Iterable[ColorRequirement]
    ) -> OptimalManabase:
        """
        Heuristic starting point for a manabase, not a solved optimization.
        """
        total = max(self.min_lands, min(self.max_lands, land_count))
        color_sources = {}
        for requirement in requirements:
            needed = karsten_sources(requirement.intensity, requirement.critical_turn)
            color_sources[requirement.color] = (
                needed if needed is not None else DEFAULT_COLOR_SOURCES
            )

        split = {name: math.floor(total * share) for name, share in LAND_SPLIT.items()}
        return OptimalManabase(
            total_lands=total,
            color_sources=color_sources,
            confidence=MANABASE_CONFIDENCE,
            **split,
        )
