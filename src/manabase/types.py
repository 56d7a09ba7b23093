"""
Types and constants for manabase analysis.

Based on Frank Karsten's source-count methodology (2022 update).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class Color(Enum):
    """The five colors of mana."""

    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"

    @classmethod
    def parse(cls, value) -> "Color":
        """Accept a Color or a one-letter symbol (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown color {value!r}. Valid colors: {[c.value for c in cls]}"
            ) from None


class MulliganPolicy(Enum):
    """
    Land-count keep policies for Monte Carlo simulation.

    NONE: always keep
    AGGRESSIVE: keep 2-5 lands
    CONSERVATIVE: keep 1-6 lands
    OPTIMAL: keep within 2 of 40% of hand size
    """

    NONE = "none"
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    OPTIMAL = "optimal"


# Probability thresholds
EXCELLENT_THRESHOLD = 0.95
GOOD_THRESHOLD = 0.90  # Karsten standard
ACCEPTABLE_THRESHOLD = 0.80
POOR_THRESHOLD = 0.60

OPENING_HAND_SIZE = 7

# Karsten's lookup table (2022 update): sources needed for X colored
# symbols by turn Y at 90% consistency in a 60-card deck.
KARSTEN_TABLES: Dict[int, Dict[int, int]] = {
    1: {1: 14, 2: 13, 3: 12, 4: 11, 5: 10, 6: 9, 7: 8, 8: 8, 9: 7, 10: 7},
    2: {2: 20, 3: 18, 4: 16, 5: 15, 6: 14, 7: 13, 8: 12, 9: 11, 10: 11},
    3: {3: 23, 4: 20, 5: 19, 6: 18, 7: 17, 8: 16, 9: 15, 10: 14},
    4: {4: 25, 5: 22, 6: 21, 7: 20, 8: 19, 9: 18, 10: 17},
}
MAX_TABLE_TURN = 10


@dataclass(frozen=True)
class CardRecord:
    """
    One entry of a normalized deck list, as supplied by the parsing layer.

    Immutable; the engine only reads it.
    """

    name: str
    quantity: int = 1
    cmc: int = 0
    colors: FrozenSet[Color] = frozenset()
    is_land: bool = False
    produces: FrozenSet[Color] = frozenset()
    """Colors a land can produce (empty for colorless utility lands)"""

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"{self.name}: quantity must be >= 1")
        if self.cmc < 0:
            raise ValueError(f"{self.name}: converted cost must be >= 0")
        # Normalize color iterables/strings to frozensets of Color
        object.__setattr__(
            self, "colors", frozenset(Color.parse(c) for c in self.colors)
        )
        object.__setattr__(
            self, "produces", frozenset(Color.parse(c) for c in self.produces)
        )

    @classmethod
    def from_dict(cls, data: dict) -> "CardRecord":
        """Build a record from a plain mapping (e.g. decoded JSON)."""
        return cls(
            name=data["name"],
            quantity=int(data.get("quantity", 1)),
            cmc=int(data.get("cmc", 0)),
            colors=frozenset(data.get("colors") or ()),
            is_land=bool(data.get("is_land", False)),
            produces=frozenset(data.get("produces") or ()),
        )


@dataclass(frozen=True)
class HypergeometricQuery:
    """Population N, success states K, sample n, successes wanted k."""

    population: int
    successes: int
    sample: int
    wanted: int


@dataclass(frozen=True)
class ProbabilityResult:
    probability: float
    percentage: float
    meets_threshold: bool
    confidence: str
    """'low' | 'medium' | 'high' | 'excellent'"""


@dataclass(frozen=True)
class KarstenRecommendation:
    sources_needed: Optional[int]
    sources_available: int
    deficit: Optional[int]
    """sources_needed - sources_available; negative means surplus"""
    rating: str
    """'excellent' | 'good' | 'acceptable' | 'poor' | 'unplayable'"""
    recommendation: str


@dataclass(frozen=True)
class TurnAnalysis:
    turn: int
    cards_seen: int
    cast_probability: float
    karsten: KarstenRecommendation


@dataclass(frozen=True)
class MonteCarloParams:
    """Configuration for a land-drop Monte Carlo run."""

    deck_size: int
    """Total cards in deck"""

    land_count: int
    """Total lands in deck"""

    target_turn: int
    """Turn by which land parity must be reached"""

    iterations: int = 10_000
    """Number of simulated games"""

    mulligan_strategy: MulliganPolicy = MulliganPolicy.NONE
    """Keep policy applied to opening hands"""

    on_play: bool = True
    """True if on play, False if on draw"""

    max_mulligans: int = 2
    """Maximum mulligans allowed"""

    seed: Optional[int] = None
    """Seed for reproducible runs"""


@dataclass(frozen=True)
class ConfidenceInterval:
    lower: float
    upper: float


@dataclass(frozen=True)
class MonteCarloResult:
    iterations: int
    successful_runs: int
    success_rate: float
    """Percentage of successful simulations"""
    average_turn: float
    """Mean turn of success over successful runs"""
    standard_deviation: float
    confidence: ConfidenceInterval
    distribution: List[int]
    """Index 0 counts failures, index t counts successes on turn t"""


@dataclass(frozen=True)
class ColorRequirement:
    color: Color
    sources: int
    """Sources of this color currently in the deck"""
    intensity: int = 1
    """Colored symbols needed (1 for R, 2 for RR, ...)"""
    critical_turn: int = 1
    priority: str = "medium"
    """'low' | 'medium' | 'high' | 'critical'"""


@dataclass(frozen=True)
class ColorAnalysis:
    color: Color
    probability: float
    sources: int
    deficit: Optional[int]
    critical_turn: int


@dataclass(frozen=True)
class OptimalManabase:
    total_lands: int
    color_sources: Dict[Color, int]
    fetchlands: int
    duallands: int
    basics: int
    utility: int
    confidence: float


@dataclass(frozen=True)
class MultivariateAnalysis:
    color_analyses: List[ColorAnalysis]
    overall_consistency: float
    """Product of per-color probabilities (independence approximation)"""
    bottleneck_colors: List[Color]
    recommendations: List[str]
    optimal_manabase: OptimalManabase


@dataclass(frozen=True)
class LandCountRecommendation:
    recommended: int
    current: int
    """Land copies currently in the list"""
    average_cmc: float
    """Mean converted cost of the non-land cards"""
    range_min: int
    range_max: int
    reasoning: str


@dataclass(frozen=True)
class MulliganValue:
    hand_size: int
    expected_value: float
    threshold: float
    """Keep this hand size when its score is >= threshold"""


@dataclass
class MulliganAnalysis:
    archetype: str
    values: List[MulliganValue]
    """Ordered 7, 6, 5, ... down to the smallest hand size"""
    distributions: Dict[int, List[Dict[str, float]]]
    deck_quality: str
    quality_score: float
    recommendations: List[str] = field(default_factory=list)
    iterations: int = 0
    sample_hands: Dict[str, list] = field(default_factory=dict)
    """Example 7-card hands keyed by tier: excellent, good, marginal, poor"""

    def value_for(self, hand_size: int) -> MulliganValue:
        for value in self.values:
            if value.hand_size == hand_size:
                return value
        raise KeyError(f"No mulligan value for hand size {hand_size}")
