"""
ManabaseEngine: one object owning configuration and memo caches, exposing
every analysis entry point.

Construct one per process (or per test); caches are never global.
"""

from typing import Dict, Iterable, List, Optional, Union

from .combinatorics import Combinatorics, MemoCache
from .config import EngineConfig
from .hypergeometric import HypergeometricCalculator
from .mulligan_analysis import analyze_mulligan_strategy
from .multivariate import (
    MultivariateAnalyzer,
    derive_color_requirements,
    recommend_land_count,
)
from .scoring import Archetype
from .simulation import simulate, simulate_async
from .turn_analysis import TurnAnalyzer
from .types import (
    MAX_TABLE_TURN,
    OPENING_HAND_SIZE,
    CardRecord,
    ColorRequirement,
    LandCountRecommendation,
    MonteCarloParams,
    MonteCarloResult,
    MulliganAnalysis,
    MultivariateAnalysis,
    ProbabilityResult,
    TurnAnalysis,
)


class ManabaseEngine:
    """Facade over the probability, simulation and mulligan components."""

    def __init__(self, config: EngineConfig = None):
        self.config = config or EngineConfig()
        self.binomial_cache = MemoCache(self.config.cache_size)
        self.probability_cache = MemoCache(self.config.cache_size)
        self.combinatorics = Combinatorics(self.binomial_cache)
        self.calculator = HypergeometricCalculator(
            self.combinatorics, self.probability_cache
        )
        self.turn_analyzer = TurnAnalyzer(self.calculator)
        self.multivariate = MultivariateAnalyzer(
            self.turn_analyzer, self.config.min_lands, self.config.max_lands
        )

    @classmethod
    def from_env(cls, dotenv_path: str = None) -> "ManabaseEngine":
        return cls(EngineConfig.from_env(dotenv_path))

    # Exact calculations

    def binomial(self, n: int, k: int) -> int:
        return self.combinatorics.binomial(n, k)

    def at_least_probability(
        self, population: int, successes: int, sample: int, wanted: int
    ) -> ProbabilityResult:
        return self.calculator.at_least_probability(population, successes, sample, wanted)

    def analyze_turn(
        self,
        deck_size: int,
        sources: int,
        turn: int,
        symbols_needed: int,
        on_play: bool = True,
        hand_size: int = OPENING_HAND_SIZE,
    ) -> TurnAnalysis:
        return self.turn_analyzer.analyze_turn(
            deck_size, sources, turn, symbols_needed, on_play, hand_size
        )

    def probability_by_turn(
        self,
        deck_size: int,
        sources: int,
        max_turn: int = MAX_TABLE_TURN,
        symbols_needed: int = 1,
        on_play: bool = True,
        hand_size: int = OPENING_HAND_SIZE,
    ) -> List[TurnAnalysis]:
        return self.turn_analyzer.probability_by_turn(
            deck_size, sources, max_turn, symbols_needed, on_play, hand_size
        )

    # Simulation

    def _workers(self, workers: Optional[int]) -> int:
        return workers if workers is not None else self.config.mc_workers

    def simulate(self, params: MonteCarloParams, workers: int = None) -> MonteCarloResult:
        return simulate(params, self._workers(workers))

    async def simulate_async(
        self, params: MonteCarloParams, workers: int = None
    ) -> MonteCarloResult:
        return await simulate_async(params, self._workers(workers))

    def analyze_mulligan_strategy(
        self,
        cards: Iterable[CardRecord],
        iterations: int = None,
        archetype: Union[Archetype, str] = Archetype.MIDRANGE,
        key_pieces: Iterable[str] = (),
        seed: Optional[int] = None,
    ) -> MulliganAnalysis:
        return analyze_mulligan_strategy(
            cards,
            iterations if iterations is not None else self.config.mulligan_iterations,
            archetype=archetype,
            key_pieces=key_pieces,
            min_deck_size=self.config.min_deck_size,
            min_hand_size=self.config.min_hand_size,
            seed=seed,
        )

    # Multicolor

    def analyze_multivariate(
        self,
        deck_size: int,
        land_count: int,
        requirements: Iterable[ColorRequirement],
        on_play: bool = True,
    ) -> MultivariateAnalysis:
        return self.multivariate.analyze(deck_size, land_count, requirements, on_play)

    def analyze_deck_colors(
        self, cards: Iterable[CardRecord], on_play: bool = True
    ) -> MultivariateAnalysis:
        """Multivariate analysis with requirements derived from the deck list."""
        cards = list(cards)
        deck_size = sum(card.quantity for card in cards)
        land_count = sum(card.quantity for card in cards if card.is_land)
        return self.analyze_multivariate(
            deck_size, land_count, derive_color_requirements(cards), on_play
        )

    def recommend_land_count(
        self,
        cards: Iterable[CardRecord],
        deck_format: str = "constructed",
        average_cmc: Optional[float] = None,
    ) -> LandCountRecommendation:
        return recommend_land_count(cards, deck_format, average_cmc)

    # Cache management

    def clear_cache(self) -> None:
        self.binomial_cache.clear()
        self.probability_cache.clear()

    def cache_stats(self) -> Dict[str, Dict[str, float]]:
        return {
            name: {
                "size": len(cache),
                "hits": cache.hits,
                "misses": cache.misses,
                "hit_rate": cache.hit_rate,
            }
            for name, cache in (
                ("binomial", self.binomial_cache),
                ("probability", self.probability_cache),
            )
        }
