"""
Manabase analysis package.

Exact castability (hypergeometric), Frank Karsten source-count ratings,
Monte Carlo land-drop simulation and optimal mulligan thresholds.
Uses London Mulligan (2019+ standard).
"""

from .types import (
    CardRecord,
    Color,
    ColorRequirement,
    LandCountRecommendation,
    MonteCarloParams,
    MonteCarloResult,
    MulliganAnalysis,
    MulliganPolicy,
    MulliganValue,
    MultivariateAnalysis,
    ProbabilityResult,
    TurnAnalysis,
    KARSTEN_TABLES,
)
from .errors import DeckTooSmallError, InvalidParameterError
from .config import EngineConfig
from .combinatorics import Combinatorics, MemoCache
from .hypergeometric import HypergeometricCalculator
from .turn_analysis import TurnAnalyzer
from .simulation import simulate, simulate_async
from .scoring import Archetype, HandScorer
from .dp_solver import MulliganDPSolver, ScoreDistribution
from .mulligan_analysis import analyze_mulligan_strategy, evaluate_hand
from .multivariate import (
    MultivariateAnalyzer,
    derive_color_requirements,
    recommend_land_count,
)
from .engine import ManabaseEngine

__all__ = [
    # Types
    "CardRecord",
    "Color",
    "ColorRequirement",
    "LandCountRecommendation",
    "MonteCarloParams",
    "MonteCarloResult",
    "MulliganAnalysis",
    "MulliganPolicy",
    "MulliganValue",
    "MultivariateAnalysis",
    "ProbabilityResult",
    "TurnAnalysis",
    "KARSTEN_TABLES",
    # Errors
    "DeckTooSmallError",
    "InvalidParameterError",
    # Engine
    "EngineConfig",
    "ManabaseEngine",
    # Exact math
    "Combinatorics",
    "MemoCache",
    "HypergeometricCalculator",
    "TurnAnalyzer",
    # Simulation
    "simulate",
    "simulate_async",
    # Mulligan
    "Archetype",
    "HandScorer",
    "MulliganDPSolver",
    "ScoreDistribution",
    "analyze_mulligan_strategy",
    "evaluate_hand",
    # Multicolor
    "MultivariateAnalyzer",
    "derive_color_requirements",
    "recommend_land_count",
]
