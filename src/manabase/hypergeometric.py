"""
Exact hypergeometric probabilities.

P(X = k) = C(K, k) * C(N - K, n - k) / C(N, n)
"""

from .combinatorics import Combinatorics, MemoCache
from .errors import InvalidParameterError
from .types import (
    ACCEPTABLE_THRESHOLD,
    EXCELLENT_THRESHOLD,
    GOOD_THRESHOLD,
    HypergeometricQuery,
    ProbabilityResult,
)


def confidence_level(probability: float) -> str:
    if probability >= EXCELLENT_THRESHOLD:
        return "excellent"
    if probability >= GOOD_THRESHOLD:
        return "high"
    if probability >= ACCEPTABLE_THRESHOLD:
        return "medium"
    return "low"


def validate_query(population: int, successes: int, sample: int, wanted: int) -> None:
    """
    Reject malformed queries.

    Impossible-but-well-formed queries (e.g. wanting more successes than
    cards drawn) are valid and simply have probability 0.
    """
    for name, value in (
        ("population", population),
        ("successes", successes),
        ("sample", sample),
        ("wanted", wanted),
    ):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(f"{name} must be an int, got {value!r}")
        if value < 0:
            raise InvalidParameterError(f"{name} must be >= 0, got {value}")

    if successes > population:
        raise InvalidParameterError(
            f"successes ({successes}) cannot exceed population ({population})"
        )
    if sample > population:
        raise InvalidParameterError(
            f"sample ({sample}) cannot exceed population ({population})"
        )
    if wanted > population:
        raise InvalidParameterError(
            f"wanted ({wanted}) exceeds both sample ({sample}) "
            f"and population ({population})"
        )


class HypergeometricCalculator:
    """Point and cumulative hypergeometric probabilities with memoization."""

    def __init__(self, combinatorics: Combinatorics = None, cache: MemoCache = None):
        self.combinatorics = combinatorics or Combinatorics()
        self.cache = cache if cache is not None else MemoCache()

    def point_probability(
        self, population: int, successes: int, sample: int, wanted: int
    ) -> float:
        """P(X = wanted). Out-of-range arguments give 0."""
        if wanted > sample or wanted > successes or sample > population or wanted < 0:
            return 0.0
        if successes == 0:
            return 1.0 if wanted == 0 else 0.0

        key = (population, successes, sample, wanted)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        binomial = self.combinatorics.binomial
        numerator = binomial(successes, wanted) * binomial(
            population - successes, sample - wanted
        )
        denominator = binomial(population, sample)
        # Big-int true division is correctly rounded
        result = numerator / denominator if denominator > 0 else 0.0

        self.cache.put(key, result)
        return result

    def at_least_probability(
        self, population: int, successes: int, sample: int, wanted: int
    ) -> ProbabilityResult:
        """
        P(X >= wanted), summed over wanted..min(sample, successes).

        Raises:
            InvalidParameterError: for malformed queries
        """
        validate_query(population, successes, sample, wanted)

        if wanted == 0:
            probability = 1.0
        else:
            probability = 0.0
            for i in range(wanted, min(sample, successes) + 1):
                probability += self.point_probability(
                    population, successes, sample, i
                )

        # Absorb floating-point drift
        probability = min(1.0, max(0.0, probability))

        return ProbabilityResult(
            probability=probability,
            percentage=probability * 100,
            meets_threshold=probability >= GOOD_THRESHOLD,
            confidence=confidence_level(probability),
        )

    def query(self, query: HypergeometricQuery) -> ProbabilityResult:
        return self.at_least_probability(
            query.population, query.successes, query.sample, query.wanted
        )
