"""
Optimal mulligan thresholds by backward induction.

V(min) = E[score | smallest hand]          (must keep)
V(h)   = E[max(score_h, V(h-1))]            (keep iff score_h >= V(h-1))

The keep threshold for hand size h is V(h-1): mulligan whenever the
expected value of continuing beats the hand in front of you.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .errors import InvalidParameterError
from .types import MulliganValue

logger = logging.getLogger("manabase.dp_solver")

BUCKET_WIDTH = 10
BUCKET_COUNT = 11  # 0-9, 10-19, ..., 90-99, 100

# E[V_7] cut points for the deck quality label
QUALITY_CUTS = ((70, "excellent"), (55, "good"), (40, "average"))


def deck_quality(expected_value: float) -> str:
    for minimum, label in QUALITY_CUTS:
        if expected_value >= minimum:
            return label
    return "poor"


@dataclass
class ScoreDistribution:
    """
    Histogram of hand scores for one hand size.

    Each bucket keeps its sample count and score sum, so the solver works
    with exact bucket means rather than bucket midpoints.
    """

    hand_size: int
    counts: List[int] = field(default_factory=lambda: [0] * BUCKET_COUNT)
    sums: List[float] = field(default_factory=lambda: [0.0] * BUCKET_COUNT)

    @staticmethod
    def bucket_for(score: float) -> int:
        return min(BUCKET_COUNT - 1, max(0, int(score // BUCKET_WIDTH)))

    def add(self, score: float) -> None:
        bucket = self.bucket_for(score)
        self.counts[bucket] += 1
        self.sums[bucket] += score

    @classmethod
    def from_scores(cls, hand_size: int, scores: Iterable[float]) -> "ScoreDistribution":
        distribution = cls(hand_size)
        for score in scores:
            distribution.add(score)
        return distribution

    @property
    def total(self) -> int:
        return sum(self.counts)

    @property
    def mean(self) -> float:
        return sum(self.sums) / self.total if self.total else 0.0

    def frequencies(self) -> List[float]:
        """Normalized histogram (sums to 1 when non-empty)."""
        total = self.total
        return [count / total if total else 0.0 for count in self.counts]

    def buckets(self):
        """Yield (probability, mean score) for each non-empty bucket."""
        total = self.total
        for count, score_sum in zip(self.counts, self.sums):
            if count:
                yield count / total, score_sum / count

    def to_chart(self) -> List[Dict[str, float]]:
        """Bucket centers with frequencies, for presentation layers."""
        return [
            {"score": i * BUCKET_WIDTH + BUCKET_WIDTH / 2, "frequency": freq}
            for i, freq in enumerate(self.frequencies())
        ]


def continuation_value(distribution: ScoreDistribution, threshold: float) -> float:
    """
    E[max(score, threshold)] over the histogram.

    Written as threshold + E[max(0, score - threshold)] so the result never
    drops below the threshold through rounding.
    """
    gain = 0.0
    for probability, mean_score in distribution.buckets():
        if mean_score >= threshold:
            gain += probability * (mean_score - threshold)
    return threshold + gain


class MulliganDPSolver:
    """Computes the optimal keep/mulligan strategy from score histograms."""

    def solve(self, distributions: Dict[int, ScoreDistribution]) -> List[MulliganValue]:
        """
        Run backward induction from the smallest hand size up to the largest.

        Args:
            distributions: Histograms keyed by hand size; sizes must be
                consecutive (e.g. 7, 6, 5, 4)

        Returns:
            MulliganValue records ordered from largest hand size to smallest
        """
        if not distributions:
            raise InvalidParameterError("At least one score distribution is required")

        sizes = sorted(distributions)
        if sizes != list(range(sizes[0], sizes[-1] + 1)):
            raise InvalidParameterError(
                f"Hand sizes must be consecutive, got {sizes}"
            )
        for size in sizes:
            if distributions[size].total == 0:
                raise InvalidParameterError(f"Distribution for {size} cards is empty")

        # Base case: smallest hand, always keep
        smallest = sizes[0]
        previous = distributions[smallest].mean
        values = [MulliganValue(hand_size=smallest, expected_value=previous, threshold=0.0)]

        for size in sizes[1:]:
            expected = continuation_value(distributions[size], previous)
            values.append(
                MulliganValue(hand_size=size, expected_value=expected, threshold=previous)
            )
            logger.debug("V(%d)=%.2f keep if score >= %.2f", size, expected, previous)
            previous = expected

        return list(reversed(values))
