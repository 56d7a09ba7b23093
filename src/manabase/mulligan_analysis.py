"""
Mulligan strategy analysis: Monte Carlo hands + score model + DP solver.

For every hand size from 7 down to the smallest considered, draw 7 cards
(London mulligan), keep the best N, goldfish the result and record its
score. The DP solver then turns the score histograms into keep thresholds.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .deck import CardLibrary, expand_cards
from .dp_solver import MulliganDPSolver, ScoreDistribution, deck_quality
from .errors import DeckTooSmallError, InvalidParameterError
from .scoring import (
    GOLDFISH_TURNS,
    Archetype,
    Hand,
    HandScorer,
    ScoreBreakdown,
    TurnPlan,
    goldfish,
)
from .types import OPENING_HAND_SIZE, CardRecord, MulliganAnalysis, MulliganValue

logger = logging.getLogger("manabase.mulligan_analysis")

DEFAULT_MIN_DECK_SIZE = 40

# Seven-card hands kept aside for the sample-hand report
MAX_COLLECTED_HANDS = 100
SAMPLES_PER_TIER = 3
SAMPLE_TIERS = (
    (85, "excellent"),
    (70, "good"),
    (55, "marginal"),
    (0, "poor"),
)


def simulate_score_distribution(
    cards: Sequence[CardRecord],
    hand_size: int,
    iterations: int,
    scorer: HandScorer,
    rng: random.Random = None,
    collected: Optional[List[Tuple[Hand, List[CardRecord], float]]] = None,
) -> ScoreDistribution:
    """
    Score `iterations` London-mulligan hands of `hand_size` cards.

    When `collected` is given, the first MAX_COLLECTED_HANDS simulated
    hands are appended to it as (hand, draws, score).
    """
    library = CardLibrary(cards, rng)
    distribution = ScoreDistribution(hand_size)

    for _ in range(iterations):
        library.reset()
        drawn = library.draw(OPENING_HAND_SIZE)
        hand, bottom = scorer.select_best_subset(drawn, hand_size)
        library.put_on_bottom(bottom)
        draws = library.cards[:GOLDFISH_TURNS]
        score = scorer.score(hand, draws)
        distribution.add(score)
        if collected is not None and len(collected) < MAX_COLLECTED_HANDS:
            collected.append((hand, draws, score))

    return distribution


def _recommendations(
    archetype: Archetype, values: List[MulliganValue], quality: str
) -> List[str]:
    profile = archetype.profile
    ev = {value.hand_size: value.expected_value for value in values}
    recommendations = []

    if quality == "excellent":
        recommendations.append(
            f"Excellent {profile.name} mana base - most 7-card hands are keepable"
        )
    elif quality == "good":
        recommendations.append(
            f"Good {profile.name} mana base - be selective with marginal hands"
        )
    else:
        recommendations.append(
            f"Consider adjusting your mana base for {profile.name} consistency"
        )

    if 7 in ev and 6 in ev:
        gain = ev[7] - ev[6]
        if gain > 5:
            recommendations.append(
                f"Mulliganing bad 7s gains ~{gain:.0f} points on average over keeping them"
            )

    recommendations.extend(profile.priorities[:2])
    return recommendations


def analyze_mulligan_strategy(
    cards: Iterable[CardRecord],
    iterations: int = 10_000,
    archetype: Union[Archetype, str] = Archetype.MIDRANGE,
    key_pieces: Iterable[str] = (),
    min_deck_size: int = DEFAULT_MIN_DECK_SIZE,
    min_hand_size: int = 4,
    seed: Optional[int] = None,
) -> MulliganAnalysis:
    """
    Compute the optimal mulligan strategy for a deck.

    Args:
        cards: Normalized deck list
        iterations: Simulated hands per hand size
        archetype: Scoring profile
        key_pieces: Card names that matter for combo scoring
        min_deck_size: Decks smaller than this are rejected
        min_hand_size: Smallest hand size considered (always kept)
        seed: Seed for reproducible runs

    Raises:
        DeckTooSmallError: deck below min_deck_size
        InvalidParameterError: non-positive iterations or bad hand size
    """
    cards = list(cards)
    deck_size = len(expand_cards(cards))
    if deck_size < min_deck_size:
        raise DeckTooSmallError(deck_size, min_deck_size)
    if iterations <= 0:
        raise InvalidParameterError(f"iterations must be > 0, got {iterations}")
    if not 1 <= min_hand_size <= OPENING_HAND_SIZE:
        raise InvalidParameterError(
            f"min_hand_size must be between 1 and {OPENING_HAND_SIZE}"
        )

    start = time.time()
    scorer = HandScorer(archetype, key_pieces)
    rng = random.Random(seed)
    collected = []

    distributions = {
        size: simulate_score_distribution(
            cards,
            size,
            iterations,
            scorer,
            rng,
            collected if size == OPENING_HAND_SIZE else None,
        )
        for size in range(OPENING_HAND_SIZE, min_hand_size - 1, -1)
    }
    values = MulliganDPSolver().solve(distributions)
    quality_score = values[0].expected_value
    quality = deck_quality(quality_score)

    logger.info(
        "Mulligan analysis (%s, %d cards, %d iterations) in %d ms: E[V7]=%.1f",
        scorer.archetype.name.lower(),
        deck_size,
        iterations,
        int((time.time() - start) * 1000),
        quality_score,
    )

    return MulliganAnalysis(
        archetype=scorer.archetype.name.lower(),
        values=values,
        distributions={
            size: distribution.to_chart() for size, distribution in distributions.items()
        },
        deck_quality=quality,
        quality_score=quality_score,
        recommendations=_recommendations(scorer.archetype, values, quality),
        iterations=iterations,
        sample_hands=sample_hands(collected, scorer, values[0].threshold),
    )


@dataclass(frozen=True)
class HandEvaluation:
    score: float
    threshold: float
    recommendation: str
    """'KEEP' | 'MULLIGAN'"""
    category: str
    breakdown: ScoreBreakdown
    reasoning: List[str]


def _reasoning(hand: Hand, breakdown: ScoreBreakdown, archetype: Archetype) -> List[str]:
    low, optimal, high = archetype.profile.ideal_lands
    reasons = []

    if hand.land_count == optimal:
        reasons.append(f"Perfect land count ({hand.land_count}) for {archetype.profile.name}")
    elif hand.land_count < low:
        reasons.append(f"Too few lands ({hand.land_count}) - risk of mana screw")
    elif hand.land_count > high:
        reasons.append(f"High land count ({hand.land_count}) - risk of flooding")
    else:
        reasons.append(f"Acceptable land count ({hand.land_count})")

    if archetype is Archetype.AGGRO:
        if any(s.cmc == 1 for s in hand.spells):
            reasons.append("Has T1 play - critical for aggro")
        else:
            reasons.append("No 1-drop - slow start for aggro")

    if breakdown.mana_efficiency >= 80:
        reasons.append("Excellent mana efficiency")
    elif breakdown.mana_efficiency < 50:
        reasons.append("Poor mana efficiency - wasted mana early")

    if breakdown.color_access < 70:
        reasons.append("Color access concerns")

    return reasons


@dataclass(frozen=True)
class SampleHand:
    cards: Tuple[str, ...]
    land_count: int
    score: float
    breakdown: ScoreBreakdown
    recommendation: str
    """'SNAP_KEEP' | 'KEEP' | 'MARGINAL' | 'MULLIGAN' | 'SNAP_MULL'"""
    reasoning: List[str]
    turn_plan: List[TurnPlan]


def sample_recommendation(score: float, threshold: float) -> str:
    """Grade a 7-card hand against the keep-7 threshold."""
    if score >= 90:
        return "SNAP_KEEP"
    if score >= threshold + 10:
        return "KEEP"
    if score >= threshold - 5:
        return "MARGINAL"
    if score >= threshold - 20:
        return "MULLIGAN"
    return "SNAP_MULL"


def sample_tier(score: float) -> str:
    for minimum, tier in SAMPLE_TIERS:
        if score >= minimum:
            return tier
    return SAMPLE_TIERS[-1][1]


def sample_hands(
    collected: Iterable[Tuple[Hand, Sequence[CardRecord], float]],
    scorer: HandScorer,
    threshold: float,
) -> Dict[str, List[SampleHand]]:
    """
    Pick up to SAMPLES_PER_TIER example hands per quality tier.

    Hands are taken best score first, so each tier shows its strongest
    examples.
    """
    tiers: Dict[str, List[SampleHand]] = {tier: [] for _, tier in SAMPLE_TIERS}

    for hand, draws, score in sorted(collected, key=lambda item: item[2], reverse=True):
        bucket = tiers[sample_tier(score)]
        if len(bucket) >= SAMPLES_PER_TIER:
            continue
        breakdown = scorer.breakdown(hand, draws)
        bucket.append(
            SampleHand(
                cards=tuple(card.name for card in hand.cards),
                land_count=hand.land_count,
                score=score,
                breakdown=breakdown,
                recommendation=sample_recommendation(score, threshold),
                reasoning=_reasoning(hand, breakdown, scorer.archetype),
                turn_plan=goldfish(hand, draws),
            )
        )

    return tiers


def evaluate_hand(
    hand: Sequence[CardRecord],
    library: Sequence[CardRecord],
    analysis: MulliganAnalysis,
    key_pieces: Iterable[str] = (),
) -> HandEvaluation:
    """
    Keep-or-mulligan advice for a concrete hand.

    Args:
        hand: Cards in hand
        library: Upcoming draws, top first
        analysis: Result of analyze_mulligan_strategy for this deck
    """
    archetype = Archetype.parse(analysis.archetype)
    scorer = HandScorer(archetype, key_pieces)
    kept = Hand.of(hand)
    breakdown = scorer.breakdown(kept, library[:GOLDFISH_TURNS])

    sizes = [value.hand_size for value in analysis.values]
    size = min(max(len(kept), min(sizes)), max(sizes))
    threshold = analysis.value_for(size).threshold

    return HandEvaluation(
        score=breakdown.total,
        threshold=threshold,
        recommendation="KEEP" if breakdown.total >= threshold else "MULLIGAN",
        category=breakdown.category,
        breakdown=breakdown,
        reasoning=_reasoning(kept, breakdown, archetype),
    )
