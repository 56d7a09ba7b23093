"""
Monte Carlo land-drop simulation.

Each trial shuffles a fresh token deck, applies a London-mulligan keep
policy, then steps turn by turn until the running land count reaches the
turn number (success) or the target turn passes (failure).

Trials are independent, so iterations are split into partitions that run
in separate worker processes, each with its own random generator, and the
partial statistics are merged at the end.
"""

import asyncio
import logging
import math
import random
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .deck import CardType, Deck
from .errors import InvalidParameterError
from .mulligan import MulliganStrategy, strategy_for
from .types import (
    OPENING_HAND_SIZE,
    ConfidenceInterval,
    MonteCarloParams,
    MonteCarloResult,
    MulliganPolicy,
)

logger = logging.getLogger("manabase.simulation")

Z_95 = 1.96


@dataclass
class TrialStats:
    """
    Running statistics over trials.

    Turn-of-success mean and M2 are accumulated with Welford's method over
    successful trials only; partitions combine with Chan's parallel update.
    """

    target_turn: int
    trials: int = 0
    successes: int = 0
    mean_turn: float = 0.0
    m2: float = 0.0
    distribution: List[int] = field(default_factory=list)

    def __post_init__(self):
        if not self.distribution:
            self.distribution = [0] * (self.target_turn + 1)

    def add_success(self, turn: int) -> None:
        self.trials += 1
        self.successes += 1
        delta = turn - self.mean_turn
        self.mean_turn += delta / self.successes
        self.m2 += delta * (turn - self.mean_turn)
        self.distribution[turn] += 1

    def add_failure(self) -> None:
        self.trials += 1
        self.distribution[0] += 1

    def merge(self, other: "TrialStats") -> "TrialStats":
        """Combine two partitions into a new TrialStats."""
        successes = self.successes + other.successes
        if successes:
            delta = other.mean_turn - self.mean_turn
            mean_turn = self.mean_turn + delta * other.successes / successes
            m2 = (
                self.m2
                + other.m2
                + delta * delta * self.successes * other.successes / successes
            )
        else:
            mean_turn, m2 = 0.0, 0.0
        return TrialStats(
            target_turn=self.target_turn,
            trials=self.trials + other.trials,
            successes=successes,
            mean_turn=mean_turn,
            m2=m2,
            distribution=[a + b for a, b in zip(self.distribution, other.distribution)],
        )

    @property
    def standard_deviation(self) -> float:
        # Population deviation over successful trials
        return math.sqrt(self.m2 / self.successes) if self.successes else 0.0


def validate_params(params: MonteCarloParams) -> MonteCarloParams:
    """
    Reject malformed parameters before any trial runs.

    Returns:
        The params with mulligan_strategy coerced to MulliganPolicy
    """
    if params.iterations <= 0:
        raise InvalidParameterError(
            f"iterations must be > 0, got {params.iterations}"
        )
    if params.deck_size <= 0:
        raise InvalidParameterError(f"deck_size must be > 0, got {params.deck_size}")
    if params.land_count < 0 or params.land_count > params.deck_size:
        raise InvalidParameterError(
            f"land_count must be between 0 and deck_size ({params.deck_size}), "
            f"got {params.land_count}"
        )
    if params.deck_size < OPENING_HAND_SIZE:
        raise InvalidParameterError(
            f"deck_size must be at least {OPENING_HAND_SIZE} to draw a hand"
        )
    if params.target_turn < 1:
        raise InvalidParameterError(
            f"target_turn must be >= 1, got {params.target_turn}"
        )
    if not 0 <= params.max_mulligans < OPENING_HAND_SIZE:
        raise InvalidParameterError(
            f"max_mulligans must be between 0 and {OPENING_HAND_SIZE - 1}"
        )
    try:
        policy = MulliganPolicy(params.mulligan_strategy)
    except ValueError:
        raise InvalidParameterError(
            f"Unknown mulligan strategy {params.mulligan_strategy!r}"
        ) from None
    return replace(params, mulligan_strategy=policy)


def simulate_game(
    deck: Deck, params: MonteCarloParams, strategy: MulliganStrategy
) -> Optional[int]:
    """
    Simulate one game with London Mulligan.

    Returns:
        Turn on which land parity was reached, or None on failure
    """
    mulligans = 0
    while True:
        deck.reset()
        hand = deck.draw(OPENING_HAND_SIZE)
        lands_drawn = hand.count(CardType.LAND)
        kept_size, lands = strategy.london_keep(lands_drawn, mulligans)

        if mulligans >= params.max_mulligans or strategy.should_keep(kept_size, lands):
            lands_bottomed = lands_drawn - lands
            deck.put_on_bottom(
                [CardType.LAND] * lands_bottomed
                + [CardType.SPELL] * (mulligans - lands_bottomed)
            )
            break
        mulligans += 1

    for turn in range(1, params.target_turn + 1):
        # No draw on turn 1 for the player on the play
        if (turn > 1 or not params.on_play) and len(deck):
            if deck.draw_card() is CardType.LAND:
                lands += 1
        if lands >= turn:
            return turn

    return None


def run_partition(
    params: MonteCarloParams, iterations: int, seed: Optional[int] = None
) -> TrialStats:
    """Run `iterations` trials with a private generator."""
    rng = random.Random(seed)
    deck = Deck(params.land_count, params.deck_size, rng)
    strategy = strategy_for(params.mulligan_strategy)
    stats = TrialStats(target_turn=params.target_turn)

    for _ in range(iterations):
        turn = simulate_game(deck, params, strategy)
        if turn is None:
            stats.add_failure()
        else:
            stats.add_success(turn)

    return stats


def _partition_sizes(iterations: int, workers: int) -> List[int]:
    base, extra = divmod(iterations, workers)
    return [base + (1 if i < extra else 0) for i in range(workers) if base or i < extra]


def summarize(stats: TrialStats) -> MonteCarloResult:
    """Turn merged statistics into a MonteCarloResult."""
    p = stats.successes / stats.trials
    success_rate = p * 100
    # Wald interval on the success proportion
    margin = Z_95 * math.sqrt(p * (1 - p) / stats.trials) * 100

    return MonteCarloResult(
        iterations=stats.trials,
        successful_runs=stats.successes,
        success_rate=success_rate,
        average_turn=stats.mean_turn if stats.successes else 0.0,
        standard_deviation=stats.standard_deviation,
        confidence=ConfidenceInterval(
            lower=max(0.0, success_rate - margin),
            upper=min(100.0, success_rate + margin),
        ),
        distribution=list(stats.distribution),
    )


def simulate(params: MonteCarloParams, workers: int = 1) -> MonteCarloResult:
    """
    Run a full Monte Carlo simulation.

    Args:
        params: Simulation configuration
        workers: Worker processes; 1 runs in the calling process

    Returns:
        Aggregated MonteCarloResult

    Raises:
        InvalidParameterError: if params are malformed
    """
    params = validate_params(params)
    if workers < 1:
        raise InvalidParameterError(f"workers must be >= 1, got {workers}")

    start = time.time()
    sizes = _partition_sizes(params.iterations, workers)
    seeds = [
        None if params.seed is None else params.seed + index
        for index in range(len(sizes))
    ]

    if len(sizes) == 1:
        partials = [run_partition(params, sizes[0], seeds[0])]
    else:
        with ProcessPoolExecutor(max_workers=len(sizes)) as pool:
            partials = list(pool.map(run_partition, [params] * len(sizes), sizes, seeds))

    stats = partials[0]
    for partial in partials[1:]:
        stats = stats.merge(partial)

    result = summarize(stats)
    logger.info(
        "Simulated %d games (%d lands / %d cards, turn %d, %s) in %d ms: %.2f%%",
        result.iterations,
        params.land_count,
        params.deck_size,
        params.target_turn,
        params.mulligan_strategy.value,
        int((time.time() - start) * 1000),
        result.success_rate,
    )
    return result


async def simulate_async(params: MonteCarloParams, workers: int = 1) -> MonteCarloResult:
    """Run `simulate` off the event loop."""
    return await asyncio.to_thread(simulate, params, workers)
