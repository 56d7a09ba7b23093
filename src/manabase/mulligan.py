"""
Mulligan strategies for simulation.

Implements London Mulligan (2019+ standard): always draw 7, then put N
cards on the bottom of the library (N = mulligans taken).
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Type, Union

from .types import OPENING_HAND_SIZE, MulliganPolicy


class MulliganStrategy(ABC):
    """Abstract base class for mulligan decisions."""

    policy: MulliganPolicy

    @abstractmethod
    def should_keep(self, hand_size: int, lands_in_hand: int) -> bool:
        """
        Decide whether to keep this hand.

        Args:
            hand_size: Number of cards kept (after bottoming)
            lands_in_hand: Number of lands among them

        Returns:
            True if should keep, False if should mulligan
        """

    def choose_cards_to_bottom(
        self, lands_in_hand: int, hand_size: int, num_to_bottom: int
    ) -> int:
        """
        Choose how many lands go to the bottom of the library.

        Heuristic from teryror's London mulligan simulation: bottom a land
        while lands > hand_size/2 and lands > 2, otherwise bottom a spell.

        Args:
            lands_in_hand: Total lands in the drawn 7
            hand_size: Cards drawn (always 7 with London)
            num_to_bottom: Number of cards to put on bottom

        Returns:
            Number of lands to bottom (the rest are spells)
        """
        lands_to_bottom = 0
        spells_in_hand = hand_size - lands_in_hand

        for _ in range(num_to_bottom):
            if (lands_in_hand > (hand_size // 2) and lands_in_hand > 2) or (
                spells_in_hand == 0
            ):
                lands_to_bottom += 1
                lands_in_hand -= 1
            else:
                spells_in_hand -= 1

        return lands_to_bottom

    def london_keep(self, lands_drawn: int, mulligans: int) -> Tuple[int, int]:
        """
        Apply the bottoming step to a freshly drawn 7.

        Returns:
            Tuple of (kept_hand_size, kept_lands)
        """
        lands_to_bottom = self.choose_cards_to_bottom(
            lands_drawn, OPENING_HAND_SIZE, mulligans
        )
        return OPENING_HAND_SIZE - mulligans, lands_drawn - lands_to_bottom


class NoMulligan(MulliganStrategy):
    policy = MulliganPolicy.NONE

    def should_keep(self, hand_size: int, lands_in_hand: int) -> bool:
        return True


class AggressiveMulligan(MulliganStrategy):
    """Keep 2-5 lands."""

    policy = MulliganPolicy.AGGRESSIVE

    def should_keep(self, hand_size: int, lands_in_hand: int) -> bool:
        return 2 <= lands_in_hand <= 5


class ConservativeMulligan(MulliganStrategy):
    """Keep 1-6 lands."""

    policy = MulliganPolicy.CONSERVATIVE

    def should_keep(self, hand_size: int, lands_in_hand: int) -> bool:
        return 1 <= lands_in_hand <= 6


class OptimalMulligan(MulliganStrategy):
    """Keep within 2 lands of 40% of the hand."""

    policy = MulliganPolicy.OPTIMAL

    def should_keep(self, hand_size: int, lands_in_hand: int) -> bool:
        optimal_lands = int(hand_size * 0.4)
        return abs(lands_in_hand - optimal_lands) <= 2


_STRATEGIES: Dict[MulliganPolicy, Type[MulliganStrategy]] = {
    MulliganPolicy.NONE: NoMulligan,
    MulliganPolicy.AGGRESSIVE: AggressiveMulligan,
    MulliganPolicy.CONSERVATIVE: ConservativeMulligan,
    MulliganPolicy.OPTIMAL: OptimalMulligan,
}


def strategy_for(policy: Union[MulliganPolicy, str]) -> MulliganStrategy:
    """Instantiate the strategy for a policy (enum or its string value)."""
    return _STRATEGIES[MulliganPolicy(policy)]()
