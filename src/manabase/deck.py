"""
Deck representation and card drawing logic.

Two flavours share the same draw/bottom mechanics:
- Deck: opaque land/spell tokens for land-drop simulation
- CardLibrary: concrete card records for hand scoring
"""

import random
from enum import Enum
from typing import Generic, Iterable, List, Sequence, TypeVar

from .types import CardRecord

T = TypeVar("T")


class CardType(Enum):
    """Token types for land-drop simulation."""

    LAND = 1
    SPELL = 2


def expand_cards(cards: Iterable[CardRecord]) -> List[CardRecord]:
    """One entry per physical card (quantities expanded)."""
    expanded = []
    for card in cards:
        expanded.extend([card] * card.quantity)
    return expanded


class _Library(Generic[T]):
    """Ordered library; index 0 is the top."""

    def __init__(self, cards: Sequence[T], rng: random.Random = None):
        self._template = list(cards)
        self.rng = rng or random.Random()
        self.cards: List[T] = []
        self.reset()

    def reset(self) -> None:
        """Restore the full card pool and shuffle it (Fisher-Yates)."""
        self.cards = list(self._template)
        self.rng.shuffle(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def draw_card(self) -> T:
        if not self.cards:
            raise ValueError("Cannot draw from empty deck")
        return self.cards.pop(0)

    def draw(self, count: int) -> List[T]:
        """Draw up to `count` cards from the top."""
        drawn = self.cards[:count]
        del self.cards[:count]
        return drawn

    def put_on_bottom(self, cards: Iterable[T]) -> None:
        self.cards.extend(cards)


class Deck(_Library[CardType]):
    """
    Token deck for simulation: `total_lands` lands, the rest spells.
    """

    def __init__(self, total_lands: int, deck_size: int, rng: random.Random = None):
        """
        Initialize deck.

        Args:
            total_lands: Total number of lands in deck
            deck_size: Total cards in deck
            rng: Random generator owned by the caller
        """
        if not 0 <= total_lands <= deck_size:
            raise ValueError(
                f"total_lands must be between 0 and deck_size ({deck_size})"
            )
        self.total_lands = total_lands
        self.deck_size = deck_size
        tokens = [CardType.LAND] * total_lands + [CardType.SPELL] * (
            deck_size - total_lands
        )
        super().__init__(tokens, rng)


class CardLibrary(_Library[CardRecord]):
    """Concrete deck built from card records."""

    def __init__(self, cards: Iterable[CardRecord], rng: random.Random = None):
        super().__init__(expand_cards(cards), rng)
