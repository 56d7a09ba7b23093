"""
Hand quality scoring.

A hand is goldfished for turns 1-4 (solitaire play, no opponent) and rated
0-100 from several sub-scores, weighted per archetype:

- mana efficiency: mana spent / mana available over the goldfish
- curve: presence of the drops the archetype wants
- color access: spell colors covered by the hand's lands
- early game: turn 1-2 plays backed by lands
- land balance: land count versus the archetype's ideal range
- key pieces: named cards present (combo decks)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .types import CardRecord, Color

GOLDFISH_TURNS = 4


@dataclass(frozen=True)
class ArchetypeProfile:
    name: str
    description: str
    weights: Tuple[Tuple[str, float], ...]
    ideal_lands: Tuple[int, int, int]
    """(min, optimal, max) lands in an opening hand"""
    priorities: Tuple[str, ...]

    @property
    def weight_map(self) -> Dict[str, float]:
        return dict(self.weights)


class Archetype(Enum):
    """Deck archetypes, each carrying its scoring profile."""

    AGGRO = ArchetypeProfile(
        name="Aggro",
        description="Fast, proactive decks that want to kill quickly",
        weights=(
            ("mana_efficiency", 0.20),
            ("curve", 0.30),
            ("color_access", 0.15),
            ("early_game", 0.25),
            ("land_balance", 0.10),
        ),
        ideal_lands=(1, 2, 3),
        priorities=(
            "1-drop on T1 is critical",
            "Curve out T1-T2-T3",
            "2-3 lands is ideal, 4+ is flood",
            "Mulligan aggressively for action",
        ),
    )
    MIDRANGE = ArchetypeProfile(
        name="Midrange",
        description="Balanced decks with threats and answers",
        weights=(
            ("mana_efficiency", 0.25),
            ("curve", 0.25),
            ("color_access", 0.20),
            ("early_game", 0.15),
            ("land_balance", 0.15),
        ),
        ideal_lands=(2, 3, 4),
        priorities=(
            "Smooth curve T2-T3-T4",
            "3-4 lands is ideal",
            "Balance threats and interaction",
            "Keep hands with good mana",
        ),
    )
    CONTROL = ArchetypeProfile(
        name="Control",
        description="Reactive decks that want to go long",
        weights=(
            ("mana_efficiency", 0.15),
            ("curve", 0.15),
            ("color_access", 0.30),
            ("early_game", 0.10),
            ("land_balance", 0.30),
        ),
        ideal_lands=(3, 4, 5),
        priorities=(
            "Hit land drops every turn",
            "Have answers for early threats",
            "4+ lands is ideal",
            "Color access is critical",
        ),
    )
    COMBO = ArchetypeProfile(
        name="Combo",
        description="Decks looking to assemble specific pieces",
        weights=(
            ("mana_efficiency", 0.15),
            ("curve", 0.10),
            ("color_access", 0.25),
            ("early_game", 0.20),
            ("land_balance", 0.30),
            ("key_pieces", 0.30),
        ),
        ideal_lands=(2, 3, 4),
        priorities=(
            "Find combo pieces",
            "Have mana to combo off",
            "Cantrips and draw are premium",
            "Can keep slower hands",
        ),
    )

    @property
    def profile(self) -> ArchetypeProfile:
        return self.value

    @classmethod
    def parse(cls, value) -> "Archetype":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown archetype {value!r}. "
                f"Valid archetypes: {[a.name.lower() for a in cls]}"
            ) from None


# Score categories (lower bounds)
SCORE_CATEGORIES = (
    (90, "snap_keep"),
    (75, "keep"),
    (60, "marginal"),
    (40, "mulligan"),
    (0, "snap_mull"),
)


def score_category(score: float) -> str:
    for minimum, label in SCORE_CATEGORIES:
        if score >= minimum:
            return label
    return "snap_mull"


@dataclass(frozen=True)
class Hand:
    cards: Tuple[CardRecord, ...]

    @classmethod
    def of(cls, cards: Iterable[CardRecord]) -> "Hand":
        return cls(tuple(cards))

    @property
    def lands(self) -> List[CardRecord]:
        return [c for c in self.cards if c.is_land]

    @property
    def spells(self) -> List[CardRecord]:
        return [c for c in self.cards if not c.is_land]

    @property
    def land_count(self) -> int:
        return sum(1 for c in self.cards if c.is_land)

    def __len__(self) -> int:
        return len(self.cards)


@dataclass(frozen=True)
class TurnPlan:
    turn: int
    land_drop: Optional[str]
    plays: Tuple[str, ...]
    mana_used: int
    mana_available: int


@dataclass(frozen=True)
class ScoreBreakdown:
    mana_efficiency: float
    curve: float
    color_access: float
    early_game: float
    land_balance: float
    key_pieces: Optional[float]
    total: float

    @property
    def category(self) -> str:
        return score_category(self.total)


def _castable(spell: CardRecord, mana_left: int, colors: FrozenSet[Color]) -> bool:
    return 0 < spell.cmc <= mana_left and spell.colors <= colors


def goldfish(
    hand: Hand, draws: Sequence[CardRecord], turns: int = GOLDFISH_TURNS
) -> List[TurnPlan]:
    """
    Play out turns 1..`turns` on the play against no opponent.

    Each turn: draw (not on turn 1), play the land adding the most new
    colors, then cast the most expensive affordable spells first.
    """
    lands_in_hand = list(hand.lands)
    spells_in_hand = list(hand.spells)
    draw_pile = list(draws)
    lands_in_play = 0
    colors: FrozenSet[Color] = frozenset()
    plans = []

    for turn in range(1, turns + 1):
        if turn > 1 and draw_pile:
            drawn = draw_pile.pop(0)
            if drawn.is_land:
                lands_in_hand.append(drawn)
            else:
                spells_in_hand.append(drawn)

        land_drop = None
        if lands_in_hand:
            land = max(lands_in_hand, key=lambda c: len(c.produces - colors))
            lands_in_hand.remove(land)
            lands_in_play += 1
            colors = colors | land.produces
            land_drop = land.name

        mana_left = lands_in_play
        plays = []
        for spell in sorted(spells_in_hand, key=lambda c: c.cmc, reverse=True):
            if _castable(spell, mana_left, colors):
                mana_left -= spell.cmc
                plays.append(spell)
        for spell in plays:
            spells_in_hand.remove(spell)

        plans.append(
            TurnPlan(
                turn=turn,
                land_drop=land_drop,
                plays=tuple(s.name for s in plays),
                mana_used=lands_in_play - mana_left,
                mana_available=lands_in_play,
            )
        )

    return plans


def mana_efficiency(plans: Sequence[TurnPlan]) -> float:
    available = sum(p.mana_available for p in plans)
    spent = sum(p.mana_used for p in plans)
    return spent / available * 100 if available else 0.0


def _cmc_counts(hand: Hand) -> List[int]:
    """Spell counts at CMC 1, 2, 3, 4, 5+."""
    counts = [0, 0, 0, 0, 0]
    for spell in hand.spells:
        if spell.cmc >= 1:
            counts[min(spell.cmc, 5) - 1] += 1
    return counts


def curve_score(hand: Hand, archetype: Archetype) -> float:
    ones, twos, threes, fours, _ = _cmc_counts(hand)
    score = 0

    if archetype is Archetype.AGGRO:
        # No 1-2 drop caps an aggro hand at 15
        if ones >= 1:
            score += 40
        if twos >= 1:
            score += 30
        if ones >= 2:
            score += 15
        if threes >= 1:
            score += 15
    elif archetype is Archetype.MIDRANGE:
        if twos >= 1:
            score += 35
        if threes >= 1:
            score += 35
        if fours >= 1:
            score += 20
        if ones >= 1:
            score += 10
    elif archetype is Archetype.CONTROL:
        if twos >= 1:
            score += 30
        if threes >= 1:
            score += 25
        if fours >= 1:
            score += 25
        if len(hand.spells) >= 3:
            score += 20
    else:
        if len(hand.spells) >= 2:
            score += 40
        if ones >= 1 or twos >= 1:
            score += 30
        if any(s.cmc <= 2 for s in hand.spells):
            score += 30

    return float(min(100, score))


def color_access_score(hand: Hand) -> float:
    """Share of the spells' colors that the hand's lands can produce."""
    produced = frozenset().union(*(land.produces for land in hand.lands))
    required = 0
    met = 0
    for spell in hand.spells:
        required += len(spell.colors)
        met += len(spell.colors & produced)
    if required == 0:
        return 100.0
    return met / required * 100


def early_game_score(hand: Hand, archetype: Archetype) -> float:
    has_one = any(s.cmc == 1 for s in hand.spells)
    has_two = any(s.cmc == 2 for s in hand.spells)
    lands = hand.land_count
    score = 0

    if archetype is Archetype.AGGRO:
        if has_one and lands >= 1:
            score += 50
        if has_two and lands >= 2:
            score += 30
        if has_one and has_two:
            score += 20
    elif archetype is Archetype.MIDRANGE:
        if has_two and lands >= 2:
            score += 50
        if has_one:
            score += 20
        if lands >= 3:
            score += 30
    elif archetype is Archetype.CONTROL:
        if lands >= 2:
            score += 40
        if has_two:
            score += 30
        if lands >= 3:
            score += 30
    else:
        if lands >= 2:
            score += 50
        if has_one or has_two:
            score += 30
        if len(hand.spells) >= 3:
            score += 20

    return float(min(100, score))


def land_balance_score(hand: Hand, archetype: Archetype) -> float:
    low, optimal, high = archetype.profile.ideal_lands
    count = hand.land_count

    if count == optimal:
        return 100.0
    if low <= count <= high:
        # Linear interpolation towards the optimum
        if count < optimal:
            return 70 + 30 * (count - low) / (optimal - low)
        return 70 + 30 * (high - count) / (high - optimal)
    if count == 0:
        return 0.0
    if count > high:
        return float(max(0, 50 - (count - high) * 15))
    return float(max(0, 50 - (low - count) * 20))


def key_pieces_score(hand: Hand, key_pieces: FrozenSet[str]) -> float:
    names = {card.name for card in hand.cards}
    return len(names & key_pieces) / len(key_pieces) * 100


class HandScorer:
    """Scores hands for one archetype."""

    def __init__(self, archetype: Archetype = Archetype.MIDRANGE, key_pieces: Iterable[str] = ()):
        self.archetype = Archetype.parse(archetype)
        self.key_pieces = frozenset(key_pieces)

    def breakdown(self, hand: Hand, draws: Sequence[CardRecord] = ()) -> ScoreBreakdown:
        """
        Score a hand.

        Args:
            hand: The kept hand
            draws: Library cards in draw order (top first)
        """
        plans = goldfish(hand, draws)
        scores = {
            "mana_efficiency": mana_efficiency(plans),
            "curve": curve_score(hand, self.archetype),
            "color_access": color_access_score(hand),
            "early_game": early_game_score(hand, self.archetype),
            "land_balance": land_balance_score(hand, self.archetype),
        }
        if self.key_pieces:
            scores["key_pieces"] = key_pieces_score(hand, self.key_pieces)

        weights = self.archetype.profile.weight_map
        # Sub-scores without data (no key pieces configured) drop out
        used = {name: w for name, w in weights.items() if name in scores}
        total = sum(scores[name] * w for name, w in used.items()) / sum(used.values())

        return ScoreBreakdown(
            mana_efficiency=scores["mana_efficiency"],
            curve=scores["curve"],
            color_access=scores["color_access"],
            early_game=scores["early_game"],
            land_balance=scores["land_balance"],
            key_pieces=scores.get("key_pieces"),
            total=min(100.0, max(0.0, total)),
        )

    def score(self, hand: Hand, draws: Sequence[CardRecord] = ()) -> float:
        return self.breakdown(hand, draws).total

    def card_priority(self, card: CardRecord, lands_drawn: int) -> int:
        """How much this archetype wants to keep `card` when bottoming."""
        if card.is_land:
            return 70 if lands_drawn <= self.archetype.profile.ideal_lands[2] else 20

        cmc = card.cmc
        if self.archetype is Archetype.AGGRO:
            return {1: 100, 2: 85, 3: 60}.get(cmc, 30)
        if self.archetype is Archetype.MIDRANGE:
            return {1: 70, 2: 90, 3: 95, 4: 80}.get(cmc, 40)
        if self.archetype is Archetype.CONTROL:
            if cmc >= 5:
                return 70
            return {2: 85, 3: 80, 4: 85}.get(cmc, 60)
        if card.name in self.key_pieces:
            return 110
        if cmc <= 2:
            return 90
        return 75 if cmc <= 3 else 50

    def select_best_subset(self, cards: Sequence[CardRecord], target_size: int) -> Tuple[Hand, List[CardRecord]]:
        """
        London mulligan: keep the best `target_size` cards of the drawn 7.

        Lands are kept first up to the archetype's optimal count, then the
        highest-priority cards fill the hand.

        Returns:
            Tuple of (kept hand, cards to bottom)
        """
        if len(cards) <= target_size:
            return Hand.of(cards), []

        lands_drawn = sum(1 for c in cards if c.is_land)
        ranked = sorted(
            range(len(cards)),
            key=lambda i: self.card_priority(cards[i], lands_drawn),
            reverse=True,
        )
        target_lands = self.archetype.profile.ideal_lands[1]

        selected: List[int] = []
        for i in ranked:
            if cards[i].is_land and len(selected) < min(target_lands, target_size):
                selected.append(i)
        for i in ranked:
            if len(selected) >= target_size:
                break
            if i not in selected:
                selected.append(i)

        chosen = set(selected)
        kept = [cards[i] for i in selected]
        bottom = [cards[i] for i in range(len(cards)) if i not in chosen]
        return Hand.of(kept), bottom
