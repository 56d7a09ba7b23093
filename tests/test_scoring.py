import pytest

from manabase import Archetype, CardRecord, HandScorer
from manabase.scoring import (
    Hand,
    color_access_score,
    curve_score,
    goldfish,
    land_balance_score,
    mana_efficiency,
    score_category,
)

PLAINS = CardRecord("Plains", is_land=True, produces={"W"})
ISLAND = CardRecord("Island", is_land=True, produces={"U"})
ONE_DROP = CardRecord("Thraben Inspector", cmc=1, colors={"W"})
TWO_DROP = CardRecord("Counterspell", cmc=2, colors={"U"})
THREE_DROP = CardRecord("Skyclave Apparition", cmc=3, colors={"W"})
FOUR_DROP = CardRecord("Wrath of God", cmc=4, colors={"W"})
RED_TWO = CardRecord("Lightning Helix", cmc=2, colors={"R", "W"})


def test_archetype_parse():
    assert Archetype.parse("aggro") is Archetype.AGGRO
    assert Archetype.parse(" Control ") is Archetype.CONTROL
    assert Archetype.parse(Archetype.COMBO) is Archetype.COMBO
    with pytest.raises(ValueError):
        Archetype.parse("tempo")


def test_archetype_profiles():
    assert Archetype.AGGRO.profile.ideal_lands == (1, 2, 3)
    assert Archetype.CONTROL.profile.ideal_lands == (3, 4, 5)
    weights = Archetype.MIDRANGE.profile.weight_map
    assert sum(weights.values()) == pytest.approx(1.0)
    assert "key_pieces" in Archetype.COMBO.profile.weight_map


@pytest.mark.parametrize(
    "score,category",
    [(95, "snap_keep"), (90, "snap_keep"), (80, "keep"), (65, "marginal"), (45, "mulligan"), (10, "snap_mull")],
)
def test_score_category(score, category):
    assert score_category(score) == category


def test_goldfish_curves_out():
    hand = Hand.of([PLAINS, ISLAND, PLAINS, ONE_DROP, TWO_DROP, THREE_DROP, FOUR_DROP])
    plans = goldfish(hand, draws=[PLAINS, PLAINS, PLAINS])
    assert [p.mana_available for p in plans] == [1, 2, 3, 4]
    assert plans[0].plays == ("Thraben Inspector",)
    assert plans[1].plays == ("Counterspell",)
    assert plans[2].plays == ("Skyclave Apparition",)
    assert plans[3].plays == ("Wrath of God",)
    assert mana_efficiency(plans) == 100.0


def test_goldfish_needs_colors():
    hand = Hand.of([PLAINS, PLAINS, TWO_DROP])
    plans = goldfish(hand, draws=[])
    assert all(not p.plays for p in plans)
    assert mana_efficiency(plans) == 0.0


def test_goldfish_plays_new_colors_first():
    hand = Hand.of([PLAINS, PLAINS, ISLAND])
    plans = goldfish(hand, draws=[], turns=2)
    assert plans[0].land_drop in ("Plains", "Island")
    assert {plans[0].land_drop, plans[1].land_drop} == {"Plains", "Island"}


def test_color_access():
    assert color_access_score(Hand.of([PLAINS, ONE_DROP])) == 100.0
    assert color_access_score(Hand.of([PLAINS, RED_TWO])) == 50.0
    assert color_access_score(Hand.of([PLAINS, ISLAND])) == 100.0


def test_land_balance():
    assert land_balance_score(Hand.of([PLAINS] * 3 + [ONE_DROP] * 4), Archetype.MIDRANGE) == 100.0
    assert land_balance_score(Hand.of([ONE_DROP] * 7), Archetype.MIDRANGE) == 0.0
    assert land_balance_score(Hand.of([PLAINS] * 7), Archetype.AGGRO) < 50.0


def test_aggro_curve_needs_cheap_spells():
    fast = Hand.of([PLAINS, PLAINS, ONE_DROP, ONE_DROP, TWO_DROP, THREE_DROP])
    slow = Hand.of([PLAINS, PLAINS, FOUR_DROP, FOUR_DROP, FOUR_DROP])
    assert curve_score(fast, Archetype.AGGRO) == 100.0
    assert curve_score(slow, Archetype.AGGRO) == 0.0


def test_good_hand_beats_bad_hand():
    scorer = HandScorer(Archetype.MIDRANGE)
    good = Hand.of([PLAINS, ISLAND, PLAINS, ONE_DROP, TWO_DROP, THREE_DROP, FOUR_DROP])
    no_lands = Hand.of([ONE_DROP, TWO_DROP, THREE_DROP, FOUR_DROP, ONE_DROP, TWO_DROP, THREE_DROP])
    flood = Hand.of([PLAINS] * 7)
    draws = [PLAINS, TWO_DROP, THREE_DROP]
    assert scorer.score(good, draws) > scorer.score(no_lands, draws)
    assert scorer.score(good, draws) > scorer.score(flood, draws)


def test_breakdown_is_bounded_and_categorized():
    scorer = HandScorer("control")
    breakdown = scorer.breakdown(
        Hand.of([PLAINS, ISLAND, PLAINS, ISLAND, TWO_DROP, FOUR_DROP, THREE_DROP])
    )
    assert 0.0 <= breakdown.total <= 100.0
    assert breakdown.key_pieces is None
    assert breakdown.category == score_category(breakdown.total)


def test_key_pieces_count_only_when_configured():
    combo_piece = CardRecord("Thassa's Oracle", cmc=2, colors={"U"})
    hand = Hand.of([ISLAND, ISLAND, PLAINS, combo_piece, TWO_DROP, ONE_DROP, THREE_DROP])
    with_piece = HandScorer(Archetype.COMBO, key_pieces=["Thassa's Oracle", "Demonic Consultation"])
    breakdown = with_piece.breakdown(hand)
    assert breakdown.key_pieces == 50.0


def test_select_best_subset_bottoms_excess_lands():
    scorer = HandScorer(Archetype.MIDRANGE)
    drawn = [PLAINS, PLAINS, PLAINS, ISLAND, ISLAND, TWO_DROP, THREE_DROP]
    kept, bottom = scorer.select_best_subset(drawn, 5)
    assert len(kept) == 5
    assert len(bottom) == 2
    assert kept.land_count == 3
    assert TWO_DROP in kept.cards and THREE_DROP in kept.cards
    assert all(card.is_land for card in bottom)


def test_select_best_subset_keeps_everything_at_seven():
    scorer = HandScorer()
    drawn = [PLAINS, ISLAND, ONE_DROP, TWO_DROP, THREE_DROP, FOUR_DROP, PLAINS]
    kept, bottom = scorer.select_best_subset(drawn, 7)
    assert len(kept) == 7
    assert bottom == []


def test_combo_keeps_key_pieces_when_bottoming():
    piece = CardRecord("Thassa's Oracle", cmc=2, colors={"U"})
    scorer = HandScorer(Archetype.COMBO, key_pieces=["Thassa's Oracle"])
    drawn = [ISLAND, ISLAND, PLAINS, piece, FOUR_DROP, FOUR_DROP, FOUR_DROP]
    kept, _ = scorer.select_best_subset(drawn, 4)
    assert piece in kept.cards
