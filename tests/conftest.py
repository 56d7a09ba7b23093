import pytest

from manabase import CardRecord, EngineConfig, ManabaseEngine


@pytest.fixture
def engine():
    """Fresh engine with empty caches for every test."""
    return ManabaseEngine(EngineConfig())


def azorius_deck():
    """60 cards: 24 lands (12 Plains, 12 Island), 36 spells across the curve."""
    return [
        CardRecord("Plains", quantity=12, is_land=True, produces={"W"}),
        CardRecord("Island", quantity=12, is_land=True, produces={"U"}),
        CardRecord("Thraben Inspector", quantity=4, cmc=1, colors={"W"}),
        CardRecord("Spell Pierce", quantity=4, cmc=1, colors={"U"}),
        CardRecord("Adeline's Lieutenant", quantity=4, cmc=2, colors={"W"}),
        CardRecord("Counterspell", quantity=4, cmc=2, colors={"U"}),
        CardRecord("Brazen Borrower", quantity=4, cmc=3, colors={"U"}),
        CardRecord("Skyclave Apparition", quantity=4, cmc=3, colors={"W"}),
        CardRecord("Teferi, Hero", quantity=4, cmc=4, colors={"W", "U"}),
        CardRecord("Wrath of God", quantity=4, cmc=4, colors={"W"}),
        CardRecord("Sun Titan", quantity=4, cmc=6, colors={"W"}),
    ]


@pytest.fixture
def deck():
    return azorius_deck()

