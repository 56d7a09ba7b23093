import asyncio

import pytest

from manabase import (
    DeckTooSmallError,
    EngineConfig,
    InvalidParameterError,
    ManabaseEngine,
    MonteCarloParams,
)


def test_engines_do_not_share_caches():
    first = ManabaseEngine()
    second = ManabaseEngine()
    first.at_least_probability(60, 24, 7, 3)
    assert len(first.probability_cache) > 0
    assert len(second.probability_cache) == 0
    assert len(second.binomial_cache) == 0


def test_cache_is_transparent(engine):
    cold = engine.at_least_probability(60, 17, 10, 2)
    warm = engine.at_least_probability(60, 17, 10, 2)
    engine.clear_cache()
    cleared = engine.at_least_probability(60, 17, 10, 2)
    assert cold == warm == cleared


def test_cache_stats(engine):
    engine.analyze_turn(60, 14, 2, 1)
    engine.analyze_turn(60, 14, 2, 1)
    stats = engine.cache_stats()
    assert set(stats) == {"binomial", "probability"}
    assert stats["probability"]["hits"] > 0
    assert 0.0 < stats["probability"]["hit_rate"] <= 1.0
    engine.clear_cache()
    assert engine.cache_stats()["probability"]["size"] == 0


def test_binomial(engine):
    assert engine.binomial(60, 7) == 386_206_920


def test_turn_offset(engine):
    # On the play, turn T sees the same cards as turn T-1 on the draw
    for turn in range(2, 8):
        play = engine.analyze_turn(60, 16, turn, 2, on_play=True)
        draw = engine.analyze_turn(60, 16, turn - 1, 2, on_play=False)
        assert play.cast_probability == draw.cast_probability


def test_simulation_uses_configured_workers():
    engine = ManabaseEngine(EngineConfig(mc_workers=2))
    params = MonteCarloParams(
        deck_size=60, land_count=24, target_turn=3, iterations=200, seed=1
    )
    result = engine.simulate(params)
    assert result.iterations == 200
    assert asyncio.run(engine.simulate_async(params)) == result


def test_mulligan_minimum_from_config(deck):
    engine = ManabaseEngine(EngineConfig(min_deck_size=61))
    with pytest.raises(DeckTooSmallError):
        engine.analyze_mulligan_strategy(deck, iterations=10)


def test_mulligan_defaults_from_config(deck):
    engine = ManabaseEngine(EngineConfig(mulligan_iterations=40, min_hand_size=5))
    analysis = engine.analyze_mulligan_strategy(deck, seed=3)
    assert analysis.iterations == 40
    assert [v.hand_size for v in analysis.values] == [7, 6, 5]


def test_analyze_deck_colors(engine, deck):
    analysis = engine.analyze_deck_colors(deck)
    assert len(analysis.color_analyses) == 2
    assert analysis.optimal_manabase.total_lands == 24
    blue, white = analysis.color_analyses
    assert analysis.overall_consistency == pytest.approx(blue.probability * white.probability)
    # 12 sources each for turn-1 plays in both colors
    assert analysis.overall_consistency < 0.7


def test_zero_workers_is_rejected(engine):
    params = MonteCarloParams(deck_size=60, land_count=24, target_turn=3, iterations=10)
    with pytest.raises(InvalidParameterError):
        engine.simulate(params, workers=0)
    with pytest.raises(InvalidParameterError):
        asyncio.run(engine.simulate_async(params, workers=0))


def test_zero_mulligan_iterations_is_rejected(engine, deck):
    with pytest.raises(InvalidParameterError):
        engine.analyze_mulligan_strategy(deck, iterations=0)


def test_probability_by_turn_uses_engine_cache(engine):
    curve = engine.probability_by_turn(60, 24, max_turn=4)
    assert [analysis.cards_seen for analysis in curve] == [7, 8, 9, 10]
    misses = engine.cache_stats()["probability"]["misses"]
    assert engine.probability_by_turn(60, 24, max_turn=4) == curve
    assert engine.cache_stats()["probability"]["misses"] == misses


def test_recommend_land_count(engine, deck):
    recommendation = engine.recommend_land_count(deck, "limited")
    assert recommendation.recommended == 18
    assert recommendation.reasoning.startswith("Limited deck")
