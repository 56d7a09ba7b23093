import random

import pytest

from manabase import InvalidParameterError, MulliganDPSolver, ScoreDistribution
from manabase.dp_solver import continuation_value, deck_quality


def test_bucket_assignment():
    assert ScoreDistribution.bucket_for(0) == 0
    assert ScoreDistribution.bucket_for(9.99) == 0
    assert ScoreDistribution.bucket_for(10) == 1
    assert ScoreDistribution.bucket_for(99.5) == 9
    assert ScoreDistribution.bucket_for(100) == 10
    assert ScoreDistribution.bucket_for(-5) == 0


def test_distribution_mean_and_frequencies():
    distribution = ScoreDistribution.from_scores(7, [12, 18, 55, 100])
    assert distribution.total == 4
    assert distribution.mean == pytest.approx(46.25)
    frequencies = distribution.frequencies()
    assert sum(frequencies) == pytest.approx(1.0)
    assert frequencies[1] == 0.5
    assert list(distribution.buckets()) == [(0.5, 15.0), (0.25, 55.0), (0.25, 100.0)]


def test_chart_uses_bucket_centers():
    chart = ScoreDistribution.from_scores(6, [42]).to_chart()
    assert len(chart) == 11
    assert chart[4] == {"score": 45.0, "frequency": 1.0}


def test_continuation_value():
    distribution = ScoreDistribution.from_scores(7, [20, 80])
    # Keep the 80, mulligan the 20 into a 50
    assert continuation_value(distribution, 50) == pytest.approx(65.0)
    assert continuation_value(distribution, 0) == pytest.approx(50.0)
    assert continuation_value(distribution, 90) == pytest.approx(90.0)


def test_backward_induction():
    distributions = {
        5: ScoreDistribution.from_scores(5, [30, 30]),
        6: ScoreDistribution.from_scores(6, [20, 60]),
        7: ScoreDistribution.from_scores(7, [10, 90]),
    }
    values = MulliganDPSolver().solve(distributions)
    assert [v.hand_size for v in values] == [7, 6, 5]

    v7, v6, v5 = values
    assert v5.threshold == 0.0
    assert v5.expected_value == pytest.approx(30.0)
    assert v6.threshold == pytest.approx(30.0)
    assert v6.expected_value == pytest.approx(45.0)
    assert v7.threshold == pytest.approx(45.0)
    assert v7.expected_value == pytest.approx(67.5)


def test_expected_value_is_monotone_in_hand_size():
    rng = random.Random(4)
    distributions = {
        size: ScoreDistribution.from_scores(
            size, [min(100.0, rng.random() * size * 14) for _ in range(500)]
        )
        for size in range(4, 8)
    }
    values = MulliganDPSolver().solve(distributions)
    expected = [v.expected_value for v in values]
    assert expected == sorted(expected, reverse=True)
    for larger, smaller in zip(values, values[1:]):
        assert larger.threshold == smaller.expected_value


def test_hopeless_deck_degenerates_to_zero():
    distributions = {
        size: ScoreDistribution.from_scores(size, [0.0] * 100) for size in range(4, 8)
    }
    values = MulliganDPSolver().solve(distributions)
    assert all(v.threshold == 0.0 for v in values)
    assert all(v.expected_value == 0.0 for v in values)


def test_rejects_missing_or_gapped_sizes():
    solver = MulliganDPSolver()
    with pytest.raises(InvalidParameterError):
        solver.solve({})
    with pytest.raises(InvalidParameterError):
        solver.solve(
            {
                7: ScoreDistribution.from_scores(7, [50]),
                5: ScoreDistribution.from_scores(5, [50]),
            }
        )


def test_rejects_empty_distribution():
    with pytest.raises(InvalidParameterError):
        MulliganDPSolver().solve(
            {7: ScoreDistribution(7), 6: ScoreDistribution.from_scores(6, [40])}
        )


@pytest.mark.parametrize(
    "value,label", [(75, "excellent"), (60, "good"), (45, "average"), (20, "poor")]
)
def test_deck_quality(value, label):
    assert deck_quality(value) == label
