"""Tests for net score aggregation and weight validation."""

from __future__ import annotations

import pytest

from pkgquality.analyzers.aggregator import WEIGHTS, ScoreAggregator, check_weights
from pkgquality.errors import WeightConfigurationError
from pkgquality.models.schemas import MetricName

ORDER = [
    MetricName.BUS_FACTOR,
    MetricName.RESPONSIVE_MAINTAINER,
    MetricName.RAMP_UP,
    MetricName.CORRECTNESS,
    MetricName.LICENSE,
]


def _scores(*values: float) -> dict[MetricName, float]:
    return dict(zip(ORDER, values))


class TestAggregate:
    def test_equal_weights(self) -> None:
        result = ScoreAggregator().aggregate(_scores(0.8, 0.6, 1.0, 0.4, 0.9), WEIGHTS)
        assert result.score == pytest.approx(0.74)
        assert result.latency >= 0.0

    def test_exact_weighted_sum(self) -> None:
        weights = _scores(0.4, 0.1, 0.1, 0.1, 0.3)
        result = ScoreAggregator().aggregate(_scores(1.0, 0.0, 0.5, 0.5, 1.0), weights)
        assert result.score == pytest.approx(0.4 + 0.05 + 0.05 + 0.3)

    @pytest.mark.parametrize(
        "scores",
        [
            (0.0, 0.0, 0.0, 0.0, 0.0),
            (1.0, 1.0, 1.0, 1.0, 1.0),
            (0.1, 0.9, 0.3, 0.7, 0.5),
        ],
    )
    def test_stays_in_unit_interval(self, scores: tuple[float, ...]) -> None:
        result = ScoreAggregator().aggregate(_scores(*scores), WEIGHTS)
        assert 0.0 <= result.score <= 1.0 + 1e-12

    def test_weights_are_trusted(self) -> None:
        weights = _scores(1.0, 1.0, 1.0, 1.0, 1.0)
        result = ScoreAggregator().aggregate(_scores(1.0, 1.0, 1.0, 1.0, 1.0), weights)
        assert result.score == pytest.approx(5.0)


class TestCheckWeights:
    def test_default_weights_are_valid(self) -> None:
        check_weights(WEIGHTS)
        assert sum(WEIGHTS.values()) == pytest.approx(1.0)

    def test_must_sum_to_one(self) -> None:
        with pytest.raises(WeightConfigurationError, match="sum to 1.0"):
            check_weights(_scores(0.2, 0.2, 0.2, 0.2, 0.3))

    def test_must_cover_every_metric(self) -> None:
        weights = dict(WEIGHTS)
        del weights[MetricName.LICENSE]
        with pytest.raises(WeightConfigurationError, match="missing"):
            check_weights(weights)

    def test_rejects_negative(self) -> None:
        with pytest.raises(WeightConfigurationError, match="negative"):
            check_weights(_scores(0.6, 0.6, -0.2, 0.0, 0.0))
