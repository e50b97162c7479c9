"""Weighted combination of metric scores into a net score."""

import math
import time
from collections.abc import Mapping

from pkgquality.errors import WeightConfigurationError
from pkgquality.models.schemas import MetricName, MetricResult

# Net score weights (total 1.0), equal weighting
WEIGHTS: dict[MetricName, float] = {
    MetricName.BUS_FACTOR: 0.2,
    MetricName.RESPONSIVE_MAINTAINER: 0.2,
    MetricName.RAMP_UP: 0.2,
    MetricName.CORRECTNESS: 0.2,
    MetricName.LICENSE: 0.2,
}


def check_weights(weights: Mapping[MetricName, float]) -> None:
    """Validate a weight vector before it is handed to the aggregator.

    Raises:
        WeightConfigurationError: If a metric is missing or unknown, a weight
            is negative, or the weights do not sum to 1.0.
    """
    if set(weights) != set(MetricName):
        missing = sorted(m.value for m in set(MetricName) - set(weights))
        extra = sorted(str(m) for m in set(weights) - set(MetricName))
        raise WeightConfigurationError(f"Weights must cover every metric (missing={missing}, unknown={extra})")
    if any(w < 0 for w in weights.values()):
        raise WeightConfigurationError("Weights must not be negative")
    total = math.fsum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise WeightConfigurationError(f"Weights must sum to 1.0, got {total}")


class ScoreAggregator:
    """Combines metric scores under caller-supplied weights.

    The weights are trusted as given; callers validate them with
    `check_weights`. The returned latency covers only the aggregation itself.
    """

    def aggregate(
        self,
        scores: Mapping[MetricName, float],
        weights: Mapping[MetricName, float],
    ) -> MetricResult:
        """Return the net score (sum of score x weight) and its latency in seconds."""
        start = time.perf_counter()
        net = sum(scores[name] * weight for name, weight in weights.items())
        return MetricResult(score=net, latency=time.perf_counter() - start)
