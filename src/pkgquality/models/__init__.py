"""Data models and schemas."""

from pkgquality.models.schemas import (
    EvaluationRecord,
    MetricName,
    MetricResult,
    PackageMetadata,
    RepoRef,
)

__all__ = ["EvaluationRecord", "MetricName", "MetricResult", "PackageMetadata", "RepoRef"]
