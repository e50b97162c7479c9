"""Analyzers for resolving URLs and scoring repositories."""

from pkgquality.analyzers.aggregator import ScoreAggregator
from pkgquality.analyzers.github import GitHubFetcher
from pkgquality.analyzers.pipeline import EvaluationPipeline
from pkgquality.analyzers.resolver import RepositoryResolver

__all__ = ["EvaluationPipeline", "GitHubFetcher", "RepositoryResolver", "ScoreAggregator"]
