"""Exception hierarchy for pkgquality.

All exceptions inherit from PkgQualityError (single catch point). Any of them
escaping the batch loop stops the run.
"""

from __future__ import annotations

from pathlib import Path


class PkgQualityError(Exception):
    """Base exception for all pkgquality errors."""


class InputFileNotFoundError(PkgQualityError):
    """The URL input file does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'File at "{path}" does not exist.')


class InvalidURLTypeError(PkgQualityError):
    """An input line is neither a GitHub nor an npm package URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid URL type: must be a GitHub or npm URL (got {url!r})")


class ResolutionError(PkgQualityError):
    """An npm package could not be resolved to its source repository."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not resolve {url}: {reason}")


class ScorerError(PkgQualityError):
    """A metric scorer failed while evaluating a repository."""

    def __init__(self, metric: str, repo_url: str, reason: str) -> None:
        self.metric = metric
        self.repo_url = repo_url
        super().__init__(f"{metric} scorer failed for {repo_url}: {reason}")


class WeightConfigurationError(PkgQualityError):
    """Net score weights do not cover every metric or do not sum to 1.0."""
