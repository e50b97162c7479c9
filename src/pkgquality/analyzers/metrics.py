"""Metric scorers.

Each scorer computes one quality dimension for a GitHub repository as a
score in [0, 1]. Scorers share nothing but the GitHub client, are built
fresh for every URL, and time their own work: `evaluate` brackets exactly
one scoring run with `time.perf_counter`.
"""

import logging
import re
import statistics
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

from pkgquality.adapters.base import parse_repo_url
from pkgquality.analyzers.github import GitHubFetcher
from pkgquality.models.schemas import MetricName, MetricResult, Platform, RepoRef

logger = logging.getLogger(__name__)


class MetricScorer(Protocol):
    """A pluggable unit computing one normalized quality dimension."""

    name: MetricName

    async def evaluate(self, repo_url: str) -> MetricResult:
        """Score `repo_url`, returning the score and the seconds it took."""
        ...


async def measure(score: Awaitable[float]) -> MetricResult:
    """Await `score` and pair its value with the wall-clock time it took."""
    start = time.perf_counter()
    value = await score
    return MetricResult(score=value, latency=time.perf_counter() - start)


def clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def github_ref(repo_url: str) -> RepoRef:
    """Parse a GitHub repository URL.

    Raises:
        ValueError: If the URL does not point at a GitHub repository.
    """
    ref = parse_repo_url(repo_url)
    if ref is None or ref.platform != Platform.GITHUB:
        raise ValueError(f"not a GitHub repository URL: {repo_url}")
    return ref


class BusFactorScorer:
    """Contributor-concentration risk.

    The bus factor is the smallest number of top contributors that together
    account for half of all contributions. Five or more scores 1.0.
    """

    name = MetricName.BUS_FACTOR

    TARGET = 5
    SHARE = 0.5

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    async def evaluate(self, repo_url: str) -> MetricResult:
        return await measure(self._score(repo_url))

    async def _score(self, repo_url: str) -> float:
        ref = github_ref(repo_url)
        await self.github.fetch_repo_info(ref)
        stats = await self.github.fetch_contributor_stats(ref)
        bus_factor = self.bus_factor(stats.contributions)
        logger.debug(f"{ref.owner}/{ref.repo}: bus factor {bus_factor} over {stats.total_contributors} contributors")
        return clamp(bus_factor / self.TARGET)

    @classmethod
    def bus_factor(cls, contributions: list[int]) -> int:
        total = sum(contributions)
        if total == 0:
            return 0

        covered = 0
        for count, contributed in enumerate(sorted(contributions, reverse=True), start=1):
            covered += contributed
            if covered >= total * cls.SHARE:
                return count
        return len(contributions)


class ResponsiveMaintainerScorer:
    """Issue turnaround: median hours from an issue being opened to its first reply."""

    name = MetricName.RESPONSIVE_MAINTAINER

    FAST_HOURS = 24.0
    SLOW_HOURS = 720.0

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    async def evaluate(self, repo_url: str) -> MetricResult:
        return await measure(self._score(repo_url))

    async def _score(self, repo_url: str) -> float:
        ref = github_ref(repo_url)
        await self.github.fetch_repo_info(ref)
        stats = await self.github.fetch_issue_stats(ref)
        if not stats.response_times_hours:
            return 0.0

        median = statistics.median(stats.response_times_hours)
        logger.debug(f"{ref.owner}/{ref.repo}: median first response {median:.1f}h")
        return self.from_hours(median)

    @classmethod
    def from_hours(cls, hours: float) -> float:
        if hours <= cls.FAST_HOURS:
            return 1.0
        if hours >= cls.SLOW_HOURS:
            return 0.0
        return clamp(1.0 - (hours - cls.FAST_HOURS) / (cls.SLOW_HOURS - cls.FAST_HOURS))


# SPDX identifiers that can be combined with LGPL-2.1 code
COMPATIBLE_LICENSES = frozenset({
    "MIT",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "ISC",
    "Zlib",
    "Unlicense",
    "0BSD",
    "CC0-1.0",
    "MPL-2.0",
    "LGPL-2.1",
    "LGPL-2.1-only",
    "LGPL-2.1-or-later",
    "LGPL-3.0",
    "LGPL-3.0-only",
    "LGPL-3.0-or-later",
    "GPL-2.0",
    "GPL-2.0-only",
    "GPL-2.0-or-later",
    "GPL-3.0",
    "GPL-3.0-only",
    "GPL-3.0-or-later",
})

# Checked in order; LGPL before GPL
README_LICENSES = [
    (re.compile(r"\bLGPL[- ]?v?2\.1|Lesser General Public License,? v(?:ersion)? ?2\.1", re.I), "LGPL-2.1"),
    (re.compile(r"\bLGPL[- ]?v?3|Lesser General Public License,? v(?:ersion)? ?3", re.I), "LGPL-3.0"),
    (re.compile(r"\bGPL[- ]?v?3|(?<!Lesser )General Public License,? v(?:ersion)? ?3", re.I), "GPL-3.0"),
    (re.compile(r"\bGPL[- ]?v?2|(?<!Lesser )General Public License,? v(?:ersion)? ?2", re.I), "GPL-2.0"),
    (re.compile(r"\bApache\b", re.I), "Apache-2.0"),
    (re.compile(r"\bMozilla Public License|\bMPL[- ]?2", re.I), "MPL-2.0"),
    (re.compile(r"\bMIT\b"), "MIT"),
    (re.compile(r"\bISC\b"), "ISC"),
    (re.compile(r"\b(?:BSD[- ]?2|2-Clause BSD|Simplified BSD)", re.I), "BSD-2-Clause"),
    (re.compile(r"\bBSD\b"), "BSD-3-Clause"),
    (re.compile(r"\bUnlicense\b", re.I), "Unlicense"),
    (re.compile(r"\bCC0\b", re.I), "CC0-1.0"),
    (re.compile(r"\bzlib\b", re.I), "Zlib"),
]

_LICENSE_HEADING = re.compile(r"^#{1,6}\s*licen[cs]e\b.*$", re.I | re.M)
_NEXT_HEADING = re.compile(r"^#{1,6}\s", re.M)


def readme_license_section(readme: str) -> str:
    """Text under the README's License heading, or the whole README without one."""
    heading = _LICENSE_HEADING.search(readme)
    if heading is None:
        return readme
    rest = readme[heading.end():]
    following = _NEXT_HEADING.search(rest)
    return rest[: following.start()] if following else rest


def license_from_readme(readme: str) -> str | None:
    section = readme_license_section(readme)
    for pattern, spdx_id in README_LICENSES:
        if pattern.search(section):
            return spdx_id
    return None


class LicenseScorer:
    """1.0 when the repository's license is compatible with LGPL-2.1, else 0.0."""

    name = MetricName.LICENSE

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    async def evaluate(self, repo_url: str) -> MetricResult:
        return await measure(self._score(repo_url))

    async def _score(self, repo_url: str) -> float:
        ref = github_ref(repo_url)
        info = await self.github.fetch_repo_info(ref)

        license_id = info.license
        if not license_id or license_id == "NOASSERTION":
            readme = await self.github.fetch_readme_content(ref)
            license_id = license_from_readme(readme) if readme else None

        logger.debug(f"{ref.owner}/{ref.repo}: license {license_id}")
        return 1.0 if license_id in COMPATIBLE_LICENSES else 0.0


class RampUpScorer:
    """Onboarding friction, judged from the documentation a newcomer finds."""

    name = MetricName.RAMP_UP

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    async def evaluate(self, repo_url: str) -> MetricResult:
        return await measure(self._score(repo_url))

    async def _score(self, repo_url: str) -> float:
        ref = github_ref(repo_url)
        await self.github.fetch_repo_info(ref)
        files = await self.github.fetch_repo_files(ref)

        score = 0.0
        if files.has_readme:
            score += 0.3
            if files.readme_size_bytes >= 5 * 1024:
                score += 0.3
            elif files.readme_size_bytes >= 1024:
                score += 0.2
        if files.has_docs_dir:
            score += 0.2
        if files.has_examples_dir:
            score += 0.1
        if files.has_contributing:
            score += 0.1
        return clamp(score)


class CorrectnessScorer:
    """Build health: CI pass rate, presence of tests, and issue closure ratio."""

    name = MetricName.CORRECTNESS

    CI_WEIGHT = 0.5
    TESTS_WEIGHT = 0.3
    ISSUES_WEIGHT = 0.2

    def __init__(self, github: GitHubFetcher) -> None:
        self.github = github

    async def evaluate(self, repo_url: str) -> MetricResult:
        return await measure(self._score(repo_url))

    async def _score(self, repo_url: str) -> float:
        ref = github_ref(repo_url)
        await self.github.fetch_repo_info(ref)
        ci = await self.github.fetch_ci_status(ref)
        files = await self.github.fetch_repo_files(ref)
        issues = await self.github.fetch_issue_stats(ref, sample_size=0)

        score = 0.0
        if ci.recent_runs_pass_rate is not None:
            score += self.CI_WEIGHT * ci.recent_runs_pass_rate / 100
        if files.has_tests_dir:
            score += self.TESTS_WEIGHT
        total_issues = issues.open_issues + issues.closed_issues_6mo
        if total_issues:
            score += self.ISSUES_WEIGHT * issues.closed_issues_6mo / total_issues
        return clamp(score)


# Evaluation order of the scorers for one URL
SCORER_TYPES: list[Callable[[GitHubFetcher], MetricScorer]] = [
    BusFactorScorer,
    ResponsiveMaintainerScorer,
    LicenseScorer,
    RampUpScorer,
    CorrectnessScorer,
]


def build_scorers(github: GitHubFetcher) -> list[MetricScorer]:
    """Construct a fresh scorer of every kind."""
    return [scorer_type(github) for scorer_type in SCORER_TYPES]
