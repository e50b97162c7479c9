"""End-to-end evaluation pipeline for one input URL."""

import asyncio
import logging
from collections.abc import Callable, Mapping

import httpx

from pkgquality.adapters.base import BaseAdapter
from pkgquality.adapters.npm import NpmAdapter
from pkgquality.analyzers.aggregator import WEIGHTS, ScoreAggregator, check_weights
from pkgquality.analyzers.github import GitHubFetcher
from pkgquality.analyzers.metrics import MetricScorer, build_scorers
from pkgquality.analyzers.resolver import RepositoryResolver
from pkgquality.errors import ScorerError
from pkgquality.models.schemas import EvaluationRecord, MetricName, MetricResult

logger = logging.getLogger(__name__)


class EvaluationPipeline:
    """Orchestrates the evaluation of a single URL.

    Pipeline stages:
    1. Resolve the URL to a repository (npm packages via the registry)
    2. Run the five metric scorers against the repository
    3. Aggregate the metric scores into the net score
    4. Assemble the result record, rounded to 3 decimal places

    Any failure discards the work done for the URL and propagates.
    """

    def __init__(
        self,
        github_token: str | None = None,
        adapter: BaseAdapter | None = None,
        scorer_factory: Callable[[GitHubFetcher], list[MetricScorer]] = build_scorers,
        weights: Mapping[MetricName, float] = WEIGHTS,
        parallel: bool = False,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the pipeline.

        Args:
            github_token: GitHub personal access token.
            adapter: Registry lookup used for npm URLs. Defaults to NpmAdapter.
            scorer_factory: Builds a fresh set of scorers for each URL.
            weights: Net score weights; must cover every metric and sum to 1.0.
            parallel: Run the scorers for a URL concurrently instead of one by one.
            timeout: HTTP timeout in seconds for the shared client.

        Raises:
            WeightConfigurationError: If `weights` is invalid.
        """
        check_weights(weights)
        self.weights = dict(weights)
        self.parallel = parallel
        self.scorer_factory = scorer_factory
        self.aggregator = ScoreAggregator()
        self._github_token = github_token
        self._adapter = adapter
        self._timeout = timeout
        self._http_client: httpx.AsyncClient | None = None
        self.github = GitHubFetcher(token=github_token, timeout=timeout)
        self.resolver = RepositoryResolver(adapter or NpmAdapter(timeout=timeout))

    async def __aenter__(self) -> "EvaluationPipeline":
        """Set up shared HTTP client."""
        self._http_client = httpx.AsyncClient(timeout=self._timeout)
        self.github = GitHubFetcher(token=self._github_token, client=self._http_client)
        self.resolver = RepositoryResolver(self._adapter or NpmAdapter(client=self._http_client))
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def evaluate(self, url: str) -> EvaluationRecord:
        """Evaluate one URL.

        Raises:
            InvalidURLTypeError: If the URL is neither GitHub nor npm.
            ResolutionError: If an npm package cannot be resolved.
            ScorerError: If any metric scorer fails.
        """
        logger.info(f"Evaluating URL: {url}")

        # Stage 1: Resolve
        repo_url = await self.resolver.resolve(url)

        # Stage 2: Score
        scorers = self.scorer_factory(self.github)
        if self.parallel:
            results = await self._run_concurrently(scorers, repo_url)
        else:
            results = [await self._run_scorer(s, repo_url) for s in scorers]
        metrics = {scorer.name: result for scorer, result in zip(scorers, results)}

        # Stage 3: Aggregate
        net = self.aggregator.aggregate(
            {name: result.score for name, result in metrics.items()},
            self.weights,
        )

        # Stage 4: Assemble
        return EvaluationRecord.build(repo_url, net, metrics)

    async def _run_concurrently(self, scorers: list[MetricScorer], repo_url: str) -> list[MetricResult]:
        """Run every scorer at once; the first failure cancels the rest."""
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._run_scorer(s, repo_url)) for s in scorers]
        except ExceptionGroup as e:
            # _run_scorer wraps everything in ScorerError
            raise e.exceptions[0]
        return [task.result() for task in tasks]

    async def _run_scorer(self, scorer: MetricScorer, repo_url: str) -> MetricResult:
        try:
            result = await scorer.evaluate(repo_url)
        except Exception as e:
            raise ScorerError(scorer.name.value, repo_url, f"{type(e).__name__}: {e}") from e

        logger.debug(f"{scorer.name.value}: {result.score:.3f} in {result.latency:.3f}s")
        return result
