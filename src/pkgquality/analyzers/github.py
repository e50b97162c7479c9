"""GitHub data fetcher for repository metrics."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import httpx

from pkgquality.models.schemas import (
    CIStatus,
    ContributorStats,
    GitHubRepoData,
    IssueStats,
    RepoFiles,
    RepoRef,
)

logger = logging.getLogger(__name__)


class RepositoryNotFoundError(Exception):
    """Raised when a repository does not exist or is not accessible."""

    def __init__(self, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo
        super().__init__(f"Repository {owner}/{repo} not found (may be private, deleted, or renamed)")


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class GitHubFetcher:
    """Fetches repository data from GitHub API.

    Requires a GitHub personal access token for higher rate limits.
    Set GITHUB_TOKEN environment variable or pass token to constructor.
    """

    BASE_URL = "https://api.github.com"

    # Warn once remaining requests drop below this
    RATE_LIMIT_WARNING = 50

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token.
            client: Optional httpx client. If not provided, a new client is created per request.
            timeout: Request timeout used when no client is supplied.
        """
        self._token = token
        self._client = client
        self._timeout = timeout

        # Rate limit tracking
        self.rate_limit_remaining: int = 5000
        self.rate_limit_reset: datetime | None = None

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the shared client, or a short-lived one closed on exit."""
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def _get(self, client: httpx.AsyncClient, path: str, params: dict | None = None) -> dict | list | None:
        """GET one API path. Missing resources (404) and empty bodies (204) give None."""
        response = await client.get(f"{self.BASE_URL}{path}", params=params, headers=self._headers())
        self._update_rate_limits(response)
        if response.status_code in (204, 404):
            return None
        response.raise_for_status()
        return response.json()

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        if reset is not None:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)
        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
            if self.rate_limit_remaining < self.RATE_LIMIT_WARNING:
                logger.warning(
                    f"GitHub rate limit low: {self.rate_limit_remaining} requests left, "
                    f"resets at {self.rate_limit_reset}"
                )

    async def _fetch(self, path: str, params: dict | None = None) -> dict | list | None:
        async with self._session() as client:
            return await self._get(client, path, params)

    async def _fetch_all_pages(self, path: str, params: dict | None = None, max_pages: int = 10) -> list:
        """Collect up to `max_pages` pages of a list endpoint, stopping at the first short page."""
        per_page = 100
        items: list = []
        async with self._session() as client:
            for page in range(1, max_pages + 1):
                data = await self._get(client, path, {**(params or {}), "per_page": per_page, "page": page})
                if not data:
                    break
                items.extend(data)
                if len(data) < per_page:
                    break
        return items

    async def fetch_repo_info(self, repo_ref: RepoRef) -> GitHubRepoData:
        """Fetch basic repository information.

        Raises:
            RepositoryNotFoundError: If the repository is not accessible.
        """
        owner, repo = repo_ref.owner, repo_ref.repo
        data = await self._fetch(f"/repos/{owner}/{repo}")
        if data is None:
            raise RepositoryNotFoundError(owner, repo)

        license_info = data.get("license") or {}
        return GitHubRepoData(owner=owner, name=repo, license=license_info.get("spdx_id"))

    async def fetch_contributor_stats(self, repo_ref: RepoRef) -> ContributorStats:
        """Fetch contribution counts per contributor, largest first."""
        contributors = await self._fetch_all_pages(
            f"/repos/{repo_ref.owner}/{repo_ref.repo}/contributors",
            max_pages=5,
        )

        counts = sorted(
            (c.get("contributions", 0) for c in contributors if c.get("contributions", 0) > 0),
            reverse=True,
        )
        return ContributorStats(total_contributors=len(contributors), contributions=counts)

    async def fetch_issue_stats(self, repo_ref: RepoRef, sample_size: int = 10) -> IssueStats:
        """Fetch issue counts and first-response times.

        Response times are sampled from issues closed in the last 180 days:
        hours from issue creation to its first comment.
        """
        owner, repo = repo_ref.owner, repo_ref.repo

        open_issues = await self._fetch_all_pages(
            f"/repos/{owner}/{repo}/issues",
            params={"state": "open"},
            max_pages=3,
        )
        # Pull requests are included in the issues endpoint
        open_issues = [i for i in open_issues if "pull_request" not in i]

        since = (datetime.now(timezone.utc) - timedelta(days=180)).isoformat()
        closed_issues = await self._fetch_all_pages(
            f"/repos/{owner}/{repo}/issues",
            params={"state": "closed", "since": since},
            max_pages=3,
        )
        closed_issues = [i for i in closed_issues if "pull_request" not in i]

        response_times = []
        for issue in closed_issues[:sample_size]:
            created_at = _parse_timestamp(issue.get("created_at"))
            if created_at is None or not issue.get("comments"):
                continue

            comments = await self._fetch(
                f"/repos/{owner}/{repo}/issues/{issue.get('number')}/comments",
                params={"per_page": 1},
            )
            if not comments or not isinstance(comments, list):
                continue

            first_comment_at = _parse_timestamp(comments[0].get("created_at"))
            if first_comment_at is not None:
                response_times.append((first_comment_at - created_at).total_seconds() / 3600)

        return IssueStats(
            open_issues=len(open_issues),
            closed_issues_6mo=len(closed_issues),
            response_times_hours=response_times,
        )

    async def fetch_repo_files(self, repo_ref: RepoRef) -> RepoFiles:
        """Check for presence of key repository files."""
        root = await self._fetch(f"/repos/{repo_ref.owner}/{repo_ref.repo}/contents")
        if not root or not isinstance(root, list):
            return RepoFiles()

        root_files = {item.get("name", "").lower(): item for item in root}

        def is_dir(*names: str) -> bool:
            return any(
                name in root_files and root_files[name].get("type") == "dir" for name in names
            )

        has_readme = False
        readme_size = 0
        for name in ["readme.md", "readme.rst", "readme.txt", "readme.markdown", "readme"]:
            if name in root_files:
                has_readme = True
                readme_size = root_files[name].get("size", 0)
                break

        return RepoFiles(
            has_readme=has_readme,
            readme_size_bytes=readme_size,
            has_contributing=any(name.startswith("contributing") for name in root_files),
            has_docs_dir=is_dir("docs", "doc", "documentation"),
            has_examples_dir=is_dir("examples", "example", "samples"),
            has_tests_dir=is_dir("test", "tests", "__tests__", "spec", "specs"),
        )

    async def fetch_ci_status(self, repo_ref: RepoRef) -> CIStatus:
        """Fetch the pass rate of the most recent completed GitHub Actions runs."""
        runs = await self._fetch(
            f"/repos/{repo_ref.owner}/{repo_ref.repo}/actions/runs",
            params={"per_page": 50},
        )

        pass_rate = None
        if runs and isinstance(runs, dict):
            completed = [r for r in runs.get("workflow_runs", []) if r.get("status") == "completed"]
            if completed:
                successful = sum(1 for r in completed if r.get("conclusion") == "success")
                pass_rate = successful / len(completed) * 100

        return CIStatus(recent_runs_pass_rate=pass_rate)

    async def fetch_readme_content(self, repo_ref: RepoRef) -> str | None:
        """Fetch the decoded README content."""
        readme = await self._fetch(f"/repos/{repo_ref.owner}/{repo_ref.repo}/readme")
        if not readme or not isinstance(readme, dict):
            return None

        # README content is base64 encoded
        content = readme.get("content", "")
        if not content:
            return None
        try:
            return base64.b64decode(content).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError):
            logger.debug(f"Undecodable README for {repo_ref.owner}/{repo_ref.repo}")
            return None
