"""Abstract base class for package registry adapters."""

import re
from abc import ABC, abstractmethod

from pkgquality.models.schemas import (
    Ecosystem,
    PackageMetadata,
    Platform,
    RepoRef,
)


class BaseAdapter(ABC):
    """Base class for package registry adapters.

    An adapter is the lookup service that maps a package name to the
    metadata its registry publishes, including the source repository.
    """

    @property
    @abstractmethod
    def ecosystem(self) -> Ecosystem:
        """Return the ecosystem this adapter handles."""
        ...

    @abstractmethod
    async def get_package_metadata(self, name: str) -> PackageMetadata:
        """Fetch metadata for a single package.

        Args:
            name: Package name.

        Returns:
            PackageMetadata with normalized package information.

        Raises:
            PackageNotFoundError: If the package doesn't exist.
        """
        ...

    async def get_repository_url(self, name: str) -> str | None:
        """Return the source repository URL a package declares, if any."""
        metadata = await self.get_package_metadata(name)
        return metadata.repository_url


_HOSTS = {
    "github.com": Platform.GITHUB,
    "gitlab.com": Platform.GITLAB,
    "bitbucket.org": Platform.BITBUCKET,
}

_HOST = r"(?P<host>github\.com|gitlab\.com|bitbucket\.org)"

# https://github.com/owner/repo[.git][/anything], also git:// and scheme-less
_WEB_URL = re.compile(rf"^(?:https?://|git://)?(?:www\.)?{_HOST}/(?P<owner>[^/\s]+)/(?P<repo>[^/\s#?]+)(?:[/#?].*)?$")
# git@github.com:owner/repo[.git]
_SSH_URL = re.compile(rf"^git@{_HOST}:(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+)$")


def parse_repo_url(url: str) -> RepoRef | None:
    """Parse a repository URL into a RepoRef.

    Supports GitHub, GitLab, and Bitbucket web, git:// and SSH URLs. Any path after
    the repository name (`/tree/main/docs`, `/issues`) is ignored.

    Returns:
        RepoRef if the URL names an owner and a repository, None otherwise.
    """
    if not url:
        return None

    match = _WEB_URL.match(url) or _SSH_URL.match(url)
    if match is None:
        return None

    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        return None

    return RepoRef(platform=_HOSTS[match.group("host")], owner=match.group("owner"), repo=repo)


class PackageNotFoundError(Exception):
    """Raised when a package cannot be found."""

    def __init__(self, ecosystem: Ecosystem, name: str) -> None:
        self.ecosystem = ecosystem
        self.name = name
        super().__init__(f"Package '{name}' not found in {ecosystem.value}")
