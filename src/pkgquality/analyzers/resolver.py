"""Classification of input URLs and npm-to-GitHub resolution."""

import logging
import re
from urllib.parse import unquote

import httpx

from pkgquality.adapters.base import BaseAdapter, PackageNotFoundError
from pkgquality.errors import InvalidURLTypeError, ResolutionError

logger = logging.getLogger(__name__)

GITHUB_URL = re.compile(r"^https://github\.com/.+")
NPM_URL = re.compile(r"^https://www\.npmjs\.com/package/(?P<name>.+)")


def npm_package_name(url: str) -> str | None:
    """Extract the package name from an npm package page URL.

    Handles scoped names (`@scope/pkg`, also percent-encoded) and drops a
    `/v/<version>` suffix, trailing slashes, query strings and fragments.
    """
    match = NPM_URL.match(url)
    if not match:
        return None

    path = re.split(r"[?#]", match.group("name"), maxsplit=1)[0]
    parts = [part for part in unquote(path).split("/") if part]
    if not parts:
        return None

    if parts[0].startswith("@"):
        if len(parts) < 2:
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0]


class RepositoryResolver:
    """Maps an input URL to the repository URL its metrics are computed on.

    GitHub repository URLs are already canonical and come back unchanged.
    npm package URLs are looked up in the registry and replaced by the
    repository URL the package declares.
    """

    def __init__(self, adapter: BaseAdapter) -> None:
        self.adapter = adapter

    async def resolve(self, url: str) -> str:
        """Resolve `url` to a repository URL.

        Raises:
            InvalidURLTypeError: If the URL is neither GitHub nor npm.
            ResolutionError: If the npm lookup fails or no repository is declared.
        """
        if GITHUB_URL.match(url):
            logger.info(f"GitHub URL detected: {url}")
            return url

        if NPM_URL.match(url):
            logger.info(f"NPM URL detected: {url}")
            return await self._resolve_npm(url)

        raise InvalidURLTypeError(url)

    async def _resolve_npm(self, url: str) -> str:
        name = npm_package_name(url)
        if not name:
            raise ResolutionError(url, "no package name in URL")

        try:
            repo_url = await self.adapter.get_repository_url(name)
        except PackageNotFoundError as e:
            raise ResolutionError(url, str(e)) from e
        except httpx.HTTPError as e:
            raise ResolutionError(url, f"registry lookup failed: {e}") from e
        except ValueError as e:
            # Non-JSON body or a document of the wrong shape
            raise ResolutionError(url, f"unparsable registry response: {e}") from e

        if not repo_url:
            raise ResolutionError(url, f"package '{name}' declares no repository")

        logger.info(f"NPM URL converted to GitHub URL: {repo_url}")
        return repo_url
