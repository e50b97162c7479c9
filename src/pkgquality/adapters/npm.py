"""npm registry adapter."""

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import quote

import httpx

from pkgquality.adapters.base import BaseAdapter, PackageNotFoundError
from pkgquality.models.schemas import Ecosystem, PackageMetadata

logger = logging.getLogger(__name__)

# "owner/repo" with nothing else: npm's implicit GitHub shorthand
_BARE_SHORTHAND = re.compile(r"^[\w.-]+/[\w.-]+$")

# Scheme rewrites applied to a declared repository URL, first match wins
_URL_PREFIXES = [
    ("ssh://git@", "https://"),
    ("git://", "https://"),
    ("git@github.com:", "https://github.com/"),
    ("http://", "https://"),
    ("github:", "https://github.com/"),
]


def normalize_repository(repository: dict | str | None) -> str | None:
    """Turn an npm `repository` field into a browsable https URL.

    The field is either a string or an object with a `url` key, e.g.
    `{"type": "git", "url": "git+https://github.com/owner/repo.git"}`,
    `git@github.com:owner/repo.git`, `github:owner/repo` or plain `owner/repo`.
    """
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not isinstance(repository, str):
        return None

    url = repository.strip().removeprefix("git+")
    for prefix, replacement in _URL_PREFIXES:
        if url.startswith(prefix):
            url = replacement + url[len(prefix):]
            break
    else:
        if _BARE_SHORTHAND.match(url):
            url = f"https://github.com/{url}"

    url = url.rstrip("/").removesuffix(".git")
    return url or None


def _object(value: object) -> dict:
    return value if isinstance(value, dict) else {}


class NpmAdapter(BaseAdapter):
    """Looks packages up in the public npm registry (https://registry.npmjs.org/{package})."""

    REGISTRY_URL = "https://registry.npmjs.org"

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = 30.0) -> None:
        """Initialize the adapter.

        Args:
            client: Shared httpx client. Without one, each lookup opens its own.
            timeout: Request timeout used when no client is supplied.
        """
        self._client = client
        self._timeout = timeout

    @property
    def ecosystem(self) -> Ecosystem:
        return Ecosystem.NPM

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def get_package_metadata(self, name: str) -> PackageMetadata:
        """Fetch the registry document for `name` (plain or `@scope/pkg`).

        Raises:
            PackageNotFoundError: If the registry answers 404.
            httpx.HTTPError: On any other transport or HTTP failure.
            ValueError: If the response body is not a JSON object.
        """
        url = f"{self.REGISTRY_URL}/{quote(name, safe='@')}"
        logger.debug(f"Fetching npm metadata: {url}")

        async with self._session() as client:
            response = await client.get(url)
        if response.status_code == 404:
            raise PackageNotFoundError(Ecosystem.NPM, name)
        response.raise_for_status()
        doc = response.json()
        if not isinstance(doc, dict):
            raise ValueError(f"registry document for {name!r} is not a JSON object")

        # Top-level document first, then the latest published version
        version = _object(doc.get("dist-tags")).get("latest")
        latest = _object(doc.get("versions")).get(version) if isinstance(version, str) else None
        repository = doc.get("repository") or _object(latest).get("repository")

        return PackageMetadata(
            ecosystem=Ecosystem.NPM,
            name=name,
            repository_url=normalize_repository(repository),
        )
