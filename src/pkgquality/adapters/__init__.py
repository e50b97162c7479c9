"""Package registry adapters."""

from pkgquality.adapters.base import BaseAdapter, PackageNotFoundError, parse_repo_url
from pkgquality.adapters.npm import NpmAdapter

__all__ = ["BaseAdapter", "NpmAdapter", "PackageNotFoundError", "parse_repo_url"]
