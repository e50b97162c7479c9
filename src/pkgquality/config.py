"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_HTTP_TIMEOUT = 30.0


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Settings shared by the CLI, the pipeline and logging.

    Attributes:
        github_token: GitHub personal access token (GITHUB_TOKEN).
        log_file: Path of the log file (LOG_FILE). Logs go to stderr if unset.
        log_level: 0 silent, 1 informational, 2 debug (LOG_LEVEL).
        request_timeout: HTTP timeout in seconds (PKGQUALITY_HTTP_TIMEOUT).
    """

    github_token: str | None = None
    log_file: str | None = None
    log_level: int = 0
    request_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the process environment.

        Call after `load_dotenv()` so values from a .env file are visible.
        """
        return cls(
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            log_file=os.environ.get("LOG_FILE") or None,
            log_level=_int_env("LOG_LEVEL", 0),
            request_timeout=_float_env("PKGQUALITY_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )
