"""Package quality scoring for GitHub repositories and npm packages."""

__version__ = "0.1.0"
