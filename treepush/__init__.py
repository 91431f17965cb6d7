"""Upload a local directory tree to GitHub as a single commit."""

__version__ = "0.1.0"
