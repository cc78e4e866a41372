"""Post reminder comments on stale open GitHub issues."""

__version__ = "0.1.0"
