"""Blame sources: providers of per-line authorship evidence."""

from gitreviewer.sources.base import (
    BlameParseError,
    BlameSource,
    BlameSourceError,
    BlameTimeoutError,
    PathNotFoundError,
)
from gitreviewer.sources.git import GitBlameSource, GitRepository

__all__ = [
    "BlameSource",
    "BlameSourceError",
    "BlameParseError",
    "BlameTimeoutError",
    "PathNotFoundError",
    "GitBlameSource",
    "GitRepository",
]
