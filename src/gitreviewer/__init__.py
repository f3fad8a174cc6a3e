"""git-reviewer: suggest code reviewers from line ownership of changed files."""

__version__ = "0.1.0"
