"""Tests for the FastMCP server tool."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from gitreviewer.errors import ConfigurationError, RepositoryUnavailableError
from gitreviewer.models import RankedStats, Stat
from gitreviewer.reviewer import ReviewSuggestion
from gitreviewer.server import suggest_reviewers


@pytest.fixture
def suggestion() -> ReviewSuggestion:
    return ReviewSuggestion(
        base="main",
        files=["src/app.py"],
        ranking=RankedStats(
            stats=[
                Stat(reviewer="Ada <ada@x.com>", score=0.6, lines=6),
                Stat(reviewer="Bob <bob@x.com>", score=0.4, lines=4),
            ],
            top_n=2,
            since=datetime(2026, 4, 18, tzinfo=timezone.utc),
            total_lines=10,
            contributors=2,
        ),
    )


class TestSuggestReviewersTool:
    """Tests for the suggest_reviewers MCP tool."""

    async def test_success(self, suggestion: ReviewSuggestion) -> None:
        """Tool returns one line per reviewer plus verbose totals."""
        with patch("gitreviewer.server.run_suggestion", AsyncMock(return_value=suggestion)):
            result = await suggest_reviewers.fn(repo_path="/work/repo", since="2026-01-01")

        assert "   60.0%\tAda <ada@x.com>" in result
        assert "   40.0%\tBob <bob@x.com>" in result
        assert "10 line(s) by 2 contributor(s)" in result
        assert "changed files" not in result

    async def test_show_files(self, suggestion: ReviewSuggestion) -> None:
        with patch("gitreviewer.server.run_suggestion", AsyncMock(return_value=suggestion)):
            result = await suggest_reviewers.fn(show_files=True)

        assert result.startswith("Reviewers across the following changed files:\n  src/app.py\n")

    async def test_arguments_forwarded(self, suggestion: ReviewSuggestion) -> None:
        mock = AsyncMock(return_value=suggestion)
        with patch("gitreviewer.server.run_suggestion", mock):
            await suggest_reviewers.fn(
                repo_path="/work/repo",
                top_n=2,
                base="main",
                force=True,
                ignore_extensions="png, lock",
                only_paths="src",
            )

        kwargs = mock.call_args.kwargs
        assert kwargs["repo_path"] == "/work/repo"
        assert kwargs["top_n"] == 2
        assert kwargs["base"] == "main"
        assert kwargs["force"] is True
        assert kwargs["ignored_extensions"] == ["png", "lock"]
        assert kwargs["only_extensions"] == []
        assert kwargs["only_paths"] == ["src"]

    async def test_reviewer_error_returns_message(self) -> None:
        error = ConfigurationError("Invalid since date 'soon': expected format YYYY-MM-DD")
        with patch("gitreviewer.server.run_suggestion", AsyncMock(side_effect=error)):
            result = await suggest_reviewers.fn(since="soon")

        assert result.startswith("Problem with input: Invalid since date 'soon'")

    async def test_repository_error_returns_message(self) -> None:
        error = RepositoryUnavailableError("bad revision 'nope'", revision="nope")
        with patch("gitreviewer.server.run_suggestion", AsyncMock(side_effect=error)):
            result = await suggest_reviewers.fn(base="nope")

        assert result == "Repository problem: bad revision 'nope'"

    async def test_unexpected_error_returns_message(self) -> None:
        with patch(
            "gitreviewer.server.run_suggestion",
            AsyncMock(side_effect=RuntimeError("kaboom")),
        ):
            result = await suggest_reviewers.fn()

        assert result == "Error suggesting reviewers: kaboom"
