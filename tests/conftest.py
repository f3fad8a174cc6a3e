"""Shared pytest fixtures for git-reviewer tests."""

import asyncio
import os
import shutil
import subprocess
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest

from gitreviewer.config import reset_settings
from gitreviewer.models import AttributionRecord
from gitreviewer.sources.base import PathNotFoundError


class FakeBlameSource:
    """In-memory BlameSource.

    ``outcomes`` maps a path to either a list of records or an exception to
    raise. Unknown paths raise PathNotFoundError.
    """

    def __init__(
        self,
        outcomes: dict[str, list[AttributionRecord] | Exception],
        delays: dict[str, float] | None = None,
    ) -> None:
        self.outcomes = outcomes
        self.delays = delays or {}
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def source_name(self) -> str:
        return "fake"

    async def blame(self, path: str, revision: str) -> list[AttributionRecord]:
        self.calls.append((path, revision))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(path, 0))
            if path not in self.outcomes:
                raise PathNotFoundError(self.source_name, path, revision)
            outcome = self.outcomes[path]
            if isinstance(outcome, Exception):
                raise outcome
            return list(outcome)
        finally:
            self.in_flight -= 1


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate every test from the user's config file and env."""
    monkeypatch.setattr("gitreviewer.config.CONFIG_FILE_PATH", tmp_path / "no-config.toml")
    for key in list(os.environ):
        if key.startswith("GIT_REVIEWER_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def record() -> Callable[..., AttributionRecord]:
    """Factory for AttributionRecords with sensible defaults."""

    def _make(
        name: str,
        email: str,
        lines: int = 1,
        when: datetime | str = "2026-06-01T12:00:00+00:00",
        path: str | None = None,
    ) -> AttributionRecord:
        return AttributionRecord(
            contributor_name=name,
            contributor_email=email,
            line_count=lines,
            commit_time=when,
            path=path,
        )

    return _make


@pytest.fixture
def blame_source_factory() -> type[FakeBlameSource]:
    return FakeBlameSource


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for default-window calculations."""
    return datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _git(repo: Path, *args: str, env: dict[str, str] | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        env={**os.environ, **(env or {})},
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> Callable[..., Path]:
    """Build a throwaway repository.

    Returns a ``commit(path, content, name, email, date)`` helper bound to a
    fresh repository on branch ``master``; the repository path is available
    as ``commit.repo``.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/master")
    _git(repo, "config", "user.name", "Fixture")
    _git(repo, "config", "user.email", "fixture@example.com")
    _git(repo, "config", "commit.gpgsign", "false")

    def commit(
        path: str,
        content: str,
        name: str,
        email: str,
        date: str = "2026-06-01T12:00:00+00:00",
    ) -> None:
        target = repo / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
        _git(repo, "add", path)
        env = {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_AUTHOR_DATE": date,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_COMMITTER_DATE": date,
        }
        _git(repo, "commit", "-q", "-m", f"update {path}", env=env)

    commit.repo = repo  # type: ignore[attr-defined]
    commit.git = lambda *args: _git(repo, *args)  # type: ignore[attr-defined]
    return commit
