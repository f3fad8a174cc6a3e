"""Git-backed blame source and repository helpers.

Shells out to the ``git`` executable through asyncio subprocesses so that
many paths can be blamed at once without blocking the event loop.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from gitreviewer.errors import RepositoryUnavailableError
from gitreviewer.models import AttributionRecord
from gitreviewer.sources.base import (
    BlameParseError,
    BlameSourceError,
    BlameTimeoutError,
    PathNotFoundError,
)

logger = logging.getLogger(__name__)

SOURCE_NAME = "git"
DEFAULT_TIMEOUT = 60.0

# "<sha> <orig-line> <final-line> [<lines-in-group>]"
PORCELAIN_HEADER = re.compile(r"^([0-9a-f]{40}|[0-9a-f]{64}) \d+ \d+(?: \d+)?$")

# Lines not yet committed carry an all-zero sha
UNCOMMITTED_SHA = re.compile(r"^0+$")

_PATH_MISSING_MARKERS = ("no such path", "no such file", "does not exist")
_REPOSITORY_MARKERS = (
    "not a git repository",
    "bad revision",
    "unknown revision",
    "bad object",
    "ambiguous argument",
)


@dataclass
class GitResult:
    """Completed git invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_git(
    args: list[str],
    cwd: Path | str,
    git_binary: str = "git",
    timeout: float | None = DEFAULT_TIMEOUT,
) -> GitResult:
    """Run one git command and capture its output.

    Raises:
        RepositoryUnavailableError: If the git executable cannot be started.
        asyncio.TimeoutError: If the command outlives ``timeout``; the
            process is killed first.
    """
    logger.debug(f"Running {git_binary} {' '.join(args)} in {cwd}")
    try:
        proc = await asyncio.create_subprocess_exec(
            git_binary,
            *args,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        raise RepositoryUnavailableError(
            f"Unable to run {git_binary} in {cwd}: {type(e).__name__}"
        ) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise

    return GitResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def parse_line_porcelain(
    output: str,
    path: str | None = None,
    source_name: str = SOURCE_NAME,
) -> list[AttributionRecord]:
    """Parse ``git blame --line-porcelain`` output.

    Consecutive lines from the same commit collapse into one record whose
    ``line_count`` is the run length. Identity comes from the author
    headers; the timestamp is the committer time, falling back to the
    author time.

    Args:
        output: Raw porcelain output.
        path: Path being blamed, copied onto each record.
        source_name: Name used in parse errors.

    Returns:
        Attribution records in file order.

    Raises:
        BlameParseError: If the output does not look like line porcelain.
    """
    records: list[AttributionRecord] = []
    run: list | None = None  # [sha, name, email, time, count]

    def flush() -> None:
        if run is not None:
            records.append(
                AttributionRecord(
                    contributor_name=run[1],
                    contributor_email=run[2],
                    commit_time=run[3],
                    line_count=run[4],
                    path=path,
                    commit=run[0],
                )
            )

    sha: str | None = None
    headers: dict[str, str] = {}

    for lineno, line in enumerate(output.split("\n"), start=1):
        if line.startswith("\t"):
            if sha is None:
                raise BlameParseError(source_name, f"content before header at line {lineno}")

            if not UNCOMMITTED_SHA.match(sha):
                timestamp = headers.get("committer-time") or headers.get("author-time")
                if timestamp is None or not timestamp.strip().isdigit():
                    raise BlameParseError(source_name, f"missing commit time for {sha[:12]}")

                if run is not None and run[0] == sha:
                    run[4] += 1
                else:
                    flush()
                    run = [
                        sha,
                        headers.get("author", ""),
                        headers.get("author-mail", "").strip().strip("<>"),
                        int(timestamp),
                        1,
                    ]

            sha = None
            headers = {}
            continue

        if not line:
            continue

        if sha is None:
            if not PORCELAIN_HEADER.match(line):
                raise BlameParseError(source_name, f"unexpected header at line {lineno}")
            sha = line.split(" ", 1)[0]
            continue

        key, _, value = line.partition(" ")
        headers[key] = value

    flush()
    return records


def parse_name_status(output: str) -> list[str]:
    """Parse ``git diff --name-status -z`` output into pre-change paths.

    Renames and copies report their source path. Order is preserved and
    duplicates are dropped.
    """
    tokens = output.split("\0")
    paths: list[str] = []
    i = 0
    while i < len(tokens):
        status = tokens[i].strip()
        if not status:
            i += 1
            continue
        if status[0] in ("R", "C"):
            if i + 1 < len(tokens) and tokens[i + 1]:
                paths.append(tokens[i + 1])
            i += 3
        else:
            if i + 1 < len(tokens) and tokens[i + 1]:
                paths.append(tokens[i + 1])
            i += 2
    return list(dict.fromkeys(paths))


class GitBlameSource:
    """BlameSource backed by ``git blame``.

    Attributes:
        repo_path: Working directory of the repository.
        git_binary: git executable to run.
        timeout: Seconds allowed per blame.
    """

    def __init__(
        self,
        repo_path: Path | str = ".",
        git_binary: str = "git",
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.repo_path = Path(repo_path)
        self.git_binary = git_binary
        self.timeout = timeout

    @property
    def source_name(self) -> str:
        return SOURCE_NAME

    async def blame(self, path: str, revision: str) -> list[AttributionRecord]:
        """Blame ``path`` as of ``revision``.

        Raises:
            PathNotFoundError: Path absent at the revision.
            BlameTimeoutError: Blame exceeded ``timeout``.
            BlameParseError: Output was not valid line porcelain.
            BlameSourceError: Any other per-path git failure.
            RepositoryUnavailableError: Revision or repository unusable.
        """
        try:
            result = await run_git(
                ["blame", "--line-porcelain", revision, "--", path],
                cwd=self.repo_path,
                git_binary=self.git_binary,
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise BlameTimeoutError(self.source_name, path, self.timeout) from e

        if not result.ok:
            raise self._classify_failure(result.stderr, path, revision)

        return parse_line_porcelain(result.stdout, path=path, source_name=self.source_name)

    def _classify_failure(
        self,
        stderr: str,
        path: str,
        revision: str,
    ) -> Exception:
        message = stderr.strip() or "git blame failed"
        lowered = message.lower()
        if any(marker in lowered for marker in _PATH_MISSING_MARKERS):
            return PathNotFoundError(self.source_name, path, revision)
        if any(marker in lowered for marker in _REPOSITORY_MARKERS):
            return RepositoryUnavailableError(message, revision=revision)
        return BlameSourceError(self.source_name, message)


class GitRepository:
    """Repository-level git queries used around the attribution engine.

    Attributes:
        path: Working directory of the repository.
        git_binary: git executable to run.
        timeout: Seconds allowed per git command.
    """

    def __init__(
        self,
        path: Path | str = ".",
        git_binary: str = "git",
        timeout: float | None = DEFAULT_TIMEOUT,
    ) -> None:
        self.path = Path(path)
        self.git_binary = git_binary
        self.timeout = timeout

    async def _git(self, *args: str, revision: str | None = None) -> str:
        try:
            result = await run_git(
                list(args),
                cwd=self.path,
                git_binary=self.git_binary,
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise RepositoryUnavailableError(
                f"git {args[0]} timed out after {self.timeout}s", revision=revision
            ) from e

        if not result.ok:
            message = result.stderr.strip() or f"git {args[0]} failed"
            raise RepositoryUnavailableError(message, revision=revision)
        return result.stdout

    def blame_source(self) -> GitBlameSource:
        """GitBlameSource sharing this repository's settings."""
        return GitBlameSource(self.path, git_binary=self.git_binary, timeout=self.timeout)

    async def toplevel(self) -> Path:
        """Absolute path of the repository root."""
        out = await self._git("rev-parse", "--show-toplevel")
        return Path(out.strip())

    async def resolve(self, revision: str) -> str:
        """Full commit sha for ``revision``."""
        out = await self._git("rev-parse", "--verify", f"{revision}^{{commit}}", revision=revision)
        return out.strip()

    async def commit_time(self, revision: str) -> int:
        """Committer time of ``revision`` in epoch seconds."""
        out = await self._git("log", "-1", "--format=%ct", revision, "--", revision=revision)
        value = out.strip()
        if not value.isdigit():
            raise RepositoryUnavailableError(
                f"Unexpected commit time for {revision}: {value!r}", revision=revision
            )
        return int(value)

    async def branch_behind(self, base: str, head: str = "HEAD") -> bool:
        """True when ``head`` was committed before the tip of ``base``."""
        head_time, base_time = await asyncio.gather(
            self.commit_time(head),
            self.commit_time(base),
        )
        return head_time < base_time

    async def changed_paths(self, base: str, head: str = "HEAD") -> list[str]:
        """Paths changed between ``base`` and ``head``.

        Renamed files are reported under their name at ``base``, since that
        is the name blame can find history for.
        """
        out = await self._git("diff", "--name-status", "-z", "-M", base, head, "--", revision=base)
        return parse_name_status(out)

    async def config_value(self, key: str) -> str | None:
        """Value of a git config key, or None when unset."""
        try:
            result = await run_git(
                ["config", "--get", key],
                cwd=self.path,
                git_binary=self.git_binary,
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"git config --get {key} timed out")
            return None
        if not result.ok:
            return None
        return result.stdout.strip() or None


__all__ = [
    "GitBlameSource",
    "GitRepository",
    "GitResult",
    "parse_line_porcelain",
    "parse_name_status",
    "run_git",
]
